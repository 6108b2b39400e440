"""Graph validation: structural, connectivity and consistency checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .connectivity import connected_components, is_connected
from .cycles import ContradictionReport, find_contradiction
from .graph import GraphSnapshot

logger = logging.getLogger(__name__)

DISCONNECTED_MESSAGE = (
    "Not all nodes are connected. Every node must be reachable from every other node."
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one snapshot. ``errors`` is empty iff ``valid``."""
    valid: bool
    errors: tuple[str, ...] = ()
    contradiction: ContradictionReport | None = field(default=None, compare=False)
    disconnected_groups: tuple[tuple[str, ...], ...] = field(default=(), compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def _structural_errors(snapshot: GraphSnapshot) -> list[str]:
    errors = []
    for relation, missing in snapshot.dangling_relations():
        name = relation.relation_id or relation.describe()
        errors.append(f"Relation {name} references unknown entity '{missing}'.")
    return errors


def _disconnection_error(snapshot: GraphSnapshot) -> tuple[str, tuple[tuple[str, ...], ...]]:
    labels = snapshot.labels()
    components = connected_components(snapshot.entities, snapshot.relations)
    groups = tuple(tuple(labels[eid] for eid in comp) for comp in components)
    rendered = ", ".join("[" + ", ".join(group) + "]" for group in groups)
    return f"{DISCONNECTED_MESSAGE} Disconnected groups: {rendered}.", groups


def validate_snapshot(snapshot: GraphSnapshot) -> ValidationResult:
    """Run every check and collect human-readable diagnostics.

    Relations that reference unknown entities are reported as structural
    errors; the connectivity and cycle checks then ignore them.
    """
    errors = _structural_errors(snapshot)

    groups: tuple[tuple[str, ...], ...] = ()
    if len(snapshot) > 1 and not is_connected(snapshot.entities, snapshot.relations):
        message, groups = _disconnection_error(snapshot)
        errors.append(message)

    contradiction = find_contradiction(snapshot.entities, snapshot.relations)
    if contradiction is not None:
        errors.append(contradiction.message())

    logger.debug(
        "Validated %d entities / %d relations: %d error(s)",
        len(snapshot.entities), len(snapshot.relations), len(errors),
    )
    return ValidationResult(
        valid=not errors,
        errors=tuple(errors),
        contradiction=contradiction,
        disconnected_groups=groups,
    )
