"""Engine facade: the only entry point collaborators call.

``validate`` answers whether the stated relations can all hold; ``rank``
turns a valid graph into ordered tiers of entity labels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from .graph import Entity, GraphSnapshot, Relation
from .leveler import RankErrorKind, RankingError, rank_tiers
from .validation import ValidationResult, validate_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankResult:
    """Ranking outcome. On success ``tiers[0]`` is the highest-ranked group."""
    success: bool
    tiers: tuple[tuple[str, ...], ...] | None = None
    tier_ids: tuple[tuple[str, ...], ...] | None = None
    error: str | None = None
    reason: RankErrorKind | None = None
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success}
        if self.tiers is not None:
            result["tiers"] = [list(tier) for tier in self.tiers]
        if self.error is not None:
            result["error"] = self.error
        return result


class RankingEngine:
    """Stateless consistency checker and ranker over graph snapshots."""

    def validate(self, snapshot: GraphSnapshot) -> ValidationResult:
        """Check structure, connectivity and consistency of a snapshot."""
        return validate_snapshot(snapshot)

    def rank(self, snapshot: GraphSnapshot) -> RankResult:
        """Rank a snapshot into tiers of labels.

        Input problems come back as a failed RankResult. An
        InternalConsistencyError from the leveler is a defect and propagates.
        """
        try:
            tiers = rank_tiers(snapshot.entities, snapshot.relations)
        except RankingError as e:
            logger.debug("Ranking refused (%s): %s", e.reason.value, e)
            return RankResult(success=False, error=str(e), reason=e.reason, errors=e.errors)

        labels = snapshot.labels()
        return RankResult(
            success=True,
            tiers=tuple(tuple(labels[eid] for eid in tier) for tier in tiers),
            tier_ids=tuple(tuple(tier) for tier in tiers),
        )


_ENGINE = RankingEngine()


def validate(entities: Iterable[Entity], relations: Iterable[Relation] = ()) -> ValidationResult:
    """Validate an entity/relation collection without building a snapshot first."""
    return _ENGINE.validate(GraphSnapshot.build(entities, relations))


def rank(entities: Iterable[Entity], relations: Iterable[Relation] = ()) -> RankResult:
    """Rank an entity/relation collection without building a snapshot first."""
    return _ENGINE.rank(GraphSnapshot.build(entities, relations))
