"""Rank condensation and tier leveling.

Collapses equal entities into components, orders the components by the
greater-than relation and peels them off in Kahn frontiers, one tier per
frontier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from .graph import Edge, Entity, GraphSnapshot, Relation, derive_edges
from .scc import component_index, extract_sccs
from .validation import validate_snapshot

logger = logging.getLogger(__name__)


class RankErrorKind(Enum):
    """Why a ranking could not be produced."""
    EMPTY = "empty"
    INVALID_GRAPH = "invalid_graph"


class RankingError(Exception):
    """Ranking refused because of the input (nothing to rank, invalid graph)."""

    def __init__(self, reason: RankErrorKind, message: str, errors: Sequence[str] = ()):
        super().__init__(message)
        self.reason = reason
        self.errors = tuple(errors)


class InternalConsistencyError(RuntimeError):
    """The condensed graph kept a cycle after the graph passed validation."""


@dataclass
class CondensedGraph:
    """DAG whose nodes are components, edges run from higher to lower rank."""
    components: list[list[str]]
    successors: list[list[int]] = field(default_factory=list)

    def in_degrees(self) -> list[int]:
        indeg = [0] * len(self.components)
        for targets in self.successors:
            for target in targets:
                indeg[target] += 1
        return indeg


def condense(components: list[list[str]], greater_than: Iterable[Edge]) -> CondensedGraph:
    """Build the component graph from greater-than edges.

    Edges inside one component are dropped and parallel edges collapse, so
    each condensed edge contributes exactly one in-degree.
    """
    comp_of = component_index(components)
    # dicts as insertion-ordered sets
    succ: list[dict[int, None]] = [{} for _ in components]
    for higher, lower in greater_than:
        if higher not in comp_of or lower not in comp_of:
            continue
        src, dst = comp_of[higher], comp_of[lower]
        if src != dst:
            succ[src][dst] = None
    return CondensedGraph(components=components, successors=[list(s) for s in succ])


def level(condensed: CondensedGraph) -> list[list[int]]:
    """Kahn's algorithm, emitting the whole zero in-degree frontier per tier.

    Raises:
        InternalConsistencyError: If some components are never released
    """
    indeg = condensed.in_degrees()
    frontier = [idx for idx, deg in enumerate(indeg) if deg == 0]
    tiers: list[list[int]] = []
    emitted = 0

    while frontier:
        tiers.append(frontier)
        emitted += len(frontier)
        released = []
        for comp in frontier:
            for target in condensed.successors[comp]:
                indeg[target] -= 1
                if indeg[target] == 0:
                    released.append(target)
        frontier = released

    if emitted != len(condensed.components):
        stuck = [condensed.components[idx] for idx, deg in enumerate(indeg) if deg > 0]
        raise InternalConsistencyError(
            f"Condensed rank graph is cyclic after validation; unreleased components: {stuck}"
        )
    return tiers


def rank_tiers(entities: Sequence[Entity], relations: Sequence[Relation]) -> list[list[str]]:
    """Order entities into tiers, highest rank first.

    Args:
        entities: Entity set of the snapshot
        relations: Relation set of the snapshot

    Returns:
        Tiers of entity ids. Every entity appears in exactly one tier.

    Raises:
        RankingError: Empty input or a graph that fails validation
        InternalConsistencyError: The leveling met a cycle validation missed
    """
    if not entities:
        raise RankingError(RankErrorKind.EMPTY, "No nodes to rank")

    snapshot = GraphSnapshot.build(entities, relations)
    validation = validate_snapshot(snapshot)
    if not validation.valid:
        raise RankingError(
            RankErrorKind.INVALID_GRAPH,
            "Graph must be valid before generating ranking. Fix validation errors first.",
            validation.errors,
        )

    derived = derive_edges(snapshot.relations)
    components = extract_sccs(snapshot.entity_ids, derived.equal_to)
    condensed = condense(components, derived.greater_than)
    levels = level(condensed)

    tiers = [[eid for comp in tier for eid in components[comp]] for tier in levels]
    logger.debug(
        "Ranked %d entities into %d tier(s) from %d component(s)",
        len(snapshot.entities), len(tiers), len(components),
    )
    return tiers
