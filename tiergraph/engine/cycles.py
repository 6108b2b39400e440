"""Contradictory cycle detection.

A set of relations is contradictory when the derived "smaller-than" graph
holds a directed cycle that uses at least one strict edge: following the
cycle from any of its members proves ``x < x``. Cycles made only of
non-strict and equality edges are satisfiable (every member equal).
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .graph import DerivedEdges, Entity, Relation, derive_edges
from .scc import component_index, extract_sccs

logger = logging.getLogger(__name__)

# (neighbor, edge_is_strict)
Step = tuple[str, bool]


class Color(Enum):
    """Traversal state of an entity during the depth-first search."""
    WHITE = "unvisited"
    GRAY = "on_path"
    BLACK = "done"


@dataclass(frozen=True)
class ContradictionReport:
    """A cycle proving the relations cannot all hold.

    ``entity_ids`` lists the cycle in traversal order with the first entity
    repeated at the end. ``strict_steps[i]`` tells whether the edge from
    ``entity_ids[i]`` to ``entity_ids[i + 1]`` is strict.
    """
    entity_ids: tuple[str, ...]
    labels: tuple[str, ...]
    strict_steps: tuple[bool, ...]

    @property
    def strict_index(self) -> int:
        """Position of the first strict edge in the cycle."""
        return self.strict_steps.index(True)

    def chain(self) -> str:
        """Render the cycle as ``A ≤ B < C ≤ A``."""
        parts = [self.labels[0]]
        for label, strict in zip(self.labels[1:], self.strict_steps):
            parts.append("<" if strict else "≤")
            parts.append(label)
        return " ".join(parts)

    def message(self) -> str:
        return (
            f"Contradictory cycle detected: {self.chain()} "
            "(with at least one strict < or >). This creates a logical impossibility."
        )


def _consistency_adjacency(
    entity_ids: Sequence[str],
    derived: DerivedEdges,
) -> dict[str, list[Step]]:
    """Strict neighbors first, then non-strict, each in relation order."""
    adj: dict[str, list[Step]] = {eid: [] for eid in entity_ids}
    for edges, strict in ((derived.strict, True), (derived.non_strict, False)):
        for source, target in edges:
            if source in adj and target in adj:
                adj[source].append((target, strict))
    return adj


def _make_report(
    cycle: list[str],
    strict_steps: list[bool],
    labels: dict[str, str],
) -> ContradictionReport:
    return ContradictionReport(
        entity_ids=tuple(cycle),
        labels=tuple(labels.get(eid, "Unknown") for eid in cycle),
        strict_steps=tuple(strict_steps),
    )


def _search_from(
    root: str,
    adj: dict[str, list[Step]],
    color: dict[str, Color],
    labels: dict[str, str],
) -> ContradictionReport | None:
    """Iterative three-color DFS from ``root``.

    ``entered_strict[i]`` records whether the edge that put ``path[i]`` on the
    path was strict, so the edges inside a closed cycle are exactly
    ``entered_strict[start + 1:]`` plus the closing edge.
    """
    path = [root]
    entered_strict = [False]
    position = {root: 0}
    color[root] = Color.GRAY
    work: list[tuple[str, int]] = [(root, 0)]

    while work:
        node, pos = work[-1]
        neighbors = adj[node]

        if pos < len(neighbors):
            work[-1] = (node, pos + 1)
            nxt, strict = neighbors[pos]
            state = color[nxt]

            if state is Color.GRAY:
                start = position[nxt]
                steps = entered_strict[start + 1:] + [strict]
                if any(steps):
                    return _make_report(path[start:] + [nxt], steps, labels)
            elif state is Color.WHITE:
                color[nxt] = Color.GRAY
                position[nxt] = len(path)
                path.append(nxt)
                entered_strict.append(strict)
                work.append((nxt, 0))
            continue

        work.pop()
        color[node] = Color.BLACK
        path.pop()
        entered_strict.pop()
        del position[node]

    return None


def _path_within(
    start: str,
    goal: str,
    adj: dict[str, list[Step]],
    members: set[str],
) -> tuple[list[str], list[bool]]:
    """Breadth-first path from ``start`` to ``goal`` staying inside ``members``."""
    if start == goal:
        return [start], []

    parent: dict[str, tuple[str, bool]] = {}
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for nxt, strict in adj[current]:
            if nxt in seen or nxt not in members:
                continue
            seen.add(nxt)
            parent[nxt] = (current, strict)
            if nxt == goal:
                queue.clear()
                break
            queue.append(nxt)

    nodes = [goal]
    steps: list[bool] = []
    while nodes[-1] != start:
        prev, strict = parent[nodes[-1]]
        nodes.append(prev)
        steps.append(strict)
    nodes.reverse()
    steps.reverse()
    return nodes, steps


def _strict_edge_in_component(
    adj: dict[str, list[Step]],
    derived: DerivedEdges,
    labels: dict[str, str],
) -> ContradictionReport | None:
    """Report any strict edge whose endpoints are mutually reachable.

    Catches cycles a single DFS pass skips when a strict edge points into an
    entity that was already finished through a different branch.
    """
    edges = [(src, dst) for src, steps in adj.items() for dst, _ in steps]
    components = extract_sccs(adj.keys(), edges)
    comp_of = component_index(components)

    for source, target in derived.strict:
        if source not in comp_of or target not in comp_of:
            continue
        if comp_of[source] != comp_of[target]:
            continue
        members = set(components[comp_of[source]])
        back, back_steps = _path_within(target, source, adj, members)
        return _make_report([source] + back, [True] + back_steps, labels)

    return None


def find_contradiction(
    entities: Sequence[Entity],
    relations: Sequence[Relation],
) -> ContradictionReport | None:
    """Find a directed cycle that combines a strict edge with any other edges.

    Roots are tried in entity order and neighbors in relation order (strict
    edges first), so the same snapshot always yields the same report. Only
    the first contradiction is returned.

    Args:
        entities: Entity set of the snapshot
        relations: Relation set; endpoints outside ``entities`` are ignored

    Returns:
        A ContradictionReport, or None when the relations are satisfiable
    """
    labels = {e.entity_id: e.display for e in entities}
    derived = derive_edges(relations)
    adj = _consistency_adjacency([e.entity_id for e in entities], derived)

    color = {eid: Color.WHITE for eid in adj}
    for root in adj:
        if color[root] is Color.WHITE:
            report = _search_from(root, adj, color, labels)
            if report is not None:
                logger.debug("Contradiction found by DFS: %s", report.chain())
                return report

    report = _strict_edge_in_component(adj, derived, labels)
    if report is not None:
        logger.debug("Contradiction found by component sweep: %s", report.chain())
    return report
