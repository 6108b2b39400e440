"""Strongly connected components (Tarjan's algorithm).

Used on the equality subgraph to collapse mutually equal entities into a
single ranking unit, and on the full consistency graph by the cycle checker.
"""

from __future__ import annotations

from typing import Iterable

from .graph import Edge, adjacency


def extract_sccs(entity_ids: Iterable[str], edges: Iterable[Edge]) -> list[list[str]]:
    """Compute the strongly connected components of a directed graph.

    Iterative Tarjan: each work-stack frame is ``(node, next_neighbor_pos)``
    so recursion depth never depends on path length. Edges are not assumed
    to be symmetric, and edges touching unknown ids are dropped.

    Args:
        entity_ids: Graph vertices; every one lands in exactly one component
        edges: Directed ``(source, target)`` pairs

    Returns:
        Components in completion order. Members are listed in stack pop order.
    """
    adj = adjacency(entity_ids, edges)

    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    on_stack: set[str] = set()
    stack: list[str] = []
    components: list[list[str]] = []
    counter = 0

    for root in adj:
        if root in index:
            continue

        work: list[tuple[str, int]] = [(root, 0)]
        while work:
            node, pos = work[-1]
            if pos == 0 and node not in index:
                index[node] = lowlink[node] = counter
                counter += 1
                stack.append(node)
                on_stack.add(node)

            neighbors = adj[node]
            if pos < len(neighbors):
                work[-1] = (node, pos + 1)
                nxt = neighbors[pos]
                if nxt not in index:
                    work.append((nxt, 0))
                elif nxt in on_stack:
                    lowlink[node] = min(lowlink[node], index[nxt])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                component = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(component)

    return components


def component_index(components: Iterable[list[str]]) -> dict[str, int]:
    """Map each entity id to the position of its component."""
    return {member: idx for idx, comp in enumerate(components) for member in comp}
