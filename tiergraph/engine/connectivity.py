"""Undirected connectivity check over entities and relations."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Sequence

from .graph import Entity, Relation


def _undirected_adjacency(
    entity_ids: Sequence[str],
    relations: Iterable[Relation],
) -> dict[str, list[str]]:
    adj: dict[str, list[str]] = {eid: [] for eid in entity_ids}
    for relation in relations:
        if relation.source in adj and relation.target in adj:
            adj[relation.source].append(relation.target)
            adj[relation.target].append(relation.source)
    return adj


def _bfs(start: str, adj: dict[str, list[str]], visited: set[str]) -> list[str]:
    order = [start]
    visited.add(start)
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in adj[current]:
            if neighbor not in visited:
                visited.add(neighbor)
                order.append(neighbor)
                queue.append(neighbor)
    return order


def is_connected(entities: Sequence[Entity], relations: Iterable[Relation]) -> bool:
    """Return True if every entity is reachable from every other one.

    Relation direction and kind are ignored. Graphs with 0 or 1 entities
    are trivially connected.
    """
    if len(entities) <= 1:
        return True

    entity_ids = [e.entity_id for e in entities]
    adj = _undirected_adjacency(entity_ids, relations)
    visited: set[str] = set()
    _bfs(entity_ids[0], adj, visited)
    return len(visited) == len(adj)


def connected_components(
    entities: Sequence[Entity],
    relations: Iterable[Relation],
) -> list[list[str]]:
    """Group entity ids into undirected components, in entity order."""
    entity_ids = [e.entity_id for e in entities]
    adj = _undirected_adjacency(entity_ids, relations)
    visited: set[str] = set()
    components = []
    for eid in entity_ids:
        if eid not in visited:
            components.append(_bfs(eid, adj, visited))
    return components
