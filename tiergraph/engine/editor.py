"""Mutable graph editing model.

Holds the entities placed on the canvas, a shelf (library) of entities not
yet placed, and the relations between canvas entities. Every edit is plain
bookkeeping; ``snapshot()`` hands the engine an immutable copy.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace
from typing import Any, Iterable, Iterator

from .graph import Entity, GraphSnapshot, Relation, RelationKind

logger = logging.getLogger(__name__)

NODE_COLORS = [
    "#e74c3c",
    "#3498db",
    "#2ecc71",
    "#9b59b6",
    "#f39c12",
    "#1abc9c",
    "#e91e63",
    "#00bcd4",
]

# Canvas geometry keys kept in Entity.attrs but reset when an entity is shelved
_POSITION_KEYS = ("x", "y")


def entity_to_node(entity: Entity, on_shelf: bool = False) -> dict[str, Any]:
    """Serialize an entity into the editor's node dictionary."""
    node: dict[str, Any] = dict(entity.attrs)
    node.update({"id": entity.entity_id, "label": entity.label, "color": entity.color})
    if entity.image_url:
        node["imageUrl"] = entity.image_url
    if on_shelf:
        node["isInToolbar"] = True
    return node


def relation_to_connection(relation: Relation) -> dict[str, str]:
    return {
        "id": relation.relation_id,
        "fromNodeId": relation.source,
        "toNodeId": relation.target,
        "relationship": relation.kind.value,
    }


class GraphModel:
    """Editable collection of entities, shelf entities and relations."""

    def __init__(
        self,
        entities: Iterable[Entity] = (),
        relations: Iterable[Relation] = (),
        shelf: Iterable[Entity] = (),
    ):
        self.entities: list[Entity] = list(entities)
        self.relations: list[Relation] = list(relations)
        self.shelf: list[Entity] = list(shelf)
        # Resume numbering after whatever was loaded
        self._counter = itertools.count(len(self.entities) + len(self.shelf) + 1)
        self._relation_counter = itertools.count(len(self.relations) + 1)

    # ── Entities ──────────────────────────────────────────────────────

    def _next_id(self, prefix: str, counter: Iterator[int] | None = None) -> tuple[str, int]:
        counter = counter or self._counter
        taken = {e.entity_id for e in self.entities}
        taken.update(e.entity_id for e in self.shelf)
        taken.update(r.relation_id for r in self.relations)
        while True:
            n = next(counter)
            candidate = f"{prefix}-{n}"
            if candidate not in taken:
                return candidate, n

    def _find(self, entity_id: str) -> Entity | None:
        return next((e for e in self.entities if e.entity_id == entity_id), None)

    def get_entity(self, entity_id: str) -> Entity:
        entity = self._find(entity_id)
        if entity is None:
            raise KeyError(f"Unknown entity: {entity_id}")
        return entity

    def add_entity(
        self,
        label: str | None = None,
        color: str | None = None,
        image_url: str | None = None,
        **attrs: Any,
    ) -> Entity:
        """Place a new entity on the canvas.

        Args:
            label: Display label (defaults to ``Node <n>``)
            color: Display color (defaults to the next palette color)
            image_url: Optional image shown with the entity
            **attrs: Extra presentation fields kept verbatim

        Returns:
            The created entity
        """
        entity_id, n = self._next_id("node")
        entity = Entity(
            entity_id=entity_id,
            label=label if label is not None else f"Node {n}",
            color=color or NODE_COLORS[(n - 1) % len(NODE_COLORS)],
            image_url=image_url,
            attrs=dict(attrs),
        )
        self.entities.append(entity)
        return entity

    def remove_entity(self, entity_id: str) -> Entity:
        """Remove an entity and its relations; it returns to the shelf."""
        return self.shelve_entity(entity_id)

    def shelve_entity(self, entity_id: str) -> Entity:
        """Move a canvas entity to the shelf under a fresh id.

        Every relation touching the entity is dropped.

        Returns:
            The shelf copy of the entity
        """
        entity = self.get_entity(entity_id)
        self.entities = [e for e in self.entities if e.entity_id != entity_id]
        dropped = [r for r in self.relations if entity_id in (r.source, r.target)]
        self.relations = [r for r in self.relations if entity_id not in (r.source, r.target)]
        if dropped:
            logger.debug("Dropped %d relation(s) touching %s", len(dropped), entity_id)

        shelf_id, _ = self._next_id("toolbar")
        attrs = {k: v for k, v in entity.attrs.items() if k not in _POSITION_KEYS}
        shelved = replace(entity, entity_id=shelf_id, attrs=attrs)
        self.shelf.append(shelved)
        return shelved

    def place_entity(self, shelf_id: str, **attrs: Any) -> Entity:
        """Move a shelf entity onto the canvas under a fresh id."""
        shelved = next((e for e in self.shelf if e.entity_id == shelf_id), None)
        if shelved is None:
            raise KeyError(f"Unknown shelf entity: {shelf_id}")
        self.shelf = [e for e in self.shelf if e.entity_id != shelf_id]

        entity_id, _ = self._next_id("node")
        placed = replace(shelved, entity_id=entity_id, attrs={**shelved.attrs, **attrs})
        self.entities.append(placed)
        return placed

    def add_to_shelf(self, label: str, image_url: str | None = None) -> Entity:
        shelf_id, n = self._next_id("toolbar")
        entity = Entity(
            entity_id=shelf_id,
            label=label,
            color=NODE_COLORS[(n - 1) % len(NODE_COLORS)],
            image_url=image_url,
        )
        self.shelf.append(entity)
        return entity

    def replace_shelf(self, items: Iterable[tuple[str, str | None]]) -> list[Entity]:
        """Replace the shelf with freshly created ``(label, image_url)`` items."""
        self.shelf = []
        return [self.add_to_shelf(label, image_url) for label, image_url in items]

    def clear_shelf(self) -> None:
        self.shelf = []

    # ── Relations ─────────────────────────────────────────────────────

    def add_relation(self, source: str, target: str, kind: RelationKind | str) -> Relation:
        """Relate two canvas entities: ``source <kind> target``.

        A pair holds at most one relation. If the two entities are already
        related (in either direction) that relation is rewritten to
        ``source <kind> target`` and keeps its id.

        Raises:
            KeyError: If either endpoint is not on the canvas
            ValueError: If both endpoints are the same entity
        """
        if isinstance(kind, str):
            kind = RelationKind.parse(kind)
        self.get_entity(source)
        self.get_entity(target)
        if source == target:
            raise ValueError(f"Cannot relate entity {source} to itself")

        existing = self.find_relation(source, target)
        if existing is not None:
            updated = replace(existing, source=source, target=target, kind=kind)
            self._replace_relation(existing, updated)
            logger.debug("Updated %s to %s", updated.relation_id, updated.describe())
            return updated

        relation_id, _ = self._next_id("conn", self._relation_counter)
        relation = Relation(source=source, target=target, kind=kind, relation_id=relation_id)
        self.relations.append(relation)
        return relation

    def set_relation_kind(self, relation_id: str, kind: RelationKind | str) -> Relation:
        """Change the kind of an existing relation, keeping its endpoints.

        Raises:
            KeyError: If no relation has this id
        """
        if isinstance(kind, str):
            kind = RelationKind.parse(kind)
        current = next((r for r in self.relations if r.relation_id == relation_id), None)
        if current is None:
            raise KeyError(f"Unknown relation: {relation_id}")
        updated = replace(current, kind=kind)
        self._replace_relation(current, updated)
        return updated

    def _replace_relation(self, old: Relation, new: Relation) -> None:
        self.relations = [new if r is old else r for r in self.relations]

    def find_relation(self, first: str, second: str) -> Relation | None:
        """The relation joining two entities in either direction, if any."""
        return next(
            (
                r for r in self.relations
                if (r.source, r.target) in ((first, second), (second, first))
            ),
            None,
        )

    def remove_relation(self, relation_id: str) -> None:
        before = len(self.relations)
        self.relations = [r for r in self.relations if r.relation_id != relation_id]
        if len(self.relations) == before:
            raise KeyError(f"Unknown relation: {relation_id}")

    def are_connected(self, first: str, second: str) -> bool:
        """True if any relation joins the two entities, in either direction."""
        return self.find_relation(first, second) is not None

    def relation_summaries(self) -> list[tuple[str, str, str]]:
        """``(from_label, symbol, to_label)`` for every relation."""
        labels = {e.entity_id: e.label for e in self.entities}
        return [
            (labels.get(r.source, "Unknown"), r.kind.symbol, labels.get(r.target, "Unknown"))
            for r in self.relations
        ]

    # ── Whole graph ───────────────────────────────────────────────────

    def clear(self) -> None:
        """Move every canvas entity back to the shelf and drop all relations."""
        for entity in list(self.entities):
            self.shelve_entity(entity.entity_id)
        self.relations = []

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot.build(self.entities, self.relations)

    def to_state(self) -> dict[str, Any]:
        """Serialize into the ``{nodes, connections, toolbarNodes}`` document."""
        return {
            "nodes": [entity_to_node(e) for e in self.entities],
            "connections": [relation_to_connection(r) for r in self.relations],
            "toolbarNodes": [entity_to_node(e, on_shelf=True) for e in self.shelf],
        }
