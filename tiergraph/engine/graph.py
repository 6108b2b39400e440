"""Graph substrate for the consistency and ranking engine.

Defines entities, typed relations, immutable graph snapshots and the single
place where relation semantics are turned into directed edges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable


class RelationKind(Enum):
    """Ordering relation between two entities."""
    EQUALS = "equals"
    GREATER = "greater"
    GREATER_OR_EQUALS = "greater_or_equals"
    LESS = "less"
    LESS_OR_EQUALS = "less_or_equals"

    @property
    def symbol(self) -> str:
        return RELATION_SYMBOLS[self]

    @property
    def display_name(self) -> str:
        return RELATION_LABELS[self]

    @property
    def is_strict(self) -> bool:
        return self in (RelationKind.GREATER, RelationKind.LESS)

    @classmethod
    def parse(cls, value: str) -> RelationKind:
        """Resolve a wire value (``greater``) or symbol (``>``, ``>=``).

        Raises:
            ValueError: If the value names no relation kind
        """
        text = value.strip().lower()
        for kind in cls:
            if text == kind.value:
                return kind
        if text in _SYMBOL_ALIASES:
            return _SYMBOL_ALIASES[text]
        raise ValueError(f"Unknown relation kind: {value!r}")


RELATION_SYMBOLS: dict[RelationKind, str] = {
    RelationKind.EQUALS: "=",
    RelationKind.GREATER: ">",
    RelationKind.GREATER_OR_EQUALS: "≥",
    RelationKind.LESS: "<",
    RelationKind.LESS_OR_EQUALS: "≤",
}

RELATION_LABELS: dict[RelationKind, str] = {
    RelationKind.EQUALS: "Equals (=)",
    RelationKind.GREATER: "Greater (>)",
    RelationKind.GREATER_OR_EQUALS: "Greater or Equals (≥)",
    RelationKind.LESS: "Less (<)",
    RelationKind.LESS_OR_EQUALS: "Less or Equals (≤)",
}

_SYMBOL_ALIASES: dict[str, RelationKind] = {
    "=": RelationKind.EQUALS,
    "==": RelationKind.EQUALS,
    ">": RelationKind.GREATER,
    "<": RelationKind.LESS,
    "≥": RelationKind.GREATER_OR_EQUALS,
    ">=": RelationKind.GREATER_OR_EQUALS,
    "≤": RelationKind.LESS_OR_EQUALS,
    "<=": RelationKind.LESS_OR_EQUALS,
}


@dataclass(frozen=True)
class Entity:
    """A rankable item. Only ``entity_id`` carries meaning for the engine."""
    entity_id: str
    label: str = ""
    color: str = ""
    image_url: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def display(self) -> str:
        return self.label or self.entity_id


@dataclass(frozen=True)
class Relation:
    """Typed directed ordering constraint: ``source <kind> target``."""
    source: str
    target: str
    kind: RelationKind
    relation_id: str = ""

    def describe(self, labels: dict[str, str] | None = None) -> str:
        labels = labels or {}
        left = labels.get(self.source, self.source)
        right = labels.get(self.target, self.target)
        return f"{left} {self.kind.symbol} {right}"


Edge = tuple[str, str]


@dataclass(frozen=True)
class EdgeContributions:
    """Directed edges one relation contributes to each derived edge set.

    ``strict`` and ``non_strict`` point from the smaller entity to the larger
    one. ``greater_than`` and ``equal_to`` point from the higher-ranked entity
    to the lower-ranked one.
    """
    strict: tuple[Edge, ...] = ()
    non_strict: tuple[Edge, ...] = ()
    greater_than: tuple[Edge, ...] = ()
    equal_to: tuple[Edge, ...] = ()


def lower_relation(relation: Relation) -> EdgeContributions:
    """Translate a relation into its derived directed edges."""
    a, b = relation.source, relation.target
    kind = relation.kind

    if kind is RelationKind.LESS:
        return EdgeContributions(strict=((a, b),), greater_than=((b, a),))
    if kind is RelationKind.GREATER:
        return EdgeContributions(strict=((b, a),), greater_than=((a, b),))
    if kind is RelationKind.LESS_OR_EQUALS:
        return EdgeContributions(
            non_strict=((a, b),), greater_than=((b, a),), equal_to=((b, a),)
        )
    if kind is RelationKind.GREATER_OR_EQUALS:
        return EdgeContributions(
            non_strict=((b, a),), greater_than=((a, b),), equal_to=((a, b),)
        )
    # EQUALS
    return EdgeContributions(
        non_strict=((a, b), (b, a)), equal_to=((a, b), (b, a))
    )


@dataclass
class DerivedEdges:
    """All four derived edge lists for a set of relations, in relation order."""
    strict: list[Edge] = field(default_factory=list)
    non_strict: list[Edge] = field(default_factory=list)
    greater_than: list[Edge] = field(default_factory=list)
    equal_to: list[Edge] = field(default_factory=list)


def derive_edges(relations: Iterable[Relation]) -> DerivedEdges:
    """Lower every relation and concatenate the contributions."""
    derived = DerivedEdges()
    for relation in relations:
        parts = lower_relation(relation)
        derived.strict.extend(parts.strict)
        derived.non_strict.extend(parts.non_strict)
        derived.greater_than.extend(parts.greater_than)
        derived.equal_to.extend(parts.equal_to)
    return derived


def adjacency(entity_ids: Iterable[str], edges: Iterable[Edge]) -> dict[str, list[str]]:
    """Build an ordered adjacency list, dropping edges with unknown endpoints."""
    adj: dict[str, list[str]] = {eid: [] for eid in entity_ids}
    for source, target in edges:
        if source in adj and target in adj:
            adj[source].append(target)
    return adj


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable view of the entity and relation sets for one engine pass."""
    entities: tuple[Entity, ...] = ()
    relations: tuple[Relation, ...] = ()

    @classmethod
    def build(
        cls,
        entities: Iterable[Entity],
        relations: Iterable[Relation] = (),
    ) -> GraphSnapshot:
        return cls(entities=tuple(entities), relations=tuple(relations))

    @property
    def entity_ids(self) -> list[str]:
        return [e.entity_id for e in self.entities]

    def labels(self) -> dict[str, str]:
        return {e.entity_id: e.display for e in self.entities}

    def dangling_relations(self) -> list[tuple[Relation, str]]:
        """Relations with an endpoint outside the entity set, with the bad id."""
        known = set(self.entity_ids)
        dangling = []
        for relation in self.relations:
            for endpoint in (relation.source, relation.target):
                if endpoint not in known:
                    dangling.append((relation, endpoint))
                    break
        return dangling

    def __len__(self) -> int:
        return len(self.entities)
