"""Consistency checking and tier ranking engine."""

from .core import RankingEngine, RankResult, rank, validate
from .cycles import ContradictionReport, find_contradiction
from .editor import GraphModel
from .graph import Entity, GraphSnapshot, Relation, RelationKind
from .leveler import InternalConsistencyError, RankErrorKind, RankingError
from .validation import ValidationResult

__all__ = [
    "RankingEngine",
    "RankResult",
    "ValidationResult",
    "ContradictionReport",
    "GraphModel",
    "GraphSnapshot",
    "Entity",
    "Relation",
    "RelationKind",
    "RankErrorKind",
    "RankingError",
    "InternalConsistencyError",
    "find_contradiction",
    "rank",
    "validate",
]
