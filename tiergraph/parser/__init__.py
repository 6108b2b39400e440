"""Parsers for graph state documents and library item lists."""

from .graph_state import GraphParseError, GraphState, GraphStateParser
from .items import ItemListParser, LibraryItem

__all__ = [
    "GraphStateParser",
    "GraphState",
    "GraphParseError",
    "ItemListParser",
    "LibraryItem",
]
