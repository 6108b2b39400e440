"""Graph state document parser.

Reads the editor's ``{"nodes": [...], "connections": [...], "toolbarNodes": [...]}``
JSON document into engine entities and relations.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..engine.editor import GraphModel
from ..engine.graph import Entity, GraphSnapshot, Relation, RelationKind

logger = logging.getLogger(__name__)

# Node keys with a dedicated Entity field; everything else lands in attrs
_NODE_FIELDS = frozenset({"id", "label", "color", "imageUrl", "isInToolbar"})


class GraphParseError(ValueError):
    """The document is not a usable graph state."""


@dataclass
class GraphState:
    """Parsed graph state: canvas entities, relations and shelf entities."""
    nodes: list[Entity] = field(default_factory=list)
    connections: list[Relation] = field(default_factory=list)
    library: list[Entity] = field(default_factory=list)

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot.build(self.nodes, self.connections)

    def to_model(self) -> GraphModel:
        return GraphModel(self.nodes, self.connections, self.library)


class GraphStateParser:
    """Parser for graph state JSON documents."""

    def __init__(self, max_bytes: int = 10 * 1024 * 1024):
        self.max_bytes = max_bytes

    def parse(self, content: str) -> GraphState:
        """Parse a JSON document.

        Args:
            content: JSON text

        Returns:
            GraphState with entities and relations in document order

        Raises:
            GraphParseError: If the text is not JSON or not a graph state
        """
        if not content.strip():
            return GraphState()
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise GraphParseError(f"Invalid JSON: {e}") from e
        return self.parse_data(data)

    def parse_data(self, data: Any) -> GraphState:
        """Parse an already-decoded document."""
        if not isinstance(data, dict):
            raise GraphParseError("Graph state must be a JSON object")

        state = GraphState()
        for idx, raw in enumerate(self._list_field(data, "nodes")):
            state.nodes.append(self._parse_node(raw, f"nodes[{idx}]"))
        for idx, raw in enumerate(self._list_field(data, "connections")):
            state.connections.append(self._parse_connection(raw, f"connections[{idx}]"))
        for idx, raw in enumerate(self._list_field(data, "toolbarNodes")):
            state.library.append(self._parse_node(raw, f"toolbarNodes[{idx}]"))

        ids = [e.entity_id for e in state.nodes]
        if len(ids) != len(set(ids)):
            raise GraphParseError("Duplicate node ids in graph state")

        logger.debug(
            "Parsed graph state: %d nodes, %d connections, %d library items",
            len(state.nodes), len(state.connections), len(state.library),
        )
        return state

    def parse_file(self, path: str | Path) -> GraphState:
        """Parse a graph state from a file.

        Raises:
            GraphParseError: If the file is too large or malformed
        """
        path = Path(path)
        file_size = path.stat().st_size
        if file_size > self.max_bytes:
            raise GraphParseError(
                f"File exceeds {self.max_bytes // (1024 * 1024)}MB limit ({file_size // (1024 * 1024)}MB)"
            )
        return self.parse(path.read_text(encoding="utf-8"))

    def _list_field(self, data: dict, key: str) -> list:
        value = data.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise GraphParseError(f"'{key}' must be a list")
        return value

    def _parse_node(self, raw: Any, where: str) -> Entity:
        if not isinstance(raw, dict):
            raise GraphParseError(f"{where} must be an object")
        if "id" not in raw:
            raise GraphParseError(f"{where} is missing 'id'")

        attrs = {k: v for k, v in raw.items() if k not in _NODE_FIELDS}
        return Entity(
            entity_id=str(raw["id"]),
            label=str(raw.get("label", "")),
            color=str(raw.get("color") or ""),
            image_url=raw.get("imageUrl") or None,
            attrs=attrs,
        )

    def _parse_connection(self, raw: Any, where: str) -> Relation:
        if not isinstance(raw, dict):
            raise GraphParseError(f"{where} must be an object")
        for key in ("fromNodeId", "toNodeId", "relationship"):
            if key not in raw:
                raise GraphParseError(f"{where} is missing '{key}'")

        try:
            kind = RelationKind.parse(str(raw["relationship"]))
        except ValueError as e:
            raise GraphParseError(f"{where}: {e}") from e

        return Relation(
            source=str(raw["fromNodeId"]),
            target=str(raw["toNodeId"]),
            kind=kind,
            relation_id=str(raw.get("id", "")),
        )
