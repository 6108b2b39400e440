"""Item list importer for the entity library.

Accepts a ``.json`` array (strings or objects) or plain text with one label
per line.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from .graph_state import GraphParseError

logger = logging.getLogger(__name__)

# Object keys tried in order
_LABEL_KEYS = ("text", "label", "name", "value")
_IMAGE_KEYS = ("image", "imageUrl", "img", "picture", "thumbnail", "url")


@dataclass
class LibraryItem:
    """One importable entity: a label and an optional image."""
    label: str
    image_url: str | None = None


class ItemListParser:
    """Parser for library item lists."""

    def parse(self, content: str, filename: str = "") -> list[LibraryItem]:
        """Parse item list content.

        Args:
            content: File content
            filename: Source name; a ``.json`` suffix selects JSON parsing

        Returns:
            Items in file order

        Raises:
            GraphParseError: If a JSON file does not contain an array
        """
        if filename.lower().endswith(".json"):
            return self._parse_json(content)
        return [
            LibraryItem(label=line.strip())
            for line in content.splitlines()
            if line.strip()
        ]

    def parse_file(self, path: str | Path) -> list[LibraryItem]:
        path = Path(path)
        items = self.parse(path.read_text(encoding="utf-8"), filename=path.name)
        logger.info("Loaded %d items from %s", len(items), path.name)
        return items

    def _parse_json(self, content: str) -> list[LibraryItem]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise GraphParseError(f"Invalid JSON: {e}") from e
        if not isinstance(data, list):
            raise GraphParseError("JSON file must contain an array")

        items = []
        for entry in data:
            if isinstance(entry, str):
                items.append(LibraryItem(label=entry))
            elif isinstance(entry, dict):
                label = next((entry[k] for k in _LABEL_KEYS if entry.get(k)), None)
                image = next((entry[k] for k in _IMAGE_KEYS if entry.get(k)), None)
                items.append(LibraryItem(
                    label=str(label) if label is not None else json.dumps(entry),
                    image_url=str(image) if image is not None else None,
                ))
            else:
                items.append(LibraryItem(label=str(entry)))
        return items
