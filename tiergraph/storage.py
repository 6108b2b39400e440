"""JSON-file key/value store for the editor state.

Mirrors a browser-style local store: one document per key, and failures are
logged rather than raised so a broken store never blocks editing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .config import DEFAULT_STATE_KEY

logger = logging.getLogger(__name__)


class StateStore:
    """Persist graph state documents under a key inside a JSON file."""

    def __init__(self, path: str | Path, key: str = DEFAULT_STATE_KEY):
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"State file {self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)

    def save(self, state: dict[str, Any]) -> bool:
        """Store ``state`` under the key. Returns False if writing failed."""
        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable state file %s: %s", self.path, e)
            data = {}
        data[self.key] = state
        try:
            self._write_all(data)
        except OSError as e:
            logger.error("Failed to save state to %s: %s", self.path, e)
            return False
        return True

    def load(self) -> dict[str, Any] | None:
        """Return the stored state, or None if absent or unreadable."""
        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            logger.error("Failed to load state from %s: %s", self.path, e)
            return None
        state = data.get(self.key)
        if state is not None and not isinstance(state, dict):
            logger.error("Stored state under %r is not an object", self.key)
            return None
        return state

    def clear(self) -> bool:
        """Remove the key, leaving other keys intact. Returns False on failure."""
        try:
            data = self._read_all()
            if self.key not in data:
                return True
            del data[self.key]
            self._write_all(data)
        except (OSError, ValueError) as e:
            logger.error("Failed to clear state in %s: %s", self.path, e)
            return False
        return True
