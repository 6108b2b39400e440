"""JSON output formatter for validation and ranking results.

Generates structured JSON for programmatic use.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .. import __version__
from ..engine.core import RankResult
from ..engine.graph import GraphSnapshot
from ..engine.validation import ValidationResult


class JSONOutput:
    """JSON output formatter."""

    def generate(
        self,
        snapshot: GraphSnapshot,
        validation: ValidationResult,
        ranking: RankResult | None = None,
        include_relations: bool = True,
    ) -> dict:
        """Generate a JSON-serializable dictionary.

        Args:
            snapshot: Graph that was checked
            validation: Validation outcome
            ranking: Optional ranking outcome
            include_relations: Whether to list every relation

        Returns:
            Dictionary ready for JSON serialization
        """
        result: dict[str, Any] = {
            "metadata": {
                "generated_at": datetime.now().isoformat(),
                "tool": "tiergraph",
                "version": __version__,
                "nodes": len(snapshot.entities),
                "relations": len(snapshot.relations),
            },
            "validation": validation.to_dict(),
        }

        if validation.contradiction is not None:
            result["validation"]["cycle"] = list(validation.contradiction.labels)

        if include_relations:
            labels = snapshot.labels()
            result["relations"] = [
                {
                    "id": r.relation_id,
                    "from": labels.get(r.source, "Unknown"),
                    "relation": r.kind.value,
                    "symbol": r.kind.symbol,
                    "to": labels.get(r.target, "Unknown"),
                }
                for r in snapshot.relations
            ]

        if ranking is not None:
            result["ranking"] = ranking.to_dict()

        return result

    def to_json(
        self,
        snapshot: GraphSnapshot,
        validation: ValidationResult,
        indent: int = 2,
        **kwargs
    ) -> str:
        """Generate a JSON string. Extra kwargs go to generate()."""
        data = self.generate(snapshot, validation, **kwargs)
        return json.dumps(data, indent=indent, ensure_ascii=False, default=str)

    def save(
        self,
        snapshot: GraphSnapshot,
        validation: ValidationResult,
        output_path: str | Path,
        **kwargs
    ) -> None:
        """Save the JSON report to a file."""
        content = self.to_json(snapshot, validation, **kwargs)
        Path(output_path).write_text(content, encoding='utf-8')
