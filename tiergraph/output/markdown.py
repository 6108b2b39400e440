"""Markdown output formatter for validation and ranking results."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from ..engine.core import RankResult
from ..engine.graph import GraphSnapshot
from ..engine.validation import ValidationResult

_MD_SPECIAL = re.compile(r'([\\`*_\{\}\[\]()#+\-.!|<>])')


def _escape_md(text: str) -> str:
    """Escape markdown special characters in user-derived text."""
    return _MD_SPECIAL.sub(r'\\\1', text)


class MarkdownOutput:
    """Markdown output formatter."""

    def generate(
        self,
        snapshot: GraphSnapshot,
        validation: ValidationResult,
        ranking: RankResult | None = None,
        include_relations: bool = True,
    ) -> str:
        """Generate a full markdown report.

        Args:
            snapshot: Graph that was checked
            validation: Validation outcome
            ranking: Optional ranking outcome
            include_relations: Whether to list every relation

        Returns:
            Markdown formatted string
        """
        sections = [self._generate_header(snapshot)]
        if include_relations:
            sections.append(self._generate_relations(snapshot))
        sections.append(self._generate_validation(validation))
        if ranking is not None:
            sections.append(self._generate_ranking(ranking))
        return "\n\n".join(sections) + "\n"

    def save(
        self,
        snapshot: GraphSnapshot,
        validation: ValidationResult,
        output_path: str | Path,
        **kwargs
    ) -> None:
        """Save the markdown report to a file."""
        content = self.generate(snapshot, validation, **kwargs)
        Path(output_path).write_text(content, encoding='utf-8')

    def _generate_header(self, snapshot: GraphSnapshot) -> str:
        return "\n".join([
            "# Ranking Report",
            "",
            f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"**Nodes:** {len(snapshot.entities)}  ",
            f"**Relations:** {len(snapshot.relations)}",
        ])

    def _generate_relations(self, snapshot: GraphSnapshot) -> str:
        lines = ["## Relations", ""]
        if not snapshot.relations:
            lines.append("_No relations defined._")
            return "\n".join(lines)

        labels = snapshot.labels()
        lines.extend(["| From | Relation | To |", "|------|----------|----|"])
        for relation in snapshot.relations:
            left = _escape_md(labels.get(relation.source, "Unknown"))
            right = _escape_md(labels.get(relation.target, "Unknown"))
            lines.append(f"| {left} | {_escape_md(relation.kind.display_name)} | {right} |")
        return "\n".join(lines)

    def _generate_validation(self, validation: ValidationResult) -> str:
        lines = ["## Validation", ""]
        if validation.valid:
            lines.append("**Status:** VALID")
            return "\n".join(lines)

        lines.extend(["**Status:** INVALID", ""])
        for error in validation.errors:
            lines.append(f"- {_escape_md(error)}")
        return "\n".join(lines)

    def _generate_ranking(self, ranking: RankResult) -> str:
        lines = ["## Ranking", ""]
        if not ranking.success:
            lines.append(f"> {_escape_md(ranking.error or 'Failed to generate ranking')}")
            return "\n".join(lines)

        lines.extend(["Highest tier first.", ""])
        for number, tier in enumerate(ranking.tiers or (), 1):
            members = ", ".join(_escape_md(label) for label in tier)
            lines.append(f"{number}. {members}")
        return "\n".join(lines)
