"""Rich terminal output for validation and ranking results.

Theme: Catppuccin Mocha (https://catppuccin.com/palette/)
"""

from __future__ import annotations

from rich.align import Align
from rich.box import ROUNDED
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from .. import __version__
from ..engine.core import RankResult
from ..engine.graph import GraphSnapshot
from ..engine.validation import ValidationResult

# Catppuccin Mocha palette (subset in use)
MOCHA = {
    "red": "#f38ba8",
    "maroon": "#eba0ac",
    "peach": "#fab387",
    "yellow": "#f9e2af",
    "green": "#a6e3a1",
    "teal": "#94e2d5",
    "sky": "#89dceb",
    "sapphire": "#74c7ec",
    "blue": "#89b4fa",
    "lavender": "#b4befe",
    "mauve": "#cba6f7",
    "text": "#cdd6f4",
    "subtext0": "#a6adc8",
    "overlay0": "#6c7086",
    "overlay1": "#7f849c",
    "surface0": "#313244",
    "surface1": "#45475a",
    "surface2": "#585b70",
}

MOCHA_THEME = Theme({
    "info": MOCHA["sapphire"],
    "warning": MOCHA["peach"],
    "danger": MOCHA["red"],
    "success": MOCHA["green"],
})

# Tier colors, highest tier first, cycling for deep rankings
TIER_COLORS = [
    MOCHA["yellow"],
    MOCHA["peach"],
    MOCHA["mauve"],
    MOCHA["blue"],
    MOCHA["teal"],
    MOCHA["green"],
    MOCHA["lavender"],
]


def _tier_badge(number: int) -> Text:
    """Render a tier number as a compact badge: `` #1 ``."""
    color = TIER_COLORS[(number - 1) % len(TIER_COLORS)]
    badge = Text()
    badge.append(f" #{number} ", style=f"bold {color}")
    return badge


def _status_badge(ok: bool, ok_text: str = "VALID", bad_text: str = "INVALID") -> Text:
    color = MOCHA["green"] if ok else MOCHA["red"]
    badge = Text()
    badge.append(f" {ok_text if ok else bad_text} ", style=f"bold {color}")
    return badge


class TerminalOutput:
    """Rich terminal output formatter.

    Bordered panels per section: header, relations, validation, tiers.
    """

    def __init__(
        self,
        console: Console | None = None,
        no_color: bool = False,
    ):
        """Initialize terminal output.

        Args:
            console: Optional Rich console instance
            no_color: If True, disable colored output
        """
        if console:
            self.console = console
        elif no_color:
            self.console = Console(no_color=True, highlight=False)
        else:
            self.console = Console(theme=MOCHA_THEME)

    # ── Public API ────────────────────────────────────────────────────

    def print_header(self, snapshot: GraphSnapshot | None = None, source: str | None = None) -> None:
        """Print the banner and a one-line graph summary."""
        self.console.print()
        self.console.print(
            Panel(
                Align.center(
                    Text(f"TIERGRAPH v{__version__} - Consistency & Ranking", style=f"bold {MOCHA['mauve']}")
                ),
                box=ROUNDED,
                border_style=MOCHA["mauve"],
                padding=(0, 1),
            )
        )

        if snapshot is not None:
            line = Text()
            if source:
                line.append("Source: ", style=MOCHA["subtext0"])
                line.append(source, style=f"bold {MOCHA['text']}")
                line.append("  ")
            line.append(f"{len(snapshot.entities)} nodes", style=MOCHA["text"])
            line.append(" | ", style=MOCHA["surface2"])
            line.append(f"{len(snapshot.relations)} relations", style=MOCHA["text"])
            self.console.print(line)
        self.console.print()

    def print_relations(self, summaries: list[tuple[str, str, str]]) -> None:
        """Print every relation as ``from  symbol  to``."""
        if not summaries:
            self.console.print(f"[{MOCHA['overlay1']}]No relations defined[/{MOCHA['overlay1']}]")
            return

        table = Table(box=None, show_header=False, padding=(0, 1), show_edge=False)
        table.add_column("From", style=f"bold {MOCHA['text']}", justify="right")
        table.add_column("Rel", style=f"bold {MOCHA['sapphire']}", justify="center")
        table.add_column("To", style=f"bold {MOCHA['text']}")
        for left, symbol, right in summaries:
            table.add_row(Text(left), Text(symbol), Text(right))

        self.console.print(
            Panel(
                table,
                title=f"[{MOCHA['overlay0']}]RELATIONS[/{MOCHA['overlay0']}]",
                title_align="left",
                box=ROUNDED,
                border_style=MOCHA["surface1"],
                padding=(0, 1),
            )
        )
        self.console.print()

    def print_validation(self, result: ValidationResult) -> None:
        """Print the validation verdict and any errors."""
        body: list[RenderableType] = [_status_badge(result.valid)]
        if result.valid:
            body.append(Text("All relations are consistent and every node is connected.",
                             style=MOCHA["text"]))
        for i, error in enumerate(result.errors, 1):
            line = Text()
            line.append(f"{i}. ", style=MOCHA["overlay1"])
            line.append(error, style=MOCHA["red"])
            body.append(line)

        border = MOCHA["green"] if result.valid else MOCHA["red"]
        self.console.print(
            Panel(
                Group(*body),
                title=f"[bold {border}]VALIDATION[/bold {border}]",
                title_align="left",
                box=ROUNDED,
                border_style=border,
                padding=(0, 2),
            )
        )
        self.console.print()

    def print_ranking(self, result: RankResult) -> None:
        """Print ranking tiers, highest first, or the failure reason."""
        if not result.success:
            self.console.print(
                Panel(
                    Text(result.error or "Failed to generate ranking", style=MOCHA["red"]),
                    title=f"[bold {MOCHA['red']}]RANKING[/bold {MOCHA['red']}]",
                    title_align="left",
                    box=ROUNDED,
                    border_style=MOCHA["red"],
                    padding=(0, 2),
                )
            )
            self.console.print()
            return

        table = Table(box=None, show_header=False, padding=(0, 1), show_edge=False)
        table.add_column("Tier", no_wrap=True)
        table.add_column("Members")
        for number, tier in enumerate(result.tiers or (), 1):
            color = TIER_COLORS[(number - 1) % len(TIER_COLORS)]
            members = Text(", ".join(tier), style=f"bold {color}")
            table.add_row(_tier_badge(number), members)

        self.console.print(
            Panel(
                table,
                title=f"[bold {MOCHA['yellow']}]RANKING - HIGHEST FIRST[/bold {MOCHA['yellow']}]",
                title_align="left",
                box=ROUNDED,
                border_style=MOCHA["yellow"],
                padding=(1, 2),
            )
        )
        self.console.print()

    def print_summary(
        self,
        validation: ValidationResult,
        ranking: RankResult | None = None,
    ) -> None:
        """Print a one-line closing summary."""
        line = Text()
        line.append_text(_status_badge(validation.valid))
        line.append(f"  {len(validation.errors)} error(s)", style=MOCHA["subtext0"])
        if ranking is not None and ranking.success:
            tiers = ranking.tiers or ()
            count = sum(len(t) for t in tiers)
            line.append(" | ", style=MOCHA["surface2"])
            line.append(f"{count} nodes in {len(tiers)} tier(s)", style=MOCHA["text"])
        self.console.print(line)
