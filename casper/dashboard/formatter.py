"""
Rich formatter for the CASPER priority list.

Handles all Rich-based CLI formatting for a priority run: the ranked table,
per-item score breakdowns and the bottom stats bar.
"""

from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from casper.priority.selector import (
    get_avg_score,
    get_max_score,
    get_min_score,
    get_source_type_distribution,
)
from casper.priority.types import DIMENSIONS, PriorityItem, PriorityResult, SourceType


# Short labels and colors per source
SOURCE_STYLES = {
    SourceType.TASK: ("Task", "white"),
    SourceType.INBOX: ("Inbox", "blue"),
    SourceType.CALENDAR_EVENT: ("Event", "cyan"),
    SourceType.PORTFOLIO_COMPANY: ("Portfolio", "green"),
    SourceType.PIPELINE_COMPANY: ("Pipeline", "magenta"),
    SourceType.READING_ITEM: ("Reading", "dim"),
    SourceType.NONNEGOTIABLE: ("Habit", "yellow"),
    SourceType.COMMITMENT: ("Promise", "red"),
    SourceType.PROJECT: ("Project", "white"),
}


class PriorityFormatter:
    """
    Rich-based formatter for priority lists.

    Creates information-dense terminal output using Rich panels and tables.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
        """
        self.console = console or Console()

    def _format_source(self, source_type: SourceType) -> str:
        label, color = SOURCE_STYLES.get(source_type, (source_type.value, "white"))
        return f"[{color}]{label}[/{color}]"

    def _format_score(self, score: Optional[float]) -> str:
        """Format score with color by band."""
        if score is None:
            return "[dim]---[/dim]"
        if score >= 0.75:
            return f"[red bold]{score:.2f}[/red bold]"
        elif score >= 0.5:
            return f"[yellow]{score:.2f}[/yellow]"
        return f"[dim]{score:.2f}[/dim]"

    def _truncate(self, text: str, width: int) -> str:
        return text[:width] + "..." if len(text) > width else text

    def format_priority_table(self, items: List[PriorityItem], now: Optional[datetime] = None) -> Panel:
        """
        Create panel showing the ranked priority list.

        Args:
            items: Selected priority items, best first
            now: Evaluation time shown in the title

        Returns:
            Rich Panel with priority table
        """
        title = "[bold]Priorities[/bold]"
        if now is not None:
            title = f"[bold]Priorities[/bold] [dim]{now.strftime('%a %b %d, %H:%M')}[/dim]"

        if not items:
            content = Text("Nothing needs attention", style="dim", justify="center")
            return Panel(
                content,
                title=title,
                border_style="green",
                padding=(0, 1),
            )

        table = Table(
            show_header=True,
            header_style="bold cyan",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=True,
        )
        table.add_column("#", width=3)
        table.add_column("Source", width=10)
        table.add_column("Title", ratio=2)
        table.add_column("Score", width=6, justify="right")
        table.add_column("Signals", ratio=2)

        for i, item in enumerate(items, 1):
            title_text = self._truncate(item.title, 40)
            if item.subtitle:
                title_text += f"\n[dim]{self._truncate(item.subtitle, 40)}[/dim]"
            signals = ", ".join(item.signals) if item.signals else "[dim]---[/dim]"

            table.add_row(
                f"[bold]{i}.[/bold]",
                self._format_source(item.source_type),
                title_text,
                self._format_score(item.priority_score),
                signals,
            )

        return Panel(
            table,
            title=title,
            border_style="green",
            padding=(0, 1),
        )

    def format_breakdown(self, item: PriorityItem) -> Table:
        """
        Create table with the per-dimension score breakdown of one item.

        Args:
            item: Scored priority item

        Returns:
            Rich Table with score, weight and weighted columns
        """
        table = Table(
            title=f"{item.id}",
            title_style="dim",
            show_header=True,
            header_style="bold",
            box=box.MINIMAL,
        )
        table.add_column("Dimension")
        table.add_column("Score", justify="right")
        table.add_column("Weight", justify="right")
        table.add_column("Weighted", justify="right")

        for name in DIMENSIONS:
            entry = item.breakdown.get(name)
            if not entry:
                continue
            table.add_row(
                name,
                f"{entry['score']:.2f}",
                f"{entry['weight']:.2f}",
                f"{entry['weighted']:.3f}",
            )
        table.add_row("[bold]total[/bold]", "", "", self._format_score(item.priority_score))
        return table

    def format_stats_bar(self, result: PriorityResult) -> str:
        """
        Create bottom stats bar.

        Args:
            result: Engine run result

        Returns:
            Formatted stats string
        """
        parts = [f"[green]{len(result.items)} shown[/green]"]
        parts.append(f"[white]{result.total_count} candidates[/white]")

        excluded = result.filter_stats.get("excluded", 0)
        if excluded:
            parts.append(f"[dim]{excluded} excluded[/dim]")
        dismissed = result.filter_stats.get("dismissed", 0)
        if dismissed:
            parts.append(f"[dim]{dismissed} dismissed[/dim]")
        unmappable = result.filter_stats.get("unmappable", 0)
        if unmappable:
            parts.append(f"[red]{unmappable} unreadable[/red]")

        if result.items:
            parts.append(
                f"[dim]score {get_min_score(result.items):.2f}-"
                f"{get_max_score(result.items):.2f} (avg {get_avg_score(result.items):.2f})[/dim]"
            )

        return " │ ".join(parts)

    def format_distribution(self, items: List[PriorityItem]) -> str:
        """Summarize how many items each source contributed."""
        distribution = get_source_type_distribution(items)
        parts = []
        for source_type in SourceType:
            count = distribution.get(source_type.value)
            if count:
                parts.append(f"{self._format_source(source_type)} {count}")
        return "  ".join(parts)

    def render_priorities(
        self,
        result: PriorityResult,
        limit: Optional[int] = None,
        verbose: bool = False
    ) -> None:
        """
        Render a priority run to console.

        Args:
            result: Engine run result
            limit: Show at most this many items
            verbose: Show per-item score breakdowns if True
        """
        items = result.items if limit is None else result.items[:limit]

        self.console.print(self.format_priority_table(items, result.generated_at))

        if verbose:
            for item in items:
                self.console.print(self.format_breakdown(item))
            if items:
                self.console.print(self.format_distribution(items))

        self.console.print("─" * 60)
        self.console.print(self.format_stats_bar(result), justify="center")
        self.console.print("─" * 60)
