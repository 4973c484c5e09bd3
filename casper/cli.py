"""
CASPER - Command Line Interface
Ranks an exported snapshot of dashboard data and prints the priority list
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.table import Table

from casper.core.config import CONFIG_DIR_ENV, Config
from casper.core.models import parse_datetime
from casper.dashboard import PriorityFormatter
from casper.priority import DEFAULT_PRIORITY_CONFIG, PriorityConfig, PriorityEngine, PrioritySnapshot

# Initialize CLI app and console
app = typer.Typer(help="CASPER - what to look at next")

console = Console()


def load_priority_config(config_dir: Optional[Path]) -> PriorityConfig:
    """Load tuning from a config directory, or fall back to the defaults."""
    if config_dir is None:
        return DEFAULT_PRIORITY_CONFIG
    return PriorityConfig.from_config(Config(config_dir))


def load_snapshot(path: Path) -> Dict[str, Any]:
    """Read a JSON snapshot file holding the source collections."""
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("snapshot must be a JSON object of collections")
    return data


@app.command()
def priorities(
    snapshot_path: Path = typer.Argument(..., help="JSON file with tasks, inbox items, events, ..."),
    available_minutes: Optional[int] = typer.Option(
        None, "--available-minutes", "-m", help="Time budget; favours quick items"
    ),
    now: Optional[str] = typer.Option(None, "--now", help="Evaluate at this ISO timestamp"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Show at most N items"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show score breakdowns"),
    config_dir: Optional[Path] = typer.Option(
        None, "--config-dir", envvar=CONFIG_DIR_ENV, help="Directory with priority.json"
    ),
):
    """
    Show the ranked priority list for a snapshot

    Example:
      casper priorities snapshot.json --available-minutes 30
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        data = load_snapshot(snapshot_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error reading snapshot: {e}[/red]")
        raise typer.Exit(1)

    evaluated_at = None
    if now is not None:
        evaluated_at = parse_datetime(now)
        if evaluated_at is None:
            console.print(f"[red]Invalid --now timestamp: {now}[/red]")
            raise typer.Exit(1)

    try:
        engine = PriorityEngine(load_priority_config(config_dir))
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    result = engine.build_priority_list(
        PrioritySnapshot.from_dict(data),
        now=evaluated_at,
        available_minutes=available_minutes,
    )

    if json_output:
        items = result.items if limit is None else result.items[:limit]
        payload = {
            "items": [item.to_dict() for item in items],
            "total_count": result.total_count,
            "filter_stats": result.filter_stats,
            "generated_at": result.generated_at.isoformat(),
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    PriorityFormatter(console).render_priorities(result, limit=limit, verbose=verbose)


@app.command("config")
def show_config(
    config_dir: Optional[Path] = typer.Option(
        None, "--config-dir", envvar=CONFIG_DIR_ENV, help="Directory with priority.json"
    ),
):
    """
    Show the active priority weights and thresholds
    """
    try:
        priority_config = load_priority_config(config_dir)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value", justify="right")

    for name, value in priority_config.weights.as_dict().items():
        table.add_row(f"weight.{name}", f"{value:.2f}")
    for name, value in priority_config.to_dict().items():
        if name != "weights":
            table.add_row(name, str(value))

    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
