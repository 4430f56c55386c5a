"""CLI for the worklog time distribution engine.

Preview how a target duration would be split across a day's worklogs:

    python run_cli.py distribute worklogs.json --target 8 --mode smart

The entries file is a JSON array of worklogs, either in engine form
(id, group_key, label, comment_text, current_seconds) or as exported by the
worklog editor (id, issueKey, summary, comment, seconds).
"""

import asyncio
import json
import sys
from pathlib import Path

import typer
import uvicorn
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

try:
    import cli.bootstrap  # noqa: F401
except ImportError:
    _project_root = Path(__file__).parent.parent
    if str(_project_root) not in sys.path:
        sys.path.insert(0, str(_project_root))

from worklog_engine.config.settings import settings
from worklog_engine.core.logger import setup_logger
from worklog_engine.distribution.engine import distribute_time
from worklog_engine.distribution.errors import DistributionInvariantError, DistributionPreconditionError
from worklog_engine.distribution.formatting import format_hours_decimal, format_minutes_to_hours
from worklog_engine.distribution.models import DistributionMode, DistributionOutcome, TimeEntry
from worklog_engine.distribution.weights import parse_mode

console = Console()

app = typer.Typer(
    name="worklog-engine",
    help="Worklog time distribution - preview allocations offline",
    add_completion=False,
)

# Worklog editor export field -> TimeEntry field
_EDITOR_FIELDS = {
    "issueKey": "group_key",
    "summary": "label",
    "comment": "comment_text",
    "seconds": "current_seconds",
}


def _entry_from_record(record: dict[str, object]) -> TimeEntry:
    data = {_EDITOR_FIELDS.get(key, key): value for key, value in record.items()}
    return TimeEntry.model_validate({k: v for k, v in data.items() if k in TimeEntry.model_fields})


def load_entries(path: Path) -> list[TimeEntry]:
    """Load worklogs from a JSON file.

    Raises:
        ValueError: If the file is not a JSON array of worklog objects
    """
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Expected a JSON array of worklogs in {path}, got {type(raw).__name__}")
    entries: list[TimeEntry] = []
    for i, record in enumerate(raw):
        if not isinstance(record, dict):
            raise ValueError(f"Worklog #{i} in {path} is not an object")
        entries.append(_entry_from_record(record))
    return entries


def _render_outcome(outcome: DistributionOutcome, entries: list[TimeEntry]) -> None:
    current = {entry.id: entry.current_minutes for entry in entries}
    weights = {w.entry_id: w for w in outcome.weights}

    table = Table(title=f"Distribution ({outcome.mode.value})")
    table.add_column("Worklog")
    table.add_column("Issue")
    table.add_column("Weight", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("New", justify="right")
    table.add_column("Delta", justify="right")

    for result in outcome.results:
        delta_style = "green" if result.delta_minutes >= 0 else "red"
        table.add_row(
            result.entry_id,
            result.group_key,
            f"{weights[result.entry_id].value} ({weights[result.entry_id].source.value})",
            format_minutes_to_hours(current[result.entry_id]),
            format_minutes_to_hours(result.new_minutes),
            f"[{delta_style}]{result.delta_minutes:+d}m[/{delta_style}]",
        )

    console.print(table)
    console.print(
        f"Total: {format_minutes_to_hours(outcome.total_minutes)} "
        f"({format_hours_decimal(outcome.total_hours)}) of target {format_hours_decimal(outcome.target_hours)}"
    )
    for warning in outcome.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")


@app.command()
def distribute(
    entries_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON array of worklogs"),
    target: float = typer.Option(settings.default_target_hours, "--target", "-t", help="Target total hours"),
    mode: str = typer.Option(DistributionMode.EQUAL.value, "--mode", "-m", help="equal or smart (ai)"),
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as JSON"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Preview a distribution of TARGET hours across the worklogs in ENTRIES_FILE."""
    setup_logger(level="DEBUG" if debug else "WARNING")

    try:
        entries = load_entries(entries_file)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]Invalid entries file:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    try:
        outcome = asyncio.run(distribute_time(entries, target, parse_mode(mode)))
    except DistributionPreconditionError as e:
        console.print(f"[red]{e.code}:[/red] {'; '.join(e.details)}")
        raise typer.Exit(code=2) from e
    except DistributionInvariantError as e:
        logger.exception("Distribution invariant failed")
        console.print(f"[red]Internal error {e.code}:[/red] {'; '.join(e.details)}")
        raise typer.Exit(code=1) from e

    if as_json:
        typer.echo(outcome.model_dump_json(indent=2))
        return

    _render_outcome(outcome, entries)


@app.command()
def server(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the distribution API server."""
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("worklog_engine.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
