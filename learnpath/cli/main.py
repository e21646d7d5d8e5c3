"""
learnpath CLI - score answers and plan study paths from the terminal.

Usage:
    learnpath submit attempts.json      # Apply answers to a topic, show XP
    learnpath path catalog.json         # Weakest-first learning path
    learnpath level 1250                # Level progress for an XP total

Input files are JSON documents matching learnpath.api.schemas
(SubmissionRequest / PathRequest). Add --json for machine-readable output.
"""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from learnpath.adaptive.path_sequencer import AdaptivePathBuilder, PathEntry, certification_mastery
from learnpath.adaptive.priority import PriorityRanker
from learnpath.api.schemas import MasteryRecordPayload, PathRequest, SubmissionRequest
from learnpath.config import Settings, get_settings
from learnpath.core.models import MasteryLevel
from learnpath.core.xp import level_progress
from learnpath.delivery.scheduler import SpacedRepetitionScheduler
from learnpath.service import LearningService
from learnpath.store.memory import (
    InMemoryAttemptLog,
    InMemoryContentCatalog,
    InMemoryMasteryStore,
    InMemoryXPLedger,
)

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="learnpath",
    help="Adaptive learning scoring engine: mastery, XP, reviews and study paths",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """Route loguru output to stderr (and optionally a file)."""
    level = "DEBUG" if verbose else settings.log_level
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=level, rotation="10 MB", retention=5)


def _format_progress_bar(mastery: float, width: int = 10) -> str:
    filled = int(max(0.0, min(mastery, 1.0)) * width)
    return "#" * filled + "-" * (width - filled)


def _load(model, path: Path):
    """Parse a JSON file into a boundary model, exiting on bad input."""
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        console.print(f"[red]Error:[/red] cannot read {escape(str(path))}: {escape(str(e))}")
        raise typer.Exit(code=1)
    except ValidationError as e:
        console.print(f"[red]Invalid input in {escape(str(path))}:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def submit(
    file: Annotated[Path, typer.Argument(help="SubmissionRequest JSON file")],
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of tables")] = False,
) -> None:
    """
    Apply a batch of answers to a topic and report mastery and XP.
    """
    request = _load(SubmissionRequest, file)
    settings = get_settings()

    store = InMemoryMasteryStore()
    if request.record is not None:
        store.upsert(request.user_id, request.topic_id, request.record.to_record())

    ledger = InMemoryXPLedger({request.user_id: request.total_xp})
    service = LearningService(store, InMemoryContentCatalog(), InMemoryAttemptLog(), settings, ledger)
    result = service.submit_attempts(request.user_id, request.topic_id, request.to_events())

    if as_json:
        payload = {
            "user_id": result.user_id,
            "topic_id": result.topic_id,
            "record": MasteryRecordPayload.from_record(result.record).model_dump(mode="json"),
            "xp_earned": result.xp_earned,
            "total_xp": result.total_xp,
            "old_level": result.old_level,
            "new_level": result.new_level,
            "leveled_up": result.leveled_up,
            "level": result.level.value,
            "is_due": result.is_due,
            "priority": result.priority,
            "attempts": [
                {
                    "is_correct": o.event.is_correct,
                    "difficulty": o.event.difficulty.value,
                    "mastery_before": o.previous_mastery,
                    "mastery_after": o.record.mastery_level,
                    "xp_earned": o.xp_earned,
                }
                for o in result.outcomes
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"Attempts on {escape(result.topic_id)}", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Result")
    table.add_column("Difficulty")
    table.add_column("Mastery", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("XP", justify="right")

    for i, outcome in enumerate(result.outcomes, start=1):
        delta = outcome.mastery_delta
        table.add_row(
            str(i),
            "[green]correct[/green]" if outcome.event.is_correct else "[red]incorrect[/red]",
            outcome.event.difficulty.value,
            f"{outcome.record.mastery_level:.3f}",
            f"[green]+{delta:.3f}[/green]" if delta >= 0 else f"[red]{delta:.3f}[/red]",
            str(outcome.xp_earned),
        )

    console.print(table)

    if result.leveled_up:
        console.print(f"[bold green]Level up![/bold green] {result.old_level} -> {result.new_level}")

    level = result.level
    record = result.record
    console.print(
        Panel(
            f"Mastery: [{level.color}]{record.mastery_level:.1%}[/{level.color}] "
            f"{_format_progress_bar(record.mastery_level)} {level.display_name}\n"
            f"Accuracy: {record.correct_attempts}/{record.total_attempts} "
            f"({record.accuracy:.0%}), streak {record.consecutive_correct}\n"
            f"XP earned: [bold]+{result.xp_earned}[/bold] (total {result.total_xp}, level {result.new_level})",
            title=f"[bold]{escape(result.topic_id)}[/bold]",
            border_style="cyan",
        )
    )


@app.command()
def path(
    file: Annotated[Path, typer.Argument(help="PathRequest JSON file")],
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table")] = False,
    limit: Annotated[
        int | None, typer.Option("--limit", "-n", help="Only show the first N topics")
    ] = None,
) -> None:
    """
    Order a certification's topics weakest-first, with review and priority info.
    """
    request = _load(PathRequest, file)
    settings = get_settings()
    now = request.now or datetime.now(UTC)

    builder = AdaptivePathBuilder(
        SpacedRepetitionScheduler(settings.get_review_config()),
        PriorityRanker(settings.get_priority_config()),
    )
    records = request.to_records()
    entries: list[PathEntry] = builder.build_annotated_path(
        request.to_topics(), records, now, request.weights
    )
    overall = certification_mastery(records)

    if limit is not None:
        entries = entries[:limit]

    if as_json:
        payload = {
            "certification_id": request.certification_id,
            "certification_mastery": overall,
            "path": [
                {
                    "position": e.position,
                    "topic_id": e.topic_id,
                    "name": e.topic.name,
                    "mastery_level": e.mastery_level,
                    "level": e.level.value,
                    "is_due": e.is_due,
                    "priority": e.priority,
                }
                for e in entries
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"Learning path: {escape(request.certification_id)}", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Topic")
    table.add_column("Mastery", justify="right")
    table.add_column("Progress")
    table.add_column("Level")
    table.add_column("Review")
    table.add_column("Priority", justify="right")

    for entry in entries:
        level: MasteryLevel = entry.level
        table.add_row(
            str(entry.position),
            escape(entry.topic.name),
            f"{entry.mastery_level:.0%}",
            _format_progress_bar(entry.mastery_level),
            f"[{level.color}]{level.display_name}[/{level.color}]",
            "[yellow]due[/yellow]" if entry.is_due else "[dim]ok[/dim]",
            f"{entry.priority:.2f}",
        )

    console.print(table)
    console.print(f"Certification mastery: [bold]{overall:.1%}[/bold]")


@app.command()
def level(
    total_xp: Annotated[int, typer.Argument(help="Total XP earned")],
) -> None:
    """
    Show the level reached with an XP total.
    """
    progress = level_progress(total_xp)
    console.print(
        f"Level [bold]{progress.level}[/bold]: {progress.level_xp}/{progress.xp_for_next_level} XP "
        f"({progress.progress_percentage:.0f}%), {progress.xp_to_next_level} XP to next level"
    )


# =============================================================================
# Entry Point
# =============================================================================


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Debug logging")
    ] = False,
) -> None:
    """
    learnpath - adaptive learning scoring engine

    \b
    Quick Start:
      learnpath submit attempts.json
      learnpath path catalog.json --limit 5
      learnpath level 1250
    """
    configure_logging(get_settings(), verbose)


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
