"""Principles CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .detector import select_events
from .exceptions import SitelogicError
from .loader import discover_config, load_schedule
from .principles import PrincipleCategory, PrinciplesEngine
from .report import format_principle_results, format_principles

principles_app = typer.Typer(help="Browse and apply construction principles")


def _engine(schedule_path: Path | None = None) -> PrinciplesEngine:
    try:
        config = discover_config(schedule_path)
    except SitelogicError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    return PrinciplesEngine(config=config.learning)


@principles_app.command("list")
def list_principles(
    category: Annotated[
        PrincipleCategory | None, typer.Option("--category", help="Only show this category")
    ] = None,
) -> None:
    """List known principles."""
    engine = _engine()
    principles = engine.principles
    if category is not None:
        principles = [p for p in principles if p.category == category]
    typer.echo(format_principles(principles))


@principles_app.command("recommend")
def recommend(
    event_type: Annotated[str, typer.Argument(help="Activity type, e.g. foundation")],
) -> None:
    """Show principles relevant to an activity type."""
    engine = _engine()
    typer.echo(format_principles(engine.get_recommendations(event_type)))


@principles_app.command("check")
def check(
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")],
    learned: Annotated[
        Path | None,
        typer.Option("--learned", help="JSON file of learned principles to import first"),
    ] = None,
) -> None:
    """Check every pair of scheduled events against the principles."""
    engine = _engine(file)
    try:
        schedule = load_schedule(file)
    except SitelogicError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if learned is not None:
        if not learned.exists():
            typer.echo(f"Error: File not found: {learned}", err=True)
            raise typer.Exit(1)
        count = engine.import_principles(learned.read_text(encoding="utf-8"))
        typer.echo(f"Imported {count} learned principles")

    results = engine.evaluate_schedule(select_events(schedule.events))
    typer.echo(format_principle_results(results))
