"""Command-line interface for sitelogic."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError as PydanticValidationError

from . import context
from .config import CalendarConstraints, UnifiedConfig
from .detector import ConflictDetector, select_events
from .exceptions import SitelogicError
from .loader import Schedule, discover_config, load_schedule, write_adjusted_schedule
from .logger import VERBOSITY_DEBUG, VERBOSITY_SILENT, setup_logger
from .models import Perspective
from .principles_cli import principles_app
from .report import analysis_to_dict, format_analysis, format_suggestions
from .resolver import ScheduleResolver

app = typer.Typer(
    name="sitelogic",
    help="Detect, score and resolve trade scheduling conflicts on construction projects",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=VERBOSITY_SILENT,
            max=VERBOSITY_DEBUG,
        ),
    ] = VERBOSITY_SILENT,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: sitelogic_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for sitelogic commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def load_inputs(file: Path) -> tuple[UnifiedConfig, Schedule]:
    """Load config and schedule, turning load errors into a CLI error exit."""
    try:
        config = discover_config(file)
        schedule = load_schedule(file)
    except SitelogicError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    return config, schedule


def _parse_datetime_option(value: str | None, option_name: str) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        typer.echo(
            f"Error: Invalid datetime for --{option_name}: '{value}'. Use YYYY-MM-DDTHH:MM",
            err=True,
        )
        raise typer.Exit(1) from e


def _build_constraints(
    base: CalendarConstraints | None,
    work_days: str | None,
    work_start: int | None,
    work_end: int | None,
) -> CalendarConstraints | None:
    """Overlay CLI calendar options on the configured constraints."""
    values = base.model_dump() if base else {}
    if work_days is not None:
        try:
            values["preferred_work_days"] = [int(d) for d in work_days.split(",") if d.strip()]
        except ValueError as e:
            typer.echo(f"Error: Invalid --work-days '{work_days}'. Use e.g. 1,2,3,4,5", err=True)
            raise typer.Exit(1) from e
    if work_start is not None:
        values["work_hours_start"] = work_start
    if work_end is not None:
        values["work_hours_end"] = work_end
    if not values:
        return None
    try:
        return CalendarConstraints.model_validate(values)
    except PydanticValidationError as e:
        typer.echo(f"Error: Invalid calendar constraints: {e}", err=True)
        raise typer.Exit(1) from e


@app.command()
def analyze(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")],
    *,
    perspective: Annotated[
        Perspective | None,
        typer.Option("--perspective", "-p", help="Which rules to apply (default from config)"),
    ] = None,
    project: Annotated[
        str | None, typer.Option("--project", help="Only analyze events of this project")
    ] = None,
    ignore: Annotated[
        list[str] | None,
        typer.Option("--ignore", help="Conflict id to ignore (repeatable)"),
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output JSON instead of text")] = False,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Detect conflicts in a schedule and score it."""
    config, schedule = load_inputs(file)
    events = select_events(schedule.events, project)

    detector = ConflictDetector(graph=config.trade_graph(), config=config.detection)
    analysis = detector.analyze_schedule(
        events, perspective, schedule.weather, ignored=ignore or None
    )

    if as_json:
        report = json.dumps(analysis_to_dict(analysis), indent=2)
    else:
        report = format_analysis(analysis)

    if output:
        output.write_text(report + "\n", encoding="utf-8")
        typer.echo(f"Analysis written to {output}")
    else:
        typer.echo(report)


@app.command()
def suggest(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the schedule YAML file")],
    *,
    project: Annotated[
        str | None, typer.Option("--project", help="Only reschedule events of this project")
    ] = None,
    work_days: Annotated[
        str | None,
        typer.Option("--work-days", help="Comma-separated ISO weekdays (1=Mon ... 7=Sun)"),
    ] = None,
    work_start: Annotated[
        int | None, typer.Option("--work-start", help="First work hour (0-23)", min=0, max=23)
    ] = None,
    work_end: Annotated[
        int | None, typer.Option("--work-end", help="End of work day hour (1-24)", min=1, max=24)
    ] = None,
    current_time: Annotated[
        str | None,
        typer.Option("--current-time", help="Start of the pass (default: now, ISO format)"),
    ] = None,
    apply: Annotated[
        bool, typer.Option("--apply", help="Write suggested times back into the schedule file")
    ] = False,
) -> None:
    """Suggest a revised schedule that follows trade dependencies."""
    config, schedule = load_inputs(file)
    events = select_events(schedule.events, project)
    constraints = _build_constraints(config.calendar, work_days, work_start, work_end)
    parsed_current_time = _parse_datetime_option(current_time, "current-time")

    resolver = ScheduleResolver(config.trade_graph())
    suggestions = resolver.suggest_schedule(
        events, constraints, current_time=parsed_current_time
    )

    typer.echo(format_suggestions(suggestions, events))

    if apply and suggestions:
        updated = write_adjusted_schedule(file, suggestions)
        typer.echo(f"\nUpdated {updated} events in {file}")


app.add_typer(principles_app, name="principles")


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
