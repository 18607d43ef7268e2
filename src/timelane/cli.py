"""Command-line interface for Timelane."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from . import context
from .config import TimelaneConfig
from .exceptions import TimelaneError
from .lanes import (
    LaneAssignment,
    OptimizationResult,
    assign_lanes,
    calculate_packing_metrics,
    generate_recommendations,
    group_by_lane,
    optimize_lane_assignments,
)
from .loader import discover_config, load_trackers
from .logger import setup_logger
from .models import Tracker
from .resize import ResizeEdge, format_duration, resize
from .viewport import (
    VIEW_MODE_CONFIGS,
    Direction,
    ViewMode,
    create_viewport,
    navigate,
    timeline_start,
)

app = typer.Typer(
    name="timelane",
    help="Lay out date-ranged trackers on non-overlapping timeline lanes",
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
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: timelane_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for timelane commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _parse_date_option(date_str: str | None, option_name: str) -> date | None:
    """Parse a YYYY-MM-DD CLI value, exiting with an error if malformed."""
    if date_str is None:
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        typer.echo(
            f"Error: Invalid {option_name} '{date_str}'. Use YYYY-MM-DD format.",
            err=True,
        )
        raise typer.Exit(1) from None


def _load(file: Path) -> tuple[list[Tracker], TimelaneConfig]:
    """Load trackers and configuration, reporting failures as CLI errors."""
    try:
        trackers = load_trackers(file)
        config = discover_config(file) or TimelaneConfig()
    except (TimelaneError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    return trackers, config


def _layout(
    trackers: list[Tracker], config: TimelaneConfig, optimize: bool
) -> tuple[list[LaneAssignment], OptimizationResult | None]:
    initial = assign_lanes(trackers)
    if not optimize:
        return initial, None
    result = optimize_lane_assignments(trackers, initial, config.optimization)
    return result.optimized_assignments, result


def _format_lanes_text(trackers: list[Tracker], assignments: list[LaneAssignment]) -> str:
    titles = {t.id: t.title for t in trackers}
    lines: list[str] = []
    for lane_index, group in group_by_lane(assignments).items():
        lines.append(f"Lane {lane_index}")
        for a in group:
            lines.append(f"  {a.start_date} - {a.end_date}  {a.tracker_id}  {titles[a.tracker_id]}")
    return "\n".join(lines)


def _format_lanes_yaml(assignments: list[LaneAssignment]) -> str:
    data: dict[str, Any] = {
        "assignments": [
            {
                "tracker_id": a.tracker_id,
                "lane_index": a.lane_index,
                "start_date": a.start_date.isoformat(),
                "end_date": a.end_date.isoformat(),
            }
            for a in sorted(assignments, key=lambda a: (a.lane_index, a.start_date, a.tracker_id))
        ]
    }
    return yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


@app.command()
def assign(
    file: Annotated[Path, typer.Argument(help="Path to the trackers YAML file")] = Path(
        "trackers.yaml"
    ),
    *,
    optimize: Annotated[
        bool, typer.Option("--optimize/--no-optimize", help="Run the lane optimizer")
    ] = True,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        str, typer.Option("--format", "-f", help="Output format (text or yaml)")
    ] = "text",
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Assign trackers to lanes and print the layout."""
    if format not in ("text", "yaml"):
        typer.echo(f"Error: Invalid format '{format}'. Must be 'text' or 'yaml'.", err=True)
        raise typer.Exit(1)

    trackers, config = _load(file)
    assignments, _ = _layout(trackers, config, optimize)

    if format == "yaml":
        rendered = _format_lanes_yaml(assignments)
    else:
        rendered = _format_lanes_text(trackers, assignments)

    if output:
        if not rendered.endswith("\n"):
            rendered += "\n"
        output.write_text(rendered, encoding="utf-8")
        typer.echo(f"Lane assignments written to {output}")
    else:
        typer.echo(rendered)


@app.command()
def metrics(
    file: Annotated[Path, typer.Argument(help="Path to the trackers YAML file")] = Path(
        "trackers.yaml"
    ),
    *,
    optimize: Annotated[
        bool, typer.Option("--optimize/--no-optimize", help="Run the lane optimizer")
    ] = True,
) -> None:
    """Show packing metrics and recommendations."""
    trackers, config = _load(file)
    assignments, result = _layout(trackers, config, optimize)
    packing = result.metrics if result else calculate_packing_metrics(assignments)

    typer.echo(f"Lanes:              {packing.lane_count}")
    typer.echo(f"Packing efficiency: {packing.packing_efficiency:.1%}")
    typer.echo(f"Average gap:        {packing.average_gap_size:.1f} days")
    typer.echo(f"Wasted space:       {packing.total_wasted_space} lane-days")
    typer.echo(f"Balance score:      {packing.balance_score:.2f}")

    if result is None:
        return

    improvements = result.improvements
    typer.echo(
        f"Improvements:       {improvements.lanes_reduced} lanes reduced, "
        f"{improvements.spacing_improved} moves, "
        f"{improvements.conflicts_resolved} conflicts resolved"
    )
    for rec in generate_recommendations(result):
        typer.echo(f"  [{rec.severity}] {rec.message} - {rec.impact}")


@app.command("resize")
def resize_command(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the trackers YAML file")],
    tracker_id: Annotated[str, typer.Argument(help="Tracker to resize")],
    *,
    edge: Annotated[ResizeEdge, typer.Option("--edge", help="Edge being dragged")],
    to: Annotated[str, typer.Option("--date", help="Proposed date (YYYY-MM-DD)")],
    view_mode: Annotated[
        ViewMode | None, typer.Option("--view-mode", help="View mode (sets snap unit)")
    ] = None,
    today: Annotated[
        str | None, typer.Option("--today", help="Reference date for past/future limits")
    ] = None,
) -> None:
    """Preview a constrained resize of one tracker."""
    proposed = _parse_date_option(to, "date")
    reference = _parse_date_option(today, "today")
    assert proposed is not None

    trackers, config = _load(file)
    tracker = next((t for t in trackers if t.id == tracker_id), None)
    if tracker is None:
        typer.echo(f"Error: Unknown tracker '{tracker_id}'", err=True)
        raise typer.Exit(1)

    result = resize(
        tracker, edge, proposed, config.resize, view_mode or config.view_mode, today=reference
    )
    typer.echo(f"{tracker.id}: {result.new_start_date} - {result.new_end_date}")
    typer.echo(f"Duration: {format_duration(result.duration)}")
    if result.is_valid:
        typer.echo("Valid")
        return
    typer.echo("Corrected:")
    for error in result.errors:
        typer.echo(f"  - {error}")


@app.command()
def viewport(
    day: Annotated[str, typer.Argument(help="Date to show (YYYY-MM-DD)")],
    *,
    view_mode: Annotated[ViewMode, typer.Option("--view-mode", help="View mode")] = ViewMode.WEEKLY,
    step: Annotated[
        Direction | None, typer.Option("--navigate", help="Step one unit prev/next")
    ] = None,
) -> None:
    """Show the viewport window containing a date."""
    target = _parse_date_option(day, "date")
    assert target is not None

    start = timeline_start(target, view_mode)
    if step is not None:
        start = navigate(start, step, view_mode)
    window = create_viewport(start, view_mode)
    config = VIEW_MODE_CONFIGS[view_mode]

    typer.echo(f"View mode:      {view_mode.value}")
    typer.echo(f"Window:         {window.start_date} - {window.end_date}")
    typer.echo(f"Pixels per day: {window.pixels_per_day}")
    typer.echo(f"Snap unit:      {config.snap_unit.value}")
    typer.echo(f"Width:          {window.width_pixels}px")


def main() -> int:
    """Main entry point."""
    app()
    return 0


if __name__ == "__main__":
    main()
