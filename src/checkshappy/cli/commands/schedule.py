"""Shooting schedule amendment commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from checkshappy.amendments import (
    ScheduleAmendmentOptions,
    apply_schedule_amendment,
    compare_schedule_amendment,
    cross_reference_with_breakdown,
)
from checkshappy.cli.formatters.amendment_formatter import (
    DiscrepancyFormatter,
    ScheduleAmendmentFormatter,
)
from checkshappy.cli.formatters.base import OutputFormat
from checkshappy.cli.utils.cli_handler import CLIHandler, cli_command
from checkshappy.cli.utils.loaders import load_scenes, load_schedule, write_json
from checkshappy.config import get_logger

logger = get_logger(__name__)
console = Console()

schedule_app = typer.Typer(
    name="schedule",
    help="Review and merge shooting schedule revisions",
    pretty_exceptions_enable=False,
    add_completion=False,
)

ExistingScheduleArg = Annotated[
    Path, typer.Argument(help="Schedule the production is working from (JSON)")
]
NewScheduleArg = Annotated[Path, typer.Argument(help="Re-issued schedule (JSON)")]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


@schedule_app.command(name="compare")
@cli_command
def compare_command(
    existing: ExistingScheduleArg,
    new: NewScheduleArg,
    json_output: JsonOption = False,
) -> None:
    """Compare a re-issued schedule against the current one.

    Examples:
        checkshappy schedule compare schedule.json schedule-v2.json
    """
    result = compare_schedule_amendment(load_schedule(existing), load_schedule(new))
    ScheduleAmendmentFormatter(console).print(
        result, OutputFormat.JSON if json_output else OutputFormat.TEXT
    )


@schedule_app.command(name="apply")
@cli_command
def apply_command(
    existing: ExistingScheduleArg,
    new: NewScheduleArg,
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Where to write the merged schedule")
    ],
    include_added: Annotated[
        bool, typer.Option("--added/--no-added", help="Accept added scenes")
    ] = True,
    include_removed: Annotated[
        bool, typer.Option("--removed/--no-removed", help="Accept removed scenes")
    ] = True,
    include_moved: Annotated[
        bool, typer.Option("--moved/--no-moved", help="Accept scenes moved to other days")
    ] = True,
    include_cast: Annotated[
        bool, typer.Option("--cast/--no-cast", help="Accept cast changes")
    ] = True,
    include_timing: Annotated[
        bool, typer.Option("--timing/--no-timing", help="Accept timing changes")
    ] = True,
    json_output: JsonOption = False,
) -> None:
    """Merge a re-issued schedule, reverting the declined kinds of change.

    The cast list is always merged additively.
    """
    handler = CLIHandler(console)
    existing_schedule = load_schedule(existing)
    new_schedule = load_schedule(new)

    result = compare_schedule_amendment(existing_schedule, new_schedule)
    merged = apply_schedule_amendment(
        existing_schedule,
        new_schedule,
        result,
        ScheduleAmendmentOptions(
            include_added_scenes=include_added,
            include_removed_scenes=include_removed,
            include_moved_scenes=include_moved,
            include_cast_changes=include_cast,
            include_timing_changes=include_timing,
        ),
    )
    write_json(output, merged)

    handler.handle_success(
        f"Wrote merged schedule ({len(merged.days)} days) to {output}",
        data={
            "output": str(output),
            "days": len(merged.days),
            "castMembers": len(merged.cast_list),
            "summary": result.summary,
        },
        json_output=json_output,
    )


@schedule_app.command(name="check")
@cli_command
def check_command(
    schedule_file: Annotated[Path, typer.Argument(help="Shooting schedule (JSON)")],
    scenes_file: Annotated[Path, typer.Argument(help="Breakdown scenes (JSON)")],
    json_output: JsonOption = False,
) -> None:
    """Cross-reference the schedule with the script breakdown."""
    discrepancies = cross_reference_with_breakdown(
        load_schedule(schedule_file), load_scenes(scenes_file)
    )
    DiscrepancyFormatter(console).print(
        discrepancies, OutputFormat.JSON if json_output else OutputFormat.TEXT
    )
