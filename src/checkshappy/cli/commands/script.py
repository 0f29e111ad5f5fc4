"""Script amendment commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from checkshappy.amendments import (
    ScriptAmendmentOptions,
    apply_amendment_to_scenes,
    clear_amendment_flags,
    clear_scene_amendment,
    compare_script_amendment,
    get_amendment_count,
)
from checkshappy.cli.formatters.amendment_formatter import (
    AmendmentCountFormatter,
    ScriptAmendmentFormatter,
)
from checkshappy.cli.formatters.base import OutputFormat
from checkshappy.cli.utils.cli_handler import CLIHandler, cli_command
from checkshappy.cli.utils.loaders import (
    load_parsed_scenes,
    load_scenes,
    load_settings,
    write_json,
)
from checkshappy.config import get_logger
from checkshappy.exceptions import ValidationError

logger = get_logger(__name__)
console = Console()

script_app = typer.Typer(
    name="script",
    help="Review and merge script revisions",
    pretty_exceptions_enable=False,
    add_completion=False,
)

ExistingScenesArg = Annotated[
    Path, typer.Argument(help="Current scenes of the production (JSON)")
]
ParsedScenesArg = Annotated[
    Path, typer.Argument(help="Scenes parsed from the revised script (JSON)")
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]
ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration file (YAML, TOML, or JSON)",
    ),
]


@script_app.command(name="compare")
@cli_command
def compare_command(
    existing: ExistingScenesArg,
    parsed: ParsedScenesArg,
    json_output: JsonOption = False,
    show_unchanged: Annotated[
        bool, typer.Option("--show-unchanged", help="List unchanged scenes too")
    ] = False,
    config: ConfigOption = None,
) -> None:
    """Compare a revised script against the production's scenes.

    Examples:
        checkshappy script compare scenes.json revision.json
        checkshappy script compare scenes.json revision.json --json
    """
    settings = load_settings(config)
    result = compare_script_amendment(
        load_scenes(existing),
        load_parsed_scenes(parsed),
        settings.similarity_thresholds(),
    )

    formatter = ScriptAmendmentFormatter(console, show_unchanged=show_unchanged)
    formatter.print(result, OutputFormat.JSON if json_output else OutputFormat.TEXT)


@script_app.command(name="apply")
@cli_command
def apply_command(
    existing: ExistingScenesArg,
    parsed: ParsedScenesArg,
    output: Annotated[
        Path, typer.Option("--output", "-o", help="Where to write the merged scenes")
    ],
    include_new: Annotated[
        bool, typer.Option("--new/--no-new", help="Add new scenes")
    ] = True,
    include_modified: Annotated[
        bool,
        typer.Option("--modified/--no-modified", help="Update modified scenes"),
    ] = True,
    include_deleted: Annotated[
        bool,
        typer.Option("--deleted/--no-deleted", help="Flag removed scenes as deleted"),
    ] = False,
    json_output: JsonOption = False,
    config: ConfigOption = None,
) -> None:
    """Merge the accepted changes of a revised script into the scenes.

    Breakdown data (confirmed cast, synopsis, filming status) is preserved.
    Removed scenes are only flagged, never dropped.
    """
    handler = CLIHandler(console)
    settings = load_settings(config)
    scenes = load_scenes(existing)

    result = compare_script_amendment(
        scenes, load_parsed_scenes(parsed), settings.similarity_thresholds()
    )
    merged = apply_amendment_to_scenes(
        scenes,
        result,
        ScriptAmendmentOptions(
            include_new=include_new,
            include_modified=include_modified,
            include_deleted=include_deleted,
        ),
    )
    write_json(output, merged)

    count = get_amendment_count(merged)
    handler.handle_success(
        f"Wrote {len(merged)} scenes to {output} ({result.summary})",
        data={
            "output": str(output),
            "scenes": len(merged),
            "summary": result.summary,
            "pending": {
                "new": count.new,
                "modified": count.modified,
                "deleted": count.deleted,
            },
        },
        json_output=json_output,
    )


@script_app.command(name="clear-flags")
@cli_command
def clear_flags_command(
    scenes_file: Annotated[Path, typer.Argument(help="Scenes to acknowledge (JSON)")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: overwrite input)"),
    ] = None,
    scene_id: Annotated[
        str | None,
        typer.Option("--scene-id", help="Only acknowledge the scene with this id"),
    ] = None,
    json_output: JsonOption = False,
) -> None:
    """Acknowledge reviewed amendments by clearing their flags."""
    handler = CLIHandler(console)
    scenes = load_scenes(scenes_file)

    if scene_id is not None:
        if not any(scene.id == scene_id for scene in scenes):
            raise ValidationError(
                message=f"No scene with id '{scene_id}' in {scenes_file}",
                hint="Use the scene's id field, not its scene number",
            )
        cleared = clear_scene_amendment(scenes, scene_id)
    else:
        cleared = clear_amendment_flags(scenes)

    destination = output or scenes_file
    write_json(destination, cleared)
    handler.handle_success(
        f"Cleared amendment flags in {destination}",
        data={"output": str(destination), "sceneId": scene_id},
        json_output=json_output,
    )


@script_app.command(name="pending")
@cli_command
def pending_command(
    scenes_file: Annotated[Path, typer.Argument(help="Scenes to inspect (JSON)")],
    json_output: JsonOption = False,
) -> None:
    """Count scenes whose amendments still await review."""
    count = get_amendment_count(load_scenes(scenes_file))
    AmendmentCountFormatter(console).print(
        count, OutputFormat.JSON if json_output else OutputFormat.TEXT
    )
