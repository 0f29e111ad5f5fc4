"""Main CLI entry point."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from checkshappy import __version__
from checkshappy.cli.commands import schedule_app, script_app
from checkshappy.cli.formatters.json_formatter import JsonFormatter
from checkshappy.config import (
    configure_logging,
    get_logger,
    get_settings_for_cli,
    set_settings,
)

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="checkshappy",
    help="Review script and shooting schedule revisions against your breakdown",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(script_app, name="script")
app.add_typer(schedule_app, name="schedule")


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show Checks Happy version."""
    version_info = {
        "name": "Checks Happy",
        "version": __version__,
        "description": "Script and schedule amendment engine",
    }

    if json_output:
        # Output pure JSON without ANSI escape codes
        print(JsonFormatter().format(version_info))
    else:
        console.print(f"Checks Happy v{version_info['version']}")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging (INFO level)"),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging", envvar="CHECKSHAPPY_DEBUG"),
    ] = False,
) -> None:
    """Configure global options."""
    if debug:
        overrides = {"log_level": "DEBUG", "debug": True}
    elif verbose:
        overrides = {"log_level": "INFO"}
    else:
        return

    settings = get_settings_for_cli(cli_overrides=overrides)
    set_settings(settings)
    configure_logging(settings)
    logger.debug("Logging reconfigured from command line", **overrides)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
