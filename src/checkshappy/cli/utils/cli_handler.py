"""Unified CLI handler for standardized error handling and output."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from checkshappy.cli.formatters.json_formatter import JsonFormatter
from checkshappy.config import get_logger
from checkshappy.exceptions import ChecksHappyError, ValidationError

logger = get_logger(__name__)


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> NoReturn:
        """Handle and display errors consistently.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use
        """
        if isinstance(error, ChecksHappyError):
            logger.error(
                "Command failed",
                error_type=type(error).__name__,
                message=error.message,
                hint=error.hint,
                details=error.details,
                exit_code=exit_code,
            )
        else:
            logger.error(
                "Command failed",
                error_type=type(error).__name__,
                error=str(error),
                exit_code=exit_code,
                exc_info=error,
            )

        if json_output:
            self.console.print_json(
                self.json_formatter.format_error_response(error, exit_code)
            )
        elif isinstance(error, ChecksHappyError):
            label = "Validation Error" if isinstance(error, ValidationError) else "Error"
            self.console.print(f"[red]{label}: {escape(error.message)}[/red]")
            if error.hint:
                self.console.print(f"[yellow]→ {escape(error.hint)}[/yellow]")
        else:
            self.console.print(f"[red]Error: {escape(str(error))}[/red]")

        raise typer.Exit(exit_code)

    def handle_success(
        self, message: str, data: Any = None, json_output: bool = False
    ) -> None:
        """Handle success responses consistently.

        Args:
            message: Success message
            data: Optional data to include
            json_output: Whether to output JSON
        """
        if json_output:
            self.console.print_json(self.json_formatter.format_success(message, data))
        else:
            self.console.print(f"[green]{escape(message)}[/green]")


def cli_command(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator for CLI commands with standardized error handling.

    Args:
        func: Command function to decorate

    Returns:
        Wrapped function
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        handler = CLIHandler()
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            handler.handle_error(e, kwargs.get("json_output", False))

    return wrapper
