"""Base formatter classes for CLI output."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar

from rich.console import Console, RenderableType
from rich.markup import escape

T = TypeVar("T")


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"


class OutputFormatter(ABC, Generic[T]):
    """Base class for output formatters."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize formatter.

        Args:
            console: Rich console for output. If None, creates new instance.
        """
        self.console = console or Console()

    @abstractmethod
    def format(self, data: T, format_type: OutputFormat = OutputFormat.TEXT) -> str:
        """Format data for output.

        Args:
            data: Data to format
            format_type: Output format type

        Returns:
            Formatted string
        """

    def renderables(self, data: T) -> list[RenderableType]:
        """Rich renderables making up the text view of ``data``."""
        return [escape(self.format(data, OutputFormat.TEXT))]

    def print(self, data: T, format_type: OutputFormat = OutputFormat.TEXT) -> None:
        """Format and print data to console.

        Args:
            data: Data to format and print
            format_type: Output format type
        """
        if format_type == OutputFormat.JSON:
            self.console.print_json(self.format(data, format_type))
            return
        for renderable in self.renderables(data):
            self.console.print(renderable)

    def render_to_string(self, *renderables: RenderableType, width: int = 120) -> str:
        """Render renderables to plain text without touching the live console."""
        string_io = io.StringIO()
        temp_console = Console(file=string_io, width=width, force_terminal=False)
        for renderable in renderables:
            temp_console.print(renderable)
        return string_io.getvalue()

    def format_error(self, error: str | Exception) -> str:
        """Format error message.

        Args:
            error: Error message or exception

        Returns:
            Formatted error string
        """
        error_msg = str(error) if isinstance(error, Exception) else error
        return f"[red]Error: {escape(error_msg)}[/red]"

    def print_error(self, error: str | Exception) -> None:
        """Format and print error to console."""
        self.console.print(self.format_error(error))
