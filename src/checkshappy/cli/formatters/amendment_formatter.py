"""Formatters for amendment review output."""

from __future__ import annotations

from rich.console import Console, RenderableType
from rich.markup import escape
from rich.table import Table

from checkshappy.amendments import (
    AmendmentCount,
    AmendmentResult,
    SceneDiscrepancy,
    ScheduleAmendmentResult,
)
from checkshappy.cli.formatters.base import OutputFormat, OutputFormatter
from checkshappy.cli.formatters.json_formatter import JsonFormatter
from checkshappy.models import SceneAmendmentStatus

STATUS_STYLES = {
    SceneAmendmentStatus.NEW: "green",
    SceneAmendmentStatus.MODIFIED: "yellow",
    SceneAmendmentStatus.DELETED: "red",
    SceneAmendmentStatus.UNCHANGED: "dim",
}


def _summary_line(summary: str, has_changes: bool) -> str:
    style = "bold cyan" if has_changes else "green"
    return f"[{style}]{escape(summary)}[/{style}]"


class ScriptAmendmentFormatter(OutputFormatter[AmendmentResult]):
    """Formatter for script amendment comparison results."""

    def __init__(
        self, console: Console | None = None, show_unchanged: bool = False
    ) -> None:
        """Initialize formatter.

        Args:
            console: Rich console for output
            show_unchanged: Also list scenes that did not change
        """
        super().__init__(console)
        self.show_unchanged = show_unchanged

    def format(
        self, data: AmendmentResult, format_type: OutputFormat = OutputFormat.TEXT
    ) -> str:
        if format_type == OutputFormat.JSON:
            return JsonFormatter().format(data)
        return self.render_to_string(*self.renderables(data))

    def renderables(self, data: AmendmentResult) -> list[RenderableType]:
        output: list[RenderableType] = [_summary_line(data.summary, data.has_changes)]

        rows = [
            change
            for change in data.changes
            if self.show_unchanged or change.status != SceneAmendmentStatus.UNCHANGED
        ]
        if not rows:
            return output

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Scene", style="cyan", no_wrap=True)
        table.add_column("Status", no_wrap=True)
        table.add_column("Similarity", justify="right")
        table.add_column("Description")

        for change in rows:
            style = STATUS_STYLES[change.status]
            similarity = (
                f"{change.content_similarity}%"
                if change.content_similarity is not None
                else "-"
            )
            table.add_row(
                escape(change.scene_number),
                f"[{style}]{change.status.value}[/{style}]",
                similarity,
                escape(change.change_description),
            )

        output.append(table)
        return output


class AmendmentCountFormatter(OutputFormatter[AmendmentCount]):
    """Formatter for scenes awaiting amendment review."""

    def format(
        self, data: AmendmentCount, format_type: OutputFormat = OutputFormat.TEXT
    ) -> str:
        if format_type == OutputFormat.JSON:
            return JsonFormatter().format(
                {
                    "new": data.new,
                    "modified": data.modified,
                    "deleted": data.deleted,
                    "total": data.total,
                }
            )
        if not data.total:
            return "No amendments pending review"
        return (
            f"{data.total} pending: {data.new} new, "
            f"{data.modified} modified, {data.deleted} deleted"
        )


class ScheduleAmendmentFormatter(OutputFormatter[ScheduleAmendmentResult]):
    """Formatter for schedule amendment comparison results."""

    def format(
        self,
        data: ScheduleAmendmentResult,
        format_type: OutputFormat = OutputFormat.TEXT,
    ) -> str:
        if format_type == OutputFormat.JSON:
            return JsonFormatter().format(data)
        return self.render_to_string(*self.renderables(data))

    def renderables(self, data: ScheduleAmendmentResult) -> list[RenderableType]:
        output: list[RenderableType] = [_summary_line(data.summary, data.has_changes)]

        if data.all_scene_changes:
            table = Table(
                title="Scene changes", show_header=True, header_style="bold magenta"
            )
            table.add_column("Scene", style="cyan", no_wrap=True)
            table.add_column("Change", no_wrap=True)
            table.add_column("Old Day", justify="right")
            table.add_column("New Day", justify="right")
            table.add_column("Description")
            for change in data.all_scene_changes:
                table.add_row(
                    escape(change.scene_number),
                    change.change_type.value,
                    "-" if change.old_day is None else str(change.old_day),
                    "-" if change.new_day is None else str(change.new_day),
                    escape(change.description),
                )
            output.append(table)

        if data.day_changes:
            days = Table(title="Days", show_header=True, header_style="bold magenta")
            days.add_column("Day", justify="right", style="cyan")
            days.add_column("Change", no_wrap=True)
            days.add_column("Description")
            for day_change in data.day_changes:
                days.add_row(
                    str(day_change.day_number),
                    day_change.change_type.value,
                    escape(day_change.description),
                )
            output.append(days)

        return output


class DiscrepancyFormatter(OutputFormatter[list[SceneDiscrepancy]]):
    """Formatter for schedule/breakdown cross-reference results."""

    def format(
        self,
        data: list[SceneDiscrepancy],
        format_type: OutputFormat = OutputFormat.TEXT,
    ) -> str:
        if format_type == OutputFormat.JSON:
            return JsonFormatter().format(data)
        return self.render_to_string(*self.renderables(data))

    def renderables(self, data: list[SceneDiscrepancy]) -> list[RenderableType]:
        if not data:
            return ["[green]Schedule and breakdown agree[/green]"]

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Scene", style="cyan", no_wrap=True)
        table.add_column("Type", no_wrap=True)
        table.add_column("Message")
        for discrepancy in data:
            table.add_row(
                escape(discrepancy.scene_number),
                discrepancy.type.value,
                escape(discrepancy.message),
            )
        return [f"[yellow]{len(data)} discrepancies found[/yellow]", table]
