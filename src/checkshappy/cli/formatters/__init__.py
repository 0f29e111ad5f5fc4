"""Output formatters for Checks Happy CLI."""

from __future__ import annotations

from checkshappy.cli.formatters.amendment_formatter import (
    AmendmentCountFormatter,
    DiscrepancyFormatter,
    ScheduleAmendmentFormatter,
    ScriptAmendmentFormatter,
)
from checkshappy.cli.formatters.base import OutputFormat, OutputFormatter
from checkshappy.cli.formatters.json_formatter import JsonFormatter

__all__ = [
    "AmendmentCountFormatter",
    "DiscrepancyFormatter",
    "JsonFormatter",
    "OutputFormat",
    "OutputFormatter",
    "ScheduleAmendmentFormatter",
    "ScriptAmendmentFormatter",
]
