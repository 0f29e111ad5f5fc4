"""Checks Happy CLI commands."""

from __future__ import annotations

from checkshappy.cli.commands.schedule import schedule_app
from checkshappy.cli.commands.script import script_app

__all__ = [
    "schedule_app",
    "script_app",
]
