"""Checks Happy: continuity tracking for hair & makeup departments.

This package holds the amendment engine that reconciles revised scripts and
re-issued shooting schedules with the breakdown a department has already
built, keeping manually entered continuity data intact.
"""

from .amendments import (
    AmendmentResult,
    ScheduleAmendmentOptions,
    ScheduleAmendmentResult,
    ScriptAmendmentOptions,
    apply_amendment_to_scenes,
    apply_schedule_amendment,
    clear_amendment_flags,
    compare_schedule_amendment,
    compare_script_amendment,
)
from .config import ChecksHappySettings, get_logger, get_settings
from .models import ParsedScene, ProductionSchedule, Scene

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "AmendmentResult",
    "ChecksHappySettings",
    "ParsedScene",
    "ProductionSchedule",
    "Scene",
    "ScheduleAmendmentOptions",
    "ScheduleAmendmentResult",
    "ScriptAmendmentOptions",
    "__version__",
    "apply_amendment_to_scenes",
    "apply_schedule_amendment",
    "clear_amendment_flags",
    "compare_schedule_amendment",
    "compare_script_amendment",
    "get_logger",
    "get_settings",
]
