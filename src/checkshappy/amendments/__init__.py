"""Amendment engine for revised scripts and shooting schedules."""

from checkshappy.amendments.discrepancies import (
    DiscrepancyType,
    SceneDiscrepancy,
    cross_reference_with_breakdown,
    get_cast_names_for_numbers,
)
from checkshappy.amendments.schedule import (
    DayChangeType,
    ScheduleAmendmentOptions,
    ScheduleAmendmentResult,
    ScheduleChangeType,
    ScheduleDayChange,
    ScheduleSceneChange,
    apply_schedule_amendment,
    compare_schedule_amendment,
    merge_cast_lists,
)
from checkshappy.amendments.script import (
    AmendmentCount,
    AmendmentResult,
    SceneChange,
    ScriptAmendmentOptions,
    apply_amendment_to_scenes,
    clear_amendment_flags,
    clear_scene_amendment,
    compare_script_amendment,
    get_amendment_count,
)
from checkshappy.amendments.text import (
    DEFAULT_THRESHOLDS,
    SimilarityThresholds,
    calculate_text_similarity,
    describe_changes,
    scene_sort_key,
    schedule_scene_key,
    script_scene_key,
)

__all__ = [
    "DEFAULT_THRESHOLDS",
    "AmendmentCount",
    "AmendmentResult",
    "DayChangeType",
    "DiscrepancyType",
    "SceneChange",
    "SceneDiscrepancy",
    "ScheduleAmendmentOptions",
    "ScheduleAmendmentResult",
    "ScheduleChangeType",
    "ScheduleDayChange",
    "ScheduleSceneChange",
    "ScriptAmendmentOptions",
    "SimilarityThresholds",
    "apply_amendment_to_scenes",
    "apply_schedule_amendment",
    "calculate_text_similarity",
    "clear_amendment_flags",
    "clear_scene_amendment",
    "compare_schedule_amendment",
    "compare_script_amendment",
    "cross_reference_with_breakdown",
    "describe_changes",
    "get_amendment_count",
    "get_cast_names_for_numbers",
    "merge_cast_lists",
    "scene_sort_key",
    "schedule_scene_key",
    "script_scene_key",
]
