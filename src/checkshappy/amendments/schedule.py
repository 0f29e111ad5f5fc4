"""Schedule amendment engine.

Compares a re-issued shooting schedule against the one the production is
working from. Unlike scripts, schedules are replaced wholesale on every
revision, so the merge takes the new schedule as its base and reverts the
categories of change the user declines, field by field.

A single scene can carry several changes at once (moved to another day and
re-cast), so changes are emitted as independent records per scene.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from checkshappy.amendments.text import join_summary, pluralize, schedule_scene_key
from checkshappy.config import get_logger
from checkshappy.models import (
    ProductionSchedule,
    ScheduleCastMember,
    ScheduleDay,
    ScheduleSceneEntry,
)

logger = get_logger(__name__)


class ScheduleChangeType(str, Enum):
    """Kinds of change detected between two schedule revisions."""

    SCENE_ADDED = "scene_added"
    SCENE_REMOVED = "scene_removed"
    SCENE_MOVED = "scene_moved"
    CAST_CHANGED = "cast_changed"
    TIMING_CHANGED = "timing_changed"
    DAY_ADDED = "day_added"
    DAY_REMOVED = "day_removed"


class DayChangeType(str, Enum):
    """Kinds of change at shoot-day level."""

    DAY_ADDED = "day_added"
    DAY_REMOVED = "day_removed"
    DAY_MODIFIED = "day_modified"


@dataclass(frozen=True)
class ScheduleSceneChange:
    """One detected change to one scheduled scene."""

    scene_number: str
    change_type: ScheduleChangeType
    description: str
    old_day: int | None = None
    new_day: int | None = None
    old_entry: ScheduleSceneEntry | None = None
    new_entry: ScheduleSceneEntry | None = None
    cast_added: tuple[int, ...] = ()
    cast_removed: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        data: dict[str, Any] = {
            "sceneNumber": self.scene_number,
            "changeType": self.change_type.value,
            "description": self.description,
        }
        if self.old_day is not None:
            data["oldDay"] = self.old_day
        if self.new_day is not None:
            data["newDay"] = self.new_day
        if self.old_entry is not None:
            data["oldEntry"] = self.old_entry.to_dict()
        if self.new_entry is not None:
            data["newEntry"] = self.new_entry.to_dict()
        if self.change_type == ScheduleChangeType.CAST_CHANGED:
            data["castAdded"] = list(self.cast_added)
            data["castRemoved"] = list(self.cast_removed)
        return data


@dataclass(frozen=True)
class ScheduleDayChange:
    """A shoot day that was added, removed or had scenes change."""

    day_number: int
    change_type: DayChangeType
    description: str
    scene_changes: tuple[ScheduleSceneChange, ...] = ()
    old_day: ScheduleDay | None = None
    new_day: ScheduleDay | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        return {
            "dayNumber": self.day_number,
            "changeType": self.change_type.value,
            "description": self.description,
            "sceneChanges": [change.to_dict() for change in self.scene_changes],
        }


@dataclass(frozen=True)
class ScheduleAmendmentResult:
    """Outcome of comparing two schedule revisions."""

    day_changes: tuple[ScheduleDayChange, ...]
    all_scene_changes: tuple[ScheduleSceneChange, ...]
    added_scenes: tuple[ScheduleSceneChange, ...]
    removed_scenes: tuple[ScheduleSceneChange, ...]
    moved_scenes: tuple[ScheduleSceneChange, ...]
    cast_changes: tuple[ScheduleSceneChange, ...]
    timing_changes: tuple[ScheduleSceneChange, ...]
    added_days: tuple[ScheduleDayChange, ...]
    removed_days: tuple[ScheduleDayChange, ...]
    summary: str
    has_changes: bool

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        return {
            "summary": self.summary,
            "hasChanges": self.has_changes,
            "sceneChanges": [change.to_dict() for change in self.all_scene_changes],
            "dayChanges": [change.to_dict() for change in self.day_changes],
        }


@dataclass(frozen=True)
class ScheduleAmendmentOptions:
    """Which categories of schedule change to accept.

    Every category defaults to accepted: a re-issued schedule is
    authoritative unless the user opts out.
    """

    include_added_scenes: bool = True
    include_removed_scenes: bool = True
    include_moved_scenes: bool = True
    include_cast_changes: bool = True
    include_timing_changes: bool = True


class _Placement(NamedTuple):
    day: ScheduleDay
    entry: ScheduleSceneEntry


def _build_scene_map(schedule: ProductionSchedule) -> dict[str, _Placement]:
    """Map normalised scene number to the day and entry holding it.

    A scene number repeated across days resolves to its last occurrence.
    """
    scene_map: dict[str, _Placement] = {}
    for day in schedule.days:
        for entry in day.scenes:
            scene_map[schedule_scene_key(entry.scene_number)] = _Placement(day, entry)
    return scene_map


def _detect_cast_changes(
    old_entry: ScheduleSceneEntry, new_entry: ScheduleSceneEntry
) -> tuple[list[int], list[int]]:
    """Return (added, removed) cast numbers, preserving listing order."""
    old_cast = dict.fromkeys(old_entry.cast_numbers)
    new_cast = dict.fromkeys(new_entry.cast_numbers)
    added = [number for number in new_cast if number not in old_cast]
    removed = [number for number in old_cast if number not in new_cast]
    return added, removed


def _or_none(value: object) -> str:
    return "none" if value is None or value == "" else str(value)


def _describe_timing_changes(
    old_entry: ScheduleSceneEntry, new_entry: ScheduleSceneEntry
) -> list[str]:
    """List each changed timing field as ``field: old → new``."""
    details: list[str] = []
    if (old_entry.estimated_time or "") != (new_entry.estimated_time or ""):
        details.append(
            f"time: {_or_none(old_entry.estimated_time)} → "
            f"{_or_none(new_entry.estimated_time)}"
        )
    if old_entry.shoot_order != new_entry.shoot_order:
        details.append(
            f"order: {_or_none(old_entry.shoot_order)} → "
            f"{_or_none(new_entry.shoot_order)}"
        )
    if (old_entry.pages or "") != (new_entry.pages or ""):
        details.append(
            f"pages: {_or_none(old_entry.pages)} → {_or_none(new_entry.pages)}"
        )
    return details


def _scene_count(day: ScheduleDay) -> str:
    return pluralize(len(day.scenes), "scene")


def compare_schedule_amendment(
    existing_schedule: ProductionSchedule,
    new_schedule: ProductionSchedule,
) -> ScheduleAmendmentResult:
    """Compare a new schedule against the existing schedule.

    Args:
        existing_schedule: Schedule the production is working from
        new_schedule: Newly parsed schedule revision

    Returns:
        ScheduleAmendmentResult with scene- and day-level changes
    """
    existing_map = _build_scene_map(existing_schedule)
    new_map = _build_scene_map(new_schedule)
    scene_changes: list[ScheduleSceneChange] = []

    for key, (new_day, new_entry) in new_map.items():
        number = new_entry.scene_number
        existing = existing_map.get(key)

        if existing is None:
            scene_changes.append(
                ScheduleSceneChange(
                    scene_number=number,
                    change_type=ScheduleChangeType.SCENE_ADDED,
                    description=f"Scene {number} added to Day {new_day.day_number}",
                    new_day=new_day.day_number,
                    new_entry=new_entry,
                )
            )
            continue

        old_day, old_entry = existing
        same_day = old_day.day_number == new_day.day_number

        if not same_day:
            scene_changes.append(
                ScheduleSceneChange(
                    scene_number=number,
                    change_type=ScheduleChangeType.SCENE_MOVED,
                    description=(
                        f"Scene {number} moved from Day {old_day.day_number} "
                        f"to Day {new_day.day_number}"
                    ),
                    old_day=old_day.day_number,
                    new_day=new_day.day_number,
                    old_entry=old_entry,
                    new_entry=new_entry,
                )
            )

        added, removed = _detect_cast_changes(old_entry, new_entry)
        if added or removed:
            parts = []
            if added:
                parts.append(f"{len(added)} cast added")
            if removed:
                parts.append(f"{len(removed)} cast removed")
            scene_changes.append(
                ScheduleSceneChange(
                    scene_number=number,
                    change_type=ScheduleChangeType.CAST_CHANGED,
                    description=f"Scene {number}: {', '.join(parts)}",
                    old_day=old_day.day_number,
                    new_day=new_day.day_number,
                    old_entry=old_entry,
                    new_entry=new_entry,
                    cast_added=tuple(added),
                    cast_removed=tuple(removed),
                )
            )

        # A move already accounts for the new slot, so timing is same-day only
        if same_day:
            details = _describe_timing_changes(old_entry, new_entry)
            if details:
                scene_changes.append(
                    ScheduleSceneChange(
                        scene_number=number,
                        change_type=ScheduleChangeType.TIMING_CHANGED,
                        description=f"Scene {number}: {', '.join(details)}",
                        old_day=old_day.day_number,
                        new_day=new_day.day_number,
                        old_entry=old_entry,
                        new_entry=new_entry,
                    )
                )

    for key, (old_day, old_entry) in existing_map.items():
        if key not in new_map:
            number = old_entry.scene_number
            scene_changes.append(
                ScheduleSceneChange(
                    scene_number=number,
                    change_type=ScheduleChangeType.SCENE_REMOVED,
                    description=f"Scene {number} removed from Day {old_day.day_number}",
                    old_day=old_day.day_number,
                    old_entry=old_entry,
                )
            )

    day_changes = _detect_day_changes(existing_schedule, new_schedule, scene_changes)

    def _of_type(change_type: ScheduleChangeType) -> tuple[ScheduleSceneChange, ...]:
        return tuple(c for c in scene_changes if c.change_type == change_type)

    added_scenes = _of_type(ScheduleChangeType.SCENE_ADDED)
    removed_scenes = _of_type(ScheduleChangeType.SCENE_REMOVED)
    moved_scenes = _of_type(ScheduleChangeType.SCENE_MOVED)
    cast_changes = _of_type(ScheduleChangeType.CAST_CHANGED)
    timing_changes = _of_type(ScheduleChangeType.TIMING_CHANGED)
    added_days = tuple(
        c for c in day_changes if c.change_type == DayChangeType.DAY_ADDED
    )
    removed_days = tuple(
        c for c in day_changes if c.change_type == DayChangeType.DAY_REMOVED
    )

    summary = join_summary(
        [
            pluralize(len(added_scenes), "scene", "added") if added_scenes else "",
            pluralize(len(removed_scenes), "scene", "removed")
            if removed_scenes
            else "",
            pluralize(len(moved_scenes), "scene", "moved") if moved_scenes else "",
            pluralize(len(cast_changes), "cast change") if cast_changes else "",
            pluralize(len(timing_changes), "timing change") if timing_changes else "",
            pluralize(len(added_days), "day", "added") if added_days else "",
            pluralize(len(removed_days), "day", "removed") if removed_days else "",
        ]
    )

    logger.debug(
        "Compared schedule amendment",
        scene_changes=len(scene_changes),
        day_changes=len(day_changes),
        added=len(added_scenes),
        removed=len(removed_scenes),
        moved=len(moved_scenes),
        cast=len(cast_changes),
        timing=len(timing_changes),
    )

    return ScheduleAmendmentResult(
        day_changes=tuple(day_changes),
        all_scene_changes=tuple(scene_changes),
        added_scenes=added_scenes,
        removed_scenes=removed_scenes,
        moved_scenes=moved_scenes,
        cast_changes=cast_changes,
        timing_changes=timing_changes,
        added_days=added_days,
        removed_days=removed_days,
        summary=summary,
        has_changes=bool(scene_changes or day_changes),
    )


def _detect_day_changes(
    existing_schedule: ProductionSchedule,
    new_schedule: ProductionSchedule,
    scene_changes: list[ScheduleSceneChange],
) -> list[ScheduleDayChange]:
    """Classify shoot days and attach the scene changes that touch them."""
    existing_days = {day.day_number: day for day in existing_schedule.days}
    new_days = {day.day_number: day for day in new_schedule.days}
    day_changes: list[ScheduleDayChange] = []

    for number, day in new_days.items():
        if number not in existing_days:
            day_changes.append(
                ScheduleDayChange(
                    day_number=number,
                    change_type=DayChangeType.DAY_ADDED,
                    description=f"Day {number} added ({_scene_count(day)})",
                    scene_changes=tuple(
                        c for c in scene_changes if c.new_day == number
                    ),
                    new_day=day,
                )
            )

    for number, day in existing_days.items():
        if number not in new_days:
            day_changes.append(
                ScheduleDayChange(
                    day_number=number,
                    change_type=DayChangeType.DAY_REMOVED,
                    description=f"Day {number} removed ({_scene_count(day)})",
                    scene_changes=tuple(
                        c for c in scene_changes if c.old_day == number
                    ),
                    old_day=day,
                )
            )

    for number, day in new_days.items():
        if number in existing_days:
            touching = tuple(
                c for c in scene_changes if number in (c.new_day, c.old_day)
            )
            if touching:
                day_changes.append(
                    ScheduleDayChange(
                        day_number=number,
                        change_type=DayChangeType.DAY_MODIFIED,
                        description=(
                            f"Day {number}: {pluralize(len(touching), 'change')}"
                        ),
                        scene_changes=touching,
                        old_day=existing_days[number],
                        new_day=day,
                    )
                )

    day_changes.sort(key=lambda change: change.day_number)
    return day_changes


def _keys(changes: Iterable[ScheduleSceneChange]) -> set[str]:
    return {schedule_scene_key(change.scene_number) for change in changes}


def apply_schedule_amendment(
    existing_schedule: ProductionSchedule,
    new_schedule: ProductionSchedule,
    amendment_result: ScheduleAmendmentResult,
    options: ScheduleAmendmentOptions | None = None,
) -> ProductionSchedule:
    """Merge a schedule revision, reverting the declined categories of change.

    The new schedule's day structure is the base. Declined changes are undone
    against the old schedule:

    - added scenes are dropped;
    - removed scenes go back onto their original day, and days dropped from
      the new schedule come back with their scenes;
    - moved scenes are appended to their original day with their old time,
      shoot order and pages;
    - cast and timing fields are restored from the old entry.

    Cast members are never dropped: the merged cast list is the new list plus
    any old members it no longer names.

    Args:
        existing_schedule: Schedule the production is working from
        new_schedule: Newly parsed schedule revision
        amendment_result: Result of compare_schedule_amendment
        options: Which change categories to accept

    Returns:
        The merged schedule; neither input is modified
    """
    options = options or ScheduleAmendmentOptions()
    existing_map = _build_scene_map(existing_schedule)
    new_map = _build_scene_map(new_schedule)
    existing_days = {day.day_number: day for day in existing_schedule.days}
    new_day_numbers = {day.day_number for day in new_schedule.days}

    skip_added = (
        set() if options.include_added_scenes else _keys(amendment_result.added_scenes)
    )
    revert_moves = (
        set() if options.include_moved_scenes else _keys(amendment_result.moved_scenes)
    )
    keep_old_cast = (
        set() if options.include_cast_changes else _keys(amendment_result.cast_changes)
    )
    keep_old_timing = (
        set()
        if options.include_timing_changes
        else _keys(amendment_result.timing_changes)
    )

    result_days: dict[int, ScheduleDay] = {}
    reverted: dict[int, list[ScheduleSceneEntry]] = {}
    placed: set[str] = set()

    for new_day in new_schedule.days:
        scenes: list[ScheduleSceneEntry] = []

        for entry in new_day.scenes:
            key = schedule_scene_key(entry.scene_number)
            if key in skip_added:
                continue

            old = existing_map.get(key)
            update: dict[str, Any] = {}
            if old is not None and key in keep_old_cast:
                update["cast_numbers"] = list(old.entry.cast_numbers)
            if old is not None and key in keep_old_timing:
                update["estimated_time"] = old.entry.estimated_time
                update["shoot_order"] = old.entry.shoot_order
                update["pages"] = old.entry.pages
            if old is not None and key in revert_moves:
                # Appended to its old day with the old timing fields
                update["estimated_time"] = old.entry.estimated_time
                update["shoot_order"] = old.entry.shoot_order
                update["pages"] = old.entry.pages
                reverted.setdefault(old.day.day_number, []).append(
                    entry.model_copy(update=update, deep=True)
                )
                continue

            scenes.append(entry.model_copy(update=update, deep=True))
            placed.add(key)

        if not options.include_removed_scenes and new_day.day_number in existing_days:
            for old_entry in existing_days[new_day.day_number].scenes:
                key = schedule_scene_key(old_entry.scene_number)
                if key not in new_map:
                    scenes.append(old_entry.model_copy(deep=True))
                    placed.add(key)

        result_days[new_day.day_number] = new_day.model_copy(
            update={"scenes": scenes}, deep=True
        )

    moved_back = {
        schedule_scene_key(entry.scene_number)
        for entries in reverted.values()
        for entry in entries
    }

    if not options.include_removed_scenes:
        for number, old_day in existing_days.items():
            if number in new_day_numbers:
                continue
            # Scenes accepted elsewhere in the new schedule stay there
            result_days[number] = old_day.model_copy(
                update={
                    "scenes": [
                        entry.model_copy(deep=True)
                        for entry in old_day.scenes
                        if schedule_scene_key(entry.scene_number) not in placed
                        and schedule_scene_key(entry.scene_number) not in moved_back
                    ]
                },
                deep=True,
            )

    for number, entries in reverted.items():
        if number in result_days:
            result_days[number].scenes.extend(entries)
        else:
            result_days[number] = existing_days[number].model_copy(
                update={"scenes": entries}, deep=True
            )

    days = sorted(result_days.values(), key=lambda day: day.day_number)

    logger.info(
        "Applied schedule amendment",
        days=len(days),
        skipped_added=len(skip_added),
        reverted_moves=len(moved_back),
        kept_cast=len(keep_old_cast),
        kept_timing=len(keep_old_timing),
        include_removed=options.include_removed_scenes,
    )

    return new_schedule.model_copy(
        update={
            "days": days,
            "cast_list": merge_cast_lists(
                existing_schedule.cast_list, new_schedule.cast_list
            ),
        },
        deep=True,
    )


def merge_cast_lists(
    old_list: Iterable[ScheduleCastMember],
    new_list: Iterable[ScheduleCastMember],
) -> list[ScheduleCastMember]:
    """Use the new cast list as base and keep any old members it omits."""
    merged = [member.model_copy(deep=True) for member in new_list]
    new_numbers = {member.number for member in merged}
    merged.extend(
        member.model_copy(deep=True)
        for member in old_list
        if member.number not in new_numbers
    )
    return sorted(merged, key=lambda member: member.number)
