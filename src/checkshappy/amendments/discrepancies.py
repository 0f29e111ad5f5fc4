"""Cross-reference the shooting schedule against the script breakdown."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from checkshappy.config import get_logger
from checkshappy.models import ProductionSchedule, Scene, ScheduleSceneEntry

logger = get_logger(__name__)


class DiscrepancyType(str, Enum):
    """Ways the schedule and the breakdown can disagree about a scene."""

    SCENE_NOT_IN_BREAKDOWN = "scene_not_in_breakdown"
    SCENE_NOT_IN_SCHEDULE = "scene_not_in_schedule"
    INT_EXT_MISMATCH = "int_ext_mismatch"
    CHARACTER_MISMATCH = "character_mismatch"


@dataclass(frozen=True)
class SceneDiscrepancy:
    """A disagreement between the schedule and the breakdown."""

    scene_number: str
    type: DiscrepancyType
    message: str
    schedule_value: str | None = None
    breakdown_value: str | None = None
    schedule_cast: tuple[str, ...] = field(default_factory=tuple)
    breakdown_cast: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        data: dict[str, Any] = {
            "sceneNumber": self.scene_number,
            "type": self.type.value,
            "message": self.message,
        }
        if self.schedule_value is not None:
            data["scheduleValue"] = self.schedule_value
        if self.breakdown_value is not None:
            data["breakdownValue"] = self.breakdown_value
        if self.type == DiscrepancyType.CHARACTER_MISMATCH:
            data["scheduleCast"] = list(self.schedule_cast)
            data["breakdownCast"] = list(self.breakdown_cast)
        return data


def get_cast_names_for_numbers(
    schedule: ProductionSchedule, cast_numbers: Iterable[int]
) -> list[str]:
    """Resolve cast numbers to character names (actor name as fallback)."""
    members = {member.number: member for member in schedule.cast_list}
    names: list[str] = []
    for number in cast_numbers:
        member = members.get(number)
        if member is None:
            names.append(f"Cast #{number}")
        else:
            names.append(member.character or member.name or f"Cast #{number}")
    return names


def _matches_any(name: str, others: Iterable[str]) -> bool:
    """Loose name match tolerating "JOHN" vs "JOHN SMITH" in either direction."""
    return any(other in name or name in other for other in others)


def cross_reference_with_breakdown(
    schedule: ProductionSchedule, breakdown_scenes: Sequence[Scene]
) -> list[SceneDiscrepancy]:
    """Find scenes on which the schedule and the breakdown disagree.

    Scene numbers are compared exactly as written on each side.

    Args:
        schedule: Current shooting schedule
        breakdown_scenes: Scenes of the script breakdown

    Returns:
        Discrepancies: missing scenes first, then per-scene mismatches
    """
    schedule_entries: dict[str, ScheduleSceneEntry] = {}
    for day in schedule.days:
        for entry in day.scenes:
            schedule_entries[entry.scene_number] = entry

    breakdown_numbers = dict.fromkeys(scene.scene_number for scene in breakdown_scenes)
    discrepancies: list[SceneDiscrepancy] = []

    for number in schedule_entries:
        if number not in breakdown_numbers:
            discrepancies.append(
                SceneDiscrepancy(
                    scene_number=number,
                    type=DiscrepancyType.SCENE_NOT_IN_BREAKDOWN,
                    message=(
                        f"Scene {number} is in the schedule but not found "
                        "in the breakdown"
                    ),
                    schedule_value="Present",
                    breakdown_value="Missing",
                )
            )

    for number in breakdown_numbers:
        if number not in schedule_entries:
            discrepancies.append(
                SceneDiscrepancy(
                    scene_number=number,
                    type=DiscrepancyType.SCENE_NOT_IN_SCHEDULE,
                    message=(
                        f"Scene {number} is in the breakdown but not found "
                        "in the schedule"
                    ),
                    schedule_value="Missing",
                    breakdown_value="Present",
                )
            )

    for scene in breakdown_scenes:
        entry = schedule_entries.get(scene.scene_number)
        if entry is None:
            continue

        if entry.int_ext and scene.int_ext and entry.int_ext != scene.int_ext:
            discrepancies.append(
                SceneDiscrepancy(
                    scene_number=scene.scene_number,
                    type=DiscrepancyType.INT_EXT_MISMATCH,
                    message=(
                        f"Scene {scene.scene_number} has different INT/EXT: "
                        f"Schedule says {entry.int_ext}, "
                        f"breakdown says {scene.int_ext}"
                    ),
                    schedule_value=entry.int_ext,
                    breakdown_value=scene.int_ext,
                )
            )

        schedule_cast = [
            name.upper()
            for name in get_cast_names_for_numbers(schedule, entry.cast_numbers)
        ]
        breakdown_cast = [name.upper() for name in scene.characters]
        missing_from_breakdown = [
            name for name in schedule_cast if not _matches_any(name, breakdown_cast)
        ]
        missing_from_schedule = [
            name for name in breakdown_cast if not _matches_any(name, schedule_cast)
        ]

        if missing_from_breakdown or missing_from_schedule:
            details = []
            if missing_from_breakdown:
                details.append(f"Schedule has: {', '.join(missing_from_breakdown)}")
            if missing_from_schedule:
                details.append(f"Breakdown has: {', '.join(missing_from_schedule)}")
            discrepancies.append(
                SceneDiscrepancy(
                    scene_number=scene.scene_number,
                    type=DiscrepancyType.CHARACTER_MISMATCH,
                    message=(
                        f"Scene {scene.scene_number} has character differences. "
                        f"{'. '.join(details)}"
                    ),
                    schedule_cast=tuple(schedule_cast),
                    breakdown_cast=tuple(breakdown_cast),
                )
            )

    logger.debug(
        "Cross-referenced schedule with breakdown",
        schedule_scenes=len(schedule_entries),
        breakdown_scenes=len(breakdown_numbers),
        discrepancies=len(discrepancies),
    )
    return discrepancies
