"""Checks Happy Data Models.

This module defines the records exchanged between the script/schedule parsers,
the amendment engine and the persistence layer. Field names are snake_case in
Python and camelCase on the wire, matching the exports of the mobile app.
"""

from datetime import datetime
from enum import Enum
from typing import Any, NewType
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Human-assigned scene number ("12", "12A"). It is a business key: the only
# identity a scene keeps across script and schedule revisions.
SceneNumber = NewType("SceneNumber", str)


def _coerce_to_str(v: Any) -> Any:
    """Accept numeric values for string fields exported as numbers."""
    if isinstance(v, bool):
        return v
    if isinstance(v, int | float):
        return str(v)
    return v


def new_scene_id(scene_number: str) -> str:
    """Generate a fresh identity for a scene record."""
    return f"scene-{scene_number}-{uuid4().hex[:12]}"


class SceneAmendmentStatus(str, Enum):
    """Review state a scene carries after a script amendment."""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    UNCHANGED = "unchanged"


class CharacterConfirmationStatus(str, Enum):
    """Progress of cast detection and confirmation for a scene."""

    PENDING = "pending"
    DETECTING = "detecting"
    READY = "ready"
    CONFIRMED = "confirmed"


class SceneFilmingStatus(str, Enum):
    """Filming progress recorded on set."""

    COMPLETE = "complete"
    PARTIAL = "partial"
    NOT_FILMED = "not-filmed"


class CamelModel(BaseModel):
    """Base model serialising to the camelCase shape used by the app."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ParsedScene(CamelModel):
    """A scene as produced by the script parser, before any merge."""

    scene_number: SceneNumber
    slugline: str = ""
    int_ext: str = ""
    time_of_day: str = ""
    script_content: str | None = None

    @field_validator("scene_number", mode="before")
    @classmethod
    def coerce_scene_number(cls, v: Any) -> Any:
        """Accept integer scene numbers from older exports."""
        return _coerce_to_str(v)


class Scene(CamelModel):
    """A scene of the production together with its breakdown metadata."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(default_factory=lambda: f"scene-{uuid4()}")
    scene_number: SceneNumber
    slugline: str = ""
    int_ext: str = ""
    time_of_day: str = ""
    script_content: str | None = None
    synopsis: str | None = None

    # Breakdown metadata, owned by the department
    characters: list[str] = Field(default_factory=list)
    character_confirmation_status: CharacterConfirmationStatus | None = None
    suggested_characters: list[str] = Field(default_factory=list)
    filming_status: SceneFilmingStatus | None = None
    filming_notes: str | None = None
    shooting_day: int | None = None
    is_complete: bool = False
    completed_at: datetime | None = None

    # Amendment bookkeeping
    amendment_status: SceneAmendmentStatus | None = None
    amendment_date: datetime | None = None
    amendment_notes: str | None = None
    previous_script_content: str | None = None

    @field_validator("scene_number", mode="before")
    @classmethod
    def coerce_scene_number(cls, v: Any) -> Any:
        """Accept integer scene numbers from older exports."""
        return _coerce_to_str(v)


class ScheduleCastMember(CamelModel):
    """An actor on the schedule's cast list, identified by cast number."""

    model_config = ConfigDict(extra="allow")

    number: int
    name: str = ""
    character: str | None = None


class ScheduleSceneEntry(CamelModel):
    """One scene scheduled on a shoot day."""

    model_config = ConfigDict(extra="allow")

    scene_number: SceneNumber
    cast_numbers: list[int] = Field(default_factory=list)
    estimated_time: str | None = None
    shoot_order: int | None = None
    pages: str | None = None
    set_location: str = ""
    int_ext: str | None = None
    day_night: str | None = None
    description: str | None = None

    @field_validator("scene_number", "pages", "estimated_time", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        """Schedules exported from PDFs often carry these as bare numbers."""
        return _coerce_to_str(v)


class ScheduleDay(CamelModel):
    """A shoot day and its ordered scene list."""

    model_config = ConfigDict(extra="allow")

    day_number: int
    date: str | None = None
    day_of_week: str | None = None
    location: str | None = None
    scenes: list[ScheduleSceneEntry] = Field(default_factory=list)


class ProductionSchedule(CamelModel):
    """A production-wide shooting schedule snapshot."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    production_name: str | None = None
    script_version: str | None = None
    schedule_version: str | None = None
    status: str | None = None
    total_days: int | None = None
    cast_list: list[ScheduleCastMember] = Field(default_factory=list)
    days: list[ScheduleDay] = Field(default_factory=list)


__all__ = [
    "CamelModel",
    "CharacterConfirmationStatus",
    "ParsedScene",
    "ProductionSchedule",
    "Scene",
    "SceneAmendmentStatus",
    "SceneFilmingStatus",
    "SceneNumber",
    "ScheduleCastMember",
    "ScheduleDay",
    "ScheduleSceneEntry",
    "new_scene_id",
]
