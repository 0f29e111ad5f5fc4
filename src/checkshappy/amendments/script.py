"""Script amendment engine.

Compares a freshly parsed revision of the script against the production's
scenes and merges the accepted changes back in. Breakdown metadata maintained
by the department (confirmed cast, synopsis, filming status) is never touched
by a merge; only script-derived fields are replaced. Deleted scenes are soft
flagged so continuity photos tied to them keep their anchor.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from checkshappy.amendments.text import (
    DEFAULT_THRESHOLDS,
    SimilarityThresholds,
    calculate_text_similarity,
    describe_changes,
    join_summary,
    pluralize,
    scene_sort_key,
    script_scene_key,
)
from checkshappy.config import get_logger
from checkshappy.models import (
    ParsedScene,
    Scene,
    SceneAmendmentStatus,
    new_scene_id,
)

logger = get_logger(__name__)

NEW_SCENE_NOTE = "New scene added in script revision"
DELETED_SCENE_NOTE = "Scene removed in script revision"


@dataclass(frozen=True)
class SceneChange:
    """Classification of one scene number across two script revisions."""

    scene_number: str
    status: SceneAmendmentStatus
    change_description: str
    existing_scene: Scene | None = None
    new_scene: ParsedScene | None = None
    content_similarity: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        data: dict[str, Any] = {
            "sceneNumber": self.scene_number,
            "status": self.status.value,
            "changeDescription": self.change_description,
        }
        if self.content_similarity is not None:
            data["contentSimilarity"] = self.content_similarity
        if self.existing_scene is not None:
            data["existingScene"] = self.existing_scene.to_dict()
        if self.new_scene is not None:
            data["newScene"] = self.new_scene.to_dict()
        return data


@dataclass(frozen=True)
class AmendmentResult:
    """Outcome of comparing two script revisions."""

    changes: tuple[SceneChange, ...]
    new_scenes: tuple[SceneChange, ...]
    modified_scenes: tuple[SceneChange, ...]
    deleted_scenes: tuple[SceneChange, ...]
    unchanged_scenes: tuple[SceneChange, ...]
    summary: str

    @property
    def has_changes(self) -> bool:
        """Whether anything needs the user's review."""
        return bool(self.new_scenes or self.modified_scenes or self.deleted_scenes)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output."""
        return {
            "summary": self.summary,
            "hasChanges": self.has_changes,
            "changes": [change.to_dict() for change in self.changes],
            "counts": {
                "new": len(self.new_scenes),
                "modified": len(self.modified_scenes),
                "deleted": len(self.deleted_scenes),
                "unchanged": len(self.unchanged_scenes),
            },
        }


@dataclass(frozen=True)
class ScriptAmendmentOptions:
    """Which categories of script change to merge.

    Deletions are opt-in: flagging scenes deleted disturbs the schedule's
    continuity view until someone reviews them.
    """

    include_new: bool = True
    include_modified: bool = True
    include_deleted: bool = False


@dataclass(frozen=True)
class AmendmentCount:
    """Scenes still awaiting amendment review."""

    new: int = 0
    modified: int = 0
    deleted: int = 0

    @property
    def total(self) -> int:
        return self.new + self.modified + self.deleted


def compare_script_amendment(
    existing_scenes: Sequence[Scene],
    new_parsed_scenes: Sequence[ParsedScene],
    thresholds: SimilarityThresholds | None = None,
) -> AmendmentResult:
    """Compare a new parsed script against existing scenes.

    Scenes are matched by exact scene number. When the new parse repeats a
    scene number the last occurrence wins the lookup, but each occurrence is
    still classified.

    Args:
        existing_scenes: Scenes currently stored for the production
        new_parsed_scenes: Scenes parsed from the revised script
        thresholds: Similarity policy (defaults to 95/80/50)

    Returns:
        AmendmentResult with the sorted change list and its partitions
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    existing_map = {script_scene_key(s.scene_number): s for s in existing_scenes}
    matched: set[str] = set()
    changes: list[SceneChange] = []

    for new_scene in new_parsed_scenes:
        key = script_scene_key(new_scene.scene_number)
        existing = existing_map.get(key)

        if existing is None:
            changes.append(
                SceneChange(
                    scene_number=new_scene.scene_number,
                    status=SceneAmendmentStatus.NEW,
                    change_description="New scene added to script",
                    new_scene=new_scene,
                )
            )
            continue

        matched.add(key)
        similarity = calculate_text_similarity(
            existing.script_content or "", new_scene.script_content or ""
        )

        if similarity >= thresholds.unchanged:
            changes.append(
                SceneChange(
                    scene_number=new_scene.scene_number,
                    status=SceneAmendmentStatus.UNCHANGED,
                    change_description="No significant changes",
                    existing_scene=existing,
                    new_scene=new_scene,
                    content_similarity=similarity,
                )
            )
        else:
            changes.append(
                SceneChange(
                    scene_number=new_scene.scene_number,
                    status=SceneAmendmentStatus.MODIFIED,
                    change_description=describe_changes(
                        existing.script_content,
                        new_scene.script_content,
                        similarity,
                        thresholds,
                    ),
                    existing_scene=existing,
                    new_scene=new_scene,
                    content_similarity=similarity,
                )
            )

    for existing in existing_scenes:
        if script_scene_key(existing.scene_number) not in matched:
            changes.append(
                SceneChange(
                    scene_number=existing.scene_number,
                    status=SceneAmendmentStatus.DELETED,
                    change_description="Scene removed from script",
                    existing_scene=existing,
                )
            )

    changes.sort(key=lambda change: scene_sort_key(change.scene_number))

    def _with_status(status: SceneAmendmentStatus) -> tuple[SceneChange, ...]:
        return tuple(c for c in changes if c.status == status)

    new_scenes = _with_status(SceneAmendmentStatus.NEW)
    modified_scenes = _with_status(SceneAmendmentStatus.MODIFIED)
    deleted_scenes = _with_status(SceneAmendmentStatus.DELETED)
    unchanged_scenes = _with_status(SceneAmendmentStatus.UNCHANGED)

    summary = join_summary(
        [
            pluralize(len(new_scenes), "new scene") if new_scenes else "",
            pluralize(len(modified_scenes), "modified scene") if modified_scenes else "",
            pluralize(len(deleted_scenes), "deleted scene") if deleted_scenes else "",
        ]
    )

    logger.debug(
        "Compared script amendment",
        existing=len(existing_scenes),
        parsed=len(new_parsed_scenes),
        new=len(new_scenes),
        modified=len(modified_scenes),
        deleted=len(deleted_scenes),
        unchanged=len(unchanged_scenes),
    )

    return AmendmentResult(
        changes=tuple(changes),
        new_scenes=new_scenes,
        modified_scenes=modified_scenes,
        deleted_scenes=deleted_scenes,
        unchanged_scenes=unchanged_scenes,
        summary=summary,
    )


def _scene_from_parsed(parsed: ParsedScene, now: datetime) -> Scene:
    """Build a fresh breakdown record for a scene that first appears now."""
    return Scene(
        id=new_scene_id(parsed.scene_number),
        scene_number=parsed.scene_number,
        slugline=parsed.slugline,
        int_ext=parsed.int_ext,
        time_of_day=parsed.time_of_day,
        script_content=parsed.script_content,
        characters=[],
        is_complete=False,
        amendment_status=SceneAmendmentStatus.NEW,
        amendment_date=now,
        amendment_notes=NEW_SCENE_NOTE,
    )


def apply_amendment_to_scenes(
    existing_scenes: Sequence[Scene],
    amendment_result: AmendmentResult,
    options: ScriptAmendmentOptions | None = None,
    now: datetime | None = None,
) -> list[Scene]:
    """Apply accepted amendment changes to the existing scenes.

    The input records are not modified; the merged scenes are returned as a
    new list sorted by scene number.

    Args:
        existing_scenes: Scenes currently stored for the production
        amendment_result: Result of compare_script_amendment
        options: Which change categories to merge
        now: Timestamp for the amendment bookkeeping (defaults to current UTC)

    Returns:
        Merged scene list
    """
    options = options or ScriptAmendmentOptions()
    now = now or datetime.now(UTC)
    scene_map = {
        script_scene_key(s.scene_number): s.model_copy(deep=True)
        for s in existing_scenes
    }
    applied = 0

    for change in amendment_result.changes:
        key = script_scene_key(change.scene_number)
        existing = scene_map.get(key)

        if change.status == SceneAmendmentStatus.NEW:
            if options.include_new and change.new_scene is not None:
                scene_map[key] = _scene_from_parsed(change.new_scene, now)
                applied += 1

        elif change.status == SceneAmendmentStatus.MODIFIED:
            if (
                options.include_modified
                and change.new_scene is not None
                and existing is not None
            ):
                # Only script-derived fields move; breakdown data stays put
                scene_map[key] = existing.model_copy(
                    update={
                        "slugline": change.new_scene.slugline,
                        "int_ext": change.new_scene.int_ext,
                        "time_of_day": change.new_scene.time_of_day,
                        "script_content": change.new_scene.script_content,
                        "previous_script_content": existing.script_content,
                        "amendment_status": SceneAmendmentStatus.MODIFIED,
                        "amendment_date": now,
                        "amendment_notes": change.change_description,
                    }
                )
                applied += 1

        elif change.status == SceneAmendmentStatus.DELETED:
            if options.include_deleted and existing is not None:
                scene_map[key] = existing.model_copy(
                    update={
                        "amendment_status": SceneAmendmentStatus.DELETED,
                        "amendment_date": now,
                        "amendment_notes": DELETED_SCENE_NOTE,
                    }
                )
                applied += 1

        elif change.status == SceneAmendmentStatus.UNCHANGED:
            if existing is not None and existing.amendment_status:
                scene_map[key] = existing.model_copy(
                    update={"amendment_status": SceneAmendmentStatus.UNCHANGED}
                )

    logger.info(
        "Applied script amendment",
        applied=applied,
        include_new=options.include_new,
        include_modified=options.include_modified,
        include_deleted=options.include_deleted,
    )

    return sorted(scene_map.values(), key=lambda s: scene_sort_key(s.scene_number))


def clear_amendment_flags(scenes: Sequence[Scene]) -> list[Scene]:
    """Clear review flags once the user has acknowledged all amendments.

    ``amendment_date`` is kept as a historical record.
    """
    return [_cleared(scene) for scene in scenes]


def clear_scene_amendment(scenes: Sequence[Scene], scene_id: str) -> list[Scene]:
    """Clear review flags on the single scene with the given id."""
    return [_cleared(scene) if scene.id == scene_id else scene for scene in scenes]


def _cleared(scene: Scene) -> Scene:
    return scene.model_copy(
        update={
            "amendment_status": None,
            "previous_script_content": None,
            "amendment_notes": None,
        }
    )


def get_amendment_count(scenes: Sequence[Scene]) -> AmendmentCount:
    """Count scenes whose amendment is still pending review."""

    def _count(status: SceneAmendmentStatus) -> int:
        return sum(1 for scene in scenes if scene.amendment_status == status)

    return AmendmentCount(
        new=_count(SceneAmendmentStatus.NEW),
        modified=_count(SceneAmendmentStatus.MODIFIED),
        deleted=_count(SceneAmendmentStatus.DELETED),
    )
