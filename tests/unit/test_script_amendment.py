"""Tests for the script amendment engine."""

from datetime import UTC, datetime

import pytest

from checkshappy.amendments.script import (
    DELETED_SCENE_NOTE,
    NEW_SCENE_NOTE,
    AmendmentCount,
    ScriptAmendmentOptions,
    apply_amendment_to_scenes,
    clear_amendment_flags,
    clear_scene_amendment,
    compare_script_amendment,
    get_amendment_count,
)
from checkshappy.amendments.text import SimilarityThresholds
from checkshappy.models import (
    CharacterConfirmationStatus,
    Scene,
    SceneAmendmentStatus,
    SceneFilmingStatus,
)
from tests.factories import SCENE_ONE_REVISED, SCENE_ONE_TEXT, make_parsed, make_scene

NOW = datetime(2026, 3, 14, 9, 30, tzinfo=UTC)


@pytest.fixture
def breakdown():
    """Three scenes with department data already entered."""
    return [
        make_scene(
            "1",
            SCENE_ONE_TEXT,
            characters=["SARAH", "TOM"],
            character_confirmation_status=CharacterConfirmationStatus.CONFIRMED,
            synopsis="Breakfast before the storm",
            filming_status=SceneFilmingStatus.PARTIAL,
        ),
        make_scene("2", "Tom walks the dog through the park."),
        make_scene("3", "Sarah drives away from the house in the rain."),
    ]


class TestCompareScriptAmendment:
    """Test classification of a revised script."""

    def test_empty_inputs(self):
        result = compare_script_amendment([], [])
        assert result.summary == "No changes detected"
        assert result.changes == ()
        assert result.new_scenes == ()
        assert result.modified_scenes == ()
        assert result.deleted_scenes == ()
        assert result.unchanged_scenes == ()
        assert not result.has_changes

    def test_new_scene(self):
        result = compare_script_amendment(
            [make_scene("1", "A")],
            [make_parsed("1", "A"), make_parsed("2", "B")],
        )
        assert [c.scene_number for c in result.new_scenes] == ["2"]
        assert [c.scene_number for c in result.unchanged_scenes] == ["1"]
        assert result.summary == "1 new scene"
        assert result.new_scenes[0].change_description == "New scene added to script"
        assert result.new_scenes[0].existing_scene is None

    def test_deleted_scene(self):
        result = compare_script_amendment(
            [make_scene("1"), make_scene("2")],
            [make_parsed("1")],
        )
        assert len(result.deleted_scenes) == 1
        deleted = result.deleted_scenes[0]
        assert deleted.scene_number == "2"
        assert deleted.change_description == "Scene removed from script"
        assert deleted.new_scene is None
        assert result.summary == "1 deleted scene"

    def test_modified_scene(self, breakdown):
        parsed = [
            make_parsed("1", SCENE_ONE_REVISED),
            make_parsed("2", "Tom walks the dog through the park."),
            make_parsed("3", "Sarah drives away from the house in the rain."),
        ]
        result = compare_script_amendment(breakdown, parsed)

        assert [c.scene_number for c in result.modified_scenes] == ["1"]
        change = result.modified_scenes[0]
        assert change.content_similarity == 89
        assert change.change_description == "Minor dialogue or action changes"
        assert change.existing_scene.id == "scene-1"
        assert change.new_scene.script_content == SCENE_ONE_REVISED
        assert result.summary == "1 modified scene"

    def test_major_rewrite(self):
        result = compare_script_amendment(
            [make_scene("4", "The detective searches the abandoned warehouse.")],
            [make_parsed("4", "A wedding reception with music and dancing guests.")],
        )
        assert result.modified_scenes[0].change_description == "Major rewrite of scene"
        assert result.modified_scenes[0].content_similarity == 0

    def test_custom_thresholds_change_classification(self, breakdown):
        lenient = SimilarityThresholds(
            unchanged=85, minor_changes=80, significant_changes=50
        )
        result = compare_script_amendment(
            breakdown[:1], [make_parsed("1", SCENE_ONE_REVISED)], lenient
        )
        assert result.modified_scenes == ()
        assert result.unchanged_scenes[0].content_similarity == 89
        assert result.unchanged_scenes[0].change_description == "No significant changes"

    def test_combined_summary(self, breakdown):
        parsed = [
            make_parsed("1", SCENE_ONE_REVISED),
            make_parsed("2", "Completely different scene about a bank robbery."),
            make_parsed("4", "A brand new scene."),
        ]
        result = compare_script_amendment(breakdown, parsed)
        assert result.summary == "1 new scene, 2 modified scenes, 1 deleted scene"
        assert result.has_changes

    def test_changes_sorted_by_scene_number(self):
        result = compare_script_amendment(
            [make_scene("10"), make_scene("2")],
            [make_parsed("1A"), make_parsed("2"), make_parsed("1")],
        )
        assert [c.scene_number for c in result.changes] == ["1", "1A", "2", "10"]

    def test_partition_is_complete(self, breakdown):
        parsed = [
            make_parsed("1", SCENE_ONE_REVISED),
            make_parsed("2", "Tom walks the dog through the park."),
            make_parsed("5", "New."),
        ]
        result = compare_script_amendment(breakdown, parsed)
        partitions = (
            result.new_scenes
            + result.modified_scenes
            + result.deleted_scenes
            + result.unchanged_scenes
        )
        assert len(partitions) == len(result.changes)
        for change in result.changes:
            assert sum(change is other for other in partitions) == 1

    def test_scene_numbers_match_exactly(self):
        result = compare_script_amendment([make_scene("12A")], [make_parsed("12a")])
        assert [c.scene_number for c in result.new_scenes] == ["12a"]
        assert [c.scene_number for c in result.deleted_scenes] == ["12A"]

    def test_duplicate_existing_numbers_last_wins(self):
        existing = [make_scene("1", "A", id="first"), make_scene("1", "A", id="second")]
        result = compare_script_amendment(existing, [make_parsed("1", "A")])
        assert result.unchanged_scenes[0].existing_scene.id == "second"
        assert result.deleted_scenes == ()

    def test_inputs_not_mutated(self, breakdown):
        before = [scene.model_dump() for scene in breakdown]
        compare_script_amendment(breakdown, [make_parsed("1", SCENE_ONE_REVISED)])
        assert [scene.model_dump() for scene in breakdown] == before

    def test_to_dict_uses_camel_case(self, breakdown):
        result = compare_script_amendment(
            breakdown[:1], [make_parsed("1", SCENE_ONE_REVISED)]
        )
        data = result.to_dict()
        assert data["summary"] == "1 modified scene"
        assert data["hasChanges"] is True
        assert data["counts"] == {"new": 0, "modified": 1, "deleted": 0, "unchanged": 0}
        change = data["changes"][0]
        assert change["sceneNumber"] == "1"
        assert change["status"] == "modified"
        assert change["contentSimilarity"] == 89
        assert change["existingScene"]["characterConfirmationStatus"] == "confirmed"


class TestApplyAmendmentToScenes:
    """Test merging accepted script changes."""

    def _apply(self, existing, parsed, **options):
        result = compare_script_amendment(existing, parsed)
        return apply_amendment_to_scenes(
            existing, result, ScriptAmendmentOptions(**options), now=NOW
        )

    def test_modified_scene_keeps_breakdown_data(self, breakdown):
        merged = self._apply(
            breakdown,
            [
                make_parsed(
                    "1",
                    SCENE_ONE_REVISED,
                    slugline="INT. KITCHEN - NIGHT",
                    time_of_day="NIGHT",
                ),
                make_parsed("2", "Tom walks the dog through the park."),
                make_parsed("3", "Sarah drives away from the house in the rain."),
            ],
        )
        scene = merged[0]
        assert scene.id == "scene-1"
        assert scene.script_content == SCENE_ONE_REVISED
        assert scene.slugline == "INT. KITCHEN - NIGHT"
        assert scene.time_of_day == "NIGHT"
        assert scene.previous_script_content == SCENE_ONE_TEXT
        assert scene.amendment_status == SceneAmendmentStatus.MODIFIED
        assert scene.amendment_date == NOW
        assert scene.amendment_notes == "Minor dialogue or action changes"
        assert scene.character_confirmation_status == (
            CharacterConfirmationStatus.CONFIRMED
        )
        assert scene.characters == ["SARAH", "TOM"]
        assert scene.synopsis == "Breakfast before the storm"
        assert scene.filming_status == SceneFilmingStatus.PARTIAL

    def test_app_only_fields_survive_merge_and_clear(self):
        existing = [
            Scene.model_validate(
                {
                    "id": "scene-1",
                    "sceneNumber": "1",
                    "scriptContent": SCENE_ONE_TEXT,
                    "characterConfirmationStatus": "detecting",
                    "hasScheduleDiscrepancy": True,
                }
            )
        ]
        merged = self._apply(existing, [make_parsed("1", SCENE_ONE_REVISED)])
        assert merged[0].amendment_status == SceneAmendmentStatus.MODIFIED
        assert merged[0].to_dict()["hasScheduleDiscrepancy"] is True
        assert merged[0].to_dict()["characterConfirmationStatus"] == "detecting"

        cleared = clear_amendment_flags(merged)
        assert cleared[0].amendment_status is None
        assert cleared[0].to_dict()["hasScheduleDiscrepancy"] is True

    def test_new_scene_is_created(self, breakdown):
        merged = self._apply(breakdown, [make_parsed("2A", "Tom returns home.")])
        new = next(scene for scene in merged if scene.scene_number == "2A")
        assert new.id.startswith("scene-2A-")
        assert new.script_content == "Tom returns home."
        assert new.characters == []
        assert new.is_complete is False
        assert new.amendment_status == SceneAmendmentStatus.NEW
        assert new.amendment_notes == NEW_SCENE_NOTE
        assert new.amendment_date == NOW
        assert [scene.scene_number for scene in merged] == ["1", "2", "2A", "3"]

    def test_deletions_are_opt_in(self, breakdown):
        merged = self._apply(breakdown, [make_parsed("1", SCENE_ONE_TEXT)])
        assert len(merged) == 3
        assert all(scene.amendment_status is None for scene in merged[1:])

    def test_deleted_scene_is_flagged_not_removed(self, breakdown):
        merged = self._apply(
            breakdown, [make_parsed("1", SCENE_ONE_TEXT)], include_deleted=True
        )
        assert [scene.scene_number for scene in merged] == ["1", "2", "3"]
        deleted = merged[1]
        assert deleted.amendment_status == SceneAmendmentStatus.DELETED
        assert deleted.amendment_notes == DELETED_SCENE_NOTE
        assert deleted.script_content == "Tom walks the dog through the park."

    def test_all_options_off_is_identity(self, breakdown):
        merged = self._apply(
            breakdown,
            [make_parsed("1", SCENE_ONE_REVISED), make_parsed("9", "New")],
            include_new=False,
            include_modified=False,
            include_deleted=False,
        )
        assert [scene.model_dump() for scene in merged] == [
            scene.model_dump() for scene in breakdown
        ]

    def test_stale_flag_reset_to_unchanged(self):
        existing = [
            make_scene(
                "1",
                "Same text as before.",
                amendment_status=SceneAmendmentStatus.MODIFIED,
                amendment_notes="Earlier revision",
            )
        ]
        merged = self._apply(existing, [make_parsed("1", "Same text as before.")])
        assert merged[0].amendment_status == SceneAmendmentStatus.UNCHANGED
        assert merged[0].amendment_notes == "Earlier revision"

    def test_inputs_not_mutated(self, breakdown):
        before = [scene.model_dump() for scene in breakdown]
        self._apply(
            breakdown,
            [make_parsed("1", SCENE_ONE_REVISED)],
            include_deleted=True,
        )
        assert [scene.model_dump() for scene in breakdown] == before

    def test_default_timestamp_is_utc(self, breakdown):
        result = compare_script_amendment(
            breakdown[:1], [make_parsed("1", SCENE_ONE_REVISED)]
        )
        merged = apply_amendment_to_scenes(breakdown[:1], result)
        assert merged[0].amendment_date is not None
        assert merged[0].amendment_date.tzinfo is not None

    def test_default_options(self):
        options = ScriptAmendmentOptions()
        assert options.include_new is True
        assert options.include_modified is True
        assert options.include_deleted is False


class TestClearAmendmentFlags:
    """Test acknowledging reviewed amendments."""

    @pytest.fixture
    def flagged(self):
        return [
            make_scene(
                "1",
                "New text",
                amendment_status=SceneAmendmentStatus.MODIFIED,
                amendment_date=NOW,
                amendment_notes="Minor dialogue or action changes",
                previous_script_content="Old text",
            ),
            make_scene(
                "2",
                amendment_status=SceneAmendmentStatus.NEW,
                amendment_date=NOW,
                amendment_notes=NEW_SCENE_NOTE,
            ),
        ]

    def test_clears_all_flags_keeps_date(self, flagged):
        cleared = clear_amendment_flags(flagged)
        for scene in cleared:
            assert scene.amendment_status is None
            assert scene.amendment_notes is None
            assert scene.previous_script_content is None
            assert scene.amendment_date == NOW
        assert cleared[0].script_content == "New text"

    def test_clear_single_scene(self, flagged):
        cleared = clear_scene_amendment(flagged, "scene-2")
        assert cleared[0].amendment_status == SceneAmendmentStatus.MODIFIED
        assert cleared[1].amendment_status is None
        assert cleared[1].amendment_date == NOW

    def test_clear_unknown_id_changes_nothing(self, flagged):
        assert clear_scene_amendment(flagged, "missing") == flagged

    def test_amendment_count(self, flagged):
        scenes = [
            *flagged,
            make_scene("3", amendment_status=SceneAmendmentStatus.DELETED),
            make_scene("4", amendment_status=SceneAmendmentStatus.UNCHANGED),
            make_scene("5"),
        ]
        count = get_amendment_count(scenes)
        assert count == AmendmentCount(new=1, modified=1, deleted=1)
        assert count.total == 3

    def test_amendment_count_after_clearing(self, flagged):
        assert get_amendment_count(clear_amendment_flags(flagged)).total == 0
