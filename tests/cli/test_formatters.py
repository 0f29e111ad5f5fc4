"""Tests for CLI formatters."""

import json

from checkshappy.amendments import (
    AmendmentCount,
    compare_schedule_amendment,
    compare_script_amendment,
    cross_reference_with_breakdown,
)
from checkshappy.cli.formatters.amendment_formatter import (
    AmendmentCountFormatter,
    DiscrepancyFormatter,
    ScheduleAmendmentFormatter,
    ScriptAmendmentFormatter,
)
from checkshappy.cli.formatters.base import OutputFormat
from checkshappy.cli.formatters.json_formatter import JsonFormatter, to_jsonable
from checkshappy.exceptions import ValidationError
from tests.factories import (
    SCENE_ONE_REVISED,
    SCENE_ONE_TEXT,
    entry,
    make_parsed,
    make_scene,
    make_schedule,
)


class TestScriptAmendmentFormatter:
    """Test script comparison output."""

    def test_format_text(self):
        result = compare_script_amendment(
            [make_scene("1", SCENE_ONE_TEXT), make_scene("2", "Rain on the roof.")],
            [make_parsed("1", SCENE_ONE_REVISED), make_parsed("2", "Rain on the roof.")],
        )

        output = ScriptAmendmentFormatter().format(result, OutputFormat.TEXT)
        assert "1 modified scene" in output
        assert "89%" in output
        assert "Minor dialogue or action changes" in output
        # Unchanged scenes are hidden unless asked for
        assert "unchanged" not in output

    def test_show_unchanged(self):
        result = compare_script_amendment(
            [make_scene("2", "Rain on the roof.")],
            [make_parsed("2", "Rain on the roof.")],
        )

        output = ScriptAmendmentFormatter(show_unchanged=True).format(result)
        assert "No changes detected" in output
        assert "unchanged" in output
        assert "100%" in output

    def test_format_json(self):
        result = compare_script_amendment([], [make_parsed("4", "New.")])

        data = json.loads(ScriptAmendmentFormatter().format(result, OutputFormat.JSON))
        assert data["summary"] == "1 new scene"
        assert data["changes"][0]["status"] == "new"


class TestAmendmentCountFormatter:
    """Test pending amendment counts."""

    def test_nothing_pending(self):
        assert AmendmentCountFormatter().format(AmendmentCount()) == (
            "No amendments pending review"
        )

    def test_pending(self):
        count = AmendmentCount(new=2, modified=1)
        assert AmendmentCountFormatter().format(count) == (
            "3 pending: 2 new, 1 modified, 0 deleted"
        )

    def test_json(self):
        data = json.loads(
            AmendmentCountFormatter().format(
                AmendmentCount(deleted=1), OutputFormat.JSON
            )
        )
        assert data == {"new": 0, "modified": 0, "deleted": 1, "total": 1}


class TestScheduleAmendmentFormatter:
    """Test schedule comparison output."""

    def test_format_text(self):
        existing = make_schedule({1: [entry("5A", [1, 2])]})
        new = make_schedule({1: [], 2: [entry("5A", [1, 2])]})

        output = ScheduleAmendmentFormatter().format(
            compare_schedule_amendment(existing, new)
        )
        assert "Scene changes" in output
        assert "scene_moved" in output
        assert "Scene 5A moved from Day 1 to Day 2" in output
        assert "Days" in output

    def test_no_changes(self):
        schedule = make_schedule({1: [entry("1", [1])]})

        output = ScheduleAmendmentFormatter().format(
            compare_schedule_amendment(schedule, schedule)
        )
        assert output.strip() == "No changes detected"


class TestDiscrepancyFormatter:
    """Test cross-reference output."""

    def test_agreement(self):
        assert DiscrepancyFormatter().format([]).strip() == (
            "Schedule and breakdown agree"
        )

    def test_discrepancies(self):
        schedule = make_schedule({1: [entry("1", [1])]}, cast={1: "SARAH"})
        discrepancies = cross_reference_with_breakdown(
            schedule, [make_scene("1", characters=["SARAH"]), make_scene("2")]
        )

        output = DiscrepancyFormatter().format(discrepancies)
        assert "1 discrepancies found" in output
        assert "scene_not_in_schedule" in output


class TestJsonFormatter:
    """Test JSON envelopes."""

    def test_to_jsonable_models(self):
        data = to_jsonable({"scenes": [make_scene("3")]})
        assert data["scenes"][0]["sceneNumber"] == "3"

    def test_format_success(self):
        data = json.loads(JsonFormatter().format_success("Done", {"scenes": 2}))
        assert data == {"success": True, "message": "Done", "data": {"scenes": 2}}

    def test_format_error_response_with_hint(self):
        error = ValidationError("Invalid scenes file: x.json", hint="0.id: missing")
        data = json.loads(JsonFormatter().format_error_response(error))
        assert data == {
            "success": False,
            "code": 1,
            "error": "Invalid scenes file: x.json",
            "hint": "0.id: missing",
        }

    def test_format_error_response_plain_exception(self):
        data = json.loads(JsonFormatter().format_error_response(RuntimeError("boom"), 2))
        assert data["error"] == "boom"
        assert data["code"] == 2

    def test_format_error_escapes_markup(self):
        assert JsonFormatter().format_error("bad [tag]") == (
            "[red]Error: bad \\[tag][/red]"
        )
