"""Tests for text similarity, change descriptions and scene-number keys."""

import pytest
from hypothesis import example, given
from hypothesis import strategies as st

from checkshappy.amendments.text import (
    DEFAULT_THRESHOLDS,
    NO_CHANGES_SUMMARY,
    SimilarityThresholds,
    calculate_text_similarity,
    describe_changes,
    join_summary,
    normalize_text,
    pluralize,
    scene_sort_key,
    schedule_scene_key,
    script_scene_key,
    tokenize,
)


class TestNormalizeText:
    """Test normalisation ahead of tokenising."""

    def test_lowercases_and_strips_punctuation(self):
        assert normalize_text("INT. KITCHEN - DAY!") == "int kitchen day"

    def test_collapses_whitespace(self):
        assert normalize_text("  Sarah\n\n  enters\tslowly  ") == "sarah enters slowly"

    def test_keeps_digits_and_underscores(self):
        assert normalize_text("Scene_12 at 9:30") == "scene_12 at 9 30"

    def test_tokenize_drops_short_words(self):
        assert tokenize("he is at the door") == {"the", "door"}


class TestCalculateTextSimilarity:
    """Test the Jaccard similarity score."""

    def test_both_empty_is_identical(self):
        assert calculate_text_similarity("", "") == 100

    def test_both_none_is_identical(self):
        assert calculate_text_similarity(None, None) == 100

    def test_one_side_empty(self):
        assert calculate_text_similarity("hello world", "") == 0
        assert calculate_text_similarity("", "hello world") == 0
        assert calculate_text_similarity(None, "hello world") == 0

    def test_identical_after_normalisation(self):
        assert calculate_text_similarity("Hello, World!", "hello   world") == 100

    def test_only_short_words_on_both_sides(self):
        assert calculate_text_similarity("a b", "to of") == 100

    def test_only_short_words_on_one_side(self):
        assert calculate_text_similarity("an", "elephant") == 0

    def test_jaccard_percentage(self):
        assert (
            calculate_text_similarity("apple banana cherry", "apple banana durian")
            == 50
        )

    def test_word_order_does_not_matter(self):
        assert calculate_text_similarity("sarah pours coffee", "coffee sarah pours") == 100

    def test_rounds_half_up(self):
        # 1 shared word out of 8 distinct: 12.5%
        text = "one two three four five six seven eight"
        assert calculate_text_similarity("one", text) == 13

    def test_rounds_half_up_above_midpoint(self):
        # 3 of 8: 37.5%
        text = "one two three four five six seven eight"
        assert calculate_text_similarity("one two three", text) == 38

    def test_rounds_down_below_half(self):
        # 1 of 3: 33.33%
        assert calculate_text_similarity("apple", "apple banana cherry") == 33

    @given(st.text())
    @example("")
    @example("INT. KITCHEN - DAY")
    def test_reflexive(self, text: str):
        assert calculate_text_similarity(text, text) == 100

    @given(st.text(), st.text())
    def test_symmetric(self, a: str, b: str):
        assert calculate_text_similarity(a, b) == calculate_text_similarity(b, a)

    @given(st.text(), st.text())
    def test_bounded_integer(self, a: str, b: str):
        score = calculate_text_similarity(a, b)
        assert isinstance(score, int)
        assert 0 <= score <= 100


class TestDescribeChanges:
    """Test the human-readable change descriptions."""

    @pytest.mark.parametrize(
        ("similarity", "expected"),
        [
            (100, "Minor formatting changes"),
            (95, "Minor formatting changes"),
            (94, "Minor dialogue or action changes"),
            (80, "Minor dialogue or action changes"),
            (79, "Significant content changes"),
            (50, "Significant content changes"),
            (49, "Major rewrite of scene"),
            (0, "Major rewrite of scene"),
        ],
    )
    def test_threshold_bands(self, similarity, expected):
        assert describe_changes("old text", "new text", similarity) == expected

    def test_content_appeared(self):
        assert describe_changes("", "new text", 0) == "New scene added"
        assert describe_changes(None, "new text", 0) == "New scene added"

    def test_content_disappeared(self):
        assert describe_changes("old text", None, 0) == "Scene removed from script"

    def test_custom_thresholds(self):
        thresholds = SimilarityThresholds(
            unchanged=90, minor_changes=70, significant_changes=40
        )
        assert describe_changes("a", "b", 75, thresholds) == (
            "Minor dialogue or action changes"
        )
        assert describe_changes("a", "b", 45, thresholds) == (
            "Significant content changes"
        )


class TestSimilarityThresholds:
    """Test threshold validation."""

    def test_defaults(self):
        assert DEFAULT_THRESHOLDS == SimilarityThresholds(95, 80, 50)

    def test_rejects_out_of_range(self):
        with pytest.raises(ValueError, match="within 0-100"):
            SimilarityThresholds(unchanged=101)

    def test_rejects_non_descending(self):
        with pytest.raises(ValueError, match="descending"):
            SimilarityThresholds(unchanged=70, minor_changes=80)

    def test_equal_thresholds_allowed(self):
        thresholds = SimilarityThresholds(80, 80, 80)
        assert thresholds.minor_changes == 80


class TestSceneKeys:
    """Test sort keys and the two match-key policies."""

    @pytest.mark.parametrize(
        ("scene_number", "expected"),
        [
            ("12", 12.0),
            ("12A", 12.5),
            ("1", 1.0),
            ("12.25", 12.25),
            ("12a", 12.0),
            ("12AB", 12.5),
            ("3-4", 3.0),
            ("", 0.0),
            ("prologue", 0.0),
            ("1e999", 0.0),
            ("inf", 0.0),
            ("nan", 0.0),
        ],
    )
    def test_scene_sort_key(self, scene_number, expected):
        assert scene_sort_key(scene_number) == expected

    def test_sorting_is_numeric_aware(self):
        numbers = ["10", "2", "1A", "1", "2A"]
        assert sorted(numbers, key=scene_sort_key) == ["1", "1A", "2", "2A", "10"]

    def test_lowercase_suffix_sorts_with_base_number(self):
        numbers = ["13", "12a", "1", "12"]
        assert sorted(numbers, key=scene_sort_key) == ["1", "12a", "12", "13"]

    def test_script_key_is_exact(self):
        assert script_scene_key("12a") == "12a"
        assert script_scene_key(" 12A") != script_scene_key("12A")

    def test_schedule_key_normalises(self):
        assert schedule_scene_key(" 12 a ") == "12A"
        assert schedule_scene_key("12a") == schedule_scene_key("12A")


class TestSummaryHelpers:
    """Test pluralisation and summary joining."""

    def test_pluralize(self):
        assert pluralize(1, "new scene") == "1 new scene"
        assert pluralize(2, "new scene") == "2 new scenes"
        assert pluralize(0, "scene", "added") == "0 scenes added"
        assert pluralize(1, "day", "removed") == "1 day removed"

    def test_join_summary(self):
        assert join_summary(["1 new scene", "", "2 deleted scenes"]) == (
            "1 new scene, 2 deleted scenes"
        )

    def test_join_summary_empty(self):
        assert join_summary(["", ""]) == NO_CHANGES_SUMMARY
        assert NO_CHANGES_SUMMARY == "No changes detected"
