"""Text normalisation, similarity scoring and scene-number keys.

These helpers are shared by the script and schedule amendment engines. All of
them are pure functions.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_UPPERCASE = re.compile(r"[A-Z]")
_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Tokens of this length or shorter are stray articles or punctuation remnants
MIN_TOKEN_LENGTH = 2

NO_CHANGES_SUMMARY = "No changes detected"


@dataclass(frozen=True)
class SimilarityThresholds:
    """Similarity cut-offs (0-100) used to classify script changes.

    A revised scene scoring at or above ``unchanged`` is treated as unchanged;
    below that the description degrades through ``minor_changes`` and
    ``significant_changes`` to a major rewrite.
    """

    unchanged: int = 95
    minor_changes: int = 80
    significant_changes: int = 50

    def __post_init__(self) -> None:
        """Reject threshold sets that are out of range or not descending."""
        values = (self.unchanged, self.minor_changes, self.significant_changes)
        if any(not 0 <= value <= 100 for value in values):
            raise ValueError(f"Similarity thresholds must be within 0-100: {values}")
        if not self.unchanged >= self.minor_changes >= self.significant_changes:
            raise ValueError(
                f"Similarity thresholds must be descending: {values}"
            )


DEFAULT_THRESHOLDS = SimilarityThresholds()


def normalize_text(text: str) -> str:
    """Lowercase, replace punctuation with spaces and collapse whitespace."""
    normalized = _NON_WORD.sub(" ", text.lower())
    return _WHITESPACE.sub(" ", normalized).strip()


def tokenize(normalized: str) -> set[str]:
    """Split normalised text into its set of significant words."""
    return {word for word in normalized.split() if len(word) > MIN_TOKEN_LENGTH}


def calculate_text_similarity(text1: str | None, text2: str | None) -> int:
    """Score how similar two pieces of scene text are.

    Uses Jaccard similarity over the sets of significant words, which tolerates
    re-ordering and light rewording of screenplay prose.

    Args:
        text1: Original text
        text2: Revised text

    Returns:
        Integer percentage between 0 and 100
    """
    if not text1 and not text2:
        return 100
    if not text1 or not text2:
        return 0

    normalized1 = normalize_text(text1)
    normalized2 = normalize_text(text2)

    if normalized1 == normalized2:
        return 100

    words1 = tokenize(normalized1)
    words2 = tokenize(normalized2)

    if not words1 and not words2:
        return 100
    if not words1 or not words2:
        return 0

    ratio = len(words1 & words2) / len(words1 | words2)
    # Round half up, as the scores were historically produced
    return math.floor(ratio * 100 + 0.5)


def describe_changes(
    existing_content: str | None,
    new_content: str | None,
    similarity: int,
    thresholds: SimilarityThresholds = DEFAULT_THRESHOLDS,
) -> str:
    """Generate a human-readable description of what changed in a scene."""
    if not existing_content and new_content:
        return "New scene added"
    if existing_content and not new_content:
        return "Scene removed from script"
    if similarity >= thresholds.unchanged:
        return "Minor formatting changes"
    if similarity >= thresholds.minor_changes:
        return "Minor dialogue or action changes"
    if similarity >= thresholds.significant_changes:
        return "Significant content changes"
    return "Major rewrite of scene"


def scene_sort_key(scene_number: str) -> float:
    """Numeric-aware sort key for scene numbers.

    Letter suffixes sort straight after their base number ("12A" -> 12.5).
    Only the leading number counts, so "12a" sorts as 12 and "12AB" as 12.5.
    Text without a leading number sorts as 0.
    """
    match = _LEADING_NUMBER.match(_UPPERCASE.sub(".5", scene_number))
    if match is None:
        return 0.0
    value = float(match.group())
    return value if math.isfinite(value) else 0.0


def script_scene_key(scene_number: str) -> str:
    """Match key for script scenes: the scene number exactly as written."""
    return scene_number


def schedule_scene_key(scene_number: str) -> str:
    """Match key for schedule scenes: whitespace removed and uppercased.

    Schedules come from structured PDFs where "12 a" and "12A" name the same
    scene; scripts keep exact matching (see script_scene_key).
    """
    return _WHITESPACE.sub("", scene_number).upper()


def pluralize(count: int, noun: str, suffix: str = "") -> str:
    """Format ``count noun[s] suffix`` ("1 new scene", "2 scenes added")."""
    text = f"{count} {noun}{'s' if count != 1 else ''}"
    return f"{text} {suffix}" if suffix else text


def join_summary(parts: Iterable[str]) -> str:
    """Join summary clauses, falling back to the no-changes message."""
    clauses = [part for part in parts if part]
    return ", ".join(clauses) if clauses else NO_CHANGES_SUMMARY
