"""
Prioritizer Utilities.

Pure helpers shared by the curriculum processor, the progress assessor and
the priority calculator: tense keys, CEFR level arithmetic, mood
normalization and duplicate removal.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeVar

from src.prioritizer.constants import (
    DEFAULT_COMPLEXITY,
    LEVEL_HIERARCHY,
    MOOD_ALIASES,
)

if TYPE_CHECKING:
    from src.prioritizer.models import CurriculumAnalysis

T = TypeVar("T")


def get_tense_key(mood: str, tense: str) -> str:
    """Build the canonical ``mood|tense`` key."""
    return f"{mood}|{tense}"


def parse_tense_key(key: str) -> tuple[str, str]:
    """Split a ``mood|tense`` key; a key without separator yields an empty tense."""
    mood, _, tense = key.partition("|")
    return mood, tense


def normalize_mood(mood: str) -> str:
    """Map localized mood spellings to their canonical English name."""
    lowered = mood.strip().lower()
    return MOOD_ALIASES.get(lowered, lowered)


def normalize_level(level: object) -> str | None:
    """Return an upper-cased CEFR level, or None when it is not one."""
    if not isinstance(level, str):
        return None
    candidate = level.strip().upper()
    return candidate if candidate in LEVEL_HIERARCHY else None


def level_index(level: str | None) -> int:
    """Position of a level in the hierarchy, -1 when unknown."""
    if level is None:
        return -1
    try:
        return LEVEL_HIERARCHY.index(level)
    except ValueError:
        return -1


def level_gap(learner_level: str, node_level: str) -> int | None:
    """
    Number of CEFR steps a node sits ahead of the learner.

    Negative values mean the node belongs to an earlier level. Returns None
    when either level is unknown.
    """
    learner_index = level_index(learner_level)
    node_index = level_index(node_level)
    if learner_index == -1 or node_index == -1:
        return None
    return node_index - learner_index


def next_level(level: str) -> str | None:
    index = level_index(level)
    if index == -1 or index >= len(LEVEL_HIERARCHY) - 1:
        return None
    return LEVEL_HIERARCHY[index + 1]


def previous_levels(level: str) -> tuple[str, ...]:
    index = level_index(level)
    if index <= 0:
        return ()
    return LEVEL_HIERARCHY[:index]


def get_form_complexity(mood: str, tense: str, analysis: CurriculumAnalysis) -> int:
    """Complexity score for a raw form, defaulting to the mid-scale value."""
    return analysis.complexity_scores.get(get_tense_key(mood, tense), DEFAULT_COMPLEXITY)


def remove_duplicate_tenses(items: Iterable[T]) -> list[T]:
    """Drop repeated tense keys, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[T] = []
    for item in items:
        key = getattr(item, "key")
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique
