"""
Prioritizer Data Models.

Immutable value objects shared by the curriculum processor, the progress
assessor, the priority calculator and the level-driven prioritizer.

Design:
- TenseNode: one schedulable mood/tense occurrence in the curriculum
- CurriculumAnalysis: the hardcoded tables the graph is built from
- CurriculumContext: the processed, read-only curriculum graph
- MasteryRecord: one validated learner mastery entry (pydantic)
- RankedTense: a node annotated with scores for one request
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.prioritizer.constants import (
    COMPLEXITY_SCORES,
    INTRODUCTION_LEVELS,
    LEVEL_HIERARCHY,
    PREREQUISITES,
    STAGE_THRESHOLDS,
    TENSE_FAMILIES,
)
from src.prioritizer.utils import get_tense_key, normalize_mood

# tense key -> mastery score (0-100); a missing key means "no data"
MasteryMap = dict[str, float]

WEIGHT_SUM_TOLERANCE = 0.01


# =============================================================================
# ENUMS
# =============================================================================


class LearningStage(str, Enum):
    """Learner stage within a level, derived from average mastery."""

    BEGINNER = "beginner"  # <20
    LEARNING = "learning"  # 20-39
    DEVELOPING = "developing"  # 40-59
    CONSOLIDATING = "consolidating"  # 60-74
    MASTERED = "mastered"  # 75+

    @classmethod
    def from_average(cls, avg_mastery: float) -> LearningStage:
        for threshold, stage in STAGE_THRESHOLDS:
            if avg_mastery >= threshold:
                return cls(stage)
        return cls.BEGINNER


class CompletionStatus(str, Enum):
    """Completion state of a tense family within a level."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    STARTED = "started"
    NOT_STARTED = "not_started"


# =============================================================================
# CURRICULUM GRAPH
# =============================================================================


@dataclass(frozen=True)
class TenseNode:
    """
    One mood/tense occurrence in a level of the curriculum.

    ``introduced_at`` is the canonical level the tense is taught at;
    ``level`` is the level this occurrence was listed under. Review
    duplicates in later levels carry ``is_core=False``.
    """

    mood: str
    tense: str
    complexity: int
    introduced_at: str
    family: str
    is_core: bool
    level: str
    target: str | None = None
    is_mixed: bool = False

    @property
    def key(self) -> str:
        return get_tense_key(self.mood, self.tense)


def _freeze_table(table: Mapping[str, Any]) -> Mapping[str, Any]:
    frozen = {
        key: tuple(value) if isinstance(value, (list, tuple)) else value
        for key, value in table.items()
    }
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class CurriculumAnalysis:
    """
    Hardcoded linguistic-analysis tables the curriculum graph is built from.

    Defaults to the bundled tables; tests and tools may inject their own.
    """

    introduction_levels: Mapping[str, str] = field(default_factory=lambda: dict(INTRODUCTION_LEVELS))
    complexity_scores: Mapping[str, int] = field(default_factory=lambda: dict(COMPLEXITY_SCORES))
    tense_families: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: dict(TENSE_FAMILIES))
    prerequisites: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: dict(PREREQUISITES))

    def __post_init__(self) -> None:
        for name in ("introduction_levels", "complexity_scores", "tense_families", "prerequisites"):
            object.__setattr__(self, name, _freeze_table(getattr(self, name)))

    def direct_prerequisites(self, key: str) -> tuple[str, ...]:
        return self.prerequisites.get(key, ())

    def has_prerequisites(self, key: str) -> bool:
        return bool(self.prerequisites.get(key))


DEFAULT_ANALYSIS = CurriculumAnalysis()


@dataclass(frozen=True)
class CurriculumContext:
    """
    Processed curriculum graph, built once and shared read-only.

    All mappings are ``MappingProxyType`` views and all sequences are tuples,
    so concurrent readers never observe a change.
    """

    analysis: CurriculumAnalysis
    nodes: Mapping[str, TenseNode]
    by_level: Mapping[str, tuple[TenseNode, ...]]
    level_order: Mapping[str, tuple[TenseNode, ...]]
    tense_families: Mapping[str, tuple[TenseNode, ...]]
    prerequisite_chains: Mapping[str, tuple[str, ...]]
    level_hierarchy: tuple[str, ...] = LEVEL_HIERARCHY

    def get_level_data(self, level: str) -> tuple[TenseNode, ...]:
        return self.by_level.get(level, ())

    def get_level_progression(self, level: str) -> tuple[TenseNode, ...]:
        return self.level_order.get(level, ())

    def get_prerequisite_chain(self, key: str) -> tuple[str, ...]:
        return self.prerequisite_chains.get(key, ())

    def get_node(self, key: str) -> TenseNode | None:
        return self.nodes.get(key)

    def get_family_members(self, family: str) -> tuple[TenseNode, ...]:
        return self.tense_families.get(family, ())


# =============================================================================
# LEARNER INPUT
# =============================================================================


class MasteryRecord(BaseModel):
    """One learner mastery entry as supplied by the progress tracker."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    mood: str
    tense: str
    # NaN and infinity are malformed, not clamped
    score: float = Field(allow_inf_nan=False)

    @field_validator("mood")
    @classmethod
    def _canonical_mood(cls, value: str) -> str:
        mood = normalize_mood(value)
        if not mood:
            raise ValueError("mood must not be empty")
        return mood

    @field_validator("tense")
    @classmethod
    def _non_empty_tense(cls, value: str) -> str:
        tense = value.strip()
        if not tense:
            raise ValueError("tense must not be empty")
        return tense

    @field_validator("score")
    @classmethod
    def _clamp_score(cls, value: float) -> float:
        return max(0.0, min(100.0, value))

    @property
    def key(self) -> str:
        return get_tense_key(self.mood, self.tense)


# =============================================================================
# WEIGHTS
# =============================================================================


@dataclass(frozen=True)
class PriorityWeights:
    """Blend of the core, review and exploration practice pools."""

    core: float
    review: float
    exploration: float

    def __post_init__(self) -> None:
        if min(self.core, self.review, self.exploration) < 0:
            raise ValueError(f"Priority weights must be non-negative: {self}")
        if abs(self.total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Priority weights must sum to 1.0, got {self.total:.3f}")

    @property
    def total(self) -> float:
        return self.core + self.review + self.exploration

    def to_dict(self) -> dict[str, float]:
        return {"core": self.core, "review": self.review, "exploration": self.exploration}


@dataclass(frozen=True)
class LevelWeights:
    """Static per-level pool blend, including the consolidation need."""

    core: float
    review: float
    exploration: float
    consolidation: float

    def to_dict(self) -> dict[str, float]:
        return {
            "core": self.core,
            "review": self.review,
            "exploration": self.exploration,
            "consolidation": self.consolidation,
        }


# =============================================================================
# ASSESSMENT RESULTS
# =============================================================================


@dataclass(frozen=True)
class StageSummary:
    """Learning stage of a learner within one level."""

    stage: LearningStage
    avg_mastery: float
    mastered_count: int
    total_count: int
    completion_percent: float
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "avg_mastery": round(self.avg_mastery),
            "mastered_count": self.mastered_count,
            "total_count": self.total_count,
            "completion_percent": round(self.completion_percent),
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class PrerequisiteGap:
    """A prerequisite that is not yet solid enough for a level tense."""

    key: str
    mood: str
    tense: str
    mastery: float
    urgency: float
    required_for: str
    priority: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "mastery": self.mastery,
            "urgency": self.urgency,
            "required_for": self.required_for,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class FamilyMember:
    node: TenseNode
    mastery: float

    @property
    def key(self) -> str:
        return self.node.key


@dataclass(frozen=True)
class FamilyGroup:
    """Completion analysis for one tense family within a level."""

    name: str
    members: tuple[FamilyMember, ...]
    avg_mastery: float
    completion_status: CompletionStatus
    priority: float
    readiness: float

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(member.key for member in self.members)


# =============================================================================
# RANKED OUTPUT
# =============================================================================


@dataclass(frozen=True)
class RankedTense:
    """
    A tense node annotated with the scores computed for one request.

    Only the fields relevant to the producing step are filled in; the rest
    stay None.
    """

    node: TenseNode
    priority: float
    readiness: float | None = None
    urgency: float | None = None
    pedagogical_value: float | None = None
    mastery: float | None = None
    is_prerequisite: bool = False
    mastery_gap: float | None = None
    original_level: str | None = None

    @property
    def key(self) -> str:
        return self.node.key

    @property
    def mood(self) -> str:
        return self.node.mood

    @property
    def tense(self) -> str:
        return self.node.tense

    @property
    def family(self) -> str:
        return self.node.family

    @property
    def complexity(self) -> int:
        return self.node.complexity

    @property
    def introduced_at(self) -> str:
        return self.node.introduced_at

    @property
    def is_core(self) -> bool:
        return self.node.is_core

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "key": self.key,
            "family": self.family,
            "complexity": self.complexity,
            "introduced_at": self.introduced_at,
            "is_core": self.is_core,
            "priority": round(self.priority, 2),
        }
        for name in ("readiness", "urgency", "pedagogical_value", "mastery", "mastery_gap"):
            value = getattr(self, name)
            if value is not None:
                data[name] = round(value, 2)
        if self.is_prerequisite:
            data["is_prerequisite"] = True
        if self.original_level:
            data["original_level"] = self.original_level
        return data


@dataclass(frozen=True)
class PrioritizedTenses:
    """Categorized prioritization for a learner at one level."""

    level: str
    core: tuple[RankedTense, ...]
    review: tuple[RankedTense, ...]
    exploration: tuple[RankedTense, ...]
    prerequisites: tuple[PrerequisiteGap, ...]
    family_groups: Mapping[str, FamilyGroup]
    progression: tuple[RankedTense, ...]
    weights: PriorityWeights
    level_weights: LevelWeights
