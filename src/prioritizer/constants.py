"""
Prioritizer Constants.

Static curriculum analysis and every tunable scoring table used by the
level-driven prioritization engine. Everything here is plain data so each
heuristic can be tuned or tested in isolation.

Tables:
- LEVEL_HIERARCHY: CEFR levels, lowest first
- LEVEL_PRIORITY_WEIGHTS: static per-level blend of practice pools
- CURRICULUM_ANALYSIS: introduction levels, complexity, families, prerequisites
- Scoring tables for the assessor and the calculator
"""

from __future__ import annotations

from types import MappingProxyType

# =============================================================================
# CEFR LEVELS
# =============================================================================

LEVEL_HIERARCHY: tuple[str, ...] = ("A1", "A2", "B1", "B2", "C1", "C2")

DEFAULT_LEVEL = "A1"
DEFAULT_COMPLEXITY = 5
DEFAULT_FAMILY = "independent"

# Static blend of practice pools per level (reported next to dynamic weights)
LEVEL_PRIORITY_WEIGHTS = MappingProxyType({
    "A1": {"core": 0.90, "review": 0.10, "exploration": 0.00, "consolidation": 0.8},
    "A2": {"core": 0.75, "review": 0.20, "exploration": 0.05, "consolidation": 0.6},
    "B1": {"core": 0.65, "review": 0.25, "exploration": 0.10, "consolidation": 0.5},
    "B2": {"core": 0.50, "review": 0.35, "exploration": 0.15, "consolidation": 0.4},
    "C1": {"core": 0.35, "review": 0.45, "exploration": 0.20, "consolidation": 0.3},
    "C2": {"core": 0.25, "review": 0.55, "exploration": 0.20, "consolidation": 0.2},
})
FALLBACK_WEIGHT_LEVEL = "B1"

# =============================================================================
# CURRICULUM ANALYSIS
# =============================================================================

INTRODUCTION_LEVELS: dict[str, str] = {
    "indicative|pres": "A1",
    "nonfinite|part": "A1",
    "nonfinite|ger": "A1",
    "indicative|pretIndef": "A2",
    "indicative|impf": "A2",
    "indicative|fut": "A2",
    "imperative|impAff": "A2",
    "indicative|plusc": "B1",
    "indicative|pretPerf": "B1",
    "indicative|futPerf": "B1",
    "subjunctive|subjPres": "B1",
    "subjunctive|subjPerf": "B1",
    "imperative|impNeg": "B1",
    "conditional|cond": "B1",
    "subjunctive|subjImpf": "B2",
    "subjunctive|subjPlusc": "B2",
    "conditional|condPerf": "B2",
}

COMPLEXITY_SCORES: dict[str, int] = {
    "indicative|pres": 1,
    "nonfinite|ger": 2,
    "nonfinite|part": 2,
    "indicative|pretIndef": 3,
    "indicative|impf": 3,
    "indicative|fut": 3,
    "imperative|impAff": 4,
    "indicative|pretPerf": 5,
    "conditional|cond": 5,
    "indicative|plusc": 6,
    "indicative|futPerf": 6,
    "subjunctive|subjPres": 7,
    "subjunctive|subjPerf": 7,
    "imperative|impNeg": 7,
    "subjunctive|subjImpf": 8,
    "conditional|condPerf": 8,
    "subjunctive|subjPlusc": 9,
}

# A key may belong to several families; the first match wins on lookup.
TENSE_FAMILIES: dict[str, tuple[str, ...]] = {
    "basic_present": ("indicative|pres",),
    "nonfinite_basics": ("nonfinite|ger", "nonfinite|part"),
    "past_narrative": ("indicative|pretIndef", "indicative|impf"),
    "future_planning": ("indicative|fut",),
    "command_forms": ("imperative|impAff", "imperative|impNeg"),
    "perfect_system": (
        "indicative|pretPerf",
        "indicative|plusc",
        "indicative|futPerf",
        "conditional|condPerf",
        "subjunctive|subjPerf",
        "subjunctive|subjPlusc",
    ),
    "subjunctive_present": ("subjunctive|subjPres", "subjunctive|subjPerf"),
    "subjunctive_past": ("subjunctive|subjImpf", "subjunctive|subjPlusc"),
    "conditional_system": ("conditional|cond", "conditional|condPerf"),
}

# Direct (non-transitive) prerequisite edges
PREREQUISITES: dict[str, tuple[str, ...]] = {
    "subjunctive|subjPres": ("indicative|pres", "indicative|pretIndef"),
    "subjunctive|subjImpf": ("subjunctive|subjPres", "indicative|impf"),
    "indicative|pretPerf": ("indicative|pres",),
    "indicative|plusc": ("indicative|pretPerf", "indicative|impf"),
    "conditional|condPerf": ("conditional|cond", "indicative|pretPerf"),
    "subjunctive|subjPlusc": ("subjunctive|subjImpf", "indicative|plusc"),
}

# Localized mood spellings found in curriculum sources and learner records
MOOD_ALIASES: dict[str, str] = {
    "indicativo": "indicative",
    "subjuntivo": "subjunctive",
    "imperativo": "imperative",
    "condicional": "conditional",
    "no finito": "nonfinite",
    "no_finito": "nonfinite",
    "formas no personales": "nonfinite",
    "infinitivo": "nonfinite",
    "non-finite": "nonfinite",
}

# Family order used as the last tie-break of a level progression
PROGRESSION_FAMILY_ORDER: tuple[str, ...] = (
    "basic_present",
    "nonfinite_basics",
    "past_narrative",
    "perfect_system",
    "subjunctive_present",
    "conditional_system",
    "command_forms",
    "subjunctive_past",
)

# =============================================================================
# PROGRESS ASSESSMENT
# =============================================================================

FULL_READINESS_MASTERY = 75.0
UNKNOWN_READINESS = 0.5
STAGE_MASTERED_THRESHOLD = 75.0
GAP_MASTERY_THRESHOLD = 70.0
GAP_BASE_PRIORITY = 90.0
PATH_MIN_READINESS = 0.7
PATH_MASTERY_CEILING = 80.0

# Maximum comfortable complexity per learner level (exploration penalty)
LEVEL_MAX_COMPLEXITY: dict[str, int] = {
    "A1": 3,
    "A2": 4,
    "B1": 7,
    "B2": 8,
    "C1": 9,
    "C2": 9,
}

# (threshold, stage value) pairs, checked top-down
STAGE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (75.0, "mastered"),
    (60.0, "consolidating"),
    (40.0, "developing"),
    (20.0, "learning"),
)

STAGE_RECOMMENDATIONS: dict[str, str] = {
    "beginner": "Start with core {level} tenses. Focus on building foundations.",
    "learning": "Continue practicing {level} tenses. Mix in some review.",
    "developing": "Good progress! Balance new {level} content with review.",
    "consolidating": "Nearly there! Focus on weak spots and start exploring next level.",
    "mastered": "Excellent! Ready to advance or maintain through review.",
}

# =============================================================================
# PRIORITY CALCULATION
# =============================================================================

LEVEL_BONUS_SAME = 30
LEVEL_BONUS_BELOW = 15
LEVEL_BONUS_ABOVE = 5
LEVEL_BONUS_UNKNOWN = 10

FAMILY_IMPORTANCE_BONUSES: dict[str, int] = {
    "subjunctive_present": 25,
    "perfect_system": 20,
    "past_narrative": 15,
    "subjunctive_past": 30,
    "conditional_system": 15,
}

LEVEL_CRITICAL_TENSES: dict[str, tuple[str, ...]] = {
    "A2": ("indicative|pretIndef", "indicative|impf"),
    "B1": ("subjunctive|subjPres", "indicative|pretPerf"),
    "B2": ("subjunctive|subjImpf",),
}

LEVEL_COMPLEXITY_RANGES: dict[str, tuple[int, int]] = {
    "A1": (1, 3),
    "A2": (2, 4),
    "B1": (4, 7),
    "B2": (6, 8),
    "C1": (7, 9),
    "C2": (8, 9),
}
DEFAULT_COMPLEXITY_RANGE = (1, 9)

FOUNDATIONAL_TENSE_BONUSES: dict[str, int] = {
    "indicative|pres": 30,
    "subjunctive|subjPres": 25,
    "indicative|pretIndef": 20,
    "indicative|pretPerf": 20,
}

PEDAGOGICAL_FAMILY_BONUSES: dict[str, int] = {
    "perfect_system": 15,
    "subjunctive_present": 12,
    "subjunctive_past": 15,
    "conditional_system": 10,
}
DEFAULT_PEDAGOGICAL_FAMILY_BONUS = 5

REVIEW_FAMILY_BONUSES: dict[str, int] = {
    "perfect_system": 10,
    "subjunctive_present": 15,
    "past_narrative": 12,
}

# Family order for compare_family_priority
FAMILY_PRIORITY_ORDER: tuple[str, ...] = PROGRESSION_FAMILY_ORDER

# (core, review, exploration) split per overall-mastery bucket:
# <30 beginner, <60 learning, >=75 mastered, otherwise approaching
DYNAMIC_WEIGHT_BUCKETS: dict[str, tuple[float, float, float]] = {
    "beginner": (0.80, 0.15, 0.05),
    "learning": (0.60, 0.30, 0.10),
    "approaching": (0.50, 0.35, 0.15),
    "mastered": (0.30, 0.40, 0.30),
}

DEFAULT_NODE_PRIORITY = 50.0
