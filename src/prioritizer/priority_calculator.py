"""
Priority Calculator.

Blends independently tuned heuristics into float priority scores:

    advanced   = complexity*5 + level bonus + family importance
                 + prerequisite chain length*3 + max(0, 100 - mastery)*0.2
    learning   = advanced + readiness*20 + urgency*0.3 + pedagogical value*0.2
    review     = 30 + 40 (prerequisite for level) + max(0, 75 - mastery)*0.3
                 + review family bonus
    exploration = 20 + readiness*30 + 10 (complexity 5-7)

Unknown mastery counts as 0 in every score. Rounding is left to callers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from functools import cmp_to_key
from statistics import mean
from typing import Any, Union

from loguru import logger

from src.prioritizer.constants import (
    DEFAULT_COMPLEXITY_RANGE,
    DEFAULT_NODE_PRIORITY,
    DEFAULT_PEDAGOGICAL_FAMILY_BONUS,
    DYNAMIC_WEIGHT_BUCKETS,
    FAMILY_IMPORTANCE_BONUSES,
    FAMILY_PRIORITY_ORDER,
    FOUNDATIONAL_TENSE_BONUSES,
    LEVEL_BONUS_ABOVE,
    LEVEL_BONUS_BELOW,
    LEVEL_BONUS_SAME,
    LEVEL_BONUS_UNKNOWN,
    LEVEL_COMPLEXITY_RANGES,
    LEVEL_CRITICAL_TENSES,
    PEDAGOGICAL_FAMILY_BONUSES,
    REVIEW_FAMILY_BONUSES,
)
from src.prioritizer.models import (
    CurriculumContext,
    PriorityWeights,
    RankedTense,
    TenseNode,
)
from src.prioritizer.progress_assessor import Progress, ProgressAssessor
from src.prioritizer.utils import level_gap

Scorable = Union[TenseNode, RankedTense]


def _as_node(item: Scorable) -> TenseNode:
    return item.node if isinstance(item, RankedTense) else item


class PriorityCalculator:
    """
    Score tense nodes for a learner level.

    Usage:
        calculator = PriorityCalculator(processor.context, assessor)
        weights = calculator.calculate_dynamic_weights("B1", progress)
        score = calculator.calculate_learning_priority(node, "B1", mastery_map)
    """

    def __init__(self, context: CurriculumContext, assessor: ProgressAssessor):
        self.context = context
        self.assessor = assessor

    # =========================================================================
    # CORE SCORES
    # =========================================================================

    def calculate_advanced_priority(
        self,
        node: Scorable,
        level: str,
        mastery_map: Mapping[str, float],
    ) -> float:
        """
        Curriculum-aware base priority of a tense for a learner level.

        The family-importance bonus is withheld from tenses introduced above
        the learner's level so they never outrank current material on family
        alone.
        """
        node = _as_node(node)
        gap = level_gap(level, node.introduced_at)

        if gap is None:
            level_bonus = LEVEL_BONUS_SAME if node.introduced_at == level else LEVEL_BONUS_UNKNOWN
        elif gap == 0:
            level_bonus = LEVEL_BONUS_SAME
        elif gap < 0:
            level_bonus = LEVEL_BONUS_BELOW
        else:
            level_bonus = LEVEL_BONUS_ABOVE

        family_bonus = FAMILY_IMPORTANCE_BONUSES.get(node.family, 0)
        if gap is not None and gap > 0:
            family_bonus = 0

        chain_bonus = len(self.context.get_prerequisite_chain(node.key)) * 3
        mastery = self.assessor.mastery_of(mastery_map, node.key)

        return (
            node.complexity * 5
            + level_bonus
            + family_bonus
            + chain_bonus
            + max(0.0, 100 - mastery) * 0.2
        )

    def calculate_urgency(self, node: Scorable, level: str, mastery_map: Mapping[str, float]) -> float:
        """Urgency in [0, 100]: level-critical tenses and half-finished work first."""
        node = _as_node(node)
        urgency = 50.0

        if node.key in LEVEL_CRITICAL_TENSES.get(level, ()):
            urgency += 30

        family_members = self.context.get_family_members(node.family)
        if family_members:
            family_avg = mean(self.assessor.mastery_of(mastery_map, member.key) for member in family_members)
            if 40 < family_avg < 80:
                urgency += 15

        mastery = self.assessor.mastery_of(mastery_map, node.key)
        if 30 < mastery < 70:
            urgency += 10

        return min(100.0, urgency)

    def calculate_pedagogical_value(self, node: Scorable, level: str) -> float:
        node = _as_node(node)
        value = 50.0

        low, high = LEVEL_COMPLEXITY_RANGES.get(level, DEFAULT_COMPLEXITY_RANGE)
        if low <= node.complexity <= high:
            value += 20

        value += FOUNDATIONAL_TENSE_BONUSES.get(node.key, 0)
        value += PEDAGOGICAL_FAMILY_BONUSES.get(node.family, DEFAULT_PEDAGOGICAL_FAMILY_BONUS)
        return value

    def calculate_learning_priority(self, node: Scorable, level: str, mastery_map: Mapping[str, float]) -> float:
        """Composite priority used to rank new material."""
        return (
            self.calculate_advanced_priority(node, level, mastery_map)
            + self.assessor.assess_readiness(node, mastery_map) * 20
            + self.calculate_urgency(node, level, mastery_map) * 0.3
            + self.calculate_pedagogical_value(node, level) * 0.2
        )

    def calculate_review_priority(self, node: Scorable, level: str, mastery: float) -> float:
        node = _as_node(node)
        priority = 30.0
        if self.is_prerequisite_for_level(node.key, level):
            priority += 40
        priority += max(0.0, 75 - mastery) * 0.3
        priority += REVIEW_FAMILY_BONUSES.get(node.family, 0)
        return priority

    @staticmethod
    def calculate_exploration_priority(node: Scorable, readiness: float) -> float:
        priority = 20 + readiness * 30
        if 5 <= node.complexity <= 7:
            priority += 10  # sweet spot for previews
        return priority

    # =========================================================================
    # WEIGHTS
    # =========================================================================

    def calculate_dynamic_weights(self, level: str, progress: Progress = None) -> PriorityWeights:
        """
        Core/review/exploration blend from the learner's average level mastery.

        Only level tenses with data count toward the average; no data at all
        means a beginner blend.
        """
        mastery_map = self.assessor.create_mastery_map(progress)
        known = [
            mastery_map[node.key]
            for node in self.context.get_level_progression(level)
            if node.key in mastery_map
        ]
        avg_mastery = mean(known) if known else 0.0

        if avg_mastery < 30:
            bucket = "beginner"
        elif avg_mastery < 60:
            bucket = "learning"
        elif avg_mastery >= 75:
            bucket = "mastered"
        else:
            bucket = "approaching"

        logger.debug("Dynamic weights for {}: avg mastery {:.1f} -> {}", level, avg_mastery, bucket)
        return PriorityWeights(*DYNAMIC_WEIGHT_BUCKETS[bucket])

    # =========================================================================
    # ADJUSTMENTS
    # =========================================================================

    def apply_advanced_progress_adjustments(
        self,
        nodes: Iterable[Scorable],
        progress: Progress = None,
    ) -> list[Scorable]:
        """
        Re-weight priorities with the learner's mastery.

        Applied in order: +15 for partially learned tenses (20 < m < 70),
        halved for mastered tenses (m >= 75), x0.7 when prerequisites are not
        ready (readiness < 0.5). Bare nodes start at priority 50.

        Without progress the input is returned unchanged. Progress whose
        records are all malformed still adjusts, with every mastery at 0.
        """
        items = list(nodes)
        if progress is not None and not isinstance(progress, Mapping):
            progress = list(progress)
        if not progress:
            return items

        mastery_map = self.assessor.create_mastery_map(progress)

        adjusted: list[Scorable] = []
        for item in items:
            node = _as_node(item)
            mastery = self.assessor.mastery_of(mastery_map, node.key)
            readiness = self.assessor.assess_readiness(node, mastery_map)
            priority = item.priority if isinstance(item, RankedTense) else DEFAULT_NODE_PRIORITY

            if 20 < mastery < 70:
                priority += 15
            if mastery >= 75:
                priority *= 0.5
            if readiness < 0.5:
                priority *= 0.7

            if isinstance(item, RankedTense):
                adjusted.append(replace(item, priority=priority, mastery=mastery, readiness=readiness))
            else:
                adjusted.append(RankedTense(node=node, priority=priority, mastery=mastery, readiness=readiness))
        return adjusted

    # =========================================================================
    # RELATIONS & ORDERING
    # =========================================================================

    def is_prerequisite_for_level(self, key: str, level: str) -> bool:
        """True when ``key`` is in the prerequisite chain of any tense in the level."""
        return any(
            key in self.context.get_prerequisite_chain(node.key)
            for node in self.context.get_level_progression(level)
        )

    def compare_family_priority(self, a: Any, b: Any) -> float:
        return compare_family_priority(a, b)

    def family_priority_key(self, item: Any) -> Any:
        """Sort key wrapping ``compare_family_priority`` for use with ``sorted``."""
        return family_priority_key(item)


def compare_family_priority(a: Any, b: Any) -> float:
    """
    Comparator: family order first, then descending priority.

    Tenses outside the ranked families, or within the same family, fall
    through to priority.
    """
    a_family = getattr(a, "family", None)
    b_family = getattr(b, "family", None)
    if a_family in FAMILY_PRIORITY_ORDER and b_family in FAMILY_PRIORITY_ORDER and a_family != b_family:
        return FAMILY_PRIORITY_ORDER.index(a_family) - FAMILY_PRIORITY_ORDER.index(b_family)
    return (getattr(b, "priority", 0) or 0) - (getattr(a, "priority", 0) or 0)


family_priority_key = cmp_to_key(compare_family_priority)
