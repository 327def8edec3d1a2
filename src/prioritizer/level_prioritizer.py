"""
Level-Driven Prioritizer.

Composes the curriculum processor, progress assessor and priority
calculator into the categorized practice plan consumed by item selection:

- core: new tenses of the learner's level
- review: weak or prerequisite tenses from earlier levels
- exploration: ready previews from the next level
- prerequisites, family groups, progression path and weights
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from config import Settings, get_settings
from src.prioritizer.constants import (
    DEFAULT_NODE_PRIORITY,
    FALLBACK_WEIGHT_LEVEL,
    LEVEL_PRIORITY_WEIGHTS,
)
from src.prioritizer.curriculum_processor import CurriculumProcessor
from src.prioritizer.models import (
    CompletionStatus,
    CurriculumAnalysis,
    LevelWeights,
    PrioritizedTenses,
    RankedTense,
    TenseNode,
)
from src.prioritizer.priority_calculator import PriorityCalculator
from src.prioritizer.progress_assessor import Progress, ProgressAssessor
from src.prioritizer.utils import (
    get_form_complexity,
    get_tense_key,
    next_level,
    normalize_level,
    normalize_mood,
    previous_levels,
    remove_duplicate_tenses,
)


class LevelDrivenPrioritizer:
    """
    Level-aware tense prioritization for one curriculum.

    The curriculum graph is built once; every request works on a fresh
    mastery map, so one instance can serve any number of learners.

    Usage:
        prioritizer = LevelDrivenPrioritizer()
        plan = prioritizer.get_prioritized_tenses("B1", progress)
        for ranked in plan.core:
            print(ranked.key, ranked.priority)
    """

    def __init__(
        self,
        source: Iterable[Mapping[str, Any]] | None = None,
        analysis: CurriculumAnalysis | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.curriculum = CurriculumProcessor(source, analysis)
        self.context = self.curriculum.context
        self.assessor = ProgressAssessor(self.context, path_limit=self.settings.progression_path_limit)
        self.calculator = PriorityCalculator(self.context, self.assessor)

    # =========================================================================
    # CATEGORIZED PRIORITIZATION
    # =========================================================================

    def get_prioritized_tenses(self, level: str, progress: Progress = None) -> PrioritizedTenses:
        """
        Categorize and rank the curriculum for a learner.

        Args:
            level: Learner CEFR level
            progress: Mastery records or an existing mastery map

        Returns:
            PrioritizedTenses with core, review and exploration pools
        """
        level = normalize_level(level) or level
        mastery_map = self.assessor.create_mastery_map(progress)

        prioritized = PrioritizedTenses(
            level=level,
            core=tuple(self._core_tenses(level, mastery_map)),
            review=tuple(self._review_tenses(level, mastery_map)),
            exploration=tuple(self._exploration_tenses(level, mastery_map)),
            prerequisites=tuple(self.assessor.get_prerequisite_gaps(level, mastery_map)),
            family_groups=self.assessor.get_tense_family_groups(level, mastery_map),
            progression=tuple(self.assessor.get_progression_path(level, mastery_map)),
            weights=self.calculator.calculate_dynamic_weights(level, mastery_map),
            level_weights=self.get_level_weights(level),
        )

        logger.debug(
            "Level {} prioritization: {} core, {} review, {} exploration",
            level,
            len(prioritized.core),
            len(prioritized.review),
            len(prioritized.exploration),
        )
        return prioritized

    def _core_tenses(self, level: str, mastery_map: Mapping[str, float]) -> list[RankedTense]:
        ranked = [
            RankedTense(
                node=node,
                priority=self.calculator.calculate_advanced_priority(node, level, mastery_map),
                readiness=self.assessor.assess_readiness(node, mastery_map),
                urgency=self.calculator.calculate_urgency(node, level, mastery_map),
                pedagogical_value=self.calculator.calculate_pedagogical_value(node, level),
                mastery=self.assessor.mastery_of(mastery_map, node.key),
            )
            for node in self.context.get_level_progression(level)
            if node.is_core
        ]
        ranked.sort(key=lambda item: (item.readiness, item.urgency, item.priority), reverse=True)
        return ranked

    def _review_tenses(self, level: str, mastery_map: Mapping[str, float]) -> list[RankedTense]:
        earlier: list[TenseNode] = []
        for previous in previous_levels(level):
            earlier.extend(self.context.get_level_progression(previous))

        ceiling = self.settings.review_mastery_ceiling
        ranked = []
        for node in remove_duplicate_tenses(earlier):
            mastery = self.assessor.mastery_of(mastery_map, node.key)
            is_prerequisite = self.calculator.is_prerequisite_for_level(node.key, level)
            if mastery >= ceiling and not is_prerequisite:
                continue
            ranked.append(
                RankedTense(
                    node=node,
                    priority=self.calculator.calculate_review_priority(node, level, mastery),
                    mastery=mastery,
                    is_prerequisite=is_prerequisite,
                    mastery_gap=ceiling - mastery,
                    original_level=node.level,
                )
            )

        ranked.sort(key=lambda item: (not item.is_prerequisite, -item.priority))
        return ranked[: self.settings.review_limit]

    def _exploration_tenses(self, level: str, mastery_map: Mapping[str, float]) -> list[RankedTense]:
        upcoming = next_level(level)
        if upcoming is None:
            return []

        ranked = []
        for node in self.context.get_level_progression(upcoming):
            readiness = self.assessor.assess_exploration_readiness(node, level, mastery_map)
            if readiness < self.settings.exploration_min_readiness:
                continue
            ranked.append(
                RankedTense(
                    node=node,
                    priority=self.calculator.calculate_exploration_priority(node, readiness),
                    readiness=readiness,
                )
            )

        ranked.sort(key=lambda item: item.priority, reverse=True)
        return ranked[: self.settings.exploration_limit]

    @staticmethod
    def get_level_weights(level: str) -> LevelWeights:
        weights = LEVEL_PRIORITY_WEIGHTS.get(level, LEVEL_PRIORITY_WEIGHTS[FALLBACK_WEIGHT_LEVEL])
        return LevelWeights(**weights)

    # =========================================================================
    # SELECTION HELPERS
    # =========================================================================

    def get_weighted_selection(
        self,
        forms: Iterable[Mapping[str, Any]],
        level: str,
        progress: Progress = None,
    ) -> list[RankedTense]:
        """
        Rank candidate verb forms by their tense's adjusted priority.

        Every form starts at priority 50; forms whose tense is missing from
        the curriculum get default node metadata. Forms without a mood or
        tense are dropped.
        """
        level = normalize_level(level) or level
        candidates = []
        for form in forms or ():
            node = self._node_for_form(form, level)
            if node is not None:
                candidates.append(RankedTense(node=node, priority=DEFAULT_NODE_PRIORITY))

        adjusted = self.calculator.apply_advanced_progress_adjustments(candidates, progress)
        return sorted(adjusted, key=lambda item: item.priority, reverse=True)

    def _node_for_form(self, form: Mapping[str, Any], level: str) -> TenseNode | None:
        mood = form.get("mood") if isinstance(form, Mapping) else None
        tense = form.get("tense") if isinstance(form, Mapping) else None
        if not isinstance(mood, str) or not isinstance(tense, str) or not mood.strip() or not tense.strip():
            logger.debug("Skipping form without mood or tense: {}", form)
            return None

        mood, tense = normalize_mood(mood), tense.strip()
        key = get_tense_key(mood, tense)
        node = self.context.get_node(key)
        if node is not None:
            return node

        return TenseNode(
            mood=mood,
            tense=tense,
            complexity=get_form_complexity(mood, tense, self.context.analysis),
            introduced_at=self.context.analysis.introduction_levels.get(key, level),
            family=self.curriculum.get_tense_family(key),
            is_core=True,
            level=level,
            is_mixed="Mixed" in tense,
        )

    def get_next_recommended_tense(self, level: str, progress: Progress = None) -> RankedTense | None:
        path = self.assessor.get_progression_path(normalize_level(level) or level, progress)
        return path[0] if path else None

    @staticmethod
    def get_recommended_focus(prioritized: PrioritizedTenses) -> str:
        """Name the practice focus suggested by a prioritization result."""
        if len(prioritized.prerequisites) > 2:
            return "prerequisite_gaps"

        in_progress = sum(
            1
            for group in prioritized.family_groups.values()
            if group.completion_status is CompletionStatus.IN_PROGRESS
        )
        if in_progress > 2:
            return "family_completion"
        if prioritized.core:
            return "core_learning"
        if len(prioritized.progression) > 3:
            return "systematic_progression"
        return "comprehensive_review"

    # =========================================================================
    # DEBUG
    # =========================================================================

    def debug_prioritization(self, level: str, progress: Progress = None) -> dict[str, Any]:
        """JSON-friendly summary of a prioritization, for inspection tools."""
        mastery_map = self.assessor.create_mastery_map(progress)
        prioritized = self.get_prioritized_tenses(level, mastery_map)
        stage = self.assessor.determine_learning_stage(prioritized.level, mastery_map)
        next_tense = prioritized.progression[0] if prioritized.progression else None

        return {
            "level": prioritized.level,
            "has_progress": bool(mastery_map),
            "counts": {
                "level_tenses": len(self.context.get_level_progression(prioritized.level)),
                "core": len(prioritized.core),
                "review": len(prioritized.review),
                "exploration": len(prioritized.exploration),
                "prerequisite_gaps": len(prioritized.prerequisites),
                "families": len(prioritized.family_groups),
                "progression": len(prioritized.progression),
            },
            "core": [item.to_dict() for item in prioritized.core],
            "review": [item.to_dict() for item in prioritized.review],
            "exploration": [item.to_dict() for item in prioritized.exploration],
            "prerequisites": [gap.to_dict() for gap in prioritized.prerequisites],
            "family_groups": {
                name: {
                    "status": group.completion_status.value,
                    "avg_mastery": round(group.avg_mastery, 2),
                    "tenses": list(group.keys),
                }
                for name, group in prioritized.family_groups.items()
            },
            "progression": [item.to_dict() for item in prioritized.progression],
            "weights": prioritized.weights.to_dict(),
            "level_weights": prioritized.level_weights.to_dict(),
            "stage": stage.to_dict(),
            "recommended_focus": self.get_recommended_focus(prioritized),
            "next_recommended": next_tense.key if next_tense else None,
        }
