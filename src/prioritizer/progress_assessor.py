"""
Progress Assessor.

Turns a learner's mastery snapshot into the signals the prioritizer needs:

- MasteryMap: tense key -> score, unknown tenses left out (not zeroed)
- Readiness: how well the prerequisites of a tense are satisfied (0.0-1.0)
- Learning stage of the learner within a level
- Prerequisite gaps blocking the level
- Tense-family completion groups
- The ready-to-learn progression path

Readiness formula:
    readiness = 1.0                         (no prerequisites)
              = 0.5                         (no data for any prerequisite)
              = min(1.0, avg_mastery / 75)  (average over prerequisites with data)
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from statistics import mean
from typing import Any, Union

from loguru import logger
from pydantic import ValidationError

from config import get_settings
from src.prioritizer.constants import (
    DEFAULT_COMPLEXITY,
    FULL_READINESS_MASTERY,
    GAP_BASE_PRIORITY,
    GAP_MASTERY_THRESHOLD,
    LEVEL_MAX_COMPLEXITY,
    PATH_MASTERY_CEILING,
    PATH_MIN_READINESS,
    STAGE_MASTERED_THRESHOLD,
    STAGE_RECOMMENDATIONS,
    UNKNOWN_READINESS,
)
from src.prioritizer.models import (
    CompletionStatus,
    CurriculumContext,
    FamilyGroup,
    FamilyMember,
    LearningStage,
    MasteryMap,
    MasteryRecord,
    PrerequisiteGap,
    RankedTense,
    StageSummary,
    TenseNode,
)
from src.prioritizer.utils import get_tense_key, level_gap, normalize_mood, parse_tense_key

# Anything a caller may hand in as learner progress
Progress = Union[Mapping[str, float], Iterable[Union[Mapping[str, Any], MasteryRecord]], None]


class ProgressAssessor:
    """
    Assess learner mastery and readiness against the curriculum graph.

    Stateless apart from the shared, read-only CurriculumContext: every call
    builds its own mastery map and returns new value objects.
    """

    def __init__(self, context: CurriculumContext, path_limit: int | None = None):
        self.context = context
        self._path_limit = path_limit if path_limit is not None else get_settings().progression_path_limit

    # =========================================================================
    # MASTERY MAP
    # =========================================================================

    def create_mastery_map(self, records: Progress) -> MasteryMap:
        """
        Build ``tense key -> score`` from learner progress.

        Records missing a mood, tense or finite numeric score are skipped, so
        the tense stays unknown rather than counting as 0. Scores are clamped
        to 0-100. An existing mapping is copied with its keys normalized the
        same way as record moods.
        """
        if records is None:
            return {}

        if isinstance(records, Mapping):
            mastery: MasteryMap = {}
            for key, score in records.items():
                if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
                    logger.debug("Ignoring non-numeric mastery for {}", key)
                    continue
                mood, tense = parse_tense_key(str(key))
                mood, tense = normalize_mood(mood), tense.strip()
                if not mood or not tense:
                    logger.debug("Ignoring mastery with malformed key {!r}", key)
                    continue
                mastery[get_tense_key(mood, tense)] = max(0.0, min(100.0, float(score)))
            return mastery

        mastery = {}
        for index, raw in enumerate(records):
            record = self._parse_record(index, raw)
            if record is not None:
                mastery[record.key] = record.score
        return mastery

    def _parse_record(self, index: int, raw: Any) -> MasteryRecord | None:
        if isinstance(raw, MasteryRecord):
            return raw
        try:
            return MasteryRecord.model_validate(raw)
        except ValidationError as exc:
            logger.debug("Skipping malformed mastery record {}: {} error(s)", index, exc.error_count())
            return None

    @staticmethod
    def mastery_of(mastery_map: Mapping[str, float], key: str) -> float:
        """Mastery with unknown tenses counted as 0."""
        return mastery_map.get(key, 0.0)

    # =========================================================================
    # READINESS
    # =========================================================================

    def assess_readiness(self, node: TenseNode | RankedTense, mastery_map: Mapping[str, float]) -> float:
        """
        Estimate how well a tense's prerequisites are satisfied.

        Args:
            node: Tense to assess
            mastery_map: Learner mastery snapshot

        Returns:
            Readiness in [0.0, 1.0]; 0.5 when no prerequisite has data
        """
        chain = self.context.get_prerequisite_chain(node.key)
        if not chain:
            return 1.0

        known = [mastery_map[key] for key in chain if key in mastery_map]
        if not known:
            return UNKNOWN_READINESS

        return min(1.0, mean(known) / FULL_READINESS_MASTERY)

    def assess_exploration_readiness(
        self,
        node: TenseNode | RankedTense,
        level: str,
        mastery_map: Mapping[str, float],
    ) -> float:
        """
        Readiness for previewing a tense above the learner's level.

        Halved when the tense is more than one level ahead; reduced by 30%
        when its complexity exceeds the level's comfortable maximum by more
        than one.
        """
        readiness = self.assess_readiness(node, mastery_map)

        gap = level_gap(level, node.introduced_at)
        if gap is not None and gap > 1:
            readiness *= 0.5

        max_complexity = LEVEL_MAX_COMPLEXITY.get(level, DEFAULT_COMPLEXITY)
        if node.complexity > max_complexity + 1:
            readiness *= 0.7

        return min(1.0, readiness)

    # =========================================================================
    # LEARNING STAGE
    # =========================================================================

    def determine_learning_stage(self, level: str, progress: Progress) -> StageSummary:
        """Classify the learner's stage within a level."""
        mastery_map = self.create_mastery_map(progress)
        progression = self.context.get_level_progression(level)

        known = [mastery_map[node.key] for node in progression if node.key in mastery_map]
        avg_mastery = mean(known) if known else 0.0
        mastered_count = sum(1 for score in known if score >= STAGE_MASTERED_THRESHOLD)
        total_count = len(progression)

        stage = LearningStage.from_average(avg_mastery)
        return StageSummary(
            stage=stage,
            avg_mastery=avg_mastery,
            mastered_count=mastered_count,
            total_count=total_count,
            completion_percent=(mastered_count / total_count * 100) if total_count else 0.0,
            recommendation=self.get_stage_recommendation(stage, level),
        )

    @staticmethod
    def get_stage_recommendation(stage: LearningStage, level: str) -> str:
        template = STAGE_RECOMMENDATIONS.get(stage.value, STAGE_RECOMMENDATIONS["beginner"])
        return template.format(level=level)

    # =========================================================================
    # PREREQUISITE GAPS
    # =========================================================================

    def get_prerequisite_gaps(self, level: str, progress: Progress = None) -> list[PrerequisiteGap]:
        """
        Prerequisites of the level's tenses that are still below 70 mastery.

        Unknown prerequisites count as 0. Each (prerequisite, required_for)
        pair appears once; the result is sorted by descending priority.
        """
        mastery_map = self.create_mastery_map(progress)
        gaps: dict[tuple[str, str], PrerequisiteGap] = {}

        for node in self.context.get_level_progression(level):
            for prerequisite in self.context.get_prerequisite_chain(node.key):
                mastery = self.mastery_of(mastery_map, prerequisite)
                if mastery >= GAP_MASTERY_THRESHOLD or (prerequisite, node.key) in gaps:
                    continue
                mood, tense = parse_tense_key(prerequisite)
                gaps[(prerequisite, node.key)] = PrerequisiteGap(
                    key=prerequisite,
                    mood=mood,
                    tense=tense,
                    mastery=mastery,
                    urgency=100 - mastery,
                    required_for=node.key,
                    priority=GAP_BASE_PRIORITY + (GAP_MASTERY_THRESHOLD - mastery),
                )

        return sorted(gaps.values(), key=lambda gap: gap.priority, reverse=True)

    # =========================================================================
    # FAMILY GROUPS
    # =========================================================================

    def get_tense_family_groups(self, level: str, progress: Progress = None) -> dict[str, FamilyGroup]:
        """Group the level's tenses by family with completion statistics."""
        mastery_map = self.create_mastery_map(progress)
        grouped: dict[str, list[TenseNode]] = {}
        for node in self.context.get_level_progression(level):
            grouped.setdefault(node.family, []).append(node)

        groups: dict[str, FamilyGroup] = {}
        for family, nodes in grouped.items():
            members = tuple(FamilyMember(node=node, mastery=self.mastery_of(mastery_map, node.key)) for node in nodes)
            masteries = [member.mastery for member in members]
            avg_mastery = mean(masteries)
            mastered = sum(1 for score in masteries if score >= STAGE_MASTERED_THRESHOLD)

            if mastered == len(masteries):
                status = CompletionStatus.COMPLETED
            elif mastered > 0:
                status = CompletionStatus.IN_PROGRESS
            elif avg_mastery > 30:
                status = CompletionStatus.STARTED
            else:
                status = CompletionStatus.NOT_STARTED

            # Prioritize finishing families that are already under way
            if status is CompletionStatus.IN_PROGRESS:
                priority = 80 + avg_mastery * 0.2
            elif status is CompletionStatus.STARTED:
                priority = 70 + avg_mastery * 0.3
            else:
                priority = 60.0

            groups[family] = FamilyGroup(
                name=family,
                members=members,
                avg_mastery=avg_mastery,
                completion_status=status,
                priority=priority,
                readiness=mean(self.assess_readiness(node, mastery_map) for node in nodes),
            )

        return groups

    # =========================================================================
    # PROGRESSION PATH
    # =========================================================================

    def get_progression_path(self, level: str, progress: Progress = None) -> list[RankedTense]:
        """
        Next tenses to learn at this level.

        Keeps tenses whose prerequisites are ready (readiness >= 0.7) and that
        are not yet mastered (mastery < 80), best first.
        """
        mastery_map = self.create_mastery_map(progress)
        ranked: list[RankedTense] = []

        for node in self.context.get_level_progression(level):
            readiness = self.assess_readiness(node, mastery_map)
            mastery = self.mastery_of(mastery_map, node.key)
            if readiness < PATH_MIN_READINESS or mastery >= PATH_MASTERY_CEILING:
                continue
            ranked.append(
                RankedTense(
                    node=node,
                    priority=self.calculate_path_priority(node, mastery_map),
                    readiness=readiness,
                    mastery=mastery,
                )
            )

        ranked.sort(key=lambda item: item.priority, reverse=True)
        return ranked[: self._path_limit]

    def calculate_path_priority(self, node: TenseNode, mastery_map: Mapping[str, float]) -> float:
        """
        Score a tense for the progression path.

        50 + readiness*30 + 20 (core) + (10 - complexity)*2 + 15 when the
        tense is partially learned (20 < mastery < 70).
        """
        priority = 50 + self.assess_readiness(node, mastery_map) * 30
        if node.is_core:
            priority += 20
        priority += (10 - node.complexity) * 2

        mastery = self.mastery_of(mastery_map, node.key)
        if 20 < mastery < 70:
            priority += 15  # finish what's started
        return priority
