"""
Prioritizer Module - Level-driven adaptive tense prioritization.

Decides which mood/tense combinations a learner at a CEFR level should
practise next, in what proportion and in what order.

Components:
- curriculum_processor: Immutable curriculum graph (levels, families, prerequisite chains)
- progress_assessor: Mastery maps, readiness, learning stage, gaps, progression path
- priority_calculator: Priority, urgency, pedagogical value, dynamic weights
- level_prioritizer: Orchestrator producing core / review / exploration pools

Design Principle:
The curriculum graph is built once and shared read-only; every request
builds its own mastery map, so nothing here holds learner state.
"""

from src.prioritizer.constants import LEVEL_HIERARCHY, LEVEL_PRIORITY_WEIGHTS
from src.prioritizer.curriculum_processor import CurriculumProcessor
from src.prioritizer.level_prioritizer import LevelDrivenPrioritizer
from src.prioritizer.models import (
    CompletionStatus,
    CurriculumAnalysis,
    CurriculumContext,
    FamilyGroup,
    LearningStage,
    LevelWeights,
    MasteryRecord,
    PrerequisiteGap,
    PrioritizedTenses,
    PriorityWeights,
    RankedTense,
    StageSummary,
    TenseNode,
)
from src.prioritizer.priority_calculator import (
    PriorityCalculator,
    compare_family_priority,
    family_priority_key,
)
from src.prioritizer.progress_assessor import ProgressAssessor
from src.prioritizer.utils import get_tense_key, parse_tense_key

__all__ = [
    # Components
    "CurriculumProcessor",
    "ProgressAssessor",
    "PriorityCalculator",
    "LevelDrivenPrioritizer",
    # Curriculum graph
    "TenseNode",
    "CurriculumAnalysis",
    "CurriculumContext",
    # Learner input
    "MasteryRecord",
    # Results
    "LearningStage",
    "CompletionStatus",
    "StageSummary",
    "PrerequisiteGap",
    "FamilyGroup",
    "RankedTense",
    "PrioritizedTenses",
    "PriorityWeights",
    "LevelWeights",
    # Helpers
    "LEVEL_HIERARCHY",
    "LEVEL_PRIORITY_WEIGHTS",
    "get_tense_key",
    "parse_tense_key",
    "compare_family_priority",
    "family_priority_key",
]
