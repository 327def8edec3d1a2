"""
Curriculum Processor.

Turns a raw, possibly redundant curriculum source plus the hardcoded
curriculum-analysis tables into a canonical, read-only graph:

- per-level node lists (review duplicates kept, marked ``is_core=False``)
- per-level learning progressions
- tense-family groupings
- transitive prerequisite chains

Malformed or unknown entries never raise: they fall back to documented
defaults (complexity 5, level A1, family 'independent') or are skipped.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from loguru import logger

from src.prioritizer.constants import (
    DEFAULT_COMPLEXITY,
    DEFAULT_FAMILY,
    DEFAULT_LEVEL,
    LEVEL_HIERARCHY,
    PROGRESSION_FAMILY_ORDER,
)
from src.prioritizer.curriculum_data import DEFAULT_CURRICULUM
from src.prioritizer.models import (
    DEFAULT_ANALYSIS,
    CurriculumAnalysis,
    CurriculumContext,
    TenseNode,
)
from src.prioritizer.utils import (
    get_tense_key,
    normalize_level,
    normalize_mood,
    parse_tense_key,
)


class CurriculumProcessor:
    """
    Build and expose the immutable curriculum graph.

    The graph is built once in the constructor; every accessor afterwards is
    a read of ``self.context``.

    Usage:
        processor = CurriculumProcessor()
        progression = processor.get_level_progression("B1")
        chain = processor.get_prerequisite_chain("subjunctive|subjImpf")
    """

    def __init__(
        self,
        source: Iterable[Mapping[str, Any]] | None = None,
        analysis: CurriculumAnalysis | None = None,
    ):
        self.analysis = analysis or DEFAULT_ANALYSIS
        self.level_hierarchy = LEVEL_HIERARCHY
        self.context = self.build_graph(DEFAULT_CURRICULUM if source is None else source)

    # =========================================================================
    # GRAPH CONSTRUCTION
    # =========================================================================

    def build_graph(self, source: Iterable[Mapping[str, Any]]) -> CurriculumContext:
        """
        Resolve the raw source into a CurriculumContext.

        Args:
            source: Records shaped like ``{mood, tense, level, target}``

        Returns:
            The canonical, read-only curriculum graph
        """
        rows = []
        for index, raw in enumerate(source):
            row = self._parse_row(index, raw)
            if row is not None:
                rows.append(row)

        first_levels: dict[str, str] = {}
        for mood, tense, level, _target in rows:
            first_levels.setdefault(get_tense_key(mood, tense), level)

        nodes: dict[str, TenseNode] = {}
        by_level: dict[str, list[TenseNode]] = {level: [] for level in self.level_hierarchy}
        seen_in_level: dict[str, set[str]] = {level: set() for level in self.level_hierarchy}

        for mood, tense, level, target in rows:
            key = get_tense_key(mood, tense)
            if key in seen_in_level[level]:
                continue
            seen_in_level[level].add(key)

            introduced_at = self._introduction_level(key, first_levels[key])
            node = TenseNode(
                mood=mood,
                tense=tense,
                complexity=self.get_complexity(key),
                introduced_at=introduced_at,
                family=self.get_tense_family(key),
                is_core=introduced_at == level,
                level=level,
                target=target,
                is_mixed="Mixed" in tense,
            )
            by_level[level].append(node)
            nodes.setdefault(key, node)

        level_order = {
            level: self.build_level_progression(level, level_nodes)
            for level, level_nodes in by_level.items()
        }

        chains = {key: self.build_prerequisite_chain(key) for key in self.analysis.prerequisites}
        for key in nodes:
            chains.setdefault(key, ())

        context = CurriculumContext(
            analysis=self.analysis,
            nodes=MappingProxyType(nodes),
            by_level=MappingProxyType({level: tuple(items) for level, items in by_level.items()}),
            level_order=MappingProxyType(level_order),
            tense_families=MappingProxyType(self._build_family_nodes(nodes)),
            prerequisite_chains=MappingProxyType(chains),
            level_hierarchy=self.level_hierarchy,
        )

        logger.debug(
            "Curriculum processed: {} tenses, {} families, {} prerequisite chains",
            len(nodes),
            len(context.tense_families),
            sum(1 for chain in chains.values() if chain),
        )
        return context

    def _parse_row(self, index: int, raw: Mapping[str, Any]) -> tuple[str, str, str, str | None] | None:
        """Validate one source record; returns None for records that cannot be placed."""
        mood = raw.get("mood") if isinstance(raw, Mapping) else None
        tense = raw.get("tense") if isinstance(raw, Mapping) else None
        if not isinstance(mood, str) or not isinstance(tense, str) or not mood.strip() or not tense.strip():
            logger.debug("Skipping curriculum row {}: missing mood or tense", index)
            return None

        level = normalize_level(raw.get("level")) or DEFAULT_LEVEL
        target = raw.get("target")
        return normalize_mood(mood), tense.strip(), level, target if isinstance(target, str) else None

    def _introduction_level(self, key: str, first_level: str) -> str:
        canonical = self.analysis.introduction_levels.get(key)
        if canonical is None:
            return first_level
        if canonical != first_level:
            logger.debug(
                "Introduction table places {} at {} but the source first lists it at {}",
                key,
                canonical,
                first_level,
            )
        return canonical

    def _build_family_nodes(self, nodes: Mapping[str, TenseNode]) -> dict[str, tuple[TenseNode, ...]]:
        families: dict[str, tuple[TenseNode, ...]] = {}
        for family, keys in self.analysis.tense_families.items():
            members = []
            for key in keys:
                node = nodes.get(key)
                if node is None:
                    mood, tense = parse_tense_key(key)
                    introduced_at = self.analysis.introduction_levels.get(key, DEFAULT_LEVEL)
                    node = TenseNode(
                        mood=mood,
                        tense=tense,
                        complexity=self.get_complexity(key),
                        introduced_at=introduced_at,
                        family=self.get_tense_family(key),
                        is_core=True,
                        level=introduced_at,
                    )
                members.append(node)
            families[family] = tuple(members)
        return families

    # =========================================================================
    # TABLE LOOKUPS
    # =========================================================================

    def get_tense_family(self, key: str) -> str:
        """Pedagogical family of a tense key, 'independent' when untagged."""
        for family, keys in self.analysis.tense_families.items():
            if key in keys:
                return family
        return DEFAULT_FAMILY

    def get_complexity(self, key: str) -> int:
        return self.analysis.complexity_scores.get(key, DEFAULT_COMPLEXITY)

    def build_level_progression(self, level: str, nodes: Iterable[TenseNode]) -> tuple[TenseNode, ...]:
        """
        Order a level's tenses for learning.

        Sort order: tenses without prerequisites first, core before review
        duplicates, ascending complexity, then family order (unranked
        families last). The sort is stable, so remaining ties keep source
        order.
        """
        unranked = len(PROGRESSION_FAMILY_ORDER)

        def sort_key(node: TenseNode) -> tuple[bool, bool, int, int]:
            family_index = (
                PROGRESSION_FAMILY_ORDER.index(node.family)
                if node.family in PROGRESSION_FAMILY_ORDER
                else unranked
            )
            return (
                self.analysis.has_prerequisites(node.key),
                not node.is_core,
                node.complexity,
                family_index,
            )

        return tuple(sorted(nodes, key=sort_key))

    def build_prerequisite_chain(self, key: str) -> tuple[str, ...]:
        """
        Transitive prerequisites of a tense, nearest first (depth-first).

        A visited set guards against cyclic tables: a cycle yields a partial
        chain instead of looping forever. The walk uses an explicit stack, so
        arbitrarily deep tables cannot exhaust the interpreter's recursion
        limit. The chain never contains ``key`` itself and never repeats an
        entry.
        """
        chain: list[str] = []
        in_chain: set[str] = set()
        visited = {key}
        stack = [iter(self.analysis.direct_prerequisites(key))]

        while stack:
            prerequisite = next(stack[-1], None)
            if prerequisite is None:
                stack.pop()
                continue
            if prerequisite == key:
                logger.debug("Prerequisite cycle through {} defused", key)
            elif prerequisite not in in_chain:
                in_chain.add(prerequisite)
                chain.append(prerequisite)
            if prerequisite not in visited:
                visited.add(prerequisite)
                stack.append(iter(self.analysis.direct_prerequisites(prerequisite)))

        return tuple(chain)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def get_level_data(self, level: str) -> tuple[TenseNode, ...]:
        return self.context.get_level_data(level)

    def get_level_progression(self, level: str) -> tuple[TenseNode, ...]:
        return self.context.get_level_progression(level)

    def get_prerequisite_chain(self, key: str) -> tuple[str, ...]:
        return self.context.get_prerequisite_chain(key)

    def get_node(self, key: str) -> TenseNode | None:
        return self.context.get_node(key)

    def get_tense_family_groups(self) -> Mapping[str, tuple[TenseNode, ...]]:
        return self.context.tense_families
