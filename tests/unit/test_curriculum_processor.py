"""
Unit tests for CurriculumProcessor graph construction.

Covers source normalization, level progressions, prerequisite chains
(including cyclic tables) and the read-only context.
"""

from dataclasses import FrozenInstanceError, fields

import pytest

from src.prioritizer.curriculum_processor import CurriculumProcessor
from src.prioritizer.models import CurriculumAnalysis


def keys(nodes):
    return [node.key for node in nodes]


class TestSourceNormalization:
    def test_localized_moods_merge_with_canonical_nodes(self, processor):
        assert processor.get_node("indicative|pretIndef") is not None
        assert processor.get_node("indicativo|pretIndef") is None
        assert processor.get_node("subjunctive|subjPres") is not None
        assert processor.get_node("conditional|condPerf") is not None

    def test_duplicate_row_within_level_kept_once(self, processor):
        a1_keys = keys(processor.get_level_data("A1"))
        assert a1_keys.count("indicative|pres") == 1

    def test_review_duplicates_marked_non_core(self, processor):
        a2 = {node.key: node for node in processor.get_level_data("A2")}
        review = a2["indicative|pres"]
        assert review.is_core is False
        assert review.introduced_at == "A1"
        assert review.level == "A2"
        assert a2["indicative|pretIndef"].is_core is True

    def test_canonical_node_is_first_occurrence(self, processor):
        node = processor.get_node("indicative|pres")
        assert node.level == "A1"
        assert node.is_core is True
        assert node.target.startswith("Presente de indicativo")

    def test_malformed_rows_are_skipped(self):
        processor = CurriculumProcessor(
            source=[
                {"mood": "indicative"},
                {"tense": "pres"},
                {"mood": "  ", "tense": "pres"},
                "not a record",
                {"mood": "indicative", "tense": "pres", "level": "A1"},
            ]
        )
        assert list(processor.context.nodes) == ["indicative|pres"]

    def test_level_is_upper_cased_and_unknown_level_defaults_to_a1(self):
        processor = CurriculumProcessor(
            source=[
                {"mood": "indicative", "tense": "impf", "level": "a2"},
                {"mood": "indicative", "tense": "presProg", "level": "Z9"},
            ]
        )
        assert keys(processor.get_level_data("A2")) == ["indicative|impf"]
        assert processor.get_node("indicative|presProg").level == "A1"

    def test_introduction_table_wins_over_source_level(self):
        processor = CurriculumProcessor(source=[{"mood": "indicative", "tense": "pres", "level": "B1"}])
        node = processor.get_node("indicative|pres")
        assert node.introduced_at == "A1"
        assert node.is_core is False

    def test_unknown_tense_gets_documented_defaults(self):
        processor = CurriculumProcessor(source=[{"mood": "indicative", "tense": "presProg", "level": "B1"}])
        node = processor.get_node("indicative|presProg")
        assert node.complexity == 5
        assert node.family == "independent"
        assert node.introduced_at == "B1"
        assert node.is_core is True

    def test_mixed_tenses_flagged(self, processor):
        assert processor.get_node("imperative|impMixed").is_mixed is True
        assert processor.get_node("imperative|impAff").is_mixed is False

    def test_mixed_flag_comes_from_tense_name_alone(self, cyclic_analysis):
        processor = CurriculumProcessor(
            source=[{"mood": "x", "tense": "aMixed", "level": "A1"}],
            analysis=cyclic_analysis,
        )
        assert processor.get_node("x|aMixed").is_mixed is True
        assert {f.name for f in fields(CurriculumAnalysis)} == {
            "introduction_levels",
            "complexity_scores",
            "tense_families",
            "prerequisites",
        }

    def test_empty_source_builds_empty_levels(self):
        processor = CurriculumProcessor(source=[])
        assert processor.get_level_progression("A1") == ()
        assert processor.get_prerequisite_chain("subjunctive|subjPres") == (
            "indicative|pres",
            "indicative|pretIndef",
        )


class TestLevelProgression:
    def test_a1_order(self, processor):
        assert keys(processor.get_level_progression("A1")) == [
            "indicative|pres",
            "nonfinite|ger",
            "nonfinite|part",
            "nonfinite|nonfiniteMixed",
        ]

    def test_a2_core_before_review_and_unranked_family_last_on_tie(self, processor):
        assert keys(processor.get_level_progression("A2")) == [
            "indicative|pretIndef",
            "indicative|impf",
            "indicative|fut",
            "imperative|impAff",
            "indicative|pres",
        ]

    def test_b1_prerequisite_free_tenses_first(self, processor):
        order = keys(processor.get_level_progression("B1"))
        assert order[:5] == [
            "conditional|cond",
            "imperative|impMixed",
            "indicative|futPerf",
            "subjunctive|subjPerf",
            "imperative|impNeg",
        ]
        assert order[5:7] == ["indicative|pretIndef", "indicative|impf"]
        assert order[7:] == ["indicative|pretPerf", "indicative|plusc", "subjunctive|subjPres"]

    def test_unknown_level_is_empty(self, processor):
        assert processor.get_level_progression("Z9") == ()
        assert processor.get_level_data("Z9") == ()


class TestPrerequisiteChains:
    def test_direct_chain(self, processor):
        assert processor.get_prerequisite_chain("subjunctive|subjPres") == (
            "indicative|pres",
            "indicative|pretIndef",
        )

    def test_transitive_chain_depth_first(self, processor):
        assert processor.get_prerequisite_chain("subjunctive|subjImpf") == (
            "subjunctive|subjPres",
            "indicative|pres",
            "indicative|pretIndef",
            "indicative|impf",
        )

    def test_shared_prerequisites_not_repeated(self, processor):
        chain = processor.get_prerequisite_chain("subjunctive|subjPlusc")
        assert len(chain) == len(set(chain)) == 7
        assert chain.count("indicative|pres") == 1

    def test_tense_without_prerequisites_has_empty_chain(self, processor):
        assert processor.get_prerequisite_chain("indicative|pres") == ()
        assert processor.get_prerequisite_chain("unknown|tense") == ()

    def test_every_chain_is_duplicate_free_and_excludes_its_key(self, processor):
        for key, chain in processor.context.prerequisite_chains.items():
            assert key not in chain
            assert len(chain) == len(set(chain))

    def test_cyclic_table_yields_partial_chains(self, cyclic_analysis):
        processor = CurriculumProcessor(source=[], analysis=cyclic_analysis)
        assert processor.get_prerequisite_chain("x|a") == ("x|b", "x|c")
        assert processor.get_prerequisite_chain("x|b") == ("x|c", "x|a")
        assert processor.get_prerequisite_chain("x|c") == ("x|a", "x|b")

    def test_deep_chain_does_not_exhaust_recursion(self):
        depth = 1500
        analysis = CurriculumAnalysis(
            introduction_levels={},
            complexity_scores={},
            tense_families={},
            prerequisites={f"x|t{i}": (f"x|t{i + 1}",) for i in range(depth)},
        )
        processor = CurriculumProcessor(source=[], analysis=analysis)
        chain = processor.get_prerequisite_chain("x|t0")
        assert len(chain) == depth
        assert chain[0] == "x|t1"
        assert chain[-1] == f"x|t{depth}"

    def test_chain_order_is_depth_first(self):
        analysis = CurriculumAnalysis(
            introduction_levels={},
            complexity_scores={},
            tense_families={},
            prerequisites={"x|a": ("x|b", "x|d"), "x|b": ("x|c",), "x|d": ("x|c", "x|e")},
        )
        processor = CurriculumProcessor(source=[], analysis=analysis)
        assert processor.get_prerequisite_chain("x|a") == ("x|b", "x|c", "x|d", "x|e")


class TestTenseFamilies:
    def test_family_lookup(self, processor):
        assert processor.get_tense_family("indicative|impf") == "past_narrative"
        assert processor.get_tense_family("indicative|presProg") == "independent"

    def test_first_family_wins_for_shared_members(self, processor):
        assert processor.get_tense_family("subjunctive|subjPerf") == "perfect_system"

    def test_family_groups_list_member_nodes(self, processor):
        groups = processor.get_tense_family_groups()
        assert keys(groups["past_narrative"]) == ["indicative|pretIndef", "indicative|impf"]

    def test_family_members_synthesized_when_missing_from_source(self):
        processor = CurriculumProcessor(source=[{"mood": "indicative", "tense": "pres", "level": "A1"}])
        members = processor.get_tense_family_groups()["subjunctive_present"]
        assert keys(members) == ["subjunctive|subjPres", "subjunctive|subjPerf"]
        assert members[0].introduced_at == "B1"
        assert members[0].complexity == 7


class TestReadOnlyContext:
    def test_context_mappings_reject_writes(self, processor):
        with pytest.raises(TypeError):
            processor.context.nodes["x|y"] = None
        with pytest.raises(TypeError):
            processor.context.prerequisite_chains["x|y"] = ()

    def test_nodes_are_frozen(self, processor):
        with pytest.raises(FrozenInstanceError):
            processor.get_node("indicative|pres").complexity = 9

    def test_injected_analysis_is_frozen(self):
        tables = {"x|a": ("x|b",)}
        analysis = CurriculumAnalysis(prerequisites=tables)
        tables["x|a"] = ("x|c",)
        assert analysis.direct_prerequisites("x|a") == ("x|b",)
        with pytest.raises(TypeError):
            analysis.prerequisites["x|b"] = ()
