"""
Unit tests for the token dependency analyzer.
"""

import pytest

from tokengraph.analysis.dependency_analyzer import (
    AnalysisContext,
    TokenDependencyAnalyzer,
    compute_depths,
    detect_circular_dependencies,
    find_cycle_participants,
)
from tokengraph.analysis.results import (
    DependencyKind,
    ImpactTier,
    RecommendationType,
    ValidationErrorType,
    ValidationWarningType,
)
from tokengraph.config import AnalysisConfig
from tokengraph.core.dependency_map import build_dependency_maps
from tokengraph.core.exceptions import InvalidTokenSystemError


LONG_CHAIN = 2000


@pytest.fixture
def long_chain(make_token):
    """t0 -> t1 -> ... -> t1999, deeper than the interpreter recursion limit."""
    return [make_token(f"t{i}", [f"t{i + 1}"]) for i in range(LONG_CHAIN - 1)] + [make_token(f"t{LONG_CHAIN - 1}")]


@pytest.fixture
def analyzer():
    return TokenDependencyAnalyzer()


def _depths(tokens):
    maps = build_dependency_maps(tokens)
    return compute_depths(maps, [t.id for t in tokens])


class TestDependencyDepth:

    def test_chain(self, chain_tokens):
        assert _depths(chain_tokens) == {"A": 2, "B": 1, "C": 0}

    def test_two_cycle_is_zero(self, make_token):
        assert _depths([make_token("A", ["B"]), make_token("B", ["A"])]) == {"A": 0, "B": 0}

    def test_three_cycle_is_zero(self, make_token):
        tokens = [make_token("A", ["B"]), make_token("B", ["C"]), make_token("C", ["A"])]
        assert _depths(tokens) == {"A": 0, "B": 0, "C": 0}

    def test_self_alias_is_zero(self, make_token):
        assert _depths([make_token("A", ["A"])]) == {"A": 0}

    def test_token_feeding_into_cycle(self, make_token):
        tokens = [make_token("D", ["A"]), make_token("A", ["B"]), make_token("B", ["A"])]
        assert _depths(tokens) == {"D": 1, "A": 0, "B": 0}

    def test_missing_target_counts_as_leaf(self, make_token):
        assert _depths([make_token("X", ["Y"])]) == {"X": 1}

    def test_diamond_takes_longest_branch(self, make_token):
        tokens = [
            make_token("A", ["B", "C"]),
            make_token("B", ["D"]),
            make_token("C"),
            make_token("D"),
        ]
        assert _depths(tokens)["A"] == 2

    def test_long_chain(self, long_chain):
        depths = _depths(long_chain)
        assert depths["t0"] == LONG_CHAIN - 1
        assert depths[f"t{LONG_CHAIN - 1}"] == 0

    def test_revisit_short_circuits_without_known_cycles(self, make_token):
        maps = build_dependency_maps([make_token("A", ["B"]), make_token("B", ["A"])])
        assert compute_depths(maps, ["A", "B"], cyclic=frozenset()) == {"A": 2, "B": 1}

    def test_same_depths_in_any_order(self, demo_system):
        tokens = list(demo_system.tokens)
        assert _depths(tokens) == _depths(list(reversed(tokens)))


class TestCircularDependencies:

    def _detect(self, tokens):
        maps = build_dependency_maps(tokens)
        return detect_circular_dependencies([t.id for t in tokens], maps)

    def test_acyclic(self, chain_tokens):
        assert self._detect(chain_tokens) == []

    def test_two_cycle(self, make_token):
        cycles = self._detect([make_token("A", ["B"]), make_token("B", ["A"])])
        assert len(cycles) == 1
        assert cycles[0].id == "circular-A-B-A"
        assert cycles[0].token_ids == ["A", "B"]
        assert cycles[0].dependency_chain == ["A", "B", "A"]
        assert "A → B → A" in cycles[0].description

    def test_three_cycle(self, make_token):
        cycles = self._detect([make_token("A", ["B"]), make_token("B", ["C"]), make_token("C", ["A"])])
        assert len(cycles) == 1
        assert cycles[0].dependency_chain == ["A", "B", "C", "A"]

    def test_self_alias(self, make_token):
        cycles = self._detect([make_token("A", ["A"])])
        assert [c.dependency_chain for c in cycles] == [["A", "A"]]

    def test_disjoint_cycles_are_all_reported(self, make_token):
        cycles = self._detect([
            make_token("A", ["B"]), make_token("B", ["A"]),
            make_token("C", ["D"]), make_token("D", ["C"]),
        ])
        assert [c.id for c in cycles] == ["circular-A-B-A", "circular-C-D-C"]

    def test_search_continues_after_hit(self, make_token):
        tokens = [
            make_token("A", ["B"]),
            make_token("B", ["A", "C"]),
            make_token("C", ["B"]),
        ]
        cycles = self._detect(tokens)
        assert [c.dependency_chain for c in cycles] == [["A", "B", "A"], ["B", "C", "B"]]

    def test_long_chain_is_acyclic(self, long_chain):
        assert self._detect(long_chain) == []

    def test_long_ring(self, make_token):
        ring = [make_token(f"r{i}", [f"r{(i + 1) % LONG_CHAIN}"]) for i in range(LONG_CHAIN)]
        cycles = self._detect(ring)

        assert len(cycles) == 1
        assert len(cycles[0].token_ids) == LONG_CHAIN
        assert cycles[0].dependency_chain[0] == cycles[0].dependency_chain[-1] == "r0"

    def test_cycle_participants(self, make_token):
        tokens = [make_token("D", ["A"]), make_token("A", ["B"]), make_token("B", ["A"])]
        graph = build_dependency_maps(tokens).to_networkx()
        assert find_cycle_participants(graph) == frozenset({"A", "B"})


class TestAnalysisContext:

    def test_duplicate_ids_rejected(self, make_token):
        with pytest.raises(InvalidTokenSystemError, match="Duplicate"):
            AnalysisContext.build([make_token("A"), make_token("A")])

    def test_none_rejected(self):
        with pytest.raises(InvalidTokenSystemError):
            AnalysisContext.build(None)

    def test_wrong_type_rejected(self):
        with pytest.raises(InvalidTokenSystemError):
            AnalysisContext.build("tokens.json")

    def test_dict_entries_accepted(self):
        context = AnalysisContext.build([{
            "id": "A",
            "displayName": "A",
            "resolvedValueTypeId": "color",
            "valuesByMode": [{"modeIds": [], "value": {"value": 1}}],
        }])
        assert context.depth("A") == 0

    def test_invalid_dict_entry_rejected(self):
        with pytest.raises(InvalidTokenSystemError, match="Invalid token entry"):
            AnalysisContext.build([{"id": "A"}])

    def test_classification(self, chain_tokens, make_token):
        context = AnalysisContext.build(chain_tokens + [make_token("Z")])
        assert context.is_root("A") and not context.is_leaf("A")
        assert context.is_leaf("C") and not context.is_root("C")
        assert context.is_isolated("Z")
        assert not context.is_isolated("B")

    def test_no_state_carries_between_systems(self, analyzer, make_token):
        first = analyzer.analyze_dependencies([make_token("A", ["B"]), make_token("B", ["C"]), make_token("C")])
        second = analyzer.analyze_dependencies([make_token("A"), make_token("B", ["A"])])

        assert first.max_dependency_depth == 2
        assert second.max_dependency_depth == 1
        depths = {d.token_id: d.depth for d in analyzer.analyze_depths([make_token("A"), make_token("B", ["A"])])}
        assert depths == {"A": 0, "B": 1}


class TestAnalyzeDependencies:

    def test_chain(self, analyzer, chain_tokens):
        result = analyzer.analyze_dependencies(chain_tokens)

        assert result.total_tokens == 3
        assert result.total_dependencies == 2
        assert result.max_dependency_depth == 2
        assert result.average_dependency_depth == 1.0
        assert result.root_tokens == ["A"]
        assert result.leaf_tokens == ["C"]
        assert result.isolated_tokens == []
        assert result.circular_dependencies == []
        assert [r.token_id for r in result.most_referenced_tokens] == ["B", "C"]
        assert [(c.chain, c.depth) for c in result.deepest_dependency_chains] == [(["A", "B", "C"], 2)]
        assert result.complexity_metrics.max_references == 1
        assert result.complexity_metrics.dependency_distribution == {0: 1, 1: 1, 2: 1}
        assert result.recommendations == []

    def test_empty(self, analyzer):
        result = analyzer.analyze_dependencies([])
        assert result.total_tokens == 0
        assert result.total_dependencies == 0
        assert result.max_dependency_depth == 0
        assert result.average_dependency_depth == 0.0
        assert result.root_tokens == []
        assert result.most_referenced_tokens == []
        assert result.complexity_metrics.average_references == 0.0

    def test_demo_system(self, analyzer, demo_system):
        result = analyzer.analyze_dependencies(demo_system)

        assert result.total_tokens == 14
        assert result.total_dependencies == 10
        assert result.isolated_tokens == ["color-red-500"]
        assert len(result.circular_dependencies) == 1
        assert result.circular_dependencies[0].token_ids == ["focus-ring", "focus-outline"]

        types = [r.type for r in result.recommendations]
        assert RecommendationType.CIRCULAR_DEPENDENCY in types
        assert RecommendationType.UNUSED_TOKEN in types

    def test_long_chain(self, analyzer, long_chain):
        result = analyzer.analyze_dependencies(long_chain)

        assert result.total_dependencies == LONG_CHAIN - 1
        assert result.max_dependency_depth == LONG_CHAIN - 1
        assert result.circular_dependencies == []
        assert len(result.deepest_dependency_chains[0].chain) == LONG_CHAIN

    def test_idempotent(self, analyzer, demo_system):
        assert TokenDependencyAnalyzer().analyze_dependencies(demo_system) == \
            TokenDependencyAnalyzer().analyze_dependencies(demo_system)
        assert analyzer.analyze_dependencies(demo_system) == analyzer.analyze_dependencies(demo_system)

    def test_most_referenced_ties_keep_input_order(self, analyzer, make_token):
        tokens = [
            make_token("X"), make_token("Y"),
            make_token("a", ["Y"]), make_token("b", ["X"]),
        ]
        result = analyzer.analyze_dependencies(tokens)
        assert [r.token_id for r in result.most_referenced_tokens] == ["X", "Y"]

    def test_deep_nesting_recommendation(self, make_token):
        tokens = [make_token(f"T{i}", [f"T{i + 1}"]) for i in range(6)] + [make_token("T6")]
        result = TokenDependencyAnalyzer().analyze_dependencies(tokens)
        deep = [r for r in result.recommendations if r.type == RecommendationType.DEEP_NESTING]
        assert len(deep) == 1
        assert deep[0].affected_tokens == ["T0"]

    def test_high_coupling_recommendation(self, analyzer, make_token):
        tokens = [make_token("hub")] + [make_token(f"u{i}", ["hub"]) for i in range(11)]
        result = analyzer.analyze_dependencies(tokens)
        hubs = [r for r in result.recommendations if r.type == RecommendationType.HIGH_COUPLING]
        assert hubs[0].affected_tokens == ["hub"]


class TestAnalyzeToken:

    def test_middle_of_chain(self, analyzer, chain_tokens):
        result = analyzer.analyze_token(chain_tokens, "B")

        assert result.dependency_depth == 1
        assert result.usage_count == 1
        assert not result.has_circular_dependency
        assert [(d.token_id, d.dependency_type, d.path) for d in result.dependencies] == [
            ("C", DependencyKind.DIRECT, ["B", "C"]),
        ]
        assert [(d.token_id, d.dependency_type, d.path) for d in result.dependents] == [
            ("A", DependencyKind.DIRECT, ["A", "B"]),
        ]

    def test_indirect_dependencies(self, analyzer, chain_tokens):
        result = analyzer.analyze_token(chain_tokens, "A")
        assert [(d.token_id, d.dependency_type) for d in result.dependencies] == [
            ("B", DependencyKind.DIRECT),
            ("C", DependencyKind.INDIRECT),
        ]
        assert result.dependencies[1].path == ["A", "B", "C"]

    def test_cycle_member(self, analyzer, demo_system):
        result = analyzer.analyze_token(demo_system, "focus-ring")
        assert result.has_circular_dependency
        assert result.circular_dependency_paths == [["focus-ring", "focus-outline", "focus-ring"]]
        assert result.dependency_depth == 0

    def test_unknown_token(self, analyzer, chain_tokens):
        assert analyzer.analyze_token(chain_tokens, "nope") is None

    def test_reuses_prebuilt_context(self, analyzer, chain_tokens):
        context = analyzer.build_context(chain_tokens)
        assert analyzer.build_context(context) is context
        assert analyzer.analyze_token(context, "C").usage_count == 1


class TestBlastRadius:

    def test_direct_and_indirect(self, analyzer, demo_system):
        blast = analyzer.calculate_blast_radius(demo_system, "color-blue-500")

        assert blast.directly_affected == ["color-primary"]
        assert blast.indirectly_affected == ["button-background"]
        assert blast.total_affected == 2
        assert blast.max_depth == 2
        assert blast.estimated_impact == ImpactTier.LOW
        assert blast.affected_collections == ["component", "semantic"]
        assert blast.affected_platforms == ["ios"]

    def test_leaf_of_nothing(self, analyzer, chain_tokens):
        blast = analyzer.calculate_blast_radius(chain_tokens, "A")
        assert blast.total_affected == 0
        assert blast.max_depth == 0

    def test_unknown_id(self, analyzer, chain_tokens):
        blast = analyzer.calculate_blast_radius(chain_tokens, "ghost")
        assert blast.directly_affected == []
        assert blast.indirectly_affected == []

    def test_cycle_terminates(self, analyzer, make_token):
        blast = analyzer.calculate_blast_radius([make_token("A", ["B"]), make_token("B", ["A"])], "A")
        assert blast.directly_affected == ["B"]
        assert blast.indirectly_affected == []

    def test_self_alias_is_not_its_own_dependent(self, analyzer, make_token):
        blast = analyzer.calculate_blast_radius([make_token("A", ["A"])], "A")
        assert blast.directly_affected == []
        assert blast.total_affected == 0
        assert blast.max_depth == 0

    def test_long_chain(self, analyzer, long_chain):
        blast = analyzer.calculate_blast_radius(long_chain, f"t{LONG_CHAIN - 1}")

        assert blast.directly_affected == [f"t{LONG_CHAIN - 2}"]
        assert len(blast.indirectly_affected) == LONG_CHAIN - 2
        assert blast.indirectly_affected[-1] == "t0"
        assert blast.max_depth == LONG_CHAIN - 1

    @pytest.mark.parametrize("dependents,tier", [
        (5, ImpactTier.LOW),
        (6, ImpactTier.MEDIUM),
        (10, ImpactTier.MEDIUM),
        (11, ImpactTier.HIGH),
    ])
    def test_impact_tiers(self, analyzer, make_token, dependents, tier):
        tokens = [make_token("hub")] + [make_token(f"u{i}", ["hub"]) for i in range(dependents)]
        assert analyzer.calculate_blast_radius(tokens, "hub").estimated_impact == tier

    def test_configured_tiers(self, make_token):
        analyzer = TokenDependencyAnalyzer(AnalysisConfig(impact_medium_threshold=0, impact_high_threshold=1))
        tokens = [make_token("hub"), make_token("a", ["hub"]), make_token("b", ["hub"])]
        assert analyzer.calculate_blast_radius(tokens, "hub").estimated_impact == ImpactTier.HIGH


class TestValidateDependencies:

    def test_missing_reference(self, analyzer, make_token):
        result = analyzer.validate_dependencies([make_token("X", ["Y"])])

        assert not result.is_valid
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.error_type == ValidationErrorType.MISSING_REFERENCE
        assert error.referenced_token_id == "Y"
        assert error.path == ["X", "Y"]
        assert [u.context for u in result.unresolved_references] == ["Mode: global"]

    def test_missing_reference_reported_once_per_target(self, analyzer, make_token):
        result = analyzer.validate_dependencies([make_token("X", ["Y", "Y"])])
        assert len(result.errors) == 1
        assert [u.context for u in result.unresolved_references] == ["Mode: m0", "Mode: m1"]
        assert [u.mode_ids for u in result.unresolved_references] == [["m0"], ["m1"]]

    def test_clean_chain_is_valid(self, analyzer, chain_tokens):
        result = analyzer.validate_dependencies(chain_tokens)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_cycle_invalidates(self, analyzer, make_token):
        result = analyzer.validate_dependencies([make_token("A", ["B"]), make_token("B", ["A"])])
        assert not result.is_valid
        assert result.errors == []
        assert len(result.circular_dependencies) == 1

    def test_unused_token_warning(self, analyzer, chain_tokens, make_token):
        result = analyzer.validate_dependencies(chain_tokens + [make_token("Z")])
        assert result.is_valid
        assert [(w.token_id, w.warning_type) for w in result.warnings] == [
            ("Z", ValidationWarningType.UNUSED_TOKEN),
        ]

    def test_deep_nesting_warning(self, make_token):
        tokens = [make_token(f"T{i}", [f"T{i + 1}"]) for i in range(6)] + [make_token("T6")]
        result = TokenDependencyAnalyzer().validate_dependencies(tokens)
        deep = [w for w in result.warnings if w.warning_type == ValidationWarningType.DEEP_NESTING]
        assert [w.token_id for w in deep] == ["T0"]
        assert deep[0].details == {"depth": 6, "threshold": 5}

    def test_configured_nesting_threshold(self, make_token):
        tokens = [make_token(f"T{i}", [f"T{i + 1}"]) for i in range(6)] + [make_token("T6")]
        result = TokenDependencyAnalyzer(AnalysisConfig(deep_nesting_threshold=3)).validate_dependencies(tokens)
        deep = [w.token_id for w in result.warnings if w.warning_type == ValidationWarningType.DEEP_NESTING]
        assert deep == ["T0", "T1", "T2"]

    def test_demo_system(self, analyzer, demo_system):
        result = analyzer.validate_dependencies(demo_system)
        assert not result.is_valid
        assert [e.token_id for e in result.errors] == ["badge-border"]
        assert [w.token_id for w in result.warnings] == ["color-red-500"]
        assert len(result.circular_dependencies) == 1

    def test_long_chain(self, analyzer, long_chain):
        result = analyzer.validate_dependencies(long_chain)
        assert result.is_valid
        deep = [w for w in result.warnings if w.warning_type == ValidationWarningType.DEEP_NESTING]
        assert len(deep) == LONG_CHAIN - 6

    def test_idempotent(self, analyzer, demo_system):
        assert TokenDependencyAnalyzer().validate_dependencies(demo_system) == \
            TokenDependencyAnalyzer().validate_dependencies(demo_system)
        assert analyzer.validate_dependencies(demo_system) == analyzer.validate_dependencies(demo_system)
