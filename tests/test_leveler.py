"""Tests for condensation and Kahn leveling."""

import pytest

from tiergraph.engine.graph import Entity, Relation, RelationKind
from tiergraph.engine.leveler import (
    CondensedGraph,
    InternalConsistencyError,
    RankErrorKind,
    RankingError,
    condense,
    level,
    rank_tiers,
)


def _entities(*ids: str) -> list[Entity]:
    return [Entity(eid, label=eid) for eid in ids]


def _rel(source: str, symbol: str, target: str) -> Relation:
    return Relation(source=source, target=target, kind=RelationKind.parse(symbol))


class TestCondense:
    """Tests for condense()."""

    def test_drops_intra_component_edges(self):
        condensed = condense([["a", "b"], ["c"]], [("a", "b"), ("b", "a"), ("a", "c")])
        assert condensed.successors == [[1], []]

    def test_collapses_parallel_edges(self):
        """Two entities of one component pointing at the same target count once."""
        condensed = condense([["a", "b"], ["c"]], [("a", "c"), ("b", "c"), ("a", "c")])
        assert condensed.successors == [[1], []]
        assert condensed.in_degrees() == [0, 1]


class TestLevel:
    """Tests for level()."""

    def test_whole_frontier_per_tier(self):
        condensed = CondensedGraph(
            components=[["a"], ["b"], ["c"], ["d"]],
            successors=[[1, 2], [3], [3], []],
        )
        assert level(condensed) == [[0], [1, 2], [3]]

    def test_independent_components_share_a_tier(self):
        condensed = CondensedGraph(components=[["a"], ["b"]], successors=[[], []])
        assert level(condensed) == [[0, 1]]

    def test_residual_cycle_raises(self):
        """A cycle left in the condensed graph is an internal error."""
        condensed = CondensedGraph(components=[["a"], ["b"]], successors=[[1], [0]])
        with pytest.raises(InternalConsistencyError, match="cyclic"):
            level(condensed)

    def test_internal_error_is_not_a_ranking_error(self):
        assert not issubclass(InternalConsistencyError, RankingError)
        assert issubclass(InternalConsistencyError, RuntimeError)


class TestRankTiers:
    """Tests for rank_tiers()."""

    def test_strict_chain(self):
        relations = [_rel("A", ">", "B"), _rel("B", ">", "C")]
        assert rank_tiers(_entities("A", "B", "C"), relations) == [["A"], ["B"], ["C"]]

    def test_equal_entities_share_a_tier(self):
        relations = [_rel("A", "=", "B"), _rel("A", ">", "C")]
        tiers = rank_tiers(_entities("A", "B", "C"), relations)
        assert [sorted(tier) for tier in tiers] == [["A", "B"], ["C"]]

    def test_diamond(self):
        relations = [
            _rel("A", ">", "B"), _rel("A", ">", "C"),
            _rel("B", ">", "D"), _rel("C", ">", "D"),
        ]
        tiers = rank_tiers(_entities("A", "B", "C", "D"), relations)
        assert tiers == [["A"], ["B", "C"], ["D"]]

    def test_transitive_shortcut_does_not_merge_tiers(self):
        relations = [_rel("A", ">", "B"), _rel("B", ">", "C"), _rel("A", ">", "C")]
        assert rank_tiers(_entities("A", "B", "C"), relations) == [["A"], ["B"], ["C"]]

    def test_one_sided_greater_or_equals_ranks_higher(self):
        """A ≥ B alone puts A strictly above B."""
        tiers = rank_tiers(_entities("A", "B"), [_rel("A", "≥", "B")])
        assert tiers == [["A"], ["B"]]

    def test_mutual_greater_or_equals_is_equality(self):
        tiers = rank_tiers(_entities("A", "B"), [_rel("A", "≥", "B"), _rel("B", "≥", "A")])
        assert len(tiers) == 1
        assert sorted(tiers[0]) == ["A", "B"]

    def test_less_ranks_target_higher(self):
        tiers = rank_tiers(_entities("R", "A", "B"), [_rel("R", "<", "A"), _rel("A", "=", "B")])
        assert [sorted(tier) for tier in tiers] == [["A", "B"], ["R"]]

    def test_duplicate_relations(self):
        relations = [_rel("A", ">", "B"), _rel("A", ">", "B")]
        assert rank_tiers(_entities("A", "B"), relations) == [["A"], ["B"]]

    def test_single_entity(self):
        assert rank_tiers(_entities("A"), []) == [["A"]]

    def test_empty_raises(self):
        with pytest.raises(RankingError) as exc_info:
            rank_tiers([], [])
        assert exc_info.value.reason is RankErrorKind.EMPTY
        assert str(exc_info.value) == "No nodes to rank"

    def test_invalid_graph_raises_with_errors(self):
        relations = [_rel("A", "<", "B"), _rel("B", "<", "A")]
        with pytest.raises(RankingError) as exc_info:
            rank_tiers(_entities("A", "B"), relations)
        assert exc_info.value.reason is RankErrorKind.INVALID_GRAPH
        assert len(exc_info.value.errors) == 1
        assert exc_info.value.errors[0].startswith("Contradictory cycle detected")

    def test_every_entity_in_exactly_one_tier(self):
        ids = [f"n{i}" for i in range(12)]
        relations = [_rel("n0", "=", "n1"), _rel("n5", "≥", "n7")]
        relations += [_rel(a, ">", b) for a, b in zip(ids[1:], ids[2:])]
        tiers = rank_tiers(_entities(*ids), relations)
        members = [m for tier in tiers for m in tier]
        assert sorted(members) == sorted(ids)
        assert len(members) == len(set(members))
