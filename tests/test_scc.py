"""Tests for strongly connected component extraction."""

from tiergraph.engine.scc import component_index, extract_sccs


def _normalized(components: list[list[str]]) -> list[list[str]]:
    return sorted(sorted(comp) for comp in components)


class TestExtractSccs:
    """Tests for extract_sccs()."""

    def test_no_edges_gives_singletons(self):
        """Every entity lands in its own component."""
        assert _normalized(extract_sccs(["a", "b", "c"], [])) == [["a"], ["b"], ["c"]]

    def test_symmetric_pair(self):
        assert _normalized(extract_sccs(["a", "b"], [("a", "b"), ("b", "a")])) == [["a", "b"]]

    def test_one_directional_edge_does_not_merge(self):
        """Edges are not assumed symmetric."""
        assert _normalized(extract_sccs(["a", "b"], [("a", "b")])) == [["a"], ["b"]]

    def test_directed_cycle_with_tail(self):
        edges = [("a", "b"), ("b", "c"), ("c", "a"), ("c", "d")]
        components = extract_sccs(["a", "b", "c", "d"], edges)
        assert _normalized(components) == [["a", "b", "c"], ["d"]]

    def test_completion_order(self):
        """Components come out in completion order, sinks first."""
        components = extract_sccs(["a", "b"], [("a", "b")])
        assert components == [["b"], ["a"]]

    def test_partition(self):
        """Each entity appears in exactly one component."""
        ids = [f"n{i}" for i in range(10)]
        edges = [("n0", "n1"), ("n1", "n0"), ("n2", "n3"), ("n3", "n4"), ("n4", "n2"), ("n5", "n6")]
        components = extract_sccs(ids, edges)
        members = [m for comp in components for m in comp]
        assert sorted(members) == sorted(ids)
        assert len(members) == len(set(members))

    def test_unknown_ids_ignored(self):
        assert _normalized(extract_sccs(["a"], [("a", "z"), ("z", "a")])) == [["a"]]

    def test_long_chain_no_recursion_limit(self):
        """Deep paths do not hit the interpreter recursion limit."""
        ids = [f"n{i}" for i in range(5000)]
        edges = list(zip(ids, ids[1:]))
        assert len(extract_sccs(ids, edges)) == 5000

    def test_long_cycle_single_component(self):
        ids = [f"n{i}" for i in range(5000)]
        edges = list(zip(ids, ids[1:])) + [(ids[-1], ids[0])]
        components = extract_sccs(ids, edges)
        assert len(components) == 1
        assert len(components[0]) == 5000


class TestComponentIndex:

    def test_maps_members_to_position(self):
        assert component_index([["a", "b"], ["c"]]) == {"a": 0, "b": 0, "c": 1}
