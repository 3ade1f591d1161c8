import pickle

import pytest

from archmap.sparse_graph import SparseDiGraph


class TestSparseDiGraph(object):

    def test_init_default(self):
        g = SparseDiGraph()
        assert len(g) == 0
        assert list(g.edges()) == []
        assert g.is_weakly_connected()
        assert g.linearize() == []

    def test_add(self):
        g = SparseDiGraph([1], [(1, 2), (2, 3)])
        assert g.vertices == [1, 2, 3]
        assert g.has_edge(1, 2)
        assert not g.has_edge(2, 1)
        assert g.has_vertex(3)
        assert 3 in g
        # Adding an edge twice has no effect
        g.add_edge(1, 2)
        assert g.successors(1) == [2]
        assert g.predecessors(2) == [1]

    def test_add_path(self):
        g = SparseDiGraph()
        g.add_path(["a", "b", "c"])
        assert g.linearize() == ["a", "b", "c"]
        g = SparseDiGraph()
        g.add_path(["a"])
        assert g.vertices == ["a"]

    def test_sources_and_sinks(self):
        #     /-> 2 -> 3
        # 0 -> 1
        #     \-> 4
        g = SparseDiGraph(edges=[(0, 1), (1, 2), (2, 3), (1, 4)])
        assert g.source_vertices() == [0]
        assert set(g.sink_vertices()) == set([3, 4])

    @pytest.mark.parametrize("edges",
                             [[(0, 1), (1, 2), (1, 3)],  # Branch
                              [(0, 2), (1, 2)],  # Merge
                              [(0, 1), (2, 3)],  # Disconnected
                              [(0, 1), (1, 0)]])  # Cycle
    def test_linearize_fails(self, edges):
        with pytest.raises(ValueError):
            SparseDiGraph(edges=edges).linearize()

    def test_reachability(self):
        g = SparseDiGraph(edges=[(0, 1), (1, 2), (3, 2)])
        assert g.reachable(0) == set([0, 1, 2])
        assert g.has_path(0, 2)
        assert not g.has_path(2, 0)
        assert not g.has_path(0, 3)
        assert not g.has_path(0, 99)
        assert g.is_weakly_connected()

        g.add_vertex(4)
        assert not g.is_weakly_connected()

    def test_map_vertices(self):
        g = SparseDiGraph(edges=[(0, 1), (1, 2)])
        h = g.map_vertices(lambda v: "abc"[v])
        assert h.linearize() == ["a", "b", "c"]
        assert g.copy() == g
        assert g.copy() is not g

    def test_equality(self):
        assert SparseDiGraph(edges=[(0, 1), (0, 2)]) == \
            SparseDiGraph(edges=[(0, 2), (0, 1)])
        assert SparseDiGraph(edges=[(0, 1)]) != SparseDiGraph(edges=[(1, 0)])
        assert SparseDiGraph([0]) != SparseDiGraph()

    def test_pickle(self):
        g = SparseDiGraph(edges=[(0, 1), (1, 2)])
        assert pickle.loads(pickle.dumps(g)) == g

    def test_repr(self):
        g = SparseDiGraph(edges=[(0, 1), (1, 2)])
        assert "SparseDiGraph" in repr(g)
        assert "3 vertices" in repr(g)
        assert "2 edges" in repr(g)
