import pytest

from archmap.taskgraph import Taskgraph, TaskgraphNode, TaskgraphEdge

from archmap.exceptions import TaskgraphError


@pytest.fixture
def taskgraph():
    return Taskgraph("tg",
                     [TaskgraphNode(n) for n in "abcd"],
                     [TaskgraphEdge("a", "b"),
                      TaskgraphEdge("a", ["c", "d"]),
                      TaskgraphEdge(["b", "c"], "d", {"width": 8})])


class TestTaskgraph(object):

    def test_counts(self, taskgraph):
        assert taskgraph.num_nodes() == 4
        assert taskgraph.num_edges() == 3
        assert taskgraph.nodenames() == ["a", "b", "c", "d"]
        assert [n.name for n in taskgraph.getnodes()] == \
            ["a", "b", "c", "d"]
        assert len(taskgraph.getedges()) == 3

    def test_lookup(self, taskgraph):
        assert taskgraph.getnode("c").name == "c"
        assert taskgraph.hasnode("a")
        assert not taskgraph.hasnode("z")
        assert taskgraph.getedge(2).metadata == {"width": 8}
        with pytest.raises(KeyError):
            taskgraph.getnode("z")

    def test_edge_ends(self, taskgraph):
        edge = taskgraph.getedge(1)
        assert edge.sources == ("a", )
        assert edge.sinks == ("c", "d")
        assert [n.name for n in taskgraph.getsources(edge)] == ["a"]
        assert [n.name for n in taskgraph.getsinks(1)] == ["c", "d"]

    def test_adjacency(self, taskgraph):
        assert taskgraph.out_edges("a") == [0, 1]
        assert taskgraph.in_edges("d") == [1, 2]
        assert taskgraph.outnode_names("a") == ["b", "c", "d"]
        assert taskgraph.innode_names("d") == ["a", "b", "c"]
        assert taskgraph.innode_names("a") == []
        assert [n.name for n in taskgraph.outnodes("b")] == ["d"]
        assert [n.name for n in taskgraph.innodes("b")] == ["a"]

    def test_duplicate_node(self, taskgraph):
        with pytest.raises(TaskgraphError):
            taskgraph.add_node(TaskgraphNode("a"))

    @pytest.mark.parametrize("edge",
                             [TaskgraphEdge("a", "z"),
                              TaskgraphEdge("z", "a"),
                              TaskgraphEdge([], "a"),
                              TaskgraphEdge("a", [])])
    def test_bad_edges(self, taskgraph, edge):
        with pytest.raises(TaskgraphError):
            taskgraph.add_edge(edge)
        # Nothing was changed
        assert taskgraph.num_edges() == 3
        assert taskgraph.out_edges("a") == [0, 1]

    def test_add_edge_returns_index(self, taskgraph):
        assert taskgraph.add_edge(TaskgraphEdge("d", "a")) == 3
        assert taskgraph.in_edges("a") == [3]

    def test_repr(self, taskgraph):
        assert "tg" in repr(taskgraph)
        assert "a" in repr(taskgraph.getnode("a"))
        assert "c, d" in repr(taskgraph.getedge(1))
