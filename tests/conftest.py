import pytest

from archmap.architecture import \
    Component, TopLevel, add_port, add_child, add_link, build_mux, \
    Offset, ConnectionRule, connection_rule, PortPath

from archmap.ruleset import RuleSet
from archmap.taskgraph import Taskgraph, TaskgraphNode, TaskgraphEdge


def make_proc():
    """A leaf processor with one input and one output port."""
    proc = Component("proc")
    add_port(proc, "in", "input")
    add_port(proc, "out", "output")
    return proc


def make_tile():
    """A tile: a processor and a multiplexer switching between the
    processor and the tile's four neighbours.

    ``in[d]`` receives from the neighbour in direction d and ``out[d]`` sends
    to it, where the directions are east, west, north and south.
    """
    tile = Component("tile")
    add_child(tile, make_proc(), "proc")
    add_child(tile, build_mux(5, 5), "mux")
    add_port(tile, "in", "input", number=4)
    add_port(tile, "out", "output", number=4)
    for d in range(4):
        add_link(tile, "in[{}]".format(d), "mux.in[{}]".format(d))
        add_link(tile, "mux.out[{}]".format(d), "out[{}]".format(d))
    add_link(tile, "proc.out", "mux.in[4]")
    add_link(tile, "mux.out[4]", "proc.in")
    return tile


def make_grid(width, height):
    """A width x height grid of tiles linked to their neighbours."""
    toplevel = TopLevel("grid", dimensions=2)
    tile = make_tile()
    for x in range(width):
        for y in range(height):
            add_child(toplevel, tile, (x, y))
    connection_rule(toplevel, ConnectionRule([
        Offset((1, 0), "out[0]", "in[1]"),
        Offset((-1, 0), "out[1]", "in[0]"),
        Offset((0, 1), "out[2]", "in[3]"),
        Offset((0, -1), "out[3]", "in[2]"),
    ]))
    return toplevel


class MuxRuleSet(RuleSet):
    """Multiplexers may be shared by ``mux_capacity`` channels."""

    def __init__(self, mux_capacity=8):
        self.mux_capacity = mux_capacity

    def getcapacity(self, item):
        if isinstance(item, Component) and item.ismux:
            return self.mux_capacity
        return 1


@pytest.fixture
def grid():
    return make_grid


@pytest.fixture
def proc():
    return make_proc()


@pytest.fixture
def ruleset():
    return MuxRuleSet()


def make_chain(length, prefix="t"):
    """A taskgraph of tasks t0 -> t1 -> ... joined by single edges."""
    names = ["{}{}".format(prefix, i) for i in range(length)]
    return Taskgraph("chain", [TaskgraphNode(name) for name in names],
                     [TaskgraphEdge(a, b) for a, b in zip(names, names[1:])])


def make_dual():
    """A component holding two processors side by side."""
    dual = Component("dual")
    add_child(dual, make_proc(), "proc", number=2)
    return dual


@pytest.fixture
def chain():
    return make_chain


@pytest.fixture
def dual():
    return make_dual


def make_line(length=2):
    """Processors at addresses (0, ) to (length - 1, ), each sending to the
    next over a top level link.
    """
    toplevel = TopLevel("line", dimensions=1)
    for x in range(length):
        add_child(toplevel, make_proc(), (x, ))
    for x in range(length - 1):
        add_link(toplevel, PortPath((x, ), ("out", )),
                 PortPath((x + 1, ), ("in", )))
    return toplevel


@pytest.fixture
def line():
    return make_line
