from archmap.architecture import ComponentPath, PortPath, LinkPath

from archmap.route.graph import RoutingGraph


def test_line(line):
    graph = RoutingGraph.build(line(2))
    assert graph.paths == [PortPath((0, ), ("in", )),
                           PortPath((0, ), ("out", )),
                           PortPath((1, ), ("in", )),
                           PortPath((1, ), ("out", )),
                           LinkPath(None, ("link[0]", ))]
    assert len(graph) == graph.num_vertices == 5
    assert graph.getmap()[LinkPath(None, ("link[0]", ))] == 4
    assert graph.successors(1) == [4]
    assert graph.successors(4) == [2]
    assert graph.successors(0) == []
    assert graph.has_edge(1, 4)
    assert not graph.has_edge(4, 1)


def test_tile(grid):
    graph = RoutingGraph.build(grid(1, 1))
    vertex = graph.map
    mux = ComponentPath((0, 0), ("mux", ))
    assert mux in vertex
    # Processors are not routing resources
    assert ComponentPath((0, 0), ("proc", )) not in vertex

    for i in range(5):
        in_port = vertex[mux.port("in[{}]".format(i))]
        out_port = vertex[mux.port("out[{}]".format(i))]
        assert graph.has_edge(in_port, vertex[mux])
        assert graph.has_edge(vertex[mux], out_port)
    assert len(graph.successors(vertex[mux])) == 5

    # proc.out -> link -> mux.in[4]
    proc_out = vertex[PortPath((0, 0), ("proc", "out"))]
    (link, ) = graph.successors(proc_out)
    assert isinstance(graph.paths[link], LinkPath)
    assert graph.successors(link) == [vertex[mux.port("in[4]")]]


def test_grid_links(grid):
    graph = RoutingGraph.build(grid(2, 1))
    vertex = graph.map
    out_east = vertex[PortPath((0, 0), ("out[0]", ))]
    (link, ) = graph.successors(out_east)
    assert graph.paths[link].address is None
    assert graph.successors(link) == [vertex[PortPath((1, 0), ("in[1]", ))]]
    assert "RoutingGraph" in repr(graph)
