from archmap.architecture import \
    ArchitectureIndex, ComponentPath, PortPath, LinkPath


def test_index(grid):
    toplevel = grid(2, 1)
    index = ArchitectureIndex(toplevel)

    # One tile, proc and mux per address
    assert len(index.components) == 6
    # Tile: 8 ports, proc: 2, mux: 10
    assert len(index.ports) == 2 * 20
    # Tile: 10 internal links, plus two top level links
    assert len(index.links) == 2 * 10 + 2

    # Handles round-trip
    for paths in (index.components, index.ports, index.links):
        for i, path in enumerate(paths):
            assert index[path] == i
            assert path in index

    assert ComponentPath((0, 0), ("proc", )) in index
    assert PortPath((1, 0), ("proc", "out")) in index
    assert PortPath((2, 0), ("proc", "out")) not in index


def test_link_endpoints(grid):
    toplevel = grid(2, 1)
    index = ArchitectureIndex(toplevel)
    out = PortPath((0, 0), ("out[0]", ))
    link = LinkPath(None, (toplevel.portlink[out], ))
    h = index[link]
    assert [index.ports[p] for p in index.link_sources[h]] == [out]
    assert [index.ports[p] for p in index.link_dests[h]] == \
        [PortPath((1, 0), ("in[1]", ))]
    assert "ArchitectureIndex" in repr(index)
