import pytest

from archmap.architecture import \
    Component, TopLevel, Port, PortClass, Direction, ComponentPath, \
    PortPath, LinkPath, add_port, add_child, add_link, build_mux

from archmap.ruleset import RuleSet


class TestPort(object):

    @pytest.mark.parametrize("cls,direction,valid",
                             [("input", Direction.sink, True),
                              ("input", Direction.source, False),
                              ("output", Direction.source, True),
                              ("output", Direction.sink, False)])
    def test_checkclass(self, cls, direction, valid):
        assert Port("p", cls).checkclass(direction) is valid

    def test_invert(self):
        port = Port("p", PortClass.input, {"width": 32})
        inverted = port.invert()
        assert inverted.cls is PortClass.output
        assert inverted.name == "p"
        assert inverted.metadata == {"width": 32}
        assert inverted.metadata is not port.metadata
        assert port.cls is PortClass.input

    def test_bad_class(self):
        with pytest.raises(ValueError):
            Port("p", "sideways")


class TestComponent(object):

    def test_getitem(self, proc):
        tile = Component("tile")
        add_child(tile, proc, "proc")
        add_port(tile, "in", "input")
        add_link(tile, "in", "proc.in", linkname="feed")

        assert tile["proc"].name == "proc"
        assert tile[ComponentPath(None, ())] is tile
        assert tile[ComponentPath(None, ("proc", ))] is tile["proc"]
        assert tile[PortPath(None, "proc.out")].cls is PortClass.output
        assert tile[LinkPath(None, ("feed", ))].sources == \
            (PortPath(None, "in"), )
        assert PortPath(None, "proc.nope") not in tile
        with pytest.raises(KeyError):
            tile[PortPath(None, "proc.nope")]

    def test_walk_children(self, proc):
        inner = Component("inner")
        add_child(inner, proc, "p", number=2)
        outer = Component("outer")
        add_child(outer, inner, "inner")
        add_child(outer, proc, "q")

        paths = list(outer.walk_children())
        assert paths[0] == ComponentPath(None, ())
        assert set(paths) == set([
            ComponentPath(None, ()),
            ComponentPath(None, ("inner", )),
            ComponentPath(None, ("inner", "p[0]")),
            ComponentPath(None, ("inner", "p[1]")),
            ComponentPath(None, ("q", )),
        ])

    def test_visible_and_unlinked_ports(self, proc):
        tile = Component("tile")
        add_child(tile, proc, "proc")
        add_port(tile, "in", "input")
        assert set(tile.visible_ports()) == set([
            PortPath(None, "in"), PortPath(None, "proc.in"),
            PortPath(None, "proc.out")])
        add_link(tile, "in", "proc.in")
        assert tile.unlinked_ports() == [PortPath(None, "proc.out")]

    def test_metadata_search(self, proc):
        proc.metadata["kind"] = "alu"
        tile = Component("tile", metadata={"kind": "tile"})
        add_child(tile, proc, "a")
        add_child(tile, Component("mem", metadata={"kind": "memory"}), "m")
        assert tile.search_metadata("kind", "tile")
        assert not tile.search_metadata("kind", "alu")
        assert not tile.search_metadata("missing", "alu")
        assert tile.find_children("kind", "alu") == \
            [ComponentPath(None, ("a", ))]
        assert len(tile.find_children("kind", "m",
                                      lambda a, b: a.startswith(b))) == 1

    def test_mux(self):
        mux = build_mux(2, 3)
        assert mux.ismux
        assert mux.isleaf
        assert sorted(mux.ports) == ["in[0]", "in[1]",
                                     "out[0]", "out[1]", "out[2]"]

    def test_repr(self, proc):
        assert "proc" in repr(proc)


class TestTopLevel(object):

    def test_addresses_and_shape(self, grid):
        toplevel = grid(3, 2)
        assert len(toplevel.addresses()) == 6
        assert toplevel.isaddress((2, 1))
        assert not toplevel.isaddress((3, 0))
        assert toplevel.shape == (3, 2)
        assert TopLevel("empty").shape == (0, 0)

    def test_getitem(self, grid):
        toplevel = grid(2, 1)
        assert toplevel[(0, 0)].name == "tile"
        assert toplevel[ComponentPath((1, 0), ("proc", ))].name == "proc"
        assert toplevel[PortPath((1, 0), ("mux", "in[4]"))].cls is \
            PortClass.input
        name = toplevel.portlink[PortPath((0, 0), ("out[0]", ))]
        assert toplevel[LinkPath(None, (name, ))].dests == \
            (PortPath((1, 0), ("in[1]", )), )
        with pytest.raises(KeyError):
            toplevel[PortPath(None, ("in[0]", ))]
        assert PortPath((5, 5), ("in[0]", )) not in toplevel

    def test_hasaddress(self):
        assert TopLevel.hasaddress(PortPath((0, ), "a"))
        assert not TopLevel.hasaddress(PortPath(None, "a"))

    def test_mappables(self, grid):
        toplevel = grid(1, 1)
        # The mux is a routing primitive and the tile is not a leaf
        assert toplevel.mappables(RuleSet(), (0, 0)) == \
            [ComponentPath((0, 0), ("proc", ))]

        class NoProcs(RuleSet):
            def ismappable(self, component):
                return component.name != "proc"
        assert toplevel.mappables(NoProcs(), (0, 0)) == []

    def test_connected_components(self, grid):
        toplevel = grid(2, 2)
        connected = toplevel.connected_components()
        assert connected[(0, 0)] == set([(1, 0), (0, 1)])
        assert connected[(1, 1)] == set([(0, 1), (1, 0)])

    def test_port_links(self, grid):
        toplevel = grid(2, 1)
        # A tile port is linked from inside the tile and from the top level
        links = toplevel.port_links(PortPath((0, 0), ("out[0]", )))
        assert len(links) == 2
        assert LinkPath(None, (toplevel.portlink[
            PortPath((0, 0), ("out[0]", ))], )) in links
        # A port of a child is linked by its parent
        links = toplevel.port_links(PortPath((0, 0), ("proc", "out")))
        assert len(links) == 1
        assert links[0].address == (0, 0)

    def test_isconnected(self, grid):
        toplevel = grid(2, 1)
        out = PortPath((0, 0), ("out[0]", ))
        dest = PortPath((1, 0), ("in[1]", ))
        link = LinkPath(None, (toplevel.portlink[out], ))
        mux = ComponentPath((0, 0), ("mux", ))

        assert toplevel.isconnected(out, link)
        assert toplevel.isconnected(link, dest)
        assert toplevel.isconnected(out, dest)
        assert not toplevel.isconnected(dest, link)
        assert not toplevel.isconnected(dest, out)
        assert toplevel.isconnected(mux.port("in[4]"), mux)
        assert toplevel.isconnected(mux, mux.port("out[0]"))
        assert not toplevel.isconnected(mux, mux.port("in[4]"))
        assert not toplevel.isconnected(mux.port("out[0]"), mux)

    def test_unlinked_ports(self, grid):
        toplevel = grid(1, 1)
        # All external ports of a lone tile are unlinked at the top level but
        # are still linked inside the tile.
        assert toplevel.unlinked_ports() == []
        add_port(toplevel[(0, 0)], "debug", "output")
        assert toplevel.unlinked_ports() == [PortPath((0, 0), ("debug", ))]
