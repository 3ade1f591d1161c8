import pytest

from archmap.architecture import ComponentPath, PortPath, LinkPath


class TestPaths(object):

    def test_string_steps(self):
        assert PortPath(None, "proc.out").steps == ("proc", "out")
        assert PortPath(None, "proc.out") == PortPath(None, ("proc", "out"))

    def test_kinds_never_equal(self):
        # The same fields in different path kinds must not collide as keys
        c = ComponentPath((0, 0), ("a", ))
        p = PortPath((0, 0), ("a", ))
        l = LinkPath((0, 0), ("a", ))
        assert c != p
        assert p != l
        assert len(set([c, p, l])) == 3
        assert len({c: 1, p: 2, l: 3}) == 3

    def test_equality_and_hash(self):
        assert PortPath([1, 2], ["x"]) == PortPath((1, 2), ("x", ))
        assert hash(PortPath([1, 2], ["x"])) == hash(PortPath((1, 2), ("x", )))
        assert PortPath((1, 2), ("x", )) != PortPath((1, 3), ("x", ))

    def test_navigation(self):
        c = ComponentPath((3, ), ())
        child = c.child("proc")
        assert child == ComponentPath((3, ), ("proc", ))
        assert child.parent == c
        assert child.port("out") == PortPath((3, ), ("proc", "out"))
        assert child.port("out").component == child
        assert child.port("out").name == "out"
        assert c.link("l").component == c

        with pytest.raises(ValueError):
            c.parent

    def test_prefix(self):
        owner = ComponentPath((0, 1), ("tile", ))
        assert owner.prefix(PortPath(None, "mux.in[0]")) == \
            PortPath((0, 1), ("tile", "mux", "in[0]"))

    def test_relative(self):
        assert PortPath(None, "a").isrelative
        assert not PortPath((0, ), "a").isrelative

    def test_sortable(self):
        paths = [PortPath((1, ), "b"), PortPath((0, ), "z"),
                 PortPath((0, ), "a")]
        assert sorted(paths) == [PortPath((0, ), "a"), PortPath((0, ), "z"),
                                 PortPath((1, ), "b")]

    def test_repr_and_str(self):
        p = PortPath((1, 2), ("proc", "out"))
        assert "PortPath" in repr(p)
        assert "proc" in str(p)
        assert "out" in str(p)
