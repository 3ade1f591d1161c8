"""A flat numbering of the items of an architecture.

The placement and routing engines refer to components, ports and links by
integer handles into the lists of an :py:class:`ArchitectureIndex` rather
than by walking the component hierarchy.
"""

from archmap.architecture.paths import LinkPath


class ArchitectureIndex(object):
    """Integer handles for every component, port and link of a top level.

    Attributes
    ----------
    components, ports, links : [path, ...]
        Absolute paths of every item of each kind; the position of a path in
        its list is its handle.
    handles : {path: int, ...}
        The inverse of the three lists (paths of different kinds never
        collide).
    link_sources, link_dests : [(int, ...), ...]
        The port handles at each end of each link.
    """

    __slots__ = ["components", "ports", "links", "handles",
                 "link_sources", "link_dests"]

    def __init__(self, toplevel):
        self.components = []
        self.ports = []
        self.links = []
        self.handles = {}

        for path in toplevel.walk_children():
            self._add(self.components, path)
            component = toplevel[path]
            for name in component.ports:
                self._add(self.ports, path.port(name))
            for name in component.links:
                self._add(self.links, path.link(name))
        for name in toplevel.links:
            self._add(self.links, LinkPath(None, (name, )))

        self.link_sources = []
        self.link_dests = []
        for path in self.links:
            sources, dests = toplevel.link_endpoints(path)
            self.link_sources.append(tuple(self.handles[p] for p in sources))
            self.link_dests.append(tuple(self.handles[p] for p in dests))

    def _add(self, paths, path):
        self.handles[path] = len(paths)
        paths.append(path)

    def __getitem__(self, path):
        return self.handles[path]

    def __contains__(self, path):
        return path in self.handles

    def __repr__(self):
        return "<ArchitectureIndex: {} components, {} ports, {} links>".format(
            len(self.components), len(self.ports), len(self.links))
