"""The routing graph: every routing resource of an architecture and which
resources may drive which.
"""

from archmap.architecture import ArchitectureIndex, PortClass


class RoutingGraph(object):
    """A directed graph with one vertex per routing resource.

    Vertices are numbered from 0. The resources are every port and every link
    of the architecture plus every routing multiplexer component.

    Attributes
    ----------
    adjacency : [[int, ...], ...]
        The successors of each vertex.
    paths : [path, ...]
        The architecture path of each vertex.
    map : {path: int, ...}
        The inverse of ``paths``.
    """

    __slots__ = ["adjacency", "paths", "map"]

    def __init__(self, adjacency, paths):
        self.adjacency = adjacency
        self.paths = paths
        self.map = {path: i for i, path in enumerate(paths)}

    @classmethod
    def build(cls, toplevel, index=None):
        """Build the routing graph of a top level.

        Edges run from each source port of a link to the link and from the
        link to each of its destination ports. A multiplexer is driven by its
        input ports and drives its output ports.

        Parameters
        ----------
        toplevel : :py:class:`~archmap.architecture.TopLevel`
        index : :py:class:`~archmap.architecture.ArchitectureIndex` or None
            Built if not supplied.
        """
        if index is None:
            index = ArchitectureIndex(toplevel)

        paths = list(index.ports) + list(index.links)
        muxes = [path for path in index.components if toplevel[path].ismux]
        paths.extend(muxes)
        graph = cls([[] for _ in paths], paths)
        vertex = graph.map

        for link, sources, dests in zip(index.links, index.link_sources,
                                        index.link_dests):
            link_vertex = vertex[link]
            for port in sources:
                graph.adjacency[vertex[index.ports[port]]].append(link_vertex)
            for port in dests:
                graph.adjacency[link_vertex].append(vertex[index.ports[port]])

        for path in muxes:
            mux_vertex = vertex[path]
            for name, port in toplevel[path].ports.items():
                port_vertex = vertex[path.port(name)]
                if port.cls is PortClass.input:
                    graph.adjacency[port_vertex].append(mux_vertex)
                else:
                    graph.adjacency[mux_vertex].append(port_vertex)

        return graph

    def getmap(self):
        return self.map

    @property
    def num_vertices(self):
        return len(self.paths)

    def successors(self, vertex):
        return self.adjacency[vertex]

    def has_edge(self, source, dest):
        return dest in self.adjacency[source]

    def __len__(self):
        return len(self.paths)

    def __repr__(self):
        return "<RoutingGraph with {} vertices and {} edges>".format(
            len(self.paths), sum(len(a) for a in self.adjacency))
