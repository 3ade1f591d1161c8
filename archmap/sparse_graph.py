"""An explicit representation of the route taken by one channel.

Routes are stored as small directed graphs whose vertices are the routing
resources passed through (ports, links and multiplexers, either as integer
vertex indices during routing or as architecture paths once recorded in a
:py:class:`~archmap.Map`). A route may branch when a channel has several
destinations and may merge when it has several sources.
"""

from collections import deque


class SparseDiGraph(object):
    """A directed graph over arbitrary hashable vertices.

    Parameters
    ----------
    vertices : iterable
    edges : iterable of (source, dest)
        Vertices referenced by edges are added automatically.
    """

    __slots__ = ["_succ", "_pred"]

    def __init__(self, vertices=(), edges=()):
        self._succ = {}
        self._pred = {}
        for vertex in vertices:
            self.add_vertex(vertex)
        for source, dest in edges:
            self.add_edge(source, dest)

    def add_vertex(self, vertex):
        if vertex not in self._succ:
            self._succ[vertex] = []
            self._pred[vertex] = []

    def add_edge(self, source, dest):
        """Add an edge (and its vertices). Adding an existing edge has no
        effect.
        """
        self.add_vertex(source)
        self.add_vertex(dest)
        if dest not in self._succ[source]:
            self._succ[source].append(dest)
            self._pred[dest].append(source)

    def add_path(self, path):
        """Add the edges joining consecutive vertices of a sequence."""
        path = list(path)
        if len(path) == 1:
            self.add_vertex(path[0])
        for source, dest in zip(path, path[1:]):
            self.add_edge(source, dest)

    def has_vertex(self, vertex):
        return vertex in self._succ

    def has_edge(self, source, dest):
        return source in self._succ and dest in self._succ[source]

    @property
    def vertices(self):
        return list(self._succ)

    def edges(self):
        """Generate every edge as a (source, dest) tuple."""
        for source, dests in self._succ.items():
            for dest in dests:
                yield (source, dest)

    def successors(self, vertex):
        return list(self._succ[vertex])

    def predecessors(self, vertex):
        return list(self._pred[vertex])

    def source_vertices(self):
        """List the vertices which have no incoming edges."""
        return [v for v, pred in self._pred.items() if not pred]

    def sink_vertices(self):
        """List the vertices which have no outgoing edges."""
        return [v for v, succ in self._succ.items() if not succ]

    def linearize(self):
        """Get the vertices of a graph which is a single simple path, in
        order.

        Raises
        ------
        ValueError
            If the graph is not a single simple path.
        """
        if not self._succ:
            return []
        sources = self.source_vertices()
        if len(sources) != 1:
            raise ValueError("Graph is not a simple path")
        path = sources
        while self._succ[path[-1]]:
            succ = self._succ[path[-1]]
            if len(succ) != 1:
                raise ValueError("Graph is not a simple path")
            path.append(succ[0])
        if len(path) != len(self._succ):
            raise ValueError("Graph is not a simple path")
        return path

    def reachable(self, vertex):
        """The set of vertices reachable from a vertex (including itself)."""
        seen = set([vertex])
        to_visit = deque([vertex])
        while to_visit:
            for dest in self._succ[to_visit.popleft()]:
                if dest not in seen:
                    seen.add(dest)
                    to_visit.append(dest)
        return seen

    def has_path(self, source, dest):
        if source not in self._succ or dest not in self._succ:
            return False
        return dest in self.reachable(source)

    def is_weakly_connected(self):
        """Is the graph connected when edge directions are ignored?

        The empty graph is considered connected.
        """
        if not self._succ:
            return True
        start = next(iter(self._succ))
        seen = set([start])
        to_visit = deque([start])
        while to_visit:
            vertex = to_visit.popleft()
            for other in self._succ[vertex] + self._pred[vertex]:
                if other not in seen:
                    seen.add(other)
                    to_visit.append(other)
        return len(seen) == len(self._succ)

    def map_vertices(self, f):
        """Get a copy of this graph with every vertex replaced by ``f(v)``."""
        return SparseDiGraph((f(v) for v in self._succ),
                             ((f(a), f(b)) for a, b in self.edges()))

    def copy(self):
        return self.map_vertices(lambda v: v)

    def __len__(self):
        return len(self._succ)

    def __iter__(self):
        """Iterate over the vertices, in the order they were added."""
        return iter(self._succ)

    def __contains__(self, vertex):
        return vertex in self._succ

    def __eq__(self, other):
        if not isinstance(other, SparseDiGraph):
            return NotImplemented
        return (set(self._succ) == set(other._succ) and
                set(self.edges()) == set(other.edges()))

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

    def __getstate__(self):
        return (self._succ, self._pred)

    def __setstate__(self, state):
        self._succ, self._pred = state

    def __repr__(self):
        return "<SparseDiGraph with {} vertices and {} edges>".format(
            len(self._succ), sum(len(s) for s in self._succ.values()))
