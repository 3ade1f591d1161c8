"""Routing channels: what the router must connect for each taskgraph edge.
"""


class PortVertices(object):
    """The routing graph vertices (ports) which may terminate one branch of a
    channel. Any one of them will do.
    """

    __slots__ = ["indices"]

    def __init__(self, indices):
        self.indices = tuple(indices)

    def __iter__(self):
        return iter(self.indices)

    def __len__(self):
        return len(self.indices)

    def __contains__(self, index):
        return index in self.indices

    def __repr__(self):
        return "PortVertices({!r})".format(self.indices)


class RoutingChannel(object):
    """Interface of a channel.

    Attributes
    ----------
    start_vertices : [:py:class:`.PortVertices`, ...]
        One entry per source task.
    stop_vertices : [:py:class:`.PortVertices`, ...]
        One entry per sink task.

    Channels are routed in sorted order: a channel which compares less than
    another is routed first.
    """

    __slots__ = []

    def __lt__(self, other):
        return False


class BasicChannel(RoutingChannel):
    """A channel with no routing priority."""

    __slots__ = ["start_vertices", "stop_vertices"]

    def __init__(self, start_vertices, stop_vertices):
        self.start_vertices = list(start_vertices)
        self.stop_vertices = list(stop_vertices)

    def __repr__(self):
        return "<BasicChannel {} -> {}>".format(self.start_vertices,
                                                self.stop_vertices)
