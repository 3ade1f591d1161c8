"""The taskgraph: the application to be mapped onto an architecture.

Tasks (:py:class:`TaskgraphNode`) communicate over edges
(:py:class:`TaskgraphEdge`) which may have several source and several sink
tasks. Edges are identified by their position in the taskgraph's edge list.
"""

from archmap.exceptions import TaskgraphError


class TaskgraphNode(object):
    """A task.

    Attributes
    ----------
    name : str
        Unique within a taskgraph.
    metadata : dict
        Free-form data consulted by rule sets.
    """

    __slots__ = ["name", "metadata"]

    def __init__(self, name, metadata=None):
        self.name = name
        self.metadata = {} if metadata is None else metadata

    def __repr__(self):
        return "<TaskgraphNode {!r}>".format(self.name)


class TaskgraphEdge(object):
    """A communication from source tasks to sink tasks.

    Attributes
    ----------
    sources, sinks : (str, ...)
        Names of the tasks at each end. A single name may be given to the
        constructor in place of a sequence.
    metadata : dict
    """

    __slots__ = ["sources", "sinks", "metadata"]

    def __init__(self, sources, sinks, metadata=None):
        if isinstance(sources, str):
            sources = (sources, )
        if isinstance(sinks, str):
            sinks = (sinks, )
        self.sources = tuple(sources)
        self.sinks = tuple(sinks)
        self.metadata = {} if metadata is None else metadata

    def __repr__(self):
        return "<TaskgraphEdge {} -> {}>".format(
            ", ".join(self.sources), ", ".join(self.sinks))


class Taskgraph(object):
    """A set of named tasks and the edges between them.

    Parameters
    ----------
    name : str
    nodes : iterable of :py:class:`.TaskgraphNode`
    edges : iterable of :py:class:`.TaskgraphEdge`
    """

    def __init__(self, name="", nodes=(), edges=()):
        self.name = name
        self.nodes = {}
        self.edges = []
        self._out_edges = {}
        self._in_edges = {}
        for node in nodes:
            self.add_node(node)
        for edge in edges:
            self.add_edge(edge)

    def add_node(self, node):
        """Add a task.

        Raises
        ------
        TaskgraphError
            If a task of the same name already exists.
        """
        if node.name in self.nodes:
            raise TaskgraphError("Duplicate task name {!r}".format(node.name))
        self.nodes[node.name] = node
        self._out_edges[node.name] = []
        self._in_edges[node.name] = []

    def add_edge(self, edge):
        """Add an edge between existing tasks.

        Returns
        -------
        int
            The index of the new edge.

        Raises
        ------
        TaskgraphError
            If the edge has no sources or sinks, or names an unknown task.
        """
        if not edge.sources or not edge.sinks:
            raise TaskgraphError(
                "Edges need at least one source and one sink: {!r}".format(
                    edge))
        for name in edge.sources + edge.sinks:
            if name not in self.nodes:
                raise TaskgraphError(
                    "Edge {!r} refers to unknown task {!r}".format(
                        edge, name))

        index = len(self.edges)
        self.edges.append(edge)
        for name in set(edge.sources):
            self._out_edges[name].append(index)
        for name in set(edge.sinks):
            self._in_edges[name].append(index)
        return index

    def getnodes(self):
        return list(self.nodes.values())

    def getnode(self, name):
        return self.nodes[name]

    def getedges(self):
        return list(self.edges)

    def getedge(self, index):
        return self.edges[index]

    def nodenames(self):
        return list(self.nodes)

    def num_nodes(self):
        return len(self.nodes)

    def num_edges(self):
        return len(self.edges)

    def hasnode(self, name):
        return name in self.nodes

    def getsources(self, edge):
        """The source tasks of an edge (given as an edge or edge index)."""
        if isinstance(edge, int):
            edge = self.edges[edge]
        return [self.nodes[name] for name in edge.sources]

    def getsinks(self, edge):
        """The sink tasks of an edge (given as an edge or edge index)."""
        if isinstance(edge, int):
            edge = self.edges[edge]
        return [self.nodes[name] for name in edge.sinks]

    def out_edges(self, name):
        """Indices of the edges a task is a source of."""
        return list(self._out_edges[name])

    def in_edges(self, name):
        """Indices of the edges a task is a sink of."""
        return list(self._in_edges[name])

    def outnode_names(self, name):
        """Names of the tasks that a task sends to, without duplicates."""
        names = []
        for index in self._out_edges[name]:
            for sink in self.edges[index].sinks:
                if sink not in names:
                    names.append(sink)
        return names

    def innode_names(self, name):
        """Names of the tasks that send to a task, without duplicates."""
        names = []
        for index in self._in_edges[name]:
            for source in self.edges[index].sources:
                if source not in names:
                    names.append(source)
        return names

    def outnodes(self, name):
        return [self.nodes[n] for n in self.outnode_names(name)]

    def innodes(self, name):
        return [self.nodes[n] for n in self.innode_names(name)]

    def __repr__(self):
        return "<Taskgraph {!r} with {} nodes and {} edges>".format(
            self.name, len(self.nodes), len(self.edges))
