"""The mapping record: an architecture, a taskgraph and the result of mapping
one onto the other.
"""

from archmap.sparse_graph import SparseDiGraph


class Mapping(object):
    """Where each task has been placed and how each edge has been routed.

    Attributes
    ----------
    nodes : {task name: :py:class:`~archmap.architecture.ComponentPath`, ...}
        Only tasks which have been placed appear.
    edges : [:py:class:`~archmap.sparse_graph.SparseDiGraph`, ...]
        One route per taskgraph edge, in edge order. Vertices are the
        :py:class:`~archmap.architecture.PortPath`,
        :py:class:`~archmap.architecture.LinkPath` and (for multiplexers)
        :py:class:`~archmap.architecture.ComponentPath` of the routing
        resources used. Unrouted edges have empty graphs.
    """

    __slots__ = ["nodes", "edges"]

    def __init__(self, nodes=None, edges=None):
        self.nodes = {} if nodes is None else nodes
        self.edges = [] if edges is None else edges


class Map(object):
    """Everything about one mapping problem.

    Parameters
    ----------
    ruleset : :py:class:`~archmap.ruleset.RuleSet`
    toplevel : :py:class:`~archmap.architecture.TopLevel`
    taskgraph : :py:class:`~archmap.taskgraph.Taskgraph`
    options : dict
        Free-form user bookkeeping; not consulted by the engines.
    metadata : dict
        Statistics are recorded here by the engines (for example
        ``placement_objective`` and ``routing_passed``).
    """

    __slots__ = ["ruleset", "toplevel", "taskgraph", "options", "mapping",
                 "metadata"]

    def __init__(self, ruleset, toplevel, taskgraph, options=None,
                 metadata=None):
        self.ruleset = ruleset
        self.toplevel = toplevel
        self.taskgraph = taskgraph
        self.options = {} if options is None else options
        self.metadata = {} if metadata is None else metadata
        self.mapping = Mapping(
            {}, [SparseDiGraph() for _ in range(taskgraph.num_edges())])

    def getpath(self, nodename):
        """The component path a task has been placed at (KeyError if the
        task has not been placed).
        """
        return self.mapping.nodes[nodename]

    def getaddress(self, nodename):
        return self.mapping.nodes[nodename].address

    def isplaced(self):
        return all(name in self.mapping.nodes
                   for name in self.taskgraph.nodenames())

    def __repr__(self):
        return "<Map of {!r} onto {!r}>".format(self.taskgraph, self.toplevel)
