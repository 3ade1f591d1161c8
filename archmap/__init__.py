"""Place and route task graphs onto hierarchical architectures.

Tasks are placed with simulated annealing
(:py:func:`~archmap.place.place`) and the edges between them are routed with
negotiated congestion (:py:func:`~archmap.route.route`). What may go where
is described by a :py:class:`~archmap.ruleset.RuleSet`.
"""

from archmap.version import __version__

from archmap.exceptions import \
    ArchitectureError, TaskgraphError, NoLegalLocationError, \
    InsufficientResourceError, UnroutableChannelError

from archmap.taskgraph import Taskgraph, TaskgraphNode, TaskgraphEdge

from archmap.ruleset import RuleSet, DefaultRuleSet

from archmap.map import Map, Mapping

from archmap.sparse_graph import SparseDiGraph

from archmap.place import place

from archmap.route import route, RoutingResult

from archmap.verification import check_routing

from archmap.wrapper import place_and_route
