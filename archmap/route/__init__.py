"""Routing: connecting the placed tasks of every taskgraph edge through the
routing resources of the architecture.
"""

from archmap.route.pathfinder import \
    route, Pathfinder, RoutingResult, priority_order, fanout_order

from archmap.route.history import AdditiveHistory, MultiplicativeHistory

from archmap.route.links import RoutingLink, BasicRoutingLink

from archmap.route.channels import RoutingChannel, BasicChannel, PortVertices

from archmap.route.struct import RoutingStruct

from archmap.route.graph import RoutingGraph
