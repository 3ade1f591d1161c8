"""Negotiated congestion routing.

Every channel is routed independently along its cheapest path. Resources
used by more channels than their capacity allows make themselves more
expensive: immediately (the *present* congestion cost, growing each
iteration) and persistently (the *history* cost, accumulated each iteration a
resource ends up congested). Channels are ripped up and rerouted until no
resource is over-subscribed or the iteration limit is reached.

The cost of entering a resource ``v`` is::

    (base_cost(v) + history(v)) * (1 + present_factor * overuse(v))

where ``overuse`` is the number of channels by which the resource would
exceed its capacity if the channel being routed used it too. Resources
already used by the channel being routed cost nothing, so the branches of a
channel share resources where they can.
"""

import heapq

import logging

import time

from archmap.exceptions import UnroutableChannelError
from archmap.route.history import AdditiveHistory
from archmap.route.struct import RoutingStruct
from archmap.sparse_graph import SparseDiGraph
from archmap.verification import check_routing

logger = logging.getLogger(__name__.split(".")[-1])


def priority_order(routing_struct):
    """Route channels in the order their ``__lt__`` sorts them (input order
    when channels express no preference).
    """
    channels = routing_struct.channels
    return sorted(range(len(channels)), key=channels.__getitem__)


def fanout_order(routing_struct):
    """Route channels with the most destinations first."""
    channels = routing_struct.channels
    return sorted(range(len(channels)),
                  key=lambda i: -len(channels[i].stop_vertices))


class RoutingResult(object):
    """The outcome of a routing run.

    Attributes
    ----------
    success : bool
        True when every channel was routed without over-subscribing any
        resource.
    iterations : int
        The number of routing iterations performed.
    congested : [int, ...]
        Routing graph vertices which were over-subscribed at the end of the
        final iteration (empty on success).
    routes : [:py:class:`~archmap.sparse_graph.SparseDiGraph`, ...]
        The route of each channel at the end of the final iteration, over
        routing graph vertex indices.
    """

    __slots__ = ["success", "iterations", "congested", "routes"]

    def __init__(self, success, iterations, congested, routes):
        self.success = success
        self.iterations = iterations
        self.congested = congested
        self.routes = routes

    def __bool__(self):
        return self.success

    def __repr__(self):
        return "<RoutingResult {} after {} iterations>".format(
            "success" if self.success else "failure", self.iterations)


def shortest_path(successors, seeds, targets, vertex_cost, free=(),
                  usable=None):
    """Find the cheapest path from any seed vertex to any target vertex.

    Parameters
    ----------
    successors : [[int, ...], ...]
        Adjacency lists of the graph.
    seeds : iterable of int
    targets : set of int
    vertex_cost : callable(int) -> float
        The (non-negative) cost of entering a vertex.
    free : container of int
        Vertices which cost nothing to enter.
    usable : array of bool or None
        Vertices which may not be entered are False.

    Returns
    -------
    [int, ...] or None
        The path from a seed to a target, or None if there is no such path.
    """
    best = {}
    previous = {}
    heap = []
    for vertex in seeds:
        cost = 0.0 if vertex in free else vertex_cost(vertex)
        if cost < best.get(vertex, float("inf")):
            best[vertex] = cost
            previous[vertex] = None
            heapq.heappush(heap, (cost, vertex))

    while heap:
        cost, vertex = heapq.heappop(heap)
        if cost > best[vertex]:
            continue

        if vertex in targets:
            path = [vertex]
            while previous[path[-1]] is not None:
                path.append(previous[path[-1]])
            path.reverse()
            return path

        for neighbour in successors[vertex]:
            if usable is not None and not usable[neighbour]:
                continue
            new_cost = cost + (0.0 if neighbour in free
                               else vertex_cost(neighbour))
            if new_cost < best.get(neighbour, float("inf")):
                best[neighbour] = new_cost
                previous[neighbour] = vertex
                heapq.heappush(heap, (new_cost, neighbour))

    return None


class Pathfinder(object):
    """The negotiated congestion router.

    Parameters
    ----------
    routing_struct : :py:class:`~archmap.route.struct.RoutingStruct`
    iterations : int
        The maximum number of rip-up and reroute iterations.
    history : callable(link, history) -> history
        The growth policy for the history cost of congested resources.
        Defaults to :py:class:`~archmap.route.history.AdditiveHistory`.
    ordering : callable(routing_struct) -> [int, ...]
        The order to route channels in each iteration. Defaults to
        :py:func:`.priority_order`.
    present_factor : float
        The initial weight of present congestion.
    present_growth : float
        The factor by which ``present_factor`` grows after every iteration.
    """

    def __init__(self, routing_struct, iterations=50, history=None,
                 ordering=None, present_factor=0.5, present_growth=1.5):
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        if present_factor < 0.0 or present_growth < 1.0:
            raise ValueError("present congestion cost must not decrease")
        self.struct = routing_struct
        self.iterations = iterations
        self.history_policy = AdditiveHistory() if history is None \
            else history
        self.ordering = priority_order if ordering is None else ordering
        self.present_factor = present_factor
        self.present_growth = present_growth
        self.history = [0.0] * len(routing_struct.links)

    def route_channel(self, channel):
        """Find a route for a single channel given the current occupancy of
        every resource. The channel's own resources must have been released.

        Every source branch is connected to every sink branch. Once a source
        branch has started from one of its ports, later paths of that branch
        grow from the part of the route already reachable from that port.

        Raises
        ------
        UnroutableChannelError
            If some sink cannot be reached from some source at any cost.
        """
        struct = self.struct
        links = struct.links
        history = self.history
        present_factor = self.present_factor
        successors = struct.graph.adjacency
        usable = struct.usable[channel]

        def vertex_cost(vertex):
            link = links[vertex]
            overuse = link.occupancy + 1 - link.capacity
            if overuse > 0:
                return ((link.cost + history[vertex]) *
                        (1.0 + present_factor * overuse))
            return link.cost + history[vertex]

        route = SparseDiGraph()
        routing_channel = struct.channels[channel]
        for start in routing_channel.start_vertices:
            origin = None
            for stop in routing_channel.stop_vertices:
                targets = set(stop)
                if origin is None:
                    seeds = list(start)
                else:
                    seeds = route.reachable(origin)
                    if not targets.isdisjoint(seeds):
                        continue

                path = shortest_path(successors, sorted(seeds), targets,
                                     vertex_cost, route, usable)
                if path is None:
                    raise UnroutableChannelError(
                        struct.channel_edges[channel], "path")
                route.add_path(path)
                if origin is None:
                    origin = path[0]
        return route

    def run(self, on_iteration=None):
        """Route every channel, negotiating congestion.

        Parameters
        ----------
        on_iteration : callable(iteration, congested) or None
            Called at the end of every unsuccessful iteration with the
            iteration number and the congested vertices. Returning False
            stops routing (reported as a failure).

        Returns
        -------
        :py:class:`.RoutingResult`
        """
        struct = self.struct
        links = struct.links
        order = self.ordering(struct)

        for iteration in range(1, self.iterations + 1):
            for channel in order:
                struct.clear_route(channel)
                struct.setroute(self.route_channel(channel), channel)

            congested = struct.congested_links()
            logger.debug("Iteration: %d, "
                         "Congested: %d, "
                         "Present factor: %0.2f",
                         iteration, len(congested), self.present_factor)
            if not congested:
                logger.info("Routing converged after %d iterations.",
                            iteration)
                return RoutingResult(True, iteration, [], struct.routes)

            for vertex in congested:
                self.history[vertex] = self.history_policy(
                    links[vertex], self.history[vertex])
            self.present_factor *= self.present_growth

            if on_iteration is not None and \
                    on_iteration(iteration, congested) is False:
                logger.info("Routing stopped after %d iterations.",
                            iteration)
                return RoutingResult(False, iteration, congested,
                                     struct.routes)

        logger.info("Routing failed to converge after %d iterations "
                    "(%d resources congested).",
                    self.iterations, len(congested))
        return RoutingResult(False, self.iterations, congested, struct.routes)


def route(m, iterations=50, history=None, ordering=None, present_factor=0.5,
          present_growth=1.5, on_iteration=None, meta_prefix=""):
    """Route every edge of a placed map.

    Routes are only written into ``m.mapping.edges`` when routing succeeds;
    otherwise the map is left as it was.

    Parameters
    ----------
    m : :py:class:`~archmap.Map`
    iterations, history, ordering, present_factor, present_growth
        See :py:class:`.Pathfinder`.
    on_iteration : callable or None
        See :py:meth:`.Pathfinder.run`.
    meta_prefix : str
        Prepended to the keys of the statistics written to ``m.metadata``:
        ``routing_struct_time``, ``routing_time``, ``routing_error``,
        ``routing_passed`` and ``routing_global_links``.

    Returns
    -------
    :py:class:`.RoutingResult`

    Raises
    ------
    UnroutableChannelError
        If some channel can never be routed (no legal ports, or no path at
        all). ``routing_error`` is recorded as True.
    """
    start_time = time.time()
    try:
        routing_struct = RoutingStruct(m)
        m.metadata[meta_prefix + "routing_struct_time"] = \
            time.time() - start_time
        logger.info("Routing %d channels over %d resources.",
                    len(routing_struct.channels), len(routing_struct.links))

        pathfinder = Pathfinder(routing_struct, iterations, history,
                                ordering, present_factor, present_growth)
        result = pathfinder.run(on_iteration)
    except UnroutableChannelError:
        m.metadata[meta_prefix + "routing_error"] = True
        m.metadata[meta_prefix + "routing_passed"] = False
        raise

    m.metadata[meta_prefix + "routing_time"] = time.time() - start_time
    m.metadata[meta_prefix + "routing_error"] = False
    if result.success:
        routing_struct.record(m)
        m.metadata[meta_prefix + "routing_global_links"] = \
            routing_struct.global_links_used()
        m.metadata[meta_prefix + "routing_passed"] = check_routing(m)
    else:
        m.metadata[meta_prefix + "routing_passed"] = False
    return result
