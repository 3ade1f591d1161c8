"""The routing struct: everything the router needs about a placed map.
"""

import numpy as np

from archmap.architecture import ArchitectureIndex, PortClass, LinkPath
from archmap.exceptions import UnroutableChannelError
from archmap.route.channels import PortVertices
from archmap.route.graph import RoutingGraph
from archmap.sparse_graph import SparseDiGraph


class RoutingStruct(object):
    """The routing graph of a map's architecture annotated with occupancy,
    plus one channel and one (possibly empty) route per routed taskgraph edge.

    Parameters
    ----------
    m : :py:class:`~archmap.Map`
        Every task must already be placed.
    index : :py:class:`~archmap.architecture.ArchitectureIndex` or None

    Raises
    ------
    UnroutableChannelError
        If some task of a channel has no port which may start (or stop) it.
    ValueError
        If a task has not been placed.
    """

    def __init__(self, m, index=None):
        ruleset = m.ruleset
        toplevel = m.toplevel
        taskgraph = m.taskgraph

        if index is None:
            index = ArchitectureIndex(toplevel)
        self.graph = RoutingGraph.build(toplevel, index)
        self.links = [ruleset.annotate(toplevel[path])
                      for path in self.graph.paths]

        restricted = ruleset.overrides("canuse")
        self.channels = []
        self.channel_edges = []
        self.usable = []
        for i, edge in enumerate(taskgraph.edges):
            if not ruleset.needsrouting(edge):
                continue

            if restricted:
                usable = np.fromiter(
                    (ruleset.canuse(toplevel[path], edge)
                     for path in self.graph.paths),
                    dtype=bool, count=len(self.graph.paths))
            else:
                usable = None

            start = [self._port_vertices(m, i, name, PortClass.output,
                                         usable)
                     for name in edge.sources]
            stop = [self._port_vertices(m, i, name, PortClass.input, usable)
                    for name in edge.sinks]
            self.channels.append(ruleset.routing_channel(start, stop, edge))
            self.channel_edges.append(i)
            self.usable.append(usable)

        self.routes = [SparseDiGraph() for _ in self.channels]

    def _port_vertices(self, m, edge_index, name, cls, usable):
        try:
            path = m.mapping.nodes[name]
        except KeyError:
            raise ValueError("Task {!r} has not been placed".format(name))

        edge = m.taskgraph.edges[edge_index]
        if cls is PortClass.output:
            isport = m.ruleset.is_source_port
        else:
            isport = m.ruleset.is_sink_port
        vertex = self.graph.map
        component = m.toplevel[path]

        vertices = []
        for port_name, port in component.ports.items():
            if port.cls is not cls or not isport(port, edge):
                continue
            v = vertex[path.port(port_name)]
            if usable is None or usable[v]:
                vertices.append(v)
        if not vertices:
            raise UnroutableChannelError(
                edge_index,
                "start" if cls is PortClass.output else "stop", name)
        return PortVertices(vertices)

    def allroutes(self):
        return self.routes

    def getroute(self, channel):
        return self.routes[channel]

    def alllinks(self):
        return self.links

    def getlink(self, vertex):
        return self.links[vertex]

    def getchannel(self, channel):
        return self.channels[channel]

    def start_vertices(self, channel):
        return self.channels[channel].start_vertices

    def stop_vertices(self, channel):
        return self.channels[channel].stop_vertices

    def getgraph(self):
        return self.graph

    def canuse(self, channel, vertex):
        usable = self.usable[channel]
        return usable is None or bool(usable[vertex])

    def clear_route(self, channel):
        """Remove a channel's route, releasing the resources it used."""
        for vertex in self.routes[channel]:
            self.links[vertex].remchannel(channel)
        self.routes[channel] = SparseDiGraph()

    def setroute(self, route, channel):
        """Record a route for a channel (which must have no route) and occupy
        the resources along it.
        """
        assert not self.routes[channel], "Channel already routed."
        for vertex in route:
            self.links[vertex].addchannel(channel)
        self.routes[channel] = route

    def congested_links(self):
        """Vertex indices of every over-subscribed resource."""
        return [v for v, link in enumerate(self.links) if link.iscongested()]

    def iscongested(self, channel=None):
        """Is any resource (or any resource used by a channel)
        over-subscribed?
        """
        if channel is None:
            vertices = range(len(self.links))
        else:
            vertices = self.routes[channel]
        return any(self.links[v].iscongested() for v in vertices)

    def resources_used(self):
        return sum(1 for link in self.links if link.channels)

    def global_links_used(self):
        """The number of top level links carrying at least one channel."""
        return sum(1 for path, link in zip(self.graph.paths, self.links)
                   if link.channels and isinstance(path, LinkPath) and
                   path.address is None)

    def record(self, m):
        """Write every route into the map, translated to architecture paths.
        """
        paths = self.graph.paths
        for edge_index, route in zip(self.channel_edges, self.routes):
            m.mapping.edges[edge_index] = route.map_vertices(
                paths.__getitem__)

    def __repr__(self):
        return "<RoutingStruct: {} channels over {!r}>".format(
            len(self.channels), self.graph)
