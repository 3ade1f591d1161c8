"""Rule sets: the capabilities a user supplies to describe what may go
where.

A rule set is an object whose methods answer the questions the placement
and routing engines ask about a particular architecture and taskgraph. Users
subclass :py:class:`RuleSet` and override only the methods they need; the
defaults describe an architecture where any task may use any mappable
component and any routing resource.

The engines look up each method once when they start, so a rule set must not
replace its methods while a run is in progress.
"""

from archmap.route.links import BasicRoutingLink
from archmap.route.channels import BasicChannel


class RuleSet(object):
    """The default answer to every question.

    Methods receive architecture components, ports and taskgraph nodes and
    edges directly (not paths).
    """

    # Placement

    def isspecial(self, node):
        """Should moves of this task ignore the distance limit?

        Useful for tasks whose legal locations are few and far apart (such as
        memory or I/O tasks) which would otherwise be frozen in place once the
        distance limit becomes small.
        """
        return False

    def isequivalent(self, a, b):
        """May tasks ``a`` and ``b`` be placed on the same set of components?

        Tasks are grouped into equivalence classes with this relation, and
        only :py:meth:`.canmap` of one representative per class is consulted.
        """
        return True

    def ismappable(self, component):
        """May any task be mapped to this (leaf) component?"""
        return True

    def canmap(self, node, component):
        """May task ``node`` be mapped to ``component``?"""
        return True

    def address_data(self, component):
        """Get the data used by :py:meth:`.address_cost` for the location of
        a mappable component, or None.
        """
        return None

    def channel_cost(self, sa_struct, channel):
        """The placement cost of one channel: by default the sum of the
        distances from each source task to each sink task.
        """
        nodes = sa_struct.nodes
        getdistance = sa_struct.distance.getdistance
        cost = 0.0
        for source in channel.sources:
            source_address = nodes[source].address
            for sink in channel.sinks:
                cost += getdistance(source_address, nodes[sink].address)
        return cost

    def address_cost(self, sa_struct, node, address_data):
        """An additional cost for a task being at its current location.

        Only consulted when placement runs with ``enable_address=True``, in
        which case ``address_data`` is the
        :py:class:`~archmap.place.sa.struct.DefaultAddressData` of the struct.
        """
        return 0.0

    def aux_cost(self, sa_struct):
        """A global cost term computed from the whole placement (typically
        kept up to date in ``sa_struct.aux``).
        """
        return 0.0

    # Routing

    def canuse(self, item, edge):
        """May the routing resource ``item`` (a port, link or multiplexer) be
        used by the channel implementing taskgraph edge ``edge``?
        """
        return True

    def getcapacity(self, item):
        """The number of channels which may share a routing resource."""
        return 1

    def is_source_port(self, port, edge):
        """May ``port`` (an output of a source task's component) start the
        route for ``edge``?
        """
        return True

    def is_sink_port(self, port, edge):
        """May ``port`` (an input of a sink task's component) end the route
        for ``edge``?
        """
        return True

    def needsrouting(self, edge):
        """Does this taskgraph edge need a route at all?

        Edges which do not still contribute to placement cost.
        """
        return True

    def annotate(self, item):
        """Build the routing annotation (a
        :py:class:`~archmap.route.links.RoutingLink`) for a routing resource.
        """
        return BasicRoutingLink(capacity=self.getcapacity(item))

    def routing_channel(self, start, stop, edge):
        """Build the routing channel for a taskgraph edge.

        Parameters
        ----------
        start, stop : [:py:class:`~archmap.route.channels.PortVertices`, ...]
            One entry per source (or sink) task of the edge.
        edge : :py:class:`~archmap.taskgraph.TaskgraphEdge`
        """
        return BasicChannel(start, stop)

    def overrides(self, name):
        """Does this rule set change the default behaviour of a method?"""
        return getattr(type(self), name) is not getattr(RuleSet, name)


class DefaultRuleSet(RuleSet):
    """A rule set with no customisation at all."""
    pass
