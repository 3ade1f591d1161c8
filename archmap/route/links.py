"""Routing annotations: the state the router keeps for each routing
resource.
"""


class RoutingLink(object):
    """Interface for the annotation of one routing resource.

    Attributes
    ----------
    channels : set
        Indices of the channels currently routed through the resource.
    cost : float
        The base cost of using the resource.
    capacity : int
        How many channels may use the resource at once.
    """

    __slots__ = []

    @property
    def occupancy(self):
        return len(self.channels)

    def addchannel(self, channel):
        raise NotImplementedError()

    def remchannel(self, channel):
        raise NotImplementedError()

    def iscongested(self):
        return self.occupancy > self.capacity


class BasicRoutingLink(RoutingLink):
    """A routing resource with a fixed base cost and capacity."""

    __slots__ = ["channels", "cost", "capacity"]

    def __init__(self, channels=None, cost=1.0, capacity=1):
        self.channels = set() if channels is None else set(channels)
        self.cost = cost
        self.capacity = capacity

    def addchannel(self, channel):
        self.channels.add(channel)

    def remchannel(self, channel):
        """Remove a channel (KeyError if it is not using this resource)."""
        self.channels.remove(channel)

    def __repr__(self):
        return "<BasicRoutingLink {}/{} cost {}>".format(
            self.occupancy, self.capacity, self.cost)
