"""Policies for growing the historical congestion cost of a routing
resource.

A policy is a callable ``policy(link, history) -> history`` called, once per
routing iteration, for every resource which ended the iteration congested.
"""


class AdditiveHistory(object):
    """Add ``increment`` times the overuse of the resource."""

    __slots__ = ["increment"]

    def __init__(self, increment=1.0):
        if increment <= 0.0:
            raise ValueError("increment must be positive")
        self.increment = increment

    def __call__(self, link, history):
        return history + self.increment * (link.occupancy - link.capacity)


class MultiplicativeHistory(object):
    """Multiply the history cost by ``factor``, starting from ``initial``."""

    __slots__ = ["factor", "initial"]

    def __init__(self, factor=2.0, initial=1.0):
        if factor <= 1.0:
            raise ValueError("factor must be greater than 1")
        if initial <= 0.0:
            raise ValueError("initial must be positive")
        self.factor = factor
        self.initial = initial

    def __call__(self, link, history):
        if history <= 0.0:
            return self.initial
        return history * self.factor
