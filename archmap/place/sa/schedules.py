"""Annealing schedules: how temperature and the distance limit evolve, and
when to stop.

Each strategy is consulted once per update cycle with the
:py:class:`~archmap.place.sa.state.SAState`, which it may modify.
"""


class SAWarm(object):
    def warm(self, state):
        """Adjust the temperature during warming. Set ``state.warming`` to
        False once warming is over.
        """
        raise NotImplementedError()


class DefaultSAWarm(SAWarm):
    """Multiply the temperature by ``multiplier`` until the fraction of
    accepted moves reaches ``ratio``. The target ratio itself decays by
    ``decay`` every cycle so that warming always ends.
    """

    __slots__ = ["ratio", "multiplier", "decay"]

    def __init__(self, ratio=0.9, multiplier=2.0, decay=0.95):
        if not 0.0 < ratio <= 1.0:
            raise ValueError("ratio must be in (0, 1]")
        if multiplier <= 1.0:
            raise ValueError("multiplier must be greater than 1")
        if not 0.0 < decay <= 1.0:
            raise ValueError("decay must be in (0, 1]")
        self.ratio = ratio
        self.multiplier = multiplier
        self.decay = decay

    def warm(self, state):
        if state.acceptance_ratio < self.ratio:
            state.temperature *= self.multiplier
            self.ratio *= self.decay
        else:
            state.warming = False


class SACool(object):
    def cool(self, state):
        raise NotImplementedError()


class DefaultSACool(SACool):
    """Geometric cooling: multiply the temperature by ``alpha``."""

    __slots__ = ["alpha"]

    def __init__(self, alpha=0.997):
        if not 0.0 < alpha < 1.0:
            raise ValueError("alpha must be in (0, 1)")
        self.alpha = alpha

    def cool(self, state):
        state.temperature *= self.alpha


class SALimit(object):
    def limit(self, state):
        """Update ``state.distance_limit`` and
        ``state.distance_limit_int``.
        """
        raise NotImplementedError()


class DefaultSALimit(SALimit):
    """Grow or shrink the distance limit to keep the fraction of accepted
    moves near ``ratio``, never going below ``minimum`` or above the
    state's ``max_distance_limit``.
    """

    __slots__ = ["ratio", "minimum"]

    def __init__(self, ratio=0.44, minimum=1):
        if not 0.0 < ratio < 1.0:
            raise ValueError("ratio must be in (0, 1)")
        if minimum < 0:
            raise ValueError("minimum must not be negative")
        self.ratio = ratio
        self.minimum = minimum

    def limit(self, state):
        limit = state.distance_limit * (1.0 - self.ratio +
                                        state.acceptance_ratio)
        limit = min(max(limit, self.minimum), state.max_distance_limit)
        state.distance_limit = limit
        state.distance_limit_int = int(round(limit))


class SADone(object):
    def done(self, state):
        """Should annealing stop?"""
        raise NotImplementedError()


class DefaultSADone(SADone):
    """Stop once warming is over and the moving average of the absolute
    change in cost per move
    (:py:attr:`~archmap.place.sa.state.SAState.deviation`) is below ``atol``.
    """

    __slots__ = ["atol"]

    def __init__(self, atol=10**-3):
        if atol < 0.0:
            raise ValueError("atol must not be negative")
        self.atol = atol

    def done(self, state):
        return not state.warming and state.deviation < self.atol
