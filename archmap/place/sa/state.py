"""The state of an anneal: everything needed to report on it or resume it.
"""

import time


class SAState(object):
    """Counters and parameters of an anneal.

    Passing the state returned by one call to
    :py:func:`~archmap.place.sa.place` as ``supplied_state`` to another
    continues the anneal where it left off.

    Attributes
    ----------
    temperature : float
    objective : float
        The cost of the current placement.
    distance_limit : float
        The largest distance a (non-special) node may be moved.
    distance_limit_int : int
        ``distance_limit`` rounded, as given to the move generator.
    max_distance_limit : int
    recent_move_attempts, recent_successful_moves, recent_accepted_moves : int
        Counts for the current update cycle of steps taken, steps for which a
        legal move was generated and moves kept.
    recent_deviation : float
        Sum of the absolute cost changes of the moves kept this cycle.
    warming : bool
        True until the warming phase ends.
    total_moves, successful_moves, accepted_moves : int
        As the recent counters, over the whole anneal.
    moves_per_second : float
    deviation : float
        Exponential moving average, over update cycles, of the mean absolute
        change in cost per generated move.
    update_cycles : int
        The number of update cycles folded into ``deviation``.
    start_time : float
        When the state was created (seconds since the epoch).
    run_time : float
        Seconds spent annealing, over every run with this state.
    last_update_time : float
    aux_cost : float
        The auxiliary cost at the last update.
    """

    __slots__ = ["temperature", "objective", "distance_limit",
                 "distance_limit_int", "max_distance_limit",
                 "recent_move_attempts", "recent_successful_moves",
                 "recent_accepted_moves", "recent_deviation", "warming",
                 "total_moves", "successful_moves", "accepted_moves",
                 "moves_per_second", "deviation", "update_cycles",
                 "start_time", "run_time", "last_update_time", "aux_cost"]

    def __init__(self, temperature, distance_limit, objective):
        self.temperature = float(temperature)
        self.objective = float(objective)
        self.distance_limit = float(distance_limit)
        self.distance_limit_int = int(round(distance_limit))
        self.max_distance_limit = distance_limit
        self.warming = True
        self.total_moves = 0
        self.successful_moves = 0
        self.accepted_moves = 0
        self.moves_per_second = 0.0
        self.deviation = 0.0
        self.update_cycles = 0
        self.start_time = time.time()
        self.run_time = 0.0
        self.last_update_time = self.start_time
        self.aux_cost = 0.0
        self.reset_recent()

    def reset_recent(self):
        self.recent_move_attempts = 0
        self.recent_successful_moves = 0
        self.recent_accepted_moves = 0
        self.recent_deviation = 0.0

    def update_deviation(self, cycle_deviation, smoothing=0.5):
        """Fold the mean absolute change in cost of one update cycle into
        the moving average ``deviation``.

        The first cycle sets the average outright.
        """
        if self.update_cycles == 0:
            self.deviation = cycle_deviation
        else:
            self.deviation += smoothing * (cycle_deviation - self.deviation)
        self.update_cycles += 1

    @property
    def acceptance_ratio(self):
        """Fraction of the moves generated this cycle which were kept."""
        if self.recent_successful_moves == 0:
            return 0.0
        return (float(self.recent_accepted_moves) /
                self.recent_successful_moves)

    def as_dict(self):
        return {name: getattr(self, name) for name in self.__slots__}

    @classmethod
    def from_dict(cls, d):
        state = cls.__new__(cls)
        for name in cls.__slots__:
            setattr(state, name, d[name])
        return state

    def __getstate__(self):
        return self.as_dict()

    def __setstate__(self, d):
        for name in self.__slots__:
            setattr(self, name, d[name])

    def __repr__(self):
        return ("<SAState T={:.4g} objective={:.4g} limit={:.3g} "
                "{} moves{}>".format(self.temperature, self.objective,
                                     self.distance_limit, self.total_moves,
                                     " (warming)" if self.warming else ""))
