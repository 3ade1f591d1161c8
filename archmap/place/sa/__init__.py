"""Simulated annealing placement."""

from archmap.place.sa.algorithm import place

from archmap.place.sa.state import SAState

from archmap.place.sa.struct import SAStruct

from archmap.place.sa.movegen import \
    MoveGenerator, CachedMoveGenerator, SearchMoveGenerator

from archmap.place.sa.distance import SADistance, BasicDistance

from archmap.place.sa.schedules import \
    SAWarm, SACool, SALimit, SADone, \
    DefaultSAWarm, DefaultSACool, DefaultSALimit, DefaultSADone
