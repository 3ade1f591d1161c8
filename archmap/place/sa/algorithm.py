"""The main annealing algorithm loop.

The anneal has two phases. While *warming*, the temperature is raised until
most proposed moves are accepted. While *annealing*, the temperature falls
and the distance limit adapts to keep the acceptance ratio near its target,
until the done strategy declares the placement settled.

Moves are made in update cycles: a cycle ends once ``move_attempts`` legal
moves have been generated, at which point the warming, cooling and limiting
strategies adjust the state.
"""

import logging

# This is renamed to ensure that all function correctly use the random number
# generator passed into them.
import random as default_random

import time

from collections import deque

import warnings

from archmap.exceptions import InsufficientResourceError
from archmap.place.sa.methods import assign, map_cost, aux_cost, step
from archmap.place.sa.movegen import CachedMoveGenerator
from archmap.place.sa.schedules import \
    DefaultSAWarm, DefaultSACool, DefaultSALimit, DefaultSADone
from archmap.place.sa.state import SAState
from archmap.place.sa.struct import SAStruct


"""
This logger is used by the annealing algorithm to indicate progress.
"""
logger = logging.getLogger(__name__.split(".")[-1])


"""The number of steps which may fail to generate a legal move in an update
cycle, as a multiple of the number of moves the cycle needs.
"""
FAILED_MOVE_FACTOR = 10


def _recorded_placement(sa_struct, m):
    """For internal use. Place every node where the map already records it,
    if that placement is complete and legal.

    Returns
    -------
    bool
        True if the recorded placement was used.
    """
    locations = []
    for name, node in zip(sa_struct.node_names, sa_struct.nodes):
        path = m.mapping.nodes.get(name)
        if path is None:
            return False
        try:
            location = sa_struct.location_of(path)
        except ValueError:
            return False
        if not sa_struct.maptable.isvalid(node.cls, location):
            return False
        locations.append(location)

    if len(set(locations)) != len(locations):
        return False

    for idx, location in enumerate(locations):
        assign(sa_struct, idx, location)
    return True


def _initial_placement(sa_struct, random):
    """For internal use. Produces a random initial placement.

    Nodes of the classes with the fewest legal locations are placed first,
    each in a random free location legal for its class. When no legal
    location is free for a node, already placed nodes are shuffled along an
    augmenting path (as in bipartite matching) to make room for it.

    Raises
    ------
    InsufficientResourceError
        If no assignment of every node to its own legal location exists.
    """
    maptable = sa_struct.maptable
    nodes = sa_struct.nodes
    order = list(range(len(nodes)))
    random.shuffle(order)
    order.sort(key=lambda i: len(maptable.getlocations(nodes[i].cls)))

    # Candidate locations of each node, in a random order
    candidates = {}
    for idx in order:
        locations = list(maptable.getlocations(nodes[idx].cls))
        random.shuffle(locations)
        candidates[idx] = locations

    placed = {}
    owner = {}
    for idx in order:
        for location in candidates[idx]:
            if location not in owner:
                placed[idx] = location
                owner[location] = idx
                break
        else:
            if not _augment(idx, candidates, placed, owner):
                raise InsufficientResourceError(
                    "Ran out of locations while placing task {!r}.".format(
                        sa_struct.node_names[idx]))

    for idx in order:
        assign(sa_struct, idx, placed[idx])


def _augment(idx, candidates, placed, owner):
    """For internal use. Find room for node ``idx`` by moving placed nodes.

    Searches breadth-first for a chain of nodes, starting with ``idx``, each
    of which may move into the location of the next, ending in a free
    location. If one is found every node in the chain is moved along it.

    Returns
    -------
    bool
        False if there is no such chain.
    """
    parent = {}
    queue = deque([idx])
    while queue:
        node = queue.popleft()
        for location in candidates[node]:
            if location in parent:
                continue
            parent[location] = node
            if location in owner:
                queue.append(owner[location])
                continue

            # Shift every node in the chain one step along
            while True:
                node = parent[location]
                previous = placed.get(node)
                placed[node] = location
                owner[location] = node
                if node == idx:
                    return True
                location = previous
    return False


def place(m, seed=None, random=None, move_attempts=20000,
          initial_temperature=1.0, supplied_state=None, movegen=None,
          warmer=None, cooler=None, limiter=None, doner=None, distance=None,
          enable_flattness=True, enable_address=False, aux=None,
          on_update=None, timeout=None):
    """Place the tasks of a map using simulated annealing.

    If every task already has a legal location recorded in the map, the
    anneal starts from that placement; otherwise from a random one. The final
    placement is recorded in ``m.mapping.nodes``.

    Parameters
    ----------
    m : :py:class:`~archmap.Map`
    seed : int or None
        Seed for a new random number generator (ignored if ``random`` is
        given).
    random : :py:class:`random.Random` or None
        The random number generator to use.
    move_attempts : int
        The number of legal moves generated per update cycle. If 0, the
        initial placement is recorded without annealing.
    initial_temperature : float
        The starting temperature (raised during warming as necessary).
    supplied_state : :py:class:`~archmap.place.sa.state.SAState` or None
        A state returned by an earlier call, to continue that anneal.
    movegen : :py:class:`~archmap.place.sa.movegen.MoveGenerator` or None
        Defaults to a
        :py:class:`~archmap.place.sa.movegen.CachedMoveGenerator`.
    warmer, cooler, limiter, doner
        The schedule strategies (see :py:mod:`archmap.place.sa.schedules`);
        defaults are constructed with their default parameters.
    distance : :py:class:`~archmap.place.sa.distance.SADistance` or None
    enable_flattness, enable_address, aux
        See :py:class:`~archmap.place.sa.struct.SAStruct`.
    on_update : callable(state) or None
        Called at the end of every update cycle. If it returns False the
        anneal stops.
    timeout : float or None
        Stop the anneal (at the end of an update cycle) after this many
        seconds.

    Returns
    -------
    :py:class:`~archmap.place.sa.state.SAState`

    Raises
    ------
    NoLegalLocationError
    InsufficientResourceError
    """
    if move_attempts < 0:
        raise ValueError("move_attempts must not be negative")
    if random is None:
        random = default_random.Random(seed)
    if movegen is None:
        movegen = CachedMoveGenerator()
    warmer = DefaultSAWarm() if warmer is None else warmer
    cooler = DefaultSACool() if cooler is None else cooler
    limiter = DefaultSALimit() if limiter is None else limiter
    doner = DefaultSADone() if doner is None else doner

    struct_start = time.time()
    sa_struct = SAStruct(m, distance=distance,
                         enable_flattness=enable_flattness,
                         enable_address=enable_address, aux=aux)
    m.metadata["placement_struct_time"] = time.time() - struct_start
    m.metadata["placement_struct_bytes"] = sa_struct.nbytes

    place_start = time.time()
    if not _recorded_placement(sa_struct, m):
        _initial_placement(sa_struct, random)

    max_distance_limit = movegen.distancelimit(sa_struct)
    objective = map_cost(sa_struct)
    if supplied_state is None:
        state = SAState(initial_temperature, max_distance_limit, objective)
    else:
        state = supplied_state
        state.objective = objective
        state.reset_recent()
    state.max_distance_limit = max_distance_limit

    # Special cases where no placement effort is required:
    # * No effort is to be made
    # * There are no tasks
    # * No task can ever move
    # * Nothing contributes to the objective
    maptable = sa_struct.maptable
    trivial = (move_attempts == 0 or
               len(sa_struct.nodes) == 0 or
               all(len(maptable.getlocations(cls)) == 1
                   for cls in range(1, sa_struct.num_classes() + 1)) or
               (len(sa_struct.channels) == 0 and not enable_address and
                not m.ruleset.overrides("aux_cost")))
    if trivial:
        logger.info("Placement has trivial solution. SA not used.")
    else:
        _anneal(sa_struct, state, random, move_attempts, movegen, warmer,
                cooler, limiter, doner, on_update, timeout)

    sa_struct.record(m)
    state.objective = map_cost(sa_struct)
    m.metadata["placement_time"] = time.time() - place_start
    m.metadata["placement_objective"] = state.objective
    return state


def _anneal(sa_struct, state, random, move_attempts, movegen, warmer,
            cooler, limiter, doner, on_update, timeout):
    """For internal use. Run update cycles until done."""
    movegen.initialize(sa_struct, state.distance_limit_int)

    logger.info("SA move generator: %s", type(movegen).__name__)
    logger.info("Initial placement temperature: %0.3f, "
                "distance limit: %d, objective: %0.1f",
                state.temperature, state.distance_limit_int, state.objective)

    max_attempts = move_attempts * (FAILED_MOVE_FACTOR + 1)
    nonnegative = not any(sa_struct.ruleset.overrides(name) for name in
                          ("channel_cost", "address_cost", "aux_cost"))
    start_time = time.time()
    state.last_update_time = start_time

    while True:
        temperature = state.temperature
        while (state.recent_successful_moves < move_attempts and
               state.recent_move_attempts < max_attempts):
            state.recent_move_attempts += 1
            generated, accepted, delta = step(sa_struct, movegen,
                                              temperature, random)
            if generated:
                state.recent_successful_moves += 1
                if accepted:
                    state.recent_accepted_moves += 1
                    state.recent_deviation += abs(delta)
                    state.objective += delta

        if state.recent_successful_moves == 0:
            warnings.warn("No legal moves could be generated in an entire "
                          "update cycle; annealing stopped.")
            break

        # Update the statistics for this cycle
        now = time.time()
        state.total_moves += state.recent_move_attempts
        state.successful_moves += state.recent_successful_moves
        state.accepted_moves += state.recent_accepted_moves
        state.update_deviation(state.recent_deviation /
                               state.recent_successful_moves)
        state.run_time += now - state.last_update_time
        if now > state.last_update_time:
            state.moves_per_second = (state.recent_move_attempts /
                                      (now - state.last_update_time))
        state.last_update_time = now
        state.aux_cost = aux_cost(sa_struct)

        # Adjust the schedule
        if state.warming:
            warmer.warm(state)
        else:
            cooler.cool(state)
            limiter.limit(state)
            movegen.update(sa_struct, state.distance_limit_int)

        logger.debug("Moves: %d, "
                     "Objective: %0.1f, "
                     "Kept: %0.1f%%, "
                     "Temp: %0.3g, "
                     "Dist: %d%s",
                     state.total_moves, state.objective,
                     state.acceptance_ratio * 100, state.temperature,
                     state.distance_limit_int,
                     " (warming)" if state.warming else "")

        # Call the user callback before the next cycle, terminating if
        # requested.
        if on_update is not None and on_update(state) is False:
            break

        if timeout is not None and now - start_time >= timeout:
            logger.info("Placement timed out after %0.1f seconds.",
                        now - start_time)
            break

        # Special case: Can't do better than 0 cost!
        if state.objective == 0.0 and nonnegative:
            break

        if not state.warming and doner.done(state):
            break

        state.reset_recent()

    logger.info("Anneal terminated after %d moves.", state.total_moves)
