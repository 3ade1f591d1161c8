"""High-level wrapper around the place and route functions.
"""

import logging

from archmap.place import place as default_place
from archmap.route import route as default_route

logger = logging.getLogger(__name__.split(".")[-1])


def place_and_route(m, place=default_place, place_kwargs={},
                    route=default_route, route_kwargs={}, retries=0):
    """Place and then route a map, re-placing when routing fails.

    Parameters
    ----------
    m : :py:class:`~archmap.Map`
    place : function (Default: :py:func:`archmap.place.place`)
        **Optional.** Placement algorithm to use.
    place_kwargs : dict (Default: {})
        **Optional.** Arguments for the placer.
    route : function (Default: :py:func:`archmap.route.route`)
        **Optional.** Routing algorithm to use.
    route_kwargs : dict (Default: {})
        **Optional.** Arguments for the router.
    retries : int (Default: 0)
        **Optional.** The number of times to discard the placement and place
        again from scratch when routing fails to converge. Each attempt uses
        a different seed (the given ``seed`` plus the attempt number, when a
        seed is given).

    Returns
    -------
    state : :py:class:`~archmap.place.sa.state.SAState`
        The state of the final placement.
    result : :py:class:`~archmap.route.RoutingResult`
        The result of the final routing attempt.
    """
    state = place(m, **place_kwargs)
    result = route(m, **route_kwargs)

    attempt = 0
    while not result.success and attempt < retries:
        attempt += 1
        logger.info("Routing failed; placing again (attempt %d of %d).",
                    attempt, retries)

        kwargs = dict(place_kwargs)
        kwargs.pop("supplied_state", None)
        if kwargs.get("seed") is not None:
            kwargs["seed"] = kwargs["seed"] + attempt
        m.mapping.nodes.clear()

        state = place(m, **kwargs)
        result = route(m, **route_kwargs)

    return state, result
