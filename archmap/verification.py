"""Checks that the mapping recorded in a map is legal.

Every check takes a :py:class:`~archmap.Map`, logs each problem it finds at
ERROR level and returns True if the map passed. None of them modify the map.
"""

import logging

from collections import Counter

from archmap.architecture import PortClass, PortPath

logger = logging.getLogger(__name__.split(".")[-1])


def _report(name, passed, quiet):
    if passed:
        if quiet:
            logger.debug("%s check passed.", name)
        else:
            logger.info("%s check passed.", name)
    return passed


def _routed_edges(m):
    """Generate (index, edge, route) for every edge which needs routing."""
    for i, edge in enumerate(m.taskgraph.edges):
        if m.ruleset.needsrouting(edge):
            yield i, edge, m.mapping.edges[i]


def check_placement(m, quiet=True):
    """Is every task placed on its own mappable component which the rule set
    allows it to use?
    """
    ruleset = m.ruleset
    toplevel = m.toplevel
    passed = True
    used = {}
    for node in m.taskgraph.getnodes():
        path = m.mapping.nodes.get(node.name)
        if path is None:
            logger.error("Task %r is not placed.", node.name)
            passed = False
            continue
        if path.address is None or path not in toplevel:
            logger.error("Task %r is placed on %s which does not exist.",
                         node.name, path)
            passed = False
            continue
        if path not in toplevel.mappables(ruleset, path.address):
            logger.error("Task %r is placed on %s which is not mappable.",
                         node.name, path)
            passed = False
        elif not ruleset.canmap(node, toplevel[path]):
            logger.error("Task %r may not be placed on %s.", node.name, path)
            passed = False
        if path in used:
            logger.error("Tasks %r and %r are both placed on %s.",
                         used[path], node.name, path)
            passed = False
        used[path] = node.name
    return _report("Placement", passed, quiet)


def _check_ends(m, i, edge, vertices, names, cls, isport):
    passed = True
    paths = [m.mapping.nodes.get(name) for name in names]
    for vertex in vertices:
        if not isinstance(vertex, PortPath) or vertex.component not in paths:
            logger.error("Route of edge %d ends at %s which is not a port "
                         "of one of its tasks.", i, vertex)
            passed = False
            continue
        port = m.toplevel[vertex]
        if port.cls is not cls or not isport(port, edge):
            logger.error("Route of edge %d may not use port %s.", i, vertex)
            passed = False
    for name, path in zip(names, paths):
        if not any(isinstance(v, PortPath) and v.component == path
                   for v in vertices):
            logger.error("Route of edge %d does not reach task %r.", i, name)
            passed = False
    return passed


def check_ports(m, quiet=True):
    """Does every route start at legal output ports of its source tasks and
    end at legal input ports of its sink tasks?
    """
    passed = True
    for i, edge, route in _routed_edges(m):
        passed &= _check_ends(m, i, edge, route.source_vertices(),
                              edge.sources, PortClass.output,
                              m.ruleset.is_source_port)
        passed &= _check_ends(m, i, edge, route.sink_vertices(),
                              edge.sinks, PortClass.input,
                              m.ruleset.is_sink_port)
    return _report("Port", passed, quiet)


def check_capacity(m, quiet=True):
    """Is every routing resource used by no more routes than its capacity?
    """
    usage = Counter()
    for _, _, route in _routed_edges(m):
        usage.update(route)

    passed = True
    for path, count in usage.items():
        if path not in m.toplevel:
            continue
        capacity = m.ruleset.annotate(m.toplevel[path]).capacity
        if count > capacity:
            logger.error("%s is used by %d routes but has capacity %d.",
                         path, count, capacity)
            passed = False
    return _report("Capacity", passed, quiet)


def check_architecture_connectivity(m, quiet=True):
    """Is every step of every route a real connection in the architecture?
    """
    passed = True
    toplevel = m.toplevel
    for i, _, route in _routed_edges(m):
        for vertex in route:
            if vertex not in toplevel:
                logger.error("Route of edge %d uses %s which does not exist.",
                             i, vertex)
                passed = False
        if not passed:
            continue
        for a, b in route.edges():
            if not toplevel.isconnected(a, b):
                logger.error("Route of edge %d steps from %s to %s which "
                             "are not connected.", i, a, b)
                passed = False
    return _report("Architecture connectivity", passed, quiet)


def check_routing_connectivity(m, quiet=True):
    """Is every route a connected graph in which every start port reaches
    every end port?
    """
    passed = True
    for i, _, route in _routed_edges(m):
        if not route:
            logger.error("Edge %d is not routed.", i)
            passed = False
            continue
        if not route.is_weakly_connected():
            logger.error("Route of edge %d is not connected.", i)
            passed = False
            continue
        for source in route.source_vertices():
            reachable = route.reachable(source)
            for sink in route.sink_vertices():
                if sink not in reachable:
                    logger.error("Route of edge %d has no path from %s to "
                                 "%s.", i, source, sink)
                    passed = False
    return _report("Routing connectivity", passed, quiet)


def check_architecture_resources(m, quiet=True):
    """Does every route use only resources the rule set allows it to?"""
    passed = True
    toplevel = m.toplevel
    for i, edge, route in _routed_edges(m):
        for vertex in route:
            if vertex in toplevel and not m.ruleset.canuse(toplevel[vertex],
                                                           edge):
                logger.error("Route of edge %d may not use %s.", i, vertex)
                passed = False
    return _report("Architecture resource", passed, quiet)


def check_routing(m, quiet=True):
    """Run every check.

    Parameters
    ----------
    m : :py:class:`~archmap.Map`
    quiet : bool
        If False, passing checks are logged at INFO level rather than DEBUG.

    Returns
    -------
    bool
        True if every check passed.
    """
    results = [check(m, quiet) for check in (check_placement,
                                             check_ports,
                                             check_capacity,
                                             check_architecture_connectivity,
                                             check_routing_connectivity,
                                             check_architecture_resources)]
    return all(results)
