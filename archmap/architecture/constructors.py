"""Functions for building architecture models.

Example: a tile holding a processor whose output is switched to one of two
neighbours::

    proc = Component("proc")
    add_port(proc, "in", "input")
    add_port(proc, "out", "output")

    tile = Component("tile")
    add_child(tile, proc, "proc")
    add_child(tile, build_mux(1, 2), "mux")
    add_port(tile, "in", "input")
    add_port(tile, "out", "output", number=2)
    add_link(tile, "in", "proc.in")
    add_link(tile, "proc.out", "mux.in[0]")
    add_link(tile, "mux.out[0]", "out[0]")
    add_link(tile, "mux.out[1]", "out[1]")
"""

import copy

from collections import namedtuple

from archmap.architecture.model import \
    Component, TopLevel, Port, PortClass, Link, Direction

from archmap.architecture.paths import PortPath

from archmap.exceptions import ArchitectureError


def add_port(component, name, cls, number=None, metadata=None):
    """Add one port, or a vector of ports, to a component.

    Parameters
    ----------
    component : :py:class:`~archmap.architecture.Component`
    name : str
    cls : :py:class:`~archmap.architecture.PortClass` or "input" or "output"
    number : int or None
        If given, ports ``name[0]`` to ``name[number - 1]`` are created.
    metadata : dict or [dict, ...]
        When ``number`` is given this may be a list with one entry per port.

    Raises
    ------
    ArchitectureError
        If a port of the same name already exists.
    """
    if number is None:
        names = [name]
        metadatas = [metadata]
    else:
        names = ["{}[{}]".format(name, i) for i in range(number)]
        if isinstance(metadata, list):
            if len(metadata) != number:
                raise ArchitectureError(
                    "{} metadata entries given for {} ports".format(
                        len(metadata), number))
            metadatas = metadata
        else:
            metadatas = [copy.deepcopy(metadata) for _ in names]

    for port_name, port_metadata in zip(names, metadatas):
        if port_name in component.ports:
            raise ArchitectureError(
                "Component {!r} already has a port named {!r}".format(
                    component.name, port_name))
        component.ports[port_name] = Port(port_name, PortClass(cls),
                                          port_metadata)


def add_child(parent, child, name, number=None):
    """Add a deep copy of ``child`` to ``parent``.

    Parameters
    ----------
    parent : :py:class:`~archmap.architecture.Component` or \
            :py:class:`~archmap.architecture.TopLevel`
    child : :py:class:`~archmap.architecture.Component`
    name : str or (int, ...)
        The instance name, or the address when ``parent`` is a
        :py:class:`~archmap.architecture.TopLevel`.
    number : int or None
        If given (and ``parent`` is not a top level), ``number`` copies
        named ``name[0]`` onwards are added.

    Raises
    ------
    ArchitectureError
        If the name (or address) is already in use, or an address is
        malformed.
    """
    if isinstance(parent, TopLevel):
        address = tuple(name)
        if len(address) != parent.dimensions:
            raise ArchitectureError(
                "Address {} does not have {} dimensions".format(
                    address, parent.dimensions))
        if any(not isinstance(a, int) or a < 0 for a in address):
            raise ArchitectureError(
                "Address {} must consist of non-negative integers".format(
                    address))
        if address in parent.children:
            raise ArchitectureError(
                "Address {} already holds a component".format(address))
        parent.children[address] = copy.deepcopy(child)
        return

    if number is None:
        names = [name]
    else:
        names = ["{}[{}]".format(name, i) for i in range(number)]
    for child_name in names:
        if child_name in parent.children:
            raise ArchitectureError(
                "Component {!r} already has a child named {!r}".format(
                    parent.name, child_name))
        parent.children[child_name] = copy.deepcopy(child)


def _as_port_paths(ports):
    if isinstance(ports, (str, PortPath)):
        ports = [ports]
    return [port if isinstance(port, PortPath) else PortPath(None, port)
            for port in ports]


def add_link(component, sources, dests, metadata=None, linkname=None):
    """Add a link from source ports to destination ports.

    Parameters
    ----------
    component : :py:class:`~archmap.architecture.Component` or \
            :py:class:`~archmap.architecture.TopLevel`
        The component owning the link.
    sources, dests : str, :py:class:`~archmap.architecture.PortPath` or \
            a list of them
        Ports of a component are named "port" (its own) or "child.port".
        Links of a top level take absolute port paths.
    metadata : dict
    linkname : str or None
        A name is generated when not given.

    Returns
    -------
    str
        The name of the new link.

    Raises
    ------
    ArchitectureError
        If a port does not exist, has the wrong class for its end of the
        link, or is already attached to a link of this component, or the
        link name is already taken.
    """
    sources = _as_port_paths(sources)
    dests = _as_port_paths(dests)
    toplevel = isinstance(component, TopLevel)

    for paths, direction in ((sources, Direction.source),
                             (dests, Direction.sink)):
        for path in paths:
            if toplevel and path.address is None:
                raise ArchitectureError(
                    "Top level links need absolute port paths, "
                    "got {}".format(path))
            if not toplevel and path.address is not None:
                raise ArchitectureError(
                    "Component links need relative port paths, "
                    "got {}".format(path))
            if toplevel and len(path.steps) != 1:
                raise ArchitectureError(
                    "Top level links join ports of the components at "
                    "addresses, got {}".format(path))
            if not toplevel and len(path.steps) not in (1, 2):
                raise ArchitectureError(
                    "Port {} is not visible from {!r}".format(
                        path, component.name))
            try:
                port = component[path]
            except KeyError:
                raise ArchitectureError("No port {} in {!r}".format(
                    path, component.name))

            # A component's own ports are seen from the inside.
            if not toplevel and len(path.steps) == 1:
                port = port.invert()
            if not port.checkclass(direction):
                raise ArchitectureError(
                    "Port {} ({}) cannot be a link {}".format(
                        path, component[path].cls.value, direction.value))
            if path in component.portlink:
                raise ArchitectureError(
                    "Port {} is already attached to link {!r}".format(
                        path, component.portlink[path]))

    if len(set(sources + dests)) != len(sources) + len(dests):
        raise ArchitectureError("Ports may only appear once in a link")

    if linkname is None:
        i = len(component.links)
        while "link[{}]".format(i) in component.links:
            i += 1
        linkname = "link[{}]".format(i)
    elif linkname in component.links:
        raise ArchitectureError("Link name {!r} is already in use".format(
            linkname))

    component.links[linkname] = Link(linkname, sources, dests, metadata)
    for path in sources + dests:
        component.portlink[path] = linkname
    return linkname


def build_mux(inputs, outputs, metadata=None):
    """Build a routing multiplexer with ports ``in[i]`` and ``out[j]``.

    Any input may be switched to any output; the multiplexer is a single
    routing resource.
    """
    name = "mux_{}_{}".format(inputs, outputs)
    mux = Component(name, primitive="mux",
                    metadata=copy.deepcopy(metadata))
    add_port(mux, "in", PortClass.input, number=inputs, metadata=metadata)
    add_port(mux, "out", PortClass.output, number=outputs, metadata=metadata)
    return mux


Offset = namedtuple("Offset", "offset source_port dest_port")
"""A displacement between addresses together with the port names to join.

Attributes
----------
offset : (int, ...)
    Added to a source address to get the destination address.
source_port, dest_port : str
    Names of ports of the components at the two addresses.
"""


class ConnectionRule(object):
    """A pattern of links to create between addresses of a top level.

    Parameters
    ----------
    offsets : [:py:class:`.Offset`, ...]
    address_filter : callable(address) -> bool
        Which source addresses the rule applies to.
    source_filter, dest_filter : callable(component) -> bool
        Which source and destination components the rule applies to.
    """

    __slots__ = ["offsets", "address_filter", "source_filter", "dest_filter"]

    def __init__(self, offsets, address_filter=lambda address: True,
                 source_filter=lambda component: True,
                 dest_filter=lambda component: True):
        self.offsets = list(offsets)
        self.address_filter = address_filter
        self.source_filter = source_filter
        self.dest_filter = dest_filter


def connection_rule(toplevel, rule, metadata=None):
    """Apply a :py:class:`.ConnectionRule` to a top level.

    A link is only made where both ports exist and neither is already linked
    at the top level.

    Returns
    -------
    int
        The number of links created.
    """
    count = 0
    for address in toplevel.addresses():
        if not rule.address_filter(address):
            continue
        if not rule.source_filter(toplevel[address]):
            continue
        for offset in rule.offsets:
            dest = tuple(a + o for a, o in zip(address, offset.offset))
            if not toplevel.isaddress(dest):
                continue
            if not rule.dest_filter(toplevel[dest]):
                continue
            source_port = PortPath(address, (offset.source_port, ))
            dest_port = PortPath(dest, (offset.dest_port, ))
            if source_port not in toplevel or dest_port not in toplevel:
                continue
            if (source_port in toplevel.portlink or
                    dest_port in toplevel.portlink):
                continue
            add_link(toplevel, source_port, dest_port,
                     metadata=copy.deepcopy(metadata))
            count += 1
    return count
