"""The hierarchical architecture model.

An architecture is a :py:class:`TopLevel` holding one :py:class:`Component`
per address. Components own named :py:class:`Port` objects, named child
components and named :py:class:`Link` objects joining ports of the component
and of its children. Links at the top level join ports of the components at
different addresses.

Architectures are built with the functions in
:py:mod:`archmap.architecture.constructors` and are treated as read-only by
the placement and routing engines.
"""

import operator

from enum import Enum

from archmap.architecture.paths import ComponentPath, PortPath, LinkPath


class Direction(Enum):
    """The direction in which a port is used by a link."""
    source = "source"
    sink = "sink"


class PortClass(Enum):
    """The class of a port as seen from outside its component."""
    input = "input"
    output = "output"

    @property
    def opposite(self):
        return PortClass.output if self is PortClass.input else PortClass.input


class Port(object):
    """A named connection point of a component.

    Parameters
    ----------
    name : str
    cls : :py:class:`PortClass` or "input" or "output"
    metadata : dict
    """

    __slots__ = ["name", "cls", "metadata"]

    def __init__(self, name, cls, metadata=None):
        self.name = name
        self.cls = PortClass(cls)
        self.metadata = {} if metadata is None else metadata

    def checkclass(self, direction):
        """Can this port be used as the given end of a link?

        Output ports may only drive links and input ports may only be driven
        by them.
        """
        if direction is Direction.source:
            return self.cls is PortClass.output
        else:
            return self.cls is PortClass.input

    def invert(self):
        """Get a copy of this port with the opposite class.

        A component sees its own ports from the inside where an input port
        drives signals into the component.
        """
        return Port(self.name, self.cls.opposite, dict(self.metadata))

    def __repr__(self):
        return "<Port {!r} ({})>".format(self.name, self.cls.value)


class Link(object):
    """A directed connection from a set of source ports to a set of
    destination ports.

    Attributes
    ----------
    sources, dests : tuple of :py:class:`~archmap.architecture.PortPath`
        Relative to the component owning the link, or absolute for links of a
        :py:class:`TopLevel`.
    """

    __slots__ = ["name", "sources", "dests", "metadata"]

    def __init__(self, name, sources, dests, metadata=None):
        self.name = name
        self.sources = tuple(sources)
        self.dests = tuple(dests)
        self.metadata = {} if metadata is None else metadata

    def __repr__(self):
        return "<Link {!r}: {} -> {}>".format(
            self.name,
            ", ".join(map(str, self.sources)),
            ", ".join(map(str, self.dests)))


def _resolve(component, path):
    """Resolve a path relative to a component. Raises KeyError when any step
    of the path does not exist.
    """
    steps = path.steps
    if isinstance(path, ComponentPath):
        for step in steps:
            component = component.children[step]
        return component

    if not steps:
        raise KeyError(path)
    for step in steps[:-1]:
        component = component.children[step]
    if isinstance(path, PortPath):
        return component.ports[steps[-1]]
    elif isinstance(path, LinkPath):
        return component.links[steps[-1]]
    else:
        raise TypeError("Cannot resolve {!r}".format(path))


class Component(object):
    """A component of the architecture.

    Attributes
    ----------
    name : str
        The name of the component type (instance names are the keys of the
        parent's ``children``).
    primitive : str
        Empty for ordinary components. "mux" marks a routing multiplexer
        whose inputs may be switched to any of its outputs.
    children : {name: :py:class:`Component`, ...}
    ports : {name: :py:class:`Port`, ...}
    links : {name: :py:class:`Link`, ...}
    portlink : {:py:class:`~archmap.architecture.PortPath`: link name, ...}
        The link attached to each port visible from this component (its own
        ports and the ports of its children).
    metadata : dict
    """

    __slots__ = ["name", "primitive", "children", "ports", "links",
                 "portlink", "metadata"]

    def __init__(self, name, primitive="", metadata=None):
        self.name = name
        self.primitive = primitive
        self.children = {}
        self.ports = {}
        self.links = {}
        self.portlink = {}
        self.metadata = {} if metadata is None else metadata

    @property
    def isleaf(self):
        return not self.children

    @property
    def ismux(self):
        return self.primitive == "mux"

    def __getitem__(self, path):
        if isinstance(path, str):
            return self.children[path]
        return _resolve(self, path)

    def __contains__(self, path):
        try:
            self[path]
            return True
        except KeyError:
            return False

    def walk_children(self):
        """Generate relative paths to this component (the empty path) and to
        all of its descendants, depth first.
        """
        stack = [ComponentPath(None, ())]
        while stack:
            path = stack.pop()
            yield path
            component = self[path]
            for name in reversed(list(component.children)):
                stack.append(path.child(name))

    def visible_ports(self):
        """List the relative paths of this component's own ports and of the
        ports of its immediate children.
        """
        paths = [PortPath(None, (name, )) for name in self.ports]
        for child_name, child in self.children.items():
            paths.extend(PortPath(None, (child_name, name))
                         for name in child.ports)
        return paths

    def search_metadata(self, key, value, f=operator.eq):
        """Does this component have a metadata entry ``key`` for which
        ``f(entry, value)`` holds?
        """
        return key in self.metadata and f(self.metadata[key], value)

    def find_children(self, key, value, f=operator.eq):
        """Relative paths of all descendants (including this component)
        whose metadata matches; see :py:meth:`.search_metadata`.
        """
        return [path for path in self.walk_children()
                if self[path].search_metadata(key, value, f)]

    def unlinked_ports(self):
        """Relative paths of visible ports not attached to a link of this
        component.
        """
        return [path for path in self.visible_ports()
                if path not in self.portlink]

    def __repr__(self):
        return "<Component {!r} with {} children, {} ports, {} links>".format(
            self.name, len(self.children), len(self.ports), len(self.links))


class TopLevel(object):
    """The root of an architecture: components placed at integer addresses
    plus the links between them.

    Parameters
    ----------
    name : str
    dimensions : int
        The length of every address tuple.

    Attributes
    ----------
    children : {address: :py:class:`Component`, ...}
    links : {name: :py:class:`Link`, ...}
        Sources and destinations are absolute port paths.
    portlink : {:py:class:`~archmap.architecture.PortPath`: link name, ...}
    metadata : dict
    """

    __slots__ = ["name", "dimensions", "children", "links", "portlink",
                 "metadata"]

    def __init__(self, name, dimensions=2, metadata=None):
        self.name = name
        self.dimensions = dimensions
        self.children = {}
        self.links = {}
        self.portlink = {}
        self.metadata = {} if metadata is None else metadata

    def addresses(self):
        """List every address which holds a component, in insertion order.
        """
        return list(self.children)

    def isaddress(self, address):
        return tuple(address) in self.children

    @staticmethod
    def hasaddress(path):
        return path.address is not None

    @property
    def shape(self):
        """The smallest grid shape containing every address."""
        if not self.children:
            return (0, ) * self.dimensions
        return tuple(max(address[d] for address in self.children) + 1
                     for d in range(self.dimensions))

    def __getitem__(self, path):
        if isinstance(path, tuple):
            return self.children[path]
        if path.address is None:
            if isinstance(path, LinkPath) and len(path.steps) == 1:
                return self.links[path.name]
            raise KeyError(path)
        return _resolve(self.children[path.address], path)

    def __contains__(self, path):
        try:
            self[path]
            return True
        except KeyError:
            return False

    def walk_children(self, address=None):
        """Generate absolute paths of every component at ``address``, or at
        every address when it is None.
        """
        addresses = self.children if address is None else [tuple(address)]
        for address in addresses:
            for path in self.children[address].walk_children():
                yield ComponentPath(address, path.steps)

    def mappables(self, ruleset, address):
        """List the paths of the components at an address that tasks may be
        mapped to, in a fixed order. The position of a path in this list is
        its slot number.

        Only leaf components which are not routing primitives and which the
        rule set declares mappable qualify.
        """
        component = self.children[tuple(address)]
        paths = []
        for path in component.walk_children():
            child = component[path]
            if (child.isleaf and not child.ismux and
                    ruleset.ismappable(child)):
                paths.append(ComponentPath(address, path.steps))
        return paths

    def link_endpoints(self, path):
        """Get the absolute source and destination port paths of a link.
        """
        link = self[path]
        if path.address is None:
            return link.sources, link.dests
        owner = path.component
        return (tuple(owner.prefix(p) for p in link.sources),
                tuple(owner.prefix(p) for p in link.dests))

    def port_links(self, path):
        """List the paths of every link attached to a port (at most one from
        inside its component and one from outside).
        """
        owner = path.component
        links = []

        # From inside the owning component
        component = self[owner]
        name = component.portlink.get(PortPath(None, (path.name, )))
        if name is not None:
            links.append(owner.link(name))

        # From the parent, or from the top level
        if owner.steps:
            parent = owner.parent
            name = self[parent].portlink.get(
                PortPath(None, (owner.steps[-1], path.name)))
            if name is not None:
                links.append(parent.link(name))
        else:
            name = self.portlink.get(path)
            if name is not None:
                links.append(LinkPath(None, (name, )))
        return links

    def connected_components(self):
        """Get the addresses directly reachable from each address through a
        link of the top level.

        Returns
        -------
        {address: set([address, ...]), ...}
        """
        connected = {address: set() for address in self.children}
        for link in self.links.values():
            for source in link.sources:
                for dest in link.dests:
                    connected[source.address].add(dest.address)
        return connected

    def isconnected(self, a, b):
        """Can a signal pass directly from item ``a`` to item ``b``?

        Ports drive the links they are a source of and links drive their
        destination ports. Ports are connected to each other when a single
        link joins them. A routing primitive is driven by its input ports and
        drives its output ports.
        """
        if isinstance(a, PortPath) and isinstance(b, LinkPath):
            return a in self.link_endpoints(b)[0]
        elif isinstance(a, LinkPath) and isinstance(b, PortPath):
            return b in self.link_endpoints(a)[1]
        elif isinstance(a, PortPath) and isinstance(b, PortPath):
            return any(b in self.link_endpoints(link)[1]
                       for link in self.port_links(a)
                       if a in self.link_endpoints(link)[0])
        elif isinstance(a, PortPath) and isinstance(b, ComponentPath):
            return a.component == b and self[a].cls is PortClass.input
        elif isinstance(a, ComponentPath) and isinstance(b, PortPath):
            return b.component == a and self[b].cls is PortClass.output
        return False

    def unlinked_ports(self):
        """Absolute paths of every port not attached to any link."""
        unlinked = []
        for path in self.walk_children():
            for name in self[path].ports:
                port = path.port(name)
                if not self.port_links(port):
                    unlinked.append(port)
        return unlinked

    def __repr__(self):
        return "<TopLevel {!r} with {} addresses, {} links>".format(
            self.name, len(self.children), len(self.links))
