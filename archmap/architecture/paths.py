"""Paths naming components, ports and links within an architecture.

A path starts either at an address of a
:py:class:`~archmap.architecture.TopLevel` (an *absolute* path) or at an
unspecified component (a *relative* path, whose address is None) and
descends through named children.

Paths of different kinds never compare equal, even when their fields are
the same, so they may be safely mixed as keys of one dictionary.
"""


class _Path(object):
    """Common implementation of the path types."""

    __slots__ = ["address", "steps"]

    def __init__(self, address=None, steps=()):
        if isinstance(steps, str):
            steps = tuple(steps.split("."))
        self.address = None if address is None else tuple(address)
        self.steps = tuple(steps)

    @property
    def isrelative(self):
        return self.address is None

    def _key(self):
        return (type(self).__name__, self.address, self.steps)

    def __eq__(self, other):
        return (type(self) is type(other) and
                self.address == other.address and
                self.steps == other.steps)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self._key())

    def __lt__(self, other):
        return self._sort_key() < other._sort_key()

    def _sort_key(self):
        return (type(self).__name__,
                () if self.address is None else self.address,
                self.steps)

    def __getstate__(self):
        return (self.address, self.steps)

    def __setstate__(self, state):
        self.address, self.steps = state

    def __str__(self):
        parts = list(self.steps)
        if self.address is not None:
            parts.insert(0, "{}".format(self.address))
        return ".".join(str(p) for p in parts)

    def __repr__(self):
        return "{}({!r}, {!r})".format(type(self).__name__,
                                       self.address, self.steps)


class ComponentPath(_Path):
    """Path to a component: the component at ``address`` (or the component
    the path is relative to) followed by the instance names in ``steps``.
    """

    __slots__ = []

    @property
    def parent(self):
        if not self.steps:
            raise ValueError("{!r} has no parent".format(self))
        return ComponentPath(self.address, self.steps[:-1])

    def child(self, name):
        return ComponentPath(self.address, self.steps + (name, ))

    def port(self, name):
        return PortPath(self.address, self.steps + (name, ))

    def link(self, name):
        return LinkPath(self.address, self.steps + (name, ))

    def prefix(self, path):
        """Make a relative path absolute by prepending this path to it."""
        return type(path)(self.address, self.steps + path.steps)


class PortPath(_Path):
    """Path to a port. The final step is the name of the port and the
    preceding steps identify the component which owns it.
    """

    __slots__ = []

    @property
    def name(self):
        return self.steps[-1]

    @property
    def component(self):
        return ComponentPath(self.address, self.steps[:-1])


class LinkPath(_Path):
    """Path to a link. The final step is the name of the link; links of a
    :py:class:`~archmap.architecture.TopLevel` have no address.
    """

    __slots__ = []

    @property
    def name(self):
        return self.steps[-1]

    @property
    def component(self):
        return ComponentPath(self.address, self.steps[:-1])
