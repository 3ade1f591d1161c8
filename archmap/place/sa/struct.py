"""The placement struct: a flat, index-based view of a map for the annealer.

Tasks become :py:class:`.BasicNode` objects and taskgraph edges become
channels referring to nodes by index. The struct records the location of
every node and, in an occupancy grid, the node in every location.
"""

from operator import attrgetter

import numpy as np

import sentinel

from archmap.exceptions import NoLegalLocationError
from archmap.place.sa.distance import BasicDistance
from archmap.place.sa.maptable import FlatMapTable, MapTable, Location


Unplaced = sentinel.create("Unplaced")
"""The location of a node which has not yet been placed."""


class BasicNode(object):
    """A task as seen by the annealer.

    Attributes
    ----------
    location : tuple or :py:class:`~archmap.place.sa.maptable.Location`
        An address for flat architectures, otherwise a Location.
    address : tuple
        The address part of ``location``.
    cls : int
        The equivalence class, negated for special tasks.
    outchannels, inchannels : [int, ...]
        Indices of the channels the node is a source (sink) of.
    channels : [int, ...]
        Every channel the node belongs to, without repetition.
    """

    __slots__ = ["location", "address", "cls", "outchannels", "inchannels",
                 "channels"]

    def __init__(self, cls, outchannels=(), inchannels=()):
        self.location = Unplaced
        self.address = Unplaced
        self.cls = cls
        self.outchannels = list(outchannels)
        self.inchannels = list(inchannels)
        self.channels = list(dict.fromkeys(self.outchannels +
                                           self.inchannels))

    def __repr__(self):
        return "<BasicNode class {} at {}>".format(self.cls, self.location)


class SAChannel(object):
    """A placement channel: sources and sinks are node indices."""
    __slots__ = []


class TwoChannel(SAChannel):
    """A channel with exactly one source and one sink."""
    __slots__ = []

    @property
    def sources(self):
        return (self.source, )

    @property
    def sinks(self):
        return (self.sink, )


class BasicChannel(TwoChannel):
    __slots__ = ["source", "sink"]

    def __init__(self, source, sink):
        self.source = source
        self.sink = sink


class MultiChannel(SAChannel):
    """A channel with several sources or several sinks."""
    __slots__ = []


class BasicMultiChannel(MultiChannel):
    __slots__ = ["sources", "sinks"]

    def __init__(self, sources, sinks):
        self.sources = tuple(sources)
        self.sinks = tuple(sinks)


class AddressData(object):
    __slots__ = []


class EmptyAddressData(AddressData):
    """No address specific data."""
    __slots__ = []


class DefaultAddressData(AddressData):
    """The data given by the rule set's ``address_data`` for each location
    (locations where it gave None are omitted).
    """

    __slots__ = ["data"]

    def __init__(self, data):
        self.data = data

    def __getitem__(self, location):
        return self.data[location]

    def get(self, location, default=None):
        return self.data.get(location, default)


def task_equivalence_classes(ruleset, taskgraph):
    """Group tasks into equivalence classes.

    Tasks are considered in taskgraph order; each joins the first class whose
    representative it is equivalent to, or starts a new class.

    Returns
    -------
    classes : {task name: int, ...}
        Class numbers start at 1 and are negated for special tasks.
    representatives : [:py:class:`~archmap.taskgraph.TaskgraphNode`, ...]
        The first task of each class.
    """
    classes = {}
    representatives = []
    for node in taskgraph.getnodes():
        for i, representative in enumerate(representatives):
            if ruleset.isequivalent(representative, node):
                cls = i + 1
                break
        else:
            representatives.append(node)
            cls = len(representatives)
        classes[node.name] = -cls if ruleset.isspecial(node) else cls
    return classes, representatives


class SAStruct(object):
    """Everything the annealer knows about a map.

    Parameters
    ----------
    m : :py:class:`~archmap.Map`
    distance : :py:class:`~archmap.place.sa.distance.SADistance` or None
        Defaults to hop counts over the links of the top level.
    enable_flattness : bool
        Use the simpler flat representation of locations when every address
        holds at most one mappable component.
    enable_address : bool
        Include the rule set's ``address_cost`` in the objective.
    aux : object
        Auxiliary data for the rule set's ``aux_cost``.

    Raises
    ------
    NoLegalLocationError
        If the tasks of some equivalence class may not be mapped anywhere.
    """

    def __init__(self, m, distance=None, enable_flattness=True,
                 enable_address=False, aux=None):
        ruleset = m.ruleset
        toplevel = m.toplevel
        taskgraph = m.taskgraph
        self.ruleset = ruleset

        # The mappable components at each address: position in the list is
        # the slot number.
        self.pathtable = {}
        self.addresses = []
        for address in toplevel.addresses():
            paths = toplevel.mappables(ruleset, address)
            if paths:
                self.pathtable[address] = paths
                self.addresses.append(address)
        self.isflat = enable_flattness and \
            all(len(paths) == 1 for paths in self.pathtable.values())
        if self.isflat:
            self.address_of = _identity
        else:
            self.address_of = attrgetter("address")

        classes, self.representatives = task_equivalence_classes(ruleset,
                                                                 taskgraph)
        self.maptable = self._build_maptable(toplevel, ruleset)
        for i, representative in enumerate(self.representatives):
            if not self.maptable.getlocations(i + 1):
                raise NoLegalLocationError(representative.name, i + 1)

        # Nodes and channels
        self.node_names = taskgraph.nodenames()
        self.tasktable = {name: i for i, name in enumerate(self.node_names)}
        outchannels = {name: [] for name in self.node_names}
        inchannels = {name: [] for name in self.node_names}
        self.channels = []
        for i, edge in enumerate(taskgraph.edges):
            sources = [self.tasktable[n] for n in edge.sources]
            sinks = [self.tasktable[n] for n in edge.sinks]
            if len(sources) == 1 and len(sinks) == 1:
                self.channels.append(BasicChannel(sources[0], sinks[0]))
            else:
                self.channels.append(BasicMultiChannel(sources, sinks))
            for name in dict.fromkeys(edge.sources):
                outchannels[name].append(i)
            for name in dict.fromkeys(edge.sinks):
                inchannels[name].append(i)
        self.nodes = [BasicNode(classes[name], outchannels[name],
                                inchannels[name])
                      for name in self.node_names]

        # Occupancy grid
        shape = toplevel.shape
        if not self.isflat:
            shape += (max([len(p) for p in self.pathtable.values()] or [0]),)
        self.grid = np.full(shape, -1, dtype=np.int64)

        if distance is None:
            distance = BasicDistance.from_toplevel(toplevel)
        self.distance = distance

        self.enable_address = enable_address
        if enable_address:
            data = {}
            for address, paths in self.pathtable.items():
                for i, path in enumerate(paths):
                    value = ruleset.address_data(toplevel[path])
                    if value is not None:
                        data[self.location_of(path)] = value
            self.address_data = DefaultAddressData(data)
        else:
            self.address_data = EmptyAddressData()
        self.aux = aux

        self.channel_cost = ruleset.channel_cost
        self.address_cost = ruleset.address_cost
        self.aux_cost = ruleset.aux_cost

    def _build_maptable(self, toplevel, ruleset):
        if self.isflat:
            masks = []
            for representative in self.representatives:
                mask = np.zeros(toplevel.shape, dtype=bool)
                for address, paths in self.pathtable.items():
                    mask[address] = ruleset.canmap(representative,
                                                   toplevel[paths[0]])
                masks.append(mask)
            return FlatMapTable(masks)

        slots = []
        for representative in self.representatives:
            per_class = {}
            for address, paths in self.pathtable.items():
                indices = [i for i, path in enumerate(paths)
                           if ruleset.canmap(representative, toplevel[path])]
                if indices:
                    per_class[address] = indices
            slots.append(per_class)
        return MapTable(slots)

    def grid_index(self, location):
        if self.isflat:
            return location
        return location.address + (location.index, )

    def occupant(self, location):
        """The index of the node at a location, or -1 if it is free."""
        return self.grid.item(self.grid_index(location))

    def location_of(self, path):
        """The location of a mappable component path (ValueError if the
        component is not mappable).
        """
        try:
            paths = self.pathtable[path.address]
        except KeyError:
            raise ValueError("{} is not mappable".format(path))
        if self.isflat:
            if paths[0] != path:
                raise ValueError("{} is not mappable".format(path))
            return path.address
        return Location(path.address, paths.index(path))

    def path_of(self, location):
        if self.isflat:
            return self.pathtable[location][0]
        return self.pathtable[location.address][location.index]

    def num_classes(self):
        return len(self.representatives)

    def isplaced(self):
        return all(node.location is not Unplaced for node in self.nodes)

    def record(self, m):
        """Write the location of every node into the map as a component
        path.
        """
        for name, node in zip(self.node_names, self.nodes):
            m.mapping.nodes[name] = self.path_of(node.location)

    @property
    def nbytes(self):
        """Approximate memory used by the struct's tables."""
        return (self.grid.nbytes + self.maptable.nbytes +
                getattr(self.distance, "nbytes", 0))

    def __repr__(self):
        return "<SAStruct: {} nodes, {} channels, {} classes{}>".format(
            len(self.nodes), len(self.channels), len(self.representatives),
            ", flat" if self.isflat else "")


def _identity(location):
    return location
