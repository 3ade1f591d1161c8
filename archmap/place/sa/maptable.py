"""Map tables: where the tasks of each equivalence class may be placed.

When every address holds at most one mappable component (a *flat*
architecture) a location is simply an address and the legal addresses of a
class are recorded in a boolean numpy mask. Otherwise a location is a
:py:class:`.Location` naming an address and the slot of a mappable component
at that address.
"""

import sys

from collections import namedtuple

import numpy as np


Location = namedtuple("Location", "address index")
"""A mappable slot: the ``index``-th mappable component at ``address``."""


class AbstractMapTable(object):
    """The API of a map table.

    Class numbers start at 1; a negated class number (used for special tasks)
    refers to the same set of locations.
    """

    __slots__ = []

    @property
    def location_type(self):
        raise NotImplementedError()

    def getlocations(self, cls):
        """A list of every legal location for a class, in a fixed order."""
        raise NotImplementedError()

    def isvalid(self, cls, location):
        """May tasks of the class occupy the location?"""
        raise NotImplementedError()

    def isvalid_address(self, cls, address):
        """May tasks of the class occupy some location at the address?"""
        raise NotImplementedError()

    def num_classes(self):
        raise NotImplementedError()


class FlatMapTable(AbstractMapTable):
    """The map table of a flat architecture.

    Parameters
    ----------
    masks : [numpy.ndarray of bool, ...]
        One mask per class (class 1 first) over the address grid.
    """

    __slots__ = ["masks", "locations"]

    def __init__(self, masks):
        self.masks = list(masks)
        self.locations = [[tuple(int(i) for i in a)
                           for a in np.argwhere(mask)]
                          for mask in self.masks]

    @property
    def location_type(self):
        return tuple

    def getlocations(self, cls):
        return self.locations[abs(cls) - 1]

    def isvalid(self, cls, location):
        return bool(self.masks[abs(cls) - 1][location])

    isvalid_address = isvalid

    def num_classes(self):
        return len(self.masks)

    @property
    def nbytes(self):
        return sum(mask.nbytes for mask in self.masks)


class MapTable(AbstractMapTable):
    """The map table of an architecture with several mappable components per
    address.

    Parameters
    ----------
    slots : [{address: [int, ...], ...}, ...]
        For each class (class 1 first), the legal slot numbers at each
        address. Addresses with no legal slot are omitted.
    """

    __slots__ = ["slots", "locations"]

    def __init__(self, slots):
        self.slots = [{address: frozenset(indices)
                       for address, indices in per_class.items()}
                      for per_class in slots]
        self.locations = [[Location(address, index)
                           for address, indices in per_class.items()
                           for index in sorted(indices)]
                          for per_class in slots]

    @property
    def location_type(self):
        return Location

    def getlocations(self, cls):
        return self.locations[abs(cls) - 1]

    def isvalid(self, cls, location):
        indices = self.slots[abs(cls) - 1].get(location.address)
        return indices is not None and location.index in indices

    def isvalid_address(self, cls, address):
        return address in self.slots[abs(cls) - 1]

    def num_classes(self):
        return len(self.slots)

    @property
    def nbytes(self):
        return sum(sys.getsizeof(locations) for locations in self.locations)
