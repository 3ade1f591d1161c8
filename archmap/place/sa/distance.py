"""Distance metrics between addresses, used to estimate routing cost during
placement.
"""

from collections import deque

import numpy as np


class SADistance(object):
    """The API of a distance metric."""

    def getdistance(self, a, b):
        """The distance from address ``a`` to address ``b``."""
        raise NotImplementedError()

    def maxdistance(self, sa_struct):
        """The largest distance between two addresses holding mappable
        components.
        """
        raise NotImplementedError()


class BasicDistance(SADistance):
    """Distances looked up in a table indexed by the concatenation of two
    addresses.

    Parameters
    ----------
    table : numpy.ndarray
        Of shape ``shape + shape`` where ``shape`` covers every address.
    """

    __slots__ = ["table"]

    def __init__(self, table):
        self.table = table

    @classmethod
    def from_toplevel(cls, toplevel):
        """Count the hops between addresses over the links of the top level.

        The distance from an address to itself is 0 and to each address a
        top level link reaches is 1. Pairs with no connecting sequence of
        links get one more than the largest finite distance.
        """
        shape = toplevel.shape
        neighbours = toplevel.connected_components()
        table = np.full(shape + shape, -1, dtype=np.int32)

        for source in neighbours:
            table[source + source] = 0
            to_visit = deque([source])
            while to_visit:
                address = to_visit.popleft()
                hops = table[source + address] + 1
                for neighbour in neighbours[address]:
                    if table[source + neighbour] < 0:
                        table[source + neighbour] = hops
                        to_visit.append(neighbour)

        if table.size:
            table[table < 0] = table.max() + 1
        return cls(table)

    def getdistance(self, a, b):
        return self.table.item(a + b)

    def maxdistance(self, sa_struct):
        addresses = sa_struct.addresses
        if not addresses:
            return 0
        coords = np.array(addresses, dtype=np.intp).T
        index = (tuple(c[:, np.newaxis] for c in coords) +
                 tuple(c[np.newaxis, :] for c in coords))
        return int(self.table[index].max())

    @property
    def nbytes(self):
        return self.table.nbytes

    def __repr__(self):
        return "<BasicDistance over shape {}>".format(
            self.table.shape[:self.table.ndim // 2])
