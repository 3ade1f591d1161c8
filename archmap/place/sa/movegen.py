"""Move generators: proposing new locations for nodes during annealing.

A move generator is told the current distance limit at the start of the
anneal and after every update cycle and proposes, for a given node, a legal
location for its class no further from the node's current address than the
limit (special nodes ignore the limit).
"""

from bisect import bisect_right


class MoveGenerator(object):
    """A general API for a move generator."""

    def distancelimit(self, sa_struct):
        """The largest useful distance limit for a struct."""
        raise NotImplementedError()

    def initialize(self, sa_struct, limit=None):
        """Prepare to generate moves for a struct.

        Parameters
        ----------
        sa_struct : :py:class:`~archmap.place.sa.struct.SAStruct`
        limit : int or None
            The initial distance limit; the largest useful limit if None.
        """
        raise NotImplementedError()

    def update(self, sa_struct, limit):
        """Change the distance limit."""
        raise NotImplementedError()

    def generate_move(self, sa_struct, idx, random):
        """Propose a new location for node ``idx``.

        Returns
        -------
        location or None
            None if no location within the limit exists.
        """
        raise NotImplementedError()


class MoveLUT(object):
    """The candidate moves from one address for one class.

    Attributes
    ----------
    targets : [location, ...]
        Legal locations for the class, sorted by increasing distance.
    idx : int
        The number of ``targets`` within the current distance limit.
    indices : [int, ...]
        ``indices[d]`` is the number of ``targets`` at distance ``d`` or
        less.
    """

    __slots__ = ["targets", "idx", "indices"]

    def __init__(self, targets, idx, indices):
        self.targets = targets
        self.idx = idx
        self.indices = indices

    def update(self, limit):
        if self.indices:
            self.idx = self.indices[max(0, min(limit, len(self.indices) - 1))]
        else:
            self.idx = 0

    def __repr__(self):
        return "<MoveLUT {}/{} targets>".format(self.idx, len(self.targets))


class CachedMoveGenerator(MoveGenerator):
    """Precompute, for every class and every legal address, the legal
    locations sorted by distance so that each move is drawn in constant time.

    Memory grows with the square of the number of legal locations per class;
    prefer :py:class:`.SearchMoveGenerator` for very large architectures.
    """

    def __init__(self):
        self.moves = {}

    def distancelimit(self, sa_struct):
        return sa_struct.distance.maxdistance(sa_struct)

    def initialize(self, sa_struct, limit=None):
        if limit is None:
            limit = self.distancelimit(sa_struct)
        getdistance = sa_struct.distance.getdistance
        address_of = sa_struct.address_of
        maptable = sa_struct.maptable

        self.moves = {}
        for cls in range(1, sa_struct.num_classes() + 1):
            locations = maptable.getlocations(cls)
            bases = list(dict.fromkeys(address_of(l) for l in locations))
            lookup = {}
            for base in bases:
                candidates = sorted(
                    ((getdistance(base, address_of(l)), i, l)
                     for i, l in enumerate(locations) if l != base),
                    key=lambda c: (c[0], c[1]))
                distances = [c[0] for c in candidates]
                targets = [c[2] for c in candidates]
                maxdist = distances[-1] if distances else 0
                indices = [bisect_right(distances, d)
                           for d in range(maxdist + 1)]
                lookup[base] = MoveLUT(targets, 0, indices)
            self.moves[cls] = lookup
        self.update(sa_struct, limit)

    def update(self, sa_struct, limit):
        for lookup in self.moves.values():
            for lut in lookup.values():
                lut.update(limit)

    def generate_move(self, sa_struct, idx, random):
        node = sa_struct.nodes[idx]
        cls = node.cls
        lut = self.moves[abs(cls)][node.address]
        count = len(lut.targets) if cls < 0 else lut.idx
        if count == 0:
            return None
        return lut.targets[random.randrange(count)]


class SearchMoveGenerator(MoveGenerator):
    """Scan every legal location of a node's class for those within the
    distance limit each time a move is requested.

    Slower per move than :py:class:`.CachedMoveGenerator` but needs no
    precomputed tables.
    """

    def __init__(self):
        self.limit = 0

    def distancelimit(self, sa_struct):
        return sa_struct.distance.maxdistance(sa_struct)

    def initialize(self, sa_struct, limit=None):
        if limit is None:
            limit = self.distancelimit(sa_struct)
        self.limit = limit

    def update(self, sa_struct, limit):
        self.limit = limit

    def generate_move(self, sa_struct, idx, random):
        node = sa_struct.nodes[idx]
        getdistance = sa_struct.distance.getdistance
        address_of = sa_struct.address_of
        address = node.address
        current = node.location

        if node.cls < 0:
            candidates = [l for l in sa_struct.maptable.getlocations(node.cls)
                          if l != current]
        else:
            limit = self.limit
            candidates = [l for l in sa_struct.maptable.getlocations(node.cls)
                          if l != current and
                          getdistance(address, address_of(l)) <= limit]
        if not candidates:
            return None
        return candidates[random.randrange(len(candidates))]
