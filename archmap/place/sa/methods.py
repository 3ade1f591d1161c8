"""The operations the annealer performs on a placement struct: relocating
nodes, computing costs and making a single annealing step.
"""

import math


def assign(sa_struct, idx, location):
    """Put node ``idx`` at a location, which must be free and legal for its
    class.
    """
    node = sa_struct.nodes[idx]
    assert sa_struct.maptable.isvalid(node.cls, location), \
        "Illegal location."
    assert sa_struct.occupant(location) < 0, "Location occupied."
    node.location = location
    node.address = sa_struct.address_of(location)
    sa_struct.grid[sa_struct.grid_index(location)] = idx


def move(sa_struct, idx, location):
    """Move node ``idx`` from its current location to a free one."""
    node = sa_struct.nodes[idx]
    sa_struct.grid[sa_struct.grid_index(node.location)] = -1
    assign(sa_struct, idx, location)


def swap(sa_struct, idx1, idx2):
    """Exchange the locations of two nodes."""
    grid = sa_struct.grid
    grid_index = sa_struct.grid_index
    node1 = sa_struct.nodes[idx1]
    node2 = sa_struct.nodes[idx2]
    location1 = node1.location
    location2 = node2.location
    grid[grid_index(location1)] = -1
    grid[grid_index(location2)] = -1
    assign(sa_struct, idx1, location2)
    assign(sa_struct, idx2, location1)


def channel_cost(sa_struct, channel):
    return sa_struct.channel_cost(sa_struct, channel)


def address_cost(sa_struct, node):
    if not sa_struct.enable_address:
        return 0.0
    return sa_struct.address_cost(sa_struct, node, sa_struct.address_data)


def aux_cost(sa_struct):
    return sa_struct.aux_cost(sa_struct)


def node_cost(sa_struct, idx):
    """The cost of every channel of a node plus the node's address cost and
    the auxiliary cost.
    """
    node = sa_struct.nodes[idx]
    channels = sa_struct.channels
    cost = 0.0
    for channel in node.channels:
        cost += channel_cost(sa_struct, channels[channel])
    return cost + address_cost(sa_struct, node) + aux_cost(sa_struct)


def node_pair_cost(sa_struct, idx1, idx2):
    """As :py:func:`.node_cost` for two nodes, counting channels shared by
    both nodes once.
    """
    node1 = sa_struct.nodes[idx1]
    node2 = sa_struct.nodes[idx2]
    channels = sa_struct.channels
    cost = 0.0
    for channel in dict.fromkeys(node1.channels + node2.channels):
        cost += channel_cost(sa_struct, channels[channel])
    return (cost + address_cost(sa_struct, node1) +
            address_cost(sa_struct, node2) + aux_cost(sa_struct))


def map_cost(sa_struct):
    """The objective: the cost of every channel, every node's address cost
    and the auxiliary cost.
    """
    cost = 0.0
    for channel in sa_struct.channels:
        cost += channel_cost(sa_struct, channel)
    for node in sa_struct.nodes:
        cost += address_cost(sa_struct, node)
    return cost + aux_cost(sa_struct)


def accept(delta, temperature, random):
    """The Metropolis criterion: always accept improvements, accept a worse
    placement with probability ``exp(-delta / temperature)``.
    """
    if delta <= 0.0:
        return True
    if temperature <= 0.0:
        return False
    return random.random() < math.exp(-delta / temperature)


def step(sa_struct, movegen, temperature, random):
    """Attempt to move one randomly chosen node.

    The node is moved to the location the move generator proposes, swapping
    with the node already there when that node may legally occupy the
    mover's location. The change is kept or reverted according to
    :py:func:`.accept`.

    Returns
    -------
    generated : bool
        False if no legal move could be proposed (nothing changed).
    accepted : bool
        True if the move was kept.
    delta : float
        The change in cost the move caused (0.0 if no move was generated).
    """
    nodes = sa_struct.nodes
    idx = random.randrange(len(nodes))
    node = nodes[idx]
    old_location = node.location

    new_location = movegen.generate_move(sa_struct, idx, random)
    if new_location is None or new_location == old_location:
        return (False, False, 0.0)

    other = sa_struct.occupant(new_location)
    if other < 0:
        cost_before = node_cost(sa_struct, idx)
        move(sa_struct, idx, new_location)
        delta = node_cost(sa_struct, idx) - cost_before
        if accept(delta, temperature, random):
            return (True, True, delta)
        move(sa_struct, idx, old_location)
        return (True, False, delta)

    if not sa_struct.maptable.isvalid(nodes[other].cls, old_location):
        return (False, False, 0.0)

    cost_before = node_pair_cost(sa_struct, idx, other)
    swap(sa_struct, idx, other)
    delta = node_pair_cost(sa_struct, idx, other) - cost_before
    if accept(delta, temperature, random):
        return (True, True, delta)
    swap(sa_struct, idx, other)
    return (True, False, delta)
