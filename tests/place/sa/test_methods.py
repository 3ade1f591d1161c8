import pytest

import random

from mock import Mock

from archmap.map import Map
from archmap.ruleset import RuleSet
from archmap.taskgraph import Taskgraph, TaskgraphNode, TaskgraphEdge

from archmap.place.sa.methods import \
    assign, move, swap, channel_cost, address_cost, node_cost, \
    node_pair_cost, map_cost, accept, step
from archmap.place.sa.movegen import CachedMoveGenerator
from archmap.place.sa.struct import SAStruct


class AddressRuleSet(RuleSet):
    """Tasks prefer the addresses with the smallest x coordinate."""

    def address_data(self, component):
        return 1.0

    def address_cost(self, sa_struct, node, address_data):
        return float(node.address[0]) * address_data[node.location]


@pytest.fixture
def sa_struct(grid, chain):
    s = SAStruct(Map(RuleSet(), grid(3, 3), chain(3)))
    assign(s, 0, (0, 0))
    assign(s, 1, (1, 0))
    assign(s, 2, (2, 2))
    return s


class TestRelocation(object):

    def test_assign(self, sa_struct):
        assert sa_struct.nodes[2].location == (2, 2)
        assert sa_struct.nodes[2].address == (2, 2)
        assert sa_struct.occupant((2, 2)) == 2
        assert sa_struct.occupant((1, 1)) == -1

    def test_assign_occupied(self, sa_struct):
        with pytest.raises(AssertionError):
            assign(sa_struct, 2, (0, 0))

    def test_move(self, sa_struct):
        move(sa_struct, 2, (1, 1))
        assert sa_struct.nodes[2].location == (1, 1)
        assert sa_struct.occupant((1, 1)) == 2
        assert sa_struct.occupant((2, 2)) == -1

    def test_swap(self, sa_struct):
        swap(sa_struct, 0, 2)
        assert sa_struct.nodes[0].location == (2, 2)
        assert sa_struct.nodes[2].location == (0, 0)
        assert sa_struct.occupant((0, 0)) == 2
        assert sa_struct.occupant((2, 2)) == 0
        assert (sa_struct.grid >= 0).sum() == 3


class TestCosts(object):

    def test_channel_cost(self, sa_struct):
        assert channel_cost(sa_struct, sa_struct.channels[0]) == 1
        assert channel_cost(sa_struct, sa_struct.channels[1]) == 3

    def test_node_cost(self, sa_struct):
        assert node_cost(sa_struct, 0) == 1
        assert node_cost(sa_struct, 1) == 4
        assert node_cost(sa_struct, 2) == 3

    def test_node_pair_cost(self, sa_struct):
        # The channel between t0 and t1 is only counted once
        assert node_pair_cost(sa_struct, 0, 1) == 4
        assert node_pair_cost(sa_struct, 0, 2) == 4

    def test_map_cost(self, sa_struct):
        assert map_cost(sa_struct) == 4

    def test_address_cost_disabled(self, sa_struct):
        assert address_cost(sa_struct, sa_struct.nodes[2]) == 0.0

    def test_address_cost(self, grid, chain):
        s = SAStruct(Map(AddressRuleSet(), grid(3, 1), chain(2)),
                     enable_address=True)
        assign(s, 0, (2, 0))
        assign(s, 1, (1, 0))
        assert address_cost(s, s.nodes[0]) == 2.0
        assert node_cost(s, 1) == 1.0 + 1.0
        assert map_cost(s) == 1.0 + 2.0 + 1.0

    def test_aux_cost(self, grid, chain):
        class AuxRuleSet(RuleSet):
            def aux_cost(self, sa_struct):
                return sa_struct.aux

        s = SAStruct(Map(AuxRuleSet(), grid(2, 1), chain(2)), aux=5.0)
        assign(s, 0, (0, 0))
        assign(s, 1, (1, 0))
        assert map_cost(s) == 6.0
        assert node_cost(s, 0) == 6.0


class TestAccept(object):

    @pytest.mark.parametrize("delta", [0.0, -1.0, -100.0])
    def test_improvements(self, delta):
        r = Mock()
        r.random.return_value = 0.999
        assert accept(delta, 1.0, r)
        assert accept(delta, 0.0, r)

    def test_frozen(self):
        r = Mock()
        r.random.return_value = 0.0
        assert not accept(1.0, 0.0, r)

    @pytest.mark.parametrize("delta,temperature,accepted",
                             [(1.0, 10.0, True),
                              (1.0, 1.0, False),
                              (10.0, 100.0, True),
                              (10.0, 10.0, False)])
    def test_metropolis(self, delta, temperature, accepted):
        r = Mock()
        r.random.return_value = 0.5
        assert accept(delta, temperature, r) is accepted

    def test_higher_temperature_accepts_more(self):
        r = random.Random(1)
        cold = sum(accept(1.0, 0.5, r) for _ in range(1000))
        hot = sum(accept(1.0, 5.0, r) for _ in range(1000))
        assert cold < hot


class TestStep(object):

    def test_no_move(self, sa_struct):
        movegen = Mock()
        movegen.generate_move.return_value = None
        before = sa_struct.grid.copy()
        assert step(sa_struct, movegen, 1.0, random.Random(1)) == \
            (False, False, 0.0)
        assert (sa_struct.grid == before).all()

    def test_rejected_move_reverted(self, sa_struct):
        # t0 next to t1 is optimal, so moving t0 anywhere is worse.
        r = Mock()
        r.randrange.return_value = 0
        movegen = Mock()
        movegen.generate_move.return_value = (0, 2)
        generated, accepted, delta = step(sa_struct, movegen, 0.0, r)
        assert generated
        assert not accepted
        assert delta == 2
        assert sa_struct.nodes[0].location == (0, 0)
        assert sa_struct.occupant((0, 2)) == -1

    def test_accepted_swap(self, sa_struct):
        # Swapping t0 with t2 brings t2 to t1's neighbour.
        r = Mock()
        r.randrange.return_value = 2
        movegen = Mock()
        movegen.generate_move.return_value = (0, 0)
        generated, accepted, delta = step(sa_struct, movegen, 0.0, r)
        assert (generated, accepted) == (True, True)
        assert delta == 0.0
        assert sa_struct.nodes[2].location == (0, 0)
        assert sa_struct.nodes[0].location == (2, 2)

    def test_objective_tracks_deltas(self, sa_struct):
        movegen = CachedMoveGenerator()
        movegen.initialize(sa_struct)
        r = random.Random(3)
        objective = map_cost(sa_struct)
        for _ in range(500):
            generated, accepted, delta = step(sa_struct, movegen, 1.0, r)
            if accepted:
                objective += delta
        assert objective == pytest.approx(map_cost(sa_struct))
        assert (sa_struct.grid >= 0).sum() == 3
