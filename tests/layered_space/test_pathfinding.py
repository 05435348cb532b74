"""Tests for the CrossLayerPathfinder class."""

import random

from hexstrata.layered_space.coordinate import HexCoordinate
from hexstrata.layered_space.entities import EntityKind, MobileEntity
from hexstrata.layered_space.feature import CAVE_ENTRANCE, CHASM
from hexstrata.layered_space.hex_map import LayeredHexMap
from hexstrata.layered_space.pathfinding import CrossLayerPathfinder
from hexstrata.layered_space.traversal import TraversalGate, adjacent_move_rule

DELVER = EntityKind("Delver", can_cross_layers=True)
WALKER = EntityKind("Walker")


def make_map():
    return LayeredHexMap(4, 4, layers=(0, -1), random=random.Random(42))


def coords(path):
    return [(loc.coordinate.q, loc.coordinate.r, loc.coordinate.layer) for loc in path]


def assert_valid_path(path, source, target):
    assert path[0] is source
    assert path[-1] is target
    assert len({id(loc) for loc in path}) == len(path)
    for a, b in zip(path, path[1:]):
        same_layer_step = a.layer == b.layer and a.is_neighbor(b)
        transition = a.coordinate.same_planar(b.coordinate) and not (
            a.coordinate.same_layer_class(b.coordinate)
        )
        assert same_layer_step or transition


class TestSameLayerPaths:
    """Tests for routes that stay on one layer."""

    def test_straight_path(self):
        """Test a shortest path along one axis."""
        hex_map = make_map()
        source = hex_map[HexCoordinate(0, 0, 0)]
        target = hex_map[HexCoordinate(3, 0, 0)]
        path = CrossLayerPathfinder(hex_map).find_path(MobileEntity(WALKER, source), target)
        assert coords(path) == [(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0)]
        assert_valid_path(path, source, target)

    def test_path_avoids_blocked_hexes(self):
        """Test hexes the base rule rejects are routed around."""
        hex_map = make_map()
        hex_map[HexCoordinate(1, 0, 0)].add_feature(CHASM)
        source = hex_map[HexCoordinate(0, 0, 0)]
        target = hex_map[HexCoordinate(2, 0, 0)]
        path = CrossLayerPathfinder(hex_map).find_path(MobileEntity(WALKER, source), target)
        assert len(path) == 4
        assert (1, 0, 0) not in coords(path)
        assert_valid_path(path, source, target)

    def test_trivial_path(self):
        """Test a route to the current location is that single location."""
        hex_map = make_map()
        source = hex_map[HexCoordinate(2, 2, -1)]
        entity = MobileEntity(WALKER, source)
        assert CrossLayerPathfinder(hex_map).find_path(entity, source) == [source]

    def test_unreachable_same_layer(self):
        """Test an enclosed target yields an empty path."""
        hex_map = make_map()
        target = hex_map[HexCoordinate(0, 0, 0)]
        for neighbor in target.neighbors:
            neighbor.add_feature(CHASM)
        target.add_feature(CHASM)
        entity = MobileEntity(WALKER, hex_map[HexCoordinate(3, 3, 0)])
        assert CrossLayerPathfinder(hex_map).find_path(entity, target) == []

    def test_base_pathfind_is_delegated(self):
        """Test same-class routes come from the injected search."""
        hex_map = make_map()
        source = hex_map[HexCoordinate(0, 0, -1)]
        target = hex_map[HexCoordinate(3, 3, -1)]
        calls = []

        def search(a, b):
            calls.append((a, b))
            return [a, b]

        pathfinder = CrossLayerPathfinder(hex_map, base_pathfind=search)
        path = pathfinder.find_path(MobileEntity(WALKER, source), target)
        assert path == [source, target]
        assert calls == [(source, target)]

    def test_same_layer_path_rejects_other_layers(self):
        """Test the default search does not cross layers on its own."""
        hex_map = make_map()
        pathfinder = CrossLayerPathfinder(hex_map)
        assert pathfinder.same_layer_path(
            hex_map[HexCoordinate(0, 0, 0)], hex_map[HexCoordinate(0, 0, -1)]
        ) == []


class TestCrossLayerPaths:
    """Tests for routes that change layer class."""

    def test_route_through_entrance(self):
        """Test a route walks to the entrance, descends, and walks on."""
        hex_map = make_map()
        hex_map[HexCoordinate(2, 0, 0)].add_feature(CAVE_ENTRANCE)
        source = hex_map[HexCoordinate(0, 0, 0)]
        target = hex_map[HexCoordinate(2, 2, -1)]

        path = CrossLayerPathfinder(hex_map).find_path(MobileEntity(DELVER, source), target)

        assert len(path) == 6
        assert coords(path)[2:4] == [(2, 0, 0), (2, 0, -1)]
        assert_valid_path(path, source, target)

    def test_entrance_at_origin(self):
        """Test standing on an entrance gives a direct descent."""
        hex_map = make_map()
        source = hex_map[HexCoordinate(0, 0, 0)]
        source.add_feature(CAVE_ENTRANCE)
        target = hex_map[HexCoordinate(0, 0, -1)]
        path = CrossLayerPathfinder(hex_map).find_path(MobileEntity(DELVER, source), target)
        assert path == [source, target]

    def test_shortest_total_route_wins(self):
        """Test the entrance minimising both walking segments is chosen."""
        hex_map = make_map()
        hex_map[HexCoordinate(3, 3, 0)].add_feature(CAVE_ENTRANCE)
        hex_map[HexCoordinate(1, 0, 0)].add_feature(CAVE_ENTRANCE)
        source = hex_map[HexCoordinate(0, 0, 0)]
        target = hex_map[HexCoordinate(1, 1, -1)]

        path = CrossLayerPathfinder(hex_map).find_path(MobileEntity(DELVER, source), target)
        assert coords(path) == [(0, 0, 0), (1, 0, 0), (1, 0, -1), (1, 1, -1)]

    def test_farther_entrance_closer_to_target(self):
        """Test the combined length counts, not just the walk to the entrance."""
        hex_map = make_map()
        hex_map[HexCoordinate(1, 0, 0)].add_feature(CAVE_ENTRANCE)
        hex_map[HexCoordinate(3, 2, 0)].add_feature(CAVE_ENTRANCE)
        source = hex_map[HexCoordinate(2, 1, 0)]
        target = hex_map[HexCoordinate(3, 3, -1)]

        path = CrossLayerPathfinder(hex_map).find_path(MobileEntity(DELVER, source), target)
        assert coords(path) == [(2, 1, 0), (3, 1, 0), (3, 2, 0), (3, 2, -1), (3, 3, -1)] or (
            coords(path) == [(2, 1, 0), (2, 2, 0), (3, 2, 0), (3, 2, -1), (3, 3, -1)]
        )

    def test_tie_break_on_lowest_planar_coordinate(self):
        """Test equally short routes pick the entrance with the lowest (q, r)."""
        hex_map = make_map()
        hex_map[HexCoordinate(2, 1, 0)].add_feature(CAVE_ENTRANCE)
        hex_map[HexCoordinate(0, 1, 0)].add_feature(CAVE_ENTRANCE)
        source = hex_map[HexCoordinate(1, 1, 0)]
        target = hex_map[HexCoordinate(1, 1, -1)]

        pathfinder = CrossLayerPathfinder(hex_map)
        for _ in range(3):
            path = pathfinder.find_path(MobileEntity(DELVER, source), target)
            assert coords(path) == [(1, 1, 0), (0, 1, 0), (0, 1, -1), (1, 1, -1)]

    def test_every_underground_target(self):
        """Test every underground hex gets a valid route ending at it."""
        hex_map = make_map()
        hex_map[HexCoordinate(0, 0, 0)].add_feature(CAVE_ENTRANCE)
        hex_map[HexCoordinate(3, 3, 0)].add_feature(CAVE_ENTRANCE)
        source = hex_map[HexCoordinate(1, 1, 0)]
        entity = MobileEntity(DELVER, source)
        pathfinder = CrossLayerPathfinder(hex_map)

        for target in hex_map.locations_on_layer(-1):
            path = pathfinder.find_path(entity, target)
            assert path
            assert_valid_path(path, source, target)


    def test_default_search_matches_pairwise_search(self):
        """Test the default search picks the same entrance as a pairwise search."""
        hex_map = make_map()
        for q, r in [(3, 0), (0, 3), (2, 2), (1, 0)]:
            hex_map[HexCoordinate(q, r, 0)].add_feature(CAVE_ENTRANCE)
        hex_map[HexCoordinate(1, 1, -1)].add_feature(CHASM)
        hex_map[HexCoordinate(2, 1, 0)].add_feature(CHASM)
        source = hex_map[HexCoordinate(3, 1, 0)]
        entity = MobileEntity(DELVER, source)

        default = CrossLayerPathfinder(hex_map)
        pairwise = CrossLayerPathfinder(
            hex_map, base_pathfind=lambda a, b: default.same_layer_path(a, b)
        )

        def crossing(path):
            return next(
                a.coordinate.planar for a, b in zip(path, path[1:]) if a.layer != b.layer
            )

        for target in hex_map.locations_on_layer(-1):
            expected = pairwise.find_path(entity, target)
            path = default.find_path(entity, target)
            assert len(path) == len(expected)
            if expected:
                assert_valid_path(path, source, target)
                assert crossing(path) == crossing(expected)


class TestNoRoute:
    """Tests for the empty path signalling that no route exists."""

    def test_entity_cannot_cross(self):
        """Test an entity unable to cross layers gets no cross-layer route."""
        hex_map = make_map()
        source = hex_map[HexCoordinate(0, 0, 0)]
        source.add_feature(CAVE_ENTRANCE)
        target = hex_map[HexCoordinate(0, 0, -1)]
        assert CrossLayerPathfinder(hex_map).find_path(MobileEntity(WALKER, source), target) == []

    def test_no_entrance_on_surface_component(self):
        """Test an entrance outside the reachable surface component does not help."""
        hex_map = make_map()
        hex_map.remove_location(hex_map[HexCoordinate(1, 0, 0)])
        hex_map.remove_location(hex_map[HexCoordinate(0, 1, 0)])
        hex_map[HexCoordinate(3, 3, 0)].add_feature(CAVE_ENTRANCE)
        source = hex_map[HexCoordinate(0, 0, 0)]
        target = hex_map[HexCoordinate(3, 3, -1)]

        path = CrossLayerPathfinder(hex_map).find_path(MobileEntity(DELVER, source), target)
        assert path == []

    def test_no_entrance_anywhere(self):
        """Test a map without transition features has no cross-layer route."""
        hex_map = make_map()
        source = hex_map[HexCoordinate(0, 0, 0)]
        target = hex_map[HexCoordinate(0, 0, -1)]
        assert CrossLayerPathfinder(hex_map).find_path(MobileEntity(DELVER, source), target) == []

    def test_destination_layer_unreachable(self):
        """Test an exit that cannot reach the target yields no route."""

        def surface_only(origin, target):
            return origin.layer >= 0 and adjacent_move_rule(origin, target)

        hex_map = make_map()
        hex_map[HexCoordinate(0, 0, 0)].add_feature(CAVE_ENTRANCE)
        source = hex_map[HexCoordinate(1, 0, 0)]
        target = hex_map[HexCoordinate(2, 2, -1)]
        pathfinder = CrossLayerPathfinder(
            hex_map, TraversalGate(base_can_move_to=surface_only)
        )
        assert pathfinder.find_path(MobileEntity(DELVER, source), target) == []

    def test_absent_values(self):
        """Test absent input yields an empty path."""
        hex_map = make_map()
        target = hex_map[HexCoordinate(1, 1, 0)]
        pathfinder = CrossLayerPathfinder(hex_map)
        assert pathfinder.find_path(None, target) == []
        assert pathfinder.find_path(
            MobileEntity(WALKER, hex_map[HexCoordinate(0, 0, 0)]), None
        ) == []
        assert pathfinder.find_path(MobileEntity(WALKER), target) == []
