"""Tests for the road lattice and cost model."""

import pytest

from citysim import Position, Road, RoadGraph, RoadStatus, build_road_lattice, road_cost


class TestLattice:
    def test_road_count_for_full_lattice(self):
        roads = build_road_lattice(10)
        assert len(roads) == 2 * 10 * 9

    def test_all_roads_open_and_axis_aligned(self):
        for road in build_road_lattice(6):
            assert road.status is RoadStatus.OPEN
            dx = abs(road.start.x - road.end.x)
            dy = abs(road.start.y - road.end.y)
            assert dx + dy == 1

    def test_each_adjacent_pair_has_exactly_one_road(self):
        roads = build_road_lattice(5)
        keys = [
            frozenset({(r.start.x, r.start.y), (r.end.x, r.end.y)}) for r in roads
        ]
        assert len(keys) == len(set(keys))

    def test_road_midpoint(self):
        road = Road(Position(2, 3), Position(3, 3))
        assert road.midpoint == Position(2.5, 3)


class TestCostModel:
    @pytest.mark.parametrize("status,expected", [
        (RoadStatus.OPEN, 1.0),
        (RoadStatus.CONGESTED, 3.0),
        (RoadStatus.BLOCKED, 999.0),
    ])
    def test_cost_by_status(self, status, expected):
        assert road_cost(status) == expected


class TestRoadGraph:
    def test_lookup_in_either_orientation(self):
        graph = RoadGraph([Road(Position(4, 1), Position(3, 1), RoadStatus.CONGESTED)], 5)

        assert graph.cost((3, 1), (4, 1)) == 3.0
        assert graph.cost((4, 1), (3, 1)) == 3.0

    def test_missing_road_has_no_cost(self):
        graph = RoadGraph([], 5)
        assert graph.road_between((0, 0), (0, 1)) is None
        assert graph.cost((0, 0), (0, 1)) is None

    def test_first_duplicate_wins(self):
        graph = RoadGraph([
            Road(Position(0, 0), Position(1, 0), RoadStatus.BLOCKED),
            Road(Position(1, 0), Position(0, 0), RoadStatus.OPEN),
        ], 3)
        assert len(graph) == 1
        assert graph.cost((0, 0), (1, 0)) == 999.0

    def test_corner_has_two_neighbors(self):
        graph = RoadGraph(build_road_lattice(4), 4)
        neighbors = {node for node, _ in graph.neighbors((0, 0))}
        assert neighbors == {(0, 1), (1, 0)}

    def test_interior_has_four_neighbors(self):
        graph = RoadGraph(build_road_lattice(4), 4)
        assert len(graph.neighbors((1, 2))) == 4

    def test_heuristic_is_manhattan(self):
        graph = RoadGraph([], 10)
        assert graph.heuristic((1, 1), (4, 5)) == 7.0
