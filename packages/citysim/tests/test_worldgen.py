"""Tests for procedural world generation."""

import random

from citysim import (
    AgentStatus,
    AgentType,
    RoadStatus,
    SimConfig,
    create_initial_world,
)
from citysim.config import BUILDING_ARCHETYPES, CAR_COLORS, NPC_COLORS
from citysim.worldgen import is_clear, random_destination
from citysim.types import Position


def _small_config(**overrides) -> SimConfig:
    params = dict(grid_size=20, building_count=30, car_count=10, npc_count=15)
    params.update(overrides)
    return SimConfig(**params)


class TestCreateInitialWorld:
    def test_agent_counts_by_type(self):
        world = create_initial_world(_small_config(), random.Random(1))
        cars = [a for a in world.agents if a.type is AgentType.CAR]
        npcs = [a for a in world.agents if a.type is AgentType.NPC]
        assert len(cars) == 10
        assert len(npcs) == 15

    def test_agent_ids_unique(self):
        world = create_initial_world(_small_config(), random.Random(2))
        ids = [a.id for a in world.agents]
        assert len(ids) == len(set(ids))
        assert "car-1" in ids and "npc-15" in ids

    def test_agents_start_moving_with_destination(self):
        world = create_initial_world(_small_config(), random.Random(3))
        for agent in world.agents:
            assert agent.status is AgentStatus.MOVING
            assert agent.destination is not None
            assert agent.destination.in_bounds(world.grid_size)
            assert agent.position.in_bounds(world.grid_size)
            assert agent.path is None

    def test_speeds_within_type_ranges(self):
        config = _small_config()
        world = create_initial_world(config, random.Random(4))
        for agent in world.agents:
            low, high = config.car_speed if agent.type is AgentType.CAR else config.npc_speed
            assert low <= agent.speed < high
            assert agent.base_speed == agent.speed

    def test_colors_from_type_palette(self):
        world = create_initial_world(_small_config(), random.Random(5))
        for agent in world.agents:
            palette = CAR_COLORS if agent.type is AgentType.CAR else NPC_COLORS
            assert agent.color in palette

    def test_buildings_respect_spacing(self):
        config = _small_config()
        world = create_initial_world(config, random.Random(6))
        assert 0 < len(world.buildings) <= config.building_count
        for i, a in enumerate(world.buildings):
            for b in world.buildings[i + 1:]:
                assert a.position.distance_to(b.position) >= config.building_spacing

    def test_building_archetypes_cycle(self):
        world = create_initial_world(_small_config(), random.Random(7))
        archetypes = dict(BUILDING_ARCHETYPES)
        for building in world.buildings:
            index = int(building.id.split("-")[1]) - 1
            expected_type, expected_color = BUILDING_ARCHETYPES[index % len(BUILDING_ARCHETYPES)]
            assert building.type is expected_type
            assert building.color == expected_color == archetypes[building.type]

    def test_full_open_lattice(self):
        world = create_initial_world(_small_config(), random.Random(8))
        assert len(world.roads) == 2 * 20 * 19
        assert all(r.status is RoadStatus.OPEN for r in world.roads)

    def test_empty_world_state(self):
        world = create_initial_world(_small_config(), random.Random(9))
        assert world.events == ()
        assert world.assets == ()
        assert world.effects.shake == 0
        assert world.tick == 0

    def test_seeded_rng_is_reproducible(self):
        a = create_initial_world(_small_config(), random.Random(42))
        b = create_initial_world(_small_config(), random.Random(42))
        assert a == b


class TestHelpers:
    def test_random_destination_prefers_long_trips(self):
        rng = random.Random(11)
        origin = Position(0, 0)
        for _ in range(20):
            dest = random_destination(origin, 100, rng, min_distance=20, retries=10)
            assert dest.in_bounds(100)

    def test_random_destination_gives_up_on_tiny_grid(self):
        dest = random_destination(Position(1, 1), 3, random.Random(12), 50, retries=10)
        assert dest.in_bounds(3)

    def test_is_clear(self):
        world = create_initial_world(_small_config(), random.Random(13))
        building = world.buildings[0]
        assert not is_clear(building.position, list(world.buildings), 1.0)
