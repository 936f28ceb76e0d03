"""Procedural generation of the initial city."""
from __future__ import annotations

import logging
import random

from citysim.config import (
    BUILDING_ARCHETYPES,
    CAR_COLORS,
    DEFAULT_CONFIG,
    NPC_COLORS,
    SimConfig,
)
from citysim.roads import build_road_lattice
from citysim.types import (
    Agent,
    AgentStatus,
    AgentType,
    Building,
    Position,
    WorldState,
)

logger = logging.getLogger(__name__)


def random_position(grid_size: int, rng: random.Random) -> Position:
    limit = grid_size - 1
    return Position(rng.random() * limit, rng.random() * limit)


def is_clear(pos: Position, buildings: list[Building], min_distance: float) -> bool:
    """True when no building lies closer than ``min_distance`` to ``pos``."""
    return not any(pos.distance_to(b.position) < min_distance for b in buildings)


def random_destination(
    origin: Position,
    grid_size: int,
    rng: random.Random,
    min_distance: float,
    retries: int,
) -> Position:
    """Random point preferably at least ``min_distance`` from ``origin``.

    Gives up after ``retries`` samples and keeps the last one, so small grids
    still get a destination.
    """
    dest = random_position(grid_size, rng)
    attempts = 1
    while origin.distance_to(dest) < min_distance and attempts < retries:
        dest = random_position(grid_size, rng)
        attempts += 1
    return dest


def _place(
    grid_size: int,
    rng: random.Random,
    buildings: list[Building],
    min_distance: float,
    retries: int,
) -> Position:
    pos = random_position(grid_size, rng)
    attempts = 0
    while not is_clear(pos, buildings, min_distance) and attempts < retries:
        pos = random_position(grid_size, rng)
        attempts += 1
    return pos


def generate_buildings(config: SimConfig, rng: random.Random) -> list[Building]:
    buildings: list[Building] = []
    low, high = config.building_size
    for i in range(config.building_count):
        pos = _place(config.grid_size, rng, buildings,
                     config.building_spacing, config.placement_retries)
        if not is_clear(pos, buildings, config.building_spacing):
            continue
        btype, color = BUILDING_ARCHETYPES[i % len(BUILDING_ARCHETYPES)]
        buildings.append(Building(
            id=f"building-{i + 1}",
            position=pos,
            size=low + rng.random() * (high - low),
            type=btype,
            color=color,
        ))
    return buildings


def generate_agents(
    config: SimConfig,
    rng: random.Random,
    buildings: list[Building],
) -> list[Agent]:
    agents: list[Agent] = []
    fleets = (
        (AgentType.CAR, config.car_count, config.car_speed, config.car_min_trip, CAR_COLORS),
        (AgentType.NPC, config.npc_count, config.npc_speed, config.npc_min_trip, NPC_COLORS),
    )
    for agent_type, count, (low, high), min_trip, palette in fleets:
        for i in range(count):
            start = _place(config.grid_size, rng, buildings,
                           config.agent_spacing, config.placement_retries)
            speed = low + rng.random() * (high - low)
            agents.append(Agent(
                id=f"{agent_type.value}-{i + 1}",
                type=agent_type,
                position=start,
                destination=random_destination(
                    start, config.grid_size, rng, min_trip, config.destination_retries,
                ),
                status=AgentStatus.MOVING,
                speed=speed,
                base_speed=speed,
                color=palette[i % len(palette)],
            ))
    return agents


def create_initial_world(
    config: SimConfig = DEFAULT_CONFIG,
    rng: random.Random | None = None,
) -> WorldState:
    """Build a fresh world: buildings, seeded agents and a fully open lattice.

    Reproducible only when the caller passes its own seeded ``rng``.
    """
    rng = rng if rng is not None else random.Random()
    buildings = generate_buildings(config, rng)
    agents = generate_agents(config, rng, buildings)
    roads = build_road_lattice(config.grid_size)
    logger.info(
        "generated world: grid=%d buildings=%d agents=%d roads=%d",
        config.grid_size, len(buildings), len(agents), len(roads),
    )
    return WorldState(
        agents=tuple(agents),
        roads=roads,
        buildings=tuple(buildings),
        events=(),
        grid_size=config.grid_size,
    )
