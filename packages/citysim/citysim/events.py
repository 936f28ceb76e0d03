"""Manual simulation events and their effect on roads and agents."""
from __future__ import annotations

import logging
import random
import time
import uuid
from dataclasses import replace

from citysim.config import DEFAULT_CONFIG, SimConfig
from citysim.types import (
    AgentStatus,
    EventType,
    Position,
    RoadStatus,
    SimulationEvent,
    WorldState,
)

logger = logging.getLogger(__name__)

# Road status forced by each event type; types not listed leave roads alone.
EVENT_ROAD_STATUS: dict[EventType, RoadStatus] = {
    EventType.ACCIDENT: RoadStatus.BLOCKED,
    EventType.CONGESTION: RoadStatus.CONGESTED,
}

_DESCRIPTIONS: dict[EventType, str] = {
    EventType.ACCIDENT: "Vehicle collision at ({x}, {y})",
    EventType.CONGESTION: "Heavy traffic detected at ({x}, {y})",
    EventType.EMERGENCY: "Emergency response needed at ({x}, {y})",
}


def describe(event_type: EventType, position: Position) -> str:
    return _DESCRIPTIONS[event_type].format(x=position.x, y=position.y)


def create_event(
    event_type: EventType,
    position: Position,
    description: str,
    timestamp: int | None = None,
) -> SimulationEvent:
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    return SimulationEvent(
        id=f"event-{timestamp}-{uuid.uuid4().hex[:8]}",
        type=event_type,
        position=position,
        timestamp=timestamp,
        description=description,
    )


def random_event(
    event_type: EventType,
    grid_size: int,
    rng: random.Random | None = None,
) -> SimulationEvent:
    """Event of ``event_type`` at a random lattice point with the stock description."""
    rng = rng if rng is not None else random.Random()
    pos = Position(rng.randrange(grid_size), rng.randrange(grid_size))
    return create_event(event_type, pos, describe(event_type, pos))


def apply_event(
    state: WorldState,
    event: SimulationEvent,
    config: SimConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Apply ``event`` to nearby roads and agents and append it to the log.

    Roads whose midpoint lies strictly within ``config.event_radius`` take the
    status mapped from the event type. Accidents also stop every agent inside
    the same radius. Events outside the grid are ignored.
    """
    if not event.position.in_bounds(state.grid_size):
        logger.debug("ignoring out-of-bounds event %s at %s", event.id, event.position)
        return state

    radius = config.event_radius
    forced = EVENT_ROAD_STATUS.get(event.type)
    roads = state.roads
    if forced is not None:
        roads = tuple(
            replace(road, status=forced)
            if road.midpoint.distance_to(event.position) < radius and road.status is not forced
            else road
            for road in state.roads
        )

    agents = state.agents
    if event.type is EventType.ACCIDENT:
        agents = tuple(
            replace(agent, status=AgentStatus.STOPPED)
            if agent.position.distance_to(event.position) < radius
            else agent
            for agent in state.agents
        )

    return replace(state, roads=roads, agents=agents, events=state.events + (event,))


def build_event(
    event_type: EventType,
    grid_size: int,
    position: Position | None = None,
    rng: random.Random | None = None,
) -> SimulationEvent:
    """Event of ``event_type`` at ``position``, or at a random lattice point."""
    if position is None:
        return random_event(event_type, grid_size, rng)
    return create_event(event_type, position, describe(event_type, position))


def trigger_event(
    state: WorldState,
    event_type: EventType,
    position: Position | None = None,
    rng: random.Random | None = None,
    config: SimConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Synthesize one event with ``build_event`` and apply it."""
    event = build_event(event_type, state.grid_size, position, rng)
    return apply_event(state, event, config)
