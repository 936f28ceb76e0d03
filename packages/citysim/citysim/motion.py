"""Per-tick agent motion along cached paths."""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Sequence

from citysim.config import DEFAULT_CONFIG, SimConfig
from citysim.pathfind import find_path
from citysim.roads import RoadGraph
from citysim.types import Agent, AgentStatus, Position


def _on_waypoint(pos: Position, waypoint: Position, tolerance: float) -> bool:
    return abs(waypoint.x - pos.x) <= tolerance and abs(waypoint.y - pos.y) <= tolerance


def next_waypoint(
    position: Position,
    path: Sequence[Position],
    tolerance: float = DEFAULT_CONFIG.waypoint_tolerance,
) -> Position | None:
    """Waypoint following the one the agent stands on.

    An agent that matches no waypoint heads for the first one. Returns None
    when the matched waypoint is the last, i.e. the path is exhausted.
    """
    if not path:
        return None
    for i, waypoint in enumerate(path):
        if _on_waypoint(position, waypoint, tolerance):
            if i < len(path) - 1:
                return path[i + 1]
            return None
    return path[0]


def move_towards(
    position: Position,
    target: Position,
    step: float,
    grid_size: int,
) -> Position:
    """Advance ``step`` units toward ``target``, snapping when within reach."""
    dx = target.x - position.x
    dy = target.y - position.y
    distance = math.hypot(dx, dy)
    if distance <= step:
        return target

    limit = grid_size - 1
    return Position(
        max(0.0, min(limit, position.x + dx / distance * step)),
        max(0.0, min(limit, position.y + dy / distance * step)),
    )


def update_agent(
    agent: Agent,
    roads: RoadGraph,
    config: SimConfig = DEFAULT_CONFIG,
) -> Agent:
    """Advance one agent by one tick.

    Stopped agents are returned unchanged. Paths are planned only when the
    cached one is missing or exhausted; a road status change elsewhere does
    not invalidate a cached path.
    """
    if agent.status is AgentStatus.STOPPED:
        return agent

    if agent.destination is None:
        return replace(agent, status=AgentStatus.IDLE)

    if not agent.path:
        path = find_path(agent.position, agent.destination, roads.grid_size, roads)
        if not path:
            return replace(agent, status=AgentStatus.STOPPED, path=None)
        agent = replace(agent, path=tuple(path))

    path = agent.path
    target = next_waypoint(agent.position, path, config.waypoint_tolerance)
    if target is None:
        return replace(
            agent,
            position=agent.destination,
            status=AgentStatus.IDLE,
            destination=None,
            path=None,
            speed=agent.base_speed,
        )

    step = agent.speed * config.tick_distance
    new_position = move_towards(agent.position, target, step, roads.grid_size)

    if new_position.distance_to(target) < config.arrival_threshold:
        remainder: tuple[Position, ...] = ()
        for i, waypoint in enumerate(path):
            if _on_waypoint(target, waypoint, config.waypoint_tolerance):
                remainder = path[i + 1:]
                break
        return replace(
            agent,
            position=new_position,
            status=AgentStatus.MOVING,
            path=remainder or None,
        )

    return replace(agent, position=new_position, status=AgentStatus.MOVING)
