"""Applying Director instructions to agents."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from citysim.config import DEFAULT_CONFIG, SimConfig
from citysim.types import (
    Agent,
    AgentStatus,
    DirectorAction,
    DirectorInstruction,
    Position,
    WorldState,
)

logger = logging.getLogger(__name__)

_ROUTE_ACTIONS = frozenset({DirectorAction.MOVE, DirectorAction.REROUTE, DirectorAction.PATROL})


def _clamp(target: Position, grid_size: int) -> Position:
    limit = grid_size - 1
    return Position(max(0, min(limit, target.x)), max(0, min(limit, target.y)))


def apply_instruction(
    agent: Agent,
    instruction: DirectorInstruction,
    grid_size: int,
    config: SimConfig = DEFAULT_CONFIG,
) -> Agent:
    """Return ``agent`` updated by one instruction.

    The instruction is always recorded as ``current_instruction``. Routing
    actions whose target does not round onto the grid change nothing else;
    accepted targets are clamped into it. The emergency
    boost is computed from ``base_speed`` so repeating it never compounds.
    """
    agent = replace(agent, current_instruction=instruction)
    action = instruction.action

    if action is DirectorAction.STOP:
        return replace(
            agent,
            status=AgentStatus.STOPPED,
            destination=None,
            path=None,
            speed=agent.base_speed,
        )

    target = instruction.target
    if target is None or not target.rounded().in_bounds(grid_size):
        logger.debug("instruction %s for %s has no usable target", action.value, agent.id)
        return agent
    target = _clamp(target, grid_size)

    if action in _ROUTE_ACTIONS:
        return replace(
            agent,
            destination=target,
            status=AgentStatus.MOVING,
            path=None,
            speed=agent.base_speed,
        )

    if action is DirectorAction.EMERGENCY_RESPONSE:
        return replace(
            agent,
            destination=target,
            status=AgentStatus.EMERGENCY,
            path=None,
            speed=agent.base_speed * config.emergency_multiplier,
        )

    return agent


def apply_instructions(
    state: WorldState,
    instructions: Sequence[DirectorInstruction] | None,
    config: SimConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Apply at most one instruction per agent; the last one listed for an id wins.

    Instructions naming unknown agents are ignored.
    """
    if not instructions:
        return state

    by_agent: dict[str, DirectorInstruction] = {}
    for instruction in instructions:
        by_agent[instruction.agent_id] = instruction

    agents = tuple(
        apply_instruction(agent, by_agent[agent.id], state.grid_size, config)
        if agent.id in by_agent
        else agent
        for agent in state.agents
    )

    unknown = len(by_agent.keys() - {agent.id for agent in state.agents})
    if unknown:
        logger.debug("ignored instructions for %d unknown agents", unknown)
    return replace(state, agents=agents)
