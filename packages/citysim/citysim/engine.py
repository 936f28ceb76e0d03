"""Whole-world transitions: the per-tick update and Director responses."""
from __future__ import annotations

from dataclasses import replace

from citysim.assets import apply_asset_ops, tick_assets, tick_effects, trigger_shake
from citysim.config import DEFAULT_CONFIG, SimConfig
from citysim.instructions import apply_instructions
from citysim.motion import update_agent
from citysim.roads import RoadGraph
from citysim.types import DirectorResponse, WorldState


def update_world(state: WorldState, config: SimConfig = DEFAULT_CONFIG) -> WorldState:
    """Advance the world by one tick.

    Every agent plans against the same road graph, built from the roads as
    they stand at the start of the tick.
    """
    graph = RoadGraph(state.roads, state.grid_size)
    agents = tuple(update_agent(agent, graph, config) for agent in state.agents)
    state = replace(state, agents=agents, tick=state.tick + 1)
    state = tick_assets(state)
    return tick_effects(state)


def apply_director_response(
    state: WorldState,
    response: DirectorResponse | None,
    config: SimConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Merge a validated planner response: instructions, then assets, then shake."""
    if response is None:
        return state
    state = apply_instructions(state, response.instructions, config)
    state = apply_asset_ops(state, response.asset_ops, config)
    if response.shake:
        state = trigger_shake(state, config)
    return state
