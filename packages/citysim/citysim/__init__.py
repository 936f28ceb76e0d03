"""citysim - Pure simulation engine for a grid city of cars and pedestrians."""
from __future__ import annotations

from citysim.types import (
    Agent,
    AgentStatus,
    AgentType,
    Asset,
    AssetKind,
    AssetOp,
    AssetOpType,
    Building,
    BuildingType,
    DirectorAction,
    DirectorInstruction,
    DirectorResponse,
    EventType,
    Position,
    Priority,
    Road,
    RoadStatus,
    SimulationEvent,
    SnapshotError,
    WorldEffects,
    WorldState,
)
from citysim.config import DEFAULT_CONFIG, SimConfig
from citysim.roads import RoadGraph, build_road_lattice, road_cost
from citysim.pathfind import find_path, path_cost
from citysim.motion import move_towards, next_waypoint, update_agent
from citysim.worldgen import create_initial_world
from citysim.events import (
    apply_event,
    build_event,
    create_event,
    random_event,
    trigger_event,
)
from citysim.instructions import apply_instruction, apply_instructions
from citysim.assets import (
    add_asset,
    apply_asset_ops,
    clear_shake,
    remove_assets,
    tick_assets,
    tick_effects,
    trigger_shake,
)
from citysim.engine import apply_director_response, update_world
from citysim.snapshot import world_from_dict, world_to_dict

__all__ = [
    "Agent",
    "AgentStatus",
    "AgentType",
    "Asset",
    "AssetKind",
    "AssetOp",
    "AssetOpType",
    "Building",
    "BuildingType",
    "DirectorAction",
    "DirectorInstruction",
    "DirectorResponse",
    "EventType",
    "Position",
    "Priority",
    "Road",
    "RoadStatus",
    "SimulationEvent",
    "SnapshotError",
    "WorldEffects",
    "WorldState",
    "DEFAULT_CONFIG",
    "SimConfig",
    "RoadGraph",
    "build_road_lattice",
    "road_cost",
    "find_path",
    "path_cost",
    "move_towards",
    "next_waypoint",
    "update_agent",
    "create_initial_world",
    "apply_event",
    "build_event",
    "create_event",
    "random_event",
    "trigger_event",
    "apply_instruction",
    "apply_instructions",
    "add_asset",
    "apply_asset_ops",
    "clear_shake",
    "remove_assets",
    "tick_assets",
    "tick_effects",
    "trigger_shake",
    "apply_director_response",
    "update_world",
    "world_from_dict",
    "world_to_dict",
]
