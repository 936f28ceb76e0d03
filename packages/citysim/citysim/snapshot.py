"""JSON-compatible world snapshots for renderers and the planner."""
from __future__ import annotations

from typing import Any

from citysim.types import (
    Agent,
    AgentStatus,
    AgentType,
    Asset,
    AssetKind,
    Building,
    BuildingType,
    DirectorAction,
    DirectorInstruction,
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

_SNAPSHOT_VERSION = 1


def position_to_dict(pos: Position) -> dict[str, float]:
    return {"x": pos.x, "y": pos.y}


def position_from_dict(data: dict[str, Any]) -> Position:
    return Position(data["x"], data["y"])


def _optional_position(data: dict[str, Any] | None) -> Position | None:
    return None if data is None else position_from_dict(data)


def instruction_to_dict(inst: DirectorInstruction) -> dict[str, Any]:
    out: dict[str, Any] = {"agentId": inst.agent_id, "action": inst.action.value}
    if inst.target is not None:
        out["target"] = position_to_dict(inst.target)
    if inst.priority is not None:
        out["priority"] = inst.priority.value
    if inst.reasoning is not None:
        out["reasoning"] = inst.reasoning
    return out


def instruction_from_dict(data: dict[str, Any]) -> DirectorInstruction:
    priority = data.get("priority")
    return DirectorInstruction(
        agent_id=data["agentId"],
        action=DirectorAction(data["action"]),
        target=_optional_position(data.get("target")),
        priority=Priority(priority) if priority is not None else None,
        reasoning=data.get("reasoning"),
    )


def agent_to_dict(agent: Agent) -> dict[str, Any]:
    return {
        "id": agent.id,
        "type": agent.type.value,
        "position": position_to_dict(agent.position),
        "destination": None if agent.destination is None else position_to_dict(agent.destination),
        "status": agent.status.value,
        "speed": agent.speed,
        "baseSpeed": agent.base_speed,
        "color": agent.color,
        "path": None if agent.path is None else [position_to_dict(p) for p in agent.path],
        "currentInstruction": (
            None if agent.current_instruction is None
            else instruction_to_dict(agent.current_instruction)
        ),
    }


def agent_from_dict(data: dict[str, Any]) -> Agent:
    path = data.get("path")
    instruction = data.get("currentInstruction")
    return Agent(
        id=data["id"],
        type=AgentType(data["type"]),
        position=position_from_dict(data["position"]),
        destination=_optional_position(data.get("destination")),
        status=AgentStatus(data["status"]),
        speed=data["speed"],
        base_speed=data.get("baseSpeed", data["speed"]),
        color=data["color"],
        path=None if path is None else tuple(position_from_dict(p) for p in path),
        current_instruction=None if instruction is None else instruction_from_dict(instruction),
    )


def world_to_dict(state: WorldState) -> dict[str, Any]:
    """Full snapshot of ``state`` using the wire field names."""
    return {
        "version": _SNAPSHOT_VERSION,
        "tick": state.tick,
        "gridSize": state.grid_size,
        "agents": [agent_to_dict(a) for a in state.agents],
        "roads": [
            {
                "from": position_to_dict(r.start),
                "to": position_to_dict(r.end),
                "status": r.status.value,
            }
            for r in state.roads
        ],
        "buildings": [
            {
                "id": b.id,
                "position": position_to_dict(b.position),
                "size": b.size,
                "type": b.type.value,
                "color": b.color,
            }
            for b in state.buildings
        ],
        "events": [
            {
                "id": e.id,
                "type": e.type.value,
                "position": position_to_dict(e.position),
                "timestamp": e.timestamp,
                "description": e.description,
            }
            for e in state.events
        ],
        "assets": [
            {
                "id": a.id,
                "kind": a.kind.value,
                "position": position_to_dict(a.position),
                "ttl": a.ttl,
            }
            for a in state.assets
        ],
        "effects": {"shake": state.effects.shake},
    }


def world_from_dict(data: dict[str, Any]) -> WorldState:
    """Rebuild a ``WorldState`` from ``world_to_dict`` output.

    Raises:
        SnapshotError: If the snapshot version is not supported.
    """
    version = data.get("version")
    if version != _SNAPSHOT_VERSION:
        raise SnapshotError(
            f"Unsupported snapshot version {version!r}, expected {_SNAPSHOT_VERSION}"
        )
    return WorldState(
        agents=tuple(agent_from_dict(a) for a in data["agents"]),
        roads=tuple(
            Road(
                position_from_dict(r["from"]),
                position_from_dict(r["to"]),
                RoadStatus(r["status"]),
            )
            for r in data["roads"]
        ),
        buildings=tuple(
            Building(
                id=b["id"],
                position=position_from_dict(b["position"]),
                size=b["size"],
                type=BuildingType(b["type"]),
                color=b["color"],
            )
            for b in data["buildings"]
        ),
        events=tuple(
            SimulationEvent(
                id=e["id"],
                type=EventType(e["type"]),
                position=position_from_dict(e["position"]),
                timestamp=e["timestamp"],
                description=e["description"],
            )
            for e in data["events"]
        ),
        grid_size=data["gridSize"],
        assets=tuple(
            Asset(
                id=a["id"],
                kind=AssetKind(a["kind"]),
                position=position_from_dict(a["position"]),
                ttl=a.get("ttl"),
            )
            for a in data.get("assets", [])
        ),
        effects=WorldEffects(shake=data.get("effects", {}).get("shake", 0)),
        tick=data.get("tick", 0),
    )
