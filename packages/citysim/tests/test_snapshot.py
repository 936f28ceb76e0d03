"""Tests for world snapshots."""

import json
import random
from dataclasses import replace

import pytest

from citysim import (
    AssetKind,
    DirectorAction,
    DirectorInstruction,
    EventType,
    Position,
    Priority,
    SimConfig,
    SnapshotError,
    add_asset,
    apply_instructions,
    create_initial_world,
    trigger_event,
    update_world,
    world_from_dict,
    world_to_dict,
)


def _busy_world():
    config = SimConfig(grid_size=12, building_count=10, car_count=3, npc_count=3)
    state = create_initial_world(config, random.Random(21))
    state = update_world(state, config)
    state = trigger_event(state, EventType.ACCIDENT, Position(4, 4))
    state = add_asset(state, AssetKind.FIRE, Position(4, 4), ttl=9)
    return apply_instructions(state, [
        DirectorInstruction(
            "car-1", DirectorAction.EMERGENCY_RESPONSE, Position(1, 1),
            priority=Priority.HIGH, reasoning="closest unit",
        ),
    ])


class TestSnapshot:
    def test_round_trip(self):
        state = _busy_world()
        assert world_from_dict(world_to_dict(state)) == state

    def test_json_serializable(self):
        data = world_to_dict(_busy_world())
        assert json.loads(json.dumps(data)) == data

    def test_wire_field_names(self):
        data = world_to_dict(_busy_world())
        assert data["gridSize"] == 12
        road = data["roads"][0]
        assert set(road) == {"from", "to", "status"}
        car = next(a for a in data["agents"] if a["id"] == "car-1")
        assert car["currentInstruction"]["agentId"] == "car-1"
        assert car["currentInstruction"]["action"] == "emergency_response"
        assert car["status"] == "emergency"

    def test_unsupported_version_raises(self):
        data = world_to_dict(_busy_world())
        data["version"] = 99
        with pytest.raises(SnapshotError):
            world_from_dict(data)

    def test_missing_optional_sections_default(self):
        data = world_to_dict(_busy_world())
        del data["assets"], data["effects"], data["tick"]
        state = world_from_dict(data)
        assert state.assets == ()
        assert state.effects.shake == 0
        assert state.tick == 0

    def test_base_speed_defaults_to_speed(self):
        data = world_to_dict(replace(_busy_world(), assets=()))
        for agent in data["agents"]:
            del agent["baseSpeed"]
        state = world_from_dict(data)
        assert all(a.base_speed == a.speed for a in state.agents)
