"""End-to-end tests for the per-tick world update and Director responses."""
from __future__ import annotations

import random
from dataclasses import replace

from citysim import (
    Agent,
    AgentStatus,
    AgentType,
    AssetKind,
    AssetOp,
    AssetOpType,
    DirectorAction,
    DirectorInstruction,
    DirectorResponse,
    EventType,
    Position,
    SimConfig,
    add_asset,
    apply_director_response,
    create_initial_world,
    trigger_event,
    update_world,
)


def _empty_world(grid_size: int = 10):
    config = SimConfig(grid_size=grid_size, building_count=0, car_count=0, npc_count=0)
    return create_initial_world(config, random.Random(0))


def _car(agent_id: str, position: Position, destination: Position | None,
         speed: float = 1.0) -> Agent:
    return Agent(
        id=agent_id,
        type=AgentType.CAR,
        position=position,
        destination=destination,
        status=AgentStatus.MOVING,
        speed=speed,
        base_speed=speed,
        color="#00D9FF",
    )


def _run_until_idle(state, max_ticks: int = 2000):
    for _ in range(max_ticks):
        state = update_world(state)
        if all(a.status is AgentStatus.IDLE for a in state.agents):
            break
    return state


class TestScenario:
    def test_car_crosses_small_grid(self):
        state = replace(_empty_world(), agents=(_car("car-1", Position(0, 0), Position(0, 9)),))
        state = _run_until_idle(state)

        car = state.agents[0]
        assert car.status is AgentStatus.IDLE
        assert car.position == Position(0, 9)
        assert car.destination is None

    def test_slow_pedestrian_reaches_corner(self):
        npc = replace(
            _car("npc-1", Position(2.3, 7.6), Position(8, 1), speed=0.3),
            type=AgentType.NPC,
        )
        state = _run_until_idle(replace(_empty_world(), agents=(npc,)), max_ticks=5000)
        assert state.agents[0].position == Position(8, 1)

    def test_generated_world_keeps_moving(self):
        config = SimConfig(grid_size=20, building_count=20, car_count=5, npc_count=5)
        state = create_initial_world(config, random.Random(7))
        before = [a.position for a in state.agents]
        for _ in range(5):
            state = update_world(state, config)
        after = [a.position for a in state.agents]
        assert before != after
        assert all(a.position.in_bounds(config.grid_size) for a in state.agents)

    def test_accident_stops_car_until_rerouted(self):
        state = replace(_empty_world(), agents=(_car("car-1", Position(0, 0), Position(0, 9)),))
        for _ in range(3):
            state = update_world(state)
        state = trigger_event(state, EventType.ACCIDENT, Position(0, 0))
        frozen = state.agents[0]
        assert frozen.status is AgentStatus.STOPPED

        state = update_world(state)
        assert state.agents[0] == frozen

        reroute = DirectorInstruction("car-1", DirectorAction.REROUTE, Position(5, 5))
        state = apply_director_response(state, DirectorResponse(instructions=(reroute,)))
        state = _run_until_idle(state)
        assert state.agents[0].position == Position(5, 5)


class TestTickBookkeeping:
    def test_tick_counter_advances(self):
        state = update_world(update_world(_empty_world()))
        assert state.tick == 2

    def test_assets_and_shake_count_down(self):
        state = add_asset(_empty_world(), AssetKind.FIRE, Position(1, 1), ttl=2)
        state = apply_director_response(state, DirectorResponse(shake=True))
        shake = state.effects.shake

        state = update_world(state)
        assert state.assets[0].ttl == 1
        assert state.effects.shake == shake - 1

        state = update_world(state)
        assert state.assets == ()


class TestDirectorResponse:
    def test_full_response(self):
        state = replace(_empty_world(), agents=(_car("car-1", Position(0, 0), None),))
        response = DirectorResponse(
            instructions=(DirectorInstruction("car-1", DirectorAction.PATROL, Position(3, 3)),),
            asset_ops=(AssetOp(AssetOpType.ADD, AssetKind.BARRIER, Position(4, 4)),),
            shake=True,
            strategy="Seal off the crossing",
        )
        state = apply_director_response(state, response)

        assert state.agents[0].destination == Position(3, 3)
        assert [a.kind for a in state.assets] == [AssetKind.BARRIER]
        assert state.effects.shake == SimConfig().shake_duration

    def test_empty_response_changes_nothing(self):
        world = _empty_world()
        assert apply_director_response(world, DirectorResponse()) == world
        assert apply_director_response(world, None) is world

    def test_stale_ids_after_reset_are_noops(self):
        world = _empty_world()
        response = DirectorResponse(
            instructions=(DirectorInstruction("car-77", DirectorAction.STOP),),
        )
        assert apply_director_response(world, response).agents == world.agents
