"""Prompt assembly for the Director planner."""
from __future__ import annotations

from citysim import AgentStatus, RoadStatus, WorldState

from citysim_director.config import DirectorConfig

SYSTEM_PROMPT = """You are the Director AI for a smart city simulation of cars and pedestrians (NPCs) on a grid of roads.
Coordinate the agents so the city keeps moving and responds to events.

RULES:
1. Return ONLY valid JSON, no markdown, no explanations.
2. Priorities: emergency > accident > congestion > normal traffic.
3. Blocked roads: reroute affected vehicles. Accidents: stop nearby vehicles.
   Emergencies: high priority response, clear the area.
4. Only reference agent ids that appear in the state. Targets are integer grid points.

Return format:
{
  "instructions": [
    {
      "agentId": "string",
      "action": "move|stop|reroute|emergency_response|patrol",
      "target": {"x": number, "y": number},
      "priority": "low|medium|high",
      "reasoning": "brief explanation"
    }
  ],
  "assetsOps": [
    {
      "op": "add|remove",
      "kind": "fire|smoke|barrier|cone|ambulance|fire_truck|police_car|drone",
      "position": {"x": number, "y": number},
      "ttl": number,
      "permanent": false,
      "radius": number
    }
  ],
  "shake": false,
  "globalStrategy": "overall coordination plan"
}"""

_ROUTINE = (AgentStatus.MOVING,)


def _fmt(value: float) -> str:
    return f"{value:.1f}"


def summarize_agents(state: WorldState, limit: int) -> list[str]:
    """Agents with a non-routine status first, then the rest, up to ``limit``."""
    ordered = sorted(state.agents, key=lambda a: a.status in _ROUTINE)
    lines = []
    for agent in ordered[:limit]:
        dest = (
            f"going to ({_fmt(agent.destination.x)}, {_fmt(agent.destination.y)})"
            if agent.destination is not None
            else "no destination"
        )
        lines.append(
            f"- {agent.id} ({agent.type.value}): at ({_fmt(agent.position.x)}, "
            f"{_fmt(agent.position.y)}), status: {agent.status.value}, {dest}"
        )
    return lines


def build_user_message(
    state: WorldState,
    scenario_prompt: str = "",
    config: DirectorConfig | None = None,
) -> str:
    """Render a sampled view of ``state`` plus the scenario prompt."""
    if config is None:
        config = DirectorConfig()

    agent_lines = summarize_agents(state, config.max_agents)
    omitted = len(state.agents) - len(agent_lines)

    roads = [r for r in state.roads if r.status is not RoadStatus.OPEN][: config.max_roads]
    road_lines = [
        f"- Road from ({r.start.x}, {r.start.y}) to ({r.end.x}, {r.end.y}): {r.status.value}"
        for r in roads
    ]
    events = state.events[-config.max_events:] if config.max_events else ()
    event_lines = [
        f"- {e.type.value} at ({e.position.x}, {e.position.y}): {e.description}"
        for e in events
    ]
    asset_lines = [
        f"- {a.id} {a.kind.value} at ({_fmt(a.position.x)}, {_fmt(a.position.y)})"
        + (f", ttl {a.ttl}" if a.ttl is not None else "")
        for a in state.assets[: config.max_assets]
    ]

    parts = [
        f"Current city state (grid {state.grid_size}x{state.grid_size}, tick {state.tick}):",
        "",
        f"AGENTS ({len(state.agents)} total):",
        "\n".join(agent_lines) or "No agents",
    ]
    if omitted > 0:
        parts.append(f"... {omitted} more agents moving normally")
    parts += [
        "",
        "ACTIVE EVENTS:",
        "\n".join(event_lines) or "No active events",
        "",
        "ROAD STATUS:",
        "\n".join(road_lines) or "All roads open",
        "",
        "ASSETS:",
        "\n".join(asset_lines) or "No assets",
    ]
    if scenario_prompt:
        parts += ["", "SCENARIO:", scenario_prompt]
    parts += [
        "",
        "Analyze the situation and provide instructions to optimize city flow "
        "and respond to events.",
    ]
    return "\n".join(parts)
