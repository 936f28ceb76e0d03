"""Offline stand-in planner for running the Director without an API key.

Reads the event lines from the prompt and answers the way a cautious
dispatcher would: an ambulance and fire at each accident, cones around
congestion, and a shake whenever something is on fire.
"""
from __future__ import annotations

import json
import re

from citysim_director import MockClient

_EVENT_RE = re.compile(r"^- (accident|congestion|emergency) at \((\d+), (\d+)\)", re.MULTILINE)
_AGENT_RE = re.compile(r"^- (car-\d+) \(car\)", re.MULTILINE)


def plan(system_prompt: str, user_message: str) -> str:
    events = [(kind, int(x), int(y)) for kind, x, y in _EVENT_RE.findall(user_message)]
    cars = _AGENT_RE.findall(user_message)

    instructions = []
    ops = []
    for i, (kind, x, y) in enumerate(events[-3:]):
        where = {"x": x, "y": y}
        if kind == "accident":
            ops.append({"op": "add", "kind": "fire", "position": where, "ttl": 80})
            ops.append({"op": "add", "kind": "ambulance", "position": where, "ttl": 120})
        elif kind == "congestion":
            ops.append({"op": "add", "kind": "cone", "position": where})
        if i < len(cars):
            instructions.append({
                "agentId": cars[i],
                "action": "emergency_response" if kind == "emergency" else "reroute",
                "target": where,
                "priority": "high" if kind != "congestion" else "medium",
                "reasoning": f"respond to {kind}",
            })

    burning = any(op.get("kind") == "fire" for op in ops)
    strategy = (
        f"Responding to {len(events)} events" if events else "All quiet, normal traffic"
    )
    return json.dumps({
        "instructions": instructions,
        "assetsOps": ops,
        "shake": burning,
        "globalStrategy": strategy,
    })


def scripted_client(latency: float = 0.3) -> MockClient:
    return MockClient(responses=plan, latency=latency)
