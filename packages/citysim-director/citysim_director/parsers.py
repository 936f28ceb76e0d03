"""Parse and validate planner output into a ``DirectorResponse``."""
from __future__ import annotations

import json
import logging
import re
from typing import Any

from citysim import (
    AssetKind,
    AssetOp,
    AssetOpType,
    DirectorAction,
    DirectorInstruction,
    DirectorResponse,
    Position,
    Priority,
)

logger = logging.getLogger(__name__)

# Pattern to match ```json ... ``` or ``` ... ``` code fences.
_CODE_FENCE_RE = re.compile(
    r"^\s*```(?:json)?\s*\n?(.*?)\n?\s*```\s*$",
    re.DOTALL,
)


class DirectorResponseError(ValueError):
    """The planner returned something that is not a response object."""


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping the text.

    Returns the inner content if fences are found, otherwise the original
    text unchanged.
    """
    match = _CODE_FENCE_RE.match(text)
    if match:
        return match.group(1)
    return text


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _position(data: Any) -> Position | None:
    if not isinstance(data, dict):
        return None
    x, y = _number(data.get("x")), _number(data.get("y"))
    if x is None or y is None:
        return None
    return Position(x, y)


def _enum(enum_cls, value: Any):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def parse_instruction(data: Any) -> DirectorInstruction | None:
    """Validate one instruction entry. Returns None if it must be dropped."""
    if not isinstance(data, dict):
        return None
    agent_id = data.get("agentId")
    action = _enum(DirectorAction, data.get("action"))
    if not isinstance(agent_id, str) or not agent_id or action is None:
        return None
    reasoning = data.get("reasoning")
    return DirectorInstruction(
        agent_id=agent_id,
        action=action,
        target=_position(data.get("target")),
        priority=_enum(Priority, data.get("priority")),
        reasoning=reasoning if isinstance(reasoning, str) else None,
    )


def parse_asset_op(data: Any) -> AssetOp | None:
    """Validate one asset operation entry. Returns None if it must be dropped.

    An ``add`` needs a known kind and a position. A ``remove`` accepts
    either filter; an unknown kind drops the whole entry rather than
    widening the removal.
    """
    if not isinstance(data, dict):
        return None
    op = _enum(AssetOpType, data.get("op"))
    if op is None:
        return None

    kind = None
    if data.get("kind") is not None:
        kind = _enum(AssetKind, data["kind"])
        if kind is None:
            return None
    position = _position(data.get("position"))

    ttl = data.get("ttl")
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
        ttl = None
    radius = _number(data.get("radius"))
    if radius is not None and radius < 0:
        radius = None

    if op is AssetOpType.ADD and (kind is None or position is None):
        return None
    return AssetOp(
        op=op,
        kind=kind,
        position=position,
        ttl=ttl,
        radius=radius,
        permanent=data.get("permanent") is True,
    )


def _entries(parsed: dict[str, Any], key: str) -> list[Any]:
    value = parsed.get(key)
    return value if isinstance(value, list) else []


def parse_director_response(text: str) -> DirectorResponse:
    """Parse a planner reply into a ``DirectorResponse``.

    Strips code fences and requires a top-level JSON object. Entries that
    fail validation are dropped individually; absent sections become empty.

    Raises:
        DirectorResponseError: If the text is not JSON or not an object.
    """
    cleaned = strip_code_fences(text.strip())
    try:
        parsed: Any = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise DirectorResponseError(f"Failed to parse Director response: {exc}") from exc
    if not isinstance(parsed, dict):
        raise DirectorResponseError(
            f"Expected JSON object, got {type(parsed).__name__}"
        )

    raw_instructions = _entries(parsed, "instructions")
    instructions = tuple(
        inst for inst in map(parse_instruction, raw_instructions) if inst is not None
    )
    raw_ops = _entries(parsed, "assetsOps")
    asset_ops = tuple(op for op in map(parse_asset_op, raw_ops) if op is not None)

    dropped = len(raw_instructions) - len(instructions) + len(raw_ops) - len(asset_ops)
    if dropped:
        logger.debug("dropped %d malformed director entries", dropped)

    strategy = parsed.get("globalStrategy")
    return DirectorResponse(
        instructions=instructions,
        asset_ops=asset_ops,
        shake=parsed.get("shake") is True,
        strategy=strategy if isinstance(strategy, str) else None,
    )
