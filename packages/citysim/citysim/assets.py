"""Transient world assets and the world-shake countdown."""
from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Sequence

from citysim.config import DEFAULT_CONFIG, SimConfig
from citysim.types import (
    Asset,
    AssetKind,
    AssetOp,
    AssetOpType,
    Position,
    WorldEffects,
    WorldState,
)

logger = logging.getLogger(__name__)


def add_asset(
    state: WorldState,
    kind: AssetKind,
    position: Position,
    ttl: int | None = None,
    config: SimConfig = DEFAULT_CONFIG,
    *,
    permanent: bool = False,
) -> WorldState:
    """Add one asset with a fresh id.

    A missing ``ttl`` uses the configured default; ``permanent`` assets never
    expire.
    """
    if not position.in_bounds(state.grid_size):
        logger.debug("ignoring out-of-bounds %s at %s", kind.value, position)
        return state
    if permanent:
        ttl = None
    elif ttl is None:
        ttl = config.default_asset_ttl
    asset = Asset(
        id=f"asset-{uuid.uuid4().hex[:12]}",
        kind=kind,
        position=position,
        ttl=ttl,
    )
    return replace(state, assets=state.assets + (asset,))


def remove_assets(
    state: WorldState,
    kind: AssetKind | None = None,
    position: Position | None = None,
    radius: float | None = None,
    config: SimConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Remove assets matching every given filter.

    ``kind`` matches by category; ``position`` matches assets within
    ``radius`` (default from config). With no filter at all nothing is removed.
    """
    if kind is None and position is None:
        return state
    reach = config.default_removal_radius if radius is None else radius

    def doomed(asset: Asset) -> bool:
        if kind is not None and asset.kind is not kind:
            return False
        if position is not None and asset.position.distance_to(position) > reach:
            return False
        return True

    kept = tuple(a for a in state.assets if not doomed(a))
    if len(kept) == len(state.assets):
        return state
    return replace(state, assets=kept)


def apply_asset_ops(
    state: WorldState,
    ops: Sequence[AssetOp] | None,
    config: SimConfig = DEFAULT_CONFIG,
) -> WorldState:
    """Apply add/remove operations in order."""
    for op in ops or ():
        if op.op is AssetOpType.ADD:
            if op.kind is None or op.position is None:
                logger.debug("skipping incomplete add: %s", op)
                continue
            state = add_asset(state, op.kind, op.position, op.ttl, config, permanent=op.permanent)
        elif op.op is AssetOpType.REMOVE:
            state = remove_assets(state, op.kind, op.position, op.radius, config)
    return state


def tick_assets(state: WorldState) -> WorldState:
    """Count every finite TTL down by one and drop assets that reach zero."""
    if not state.assets:
        return state
    assets: list[Asset] = []
    for asset in state.assets:
        if asset.ttl is None:
            assets.append(asset)
            continue
        remaining = asset.ttl - 1
        if remaining > 0:
            assets.append(replace(asset, ttl=remaining))
    return replace(state, assets=tuple(assets))


def trigger_shake(state: WorldState, config: SimConfig = DEFAULT_CONFIG) -> WorldState:
    return replace(state, effects=replace(state.effects, shake=config.shake_duration))


def clear_shake(state: WorldState) -> WorldState:
    return replace(state, effects=WorldEffects())


def tick_effects(state: WorldState) -> WorldState:
    if state.effects.shake <= 0:
        return state
    return replace(state, effects=replace(state.effects, shake=state.effects.shake - 1))
