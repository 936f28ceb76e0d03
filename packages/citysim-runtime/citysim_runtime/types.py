"""Shared type aliases for the simulation runtime."""

from __future__ import annotations

import random as _random
from dataclasses import dataclass
from typing import Callable

from citysim import WorldState


@dataclass(frozen=True, slots=True)
class TickContext:
    tick_number: int
    dt: float
    elapsed: float
    epoch: int
    request_stop: Callable[[], None]
    random: _random.Random


System = Callable[[WorldState, TickContext], WorldState]
