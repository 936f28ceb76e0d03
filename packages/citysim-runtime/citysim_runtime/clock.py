"""Fixed-timestep tick counter for the simulation host."""

import random
from typing import Callable

from citysim_runtime.types import TickContext


class Clock:
    """Counts ticks at ``tps`` and builds the per-tick context for systems.

    The counter restarts from zero on a world reset; the epoch is owned by
    the host and passed in when a context is built.
    """

    def __init__(self, tps: int) -> None:
        if tps <= 0:
            raise ValueError("tps must be positive")
        self._tps = tps
        self._dt = 1.0 / tps
        self._ticks = 0

    @property
    def tps(self) -> int:
        return self._tps

    @property
    def dt(self) -> float:
        """Seconds of simulated time per tick."""
        return self._dt

    @property
    def tick_number(self) -> int:
        return self._ticks

    def advance(self) -> int:
        self._ticks += 1
        return self._ticks

    def context(
        self, epoch: int, stop_fn: Callable[[], None], rng: random.Random
    ) -> TickContext:
        """Context for the tick just advanced to, tagged with ``epoch``."""
        return TickContext(
            tick_number=self._ticks,
            dt=self._dt,
            elapsed=self._ticks * self._dt,
            epoch=epoch,
            request_stop=stop_fn,
            random=rng,
        )

    def reset(self) -> None:
        self._ticks = 0
