"""Simulation - owns the current world snapshot and drives the tick loop."""

from __future__ import annotations

import logging
import os
import random
import time
from typing import Callable

from citysim import (
    DirectorResponse,
    EventType,
    Position,
    SimConfig,
    SimulationEvent,
    WorldState,
    apply_director_response,
    apply_event,
    build_event,
    create_initial_world,
    update_world,
)

from citysim_runtime.clock import Clock
from citysim_runtime.types import System, TickContext

logger = logging.getLogger(__name__)

Hook = Callable[["Simulation"], None]


class Simulation:
    """Single-writer host for one city.

    Every transition (ticks, manual events, Director responses, resets) goes
    through this object in the order the caller schedules them, so the engine
    never sees concurrent mutation of a snapshot.

    The epoch is bumped on every pause and reset. Work started against an
    older epoch (typically a Director query) must be discarded.
    """

    def __init__(
        self,
        config: SimConfig | None = None,
        tps: int = 10,
        seed: int | None = None,
        world: WorldState | None = None,
    ) -> None:
        self._config = config if config is not None else SimConfig()
        self._clock = Clock(tps)

        if seed is None:
            seed = int.from_bytes(os.urandom(8))
        self._seed = seed
        self._rng = random.Random(seed)

        self._state = world if world is not None else create_initial_world(self._config, self._rng)
        self._systems: list[System] = [self._update]
        self._start_hooks: list[Hook] = []
        self._stop_hooks: list[Hook] = []
        self._reset_hooks: list[Hook] = []
        self._running = False
        self._stop_requested = False
        self._epoch = 0

    @property
    def state(self) -> WorldState:
        return self._state

    @property
    def config(self) -> SimConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def running(self) -> bool:
        return self._running

    def add_system(self, system: System) -> None:
        """Append a system; it runs after the world update on every tick."""
        self._systems.append(system)

    def on_start(self, hook: Hook) -> None:
        self._start_hooks.append(hook)

    def on_stop(self, hook: Hook) -> None:
        self._stop_hooks.append(hook)

    def on_reset(self, hook: Hook) -> None:
        self._reset_hooks.append(hook)

    # --- Lifecycle ---

    def pause(self) -> None:
        if self._running:
            self._running = False
            self._epoch += 1
            logger.info("simulation paused at tick %d", self._clock.tick_number)

    def resume(self) -> None:
        if not self._running:
            self._running = True
            logger.info("simulation resumed at tick %d", self._clock.tick_number)

    def stop(self) -> None:
        self._stop_requested = True

    def reset(self) -> None:
        """Regenerate the world from scratch and pause."""
        self._state = create_initial_world(self._config, self._rng)
        self._clock.reset()
        self._running = False
        self._epoch += 1
        logger.info("simulation reset (epoch %d)", self._epoch)
        for hook in self._reset_hooks:
            hook(self)

    # --- Ticking ---

    def _update(self, state: WorldState, ctx: TickContext) -> WorldState:
        return update_world(state, self._config)

    def _context(self) -> TickContext:
        return self._clock.context(self._epoch, self.stop, self._rng)

    def _tick(self) -> None:
        self._clock.advance()
        ctx = self._context()
        for system in self._systems:
            self._state = system(self._state, ctx)
            if self._stop_requested:
                break

    def step(self) -> None:
        """Advance exactly one tick, whether or not the loop is running."""
        self._stop_requested = False
        self._tick()

    def run(self, n: int) -> None:
        """Run ``n`` ticks back to back, stopping early on stop or pause."""
        self._stop_requested = False
        self.resume()
        for hook in self._start_hooks:
            hook(self)

        for _ in range(n):
            self._tick()
            if self._stop_requested or not self._running:
                break

        for hook in self._stop_hooks:
            hook(self)

    def run_forever(self) -> None:
        """Tick at the clock rate until ``stop()``. Paused time is slept away."""
        self._stop_requested = False
        self.resume()
        for hook in self._start_hooks:
            hook(self)

        dt = self._clock.dt
        while not self._stop_requested:
            start = time.monotonic()
            if self._running:
                self._tick()
            if self._stop_requested:
                break
            elapsed = time.monotonic() - start
            sleep_time = dt - elapsed
            if sleep_time > 0:
                time.sleep(sleep_time)

        for hook in self._stop_hooks:
            hook(self)

    # --- External input ---

    def trigger_event(
        self, event_type: EventType, position: Position | None = None
    ) -> SimulationEvent:
        """Create one event (random lattice point by default) and apply it now."""
        event = build_event(event_type, self._state.grid_size, position, self._rng)
        self._state = apply_event(self._state, event, self._config)
        logger.info("event %s: %s", event.type.value, event.description)
        return event

    def apply_director_response(self, response: DirectorResponse, epoch: int) -> bool:
        """Apply a planner response computed during ``epoch``.

        Returns False, leaving the world untouched, when the simulation has
        been paused or reset since.
        """
        if epoch != self._epoch:
            logger.info("discarding director response from stale epoch %d", epoch)
            return False
        self._state = apply_director_response(self._state, response, self._config)
        return True
