"""Director system: periodic planner queries run off the tick thread.

Provides the DirectorSystem class and make_director_system() factory. The
system keeps at most one planner request in flight, harvests the finished
future on the tick thread, and applies the parsed response to the world
only if no pause or reset happened since the request was sent.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from citysim import (
    DEFAULT_CONFIG,
    DirectorResponse,
    SimConfig,
    WorldState,
    apply_director_response,
)

from citysim_director.client import LLMClient
from citysim_director.config import DirectorConfig
from citysim_director.parsers import DirectorResponseError, parse_director_response
from citysim_director.prompt import SYSTEM_PROMPT, build_user_message

if TYPE_CHECKING:
    from citysim_runtime import TickContext

logger = logging.getLogger(__name__)

QueryCallback = Callable[[int, int], None]
ResponseCallback = Callable[[DirectorResponse, float, int], None]
ErrorCallback = Callable[[str, str, int], None]


@dataclass(frozen=True)
class _PendingQuery:
    """Internal record of the in-flight planner query."""

    future: Future[str]
    submitted_at: float
    submitted_tick: int
    epoch: int


class DirectorSystem:
    """Periodic Director planner for the simulation host.

    Callable object satisfying the runtime ``System`` signature. Each tick
    runs three phases in order: harvest a finished query, time out a slow
    one, and dispatch a new one when the interval comes round.

    Use ``make_director_system(client)`` to create an instance.
    """

    def __init__(
        self,
        client: LLMClient,
        config: DirectorConfig | None = None,
        sim_config: SimConfig = DEFAULT_CONFIG,
        scenario_prompt: str = "",
    ) -> None:
        self._client = client
        self._config = config if config is not None else DirectorConfig()
        self._sim_config = sim_config
        self.scenario_prompt = scenario_prompt
        self._executor = ThreadPoolExecutor(max_workers=1)
        self._pending: _PendingQuery | None = None
        # A timed-out request still occupies the single worker until it returns.
        self._abandoned: Future[str] | None = None
        self._last_strategy: str | None = None
        self._on_query: list[QueryCallback] = []
        self._on_response: list[ResponseCallback] = []
        self._on_error: list[ErrorCallback] = []
        self._shutdown = False

    @property
    def config(self) -> DirectorConfig:
        return self._config

    @property
    def pending(self) -> bool:
        """True while a planner request is outstanding."""
        return self._pending is not None

    @property
    def last_strategy(self) -> str | None:
        """Strategy summary from the most recently applied response."""
        return self._last_strategy

    def on_query(self, callback: QueryCallback) -> None:
        """Register ``callback(prompt_size, tick)`` fired on dispatch."""
        self._on_query.append(callback)

    def on_response(self, callback: ResponseCallback) -> None:
        """Register ``callback(response, latency, tick)`` fired on apply."""
        self._on_response.append(callback)

    def on_error(self, callback: ErrorCallback) -> None:
        """Register ``callback(error_type, message, tick)``.

        Error types: ``query_error``, ``parse_error``, ``timeout``.
        """
        self._on_error.append(callback)

    def __call__(self, state: WorldState, ctx: TickContext) -> WorldState:
        if self._shutdown:
            return state

        state = self._phase_harvest(state, ctx)
        self._phase_timeout(ctx)
        self._phase_dispatch(state, ctx)
        return state

    def shutdown(self) -> None:
        """Shut down the worker and drop the pending query.

        After shutdown, subsequent calls return the state unchanged.
        """
        self._shutdown = True
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._pending = None
        self._abandoned = None

    # ------------------------------------------------------------------
    # Phase 1: Harvest
    # ------------------------------------------------------------------

    def _phase_harvest(self, state: WorldState, ctx: TickContext) -> WorldState:
        pq = self._pending
        if pq is None or not pq.future.done():
            return state
        self._pending = None

        if pq.epoch != ctx.epoch:
            logger.info(
                "discarding director response from epoch %d (now %d)",
                pq.epoch, ctx.epoch,
            )
            return state

        exc = pq.future.exception()
        if exc is not None:
            logger.warning("director query failed: %s", exc)
            self._fire_on_error("query_error", str(exc), ctx.tick_number)
            return state

        text = pq.future.result()
        try:
            response = parse_director_response(text)
        except DirectorResponseError as parse_exc:
            logger.warning("director response rejected: %s", parse_exc)
            self._fire_on_error("parse_error", str(parse_exc), ctx.tick_number)
            return state

        latency = time.monotonic() - pq.submitted_at
        if response.strategy is not None:
            self._last_strategy = response.strategy
        logger.info(
            "applying director response: %d instructions, %d asset ops (%.2fs)",
            len(response.instructions), len(response.asset_ops), latency,
        )
        state = apply_director_response(state, response, self._sim_config)
        self._fire_on_response(response, latency, ctx.tick_number)
        return state

    # ------------------------------------------------------------------
    # Phase 2: Timeout
    # ------------------------------------------------------------------

    def _phase_timeout(self, ctx: TickContext) -> None:
        pq = self._pending
        if pq is None:
            return
        timeout = self._config.query_timeout
        if time.monotonic() - pq.submitted_at <= timeout:
            return

        if not pq.future.cancel():
            self._abandoned = pq.future
        self._pending = None
        message = f"Query from tick {pq.submitted_tick} timed out after {timeout}s"
        logger.warning("director %s", message)
        self._fire_on_error(
            "timeout", message, ctx.tick_number,
        )

    # ------------------------------------------------------------------
    # Phase 3: Dispatch
    # ------------------------------------------------------------------

    def _phase_dispatch(self, state: WorldState, ctx: TickContext) -> None:
        if (ctx.tick_number - 1) % self._config.interval_ticks != 0:
            return
        if self._pending is not None:
            logger.debug("director query still in flight, skipping tick %d", ctx.tick_number)
            return
        if self._abandoned is not None:
            if not self._abandoned.done():
                logger.debug("timed-out director query still running, skipping")
                return
            self._abandoned = None

        user_message = build_user_message(state, self.scenario_prompt, self._config)
        future: Future[str] = self._executor.submit(
            self._client.query, SYSTEM_PROMPT, user_message,
        )
        self._pending = _PendingQuery(
            future=future,
            submitted_at=time.monotonic(),
            submitted_tick=ctx.tick_number,
            epoch=ctx.epoch,
        )
        logger.info("director query dispatched at tick %d", ctx.tick_number)
        self._fire_on_query(len(SYSTEM_PROMPT) + len(user_message), ctx.tick_number)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _fire_on_query(self, prompt_size: int, tick: int) -> None:
        for cb in self._on_query:
            try:
                cb(prompt_size, tick)
            except Exception:
                logger.exception("director on_query callback error")

    def _fire_on_response(
        self, response: DirectorResponse, latency: float, tick: int,
    ) -> None:
        for cb in self._on_response:
            try:
                cb(response, latency, tick)
            except Exception:
                logger.exception("director on_response callback error")

    def _fire_on_error(self, error_type: str, error_msg: str, tick: int) -> None:
        for cb in self._on_error:
            try:
                cb(error_type, error_msg, tick)
            except Exception:
                logger.exception("director on_error callback error")


def make_director_system(
    client: LLMClient,
    config: DirectorConfig | None = None,
    sim_config: SimConfig = DEFAULT_CONFIG,
    scenario_prompt: str = "",
) -> DirectorSystem:
    """Create a Director system for ``Simulation.add_system()``.

    Call ``system.shutdown()`` when the simulation stops to clean up the
    worker thread.
    """
    return DirectorSystem(client, config, sim_config, scenario_prompt)
