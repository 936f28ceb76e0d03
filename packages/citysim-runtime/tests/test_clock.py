"""Tests for clock advancement and TickContext generation."""

import random

import pytest
from citysim_runtime.clock import Clock
from citysim_runtime.types import TickContext

_test_rng = random.Random(0)


def test_clock_initialization():
    clock = Clock(tps=10)
    assert clock.tps == 10
    assert clock.tick_number == 0
    assert abs(clock.dt - 0.1) < 1e-9


@pytest.mark.parametrize("tps", [0, -5])
def test_clock_rejects_non_positive_tps(tps):
    with pytest.raises(ValueError):
        Clock(tps=tps)


def test_advance_returns_new_tick_number():
    clock = Clock(tps=20)
    assert clock.advance() == 1
    assert clock.advance() == 2
    assert clock.tick_number == 2


def test_context_fields():
    clock = Clock(tps=20)
    clock.advance()
    clock.advance()
    ctx = clock.context(3, lambda: None, _test_rng)

    assert isinstance(ctx, TickContext)
    assert ctx.tick_number == 2
    assert ctx.epoch == 3
    assert abs(ctx.elapsed - 0.1) < 1e-9
    assert ctx.random is _test_rng


def test_context_is_frozen():
    ctx = Clock(tps=20).context(0, lambda: None, _test_rng)
    with pytest.raises(AttributeError):
        ctx.tick_number = 5


def test_reset():
    clock = Clock(tps=20)
    for _ in range(4):
        clock.advance()
    clock.reset()
    assert clock.tick_number == 0
    assert clock.advance() == 1
