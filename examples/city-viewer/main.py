"""City-Viewer - top-down view of the city simulation with a Director.

Runs the engine at a fixed tick rate and renders every snapshot. With
``--headless`` the simulation runs paced for ``--ticks`` ticks and prints
a summary instead of opening a window.

Controls:
  Space       Pause / Resume
  R           Reset (regenerate the city, paused)
  A           Accident at mouse cursor
  C           Congestion at mouse cursor
  E           Emergency at mouse cursor
  S           Shake the world
  Escape      Quit
"""
from __future__ import annotations

import argparse
import logging
import random
import sys
from collections import Counter

from citysim import DirectorResponse, EventType, Position, SimConfig, trigger_event
from citysim_director import (
    DirectorConfig,
    DirectorSystem,
    LLMError,
    OpenAICompatibleClient,
    make_director_system,
    validate_endpoint,
)
from citysim_runtime import Simulation

from scripted import scripted_client

logger = logging.getLogger("city-viewer")

_EVENT_KEYS = {
    "a": EventType.ACCIDENT,
    "c": EventType.CONGESTION,
    "e": EventType.EMERGENCY,
}


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="City-Viewer - citysim visual demo")
    p.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    p.add_argument("--grid", type=int, default=40, help="Grid size (10-100, default: 40)")
    p.add_argument("--cars", type=int, default=40, help="Car count (default: 40)")
    p.add_argument("--npcs", type=int, default=60, help="Pedestrian count (default: 60)")
    p.add_argument("--buildings", type=int, default=80, help="Building count (default: 80)")
    p.add_argument("--tps", type=int, default=10, help="Ticks per second (default: 10)")
    p.add_argument("--director", choices=("off", "mock", "http"), default="mock",
                   help="Director backend (default: mock)")
    p.add_argument("--scenario", type=str, default="",
                   help="Free-text scenario prompt for the Director")
    p.add_argument("--headless", action="store_true", help="Run without a window")
    p.add_argument("--ticks", type=int, default=300, help="Ticks to run headless (default: 300)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = p.parse_args()
    args.grid = max(10, min(100, args.grid))
    return args


def build_director(args: argparse.Namespace, sim_config: SimConfig) -> DirectorSystem | None:
    if args.director == "off":
        return None
    config = DirectorConfig.from_env()
    if args.director == "http":
        try:
            client = OpenAICompatibleClient(
                config.api_key, config.model, config.base_url,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=config.query_timeout,
            )
        except LLMError as exc:
            logger.warning("director disabled: %s", exc)
            return None
        if not validate_endpoint(client):
            logger.warning("director endpoint %s did not answer /models", config.base_url)
    else:
        client = scripted_client()
    return make_director_system(client, config, sim_config, args.scenario)


def stats_lines(sim: Simulation) -> list[str]:
    state = sim.state
    statuses = Counter(a.status.value for a in state.agents)
    roads = Counter(r.status.value for r in state.roads)
    lines = [
        f"tick {state.tick}  epoch {sim.epoch}",
        "running" if sim.running else "paused",
        f"agents {len(state.agents)}",
    ]
    lines += [f"  {name} {count}" for name, count in sorted(statuses.items())]
    lines += [
        f"congested roads {roads.get('congested', 0)}",
        f"blocked roads {roads.get('blocked', 0)}",
        f"events {len(state.events)}",
        f"assets {len(state.assets)}",
        f"shake {state.effects.shake}",
    ]
    return lines


def run_headless(sim: Simulation, director: DirectorSystem | None, ticks: int) -> None:
    rng = random.Random(sim.seed)

    def script(state, ctx):
        # A few incidents so the Director has something to react to.
        if ctx.tick_number in (ticks // 4, ticks // 2):
            state = trigger_event(state, rng.choice(list(EventType)), rng=ctx.random, config=sim.config)
        if ctx.tick_number >= ticks:
            ctx.request_stop()
        return state

    sim.add_system(script)
    sim.run_forever()
    for line in stats_lines(sim):
        print(line)
    if director is not None and director.last_strategy:
        print(f"director: {director.last_strategy}")


def run_window(sim: Simulation, director: DirectorSystem | None) -> None:
    import pygame

    from ui.constants import COLOR_BG, FPS, SIDEBAR_W, compute_layout
    from ui.render import draw_sidebar, draw_world, shake_offset

    layout = compute_layout(sim.state.grid_size)
    tile_size = layout["tile_size"]
    grid_px = layout["grid_px"]

    pygame.init()
    screen = pygame.display.set_mode((layout["screen_w"], layout["screen_h"]))
    pygame.display.set_caption("City-Viewer - citysim demo")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 12)
    jitter = random.Random()

    tick_interval = sim.clock.dt
    accumulator = 0.0
    sim.resume()
    running = True

    while running:
        dt = clock.tick(FPS) / 1000.0
        if sim.running:
            accumulator += dt

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                key = pygame.key.name(event.key)
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    if sim.running:
                        sim.pause()
                    else:
                        sim.resume()
                elif key == "r":
                    sim.reset()
                    accumulator = 0.0
                elif key == "s":
                    sim.apply_director_response(DirectorResponse(shake=True), sim.epoch)
                elif key in _EVENT_KEYS:
                    mx, my = pygame.mouse.get_pos()
                    if mx < grid_px:
                        pos = Position(mx // tile_size, my // tile_size)
                        sim.trigger_event(_EVENT_KEYS[key], pos)

        while accumulator >= tick_interval:
            sim.step()
            accumulator -= tick_interval
        # Drain excess accumulator to prevent spiral of death
        if accumulator > tick_interval * 4:
            accumulator = tick_interval * 2

        screen.fill(COLOR_BG)
        offset = shake_offset(sim.state.effects.shake, sim.config.shake_duration, jitter)
        draw_world(screen, sim.state, tile_size, offset)
        strategy = director.last_strategy if director is not None else None
        draw_sidebar(screen, font, stats_lines(sim), strategy, grid_px, SIDEBAR_W)
        pygame.display.flip()

    pygame.quit()


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sim_config = SimConfig(
        grid_size=args.grid,
        building_count=args.buildings,
        car_count=args.cars,
        npc_count=args.npcs,
    )
    sim = Simulation(config=sim_config, tps=args.tps, seed=args.seed)
    director = build_director(args, sim_config)
    if director is not None:
        sim.add_system(director)

    try:
        if args.headless:
            run_headless(sim, director, args.ticks)
        else:
            run_window(sim, director)
    finally:
        if director is not None:
            director.shutdown()

    sys.exit()


if __name__ == "__main__":
    main()
