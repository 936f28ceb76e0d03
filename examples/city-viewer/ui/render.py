"""Top-down rendering of a world snapshot."""
from __future__ import annotations

import random

import pygame

from citysim import WorldState
from ui.constants import (
    ASSET_COLORS,
    COLOR_GROUND,
    COLOR_SIDEBAR_BG,
    COLOR_TEXT,
    COLOR_TEXT_DIM,
    EVENT_COLORS,
    ROAD_COLORS,
    SHAKE_PX,
    hex_color,
)


def shake_offset(shake: int, duration: int, rng: random.Random) -> tuple[int, int]:
    """Decaying random jitter for the remaining shake ticks."""
    if shake <= 0 or duration <= 0:
        return 0, 0
    amp = SHAKE_PX * min(1.0, shake / duration)
    return round(rng.uniform(-amp, amp)), round(rng.uniform(-amp, amp))


def draw_world(
    surface: pygame.Surface,
    state: WorldState,
    tile_size: int,
    offset: tuple[int, int] = (0, 0),
) -> None:
    """Draw roads, buildings, events, assets and agents."""
    ox, oy = offset
    half = tile_size // 2
    grid_px = state.grid_size * tile_size
    surface.fill(COLOR_GROUND, pygame.Rect(0, 0, grid_px, grid_px))

    def px(x: float, y: float) -> tuple[int, int]:
        return int(x * tile_size) + half + ox, int(y * tile_size) + half + oy

    for road in state.roads:
        pygame.draw.line(
            surface, ROAD_COLORS[road.status.value],
            px(road.start.x, road.start.y), px(road.end.x, road.end.y), 1,
        )

    for b in state.buildings:
        side = max(2, int(b.size * tile_size))
        rect = pygame.Rect(0, 0, side, side)
        rect.center = px(b.position.x, b.position.y)
        pygame.draw.rect(surface, hex_color(b.color), rect)

    for event in state.events:
        pygame.draw.circle(
            surface, EVENT_COLORS[event.type.value],
            px(event.position.x, event.position.y), int(1.5 * tile_size), 1,
        )

    for asset in state.assets:
        rect = pygame.Rect(0, 0, half, half)
        rect.center = px(asset.position.x, asset.position.y)
        pygame.draw.rect(surface, ASSET_COLORS[asset.kind.value], rect)

    for agent in state.agents:
        radius = max(2, tile_size // 4) if agent.type.value == "car" else max(1, tile_size // 6)
        pygame.draw.circle(
            surface, hex_color(agent.color), px(agent.position.x, agent.position.y), radius,
        )


def draw_sidebar(
    surface: pygame.Surface,
    font: pygame.font.Font,
    lines: list[str],
    strategy: str | None,
    x: int,
    width: int,
) -> None:
    """Stats and the latest Director strategy."""
    pygame.draw.rect(surface, COLOR_SIDEBAR_BG, pygame.Rect(x, 0, width, surface.get_height()))
    y = 10
    for line in lines:
        surface.blit(font.render(line, True, COLOR_TEXT), (x + 10, y))
        y += 16
    if strategy:
        y += 10
        surface.blit(font.render("Director:", True, COLOR_TEXT), (x + 10, y))
        y += 16
        for chunk in _wrap(strategy, 26):
            surface.blit(font.render(chunk, True, COLOR_TEXT_DIM), (x + 10, y))
            y += 14


def _wrap(text: str, width: int) -> list[str]:
    words, lines, line = text.split(), [], ""
    for word in words:
        if line and len(line) + 1 + len(word) > width:
            lines.append(line)
            line = word
        else:
            line = f"{line} {word}".strip()
    if line:
        lines.append(line)
    return lines
