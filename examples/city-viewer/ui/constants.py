"""Layout, color, and rendering constants."""
from __future__ import annotations

# Layout
SIDEBAR_W = 220
FPS = 60
SHAKE_PX = 6

# World colors
COLOR_BG = (20, 20, 30)
COLOR_GROUND = (34, 38, 46)
COLOR_SIDEBAR_BG = (25, 25, 35)
COLOR_TEXT = (200, 200, 200)
COLOR_TEXT_DIM = (130, 130, 140)

ROAD_COLORS: dict[str, tuple[int, int, int]] = {
    "open": (70, 70, 80),
    "congested": (230, 170, 40),
    "blocked": (220, 50, 50),
}

EVENT_COLORS: dict[str, tuple[int, int, int]] = {
    "accident": (255, 60, 60),
    "congestion": (255, 190, 40),
    "emergency": (80, 160, 255),
}

ASSET_COLORS: dict[str, tuple[int, int, int]] = {
    "fire": (255, 100, 20),
    "smoke": (140, 140, 140),
    "barrier": (240, 240, 240),
    "cone": (255, 140, 0),
    "ambulance": (255, 255, 255),
    "fire_truck": (200, 20, 20),
    "police_car": (40, 80, 220),
    "drone": (180, 120, 255),
}


def hex_color(value: str) -> tuple[int, int, int]:
    """Convert ``#RRGGBB`` to an RGB tuple."""
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def compute_layout(grid_size: int) -> dict[str, int]:
    """Compute layout dimensions from grid size."""
    tile_size = max(6, min(24, 720 // grid_size))
    grid_px = grid_size * tile_size
    return {
        "tile_size": tile_size,
        "grid_px": grid_px,
        "screen_w": grid_px + SIDEBAR_W,
        "screen_h": grid_px,
    }
