"""Simulation configuration dataclass and palettes."""
from __future__ import annotations

from dataclasses import dataclass

from citysim.types import BuildingType

CAR_COLORS: tuple[str, ...] = (
    "#00D9FF", "#00FFB3", "#FF006E", "#FFBE0B",
    "#FB5607", "#8338EC", "#3A86FF", "#06FFA5",
)

NPC_COLORS: tuple[str, ...] = (
    "#FFD60A", "#FFC300", "#FF9500", "#FF006E", "#FB5607", "#8338EC",
)

BUILDING_ARCHETYPES: tuple[tuple[BuildingType, str], ...] = (
    (BuildingType.RESIDENTIAL, "#A8E6CF"),
    (BuildingType.COMMERCIAL, "#FFD3B6"),
    (BuildingType.INDUSTRIAL, "#FFAAA5"),
    (BuildingType.PARK, "#88DD88"),
    (BuildingType.HOSPITAL, "#FF6B6B"),
    (BuildingType.SCHOOL, "#4ECDC4"),
)


@dataclass(frozen=True)
class SimConfig:
    """Immutable tunables for world generation and the per-tick update.

    Attributes:
        grid_size: Lattice points per side; roads join adjacent points.
        building_count: Placement attempts for buildings (some may be
            rejected by the spacing check).
        building_spacing: Minimum distance between two buildings.
        car_count: Cars seeded at generation.
        npc_count: Pedestrians seeded at generation.
        agent_spacing: Preferred distance between a new agent and any
            building.
        placement_retries: Resamples allowed when a position is too close.
        car_min_trip: Preferred minimum straight-line trip for cars.
        npc_min_trip: Preferred minimum straight-line trip for pedestrians.
        destination_retries: Resamples allowed for a too-short trip.
        car_speed: Half-open ``(low, high)`` range for car speed.
        npc_speed: Half-open ``(low, high)`` range for pedestrian speed.
        building_size: Half-open ``(low, high)`` range for building scale.
        tick_distance: Distance covered per tick at speed 1.
        waypoint_tolerance: Per-axis distance at which an agent counts as
            standing on a waypoint.
        arrival_threshold: Distance at which a waypoint counts as consumed.
        event_radius: Reach of an event over roads and agents.
        emergency_multiplier: Speed factor for emergency responders.
        default_asset_ttl: Lifetime of an asset added without a TTL.
        default_removal_radius: Reach of a positional asset removal.
        shake_duration: Ticks a world shake lasts once triggered.
    """

    grid_size: int = 100
    building_count: int = 400
    building_spacing: float = 3.0
    car_count: int = 200
    npc_count: int = 300
    agent_spacing: float = 1.5
    placement_retries: int = 5
    car_min_trip: float = 20.0
    npc_min_trip: float = 15.0
    destination_retries: int = 10
    car_speed: tuple[float, float] = (0.5, 1.0)
    npc_speed: tuple[float, float] = (0.2, 0.5)
    building_size: tuple[float, float] = (0.3, 1.0)
    tick_distance: float = 0.1
    waypoint_tolerance: float = 0.5
    arrival_threshold: float = 0.2
    event_radius: float = 1.5
    emergency_multiplier: float = 1.5
    default_asset_ttl: int = 200
    default_removal_radius: float = 5.0
    shake_duration: int = 30

    def __post_init__(self) -> None:
        if self.grid_size < 2:
            raise ValueError("grid_size must be at least 2")
        if self.tick_distance <= 0:
            raise ValueError("tick_distance must be positive")


DEFAULT_CONFIG = SimConfig()
