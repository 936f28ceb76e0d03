"""Core value types for the city simulation.

Every record is a frozen dataclass and every collection held by a
``WorldState`` is a tuple, so engine functions can only produce new states.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class AgentType(Enum):
    CAR = "car"
    NPC = "npc"


class AgentStatus(Enum):
    IDLE = "idle"
    MOVING = "moving"
    STOPPED = "stopped"
    EMERGENCY = "emergency"


class RoadStatus(Enum):
    OPEN = "open"
    CONGESTED = "congested"
    BLOCKED = "blocked"


class EventType(Enum):
    ACCIDENT = "accident"
    CONGESTION = "congestion"
    EMERGENCY = "emergency"


class BuildingType(Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    PARK = "park"
    HOSPITAL = "hospital"
    SCHOOL = "school"


class DirectorAction(Enum):
    MOVE = "move"
    STOP = "stop"
    REROUTE = "reroute"
    EMERGENCY_RESPONSE = "emergency_response"
    PATROL = "patrol"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AssetKind(Enum):
    FIRE = "fire"
    SMOKE = "smoke"
    BARRIER = "barrier"
    CONE = "cone"
    AMBULANCE = "ambulance"
    FIRE_TRUCK = "fire_truck"
    POLICE_CAR = "police_car"
    DRONE = "drone"


class AssetOpType(Enum):
    ADD = "add"
    REMOVE = "remove"


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def distance_to(self, other: Position) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def rounded(self) -> Position:
        """Nearest lattice point, rounding halves up."""
        return Position(math.floor(self.x + 0.5), math.floor(self.y + 0.5))

    def in_bounds(self, grid_size: int) -> bool:
        return 0 <= self.x < grid_size and 0 <= self.y < grid_size


@dataclass(frozen=True)
class Road:
    start: Position
    end: Position
    status: RoadStatus = RoadStatus.OPEN

    @property
    def midpoint(self) -> Position:
        return Position((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)


@dataclass(frozen=True)
class DirectorInstruction:
    """One directive from the planner, already validated at the boundary."""

    agent_id: str
    action: DirectorAction
    target: Position | None = None
    priority: Priority | None = None
    reasoning: str | None = None


@dataclass(frozen=True)
class Agent:
    """A car or pedestrian.

    Attributes:
        speed: Current per-tick rate multiplier. Equals ``base_speed`` unless
            an emergency response boost is in effect.
        base_speed: Speed assigned at generation. Never changed by
            instructions, so boosts are always computed from it.
        path: Cached lattice waypoints toward ``destination``, or None when a
            replan is due.
    """

    id: str
    type: AgentType
    position: Position
    destination: Position | None
    status: AgentStatus
    speed: float
    base_speed: float
    color: str
    path: tuple[Position, ...] | None = None
    current_instruction: DirectorInstruction | None = None


@dataclass(frozen=True)
class Building:
    id: str
    position: Position
    size: float
    type: BuildingType
    color: str


@dataclass(frozen=True)
class SimulationEvent:
    id: str
    type: EventType
    position: Position
    timestamp: int  # milliseconds since the epoch
    description: str


@dataclass(frozen=True)
class Asset:
    """Transient world object. ``ttl`` of None means it never expires."""

    id: str
    kind: AssetKind
    position: Position
    ttl: int | None = None


@dataclass(frozen=True)
class AssetOp:
    """Add or remove request for transient assets.

    ``add`` uses kind, position and ttl (None selects the default TTL);
    ``permanent`` adds an asset that never expires.
    ``remove`` filters by kind and/or by ``radius`` around position.
    """

    op: AssetOpType
    kind: AssetKind | None = None
    position: Position | None = None
    ttl: int | None = None
    radius: float | None = None
    permanent: bool = False


@dataclass(frozen=True)
class WorldEffects:
    shake: int = 0  # ticks of world shake remaining


@dataclass(frozen=True)
class DirectorResponse:
    instructions: tuple[DirectorInstruction, ...] = ()
    asset_ops: tuple[AssetOp, ...] = ()
    shake: bool = False
    strategy: str | None = None


@dataclass(frozen=True)
class WorldState:
    agents: tuple[Agent, ...]
    roads: tuple[Road, ...]
    buildings: tuple[Building, ...]
    events: tuple[SimulationEvent, ...]
    grid_size: int
    assets: tuple[Asset, ...] = ()
    effects: WorldEffects = WorldEffects()
    tick: int = 0

    def agent(self, agent_id: str) -> Agent | None:
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None


class SnapshotError(Exception):
    """Raised when a world snapshot cannot be restored."""
