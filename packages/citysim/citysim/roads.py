"""Road lattice construction and the traversal cost model."""
from __future__ import annotations

from typing import Iterable

from citysim.types import Position, Road, RoadStatus

Lattice = tuple[int, int]
EdgeKey = tuple[Lattice, Lattice]

ROAD_COSTS: dict[RoadStatus, float] = {
    RoadStatus.OPEN: 1.0,
    RoadStatus.CONGESTED: 3.0,
    # Prohibitive rather than infinite: a blocked edge is still taken when
    # nothing else connects the two sides.
    RoadStatus.BLOCKED: 999.0,
}


def road_cost(status: RoadStatus) -> float:
    return ROAD_COSTS[status]


def edge_key(a: Lattice, b: Lattice) -> EdgeKey:
    return (a, b) if a <= b else (b, a)


def _lattice(pos: Position) -> Lattice:
    return (int(pos.x), int(pos.y))


def build_road_lattice(grid_size: int) -> tuple[Road, ...]:
    """Return one open road for every horizontally or vertically adjacent pair."""
    roads: list[Road] = []
    for x in range(grid_size):
        for y in range(grid_size):
            if x < grid_size - 1:
                roads.append(Road(Position(x, y), Position(x + 1, y)))
            if y < grid_size - 1:
                roads.append(Road(Position(x, y), Position(x, y + 1)))
    return tuple(roads)


class RoadGraph:
    """Read-only index over a road sequence, keyed by unordered endpoint pair.

    Built once per tick and shared by every planning call in that tick, so no
    agent can observe a road status change made mid-tick.
    """

    def __init__(self, roads: Iterable[Road], grid_size: int) -> None:
        self._grid_size = grid_size
        self._edges: dict[EdgeKey, Road] = {}
        for road in roads:
            self._edges.setdefault(edge_key(_lattice(road.start), _lattice(road.end)), road)

    @property
    def grid_size(self) -> int:
        return self._grid_size

    def __len__(self) -> int:
        return len(self._edges)

    def road_between(self, a: Lattice, b: Lattice) -> Road | None:
        """Road joining ``a`` and ``b`` in either orientation."""
        return self._edges.get(edge_key(a, b))

    def cost(self, a: Lattice, b: Lattice) -> float | None:
        road = self.road_between(a, b)
        if road is None:
            return None
        return road_cost(road.status)

    def in_bounds(self, node: Lattice) -> bool:
        return 0 <= node[0] < self._grid_size and 0 <= node[1] < self._grid_size

    def neighbors(self, node: Lattice) -> list[tuple[Lattice, float]]:
        """Axis-aligned in-bounds neighbors reachable by a road, with edge cost."""
        x, y = node
        result: list[tuple[Lattice, float]] = []
        for dx, dy in ((0, 1), (1, 0), (0, -1), (-1, 0)):
            nxt = (x + dx, y + dy)
            if not self.in_bounds(nxt):
                continue
            step = self.cost(node, nxt)
            if step is not None:
                result.append((nxt, step))
        return result

    def heuristic(self, a: Lattice, b: Lattice) -> float:
        return float(abs(a[0] - b[0]) + abs(a[1] - b[1]))
