"""A* pathfinding over the road graph."""
from __future__ import annotations

import heapq
from typing import Iterable

from citysim.roads import Lattice, RoadGraph
from citysim.types import Position, Road


def find_path(
    start: Position,
    goal: Position,
    grid_size: int,
    roads: RoadGraph | Iterable[Road],
) -> list[Position] | None:
    """Cheapest lattice path from ``start`` to ``goal``, both ends included.

    Both endpoints are rounded to the nearest lattice point first. Returns
    ``[goal]`` when they coincide and None when either lies outside the grid
    or no road connects them.
    """
    graph = roads if isinstance(roads, RoadGraph) else RoadGraph(roads, grid_size)

    s = start.rounded()
    g = goal.rounded()
    start_node: Lattice = (int(s.x), int(s.y))
    goal_node: Lattice = (int(g.x), int(g.y))
    if not graph.in_bounds(start_node) or not graph.in_bounds(goal_node):
        return None
    if start_node == goal_node:
        return [g]

    open_set: list[tuple[float, int, Lattice]] = [
        (graph.heuristic(start_node, goal_node), 0, start_node)
    ]
    came_from: dict[Lattice, Lattice] = {}
    g_score: dict[Lattice, float] = {start_node: 0.0}
    counter = 1

    closed: set[Lattice] = set()

    while open_set:
        _, _, current = heapq.heappop(open_set)
        if current in closed:
            continue
        closed.add(current)
        if current == goal_node:
            nodes: list[Lattice] = [current]
            while current in came_from:
                current = came_from[current]
                nodes.append(current)
            nodes.reverse()
            return [Position(x, y) for x, y in nodes]

        for neighbor, step_cost in graph.neighbors(current):
            if neighbor in closed:
                continue
            tentative = g_score[current] + step_cost
            if tentative < g_score.get(neighbor, float("inf")):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                h = graph.heuristic(neighbor, goal_node)
                heapq.heappush(open_set, (tentative + h, counter, neighbor))
                counter += 1

    return None


def path_cost(path: list[Position], roads: RoadGraph) -> float:
    """Sum of edge costs along ``path``; infinite if a hop has no road."""
    total = 0.0
    for a, b in zip(path, path[1:]):
        step = roads.cost((int(a.x), int(a.y)), (int(b.x), int(b.y)))
        if step is None:
            return float("inf")
        total += step
    return total
