from __future__ import annotations

import heapq
import itertools
import logging
from collections import deque
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from src.domain.exceptions import InvalidArgument
from src.domain.models import GeoPoint, RoadEdge

from .geo_utils import haversine_distance_km

if TYPE_CHECKING:
    from .map_graph import MapGraph

logger = logging.getLogger(__name__)

VisitSink = Callable[[GeoPoint], None]
EdgeCost = Callable[[GeoPoint, RoadEdge], float]
Heuristic = Callable[[GeoPoint, GeoPoint], float]


def no_visit(_: GeoPoint) -> None:
    """Default visit sink."""


def edge_length_cost(_: GeoPoint, edge: RoadEdge) -> float:
    return edge.length_km


def straight_line_km(vertex: GeoPoint, goal: GeoPoint) -> float:
    """Admissible for costs measured in kilometres of road."""

    return haversine_distance_km(vertex, goal)


def reconstruct_path(
    start: GeoPoint, goal: GeoPoint, parent: dict[GeoPoint, GeoPoint]
) -> list[GeoPoint] | None:
    """Walk the predecessor tree back from ``goal`` to ``start``.

    Returns ``[start, ..., goal]`` or None when the chain is broken.
    """

    path = [goal]
    cur = goal
    # A well-formed tree never needs more steps than it has entries.
    for _ in range(len(parent) + 1):
        if cur == start:
            path.reverse()
            return path
        prev = parent.get(cur)
        if prev is None:
            break
        path.append(prev)
        cur = prev

    logger.warning("Broken parent chain from %s back to %s", goal, start)
    return None


def bfs(
    graph: MapGraph,
    start: GeoPoint,
    goal: GeoPoint,
    *,
    on_visit: VisitSink | None = None,
) -> list[GeoPoint] | None:
    """Fewest-hops path from ``start`` to ``goal``, or None if unreachable."""

    on_visit = on_visit or no_visit
    if start not in graph:
        return None
    if start == goal:
        return [start]

    parent: dict[GeoPoint, GeoPoint] = {}
    visited = {start}
    frontier = deque([start])

    while frontier:
        cur = frontier.popleft()
        if cur == goal:
            return reconstruct_path(start, goal, parent)

        for edge in graph.neighbors(cur):
            nxt = edge.target
            if nxt in visited:
                continue
            # Marked on enqueue so no vertex is queued twice.
            visited.add(nxt)
            parent[nxt] = cur
            frontier.append(nxt)
            on_visit(nxt)

    return None


def dijkstra(
    graph: MapGraph,
    start: GeoPoint,
    goal: GeoPoint,
    *,
    on_visit: VisitSink | None = None,
    edge_cost: EdgeCost | None = None,
) -> list[GeoPoint] | None:
    """Cheapest path under ``edge_cost`` (edge length when omitted)."""

    return _best_first(
        graph,
        start,
        goal,
        on_visit=on_visit or no_visit,
        edge_cost=edge_cost or edge_length_cost,
        heuristic=None,
    )


def a_star(
    graph: MapGraph,
    start: GeoPoint,
    goal: GeoPoint,
    *,
    on_visit: VisitSink | None = None,
    edge_cost: EdgeCost | None = None,
    heuristic: Heuristic | None = None,
) -> list[GeoPoint] | None:
    """Cheapest path, expanding vertices in order of ``g + h``.

    The result matches :func:`dijkstra` only when ``heuristic`` never
    overestimates the remaining cost. The defaults (road length, straight-line
    kilometres) satisfy that as long as no edge is shorter than the
    great-circle distance between its endpoints.
    """

    return _best_first(
        graph,
        start,
        goal,
        on_visit=on_visit or no_visit,
        edge_cost=edge_cost or edge_length_cost,
        heuristic=heuristic or straight_line_km,
    )


def _best_first(
    graph: MapGraph,
    start: GeoPoint,
    goal: GeoPoint,
    *,
    on_visit: VisitSink,
    edge_cost: EdgeCost,
    heuristic: Heuristic | None,
) -> list[GeoPoint] | None:
    if start not in graph:
        return None

    def priority(vertex: GeoPoint, g: float) -> float:
        if heuristic is None:
            return g
        return g + heuristic(vertex, goal)

    # Entries are (priority, seq, vertex); seq keeps ties in insertion order.
    seq = itertools.count()
    frontier: list[tuple[float, int, GeoPoint]] = [
        (priority(start, 0.0), next(seq), start)
    ]
    best_cost: dict[GeoPoint, float] = {start: 0.0}
    parent: dict[GeoPoint, GeoPoint] = {}
    visited: set[GeoPoint] = set()
    discovered = {start}

    while frontier:
        _, _, cur = heapq.heappop(frontier)
        if cur in visited:
            continue
        visited.add(cur)

        if cur == goal:
            return reconstruct_path(start, goal, parent)

        g_cur = best_cost[cur]
        for edge in graph.neighbors(cur):
            nxt = edge.target
            if nxt in visited:
                continue

            step = float(edge_cost(cur, edge))
            if not step >= 0:
                raise InvalidArgument(
                    f"Edge cost must be >= 0, got {step} for edge {cur} -> {nxt} ({edge.road_name})"
                )
            candidate = g_cur + step
            known = best_cost.get(nxt)
            if known is not None and candidate >= known:
                continue

            best_cost[nxt] = candidate
            parent[nxt] = cur
            heapq.heappush(frontier, (priority(nxt, candidate), next(seq), nxt))
            if nxt not in discovered:
                discovered.add(nxt)
                on_visit(nxt)

    return None


def path_cost(
    graph: MapGraph, path: Sequence[GeoPoint], edge_cost: EdgeCost | None = None
) -> float | None:
    """Sum of the cheapest connecting edge for each consecutive pair.

    Returns None if some pair of consecutive vertices is not connected.
    """

    edge_cost = edge_cost or edge_length_cost
    total = 0.0
    for a, b in zip(path, path[1:]):
        costs = [edge_cost(a, e) for e in graph.neighbors(a) if e.target == b]
        if not costs:
            return None
        total += min(costs)
    return total
