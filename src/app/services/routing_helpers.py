from __future__ import annotations

from collections.abc import Iterable, Sequence

from src.domain.algorithms.geo_utils import haversine_distance_km
from src.domain.algorithms.map_graph import MapGraph
from src.domain.algorithms.search import EdgeCost, edge_length_cost
from src.domain.exceptions import NoPathFound
from src.domain.models import GeoPoint, RoadEdge, RouteLeg


def nearest_vertex(vertices: Iterable[GeoPoint], point: GeoPoint) -> GeoPoint:
    """Closest vertex to ``point`` by great-circle distance."""

    best: GeoPoint | None = None
    best_d = float("inf")
    for v in vertices:
        if v == point:
            return v
        d = haversine_distance_km(v, point)
        if d < best_d:
            best_d = d
            best = v

    if best is None:
        raise NoPathFound("Road graph contains no vertices")
    return best


def connecting_edge(
    graph: MapGraph, a: GeoPoint, b: GeoPoint, edge_cost: EdgeCost | None = None
) -> RoadEdge | None:
    """Cheapest edge from ``a`` to ``b`` under ``edge_cost`` (length by default).

    Ties keep the first inserted edge.
    """

    edge_cost = edge_cost or edge_length_cost
    candidates = [e for e in graph.neighbors(a) if e.target == b]
    if not candidates:
        return None
    return min(candidates, key=lambda e: edge_cost(a, e))


def build_legs(
    graph: MapGraph, path: Sequence[GeoPoint], edge_cost: EdgeCost | None = None
) -> tuple[RouteLeg, ...]:
    """Group consecutive edges of ``path`` that share a road name into legs.

    Between two vertices joined by parallel roads, the leg follows the one the
    route was priced on, i.e. the cheapest under ``edge_cost``.
    """

    legs: list[RouteLeg] = []
    run: list[GeoPoint] = []
    run_edge: RoadEdge | None = None
    run_km = 0.0

    def flush() -> None:
        if run_edge is not None and len(run) >= 2:
            legs.append(
                RouteLeg(
                    road_name=run_edge.road_name,
                    road_type=run_edge.road_type,
                    origin=run[0],
                    destination=run[-1],
                    distance_km=run_km,
                    path=tuple(run),
                )
            )

    for a, b in zip(path, path[1:]):
        edge = connecting_edge(graph, a, b, edge_cost)
        if edge is None:
            raise NoPathFound(f"Path step {a} -> {b} is not a road segment")

        if run_edge is not None and edge.road_name == run_edge.road_name:
            run.append(b)
            run_km += edge.length_km
            continue

        flush()
        run = [a, b]
        run_edge = edge
        run_km = edge.length_km

    flush()
    return tuple(legs)
