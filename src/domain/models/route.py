from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .geo import GeoPoint


class SearchAlgorithm(str, Enum):
    BFS = "bfs"
    DIJKSTRA = "dijkstra"
    ASTAR = "astar"


@dataclass(frozen=True, slots=True)
class RouteLeg:
    """Consecutive edges travelled along the same named road."""

    road_name: str
    road_type: str
    origin: GeoPoint
    destination: GeoPoint
    distance_km: float | None = None
    path: tuple[GeoPoint, ...] = ()


@dataclass(frozen=True, slots=True)
class Route:
    origin: GeoPoint
    destination: GeoPoint
    algorithm: SearchAlgorithm
    path: tuple[GeoPoint, ...] = ()
    legs: tuple[RouteLeg, ...] = field(default_factory=tuple)
    cost: float | None = None
    # Vertices reported to the visit sink, in discovery order.
    explored: tuple[GeoPoint, ...] = ()

    @property
    def hop_count(self) -> int:
        return max(0, len(self.path) - 1)

    @property
    def total_distance_km(self) -> float | None:
        distances = [leg.distance_km for leg in self.legs]
        if any(d is None for d in distances):
            return None
        return float(sum(d for d in distances if d is not None))
