from __future__ import annotations

import math
from collections.abc import Iterator

from src.domain.exceptions import InvalidArgument
from src.domain.models import GeoPoint, RoadEdge

from .search import EdgeCost, Heuristic, VisitSink, a_star, bfs, dijkstra


class MapGraph:
    """Directed road network keyed by intersection coordinates.

    Vertices are GeoPoints; each vertex owns the list of road segments leaving
    it. Counters are maintained on insertion rather than recomputed.

    Endpoint checking for ``add_edge`` is lenient by default: the source must
    exist, the target may be inserted later (map loaders are allowed to emit
    segments before every intersection is known). ``strict_endpoints=True``
    requires both.
    """

    def __init__(self, *, strict_endpoints: bool = False) -> None:
        self.strict_endpoints = strict_endpoints
        self._adjacency: dict[GeoPoint, list[RoadEdge]] = {}
        self._vertex_count = 0
        self._edge_count = 0

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._adjacency

    def __len__(self) -> int:
        return self._vertex_count

    def __repr__(self) -> str:
        return (
            f"MapGraph(vertices={self._vertex_count}, edges={self._edge_count}, "
            f"strict_endpoints={self.strict_endpoints})"
        )

    def vertex_count(self) -> int:
        return self._vertex_count

    def edge_count(self) -> int:
        return self._edge_count

    def vertices(self) -> set[GeoPoint]:
        """Snapshot of the vertex set; mutating it does not touch the graph."""

        return set(self._adjacency)

    def neighbors(self, vertex: GeoPoint) -> tuple[RoadEdge, ...]:
        return tuple(self._adjacency.get(vertex, ()))

    def edges(self) -> Iterator[tuple[GeoPoint, RoadEdge]]:
        for source, out in self._adjacency.items():
            for edge in out:
                yield source, edge

    def add_vertex(self, location: GeoPoint | None) -> bool:
        """Add an intersection.

        Returns False (and leaves the graph unchanged) when ``location`` is
        None or already present.
        """

        if location is None or location in self._adjacency:
            return False
        self._adjacency[location] = []
        self._vertex_count += 1
        return True

    def add_edge(
        self,
        from_: GeoPoint | None,
        to: GeoPoint | None,
        road_name: str | None,
        road_type: str | None,
        length: float,
    ) -> None:
        """Add a directed road segment from ``from_`` to ``to``.

        Raises:
            InvalidArgument: an argument is None, the length is negative or
                not finite, or the endpoints are not in the graph.
        """

        if from_ is None or to is None:
            raise InvalidArgument("Edge endpoints must not be None")
        if road_name is None or road_type is None:
            raise InvalidArgument("Road name and road type must not be None")
        try:
            length = float(length)
        except (TypeError, ValueError) as exc:
            raise InvalidArgument(f"Invalid edge length: {length!r}") from exc
        if not math.isfinite(length) or length < 0:
            raise InvalidArgument(f"Edge length must be finite and >= 0, got {length}")

        has_from = from_ in self._adjacency
        has_to = to in self._adjacency
        if not has_from and not has_to:
            raise InvalidArgument(f"Neither {from_} nor {to} is in the graph")
        if not has_from:
            raise InvalidArgument(f"Edge source {from_} is not in the graph")
        if self.strict_endpoints and not has_to:
            raise InvalidArgument(f"Edge target {to} is not in the graph")

        self._adjacency[from_].append(
            RoadEdge(target=to, road_name=road_name, road_type=road_type, length_km=length)
        )
        self._edge_count += 1

    def bfs(
        self, start: GeoPoint, goal: GeoPoint, on_visit: VisitSink | None = None
    ) -> list[GeoPoint] | None:
        return bfs(self, start, goal, on_visit=on_visit)

    def dijkstra(
        self,
        start: GeoPoint,
        goal: GeoPoint,
        on_visit: VisitSink | None = None,
        *,
        edge_cost: EdgeCost | None = None,
    ) -> list[GeoPoint] | None:
        return dijkstra(self, start, goal, on_visit=on_visit, edge_cost=edge_cost)

    def a_star(
        self,
        start: GeoPoint,
        goal: GeoPoint,
        on_visit: VisitSink | None = None,
        *,
        edge_cost: EdgeCost | None = None,
        heuristic: Heuristic | None = None,
    ) -> list[GeoPoint] | None:
        return a_star(
            self,
            start,
            goal,
            on_visit=on_visit,
            edge_cost=edge_cost,
            heuristic=heuristic,
        )
