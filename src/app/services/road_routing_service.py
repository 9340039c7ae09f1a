from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from src.app.ports.output import ICostOracle, IMapProvider
from src.domain.algorithms.map_graph import MapGraph
from src.domain.algorithms.search import (
    EdgeCost,
    VisitSink,
    a_star,
    bfs,
    dijkstra,
    edge_length_cost,
    path_cost,
)
from src.domain.exceptions import NoPathFound
from src.domain.models import GeoPoint, Route, SearchAlgorithm

from .routing_helpers import build_legs, nearest_vertex

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RoadRoutingService:
    """Application service (use case) for point-to-point road routing.

    - The graph is loaded once from the map provider and never mutated.
    - Dijkstra prices edges with the cost oracle. A* uses it only when it is
      distance based and otherwise falls back to road length, so the
      straight-line heuristic stays admissible; BFS counts hops.
    """

    map_provider: IMapProvider
    cost_oracle: ICostOracle

    _graph: MapGraph | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @property
    def graph(self) -> MapGraph:
        if self._graph is None:
            with self._lock:
                if self._graph is None:
                    self._graph = self.map_provider.get_road_graph()
        return self._graph

    def graph_stats(self) -> dict[str, int]:
        g = self.graph
        return {"vertices": g.vertex_count(), "edges": g.edge_count()}

    def edge_cost_for(self, algorithm: SearchAlgorithm) -> EdgeCost:
        """Cost function a route found with ``algorithm`` is priced on.

        A* only uses the oracle when it is distance based; any other cost
        could be overestimated by the straight-line heuristic.
        """

        if algorithm == SearchAlgorithm.DIJKSTRA:
            return self.cost_oracle.edge_cost
        if algorithm == SearchAlgorithm.ASTAR and self.cost_oracle.distance_based:
            return self.cost_oracle.edge_cost
        return edge_length_cost

    def close(self) -> None:
        self.cost_oracle.close()

    def calculate_route(
        self,
        *,
        origin: GeoPoint,
        destination: GeoPoint,
        algorithm: SearchAlgorithm = SearchAlgorithm.ASTAR,
        include_explored: bool = False,
    ) -> Route:
        graph = self.graph
        vertices = graph.vertices()
        start = nearest_vertex(vertices, origin)
        goal = nearest_vertex(vertices, destination)

        explored: list[GeoPoint] = []
        on_visit: VisitSink | None = explored.append if include_explored else None
        edge_cost = self.edge_cost_for(algorithm)

        if algorithm == SearchAlgorithm.BFS:
            path = bfs(graph, start, goal, on_visit=on_visit)
        elif algorithm == SearchAlgorithm.DIJKSTRA:
            path = dijkstra(graph, start, goal, on_visit=on_visit, edge_cost=edge_cost)
        elif algorithm == SearchAlgorithm.ASTAR:
            path = a_star(graph, start, goal, on_visit=on_visit, edge_cost=edge_cost)
        else:
            raise ValueError(f"Unsupported algorithm: {algorithm!r}")

        if path is None:
            raise NoPathFound(f"No road path from {start} to {goal}")

        if algorithm == SearchAlgorithm.BFS:
            cost: float | None = float(len(path) - 1)
        else:
            cost = path_cost(graph, path, edge_cost)

        logger.debug(
            "%s route %s -> %s: %d vertices, cost=%s",
            algorithm.value,
            start,
            goal,
            len(path),
            cost,
        )

        return Route(
            origin=origin,
            destination=destination,
            algorithm=algorithm,
            path=tuple(path),
            legs=build_legs(graph, path, edge_cost),
            cost=cost,
            explored=tuple(explored),
        )
