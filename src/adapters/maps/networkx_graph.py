from __future__ import annotations

from typing import Any

from src.domain.algorithms.map_graph import MapGraph
from src.domain.models import GeoPoint


def _first(value: Any) -> Any:
    # OSMnx merges tags of simplified ways into lists.
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def _text(value: Any, default: str) -> str:
    value = _first(value)
    if isinstance(value, str):
        value = value.strip()
        return value or default
    return default


def map_graph_from_networkx(
    graph: Any, *, strict_endpoints: bool = False
) -> MapGraph:
    """Convert an OSMnx-style networkx graph into a MapGraph.

    Nodes must carry ``x`` (lon) and ``y`` (lat); nodes without coordinates
    are skipped together with their edges. Edge ``length`` is in metres;
    ``name`` and ``highway`` become the road name and type. Undirected graphs
    yield one edge per direction.
    """

    out = MapGraph(strict_endpoints=strict_endpoints)
    points: dict[Any, GeoPoint] = {}

    for node_id, data in graph.nodes(data=True):
        x = data.get("x")
        y = data.get("y")
        if x is None or y is None:
            continue
        try:
            point = GeoPoint(lat=float(y), lon=float(x))
        except (TypeError, ValueError):
            continue
        points[node_id] = point
        out.add_vertex(point)

    directed = bool(graph.is_directed()) if hasattr(graph, "is_directed") else True

    for u, v, data in graph.edges(data=True):
        a = points.get(u)
        b = points.get(v)
        if a is None or b is None:
            continue

        try:
            length_km = float(data.get("length", 0.0)) / 1000.0
        except (TypeError, ValueError):
            length_km = 0.0
        name = _text(data.get("name"), "unnamed")
        road_type = _text(data.get("highway"), "road")

        out.add_edge(a, b, name, road_type, length_km)
        if not directed:
            out.add_edge(b, a, name, road_type, length_km)

    return out
