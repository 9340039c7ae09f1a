from __future__ import annotations

import logging
import os
import shlex
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from src.app.ports.output import IMapProvider
from src.domain.algorithms.geo_utils import haversine_distance_km
from src.domain.algorithms.map_graph import MapGraph
from src.domain.exceptions import MapFormatError
from src.domain.models import GeoPoint

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MapFileAdapter(IMapProvider):
    """Loads a road graph from a plain-text map file.

    One directed road segment per line:

        lat1 lon1 lat2 lon2 "ROAD NAME" road_type

    Blank lines and lines starting with ``#`` are ignored. Segment length is
    the great-circle distance between the endpoints, in km.

    Env vars:
      - ROAD_MAP_PATH: path to the map file
      - MAPGRAPH_STRICT_EDGES: require both endpoints to exist for every edge
    """

    path: str | Path | None = None
    strict_endpoints: bool | None = None

    def _path(self) -> Path:
        value = self.path or os.getenv("ROAD_MAP_PATH")
        if not value:
            raise RuntimeError("Missing ROAD_MAP_PATH")
        return Path(value)

    def get_road_graph(self) -> MapGraph:
        path = self._path()
        strict = self.strict_endpoints
        if strict is None:
            strict = (os.getenv("MAPGRAPH_STRICT_EDGES") or "").strip().lower() in {
                "1",
                "true",
                "yes",
                "on",
            }

        graph = MapGraph(strict_endpoints=strict)
        with path.open("r", encoding="utf-8") as fp:
            load_road_map(fp, graph)

        logger.info(
            "Loaded road map %s: %d vertices, %d edges",
            path,
            graph.vertex_count(),
            graph.edge_count(),
        )
        return graph


def parse_segment(
    line: str, *, line_no: int | None = None
) -> tuple[GeoPoint, GeoPoint, str, str]:
    try:
        parts = shlex.split(line)
    except ValueError as exc:
        raise MapFormatError(str(exc), line_no=line_no) from exc

    if len(parts) != 6:
        raise MapFormatError(
            f"expected 6 fields (lat1 lon1 lat2 lon2 name type), got {len(parts)}",
            line_no=line_no,
        )

    try:
        lat1, lon1, lat2, lon2 = (float(v) for v in parts[:4])
        start = GeoPoint(lat=lat1, lon=lon1)
        end = GeoPoint(lat=lat2, lon=lon2)
    except ValueError as exc:
        raise MapFormatError(str(exc), line_no=line_no) from exc

    return start, end, parts[4], parts[5]


def load_road_map(lines: Iterable[str], graph: MapGraph) -> MapGraph:
    """Populate ``graph`` from map-file lines, in file order."""

    for line_no, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        start, end, road_name, road_type = parse_segment(line, line_no=line_no)
        graph.add_vertex(start)
        graph.add_vertex(end)
        graph.add_edge(start, end, road_name, road_type, haversine_distance_km(start, end))

    return graph
