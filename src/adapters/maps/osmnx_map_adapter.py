from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import osmnx as ox

from src.app.ports.output import IMapProvider
from src.domain.algorithms.map_graph import MapGraph

from .networkx_graph import map_graph_from_networkx

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class OSMnxMapAdapter(IMapProvider):
    """OSMnx-backed road network provider.

    Env vars:
      - OSM_GRAPH_PATH: optional prebuilt .graphml; loaded instead of downloading
      - OSM_PLACE: place string for OSMnx (e.g. 'La Jolla, San Diego, California')
      - OSM_NETWORK_TYPE: OSMnx network type (default: drive)
      - OSMNX_CACHE_FOLDER: download cache folder (default: data/osm_cache)
      - MAPGRAPH_STRICT_EDGES: require both endpoints to exist for every edge
    """

    place: str | None = None
    graph_path: str | None = None
    network_type: str | None = None

    def _configure_osmnx(self) -> None:
        # Make Overpass/OSM downloads cacheable across runs.
        ox.settings.use_cache = True
        ox.settings.log_console = False
        ox.settings.cache_folder = os.getenv("OSMNX_CACHE_FOLDER") or "data/osm_cache"

    def _network_type(self) -> str:
        return (
            self.network_type or os.getenv("OSM_NETWORK_TYPE") or "drive"
        ).strip()

    def _load_nx_graph(self) -> Any:
        path = (self.graph_path or os.getenv("OSM_GRAPH_PATH") or "").strip()
        if path:
            if not path.lower().endswith(".graphml"):
                raise RuntimeError(f"Unsupported OSM_GRAPH_PATH format: {path}")
            if Path(path).exists():
                # OSMnx loader keeps numeric edge attributes (e.g. "length") typed.
                return ox.load_graphml(path)

        place = (self.place or os.getenv("OSM_PLACE") or "").strip()
        if not place:
            raise RuntimeError(
                "No road network configured; set OSM_GRAPH_PATH to an existing "
                ".graphml file or OSM_PLACE to download one."
            )

        graph = ox.graph_from_place(
            place, network_type=self._network_type(), simplify=True
        )
        if path:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            ox.save_graphml(graph, path)
        return graph

    def get_road_graph(self) -> MapGraph:
        self._configure_osmnx()

        nx_graph = self._load_nx_graph()
        strict = (os.getenv("MAPGRAPH_STRICT_EDGES") or "").strip().lower() in {
            "1",
            "true",
            "yes",
            "on",
        }
        graph = map_graph_from_networkx(nx_graph, strict_endpoints=strict)

        logger.info(
            "Built road graph from OSM: %d vertices, %d edges",
            graph.vertex_count(),
            graph.edge_count(),
        )
        return graph
