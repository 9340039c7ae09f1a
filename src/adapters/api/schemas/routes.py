from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class RouteLegSchema(BaseModel):
    road_name: str
    road_type: str
    origin: GeoPointSchema
    destination: GeoPointSchema
    distance_km: float | None = None
    path: list[GeoPointSchema] | None = None


class RouteSchema(BaseModel):
    origin: GeoPointSchema
    destination: GeoPointSchema
    algorithm: Literal["bfs", "dijkstra", "astar"]
    path: list[GeoPointSchema] = []
    legs: list[RouteLegSchema] = []

    cost: float | None = None
    hop_count: int = 0
    total_distance_km: float | None = None
    explored: list[GeoPointSchema] | None = None


class RouteRequestSchema(BaseModel):
    origin: GeoPointSchema
    destination: GeoPointSchema
    algorithm: Literal["bfs", "dijkstra", "astar"] = "astar"
    include_explored: bool = False


class GraphStatsSchema(BaseModel):
    vertices: int
    edges: int
