from __future__ import annotations

import os
from functools import lru_cache

from src.adapters.costs import LengthCostOracle, OverpassSpeedLimitCostOracle
from src.adapters.maps.map_file_adapter import MapFileAdapter
from src.adapters.maps.osmnx_map_adapter import OSMnxMapAdapter
from src.app.ports.output import ICostOracle, IMapProvider
from src.app.services.road_routing_service import RoadRoutingService


def get_map_provider() -> IMapProvider:
    if os.getenv("ROAD_MAP_PATH"):
        return MapFileAdapter()
    return OSMnxMapAdapter()


def get_cost_oracle() -> ICostOracle:
    kind = (os.getenv("COST_ORACLE") or "length").strip().lower()
    if kind == "overpass":
        return OverpassSpeedLimitCostOracle()
    if kind == "length":
        return LengthCostOracle()
    raise RuntimeError(f"Unsupported COST_ORACLE: {kind}")


@lru_cache(maxsize=1)
def get_routing_service() -> RoadRoutingService:
    # One service per process so the road graph is built only once.
    return RoadRoutingService(
        map_provider=get_map_provider(),
        cost_oracle=get_cost_oracle(),
    )


def shutdown_routing_service() -> None:
    """Release the cached service's resources; a no-op if it was never built."""

    if get_routing_service.cache_info().currsize:
        get_routing_service().close()
        get_routing_service.cache_clear()
