from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from src.adapters.api.dependencies import get_routing_service
from src.adapters.api.schemas.routes import (
    GeoPointSchema,
    GraphStatsSchema,
    RouteLegSchema,
    RouteRequestSchema,
    RouteSchema,
)
from src.app.services.road_routing_service import RoadRoutingService
from src.domain.exceptions import NoPathFound
from src.domain.models import GeoPoint, Route, SearchAlgorithm

router = APIRouter(tags=["routes"])


def _point(p: GeoPoint) -> GeoPointSchema:
    return GeoPointSchema(lat=p.lat, lon=p.lon)


def _route_to_schema(route: Route, *, include_explored: bool) -> RouteSchema:
    return RouteSchema(
        origin=_point(route.origin),
        destination=_point(route.destination),
        algorithm=route.algorithm.value,
        path=[_point(p) for p in route.path],
        legs=[
            RouteLegSchema(
                road_name=leg.road_name,
                road_type=leg.road_type,
                origin=_point(leg.origin),
                destination=_point(leg.destination),
                distance_km=leg.distance_km,
                path=[_point(p) for p in leg.path] if leg.path else None,
            )
            for leg in route.legs
        ],
        cost=route.cost,
        hop_count=route.hop_count,
        total_distance_km=route.total_distance_km,
        explored=[_point(p) for p in route.explored] if include_explored else None,
    )


@router.post("/routes", response_model=RouteSchema)
def calculate_route(
    req: RouteRequestSchema,
    service: RoadRoutingService = Depends(get_routing_service),
) -> RouteSchema:
    origin = GeoPoint(lat=req.origin.lat, lon=req.origin.lon)
    destination = GeoPoint(lat=req.destination.lat, lon=req.destination.lon)
    try:
        route = service.calculate_route(
            origin=origin,
            destination=destination,
            algorithm=SearchAlgorithm(req.algorithm),
            include_explored=req.include_explored,
        )
    except NoPathFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _route_to_schema(route, include_explored=req.include_explored)


@router.get("/graph", response_model=GraphStatsSchema)
def graph_stats(
    service: RoadRoutingService = Depends(get_routing_service),
) -> GraphStatsSchema:
    return GraphStatsSchema(**service.graph_stats())
