from .geo import GeoPoint
from .road import RoadEdge
from .route import Route, RouteLeg, SearchAlgorithm

__all__ = [
    "GeoPoint",
    "RoadEdge",
    "Route",
    "RouteLeg",
    "SearchAlgorithm",
]
