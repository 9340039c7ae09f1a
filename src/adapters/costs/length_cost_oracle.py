from __future__ import annotations

from dataclasses import dataclass

from src.app.ports.output import ICostOracle
from src.domain.models import GeoPoint, RoadEdge


@dataclass(slots=True)
class LengthCostOracle(ICostOracle):
    """Static cost: the stored road length in kilometres."""

    distance_based: bool = True

    def edge_cost(self, source: GeoPoint, edge: RoadEdge) -> float:
        return edge.length_km
