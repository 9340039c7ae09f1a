from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class RoadEdge:
    """A directed road segment leaving some vertex and ending at ``target``."""

    target: GeoPoint
    road_name: str
    road_type: str
    length_km: float
