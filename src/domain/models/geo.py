from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")

    def __str__(self) -> str:
        return f"({self.lat}, {self.lon})"

    def rounded(self, ndigits: int) -> tuple[float, float]:
        """(lat, lon) rounded, for use as a coarse cache key."""

        return (round(self.lat, ndigits), round(self.lon, ndigits))
