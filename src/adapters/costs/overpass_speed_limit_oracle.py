from __future__ import annotations

import logging
import os
import re
import threading
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.app.ports.output import ICostOracle
from src.domain.models import GeoPoint, RoadEdge

logger = logging.getLogger(__name__)

MPH_TO_KMH = 1.609344

_SPEED_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(mph)?", re.IGNORECASE)


@dataclass(slots=True)
class OverpassSpeedLimitCostOracle(ICostOracle):
    """Travel-time cost: road length divided by the posted speed limit.

    The limit is looked up on the Overpass API around the segment's target
    intersection. Any failure (timeout, HTTP error, unparsable payload, no
    ``maxspeed`` tag) falls back to ``default_speed_kmh``.

    Env vars (read only for settings not passed to the constructor; the
    numeric ones must be > 0):
      - OVERPASS_URL: interpreter endpoint (default: public overpass-api.de)
      - OVERPASS_TIMEOUT_S: request timeout (default 5)
      - OVERPASS_RADIUS_M: search radius around the vertex (default 333)
      - DEFAULT_SPEED_LIMIT: fallback speed (default 55)

    Notes:
      - Lookups are cached per process, keyed by the coordinate rounded to
        ``cache_precision`` decimals.
    """

    url: str | None = None
    timeout_s: float | None = None
    radius_m: int | None = None
    default_speed_kmh: float | None = None
    cache_precision: int = 4
    transport: httpx.BaseTransport | None = None

    distance_based: bool = False

    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _cache: dict[tuple[float, float], float] = field(
        default_factory=dict, init=False, repr=False
    )
    _client: httpx.Client | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        # Explicit constructor arguments win over the environment.
        if self.url is None:
            self.url = (
                os.getenv("OVERPASS_URL") or "https://overpass-api.de/api/interpreter"
            )
        if self.timeout_s is None:
            self.timeout_s = float(os.getenv("OVERPASS_TIMEOUT_S") or 5.0)
        if self.radius_m is None:
            self.radius_m = int(os.getenv("OVERPASS_RADIUS_M") or 333)
        if self.default_speed_kmh is None:
            self.default_speed_kmh = float(os.getenv("DEFAULT_SPEED_LIMIT") or 55.0)

        for name in ("timeout_s", "radius_m", "default_speed_kmh"):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f"{name} must be > 0, got {value}")

    def edge_cost(self, source: GeoPoint, edge: RoadEdge) -> float:
        speed = self.speed_limit_at(edge.target)
        return edge.length_km / speed

    def speed_limit_at(self, point: GeoPoint) -> float:
        key = point.rounded(self.cache_precision)
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached

        speed = self._lookup(point)
        with self._lock:
            self._cache[key] = speed
        return speed

    def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()

    def _http(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=self.timeout_s, transport=self.transport
                )
            return self._client

    def _query(self, point: GeoPoint) -> str:
        return (
            f"[out:json];way[highway](around:{int(self.radius_m)},"
            f"{point.lat},{point.lon});out tags;"
        )

    def _lookup(self, point: GeoPoint) -> float:
        try:
            resp = self._http().get(str(self.url), params={"data": self._query(point)})
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "Speed limit lookup failed at %s (%s); using default %s",
                point,
                exc,
                self.default_speed_kmh,
            )
            return self.default_speed_kmh

        speed = _first_maxspeed(payload)
        if speed is None:
            logger.debug("No maxspeed tag near %s; using default", point)
            return self.default_speed_kmh
        return speed


def _first_maxspeed(payload: Any) -> float | None:
    if not isinstance(payload, dict):
        return None
    for element in payload.get("elements") or ():
        tags = element.get("tags") if isinstance(element, dict) else None
        if not isinstance(tags, dict):
            continue
        speed = parse_maxspeed(tags.get("maxspeed"))
        if speed is not None:
            return speed
    return None


def parse_maxspeed(raw: Any) -> float | None:
    """Parse an OSM ``maxspeed`` value into km/h.

    Accepts plain numbers (km/h) and values suffixed with ``mph``. Symbolic
    values such as ``signals`` or ``RU:urban`` yield None.
    """

    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw) if raw > 0 else None
    if not isinstance(raw, str):
        return None

    # Multiple values ("50;30") are separated by semicolons; take the first.
    match = _SPEED_RE.match(raw.split(";", 1)[0])
    if not match:
        return None
    value = float(match.group(1))
    if value <= 0:
        return None
    if match.group(2):
        value *= MPH_TO_KMH
    return value
