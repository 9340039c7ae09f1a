from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import GeoPoint, RoadEdge


class ICostOracle(ABC):
    """Port supplying the traversal cost of a single road segment.

    Implementations must not raise on lookup failures; they fall back to a
    default cost instead so that a search in progress is never aborted.
    """

    #: True when the cost is measured in kilometres of road. The routing
    #: service then runs A* on this cost; otherwise A* uses plain road length
    #: so the straight-line heuristic stays admissible.
    distance_based: bool = False

    @abstractmethod
    def edge_cost(self, source: GeoPoint, edge: RoadEdge) -> float:
        """Return the non-negative cost of travelling ``edge`` from ``source``."""

    def close(self) -> None:
        """Release network clients or other resources held by the oracle."""
