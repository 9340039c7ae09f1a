from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.algorithms.map_graph import MapGraph


class IMapProvider(ABC):
    """Port for loading the road network."""

    @abstractmethod
    def get_road_graph(self) -> MapGraph:
        """Build and return a fully populated road graph."""
