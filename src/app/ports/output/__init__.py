from .cost_oracle import ICostOracle
from .map_provider import IMapProvider

__all__ = [
    "ICostOracle",
    "IMapProvider",
]
