from .length_cost_oracle import LengthCostOracle
from .overpass_speed_limit_oracle import OverpassSpeedLimitCostOracle

__all__ = [
    "LengthCostOracle",
    "OverpassSpeedLimitCostOracle",
]
