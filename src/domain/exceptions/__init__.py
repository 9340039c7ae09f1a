from .routing import InvalidArgument, MapFormatError, NoPathFound, RoutingError

__all__ = [
    "InvalidArgument",
    "MapFormatError",
    "NoPathFound",
    "RoutingError",
]
