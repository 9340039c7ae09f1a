class RoutingError(Exception):
    """Base exception for route calculation failures."""


class NoPathFound(RoutingError):
    """Raised when no feasible path exists for the given request."""


class InvalidArgument(RoutingError, ValueError):
    """Raised when a graph mutation violates its argument contract."""


class MapFormatError(RoutingError):
    """Raised when a road map file cannot be parsed."""

    def __init__(self, message: str, *, line_no: int | None = None) -> None:
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no
