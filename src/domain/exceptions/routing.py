class RoutingError(Exception):
    """Base exception for journey planning failures."""


class GraphBuildError(RoutingError):
    """Raised when a transit graph cannot be built at all (e.g. no line list)."""


class DataProviderError(RoutingError):
    """Raised by network data providers when upstream data cannot be loaded."""
