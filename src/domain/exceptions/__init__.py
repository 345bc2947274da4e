from .routing import DataProviderError, GraphBuildError, RoutingError

__all__ = [
    "DataProviderError",
    "GraphBuildError",
    "RoutingError",
]
