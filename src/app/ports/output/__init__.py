from .graph_repository import IGraphRepository
from .network_data_provider import INetworkDataProvider

__all__ = [
    "IGraphRepository",
    "INetworkDataProvider",
]
