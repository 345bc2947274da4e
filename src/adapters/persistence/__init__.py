from .graphml_graph_repository import GraphmlGraphRepository
from .local_network_data_provider import LocalNetworkDataProvider

__all__ = [
    "GraphmlGraphRepository",
    "LocalNetworkDataProvider",
]
