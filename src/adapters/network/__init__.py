from .http_network_data_provider import HttpNetworkDataProvider

__all__ = [
    "HttpNetworkDataProvider",
]
