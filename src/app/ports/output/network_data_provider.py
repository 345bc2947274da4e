from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import Correspondence, GeoPoint, Line, Stop


class INetworkDataProvider(ABC):
    """Port for the read-only network snapshot the planner builds from.

    Implementations may raise on fetch failures; the planner treats a failed
    route or stop as missing coverage rather than a fatal error.
    """

    @abstractmethod
    async def get_lines(self) -> tuple[Line, ...]:
        raise NotImplementedError

    @abstractmethod
    async def get_stops_for_route(self, route_id: str) -> tuple[Stop, ...]:
        """Ordered stop sequence of one upstream route."""

    @abstractmethod
    async def get_correspondences(self, stop_id: str) -> tuple[Correspondence, ...]:
        """Walking connections from a station to nearby stations."""

    async def get_route_shape(self, route_id: str) -> tuple[GeoPoint, ...]:
        """Polyline of a route, in sequence order. Optional; empty by default."""

        return ()
