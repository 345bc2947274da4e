from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .geo import GeoPoint
from .line import TransportMode
from .stop import Stop


class SegmentType(str, Enum):
    TRANSIT = "transit"
    WALKING = "walking"


@dataclass(frozen=True, slots=True)
class JourneySegment:
    """One ride on a single line, or one walk between two stations."""

    type: SegmentType
    transport_mode: TransportMode
    origin: Stop
    destination: Stop
    duration_minutes: float
    line_name: str | None = None  # "L1", "C3"; None for walking
    line_color: str | None = None
    line_id: str | None = None
    intermediate_stops: tuple[Stop, ...] = ()
    coordinates: tuple[GeoPoint, ...] = ()

    @property
    def all_stops(self) -> tuple[Stop, ...]:
        return (self.origin, *self.intermediate_stops, self.destination)

    @property
    def stop_count(self) -> int:
        """Number of stops travelled, not counting the origin."""

        return len(self.intermediate_stops) + 1


@dataclass(frozen=True, slots=True)
class Journey:
    origin: Stop
    destination: Stop
    segments: tuple[JourneySegment, ...] = field(default_factory=tuple)
    total_duration_minutes: float = 0.0
    total_walking_minutes: float = 0.0
    transfer_count: int = 0

    @property
    def all_coordinates(self) -> tuple[GeoPoint, ...]:
        return tuple(p for seg in self.segments for p in seg.coordinates)

    @property
    def stop_sequence(self) -> tuple[str, ...]:
        """Stop ids along the journey with boundary duplicates collapsed."""

        out: list[str] = []
        for seg in self.segments:
            for stop in seg.all_stops:
                if out and out[-1] == stop.id:
                    continue
                out.append(stop.id)
        return tuple(out)

    @staticmethod
    def walking_minutes(segments: tuple[JourneySegment, ...]) -> float:
        return round(
            sum(s.duration_minutes for s in segments if s.type is SegmentType.WALKING),
            2,
        )

    @staticmethod
    def count_transfers(segments: tuple[JourneySegment, ...]) -> int:
        rides = sum(1 for s in segments if s.type is SegmentType.TRANSIT)
        return max(0, rides - 1)
