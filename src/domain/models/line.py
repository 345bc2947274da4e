from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_LINE_COLOR = "#75B6E0"


class TransportType(str, Enum):
    """Kind of service a line runs (as classified by the upstream agency)."""

    METRO = "metro"
    METRO_LIGERO = "metro_ligero"
    CERCANIAS = "cercanias"
    TRAM = "tram"
    FGC = "fgc"

    @classmethod
    def from_agency_id(cls, agency_id: str) -> TransportType:
        if agency_id == "METRO_LIGERO":
            return cls.METRO_LIGERO
        if agency_id == "TMB_METRO" or agency_id.startswith("METRO_"):
            return cls.METRO
        if agency_id == "FGC":
            return cls.FGC
        if agency_id.startswith(("TRANVIA_", "TRAM_")):
            return cls.TRAM
        return cls.CERCANIAS


class TransportMode(str, Enum):
    """Mode shown for a journey segment."""

    METRO = "metro"
    CERCANIAS = "cercanias"
    METRO_LIGERO = "metro_ligero"
    TRANVIA = "tranvia"
    BUS = "bus"
    WALKING = "walking"

    @classmethod
    def for_line(cls, line: Line | None) -> TransportMode:
        if line is None:
            return cls.METRO
        return _MODE_BY_TYPE[line.transport_type]


_MODE_BY_TYPE: dict[TransportType, TransportMode] = {
    TransportType.METRO: TransportMode.METRO,
    TransportType.METRO_LIGERO: TransportMode.METRO_LIGERO,
    TransportType.CERCANIAS: TransportMode.CERCANIAS,
    TransportType.TRAM: TransportMode.TRANVIA,
    # FGC behaves like cercanias.
    TransportType.FGC: TransportMode.CERCANIAS,
}


@dataclass(frozen=True, slots=True)
class Line:
    """A named transit service backed by one or more upstream routes.

    `route_ids` are tried in order when fetching the stop sequence.
    """

    id: str
    name: str
    route_ids: tuple[str, ...]
    color: str = DEFAULT_LINE_COLOR
    long_name: str | None = None
    transport_type: TransportType = TransportType.METRO

    def __post_init__(self) -> None:
        if not self.route_ids:
            raise ValueError(f"Line {self.id!r} has no route ids")
