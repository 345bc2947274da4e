from __future__ import annotations

import pytest

from src.domain.models import (
    GeoPoint,
    Journey,
    JourneySegment,
    Line,
    SegmentType,
    Stop,
    TransportMode,
    TransportType,
)


def _stop(stop_id: str, lat: float) -> Stop:
    return Stop(id=stop_id, name=stop_id, location=GeoPoint(lat=lat, lon=-3.7))


def _ride(a: Stop, b: Stop, minutes: float, *mid: Stop) -> JourneySegment:
    return JourneySegment(
        type=SegmentType.TRANSIT,
        transport_mode=TransportMode.METRO,
        origin=a,
        destination=b,
        duration_minutes=minutes,
        line_id="l",
        line_name="L1",
        intermediate_stops=tuple(mid),
        coordinates=(a.location, b.location),
    )


def _walk(a: Stop, b: Stop, minutes: float) -> JourneySegment:
    return JourneySegment(
        type=SegmentType.WALKING,
        transport_mode=TransportMode.WALKING,
        origin=a,
        destination=b,
        duration_minutes=minutes,
    )


@pytest.mark.unit
def test_journey_aggregates_walking_and_transfers() -> None:
    s1, s2, s3, s4 = (_stop(f"s{i}", 40.0 + i * 0.01) for i in range(1, 5))
    segments = (_ride(s1, s2, 2.5), _walk(s2, s3, 6.126), _ride(s3, s4, 3.0))

    assert Journey.walking_minutes(segments) == 6.13
    assert Journey.count_transfers(segments) == 1
    assert Journey.count_transfers(segments[:1]) == 0
    assert Journey.count_transfers(()) == 0


@pytest.mark.unit
def test_stop_sequence_collapses_segment_boundaries() -> None:
    s1, s2, s3, s4 = (_stop(f"s{i}", 40.0 + i * 0.01) for i in range(1, 5))
    journey = Journey(
        origin=s1,
        destination=s4,
        segments=(_ride(s1, s3, 4.0, s2), _ride(s3, s4, 2.0)),
    )

    assert journey.stop_sequence == ("s1", "s2", "s3", "s4")
    assert len(journey.all_coordinates) == 4


@pytest.mark.unit
def test_transport_mode_for_line() -> None:
    def line(t: TransportType) -> Line:
        return Line(id="x", name="X", route_ids=("r",), transport_type=t)

    assert TransportMode.for_line(None) is TransportMode.METRO
    assert TransportMode.for_line(line(TransportType.FGC)) is TransportMode.CERCANIAS
    assert TransportMode.for_line(line(TransportType.TRAM)) is TransportMode.TRANVIA
    assert (
        TransportMode.for_line(line(TransportType.METRO_LIGERO))
        is TransportMode.METRO_LIGERO
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    ("agency_id", "expected"),
    [
        ("METRO_MADRID", TransportType.METRO),
        ("TMB_METRO", TransportType.METRO),
        ("METRO_LIGERO", TransportType.METRO_LIGERO),
        ("FGC", TransportType.FGC),
        ("TRAM_BARCELONA", TransportType.TRAM),
        ("RENFE_CERCANIAS", TransportType.CERCANIAS),
    ],
)
def test_transport_type_from_agency(agency_id: str, expected: TransportType) -> None:
    assert TransportType.from_agency_id(agency_id) is expected


@pytest.mark.unit
def test_line_requires_route_ids() -> None:
    with pytest.raises(ValueError):
        Line(id="x", name="X", route_ids=())
