import pytest
from src.domain.models.geo import GeoPoint


def test_geo_point_accepts_valid_coordinates() -> None:
    p = GeoPoint(lat=40.4168, lon=-3.7038)
    assert p.lat == 40.4168
    assert p.lon == -3.7038


@pytest.mark.parametrize(
    ("lat", "lon"),
    [
        (-90.0001, 0.0),
        (90.0001, 0.0),
        (0.0, -180.0001),
        (0.0, 180.0001),
    ],
)
def test_geo_point_rejects_out_of_range_coordinates(lat: float, lon: float) -> None:
    with pytest.raises(ValueError):
        GeoPoint(lat=lat, lon=lon)


def test_lerp_hits_both_endpoints_and_midpoint() -> None:
    a = GeoPoint(lat=40.0, lon=-3.0)
    b = GeoPoint(lat=41.0, lon=-4.0)

    assert a.lerp(b, 0.0) == a
    assert a.lerp(b, 1.0) == b
    mid = a.lerp(b, 0.5)
    assert mid.lat == pytest.approx(40.5)
    assert mid.lon == pytest.approx(-3.5)
