from __future__ import annotations

import math

from src.domain.models import GeoPoint


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters."""

    r = 6371000.0
    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2.0) ** 2
    )
    return 2.0 * r * math.asin(math.sqrt(s))


def haversine_distance_km(a: GeoPoint, b: GeoPoint) -> float:
    return haversine_distance_m(a, b) / 1000.0


def travel_minutes(distance_km: float, speed_kmh: float) -> float:
    if speed_kmh <= 0:
        raise ValueError(f"Speed must be positive, got {speed_kmh}")
    return distance_km / speed_kmh * 60.0


def nearest_index(points: tuple[GeoPoint, ...], target: GeoPoint) -> int:
    best_i = 0
    best_d = float("inf")
    for i, p in enumerate(points):
        d = float(haversine_distance_m(p, target))
        if d < best_d:
            best_d = d
            best_i = i
    return best_i


def slice_polyline_between_points(
    points: tuple[GeoPoint, ...], *, start: GeoPoint, end: GeoPoint
) -> tuple[GeoPoint, ...]:
    """Return only the polyline segment between start and end.

    Start/end are snapped to the nearest shape points. When the trip runs
    against the shape's sequence order the slice is reversed, so the result
    always reads start -> end.
    """

    if len(points) < 2:
        return (start, end)

    i0 = nearest_index(points, start)
    i1 = nearest_index(points, end)
    if i0 == i1:
        return (start, end)

    if i0 < i1:
        seg = list(points[i0 : i1 + 1])
    else:
        seg = list(points[i1 : i0 + 1])
        seg.reverse()

    return tuple(seg)


def interpolate_points(
    points: tuple[GeoPoint, ...], *, target_count: int
) -> tuple[GeoPoint, ...]:
    """Densify a polyline by inserting evenly spaced points on each leg.

    The result keeps every input vertex and ends on the last one.
    """

    if len(points) < 2 or target_count <= len(points):
        return tuple(points)

    legs = len(points) - 1
    per_leg = max(1, (target_count - 1) // legs)

    out: list[GeoPoint] = []
    for a, b in zip(points, points[1:]):
        for j in range(per_leg):
            out.append(a.lerp(b, j / per_leg))
    out.append(points[-1])
    return tuple(out)
