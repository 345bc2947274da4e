from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import httpx

from src.app.ports.output import INetworkDataProvider
from src.domain.exceptions import DataProviderError
from src.domain.models import (
    DEFAULT_LINE_COLOR,
    Correspondence,
    GeoPoint,
    Line,
    Stop,
    TransportType,
)

DEFAULT_BASE_URL = "https://redcercanias.com/api/v1/gtfs"


@dataclass(slots=True)
class HttpNetworkDataProvider(INetworkDataProvider):
    """Reads the network snapshot from the upstream GTFS REST API.

    Env vars:
      - JOURNEY_API_BASE_URL: API root (default: https://redcercanias.com/api/v1/gtfs)
      - JOURNEY_API_HEADERS: optional headers, as 'Key:Value;Key2:Value2'
      - JOURNEY_API_TIMEOUT_S: request timeout (default 10)

    Endpoints used:
      - GET /routes
      - GET /routes/{route_id}/stops
      - GET /routes/{route_id}/shape
      - GET /stops/{stop_id}/correspondences
    """

    base_url: str | None = None
    headers_raw: str | None = None
    timeout_s: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("JOURNEY_API_BASE_URL", DEFAULT_BASE_URL)
        if self.headers_raw is None:
            self.headers_raw = os.getenv("JOURNEY_API_HEADERS")
        if os.getenv("JOURNEY_API_TIMEOUT_S"):
            self.timeout_s = float(os.environ["JOURNEY_API_TIMEOUT_S"])

    def _headers(self) -> dict[str, str]:
        raw = (self.headers_raw or "").strip()
        if not raw:
            return {}
        headers: dict[str, str] = {}
        for part in raw.split(";"):
            part = part.strip()
            if ":" not in part:
                continue
            k, v = part.split(":", 1)
            k = k.strip()
            if k:
                headers[k] = v.strip()
        return headers

    async def _get_json(self, path: str) -> Any:
        url = f"{(self.base_url or '').rstrip('/')}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(url, headers=self._headers())
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as exc:
            raise DataProviderError(f"GET {url} failed: {exc}") from exc
        except ValueError as exc:
            raise DataProviderError(f"GET {url} returned invalid JSON") from exc

    async def get_lines(self) -> tuple[Line, ...]:
        payload = await self._get_json("/routes")
        try:
            return _lines_from_routes(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise DataProviderError(f"Malformed routes payload: {exc}") from exc

    async def get_stops_for_route(self, route_id: str) -> tuple[Stop, ...]:
        payload = await self._get_json(f"/routes/{route_id}/stops")
        try:
            return tuple(
                Stop(
                    id=str(row["id"]),
                    name=str(row.get("name") or row["id"]),
                    location=GeoPoint(lat=float(row["lat"]), lon=float(row["lon"])),
                )
                for row in payload
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DataProviderError(f"Malformed stops for route {route_id}: {exc}") from exc

    async def get_correspondences(self, stop_id: str) -> tuple[Correspondence, ...]:
        payload = await self._get_json(f"/stops/{stop_id}/correspondences")
        try:
            rows = payload.get("correspondences") or []
            return tuple(
                Correspondence(
                    to_stop_id=str(row["to_stop_id"]),
                    walk_minutes=float(row["walk_time_s"]) / 60.0,
                    distance_m=(
                        float(row["distance_m"])
                        if row.get("distance_m") is not None
                        else None
                    ),
                    to_stop_name=row.get("to_stop_name"),
                )
                for row in rows
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise DataProviderError(
                f"Malformed correspondences for stop {stop_id}: {exc}"
            ) from exc

    async def get_route_shape(self, route_id: str) -> tuple[GeoPoint, ...]:
        payload = await self._get_json(f"/routes/{route_id}/shape")
        try:
            points = sorted(
                payload.get("shape") or [], key=lambda p: int(p.get("sequence", 0))
            )
            return tuple(
                GeoPoint(lat=float(p["lat"]), lon=float(p["lon"])) for p in points
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise DataProviderError(f"Malformed shape for route {route_id}: {exc}") from exc


def _normalize_color(raw: str | None) -> str:
    value = (raw or "").strip()
    if not value:
        return DEFAULT_LINE_COLOR
    return value if value.startswith("#") else f"#{value}"


def _display_name(short_name: str, transport_type: TransportType) -> str:
    # Metro lines are shown as "L<n>", except the "R" branch.
    if (
        transport_type is TransportType.METRO
        and short_name != "R"
        and not short_name.upper().startswith("L")
    ):
        return f"L{short_name}"
    return short_name


def _lines_from_routes(routes: list[dict[str, Any]]) -> tuple[Line, ...]:
    """Group upstream routes into lines keyed by (agency, short name)."""

    grouped: dict[str, dict[str, Any]] = {}
    for route in routes:
        route_id = str(route["id"])
        agency_id = str(route.get("agency_id") or "")
        short_name = str(route.get("short_name") or route_id)
        line_id = f"{agency_id}_{short_name.lower()}"

        entry = grouped.get(line_id)
        if entry is not None:
            entry["route_ids"].append(route_id)
            continue

        transport_type = TransportType.from_agency_id(agency_id)
        grouped[line_id] = {
            "name": _display_name(short_name, transport_type),
            "long_name": route.get("long_name"),
            "color": _normalize_color(route.get("color")),
            "transport_type": transport_type,
            "route_ids": [route_id],
        }

    return tuple(
        Line(
            id=line_id,
            name=entry["name"],
            route_ids=tuple(entry["route_ids"]),
            color=entry["color"],
            long_name=entry["long_name"],
            transport_type=entry["transport_type"],
        )
        for line_id, entry in sorted(grouped.items())
    )
