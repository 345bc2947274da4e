from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

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


@dataclass(frozen=True, slots=True)
class NetworkSnapshot:
    stops_by_id: dict[str, Stop]
    lines: tuple[Line, ...]
    route_stop_ids: dict[str, tuple[str, ...]]
    correspondences: dict[str, tuple[Correspondence, ...]]
    shapes: dict[str, tuple[GeoPoint, ...]]


@dataclass(slots=True)
class LocalNetworkDataProvider(INetworkDataProvider):
    """Serves the network from a JSON snapshot file.

    Env vars:
      - NETWORK_SNAPSHOT_PATH: path to the JSON file (default: data/network.json)

    Expected layout:
      {
        "stops": [{"id", "name", "lat", "lon"}],
        "lines": [{"id", "name", "route_ids", "color"?, "long_name"?, "transport_type"?}],
        "routes": {"<route_id>": ["<stop_id>", ...]},
        "correspondences": {"<stop_id>": [{"to_stop_id", "walk_time_s" | "walk_minutes", "distance_m"?}]},
        "shapes": {"<route_id>": [[lat, lon], ...]}
      }
    """

    path: str | Path | None = None
    _snapshot: NetworkSnapshot | None = None

    def _path(self) -> Path:
        value = self.path or os.getenv("NETWORK_SNAPSHOT_PATH") or "data/network.json"
        return Path(value)

    def load_snapshot(self) -> NetworkSnapshot:
        if self._snapshot is not None:
            return self._snapshot

        path = self._path()
        try:
            with path.open("r", encoding="utf-8") as fp:
                raw = json.load(fp)
        except (OSError, ValueError) as exc:
            raise DataProviderError(f"Cannot read network snapshot {path}: {exc}") from exc

        try:
            self._snapshot = _parse_snapshot(raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise DataProviderError(f"Malformed network snapshot {path}: {exc}") from exc
        return self._snapshot

    async def get_lines(self) -> tuple[Line, ...]:
        return self.load_snapshot().lines

    async def get_stops_for_route(self, route_id: str) -> tuple[Stop, ...]:
        snapshot = self.load_snapshot()
        stop_ids = snapshot.route_stop_ids.get(route_id)
        if stop_ids is None:
            raise DataProviderError(f"Unknown route: {route_id}")
        return tuple(
            snapshot.stops_by_id[sid] for sid in stop_ids if sid in snapshot.stops_by_id
        )

    async def get_correspondences(self, stop_id: str) -> tuple[Correspondence, ...]:
        return self.load_snapshot().correspondences.get(stop_id, ())

    async def get_route_shape(self, route_id: str) -> tuple[GeoPoint, ...]:
        return self.load_snapshot().shapes.get(route_id, ())


def _walk_minutes(row: dict[str, Any]) -> float:
    if row.get("walk_minutes") is not None:
        return float(row["walk_minutes"])
    return float(row["walk_time_s"]) / 60.0


def _parse_snapshot(raw: dict[str, Any]) -> NetworkSnapshot:
    stops_by_id: dict[str, Stop] = {}
    for row in raw.get("stops") or []:
        stop_id = str(row["id"]).strip()
        if not stop_id:
            continue
        stops_by_id[stop_id] = Stop(
            id=stop_id,
            name=str(row.get("name") or stop_id).strip(),
            location=GeoPoint(lat=float(row["lat"]), lon=float(row["lon"])),
        )

    lines = tuple(
        Line(
            id=str(row["id"]),
            name=str(row.get("name") or row["id"]),
            route_ids=tuple(str(r) for r in row["route_ids"]),
            color=row.get("color") or DEFAULT_LINE_COLOR,
            long_name=row.get("long_name"),
            transport_type=TransportType(row.get("transport_type") or "metro"),
        )
        for row in raw.get("lines") or []
    )

    route_stop_ids = {
        str(route_id): tuple(str(s) for s in stop_ids)
        for route_id, stop_ids in (raw.get("routes") or {}).items()
    }

    correspondences = {
        str(stop_id): tuple(
            Correspondence(
                to_stop_id=str(row["to_stop_id"]),
                walk_minutes=_walk_minutes(row),
                distance_m=row.get("distance_m"),
                to_stop_name=row.get("to_stop_name"),
            )
            for row in rows
        )
        for stop_id, rows in (raw.get("correspondences") or {}).items()
    }

    shapes = {
        str(route_id): tuple(GeoPoint(lat=float(p[0]), lon=float(p[1])) for p in pts)
        for route_id, pts in (raw.get("shapes") or {}).items()
    }

    return NetworkSnapshot(
        stops_by_id=stops_by_id,
        lines=lines,
        route_stop_ids=route_stop_ids,
        correspondences=correspondences,
        shapes=shapes,
    )
