from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class GeoPointSchema(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)


class StopSchema(BaseModel):
    id: str
    name: str
    location: GeoPointSchema


class JourneySegmentSchema(BaseModel):
    type: Literal["transit", "walking"]
    transport_mode: str
    line_id: str | None = None
    line_name: str | None = None
    line_color: str | None = None
    origin: StopSchema
    destination: StopSchema
    intermediate_stops: list[StopSchema] = []
    duration_minutes: float
    coordinates: list[GeoPointSchema] = []


class JourneySchema(BaseModel):
    origin: StopSchema
    destination: StopSchema
    segments: list[JourneySegmentSchema] = []
    total_duration_minutes: float
    total_walking_minutes: float
    transfer_count: int


class GraphBuildSchema(BaseModel):
    built_at: datetime
    nodes: int
    edges: int
    lines_total: int
    lines_skipped: list[str] = []
    lines_failed: list[str] = []
    stops_failed: list[str] = []
