from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_planner_service
from src.adapters.api.schemas.journeys import (
    GeoPointSchema,
    GraphBuildSchema,
    JourneySchema,
    JourneySegmentSchema,
    StopSchema,
)
from src.app.services.journey_planner_service import JourneyPlannerService
from src.domain.models import Journey, Stop

router = APIRouter(tags=["journeys"])


def _stop_to_schema(stop: Stop) -> StopSchema:
    return StopSchema(
        id=stop.id,
        name=stop.name,
        location=GeoPointSchema(lat=stop.lat, lon=stop.lon),
    )


def _journey_to_schema(journey: Journey) -> JourneySchema:
    return JourneySchema(
        origin=_stop_to_schema(journey.origin),
        destination=_stop_to_schema(journey.destination),
        segments=[
            JourneySegmentSchema(
                type=seg.type.value,
                transport_mode=seg.transport_mode.value,
                line_id=seg.line_id,
                line_name=seg.line_name,
                line_color=seg.line_color,
                origin=_stop_to_schema(seg.origin),
                destination=_stop_to_schema(seg.destination),
                intermediate_stops=[_stop_to_schema(s) for s in seg.intermediate_stops],
                duration_minutes=seg.duration_minutes,
                coordinates=[
                    GeoPointSchema(lat=p.lat, lon=p.lon) for p in seg.coordinates
                ],
            )
            for seg in journey.segments
        ],
        total_duration_minutes=journey.total_duration_minutes,
        total_walking_minutes=journey.total_walking_minutes,
        transfer_count=journey.transfer_count,
    )


@router.post("/graph/build", response_model=GraphBuildSchema)
async def build_graph(
    service: JourneyPlannerService = Depends(get_planner_service),
) -> GraphBuildSchema:
    await service.build_graph()
    report = service.last_build_report
    if report is None:
        raise HTTPException(status_code=500, detail="Graph build produced no report")
    return GraphBuildSchema(
        built_at=report.built_at,
        nodes=report.node_count,
        edges=report.edge_count,
        lines_total=report.lines_total,
        lines_skipped=list(report.lines_skipped),
        lines_failed=list(report.lines_failed),
        stops_failed=list(report.stops_failed),
    )


@router.get("/journeys", response_model=JourneySchema)
async def find_journey(
    origin: str = Query(..., min_length=1),
    destination: str = Query(..., min_length=1),
    service: JourneyPlannerService = Depends(get_planner_service),
) -> JourneySchema:
    journey = await service.find_route(origin, destination)
    if journey is None:
        raise HTTPException(status_code=404, detail="No route found")
    return _journey_to_schema(journey)
