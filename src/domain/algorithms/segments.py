from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from src.domain.algorithms.geo_utils import (
    haversine_distance_km,
    interpolate_points,
    slice_polyline_between_points,
    travel_minutes,
)
from src.domain.exceptions import RoutingError
from src.domain.models import (
    GeoPoint,
    JourneySegment,
    SegmentType,
    Stop,
    TransitGraph,
    TransitNode,
    TransportMode,
)

logger = logging.getLogger(__name__)

WALK_PATH_POINTS = 15
MIN_SHAPE_POINTS = 10


@dataclass(slots=True)
class SegmentReconstructor:
    """Turns a solved node path into alternating ride/walk segments.

    Segment boundaries fall where the line id changes or a transfer edge is
    taken; when the stop changes there a walking segment is inserted between
    the two stops. Durations come from the graph's edge weights, falling back to
    per-stop and walking-speed estimates when an edge is missing.
    """

    graph: TransitGraph
    walking_speed_kmh: float = 4.5
    minutes_per_stop: float = 2.0

    def build_segments(self, path: Sequence[TransitNode]) -> list[JourneySegment]:
        if len(path) < 2:
            return []

        segments: list[JourneySegment] = []
        run: list[TransitNode] = []

        for node in path:
            if run and self._is_boundary(run[-1], node):
                last = run[-1]
                if len(run) >= 2:
                    segments.append(self._ride(run))
                if last.stop_id != node.stop_id:
                    segments.append(self._walk(last, node))
                run = []
            run.append(node)

        if len(run) >= 2:
            segments.append(self._ride(run))

        logger.debug(
            "Built %d segments from %d path nodes",
            len(segments),
            len(path),
            extra={"segments": len(segments), "path_nodes": len(path)},
        )
        return segments

    def _is_boundary(self, a: TransitNode, b: TransitNode) -> bool:
        if a.line_id != b.line_id:
            return True
        # A correspondence between two stops of the same line is still a walk.
        edge = self.graph.edge_between(a, b)
        return edge is not None and not edge.is_ride

    def _stop(self, node: TransitNode) -> Stop:
        stop = self.graph.stops_by_id.get(node.stop_id)
        if stop is None:
            raise RoutingError(f"Stop {node.stop_id!r} missing from graph")
        return stop

    def _ride(self, run: list[TransitNode]) -> JourneySegment:
        stops = [self._stop(n) for n in run]
        line_id = run[0].line_id
        line = self.graph.lines_by_id.get(line_id)

        return JourneySegment(
            type=SegmentType.TRANSIT,
            transport_mode=TransportMode.for_line(line),
            line_id=line_id,
            line_name=line.name if line else None,
            line_color=line.color if line else None,
            origin=stops[0],
            destination=stops[-1],
            intermediate_stops=tuple(stops[1:-1]),
            duration_minutes=self._ride_minutes(run),
            coordinates=self._ride_coordinates(line_id, stops),
        )

    def _ride_minutes(self, run: list[TransitNode]) -> float:
        total = 0.0
        for a, b in zip(run, run[1:]):
            edge = self.graph.edge_between(a, b)
            if edge is None:
                return max(1.0, len(run) * self.minutes_per_stop)
            total += edge.weight
        return round(total, 2)

    def _ride_coordinates(
        self, line_id: str, stops: list[Stop]
    ) -> tuple[GeoPoint, ...]:
        shape = self.graph.shapes_by_line.get(line_id)
        if not shape:
            return tuple(s.location for s in stops)

        seg = slice_polyline_between_points(
            shape, start=stops[0].location, end=stops[-1].location
        )
        if len(seg) < MIN_SHAPE_POINTS:
            seg = interpolate_points(seg, target_count=max(20, len(seg) * 3))
        return seg

    def _walk(self, a: TransitNode, b: TransitNode) -> JourneySegment:
        origin = self._stop(a)
        destination = self._stop(b)

        edge = self.graph.edge_between(a, b)
        if edge is not None and not edge.is_ride:
            minutes = edge.weight
        else:
            distance_km = haversine_distance_km(origin.location, destination.location)
            minutes = max(1.0, travel_minutes(distance_km, self.walking_speed_kmh))

        return JourneySegment(
            type=SegmentType.WALKING,
            transport_mode=TransportMode.WALKING,
            origin=origin,
            destination=destination,
            duration_minutes=round(minutes, 2),
            coordinates=interpolate_points(
                (origin.location, destination.location),
                target_count=WALK_PATH_POINTS,
            ),
        )
