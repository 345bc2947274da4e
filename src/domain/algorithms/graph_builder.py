from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from src.domain.algorithms.geo_utils import haversine_distance_km, travel_minutes
from src.domain.models import (
    Correspondence,
    EdgeKind,
    GeoPoint,
    Line,
    Stop,
    TransitEdge,
    TransitGraph,
    TransitNode,
)

MIN_EDGE_MINUTES = 1.0


@dataclass(slots=True)
class GraphBuilder:
    """Accumulates ride and transfer edges and freezes them into a TransitGraph.

    The builder is pure: fetching stop sequences and correspondences is the
    caller's job. Expected call order is every `add_line`, then
    `add_interchanges` once, then `add_correspondences` per stop, then `build`.
    """

    average_speed_kmh: float = 30.0
    transfer_penalty_minutes: float = 3.0

    _nodes: set[TransitNode] = field(default_factory=set, init=False, repr=False)
    _adjacency: dict[TransitNode, list[TransitEdge]] = field(
        default_factory=dict, init=False, repr=False
    )
    _stops: dict[str, Stop] = field(default_factory=dict, init=False, repr=False)
    _lines: dict[str, Line] = field(default_factory=dict, init=False, repr=False)
    _shapes: dict[str, tuple[GeoPoint, ...]] = field(
        default_factory=dict, init=False, repr=False
    )
    _by_stop: dict[str, list[TransitNode]] | None = field(
        default=None, init=False, repr=False
    )

    def ride_weight(self, a: Stop, b: Stop) -> float:
        minutes = travel_minutes(
            haversine_distance_km(a.location, b.location), self.average_speed_kmh
        )
        return max(MIN_EDGE_MINUTES, minutes)

    def add_line(self, line: Line, stops: Sequence[Stop]) -> int:
        """Add both-direction ride edges between consecutive stops of a line.

        Returns the number of edges added; lines with fewer than two stops
        add nothing.
        """

        self._lines[line.id] = line
        if len(stops) < 2:
            return 0

        for stop in stops:
            self._stops[stop.id] = stop

        added = 0
        for a, b in zip(stops, stops[1:]):
            if a.id == b.id:
                continue

            u = TransitNode(stop_id=a.id, line_id=line.id)
            v = TransitNode(stop_id=b.id, line_id=line.id)
            self._nodes.add(u)
            self._nodes.add(v)
            self._by_stop = None

            weight = self.ride_weight(a, b)
            for source, target in ((u, v), (v, u)):
                self._add_edge(
                    TransitEdge(
                        source=source,
                        target=target,
                        weight=weight,
                        kind=EdgeKind.RIDE,
                        line_id=line.id,
                        line_name=line.name,
                        line_color=line.color,
                    )
                )
                added += 1
        return added

    def add_shape(self, line_id: str, points: Iterable[GeoPoint]) -> None:
        pts = tuple(points)
        if len(pts) >= 2:
            self._shapes[line_id] = pts

    def add_interchanges(self) -> int:
        """Same-station transfer edges between every pair of distinct lines."""

        added = 0
        for nodes in self._nodes_by_stop().values():
            if len({n.line_id for n in nodes}) < 2:
                continue
            for u in nodes:
                for v in nodes:
                    if u.line_id == v.line_id:
                        continue
                    self._add_edge(self._transfer(u, v, self.transfer_penalty_minutes))
                    added += 1
        return added

    def add_correspondences(
        self, stop_id: str, correspondences: Iterable[Correspondence]
    ) -> int:
        """Walking transfer edges from every node at `stop_id` to every node
        at each correspondence's destination stop."""

        by_stop = self._nodes_by_stop()
        sources = by_stop.get(stop_id, [])
        if not sources:
            return 0

        added = 0
        for corr in correspondences:
            if corr.to_stop_id == stop_id:
                continue
            targets = by_stop.get(corr.to_stop_id, [])
            weight = corr.walk_minutes + self.transfer_penalty_minutes
            for u in sources:
                for v in targets:
                    self._add_edge(self._transfer(u, v, weight))
                    added += 1
        return added

    def stop_ids(self) -> tuple[str, ...]:
        return tuple(sorted({n.stop_id for n in self._nodes}))

    def build(self) -> TransitGraph:
        return TransitGraph(
            nodes=frozenset(self._nodes),
            adjacency={n: tuple(edges) for n, edges in self._adjacency.items()},
            stops_by_id=dict(self._stops),
            lines_by_id=dict(self._lines),
            shapes_by_line=dict(self._shapes),
        )

    def _transfer(self, u: TransitNode, v: TransitNode, weight: float) -> TransitEdge:
        return TransitEdge(
            source=u,
            target=v,
            weight=max(MIN_EDGE_MINUTES, weight),
            kind=EdgeKind.TRANSFER,
        )

    def _add_edge(self, edge: TransitEdge) -> None:
        self._adjacency.setdefault(edge.source, []).append(edge)

    def _nodes_by_stop(self) -> dict[str, list[TransitNode]]:
        if self._by_stop is None:
            grouped: dict[str, list[TransitNode]] = {}
            for node in sorted(self._nodes, key=lambda n: n.sort_key):
                grouped.setdefault(node.stop_id, []).append(node)
            self._by_stop = grouped
        return self._by_stop
