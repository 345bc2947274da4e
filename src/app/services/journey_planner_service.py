from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.app.config import PlannerConfig
from src.app.ports.output import IGraphRepository, INetworkDataProvider
from src.domain.algorithms.dijkstra import PathResult, find_path
from src.domain.algorithms.graph_builder import GraphBuilder
from src.domain.algorithms.segments import SegmentReconstructor
from src.domain.exceptions import GraphBuildError
from src.domain.models import (
    Correspondence,
    GeoPoint,
    Journey,
    Line,
    Stop,
    TransitGraph,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BuildReport:
    """Outcome of the last graph build (coverage diagnostics)."""

    built_at: datetime
    node_count: int
    edge_count: int
    lines_total: int
    lines_skipped: tuple[str, ...] = ()  # fewer than two stops on every route
    lines_failed: tuple[str, ...] = ()  # every route fetch raised
    stops_failed: tuple[str, ...] = ()  # correspondence fetch raised


@dataclass(frozen=True, slots=True)
class _LineFetch:
    line: Line
    stops: tuple[Stop, ...] = ()
    shape: tuple[GeoPoint, ...] = ()
    failed: bool = False


@dataclass(slots=True)
class JourneyPlannerService:
    """Application service owning the transit graph and answering route queries.

    - `build_graph` is single-flight: callers arriving while a build runs
      await that same build.
    - A new graph is assembled off to the side and swapped in with a single
      assignment, so queries see either the old or the new graph.
    """

    data_provider: INetworkDataProvider
    config: PlannerConfig = field(default_factory=PlannerConfig)
    graph_repository: IGraphRepository | None = None

    _graph: TransitGraph | None = field(default=None, init=False, repr=False)
    _build_task: asyncio.Task | None = field(default=None, init=False, repr=False)
    _report: BuildReport | None = field(default=None, init=False, repr=False)

    @property
    def graph(self) -> TransitGraph | None:
        return self._graph

    @property
    def is_graph_built(self) -> bool:
        return self._graph is not None

    @property
    def last_build_report(self) -> BuildReport | None:
        return self._report

    async def build_graph(self) -> TransitGraph:
        task = self._build_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._build())
            self._build_task = task
        # Shield so one cancelled caller does not abort the shared build.
        return await asyncio.shield(task)

    async def find_path(
        self, origin_stop_id: str, destination_stop_id: str
    ) -> PathResult | None:
        graph = await self._current_graph()
        return find_path(graph, origin_stop_id, destination_stop_id)

    async def find_route(
        self, origin_stop_id: str, destination_stop_id: str
    ) -> Journey | None:
        graph = await self._current_graph()

        result = find_path(graph, origin_stop_id, destination_stop_id)
        if result is None:
            logger.info(
                "No route found",
                extra={"origin": origin_stop_id, "destination": destination_stop_id},
            )
            return None

        reconstructor = SegmentReconstructor(
            graph,
            walking_speed_kmh=self.config.walking_speed_kmh,
            minutes_per_stop=self.config.minutes_per_stop,
        )
        segments = tuple(reconstructor.build_segments(result.nodes))

        journey = Journey(
            origin=graph.stops_by_id[origin_stop_id],
            destination=graph.stops_by_id[destination_stop_id],
            segments=segments,
            total_duration_minutes=round(result.cost, 2),
            total_walking_minutes=Journey.walking_minutes(segments),
            transfer_count=Journey.count_transfers(segments),
        )
        logger.info(
            "Route found: %d segments, %.2f min",
            len(segments),
            journey.total_duration_minutes,
            extra={"origin": origin_stop_id, "destination": destination_stop_id},
        )
        return journey

    async def _current_graph(self) -> TransitGraph:
        graph = self._graph
        if graph is not None:
            return graph

        if self.graph_repository is not None and self._build_task is None:
            snapshot = await self._load_snapshot(self.graph_repository)
            if self._graph is not None:
                # A build finished while the snapshot was loading.
                return self._graph
            if snapshot is not None:
                logger.info(
                    "Loaded graph snapshot: %d nodes, %d edges",
                    snapshot.node_count,
                    snapshot.edge_count,
                )
                self._graph = snapshot
                return snapshot

        return await self.build_graph()

    async def _build(self) -> TransitGraph:
        cfg = self.config
        logger.info("Building transit graph...")

        try:
            lines = await self.data_provider.get_lines()
        except Exception as exc:
            raise GraphBuildError(f"Could not load lines: {exc}") from exc

        lines = tuple(sorted(lines, key=lambda ln: ln.id))
        semaphore = asyncio.Semaphore(cfg.fetch_concurrency)

        fetched = await asyncio.gather(
            *(self._fetch_line(semaphore, line) for line in lines)
        )

        builder = GraphBuilder(
            average_speed_kmh=cfg.average_speed_kmh,
            transfer_penalty_minutes=cfg.transfer_penalty_minutes,
        )
        skipped: list[str] = []
        failed: list[str] = []
        for item in fetched:
            if builder.add_line(item.line, item.stops) == 0:
                (failed if item.failed else skipped).append(item.line.id)
                continue
            builder.add_shape(item.line.id, item.shape)

        builder.add_interchanges()

        stop_ids = builder.stop_ids()
        correspondences = await asyncio.gather(
            *(self._fetch_correspondences(semaphore, sid) for sid in stop_ids)
        )
        stops_failed: list[str] = []
        for stop_id, corrs in zip(stop_ids, correspondences):
            if corrs is None:
                stops_failed.append(stop_id)
                continue
            builder.add_correspondences(stop_id, corrs)

        graph = builder.build()
        self._graph = graph
        self._report = BuildReport(
            built_at=datetime.now(timezone.utc),
            node_count=graph.node_count,
            edge_count=graph.edge_count,
            lines_total=len(lines),
            lines_skipped=tuple(skipped),
            lines_failed=tuple(failed),
            stops_failed=tuple(stops_failed),
        )

        if failed or stops_failed:
            logger.warning(
                "Graph built with reduced coverage",
                extra={"lines_failed": failed, "stops_failed": stops_failed},
            )
        logger.info(
            "Graph built: %d nodes, %d edges from %d lines",
            graph.node_count,
            graph.edge_count,
            len(lines),
        )

        if self.graph_repository is not None:
            await self._save_snapshot(self.graph_repository, graph)

        return graph

    async def _load_snapshot(self, repository: IGraphRepository) -> TransitGraph | None:
        try:
            return await asyncio.to_thread(repository.load_graph)
        except Exception as exc:
            logger.warning(
                "Could not load graph snapshot, building instead",
                extra={"error": str(exc)},
            )
            return None

    async def _save_snapshot(
        self, repository: IGraphRepository, graph: TransitGraph
    ) -> None:
        # The new graph is already live; a failed save only loses the warm start.
        try:
            await asyncio.to_thread(repository.save_graph, graph)
        except Exception as exc:
            logger.warning("Could not save graph snapshot", extra={"error": str(exc)})

    async def _fetch_line(self, semaphore: asyncio.Semaphore, line: Line) -> _LineFetch:
        errors = 0
        for route_id in line.route_ids:
            try:
                async with semaphore:
                    stops = await self.data_provider.get_stops_for_route(route_id)
            except Exception as exc:
                errors += 1
                logger.warning(
                    "Failed to fetch stops for route",
                    extra={"line_id": line.id, "route_id": route_id, "error": str(exc)},
                )
                continue

            if len(stops) < 2:
                logger.debug(
                    "Route has fewer than two stops",
                    extra={"line_id": line.id, "route_id": route_id},
                )
                continue

            shape: tuple[GeoPoint, ...] = ()
            if self.config.fetch_shapes:
                shape = await self._fetch_shape(semaphore, line, route_id)
            return _LineFetch(line=line, stops=tuple(stops), shape=shape)

        return _LineFetch(line=line, failed=errors == len(line.route_ids))

    async def _fetch_shape(
        self, semaphore: asyncio.Semaphore, line: Line, route_id: str
    ) -> tuple[GeoPoint, ...]:
        try:
            async with semaphore:
                return tuple(await self.data_provider.get_route_shape(route_id))
        except Exception as exc:
            logger.warning(
                "Failed to fetch route shape",
                extra={"line_id": line.id, "route_id": route_id, "error": str(exc)},
            )
            return ()

    async def _fetch_correspondences(
        self, semaphore: asyncio.Semaphore, stop_id: str
    ) -> tuple[Correspondence, ...] | None:
        try:
            async with semaphore:
                return tuple(await self.data_provider.get_correspondences(stop_id))
        except Exception as exc:
            logger.warning(
                "Failed to fetch correspondences",
                extra={"stop_id": stop_id, "error": str(exc)},
            )
            return None
