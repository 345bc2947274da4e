from __future__ import annotations

import os
from functools import lru_cache

from src.adapters.network import HttpNetworkDataProvider
from src.adapters.persistence import GraphmlGraphRepository, LocalNetworkDataProvider
from src.app.config import PlannerConfig
from src.app.ports.output import IGraphRepository, INetworkDataProvider
from src.app.services.journey_planner_service import JourneyPlannerService


@lru_cache
def get_planner_service() -> JourneyPlannerService:
    """Process-wide planner so the built graph is shared across requests."""

    provider: INetworkDataProvider
    if os.getenv("NETWORK_SNAPSHOT_PATH"):
        provider = LocalNetworkDataProvider()
    else:
        provider = HttpNetworkDataProvider()

    graph_repository: IGraphRepository | None = None
    if os.getenv("GRAPH_SNAPSHOT_PATH"):
        graph_repository = GraphmlGraphRepository()

    return JourneyPlannerService(
        data_provider=provider,
        config=PlannerConfig.from_env(),
        graph_repository=graph_repository,
    )
