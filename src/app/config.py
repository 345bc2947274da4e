from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    return int(raw) if raw else default


@dataclass(frozen=True, slots=True)
class PlannerConfig:
    """Tuning constants for graph construction and segment estimates.

    Env vars:
      - JOURNEY_TRANSFER_PENALTY_MIN: minutes added per transfer (default 3)
      - JOURNEY_AVG_SPEED_KMH: average vehicle speed for ride weights (default 30)
      - JOURNEY_WALK_SPEED_KMH: walking speed for walk estimates (default 4.5)
      - JOURNEY_MINUTES_PER_STOP: fallback ride estimate per stop (default 2)
      - JOURNEY_FETCH_CONCURRENCY: max in-flight provider calls (default 8)
      - JOURNEY_FETCH_SHAPES: fetch route polylines while building (default true)
    """

    transfer_penalty_minutes: float = 3.0
    average_speed_kmh: float = 30.0
    walking_speed_kmh: float = 4.5
    minutes_per_stop: float = 2.0
    fetch_concurrency: int = 8
    fetch_shapes: bool = True

    def __post_init__(self) -> None:
        if self.transfer_penalty_minutes < 0:
            raise ValueError("transfer_penalty_minutes must be >= 0")
        if self.average_speed_kmh <= 0 or self.walking_speed_kmh <= 0:
            raise ValueError("speeds must be positive")
        if self.fetch_concurrency < 1:
            raise ValueError("fetch_concurrency must be >= 1")

    @staticmethod
    def from_env() -> "PlannerConfig":
        return PlannerConfig(
            transfer_penalty_minutes=_env_float("JOURNEY_TRANSFER_PENALTY_MIN", 3.0),
            average_speed_kmh=_env_float("JOURNEY_AVG_SPEED_KMH", 30.0),
            walking_speed_kmh=_env_float("JOURNEY_WALK_SPEED_KMH", 4.5),
            minutes_per_stop=_env_float("JOURNEY_MINUTES_PER_STOP", 2.0),
            fetch_concurrency=_env_int("JOURNEY_FETCH_CONCURRENCY", 8),
            fetch_shapes=_env_bool("JOURNEY_FETCH_SHAPES", True),
        )
