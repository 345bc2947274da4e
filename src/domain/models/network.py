from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Correspondence:
    """A recorded walking connection from one station to another."""

    to_stop_id: str
    walk_minutes: float
    distance_m: float | None = None
    to_stop_name: str | None = None

    def __post_init__(self) -> None:
        if self.walk_minutes < 0:
            raise ValueError(f"Negative walk time: {self.walk_minutes}")
