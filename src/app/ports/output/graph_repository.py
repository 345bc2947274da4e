from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import TransitGraph


class IGraphRepository(ABC):
    """Persistence port for built transit graph snapshots."""

    @abstractmethod
    def save_graph(self, graph: TransitGraph) -> None:
        """Persist a fully built graph, replacing any previous snapshot."""

    @abstractmethod
    def load_graph(self) -> TransitGraph | None:
        """Load the last saved snapshot, or None if there is none."""
