from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .geo import GeoPoint
from .line import Line
from .stop import Stop


class EdgeKind(str, Enum):
    RIDE = "ride"
    TRANSFER = "transfer"


@dataclass(frozen=True, slots=True, order=True)
class TransitNode:
    """Being at `stop_id` while riding `line_id`."""

    stop_id: str
    line_id: str

    @property
    def sort_key(self) -> tuple[str, str]:
        # Line first: equal-cost labels settle by line id, then stop id.
        return (self.line_id, self.stop_id)


@dataclass(frozen=True, slots=True)
class TransitEdge:
    source: TransitNode
    target: TransitNode
    weight: float  # minutes
    kind: EdgeKind
    line_id: str | None = None
    line_name: str | None = None
    line_color: str | None = None

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"Negative edge weight: {self.weight}")
        if self.kind is EdgeKind.TRANSFER and self.line_id is not None:
            raise ValueError("Transfer edges cannot carry line identity")
        if self.kind is EdgeKind.RIDE and self.line_id is None:
            raise ValueError("Ride edges must carry line identity")

    @property
    def is_ride(self) -> bool:
        return self.kind is EdgeKind.RIDE


@dataclass(frozen=True, slots=True)
class TransitGraph:
    """Immutable snapshot of the network as a node/edge graph.

    Built once by `GraphBuilder`; queries only read from it and a rebuild
    produces a brand new value.
    """

    nodes: frozenset[TransitNode]
    adjacency: dict[TransitNode, tuple[TransitEdge, ...]]
    stops_by_id: dict[str, Stop] = field(default_factory=dict)
    lines_by_id: dict[str, Line] = field(default_factory=dict)
    shapes_by_line: dict[str, tuple[GeoPoint, ...]] = field(default_factory=dict)
    _nodes_by_stop: dict[str, tuple[TransitNode, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        grouped: dict[str, list[TransitNode]] = {}
        for node in self.nodes:
            grouped.setdefault(node.stop_id, []).append(node)
        index = {
            stop_id: tuple(sorted(group, key=lambda n: n.sort_key))
            for stop_id, group in grouped.items()
        }
        object.__setattr__(self, "_nodes_by_stop", index)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self.adjacency.values())

    def has_stop(self, stop_id: str) -> bool:
        return stop_id in self._nodes_by_stop

    def nodes_at(self, stop_id: str) -> tuple[TransitNode, ...]:
        return self._nodes_by_stop.get(stop_id, ())

    def edges_from(self, node: TransitNode) -> tuple[TransitEdge, ...]:
        return self.adjacency.get(node, ())

    def edge_between(
        self, source: TransitNode, target: TransitNode
    ) -> TransitEdge | None:
        """Cheapest direct edge from source to target, if any.

        Ride edges win ties, matching the solver which prefers fewer transfers.
        """

        candidates = [e for e in self.edges_from(source) if e.target == target]
        if not candidates:
            return None
        return min(candidates, key=lambda e: (e.weight, not e.is_ride))

    def iter_edges(self):
        for node in sorted(self.adjacency, key=lambda n: n.sort_key):
            yield from self.adjacency[node]
