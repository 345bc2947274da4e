from __future__ import annotations

import heapq
from dataclasses import dataclass

from src.domain.models import TransitGraph, TransitNode


@dataclass(frozen=True, slots=True)
class PathResult:
    nodes: tuple[TransitNode, ...]
    cost: float  # minutes
    transfers: int


def find_path(
    graph: TransitGraph, origin_stop_id: str, destination_stop_id: str
) -> PathResult | None:
    """Cheapest node path between two stops (multi-source, multi-sink Dijkstra).

    Every node at the origin stop starts at cost 0 and the search stops as
    soon as any node at the destination stop is settled. Labels are ordered
    by (cost, transfers, line id, stop id), so among equal-cost arrivals the
    one with fewer transfer edges wins, then the smallest line id.

    Returns None when either stop is unknown to the graph or unreachable.
    """

    sources = graph.nodes_at(origin_stop_id)
    goals = set(graph.nodes_at(destination_stop_id))
    if not sources or not goals:
        return None

    best: dict[TransitNode, tuple[float, int]] = {}
    prev: dict[TransitNode, TransitNode] = {}
    heap: list[tuple[float, int, tuple[str, str], TransitNode]] = []

    for node in sources:
        best[node] = (0.0, 0)
        heapq.heappush(heap, (0.0, 0, node.sort_key, node))

    settled: set[TransitNode] = set()
    while heap:
        cost, transfers, _, node = heapq.heappop(heap)
        if node in settled:
            continue
        settled.add(node)

        if node in goals:
            return PathResult(
                nodes=_reconstruct(prev, node), cost=cost, transfers=transfers
            )

        for edge in graph.edges_from(node):
            nxt = edge.target
            if nxt in settled:
                continue
            label = (cost + edge.weight, transfers + (0 if edge.is_ride else 1))
            current = best.get(nxt)
            if current is None or label < current:
                best[nxt] = label
                prev[nxt] = node
                heapq.heappush(heap, (label[0], label[1], nxt.sort_key, nxt))

    return None


def _reconstruct(
    prev: dict[TransitNode, TransitNode], target: TransitNode
) -> tuple[TransitNode, ...]:
    out = [target]
    cur = target
    while cur in prev:
        cur = prev[cur]
        out.append(cur)
    out.reverse()
    return tuple(out)
