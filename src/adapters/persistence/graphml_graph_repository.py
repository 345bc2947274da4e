from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import networkx as nx

from src.app.ports.output import IGraphRepository
from src.domain.models import (
    EdgeKind,
    GeoPoint,
    Line,
    Stop,
    TransitEdge,
    TransitGraph,
    TransitNode,
    TransportType,
)


def _node_key(node: TransitNode) -> str:
    return f"{node.stop_id}|{node.line_id}"


@dataclass(slots=True)
class GraphmlGraphRepository(IGraphRepository):
    """Stores built transit graphs as GraphML files via networkx.

    Env vars:
      - GRAPH_SNAPSHOT_PATH: file path (default: data/graph.graphml)

    Stops, lines and shapes travel as JSON strings in the graph attributes;
    GraphML only carries scalar values.
    """

    path: str | Path | None = None

    def _path(self) -> Path:
        value = self.path or os.getenv("GRAPH_SNAPSHOT_PATH") or "data/graph.graphml"
        return Path(value)

    def save_graph(self, graph: TransitGraph) -> None:
        g = to_networkx(graph)
        path = self._path()
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write next to the target and rename, so readers never see a partial file.
        fd, tmp_name = tempfile.mkstemp(suffix=".graphml", dir=path.parent)
        os.close(fd)
        try:
            nx.write_graphml(g, tmp_name)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def load_graph(self) -> TransitGraph | None:
        path = self._path()
        if not path.exists():
            return None
        g = nx.read_graphml(path, force_multigraph=True)
        return from_networkx(g)


def to_networkx(graph: TransitGraph) -> nx.MultiDiGraph:
    g = nx.MultiDiGraph()
    g.graph["stops"] = json.dumps(
        [
            {"id": s.id, "name": s.name, "lat": s.lat, "lon": s.lon}
            for s in sorted(graph.stops_by_id.values(), key=lambda s: s.id)
        ]
    )
    g.graph["lines"] = json.dumps(
        [
            {
                "id": ln.id,
                "name": ln.name,
                "route_ids": list(ln.route_ids),
                "color": ln.color,
                "long_name": ln.long_name,
                "transport_type": ln.transport_type.value,
            }
            for ln in sorted(graph.lines_by_id.values(), key=lambda ln: ln.id)
        ]
    )
    g.graph["shapes"] = json.dumps(
        {
            line_id: [[p.lat, p.lon] for p in pts]
            for line_id, pts in sorted(graph.shapes_by_line.items())
        }
    )

    for node in sorted(graph.nodes, key=lambda n: n.sort_key):
        g.add_node(_node_key(node), stop_id=node.stop_id, line_id=node.line_id)

    for index, edge in enumerate(graph.iter_edges()):
        attrs: dict[str, Any] = {
            "index": index,
            "weight": float(edge.weight),
            "kind": edge.kind.value,
        }
        for name in ("line_id", "line_name", "line_color"):
            value = getattr(edge, name)
            if value is not None:
                attrs[name] = value
        g.add_edge(_node_key(edge.source), _node_key(edge.target), **attrs)

    return g


def from_networkx(g: nx.MultiDiGraph) -> TransitGraph:
    nodes: dict[str, TransitNode] = {
        key: TransitNode(stop_id=str(data["stop_id"]), line_id=str(data["line_id"]))
        for key, data in g.nodes(data=True)
    }

    edges: list[tuple[int, TransitEdge]] = []
    for u, v, data in g.edges(data=True):
        edges.append(
            (
                int(data.get("index", 0)),
                TransitEdge(
                    source=nodes[u],
                    target=nodes[v],
                    weight=float(data["weight"]),
                    kind=EdgeKind(data["kind"]),
                    line_id=data.get("line_id"),
                    line_name=data.get("line_name"),
                    line_color=data.get("line_color"),
                ),
            )
        )
    edges.sort(key=lambda x: x[0])

    adjacency: dict[TransitNode, list[TransitEdge]] = {}
    for _, edge in edges:
        adjacency.setdefault(edge.source, []).append(edge)

    stops = {
        row["id"]: Stop(
            id=row["id"],
            name=row["name"],
            location=GeoPoint(lat=float(row["lat"]), lon=float(row["lon"])),
        )
        for row in json.loads(g.graph.get("stops", "[]"))
    }
    lines = {
        row["id"]: Line(
            id=row["id"],
            name=row["name"],
            route_ids=tuple(row["route_ids"]),
            color=row["color"],
            long_name=row.get("long_name"),
            transport_type=TransportType(row["transport_type"]),
        )
        for row in json.loads(g.graph.get("lines", "[]"))
    }
    shapes = {
        line_id: tuple(GeoPoint(lat=float(p[0]), lon=float(p[1])) for p in pts)
        for line_id, pts in json.loads(g.graph.get("shapes", "{}")).items()
    }

    return TransitGraph(
        nodes=frozenset(nodes.values()),
        adjacency={n: tuple(es) for n, es in adjacency.items()},
        stops_by_id=stops,
        lines_by_id=lines,
        shapes_by_line=shapes,
    )
