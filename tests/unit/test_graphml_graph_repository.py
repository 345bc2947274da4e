from __future__ import annotations

from pathlib import Path

import pytest

from src.adapters.persistence import GraphmlGraphRepository
from src.adapters.persistence.graphml_graph_repository import from_networkx, to_networkx
from src.domain.algorithms.graph_builder import GraphBuilder
from src.domain.models import (
    Correspondence,
    GeoPoint,
    Line,
    Stop,
    TransitGraph,
    TransportType,
)


def _graph() -> TransitGraph:
    stops = [
        Stop(id=f"s{i}", name=f"Stop {i}", location=GeoPoint(lat=40.0 + 0.01 * i, lon=-3.7))
        for i in range(4)
    ]
    builder = GraphBuilder()
    builder.add_line(
        Line(id="a", name="L1", route_ids=("a1", "a2"), color="#2DBEF0"), stops[:3]
    )
    builder.add_line(
        Line(
            id="c",
            name="C3",
            route_ids=("c",),
            long_name="Sur",
            transport_type=TransportType.CERCANIAS,
        ),
        stops[2:],
    )
    builder.add_shape("a", [s.location for s in stops[:3]])
    builder.add_interchanges()
    builder.add_correspondences("s0", [Correspondence("s3", 6.0)])
    return builder.build()


def _assert_same(a: TransitGraph, b: TransitGraph) -> None:
    assert a.nodes == b.nodes
    assert list(a.iter_edges()) == list(b.iter_edges())
    assert a.stops_by_id == b.stops_by_id
    assert a.lines_by_id == b.lines_by_id
    assert a.shapes_by_line == b.shapes_by_line


@pytest.mark.unit
def test_networkx_conversion_keeps_edges_and_reference_data() -> None:
    graph = _graph()

    g = to_networkx(graph)

    assert g.number_of_nodes() == graph.node_count
    assert g.number_of_edges() == graph.edge_count
    _assert_same(graph, from_networkx(g))


@pytest.mark.unit
def test_save_then_load_graphml(tmp_path: Path) -> None:
    repo = GraphmlGraphRepository(path=tmp_path / "nested" / "graph.graphml")
    graph = _graph()

    repo.save_graph(graph)
    loaded = repo.load_graph()

    assert loaded is not None
    _assert_same(graph, loaded)
    assert [p.name for p in (tmp_path / "nested").iterdir()] == ["graph.graphml"]


@pytest.mark.unit
def test_load_without_snapshot_returns_none(tmp_path: Path) -> None:
    assert GraphmlGraphRepository(path=tmp_path / "missing.graphml").load_graph() is None
