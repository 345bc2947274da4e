from __future__ import annotations

import pytest

from src.domain.algorithms.graph_builder import GraphBuilder
from src.domain.models import (
    Correspondence,
    EdgeKind,
    GeoPoint,
    Line,
    Stop,
    TransitNode,
)

# 0.01 degrees of latitude at 30 km/h.
HOP_MINUTES = 2.2239


def _stop(stop_id: str, i: int) -> Stop:
    return Stop(
        id=stop_id, name=stop_id.upper(), location=GeoPoint(lat=40.0 + 0.01 * i, lon=-3.7)
    )


def _line(line_id: str) -> Line:
    return Line(id=line_id, name=line_id.upper(), route_ids=(f"{line_id}-r",), color="#FF0000")


@pytest.mark.unit
def test_add_line_creates_symmetric_ride_edges() -> None:
    builder = GraphBuilder()
    stops = [_stop("s1", 0), _stop("s2", 1), _stop("s3", 2)]

    added = builder.add_line(_line("a"), stops)
    graph = builder.build()

    assert added == 4
    assert graph.node_count == 3
    assert graph.edge_count == 4
    for edge in graph.iter_edges():
        assert edge.kind is EdgeKind.RIDE
        assert edge.line_id == "a"
        assert edge.line_name == "A"
        assert edge.line_color == "#FF0000"
        back = graph.edge_between(edge.target, edge.source)
        assert back is not None
        assert back.weight == edge.weight


@pytest.mark.unit
def test_ride_weight_follows_average_speed() -> None:
    builder = GraphBuilder(average_speed_kmh=30.0)
    builder.add_line(_line("a"), [_stop("s1", 0), _stop("s2", 1)])
    graph = builder.build()

    edge = graph.edge_between(TransitNode("s1", "a"), TransitNode("s2", "a"))
    assert edge is not None
    assert edge.weight == pytest.approx(HOP_MINUTES, abs=0.01)


@pytest.mark.unit
def test_ride_weight_has_one_minute_floor() -> None:
    builder = GraphBuilder()
    a = Stop(id="s1", name="S1", location=GeoPoint(lat=40.0, lon=-3.7))
    b = Stop(id="s2", name="S2", location=GeoPoint(lat=40.001, lon=-3.7))
    assert builder.ride_weight(a, b) == 1.0
    assert builder.ride_weight(a, a) == 1.0


@pytest.mark.unit
def test_short_lines_add_nothing_but_are_recorded() -> None:
    builder = GraphBuilder()

    assert builder.add_line(_line("a"), []) == 0
    assert builder.add_line(_line("b"), [_stop("s1", 0)]) == 0

    graph = builder.build()
    assert graph.node_count == 0
    assert graph.edge_count == 0
    assert set(graph.lines_by_id) == {"a", "b"}


@pytest.mark.unit
def test_consecutive_duplicate_stops_are_not_linked_to_themselves() -> None:
    builder = GraphBuilder()
    s1 = _stop("s1", 0)

    added = builder.add_line(_line("a"), [s1, s1, _stop("s2", 1)])

    assert added == 2
    graph = builder.build()
    for edge in graph.iter_edges():
        assert edge.source != edge.target


@pytest.mark.unit
def test_interchanges_connect_lines_sharing_a_stop() -> None:
    builder = GraphBuilder(transfer_penalty_minutes=3.0)
    builder.add_line(_line("a"), [_stop("s1", 0), _stop("s2", 1)])
    builder.add_line(_line("b"), [_stop("s2", 1), _stop("s3", 2)])

    assert builder.add_interchanges() == 2
    graph = builder.build()

    ab = graph.edge_between(TransitNode("s2", "a"), TransitNode("s2", "b"))
    ba = graph.edge_between(TransitNode("s2", "b"), TransitNode("s2", "a"))
    for edge in (ab, ba):
        assert edge is not None
        assert edge.kind is EdgeKind.TRANSFER
        assert edge.line_id is None
        assert edge.weight == 3.0
    assert graph.nodes_at("s2") == (TransitNode("s2", "a"), TransitNode("s2", "b"))


@pytest.mark.unit
def test_correspondences_add_walk_plus_penalty_edges() -> None:
    builder = GraphBuilder(transfer_penalty_minutes=3.0)
    builder.add_line(_line("a"), [_stop("s1", 0), _stop("s2", 1)])
    builder.add_line(_line("b"), [_stop("s3", 2), _stop("s4", 3)])

    added = builder.add_correspondences(
        "s2",
        [
            Correspondence(to_stop_id="s3", walk_minutes=4.0),
            Correspondence(to_stop_id="s2", walk_minutes=1.0),
            Correspondence(to_stop_id="nowhere", walk_minutes=1.0),
        ],
    )
    graph = builder.build()

    assert added == 1
    edge = graph.edge_between(TransitNode("s2", "a"), TransitNode("s3", "b"))
    assert edge is not None
    assert edge.kind is EdgeKind.TRANSFER
    assert edge.weight == pytest.approx(7.0)
    # Correspondences are directional.
    assert graph.edge_between(TransitNode("s3", "b"), TransitNode("s2", "a")) is None


@pytest.mark.unit
def test_correspondences_from_unknown_stop_are_ignored() -> None:
    builder = GraphBuilder()
    builder.add_line(_line("a"), [_stop("s1", 0), _stop("s2", 1)])

    assert builder.add_correspondences("x", [Correspondence("s1", 2.0)]) == 0


@pytest.mark.unit
def test_builds_are_deterministic_for_the_same_input() -> None:
    def build():
        builder = GraphBuilder()
        builder.add_line(_line("b"), [_stop("s2", 1), _stop("s3", 2)])
        builder.add_line(_line("a"), [_stop("s1", 0), _stop("s2", 1)])
        builder.add_interchanges()
        builder.add_correspondences("s3", [Correspondence("s1", 5.0)])
        return builder.build()

    g1 = build()
    g2 = build()

    assert g1.node_count == g2.node_count == 4
    assert g1.edge_count == g2.edge_count
    assert list(g1.iter_edges()) == list(g2.iter_edges())


@pytest.mark.unit
def test_stop_ids_are_sorted_and_unique() -> None:
    builder = GraphBuilder()
    builder.add_line(_line("a"), [_stop("s2", 1), _stop("s1", 0)])
    builder.add_line(_line("b"), [_stop("s2", 1), _stop("s3", 2)])

    assert builder.stop_ids() == ("s1", "s2", "s3")


@pytest.mark.unit
def test_add_shape_requires_two_points() -> None:
    builder = GraphBuilder()
    builder.add_shape("a", [GeoPoint(lat=40.0, lon=-3.7)])
    builder.add_shape("b", [GeoPoint(lat=40.0, lon=-3.7), GeoPoint(lat=40.1, lon=-3.7)])

    assert set(builder.build().shapes_by_line) == {"b"}


@pytest.mark.unit
def test_transfer_edges_keep_one_minute_floor_without_penalty() -> None:
    builder = GraphBuilder(transfer_penalty_minutes=0.0)
    builder.add_line(_line("a"), [_stop("s1", 0), _stop("s2", 1)])
    builder.add_line(_line("b"), [_stop("s2", 1), _stop("s3", 2)])
    builder.add_line(_line("c"), [_stop("s4", 3), _stop("s5", 4)])
    builder.add_interchanges()
    builder.add_correspondences("s3", [Correspondence("s4", 0.0)])
    graph = builder.build()

    transfers = [e for e in graph.iter_edges() if e.kind is EdgeKind.TRANSFER]
    assert len(transfers) == 3
    assert min(e.weight for e in graph.iter_edges()) >= 1.0
    walk = graph.edge_between(TransitNode("s3", "b"), TransitNode("s4", "c"))
    assert walk is not None
    assert walk.weight == 1.0
