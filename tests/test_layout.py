"""Tests for seeding, the force layout and curved edges"""

import math

import pytest

from graphweave.config import GraphConfig
from graphweave.graph.graph import Graph
from graphweave.layout import (
    ForceLayout,
    LayoutState,
    curved_edge_path,
    layout,
    radial_positions,
    random_cube_positions,
)

from conftest import make_edge, make_node


def test_layout_is_deterministic(path_graph):
    assert layout(path_graph) == layout(path_graph)


def test_seed_changes_layout(path_graph):
    other = GraphConfig(seed=7)
    assert layout(path_graph) != layout(path_graph, config=other)


def test_empty_graph_returns_empty_map():
    assert layout(Graph()) == {}


def test_graph_without_edges_returns_empty_map():
    graph = Graph(nodes=[make_node("a"), make_node("b")])
    fl = ForceLayout(graph)
    assert fl.run() == {}
    assert fl.state is LayoutState.CONVERGED


def test_three_nodes_do_not_overlap(path_graph):
    positions = layout(path_graph, iterations=100)
    assert set(positions) == set(path_graph.node_ids())
    coords = list(positions.values())
    for i, a in enumerate(coords):
        for b in coords[i + 1 :]:
            assert math.dist(a, b) > 1e-3
    assert all(math.isfinite(c) for p in coords for c in p)


def test_step_is_capped_by_max_step(path_graph):
    config = GraphConfig(max_step=0.5)
    fl = ForceLayout(path_graph, config=config)
    before = fl.positions()
    fl.step()
    after = fl.positions()
    for nid in before:
        assert math.dist(before[nid], after[nid]) <= 0.5 + 1e-9
    assert fl.ticks == 1


def test_zero_iterations_returns_seed(path_graph):
    seeded = random_cube_positions(path_graph.node_ids())
    assert layout(path_graph, iterations=0) == seeded


def test_initial_positions_are_used(path_graph):
    start = {nid: (float(i), 0.0, 0.0) for i, nid in enumerate(path_graph.node_ids())}
    assert layout(path_graph, iterations=0, initial_positions=start) == start


def test_cancelled_run_returns_none(path_graph):
    fl = ForceLayout(path_graph, should_cancel=lambda: True)
    assert fl.run() is None
    assert fl.state is LayoutState.CANCELLED
    assert fl.ticks == 0


def test_radial_positions():
    a, b, c, d = (make_node(x) for x in "abcd")
    graph = Graph(nodes=[a, b, c, d], edges=[make_edge(a, b), make_edge(b, c)])
    positions = radial_positions(graph, a.id)

    assert positions[a.id] == pytest.approx((0.0, 0.0, 0.0))
    assert positions[b.id] == pytest.approx((10.0, 0.0, -5.0))
    assert positions[c.id] == pytest.approx((20.0, 0.0, -10.0))
    # Unreachable nodes share the ring after the deepest one
    assert positions[d.id][2] == pytest.approx(-15.0)


def test_radial_positions_unknown_root(path_graph):
    assert radial_positions(path_graph, "node-missing") == {}


def test_curved_edge_path():
    path = curved_edge_path((0.0, 0.0, 0.0), (10.0, 0.0, 0.0))
    assert len(path) == 50
    assert path[0] == pytest.approx((0.0, 0.0, 0.0))
    assert path[-1] == pytest.approx((10.0, 0.0, 0.0))
    assert max(p[2] for p in path) > 0.0


def test_curved_edge_path_passes_through_raised_midpoint():
    path = curved_edge_path((0.0, 0.0, 0.0), (10.0, 0.0, 0.0), resolution=51)
    assert path[25] == pytest.approx((5.0, 0.0, 2.0), abs=1e-6)
