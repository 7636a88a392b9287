"""Tests for graph metrics, sentiment counts and tabular export"""

import os

import pandas as pd
import pytest

from graphweave.graph.graph import Graph
from graphweave.layout import layout
from graphweave.metrics import (
    analyze_sentiment,
    compute_graph_metrics,
    edges_frame,
    export_csv,
    node_sizes,
    nodes_frame,
    word_sentiment,
)

from conftest import make_edge, make_node


def test_graph_metrics(path_graph):
    metrics = compute_graph_metrics(path_graph)
    assert metrics["graph_num_nodes"] == 3
    assert metrics["graph_num_edges"] == 2
    assert metrics["graph_avg_degree"] == pytest.approx(4 / 3)
    assert metrics["graph_density"] == pytest.approx(2 / 3)
    assert metrics["graph_num_components"] == 1
    assert metrics["graph_largest_component_ratio"] == pytest.approx(1.0)


def test_graph_metrics_empty():
    metrics = compute_graph_metrics(Graph())
    assert metrics["graph_num_nodes"] == 0
    assert metrics["graph_num_components"] == 0


def test_node_sizes_are_clamped():
    hub = make_node("hub")
    leaves = [make_node(f"leaf{i}") for i in range(9)]
    graph = Graph(nodes=[hub, *leaves], edges=[make_edge(hub, leaf) for leaf in leaves])
    sizes = node_sizes(graph)
    assert sizes[hub.id] == 80.0
    assert sizes[leaves[0].id] == 30.0


def test_sentiment_english():
    result = analyze_sentiment("A good and great day, with one bad moment.")
    assert result["positive"] == 2
    assert result["negative"] == 1
    assert result["polarity"] == pytest.approx(1 / 3)


def test_sentiment_chinese_and_empty():
    assert analyze_sentiment("这个产品很优秀")["positive"] == 1
    assert analyze_sentiment("") == {"positive": 0, "negative": 0, "polarity": 0.0}


def test_word_sentiment():
    assert word_sentiment("Excellent", "en") == "positive"
    assert word_sentiment("糟糕", "zh") == "negative"
    assert word_sentiment("table", "en") == "neutral"


def test_frames(path_graph):
    positions = layout(path_graph)
    nodes = nodes_frame(path_graph, positions)
    edges = edges_frame(path_graph)

    assert list(nodes["id"]) == path_graph.node_ids()
    assert nodes.loc[1, "degree"] == 2
    assert not nodes[["x", "y", "z"]].isna().any().any()
    assert len(edges) == 2
    assert set(edges["type"]) == {"isA"}


def test_export_csv(tmp_path, path_graph):
    nodes_path, edges_path = export_csv(path_graph, layout(path_graph), str(tmp_path / "out"))
    assert os.path.exists(nodes_path)
    assert len(pd.read_csv(edges_path)) == 2
