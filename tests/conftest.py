"""Shared graph fixtures"""

from typing import List

import matplotlib
import pytest

from graphweave.graph.edge import Edge, make_edge_id
from graphweave.graph.graph import Graph
from graphweave.graph.node import EntityType, Node, make_node_id

matplotlib.use("Agg")


def make_node(label: str, weight: float = 1.0) -> Node:
    return Node(id=make_node_id(label), label=label, type=EntityType.CONCEPT, weight=weight)


def make_edge(source: Node, target: Node, relation_type: str = "isA", weight: float = 1.0) -> Edge:
    return Edge(
        id=make_edge_id(source.id, target.id, relation_type),
        source=source.id,
        target=target.id,
        type=relation_type,
        label=relation_type,
        weight=weight,
        confidence=0.8,
    )


def clique_ring(n_cliques: int, size: int) -> Graph:
    """Dense cliques joined in a ring by single bridge edges."""
    nodes: List[Node] = []
    edges: List[Edge] = []
    groups = []
    for c in range(n_cliques):
        members = [make_node(f"c{c}n{i}") for i in range(size)]
        groups.append(members)
        nodes.extend(members)
        for i, a in enumerate(members):
            for b in members[i + 1 :]:
                edges.append(make_edge(a, b, "related"))
    for c in range(n_cliques):
        a = groups[c][0]
        b = groups[(c + 1) % n_cliques][-1]
        edges.append(make_edge(a, b, "bridge"))
    return Graph(nodes=nodes, edges=edges)


@pytest.fixture
def path_graph() -> Graph:
    a, b, c = make_node("alpha"), make_node("beta"), make_node("gamma")
    return Graph(nodes=[a, b, c], edges=[make_edge(a, b), make_edge(b, c)])
