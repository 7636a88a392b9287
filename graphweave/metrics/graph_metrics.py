from typing import Dict

import networkx as nx

from graphweave.config import constants
from graphweave.graph.graph import Graph


def compute_graph_metrics(graph: Graph) -> Dict[str, float]:
    n = len(graph)
    m = len(graph.edges)

    if n == 0:
        return {
            "graph_num_nodes": 0,
            "graph_num_edges": 0,
            "graph_avg_degree": 0.0,
            "graph_density": 0.0,
            "graph_num_components": 0,
            "graph_largest_component_size": 0,
            "graph_largest_component_ratio": 0.0,
        }

    G = graph.to_networkx()
    degrees = [graph.degree(nid) for nid in graph.node_ids()]
    components = list(nx.connected_components(G))
    largest_component_size = max(len(c) for c in components)

    return {
        "graph_num_nodes": n,
        "graph_num_edges": m,
        "graph_avg_degree": sum(degrees) / n,
        "graph_density": (2.0 * m) / (n * (n - 1)) if n > 1 else 0.0,
        "graph_num_components": len(components),
        "graph_largest_component_size": largest_component_size,
        "graph_largest_component_ratio": largest_component_size / n,
    }


def node_sizes(graph: Graph) -> Dict[str, float]:
    """Display size per node: degree * 10, clamped to [30, 80]."""
    sizes = {}
    for nid in graph.node_ids():
        size = graph.degree(nid) * constants.NODE_SIZE_PER_DEGREE
        sizes[nid] = float(min(constants.NODE_SIZE_MAX, max(constants.NODE_SIZE_MIN, size)))
    return sizes
