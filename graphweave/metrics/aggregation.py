import logging
import os
from typing import Dict, Optional, Tuple

import pandas as pd

from graphweave.graph.graph import Graph
from graphweave.layout.seeding import Vector3
from graphweave.metrics.graph_metrics import node_sizes

NODE_COLUMNS = ["id", "label", "type", "weight", "degree", "size", "x", "y", "z"]
EDGE_COLUMNS = [
    "id",
    "source",
    "target",
    "type",
    "label",
    "weight",
    "confidence",
    "frequency",
    "matched",
]


def nodes_frame(
    graph: Graph, positions: Optional[Dict[str, Vector3]] = None
) -> pd.DataFrame:
    positions = positions or {}
    sizes = node_sizes(graph)
    rows = []
    for node in graph.nodes:
        x, y, z = positions.get(node.id, (float("nan"),) * 3)
        rows.append(
            {
                "id": node.id,
                "label": node.label,
                "type": node.type.value,
                "weight": node.weight,
                "degree": graph.degree(node.id),
                "size": sizes[node.id],
                "x": x,
                "y": y,
                "z": z,
            }
        )
    return pd.DataFrame(rows, columns=NODE_COLUMNS)


def edges_frame(graph: Graph) -> pd.DataFrame:
    rows = [
        {
            "id": edge.id,
            "source": edge.source,
            "target": edge.target,
            "type": edge.type,
            "label": edge.label,
            "weight": edge.weight,
            "confidence": edge.confidence,
            "frequency": edge.properties.get("frequency", 1),
            "matched": edge.properties.get("matched", False),
        }
        for edge in graph.edges
    ]
    return pd.DataFrame(rows, columns=EDGE_COLUMNS)


def export_csv(
    graph: Graph, positions: Dict[str, Vector3], out_dir: str
) -> Tuple[str, str]:
    os.makedirs(out_dir, exist_ok=True)
    nodes_path = os.path.join(out_dir, "nodes.csv")
    edges_path = os.path.join(out_dir, "edges.csv")
    nodes_frame(graph, positions).to_csv(nodes_path, index=False)
    edges_frame(graph).to_csv(edges_path, index=False)
    logging.info(f"Wrote {len(graph.nodes)} nodes to {nodes_path}")
    logging.info(f"Wrote {len(graph.edges)} edges to {edges_path}")
    return nodes_path, edges_path
