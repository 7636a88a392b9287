import logging
import os
import re
from typing import Dict, Optional

import matplotlib.pyplot as plt

from graphweave.graph.node import EntityType
from graphweave.layout.curves import curved_edge_path
from graphweave.view.community import Cluster
from graphweave.view.controller import ViewSnapshot

NODE_COLORS: Dict[EntityType, str] = {
    EntityType.CONCEPT: "#ffe8a0",
    EntityType.PERSON: "#a0cbe2",
    EntityType.ORGANIZATION: "#b8e2a0",
    EntityType.MEASUREMENT: "#e2a0c8",
    EntityType.TERM: "#d0b0f0",
    EntityType.UNKNOWN: "#dddddd",
}
CLUSTER_COLOR = "#f4a261"
EDGE_COLOR = "#888888"
NODE_SIZE = 120
CLUSTER_SIZE_PER_MEMBER = 12
MAX_LABEL_LEN = 24


def _pretty_text(text: str) -> str:
    text = re.sub(r"\s+", " ", (text or "").strip())
    if len(text) > MAX_LABEL_LEN:
        return text[: MAX_LABEL_LEN - 3] + "..."
    return text


def plot_snapshot(
    snapshot: ViewSnapshot,
    output_path: str,
    title: Optional[str] = None,
    dpi: int = 150,
) -> str:
    """
    Draw visible nodes, clusters and curved edges of a snapshot on a 3D
    axes and save the figure as PNG.
    """
    out_dir = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(out_dir, exist_ok=True)

    fig = plt.figure(figsize=(12, 10))
    ax = fig.add_subplot(111, projection="3d")
    positions = snapshot.positions()

    for edge in snapshot.visible_edges:
        if edge.source not in positions or edge.target not in positions:
            continue
        path = curved_edge_path(positions[edge.source], positions[edge.target])
        xs, ys, zs = zip(*path)
        alpha = 0.4 + 0.6 * min(1.0, edge.confidence)
        ax.plot(xs, ys, zs, color=EDGE_COLOR, linewidth=0.8, alpha=alpha)

    for item in snapshot.visible_nodes:
        x, y, z = item.position
        if isinstance(item, Cluster):
            ax.scatter(
                [x], [y], [z],
                s=NODE_SIZE + CLUSTER_SIZE_PER_MEMBER * item.size,
                c=CLUSTER_COLOR,
                edgecolors="black",
                linewidths=0.8,
            )
        else:
            ax.scatter(
                [x], [y], [z],
                s=NODE_SIZE,
                c=NODE_COLORS.get(item.node.type, NODE_COLORS[EntityType.UNKNOWN]),
                edgecolors="black",
                linewidths=0.5,
            )
        ax.text(x, y, z, _pretty_text(item.label), fontsize=8)

    if not snapshot.visible_nodes:
        ax.text2D(0.5, 0.5, "Empty graph", transform=ax.transAxes, ha="center")

    ax.set_title(
        title
        or f"{len(snapshot.visible_nodes)} visible items, "
        f"{len(snapshot.visible_edges)} edges ({snapshot.status.value})"
    )
    ax.set_axis_off()
    fig.savefig(output_path, format="PNG", dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    logging.info(f"Saved snapshot plot to {output_path}")
    return output_path
