"""
Louvain community detection and cluster assembly.

networkx runs both Louvain phases (local moves, then aggregation of each
community into a super-node) for at most ``max_passes`` levels, stopping early
once a level gains less than ``_MODULARITY_GAIN`` modularity. The RNG is seeded
from the config, so a given graph always yields the same partition.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import networkx as nx

from graphweave.config import constants
from graphweave.graph.graph import Graph
from graphweave.layout.seeding import Vector3

_MODULARITY_GAIN = 1e-7


@dataclass
class Cluster:
    id: str
    member_node_ids: List[str]
    size: int
    representative_position: Vector3
    label: str = ""
    properties: Dict[str, object] = field(default_factory=dict)

    @property
    def position(self) -> Vector3:
        return self.representative_position

    def to_dict(self) -> Dict[str, object]:
        return {
            "kind": "cluster",
            "id": self.id,
            "label": self.label,
            "size": self.size,
            "member_node_ids": list(self.member_node_ids),
            "position": list(self.representative_position),
        }


def detect_communities(
    graph: Graph,
    max_passes: int = constants.MAX_COMMUNITY_PASSES,
    seed: int = constants.SEED,
) -> List[List[str]]:
    """
    Partition node ids into communities. Every node lands in exactly one
    community; members keep graph node order.
    """
    node_ids = graph.node_ids()
    G = graph.to_networkx()
    G.remove_edges_from(list(nx.selfloop_edges(G)))
    if G.size(weight="weight") <= 0:
        return [[nid] for nid in node_ids]

    communities = nx.community.louvain_communities(
        G,
        weight="weight",
        threshold=_MODULARITY_GAIN,
        seed=seed,
        max_level=max(1, max_passes),
    )
    logging.debug(
        f"Louvain found {len(communities)} communities, modularity="
        f"{nx.community.modularity(G, communities, weight='weight'):.4f}"
    )

    order = {nid: i for i, nid in enumerate(node_ids)}
    members = [sorted(c, key=order.__getitem__) for c in communities]
    return sorted(members, key=lambda ms: (-len(ms), order[ms[0]]))


def centroid(points: List[Vector3]) -> Vector3:
    if not points:
        return (0.0, 0.0, 0.0)
    n = float(len(points))
    return (
        sum(p[0] for p in points) / n,
        sum(p[1] for p in points) / n,
        sum(p[2] for p in points) / n,
    )


def build_clusters(
    graph: Graph,
    positions: Dict[str, Vector3],
    communities: Optional[List[List[str]]] = None,
    max_passes: int = constants.MAX_COMMUNITY_PASSES,
    seed: int = constants.SEED,
) -> List[Cluster]:
    if communities is None:
        communities = detect_communities(graph, max_passes, seed)

    clusters = []
    for index, member_ids in enumerate(communities):
        members = [graph.node(nid) for nid in member_ids]
        heaviest = max(members, key=lambda n: n.weight)
        clusters.append(
            Cluster(
                id=f"cluster-{index}",
                member_node_ids=list(member_ids),
                size=len(member_ids),
                representative_position=centroid(
                    [positions[nid] for nid in member_ids if nid in positions]
                ),
                label=f"{heaviest.label} ({len(member_ids)})",
            )
        )
    logging.debug(f"Built {len(clusters)} clusters over {len(graph)} nodes")
    return clusters
