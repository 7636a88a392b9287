"""
Clustering/expansion controller.

``derive_view`` is a pure function of (graph, positions, expanded): it never
mutates the graph or the positions. ``ExpansionController`` wraps it with the
only mutable state in the engine, the set of expanded node ids.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Union

import numpy as np

from graphweave.config.settings import GraphConfig
from graphweave.graph.edge import Edge, make_edge_id
from graphweave.graph.errors import PipelineStatus
from graphweave.graph.graph import Graph
from graphweave.graph.node import Node
from graphweave.layout.force import ForceLayout
from graphweave.layout.seeding import Vector3
from graphweave.view.animation import AnimationHint, plan_transitions
from graphweave.view.community import Cluster, build_clusters, centroid

ORIGIN: Vector3 = (0.0, 0.0, 0.0)


@dataclass
class PositionedNode:
    node: Node
    position: Vector3

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def label(self) -> str:
        return self.node.label

    def to_dict(self) -> Dict[str, object]:
        data = self.node.to_dict()
        data["kind"] = "node"
        data["position"] = list(self.position)
        return data


VisibleItem = Union[PositionedNode, Cluster]


@dataclass
class ViewSnapshot:
    visible_nodes: List[VisibleItem] = field(default_factory=list)
    visible_edges: List[Edge] = field(default_factory=list)
    status: PipelineStatus = PipelineStatus.OK
    clusters: List[Cluster] = field(default_factory=list)

    def ids(self) -> List[str]:
        return [item.id for item in self.visible_nodes]

    def positions(self) -> Dict[str, Vector3]:
        return {item.id: item.position for item in self.visible_nodes}

    def cluster_of(self) -> Dict[str, str]:
        return {
            member: cluster.id
            for cluster in self.clusters
            for member in cluster.member_node_ids
        }

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status.value,
            "visible_nodes": [item.to_dict() for item in self.visible_nodes],
            "visible_edges": [edge.to_dict() for edge in self.visible_edges],
        }


@dataclass
class ViewUpdate:
    snapshot: ViewSnapshot
    hints: List[AnimationHint]


# ---------------------------------------------------------------------------
# Expansion geometry
# ---------------------------------------------------------------------------


def _jitter(seed: int, node_id: str, spread: float) -> np.ndarray:
    digest = hashlib.sha1(f"{seed}:{node_id}".encode("utf-8")).hexdigest()
    rng = np.random.default_rng(int(digest[:8], 16))
    return rng.uniform(-spread, spread, size=3)


def expansion_positions(
    graph: Graph, cluster: Cluster, config: GraphConfig
) -> Dict[str, Vector3]:
    """
    Member positions for an exploded cluster: deterministic jitter around the
    cluster centroid, relaxed by a short force layout over the members'
    own edges and re-centred on the centroid.
    """
    center = np.asarray(cluster.representative_position, dtype=float)
    seeded: Dict[str, Vector3] = {}
    for nid in cluster.member_node_ids:
        offset = _jitter(config.seed, nid, config.expansion_jitter)
        seeded[nid] = tuple(float(c) for c in center + offset)

    members = set(cluster.member_node_ids)
    subgraph = Graph(
        nodes=[graph.node(nid) for nid in cluster.member_node_ids],
        edges=[e for e in graph.edges if e.source in members and e.target in members],
    )
    relaxed = ForceLayout(
        subgraph,
        config=config,
        iterations=config.expansion_iterations,
        initial_positions=seeded,
    ).run()
    if not relaxed:
        return seeded

    shift = np.asarray(cluster.representative_position) - np.asarray(
        centroid(list(relaxed.values()))
    )
    return {
        nid: tuple(float(c) for c in np.asarray(pos) + shift)
        for nid, pos in relaxed.items()
    }


def _aggregate_edges(
    graph: Graph, owner: Dict[str, str], exploded: Set[str]
) -> List[Edge]:
    visible: Dict[tuple, Edge] = {}
    for edge in graph.edges:
        source, target = owner[edge.source], owner[edge.target]
        if edge.source in exploded and edge.target in exploded:
            visible[edge.key] = edge
            continue
        if source == target:
            continue
        key = (source, target, edge.type)
        merged = visible.get(key)
        if merged is None:
            visible[key] = Edge(
                id=make_edge_id(source, target, edge.type),
                source=source,
                target=target,
                type=edge.type,
                label=edge.label,
                weight=edge.weight,
                confidence=edge.confidence,
                properties={"aggregated_edge_ids": [edge.id]},
            )
        else:
            merged.weight += edge.weight
            merged.confidence = max(merged.confidence, edge.confidence)
            merged.properties["aggregated_edge_ids"].append(edge.id)
    return list(visible.values())


def derive_view(
    graph: Graph,
    positions: Dict[str, Vector3],
    expanded: Iterable[str],
    config: Optional[GraphConfig] = None,
    clusters: Optional[List[Cluster]] = None,
) -> ViewSnapshot:
    config = config or GraphConfig()
    expanded = set(expanded)

    if len(graph) <= config.cluster_threshold:
        return ViewSnapshot(
            visible_nodes=[
                PositionedNode(node, positions.get(node.id, ORIGIN))
                for node in graph.nodes
            ],
            visible_edges=list(graph.edges),
            status=PipelineStatus.CLUSTERING_SKIPPED,
        )

    if clusters is None:
        clusters = build_clusters(
            graph,
            positions,
            max_passes=config.max_community_passes,
            seed=config.seed,
        )

    visible: List[VisibleItem] = []
    owner: Dict[str, str] = {}
    exploded: Set[str] = set()
    for cluster in clusters:
        if expanded.intersection(cluster.member_node_ids):
            member_positions = expansion_positions(graph, cluster, config)
            for nid in cluster.member_node_ids:
                visible.append(PositionedNode(graph.node(nid), member_positions[nid]))
                owner[nid] = nid
                exploded.add(nid)
        else:
            visible.append(cluster)
            for nid in cluster.member_node_ids:
                owner[nid] = cluster.id

    return ViewSnapshot(
        visible_nodes=visible,
        visible_edges=_aggregate_edges(graph, owner, exploded),
        status=PipelineStatus.OK,
        clusters=list(clusters),
    )


# ---------------------------------------------------------------------------
# Stateful session
# ---------------------------------------------------------------------------


class ExpansionController:
    def __init__(self, config: Optional[GraphConfig] = None) -> None:
        self.config = config or GraphConfig()
        self.graph = Graph()
        self.positions: Dict[str, Vector3] = {}
        self.expanded: Set[str] = set()
        self.clusters: List[Cluster] = []
        self._snapshot = ViewSnapshot(status=PipelineStatus.CLUSTERING_SKIPPED)
        self._lock = threading.Lock()

    @property
    def clustered(self) -> bool:
        return len(self.graph) > self.config.cluster_threshold

    def load(self, graph: Graph, positions: Dict[str, Vector3]) -> ViewSnapshot:
        with self._lock:
            self.graph = graph
            self.positions = dict(positions)
            self.expanded = set()
            self.clusters = (
                build_clusters(
                    graph,
                    self.positions,
                    max_passes=self.config.max_community_passes,
                    seed=self.config.seed,
                )
                if self.clustered
                else []
            )
            self._snapshot = self._derive()
            if self.clustered:
                logging.info(
                    f"Clustered {len(graph)} nodes into {len(self.clusters)} clusters"
                )
            return self._snapshot

    def update_positions(
        self, positions: Dict[str, Vector3], graph: Optional[Graph] = None
    ) -> Optional[ViewSnapshot]:
        """
        Swap in a fresh layout for the same graph, keeping expansion state.
        Positions computed for ``graph`` are dropped (None is returned) when a
        different graph has been loaded since.
        """
        with self._lock:
            if graph is not None and graph is not self.graph:
                logging.debug("Dropped layout computed for a replaced graph")
                return None
            self.positions = dict(positions)
            if self.clusters:
                self.clusters = build_clusters(
                    self.graph,
                    self.positions,
                    [c.member_node_ids for c in self.clusters],
                )
            self._snapshot = self._derive()
            return self._snapshot

    def _derive(self) -> ViewSnapshot:
        return derive_view(
            self.graph, self.positions, self.expanded, self.config, self.clusters
        )

    def _cluster_for(self, item_id: str) -> Optional[Cluster]:
        for cluster in self.clusters:
            if item_id == cluster.id or item_id in cluster.member_node_ids:
                return cluster
        return None

    def toggle_expand(self, item_id: str) -> ViewUpdate:
        with self._lock:
            previous = self._snapshot

            if not self.clustered:
                if item_id not in self.graph:
                    logging.warning(f"toggle_expand: unknown id {item_id}")
                    return ViewUpdate(previous, [])
                self.expanded ^= {item_id}
                return ViewUpdate(previous, [])

            cluster = self._cluster_for(item_id)
            if cluster is None:
                logging.warning(f"toggle_expand: unknown id {item_id}")
                return ViewUpdate(previous, [])

            members = set(cluster.member_node_ids)
            if self.expanded & members:
                self.expanded -= members
                logging.debug(f"Collapsed {cluster.id} ({cluster.size} nodes)")
            else:
                self.expanded |= members
                logging.debug(f"Expanded {cluster.id} ({cluster.size} nodes)")

            self._snapshot = self._derive()
            hints = plan_transitions(
                previous, self._snapshot, self.config.animation_duration_ms
            )
            return ViewUpdate(self._snapshot, hints)

    def snapshot(self) -> ViewSnapshot:
        return self._snapshot

    def neighborhood(self, node_id: str) -> Set[str]:
        if node_id not in self.graph:
            return set()
        return {node_id, *self.graph.neighbors(node_id)}

    def clear(self) -> None:
        with self._lock:
            self.graph = Graph()
            self.positions = {}
            self.expanded = set()
            self.clusters = []
            self._snapshot = ViewSnapshot(status=PipelineStatus.CLUSTERING_SKIPPED)
