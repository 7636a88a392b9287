from __future__ import annotations

from collections import deque
from typing import Any, Dict, Iterable, List, Optional

import networkx as nx

from graphweave.graph.edge import Edge, EdgeKey
from graphweave.graph.errors import GraphIntegrityError
from graphweave.graph.node import Node


class Graph:
    """
    Canonical graph: ordered nodes plus at most one edge per
    (source, target, type). Integrity is checked once, at construction.
    """

    def __init__(
        self,
        nodes: Optional[Iterable[Node]] = None,
        edges: Optional[Iterable[Edge]] = None,
    ) -> None:
        self.nodes: List[Node] = list(nodes or [])
        self.edges: List[Edge] = list(edges or [])
        self._by_id: Dict[str, Node] = {}
        self._adjacency: Dict[str, List[str]] = {}
        self._validate()

    def _validate(self) -> None:
        for node in self.nodes:
            if node.id in self._by_id:
                raise GraphIntegrityError(f"Duplicate node id: {node.id}")
            self._by_id[node.id] = node
            self._adjacency[node.id] = []

        seen_keys: Dict[EdgeKey, str] = {}
        for edge in self.edges:
            for endpoint in (edge.source, edge.target):
                if endpoint not in self._by_id:
                    raise GraphIntegrityError(
                        f"Edge {edge.id} references missing node id: {endpoint}"
                    )
            if edge.key in seen_keys:
                raise GraphIntegrityError(
                    f"Duplicate edge key {edge.key} ({seen_keys[edge.key]}, {edge.id})"
                )
            seen_keys[edge.key] = edge.id
            self._adjacency[edge.source].append(edge.target)
            if edge.source != edge.target:
                self._adjacency[edge.target].append(edge.source)

    # ---------------------------------------------------------------
    # Lookups
    # ---------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._by_id

    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str) -> Optional[Node]:
        return self._by_id.get(node_id)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def neighbors(self, node_id: str) -> List[str]:
        """Distinct neighbours in either direction, in first-seen order."""
        return list(dict.fromkeys(self._adjacency.get(node_id, [])))

    def degree(self, node_id: str) -> int:
        return len(self._adjacency.get(node_id, []))

    # ---------------------------------------------------------------
    # Traversal
    # ---------------------------------------------------------------

    def bfs_depths(self, roots: List[str]) -> Dict[str, int]:
        depths: Dict[str, int] = {}
        queue = deque([(root, 0) for root in roots if root in self._by_id])
        while queue:
            curr, depth = queue.popleft()
            if curr in depths:
                continue
            depths[curr] = depth
            for nxt in self.neighbors(curr):
                if nxt not in depths:
                    queue.append((nxt, depth + 1))
        return depths

    def shortest_path(self, source_id: str, target_id: str) -> Optional[List[str]]:
        if source_id not in self._by_id or target_id not in self._by_id:
            return None
        try:
            return nx.shortest_path(self.to_networkx(), source_id, target_id)
        except nx.NetworkXNoPath:
            return None

    def to_networkx(self) -> nx.Graph:
        """Undirected weighted view; parallel relations between a pair are summed."""
        G = nx.Graph()
        for node in self.nodes:
            G.add_node(node.id, label=node.label, type=node.type.value)
        for edge in self.edges:
            if G.has_edge(edge.source, edge.target):
                G[edge.source][edge.target]["weight"] += edge.weight
            else:
                G.add_edge(edge.source, edge.target, weight=edge.weight)
        return G

    # ---------------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        return cls(
            nodes=[Node.from_dict(n) for n in data.get("nodes", [])],
            edges=[Edge.from_dict(e) for e in data.get("edges", [])],
        )

    def __str__(self) -> str:
        nodes_str = "\n".join(f"  {node}" for node in self.nodes)
        edges_str = "\n".join(f"  {edge}" for edge in self.edges)
        return f"nodes:\n{nodes_str}\n\nedges:\n{edges_str}"

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self.nodes)}, edges={len(self.edges)})"
