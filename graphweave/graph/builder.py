"""
Graph Builder: entities and relation candidates in, canonical graph out.

The builder holds only per-call state, so building the same input twice
yields the same node and edge identities and weights:
1. Entities collapse by normalized label; weight is the mention count
2. Relation endpoints resolve to nodes, synthesizing Unknown nodes as needed
3. Relations sharing (source, target, type) merge into one edge
4. The quality gate prunes weak edges; orphaned synthesized nodes go with them
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from graphweave.config.settings import QualityGate
from graphweave.graph.edge import Edge, EdgeKey, RelationCandidate, make_edge_id
from graphweave.graph.graph import Graph
from graphweave.graph.node import (
    Entity,
    EntityType,
    Node,
    make_node_id,
    normalize_label,
)
from graphweave.nlp.scoring import mean, relation_confidence


@dataclass
class _EdgeEvidence:
    source: str
    target: str
    relation_type: str
    label: str
    weight: float = 0.0
    frequency: int = 0
    matched: bool = False
    strength: float = 0.0
    supports: List[float] = field(default_factory=list)
    family: str = ""
    contexts: List[str] = field(default_factory=list)

    def add(self, rel: RelationCandidate) -> None:
        self.weight += rel.base_weight
        self.frequency += 1
        self.matched = self.matched or rel.matched
        self.strength = max(self.strength, rel.strength)
        self.supports.append(rel.context_support)
        self.family = self.family or rel.family
        if rel.context and rel.context not in self.contexts:
            self.contexts.append(rel.context)

    def confidence(self) -> float:
        return relation_confidence(
            self.matched, self.frequency, mean(self.supports), self.relation_type
        )


class GraphBuilder:
    """
    Builder for the canonical graph with the quality gate applied last.

    Usage mirrors the pipeline order::

        graph = (
            GraphBuilder(gate)
            .add_entities(entities)
            .add_relations(relations)
            .build()
        )
    """

    def __init__(self, quality_gate: Optional[QualityGate] = None) -> None:
        self.quality_gate = quality_gate or QualityGate()
        self._nodes: Dict[str, Node] = {}
        self._synthesized: Set[str] = set()
        self._evidence: Dict[EdgeKey, _EdgeEvidence] = {}
        self.self_loops_pruned = 0
        self.gate_rejected = 0

    def _node_for(self, text: str) -> Tuple[Node, bool]:
        node_id = make_node_id(text)
        node = self._nodes.get(node_id)
        if node is not None:
            return node, False
        node = Node(
            id=node_id,
            label=" ".join(text.split()),
            type=EntityType.UNKNOWN,
        )
        self._nodes[node_id] = node
        return node, True

    def add_entities(self, entities: List[Entity]) -> "GraphBuilder":
        for entity in entities:
            if not normalize_label(entity.text):
                continue
            node, _ = self._node_for(entity.text)
            node.weight += 1
            node.properties.update(entity.properties)
            if node.type is EntityType.UNKNOWN:
                node.type = entity.type
            self._synthesized.discard(node.id)
        return self

    def add_relations(self, relations: List[RelationCandidate]) -> "GraphBuilder":
        for rel in relations:
            if not normalize_label(rel.source_text) or not normalize_label(
                rel.target_text
            ):
                continue
            source = self._resolve_endpoint(rel.source_text)
            target = self._resolve_endpoint(rel.target_text)
            if source == target:
                self.self_loops_pruned += 1
                continue

            key = (source, target, rel.relation_type)
            evidence = self._evidence.get(key)
            if evidence is None:
                evidence = _EdgeEvidence(
                    source, target, rel.relation_type, rel.label or rel.relation_type
                )
                self._evidence[key] = evidence
            evidence.add(rel)
        return self

    def _resolve_endpoint(self, text: str) -> str:
        node, created = self._node_for(text)
        if created:
            self._synthesized.add(node.id)
        return node.id

    def build(self) -> Graph:
        edges: List[Edge] = []
        for key, evidence in self._evidence.items():
            confidence = evidence.confidence()
            if not self.quality_gate.admits(evidence.weight, confidence):
                self.gate_rejected += 1
                continue
            edges.append(
                Edge(
                    id=make_edge_id(*key),
                    source=evidence.source,
                    target=evidence.target,
                    type=evidence.relation_type,
                    label=evidence.label,
                    weight=evidence.weight,
                    confidence=confidence,
                    properties={
                        "frequency": evidence.frequency,
                        "strength": evidence.strength,
                        "matched": evidence.matched,
                        "family": evidence.family,
                        "contexts": list(evidence.contexts),
                    },
                )
            )

        connected = {e.source for e in edges} | {e.target for e in edges}
        nodes = [
            node
            for node in self._nodes.values()
            if node.id not in self._synthesized or node.id in connected
        ]

        if self.self_loops_pruned:
            logging.debug(f"Pruned {self.self_loops_pruned} self-loop relations")
        if self._evidence and not edges:
            logging.info(
                f"Quality gate rejected all {len(self._evidence)} candidate edges"
            )
        elif self.gate_rejected:
            logging.debug(
                f"Quality gate rejected {self.gate_rejected}/{len(self._evidence)} edges"
            )

        return Graph(nodes=nodes, edges=edges)


def build(
    entities: List[Entity],
    relations: List[RelationCandidate],
    quality_gate: Optional[QualityGate] = None,
) -> Graph:
    """
    Convenience function to build a canonical graph in one call.

    Raises:
        GraphIntegrityError: if the assembled graph violates referential
            integrity (never expected from well-formed builder state).
    """
    return (
        GraphBuilder(quality_gate)
        .add_entities(entities)
        .add_relations(relations)
        .build()
    )
