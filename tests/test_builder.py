"""Tests for graph building, deduplication and the quality gate"""

import pytest

from graphweave.config import QualityGate
from graphweave.graph import (
    Edge,
    Entity,
    EntityType,
    Graph,
    GraphBuilder,
    GraphIntegrityError,
    RelationCandidate,
    build,
    make_node_id,
)
from graphweave.nlp import extract

from conftest import make_edge, make_node


def _entity(text, entity_type=EntityType.CONCEPT, position=0):
    return Entity(text=text, type=entity_type, position=position, weight=0.5)


def _relation(source, target, relation_type="isA", base_weight=0.8, matched=True):
    return RelationCandidate(
        source_text=source,
        target_text=target,
        relation_type=relation_type,
        matched=matched,
        context=f"{source} {relation_type} {target}",
        base_weight=base_weight,
    )


def test_sample_text_graph():
    """Weak synthesized edges are pruned; both pattern edges survive"""
    graph = build(*extract("猫是一种动物。动物需要食物。"))

    assert {n.label for n in graph.nodes} == {"猫", "动物", "食物"}
    assert len(graph.edges) == 2
    by_type = {e.type: e for e in graph.edges}
    assert by_type["isA"].confidence == pytest.approx(0.575)
    assert by_type["requires"].confidence == pytest.approx(0.525)
    assert graph.node(make_node_id("动物")).weight == 2


def test_entities_collapse_by_normalized_label():
    graph = build([_entity("Cat"), _entity(" cat "), _entity("CAT")], [])
    assert len(graph) == 1
    node = graph.nodes[0]
    assert node.label == "Cat"
    assert node.weight == 3
    assert node.id == make_node_id("cat")


def test_build_is_idempotent():
    entities, relations = extract("猫是一种动物。动物需要食物。")
    first = build(entities, relations)
    second = build(entities, relations)
    assert first.to_dict() == second.to_dict()


def test_relations_merge_on_source_target_type():
    graph = build([], [_relation("cat", "animal"), _relation("Cat", "animal ")])
    assert len(graph.edges) == 1
    edge = graph.edges[0]
    assert edge.weight == pytest.approx(1.6)
    assert edge.properties["frequency"] == 2
    assert edge.confidence == pytest.approx((0.8 + 0.2 + 0.5 + 0.9) / 4)


def test_missing_endpoints_become_unknown_nodes():
    graph = build([], [_relation("cat", "animal")])
    assert len(graph) == 2
    assert all(n.type is EntityType.UNKNOWN for n in graph.nodes)


def test_typed_mention_upgrades_unknown_node():
    graph = (
        GraphBuilder()
        .add_relations([_relation("Alice", "engineer")])
        .add_entities([_entity("Alice", EntityType.PERSON)])
        .build()
    )
    assert graph.node(make_node_id("alice")).type is EntityType.PERSON


def test_quality_gate_prunes_edge_and_orphaned_endpoints():
    builder = GraphBuilder()
    graph = builder.add_relations([_relation("cat", "animal", base_weight=0.2)]).build()
    assert graph.is_empty()
    assert builder.gate_rejected == 1


def test_quality_gate_keeps_extracted_entities():
    """Nodes from entity mentions survive even when all their edges are pruned"""
    graph = build(
        [_entity("cat"), _entity("animal")],
        [_relation("cat", "animal", base_weight=0.2)],
        QualityGate(0.3, 0.5),
    )
    assert len(graph) == 2
    assert not graph.edges


def test_self_loops_are_pruned():
    builder = GraphBuilder()
    graph = builder.add_relations([_relation("Cat", "cat")]).build()
    assert not graph.edges
    assert builder.self_loops_pruned == 1


def test_graph_rejects_missing_endpoint():
    a, b = make_node("a"), make_node("b")
    with pytest.raises(GraphIntegrityError):
        Graph(nodes=[a], edges=[make_edge(a, b)])


def test_graph_rejects_duplicate_edge_key():
    a, b = make_node("a"), make_node("b")
    duplicate = Edge(**{**make_edge(a, b).__dict__, "id": "edge-other"})
    with pytest.raises(GraphIntegrityError):
        Graph(nodes=[a, b], edges=[make_edge(a, b), duplicate])


def test_graph_rejects_duplicate_node_id():
    with pytest.raises(GraphIntegrityError):
        Graph(nodes=[make_node("a"), make_node("A")])


def test_graph_queries(path_graph):
    alpha, beta, gamma = path_graph.node_ids()
    assert path_graph.neighbors(beta) == [alpha, gamma]
    assert path_graph.degree(beta) == 2
    assert path_graph.shortest_path(alpha, gamma) == [alpha, beta, gamma]
    assert path_graph.shortest_path(alpha, "node-missing") is None
    assert path_graph.bfs_depths([alpha]) == {alpha: 0, beta: 1, gamma: 2}


def test_graph_dict_round_trip(path_graph):
    restored = Graph.from_dict(path_graph.to_dict())
    assert restored.to_dict() == path_graph.to_dict()
