from .node import Entity, EntityType, Node, normalize_label, make_node_id
from .edge import Edge, RelationCandidate, make_edge_id
from .graph import Graph
from .errors import GraphIntegrityError, PipelineStatus

# builder pulls in the scoring tables, so it is imported after the model
from .builder import GraphBuilder, build

__all__ = [
    "Entity",
    "EntityType",
    "Node",
    "normalize_label",
    "make_node_id",
    "Edge",
    "RelationCandidate",
    "make_edge_id",
    "Graph",
    "GraphIntegrityError",
    "PipelineStatus",
    "GraphBuilder",
    "build",
]
