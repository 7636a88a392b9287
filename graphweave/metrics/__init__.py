from graphweave.metrics.graph_metrics import compute_graph_metrics, node_sizes
from graphweave.metrics.lexical import analyze_sentiment, word_sentiment
from graphweave.metrics.aggregation import nodes_frame, edges_frame, export_csv

__all__ = [
    "compute_graph_metrics",
    "node_sizes",
    "analyze_sentiment",
    "word_sentiment",
    "nodes_frame",
    "edges_frame",
    "export_csv",
]
