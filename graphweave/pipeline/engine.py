import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from graphweave.config.settings import GraphConfig
from graphweave.graph.builder import build
from graphweave.graph.errors import PipelineStatus
from graphweave.graph.graph import Graph
from graphweave.graph.node import make_node_id
from graphweave.layout.curves import curved_edge_path
from graphweave.layout.force import layout
from graphweave.layout.seeding import Vector3, random_cube_positions
from graphweave.metrics.graph_metrics import compute_graph_metrics
from graphweave.metrics.lexical import analyze_sentiment
from graphweave.nlp.extractor import extract
from graphweave.pipeline.worker import LayoutWorker
from graphweave.view.animation import AnimationHint, plan_transitions
from graphweave.view.controller import ExpansionController, ViewSnapshot, ViewUpdate


@dataclass
class BuildReport:
    statuses: List[PipelineStatus] = field(default_factory=list)
    entity_count: int = 0
    relation_count: int = 0
    node_count: int = 0
    edge_count: int = 0
    metrics: Dict[str, float] = field(default_factory=dict)
    sentiment: Dict[str, float] = field(default_factory=dict)

    def has(self, status: PipelineStatus) -> bool:
        return status in self.statuses

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statuses": [s.value for s in self.statuses],
            "entity_count": self.entity_count,
            "relation_count": self.relation_count,
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "metrics": dict(self.metrics),
            "sentiment": dict(self.sentiment),
        }


class GraphEngine:
    """
    text -> extract -> build -> layout -> expansion controller.

    Degraded outcomes (empty extraction, everything pruned, nothing to lay
    out, graph too small to cluster) are reported, never raised.
    """

    def __init__(self, config: Optional[GraphConfig] = None) -> None:
        self.config = config or GraphConfig()
        self.controller = ExpansionController(self.config)
        self.graph = Graph()
        self.positions: Dict[str, Vector3] = {}
        self.hints: List[AnimationHint] = []
        self._worker: Optional[LayoutWorker] = None
        self._generation = 0
        # guards graph/positions swaps against background layout results
        self._lock = threading.Lock()

    def load_text(self, text: str, root_label: Optional[str] = None) -> BuildReport:
        """
        ``root_label`` names a node to seed the layout radially from, for
        hierarchical text with one central concept.
        """
        entities, relations = extract(text)
        report = BuildReport(entity_count=len(entities), relation_count=len(relations))
        if not entities and not relations:
            logging.info("Extraction empty: no entities or relations found")
            report.statuses.append(PipelineStatus.EXTRACTION_EMPTY)

        graph = build(entities, relations, self.config.quality_gate)
        if relations and not graph.edges:
            report.statuses.append(PipelineStatus.QUALITY_GATE_REJECTED_ALL)

        root_id = make_node_id(root_label) if root_label else None
        self.load_graph(graph, report, root_id=root_id)
        report.sentiment = analyze_sentiment(text or "")
        return report

    def load_graph(
        self,
        graph: Graph,
        report: Optional[BuildReport] = None,
        root_id: Optional[str] = None,
    ) -> BuildReport:
        report = report or BuildReport()
        if root_id is not None and root_id not in graph:
            logging.warning(f"Layout root {root_id} is not in the graph; seeding randomly")
            root_id = None

        positions = layout(graph, config=self.config, root_id=root_id)
        if not positions:
            report.statuses.append(PipelineStatus.LAYOUT_DEGENERATE)
            # Seeded coordinates keep unconnected nodes visible.
            positions = random_cube_positions(
                graph.node_ids(), self.config.seed, self.config.seed_spread
            )

        with self._lock:
            if self._worker is not None:
                self._worker.discard(self._layout_key())
            self.graph = graph
            self._generation += 1
            self.positions = positions
            snapshot = self.controller.load(graph, positions)

        if snapshot.status is PipelineStatus.CLUSTERING_SKIPPED:
            report.statuses.append(PipelineStatus.CLUSTERING_SKIPPED)
        if not report.statuses:
            report.statuses.append(PipelineStatus.OK)
        self.hints = plan_transitions(
            None, snapshot, self.config.animation_duration_ms
        )

        report.node_count = len(graph.nodes)
        report.edge_count = len(graph.edges)
        report.metrics = compute_graph_metrics(graph)
        logging.info(
            f"Loaded graph: {report.node_count} nodes, {report.edge_count} edges, "
            f"statuses={[s.value for s in report.statuses]}"
        )
        return report

    def toggle_expand(self, item_id: str) -> ViewUpdate:
        update = self.controller.toggle_expand(item_id)
        self.hints = update.hints
        return update

    def snapshot(self) -> ViewSnapshot:
        return self.controller.snapshot()

    def neighborhood(self, node_id: str):
        return self.controller.neighborhood(node_id)

    # ---------------------------------------------------------------
    # Background relayout
    # ---------------------------------------------------------------

    def _layout_key(self) -> str:
        return f"graph-{self._generation}"

    def request_layout(self, iterations: Optional[int] = None) -> Future:
        """
        Re-run the layout off the calling thread. Only the most recent
        request for the current graph is applied; loading another graph
        discards requests made for the previous one.
        """
        with self._lock:
            if self._worker is None:
                self._worker = LayoutWorker(self.config)
            graph = self.graph
            future = self._worker.submit(
                self._layout_key(),
                graph,
                iterations=iterations,
                initial_positions=self.positions,
            )

        def apply(done: Future) -> None:
            if done.cancelled() or done.exception() is not None:
                return
            result = done.result()
            if not result:
                return
            with self._lock:
                if self.controller.update_positions(result, graph) is not None:
                    self.positions = result

        future.add_done_callback(apply)
        return future

    def close(self) -> None:
        if self._worker is not None:
            self._worker.shutdown()
            self._worker = None

    def __enter__(self) -> "GraphEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---------------------------------------------------------------
    # Export
    # ---------------------------------------------------------------

    def export(self) -> Dict[str, Any]:
        snapshot = self.snapshot()
        visible_positions = snapshot.positions()
        curves = {}
        for edge in snapshot.visible_edges:
            if edge.source not in visible_positions or edge.target not in visible_positions:
                continue
            path = curved_edge_path(
                visible_positions[edge.source], visible_positions[edge.target]
            )
            curves[edge.id] = [list(p) for p in path]
        return {
            "graph": self.graph.to_dict(),
            "positions": {nid: list(p) for nid, p in self.positions.items()},
            "snapshot": snapshot.to_dict(),
            "hints": [hint.to_dict() for hint in self.hints],
            "curves": curves,
        }
