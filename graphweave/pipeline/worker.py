"""
Background force layout with latest-wins cancellation.

A single worker thread means at most one simulation runs at a time. Every
request for a graph key bumps that key's generation; a run whose generation
is no longer current stops between ticks and resolves to None, so superseded
positions are discarded and never merged.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Optional

from graphweave.config.settings import GraphConfig
from graphweave.graph.graph import Graph
from graphweave.layout.force import ForceLayout
from graphweave.layout.seeding import Vector3


class LayoutWorker:
    def __init__(self, config: Optional[GraphConfig] = None) -> None:
        self.config = config or GraphConfig()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._lock = threading.RLock()
        self._generation: Dict[str, int] = {}
        self._futures: Dict[str, Future] = {}
        self._stats = {"submitted": 0, "completed": 0, "superseded": 0}

    def _ensure_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="graphweave_layout_"
            )
        return self._executor

    def _is_current(self, graph_key: str, generation: int) -> bool:
        with self._lock:
            return self._generation.get(graph_key) == generation

    def submit(
        self,
        graph_key: str,
        graph: Graph,
        iterations: Optional[int] = None,
        initial_positions: Optional[Dict[str, Vector3]] = None,
    ) -> "Future[Optional[Dict[str, Vector3]]]":
        """Queue a layout for ``graph_key``, superseding any earlier request."""
        with self._lock:
            generation = self._generation.get(graph_key, 0) + 1
            self._generation[graph_key] = generation
            previous = self._futures.get(graph_key)
            if previous is not None and not previous.done():
                previous.cancel()
                self._stats["superseded"] += 1
            self._stats["submitted"] += 1

        def stale() -> bool:
            return not self._is_current(graph_key, generation)

        def task() -> Optional[Dict[str, Vector3]]:
            if stale():
                return None
            result = ForceLayout(
                graph,
                config=self.config,
                iterations=iterations,
                initial_positions=initial_positions,
                should_cancel=stale,
            ).run()
            if result is None or stale():
                logging.debug(f"Discarded superseded layout for {graph_key}")
                return None
            with self._lock:
                self._stats["completed"] += 1
            return result

        future = self._ensure_executor().submit(task)
        with self._lock:
            self._futures[graph_key] = future
        return future

    def discard(self, graph_key: str) -> None:
        """
        Forget ``graph_key`` once its graph is replaced. A queued request is
        cancelled and a running one sees itself as stale at the next tick.
        """
        with self._lock:
            self._generation.pop(graph_key, None)
            previous = self._futures.pop(graph_key, None)
            if previous is not None and not previous.done():
                previous.cancel()
                self._stats["superseded"] += 1

    def latest(self, graph_key: str) -> Optional[Future]:
        with self._lock:
            return self._futures.get(graph_key)

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._stats)

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            for key in self._generation:
                self._generation[key] += 1
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> "LayoutWorker":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
