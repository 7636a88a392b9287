"""Tests for the background layout worker"""

import threading

from graphweave.pipeline import LayoutWorker


def test_submit_returns_positions(path_graph):
    with LayoutWorker() as worker:
        positions = worker.submit("g", path_graph, iterations=10).result(timeout=30)
    assert set(positions) == set(path_graph.node_ids())


def test_latest_request_wins(path_graph):
    """A request queued behind a busy worker is dropped once superseded"""
    worker = LayoutWorker()
    gate = threading.Event()
    worker._ensure_executor().submit(gate.wait, 30)
    try:
        first = worker.submit("g", path_graph, iterations=10)
        second = worker.submit("g", path_graph, iterations=10)
        assert first.cancelled()
        assert worker.latest("g") is second
        gate.set()
        assert set(second.result(timeout=30)) == set(path_graph.node_ids())
    finally:
        gate.set()
        worker.shutdown()

    stats = worker.stats()
    assert stats["submitted"] == 2
    assert stats["superseded"] == 1
    assert stats["completed"] == 1


def test_keys_are_independent(path_graph):
    with LayoutWorker() as worker:
        a = worker.submit("a", path_graph, iterations=5)
        b = worker.submit("b", path_graph, iterations=5)
        assert a.result(timeout=30)
        assert b.result(timeout=30)


def test_discard_forgets_replaced_graph(path_graph):
    worker = LayoutWorker()
    gate = threading.Event()
    worker._ensure_executor().submit(gate.wait, 30)
    try:
        old = worker.submit("graph-1", path_graph, iterations=10)
        current = worker.submit("graph-2", path_graph, iterations=10)
        worker.discard("graph-1")
        assert old.cancelled()
        assert worker.latest("graph-1") is None
        assert set(worker._generation) == {"graph-2"}
        assert set(worker._futures) == {"graph-2"}
        gate.set()
        assert current.result(timeout=30)
    finally:
        gate.set()
        worker.shutdown()

    assert worker.stats()["superseded"] == 1


def test_discard_unknown_key_is_noop():
    with LayoutWorker() as worker:
        worker.discard("missing")
        assert worker.stats() == {"submitted": 0, "completed": 0, "superseded": 0}
