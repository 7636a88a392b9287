from graphweave.pipeline.engine import GraphEngine, BuildReport
from graphweave.pipeline.worker import LayoutWorker

__all__ = [
    "GraphEngine",
    "BuildReport",
    "LayoutWorker",
]
