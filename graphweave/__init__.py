from graphweave.pipeline import GraphEngine, BuildReport
from graphweave.config import GraphConfig, QualityGate

__version__ = "0.1.0"

__all__ = ["GraphEngine", "BuildReport", "GraphConfig", "QualityGate", "__version__"]
