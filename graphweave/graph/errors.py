from enum import Enum


class GraphIntegrityError(ValueError):
    """Raised when a graph violates referential or identity invariants."""


class PipelineStatus(Enum):
    OK = "ok"
    EXTRACTION_EMPTY = "extraction_empty"
    QUALITY_GATE_REJECTED_ALL = "quality_gate_rejected_all"
    LAYOUT_DEGENERATE = "layout_degenerate"
    CLUSTERING_SKIPPED = "clustering_skipped"
