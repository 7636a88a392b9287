from .constants import (
    CLUSTER_THRESHOLD,
    ITERATIONS,
    DAMPING,
    MIN_EDGE_WEIGHT,
    MIN_EDGE_CONFIDENCE,
    ANIMATION_DURATION_MS,
    EASING_ID,
    SEED,
    DEBUG,
    SAMPLE_TEXT,
)

from .settings import GraphConfig, QualityGate

__all__ = [
    # Recognized option defaults
    "CLUSTER_THRESHOLD",
    "ITERATIONS",
    "DAMPING",
    "MIN_EDGE_WEIGHT",
    "MIN_EDGE_CONFIDENCE",
    # Animation contract
    "ANIMATION_DURATION_MS",
    "EASING_ID",
    "SEED",
    "DEBUG",
    "SAMPLE_TEXT",
    # Config objects
    "GraphConfig",
    "QualityGate",
]
