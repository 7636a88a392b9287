"""
Runtime configuration for the text-to-graph engine.

The recognized options mirror the ones exposed to callers of the engine:
``clusterThreshold``, ``iterations``, ``damping`` and the two quality gate
thresholds. Everything else has a sensible default from ``constants``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping

from graphweave.config import constants


@dataclass(frozen=True)
class QualityGate:
    min_weight: float = constants.MIN_EDGE_WEIGHT
    min_confidence: float = constants.MIN_EDGE_CONFIDENCE

    def admits(self, weight: float, confidence: float) -> bool:
        return weight > self.min_weight and confidence > self.min_confidence


@dataclass(frozen=True)
class GraphConfig:
    cluster_threshold: int = constants.CLUSTER_THRESHOLD
    iterations: int = constants.ITERATIONS
    damping: float = constants.DAMPING
    quality_gate: QualityGate = field(default_factory=QualityGate)
    repulsion_force: float = constants.REPULSION_FORCE
    attraction_force: float = constants.ATTRACTION_FORCE
    max_step: float = constants.MAX_STEP
    seed: int = constants.SEED
    seed_spread: float = constants.SEED_SPREAD
    max_community_passes: int = constants.MAX_COMMUNITY_PASSES
    expansion_jitter: float = constants.EXPANSION_JITTER
    expansion_iterations: int = constants.EXPANSION_ITERATIONS
    animation_duration_ms: int = constants.ANIMATION_DURATION_MS

    def __post_init__(self) -> None:
        if self.cluster_threshold < 0:
            raise ValueError(
                f"cluster_threshold must be >= 0, got {self.cluster_threshold}"
            )
        if self.iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {self.iterations}")
        if not (0.0 < self.damping <= 1.0):
            raise ValueError(f"damping must be in (0, 1], got {self.damping}")
        if self.max_step <= 0:
            raise ValueError(f"max_step must be > 0, got {self.max_step}")
        if self.animation_duration_ms <= 0:
            raise ValueError(
                f"animation_duration_ms must be > 0, got {self.animation_duration_ms}"
            )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "GraphConfig":
        """
        Build a config from a flat or nested options mapping.

        Accepts the camelCase names callers use (``clusterThreshold``,
        ``qualityGate.minWeight`` or ``{"qualityGate": {"minWeight": ...}}``)
        as well as the snake_case field names.
        """
        known = {f.name for f in fields(cls)} - {"quality_gate"}
        values: Dict[str, Any] = {}
        gate: Dict[str, float] = {}

        for key, value in _flatten(options).items():
            if key in _GATE_ALIASES:
                gate[_GATE_ALIASES[key]] = float(value)
                continue
            name = _FIELD_ALIASES.get(key, key)
            if name not in known:
                logging.warning(f"Ignoring unknown graph option: {key}")
                continue
            values[name] = _coerce(name, value)

        if gate:
            values["quality_gate"] = replace(QualityGate(), **gate)
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "GraphConfig":
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **overrides) if overrides else self


_FIELD_ALIASES = {
    "clusterThreshold": "cluster_threshold",
    "repulsionForce": "repulsion_force",
    "attractionForce": "attraction_force",
    "maxStep": "max_step",
    "seedSpread": "seed_spread",
    "maxCommunityPasses": "max_community_passes",
    "expansionJitter": "expansion_jitter",
    "expansionIterations": "expansion_iterations",
    "animationDurationMs": "animation_duration_ms",
}

_GATE_ALIASES = {
    "qualityGate.minWeight": "min_weight",
    "qualityGate.minConfidence": "min_confidence",
    "quality_gate.min_weight": "min_weight",
    "quality_gate.min_confidence": "min_confidence",
}

_INT_FIELDS = {
    "cluster_threshold",
    "iterations",
    "seed",
    "max_community_passes",
    "expansion_iterations",
    "animation_duration_ms",
}


def _flatten(options: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for key, value in options.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = value
    return flat


def _coerce(name: str, value: Any) -> Any:
    try:
        return int(value) if name in _INT_FIELDS else float(value)
    except (TypeError, ValueError) as err:
        raise ValueError(f"Invalid value for {name}: {value!r}") from err
