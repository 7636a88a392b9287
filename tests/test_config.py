"""Tests for graph configuration"""

import pytest

from graphweave.config import GraphConfig, QualityGate
from graphweave.config import constants


def test_defaults_match_constants():
    """A bare config carries the documented defaults"""
    config = GraphConfig()
    assert config.cluster_threshold == constants.CLUSTER_THRESHOLD == 50
    assert config.iterations == 100
    assert config.damping == pytest.approx(0.8)
    assert config.quality_gate == QualityGate(0.3, 0.5)


def test_quality_gate_is_strict():
    """Edges exactly on a threshold are rejected"""
    gate = QualityGate(min_weight=0.3, min_confidence=0.5)
    assert gate.admits(0.31, 0.51)
    assert not gate.admits(0.3, 0.9)
    assert not gate.admits(0.9, 0.5)


def test_from_mapping_camel_case_and_nested_gate():
    """Caller-facing camelCase names and a nested quality gate are accepted"""
    config = GraphConfig.from_mapping(
        {
            "clusterThreshold": "10",
            "iterations": 20,
            "damping": 0.5,
            "qualityGate": {"minWeight": 0.1, "minConfidence": 0.2},
        }
    )
    assert config.cluster_threshold == 10
    assert config.iterations == 20
    assert config.damping == pytest.approx(0.5)
    assert config.quality_gate.min_weight == pytest.approx(0.1)
    assert config.quality_gate.min_confidence == pytest.approx(0.2)


def test_from_mapping_partial_gate_keeps_other_default():
    config = GraphConfig.from_mapping({"quality_gate.min_weight": 0.7})
    assert config.quality_gate.min_weight == pytest.approx(0.7)
    assert config.quality_gate.min_confidence == pytest.approx(0.5)


def test_from_mapping_ignores_unknown_keys(caplog):
    """Unknown options are logged and skipped"""
    config = GraphConfig.from_mapping({"colour": "red", "iterations": 5})
    assert config.iterations == 5
    assert "colour" in caplog.text


@pytest.mark.parametrize(
    "options",
    [
        {"damping": 0},
        {"damping": 1.5},
        {"iterations": -1},
        {"clusterThreshold": -3},
        {"iterations": "many"},
    ],
)
def test_invalid_values_raise(options):
    with pytest.raises(ValueError):
        GraphConfig.from_mapping(options)


def test_with_overrides_skips_none():
    base = GraphConfig()
    assert base.with_overrides(iterations=None) is base
    assert base.with_overrides(seed=7).seed == 7
