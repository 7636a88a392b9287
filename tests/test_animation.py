"""Tests for easing, transition planning and the animation timeline"""

import pytest

from graphweave.view import (
    AnimationHint,
    AnimationTimeline,
    ease_in_out_cubic,
    plan_transitions,
)
from graphweave.view.controller import PositionedNode, ViewSnapshot

from conftest import make_node


@pytest.mark.parametrize(
    "t, expected",
    [(0.0, 0.0), (0.25, 0.0625), (0.5, 0.5), (1.0, 1.0), (-1.0, 0.0), (2.0, 1.0)],
)
def test_ease_in_out_cubic(t, expected):
    assert ease_in_out_cubic(t) == pytest.approx(expected)


def test_easing_is_symmetric():
    for t in (0.1, 0.3, 0.45):
        assert ease_in_out_cubic(t) + ease_in_out_cubic(1.0 - t) == pytest.approx(1.0)


def _hint(target="n1", start=(0.0, 0.0, 0.0), end=(10.0, 0.0, 0.0)):
    return AnimationHint(target, start, 1.0, end, 1.0, duration_ms=100)


def test_hint_at_midpoint():
    position, opacity = _hint().at(0.5)
    assert position == pytest.approx((5.0, 0.0, 0.0))
    assert opacity == pytest.approx(1.0)


def test_hint_to_dict_carries_easing():
    data = _hint().to_dict()
    assert data["easing"] == "easeInOutCubic"
    assert data["duration_ms"] == 100


def test_timeline_restarts_from_current_state():
    timeline = AnimationTimeline()
    timeline.start(_hint(), now_ms=0)
    restarted = timeline.start(_hint(end=(0.0, 0.0, 0.0)), now_ms=50)

    assert restarted.from_position == pytest.approx((5.0, 0.0, 0.0))
    assert timeline.progress("n1", 50) == pytest.approx(0.0)
    assert timeline.active_targets(100) == ["n1"]


def test_timeline_finished_animation_is_not_resumed():
    timeline = AnimationTimeline()
    timeline.start(_hint(), now_ms=0)
    fresh = timeline.start(_hint(start=(1.0, 1.0, 1.0)), now_ms=500)
    assert fresh.from_position == (1.0, 1.0, 1.0)


def test_timeline_cancel():
    timeline = AnimationTimeline()
    timeline.start_all([_hint("a"), _hint("b")], now_ms=0)
    timeline.cancel("a")
    assert timeline.progress("a", 10) is None
    assert timeline.sample("b", 100)[0] == pytest.approx((10.0, 0.0, 0.0))
    assert timeline.active_targets(200) == []


def test_plan_transitions_initial_load_fades_in():
    a, b = make_node("a"), make_node("b")
    snapshot = ViewSnapshot(
        visible_nodes=[
            PositionedNode(a, (1.0, 0.0, 0.0)),
            PositionedNode(b, (0.0, 1.0, 0.0)),
        ]
    )
    hints = plan_transitions(None, snapshot, duration_ms=250)
    assert [h.target_id for h in hints] == [a.id, b.id]
    assert all(h.from_opacity == 0.0 and h.duration_ms == 250 for h in hints)


def test_plan_transitions_moves_only_changed_items():
    a, b = make_node("a"), make_node("b")
    before = ViewSnapshot(
        visible_nodes=[PositionedNode(a, (0.0, 0.0, 0.0)), PositionedNode(b, (1.0, 1.0, 1.0))]
    )
    after = ViewSnapshot(
        visible_nodes=[PositionedNode(a, (0.0, 0.0, 0.0)), PositionedNode(b, (2.0, 1.0, 1.0))]
    )
    hints = plan_transitions(before, after)
    assert len(hints) == 1
    assert hints[0].target_id == b.id
    assert hints[0].from_opacity == hints[0].to_opacity == 1.0
