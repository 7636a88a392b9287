from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from graphweave.config import constants
from graphweave.layout.seeding import Vector3

if TYPE_CHECKING:
    from graphweave.view.controller import ViewSnapshot


def ease_in_out_cubic(t: float) -> float:
    t = min(1.0, max(0.0, t))
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


@dataclass(frozen=True)
class AnimationHint:
    target_id: str
    from_position: Vector3
    from_opacity: float
    to_position: Vector3
    to_opacity: float
    duration_ms: int = constants.ANIMATION_DURATION_MS
    easing: str = constants.EASING_ID

    def at(self, progress: float) -> Tuple[Vector3, float]:
        """Eased position and opacity at raw progress in [0, 1]."""
        e = ease_in_out_cubic(progress)
        position = tuple(
            a + (b - a) * e for a, b in zip(self.from_position, self.to_position)
        )
        opacity = self.from_opacity + (self.to_opacity - self.from_opacity) * e
        return position, opacity

    def to_dict(self) -> Dict[str, object]:
        return {
            "target_id": self.target_id,
            "from_position": list(self.from_position),
            "from_opacity": self.from_opacity,
            "to_position": list(self.to_position),
            "to_opacity": self.to_opacity,
            "duration_ms": self.duration_ms,
            "easing": self.easing,
        }


def plan_transitions(
    previous: Optional["ViewSnapshot"],
    current: "ViewSnapshot",
    duration_ms: int = constants.ANIMATION_DURATION_MS,
) -> List[AnimationHint]:
    """
    Hints for moving from one snapshot to the next. Appearing items fade in
    from the cluster they come out of, disappearing items fade out toward the
    cluster that absorbs them, and persisting items that moved glide over.
    """
    before = previous.positions() if previous is not None else {}
    after = current.positions()
    owner = current.cluster_of()
    hints: List[AnimationHint] = []

    for item_id, position in after.items():
        if item_id in before:
            if before[item_id] != position:
                hints.append(
                    AnimationHint(
                        item_id, before[item_id], 1.0, position, 1.0, duration_ms
                    )
                )
            continue
        origin = before.get(owner.get(item_id, ""), position)
        hints.append(AnimationHint(item_id, origin, 0.0, position, 1.0, duration_ms))

    for item_id, position in before.items():
        if item_id in after:
            continue
        destination = after.get(owner.get(item_id, ""), position)
        hints.append(
            AnimationHint(item_id, position, 1.0, destination, 0.0, duration_ms)
        )
    return hints


class AnimationTimeline:
    """
    One running animation per target. Starting a new animation on a busy
    target cancels the old one and restarts from its current interpolated
    state; nothing is queued.
    """

    def __init__(self) -> None:
        self._running: Dict[str, Tuple[AnimationHint, float]] = {}

    def start(self, hint: AnimationHint, now_ms: float) -> AnimationHint:
        current = self.sample(hint.target_id, now_ms)
        if current is not None and hint.target_id in self.active_targets(now_ms):
            position, opacity = current
            hint = replace(hint, from_position=position, from_opacity=opacity)
        self._running[hint.target_id] = (hint, now_ms)
        return hint

    def start_all(self, hints: List[AnimationHint], now_ms: float) -> None:
        for hint in hints:
            self.start(hint, now_ms)

    def cancel(self, target_id: str) -> None:
        self._running.pop(target_id, None)

    def progress(self, target_id: str, now_ms: float) -> Optional[float]:
        entry = self._running.get(target_id)
        if entry is None:
            return None
        hint, started = entry
        return min(1.0, max(0.0, (now_ms - started) / hint.duration_ms))

    def sample(self, target_id: str, now_ms: float) -> Optional[Tuple[Vector3, float]]:
        progress = self.progress(target_id, now_ms)
        if progress is None:
            return None
        return self._running[target_id][0].at(progress)

    def active_targets(self, now_ms: float) -> List[str]:
        return [
            target_id
            for target_id, (hint, started) in self._running.items()
            if now_ms < started + hint.duration_ms
        ]
