from graphweave.view.community import (
    Cluster,
    detect_communities,
    build_clusters,
)
from graphweave.view.animation import (
    AnimationHint,
    AnimationTimeline,
    ease_in_out_cubic,
    plan_transitions,
)
from graphweave.view.controller import (
    PositionedNode,
    ViewSnapshot,
    ViewUpdate,
    ExpansionController,
    derive_view,
    expansion_positions,
)

__all__ = [
    "Cluster",
    "detect_communities",
    "build_clusters",
    "AnimationHint",
    "AnimationTimeline",
    "ease_in_out_cubic",
    "plan_transitions",
    "PositionedNode",
    "ViewSnapshot",
    "ViewUpdate",
    "ExpansionController",
    "derive_view",
    "expansion_positions",
]
