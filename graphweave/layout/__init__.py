from graphweave.layout.seeding import (
    Vector3,
    random_cube_positions,
    radial_positions,
)
from graphweave.layout.force import ForceLayout, LayoutState, layout
from graphweave.layout.curves import curved_edge_path

__all__ = [
    "Vector3",
    "random_cube_positions",
    "radial_positions",
    "ForceLayout",
    "LayoutState",
    "layout",
    "curved_edge_path",
]
