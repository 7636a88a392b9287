import math
from typing import List

import numpy as np

from graphweave.config import constants
from graphweave.layout.seeding import Vector3


def _catmull_rom(p0, p1, p2, p3, t: float) -> np.ndarray:
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        2.0 * p1
        + (-p0 + p2) * t
        + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * t2
        + (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * t3
    )


def curved_edge_path(
    start: Vector3,
    end: Vector3,
    resolution: int = constants.CURVE_RESOLUTION,
    bend: float = constants.CURVE_BEND,
) -> List[Vector3]:
    """
    Sampled curve through start, a raised midpoint and end.

    The midpoint is lifted on z by ``distance * bend``; the curve is a uniform
    Catmull-Rom spline with reflected end tangents, sampled at ``resolution``
    points including both endpoints.
    """
    a = np.asarray(start, dtype=float)
    b = np.asarray(end, dtype=float)
    mid = (a + b) / 2.0
    mid[2] += math.dist(start, end) * bend

    points = [2.0 * a - mid, a, mid, b, 2.0 * b - mid]
    resolution = max(2, int(resolution))
    samples: List[Vector3] = []
    for t in np.linspace(0.0, 2.0, resolution):
        segment = min(int(t), 1)
        local = float(t) - segment
        p = _catmull_rom(*points[segment : segment + 4], local)
        samples.append((float(p[0]), float(p[1]), float(p[2])))
    return samples
