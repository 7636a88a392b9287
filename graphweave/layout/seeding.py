import math
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from graphweave.config import constants
from graphweave.graph.graph import Graph

Vector3 = Tuple[float, float, float]


def random_cube(
    count: int, seed: int = constants.SEED, spread: float = constants.SEED_SPREAD
) -> np.ndarray:
    """(count, 3) uniform positions in [-spread, spread]^3 from an explicit seed."""
    rng = np.random.default_rng(seed)
    return rng.uniform(-spread, spread, size=(count, 3))


def random_cube_positions(
    node_ids: Sequence[str],
    seed: int = constants.SEED,
    spread: float = constants.SEED_SPREAD,
) -> Dict[str, Vector3]:
    coords = random_cube(len(node_ids), seed, spread)
    return {nid: tuple(float(c) for c in coords[i]) for i, nid in enumerate(node_ids)}


def radial_positions(
    graph: Graph,
    root_id: str,
    ring_step: float = constants.RADIAL_RING_STEP,
    depth_step: float = constants.RADIAL_DEPTH_STEP,
) -> Dict[str, Vector3]:
    """
    Rings by BFS depth from ``root_id``: radius depth*ring_step, angle
    index/count*2pi, z depth*depth_step. Nodes the root cannot reach share
    the ring after the deepest one.
    """
    depths = graph.bfs_depths([root_id])
    if not depths:
        return {}
    unreachable_depth = max(depths.values()) + 1

    rings: Dict[int, List[str]] = {}
    for node_id in graph.node_ids():
        rings.setdefault(depths.get(node_id, unreachable_depth), []).append(node_id)

    positions: Dict[str, Vector3] = {}
    for depth, members in rings.items():
        radius = depth * ring_step
        for index, node_id in enumerate(members):
            angle = index / len(members) * 2.0 * math.pi
            positions[node_id] = (
                radius * math.cos(angle),
                radius * math.sin(angle),
                depth * depth_step,
            )
    return positions


def seed_array(
    node_ids: Sequence[str],
    graph: Optional[Graph] = None,
    root_id: Optional[str] = None,
    initial_positions: Optional[Dict[str, Vector3]] = None,
    seed: int = constants.SEED,
    spread: float = constants.SEED_SPREAD,
) -> np.ndarray:
    """
    Starting coordinates in node order. Explicit ``initial_positions`` win,
    then radial placement when a root is given, then the seeded cube.
    """
    coords = random_cube(len(node_ids), seed, spread)
    if graph is not None and root_id is not None and root_id in graph:
        radial = radial_positions(graph, root_id)
        for i, node_id in enumerate(node_ids):
            if node_id in radial:
                coords[i] = radial[node_id]
    if initial_positions:
        for i, node_id in enumerate(node_ids):
            if node_id in initial_positions:
                coords[i] = initial_positions[node_id]
    return coords
