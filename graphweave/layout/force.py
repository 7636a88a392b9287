"""
Fixed-iteration 3D force layout.

Each tick applies inverse-square repulsion between every node pair and a
linear spring pull along every edge, both symmetric, then moves each node by
``force * damping`` (capped at ``max_step``). There is no velocity term and no
convergence test: the loop always runs ``iterations`` ticks.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Optional

import numpy as np

from graphweave.config.settings import GraphConfig
from graphweave.graph.graph import Graph
from graphweave.layout.seeding import Vector3, seed_array


class LayoutState(Enum):
    INITIALIZED = "initialized"
    SIMULATING = "simulating"
    CONVERGED = "converged"
    CANCELLED = "cancelled"


class ForceLayout:
    def __init__(
        self,
        graph: Graph,
        config: Optional[GraphConfig] = None,
        iterations: Optional[int] = None,
        initial_positions: Optional[Dict[str, Vector3]] = None,
        root_id: Optional[str] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> None:
        self.config = config or GraphConfig()
        self.iterations = self.config.iterations if iterations is None else iterations
        self.should_cancel = should_cancel
        self.node_ids = graph.node_ids()
        self.ticks = 0

        index = {nid: i for i, nid in enumerate(self.node_ids)}
        pairs = [
            (index[e.source], index[e.target])
            for e in graph.edges
            if e.source != e.target
        ]
        self._src = np.array([p[0] for p in pairs], dtype=int)
        self._tgt = np.array([p[1] for p in pairs], dtype=int)

        self._pos = seed_array(
            self.node_ids,
            graph=graph,
            root_id=root_id,
            initial_positions=initial_positions,
            seed=self.config.seed,
            spread=self.config.seed_spread,
        )
        self.state = LayoutState.INITIALIZED

    def _forces(self) -> np.ndarray:
        pos = self._pos
        forces = np.zeros_like(pos)

        # Repulsion: unit direction / d^2, equal and opposite by symmetry of delta.
        delta = pos[:, None, :] - pos[None, :, :]
        dist = np.linalg.norm(delta, axis=-1)
        with np.errstate(divide="ignore", invalid="ignore"):
            scale = np.where(dist > 0, self.config.repulsion_force / dist**3, 0.0)
        forces += (delta * scale[..., None]).sum(axis=1)

        # Attraction: spring proportional to distance along each edge.
        if self._src.size:
            pull = (pos[self._tgt] - pos[self._src]) * self.config.attraction_force
            np.add.at(forces, self._src, pull)
            np.add.at(forces, self._tgt, -pull)
        return forces

    def step(self) -> None:
        if not self.node_ids:
            return
        self.state = LayoutState.SIMULATING
        displacement = self._forces() * self.config.damping
        norms = np.linalg.norm(displacement, axis=-1, keepdims=True)
        displacement *= np.minimum(1.0, self.config.max_step / np.maximum(norms, 1e-12))
        self._pos += displacement
        self.ticks += 1

    def run(self) -> Optional[Dict[str, Vector3]]:
        """
        Run the fixed tick count. Graphs without nodes or edges short-circuit
        to an empty map. Returns None when cancelled between ticks; a
        cancelled run never exposes partial positions.
        """
        if not self.node_ids or not self._src.size:
            logging.info(
                f"Layout degenerate ({len(self.node_ids)} nodes, {self._src.size} edges): "
                "returning empty position map"
            )
            self.state = LayoutState.CONVERGED
            return {}

        for _ in range(self.iterations):
            if self.should_cancel is not None and self.should_cancel():
                self.state = LayoutState.CANCELLED
                logging.debug(f"Layout cancelled after {self.ticks} ticks")
                return None
            self.step()

        self.state = LayoutState.CONVERGED
        return self.positions()

    def positions(self) -> Dict[str, Vector3]:
        """Copy of the current coordinates keyed by node id."""
        return {
            nid: (float(x), float(y), float(z))
            for nid, (x, y, z) in zip(self.node_ids, self._pos)
        }


def layout(
    graph: Graph,
    iterations: Optional[int] = None,
    config: Optional[GraphConfig] = None,
    root_id: Optional[str] = None,
    initial_positions: Optional[Dict[str, Vector3]] = None,
) -> Dict[str, Vector3]:
    result = ForceLayout(
        graph,
        config=config,
        iterations=iterations,
        initial_positions=initial_positions,
        root_id=root_id,
    ).run()
    return result or {}
