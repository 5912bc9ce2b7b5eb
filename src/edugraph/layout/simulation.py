"""Force simulation for the concept graph.

The physics is an explicit state transition, step(state, inputs, params,
frame, rng) -> state', applied once per frame. ForceSimulation holds the
only reference to the current LayoutState and swaps in a fresh one on
every tick, pin or reheat, so an observer never sees a half-updated node.

Cooling: alpha moves toward alpha_target by alpha_decay each tick; the
simulation is active while alpha or alpha_target is at least alpha_min.
Dragging raises alpha_target so neighbours keep moving; releasing lowers
it back to 0.

A detail view anchors its focus node: centering translates the layout so
that node, rather than the mean position, sits on the frame centre.
"""

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace

import numpy as np

from edugraph.layout.config import LayoutFrame, LayoutParams
from edugraph.layout.forces import (
    LinkIndex,
    center_shift,
    collision_force,
    link_force,
    many_body_force,
    vertical_bias_force,
)
from edugraph.models import ConceptEdge, ConceptNode

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))


@dataclass(frozen=True)
class LayoutState:
    """Positions and velocities of every node in one simulation."""

    ids: tuple[str, ...]
    positions: np.ndarray  # (n, 2)
    velocities: np.ndarray  # (n, 2)
    pinned: np.ndarray  # (n,) bool
    pins: np.ndarray  # (n, 2), meaningful where pinned
    alpha: float = 1.0
    alpha_target: float = 0.0
    ticks: int = 0

    def copy_arrays(self) -> "LayoutState":
        return replace(
            self,
            positions=self.positions.copy(),
            velocities=self.velocities.copy(),
            pinned=self.pinned.copy(),
            pins=self.pins.copy(),
        )


@dataclass(frozen=True)
class LayoutInputs:
    """Per-simulation constants derived from the view's nodes and edges."""

    links: LinkIndex
    radii: np.ndarray  # collision radius per node
    target_y: np.ndarray  # hub bias target per node, NaN when none
    anchor: int | None = None  # node centred instead of the mean


def build_inputs(
    nodes: Sequence[ConceptNode],
    edges: Sequence[ConceptEdge],
    params: LayoutParams,
    frame: LayoutFrame,
    ranks: Mapping[str, int] | None = None,
    anchor_id: str | None = None,
) -> LayoutInputs:
    """Resolve edges to indices and precompute radii and hub targets."""
    index = {node.id: i for i, node in enumerate(nodes)}

    pairs: list[tuple[int, int]] = []
    strengths: list[float] = []
    for edge in edges:
        s, t = index.get(edge.source), index.get(edge.target)
        if s is None or t is None or s == t:
            continue
        pairs.append((s, t))
        stiffness = params.link_strength
        if params.scale_link_by_edge_strength:
            stiffness *= edge.strength
        strengths.append(stiffness)

    radii = np.array([node.size + params.collision_padding for node in nodes], dtype=float)

    target_y = np.full(len(nodes), np.nan)
    if params.radial_strength and ranks:
        count = len(ranks)
        for i, node in enumerate(nodes):
            rank = ranks.get(node.id)
            if rank is not None:
                target_y[i] = frame.hub_target_y(rank, count, params.radial_radius_ratio)

    return LayoutInputs(
        links=LinkIndex.build(len(nodes), pairs, strengths),
        radii=radii,
        target_y=target_y,
        anchor=index.get(anchor_id) if anchor_id is not None else None,
    )


def initial_positions(
    ids: Sequence[str],
    frame: LayoutFrame,
    seed_positions: Mapping[str, tuple[float, float]] | None = None,
) -> np.ndarray:
    """Phyllotaxis spiral around the frame centre, overridden by seeds."""
    cx, cy = frame.center
    positions = np.zeros((len(ids), 2))
    for i, node_id in enumerate(ids):
        if seed_positions and node_id in seed_positions:
            positions[i] = seed_positions[node_id]
            continue
        radius = INITIAL_RADIUS * math.sqrt(0.5 + i)
        angle = i * INITIAL_ANGLE
        positions[i] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))
    return positions


def stabilize(positions: np.ndarray, frame: LayoutFrame, limit: float) -> np.ndarray:
    """Reset non-finite coordinates to the centre and clamp the rest."""
    bad = ~np.isfinite(positions).all(axis=1)
    if bad.any():
        logger.warning(f"Resetting {int(bad.sum())} non-finite node positions")
        positions[bad] = frame.center
    cx, cy = frame.center
    np.clip(positions[:, 0], cx - limit, cx + limit, out=positions[:, 0])
    np.clip(positions[:, 1], cy - limit, cy + limit, out=positions[:, 1])
    return positions


def step(
    state: LayoutState,
    inputs: LayoutInputs,
    params: LayoutParams,
    frame: LayoutFrame,
    rng: np.random.Generator,
) -> LayoutState:
    """Advance the layout by one tick and return the new state."""
    alpha = state.alpha + (state.alpha_target - state.alpha) * params.alpha_decay

    positions = state.positions.copy()
    velocities = state.velocities.copy()

    if positions.shape[0]:
        velocities += link_force(
            positions, velocities, inputs.links, params.link_distance, alpha, rng
        )
        velocities += many_body_force(
            positions, params.charge_strength, alpha, params.charge_distance_min
        )
        anchor = inputs.anchor
        if anchor is not None and state.pinned[anchor]:
            anchor = None  # Pinned anchor falls back to the mean
        positions += center_shift(positions, frame.center, params.center_strength, anchor)
        velocities += collision_force(
            positions, velocities, inputs.radii, params.collision_strength, rng
        )
        if params.radial_strength:
            velocities += vertical_bias_force(
                positions, inputs.target_y, params.radial_strength, alpha
            )

        velocities *= 1 - params.velocity_decay
        positions += velocities

        # Pinned nodes sit exactly on their pin
        pinned = state.pinned
        positions[pinned] = state.pins[pinned]
        velocities[pinned] = 0.0

        stabilize(positions, frame, params.max_coordinate)

    return replace(
        state,
        positions=positions,
        velocities=velocities,
        alpha=alpha,
        ticks=state.ticks + 1,
    )


class ForceSimulation:
    """
    Owns the layout of one view.

    A new simulation is created whenever the view mode or focus changes;
    the previous one is stopped so stale ticks cannot move anything.
    """

    def __init__(
        self,
        nodes: Sequence[ConceptNode],
        edges: Sequence[ConceptEdge],
        params: LayoutParams | None = None,
        frame: LayoutFrame | None = None,
        ranks: Mapping[str, int] | None = None,
        seed_positions: Mapping[str, tuple[float, float]] | None = None,
        seed: int | None = None,
        anchor_id: str | None = None,
    ) -> None:
        self.params = params or LayoutParams()
        self.frame = frame or LayoutFrame()
        self._index = {node.id: i for i, node in enumerate(nodes)}
        self._inputs = build_inputs(nodes, edges, self.params, self.frame, ranks, anchor_id)
        self.anchor_id = anchor_id if anchor_id in self._index else None

        # The anchor starts where centering will hold it
        if self.anchor_id is not None:
            seed_positions = {**(seed_positions or {}), self.anchor_id: self.frame.center}
        self._rng = np.random.default_rng(seed)
        self._stopped = False

        ids = tuple(node.id for node in nodes)
        n = len(ids)
        self._state = LayoutState(
            ids=ids,
            positions=initial_positions(ids, self.frame, seed_positions),
            velocities=np.zeros((n, 2)),
            pinned=np.zeros(n, dtype=bool),
            pins=np.zeros((n, 2)),
        )

        logger.debug(
            f"Simulation started: {n} nodes, {len(self._inputs.links)} links, "
            f"link distance {self.params.link_distance}, charge {self.params.charge_strength}"
        )

    @property
    def state(self) -> LayoutState:
        return self._state

    @property
    def node_ids(self) -> tuple[str, ...]:
        return self._state.ids

    @property
    def alpha(self) -> float:
        return self._state.alpha

    @property
    def alpha_target(self) -> float:
        return self._state.alpha_target

    @property
    def ticks(self) -> int:
        return self._state.ticks

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def active(self) -> bool:
        """True while the layout still needs ticks."""
        if self._stopped:
            return False
        alpha_min = self.params.alpha_min
        return self._state.alpha >= alpha_min or self._state.alpha_target >= alpha_min

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def tick(self, iterations: int = 1) -> LayoutState:
        """Run iterations steps; a stopped simulation does nothing."""
        if self._stopped:
            logger.debug("Ignoring tick on stopped simulation")
            return self._state

        state = self._state
        for _ in range(iterations):
            state = step(state, self._inputs, self.params, self.frame, self._rng)
        self._state = state
        return state

    def run(self, max_ticks: int = 1000) -> int:
        """Tick until cooled or max_ticks; returns the number of ticks run."""
        ran = 0
        while self.active and ran < max_ticks:
            self.tick()
            ran += 1
        return ran

    def stop(self) -> None:
        """Tear down: further ticks, pins and reheats are ignored."""
        self._stopped = True

    def reheat(self, alpha: float = 1.0) -> None:
        """Raise alpha so the layout visibly re-settles."""
        if not self._stopped:
            self._state = replace(self._state, alpha=alpha)

    def set_alpha_target(self, target: float) -> None:
        if not self._stopped:
            self._state = replace(self._state, alpha_target=target)

    def pin(self, node_id: str, x: float, y: float) -> bool:
        """Force node_id to (x, y) until unpinned."""
        i = self._index.get(node_id)
        if i is None or self._stopped:
            return False
        state = self._state.copy_arrays()
        state.pinned[i] = True
        state.pins[i] = (x, y)
        state.positions[i] = (x, y)
        state.velocities[i] = 0.0
        self._state = state
        return True

    def unpin(self, node_id: str) -> bool:
        """Return node_id to free simulation."""
        i = self._index.get(node_id)
        if i is None or self._stopped:
            return False
        state = self._state.copy_arrays()
        state.pinned[i] = False
        self._state = state
        return True

    def is_pinned(self, node_id: str) -> bool:
        i = self._index.get(node_id)
        return bool(i is not None and self._state.pinned[i])

    def position(self, node_id: str) -> tuple[float, float] | None:
        i = self._index.get(node_id)
        if i is None:
            return None
        x, y = self._state.positions[i]
        return (float(x), float(y))

    def positions(self) -> dict[str, tuple[float, float]]:
        state = self._state
        return {
            node_id: (float(state.positions[i, 0]), float(state.positions[i, 1]))
            for i, node_id in enumerate(state.ids)
        }
