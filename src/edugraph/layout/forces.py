"""Force kernels for the concept layout.

Each kernel is pure: it reads positions/velocities and returns a delta
array, leaving the caller's arrays untouched. Semantics follow the usual
velocity-based force-directed model: forces nudge velocities (scaled by
alpha), except centering which translates positions directly and collision
which is not alpha-scaled.

Pairwise kernels are O(n^2); concept graphs from a single lecture stay in
the tens to low hundreds of nodes.
"""

from dataclasses import dataclass

import numpy as np

JIGGLE_SCALE = 1e-6


def jiggle(rng: np.random.Generator, shape: tuple[int, ...]) -> np.ndarray:
    """Tiny random offsets used to separate coincident points."""
    return (rng.random(shape) - 0.5) * JIGGLE_SCALE


@dataclass(frozen=True)
class LinkIndex:
    """Links resolved to node indices, with per-link stiffness and bias."""

    sources: np.ndarray  # int indices
    targets: np.ndarray  # int indices
    strengths: np.ndarray  # stiffness per link
    bias: np.ndarray  # share of the correction applied to the target

    def __len__(self) -> int:
        return int(self.sources.shape[0])

    @classmethod
    def build(
        cls,
        node_count: int,
        pairs: list[tuple[int, int]],
        strengths: list[float],
    ) -> "LinkIndex":
        """Index links; bias favours moving the less connected endpoint."""
        if not pairs:
            empty_i = np.zeros(0, dtype=int)
            empty_f = np.zeros(0, dtype=float)
            return cls(empty_i, empty_i, empty_f, empty_f)

        sources = np.array([s for s, _ in pairs], dtype=int)
        targets = np.array([t for _, t in pairs], dtype=int)
        counts = np.bincount(sources, minlength=node_count) + np.bincount(
            targets, minlength=node_count
        )
        bias = counts[sources] / (counts[sources] + counts[targets])
        return cls(sources, targets, np.asarray(strengths, dtype=float), bias.astype(float))


def link_force(
    positions: np.ndarray,
    velocities: np.ndarray,
    links: LinkIndex,
    distance: float,
    alpha: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Spring every link toward its rest distance."""
    dv = np.zeros_like(velocities)
    if len(links) == 0:
        return dv

    s, t = links.sources, links.targets
    delta = (positions[t] + velocities[t]) - (positions[s] + velocities[s])

    coincident = ~delta.any(axis=1)
    if coincident.any():
        delta[coincident] = jiggle(rng, (int(coincident.sum()), 2))

    length = np.hypot(delta[:, 0], delta[:, 1])
    factor = (length - distance) / length * alpha * links.strengths
    delta *= factor[:, None]

    np.add.at(dv, t, -delta * links.bias[:, None])
    np.add.at(dv, s, delta * (1 - links.bias)[:, None])
    return dv


def many_body_force(
    positions: np.ndarray,
    strength: float,
    alpha: float,
    distance_min: float = 1.0,
) -> np.ndarray:
    """Charge-like interaction between every pair of nodes."""
    n = positions.shape[0]
    if n < 2 or strength == 0:
        return np.zeros_like(positions)

    diff = positions[None, :, :] - positions[:, None, :]  # diff[i, j] = p_j - p_i
    dist2 = np.einsum("ijk,ijk->ij", diff, diff)

    min2 = distance_min * distance_min
    close = dist2 < min2
    dist2 = np.where(close, np.sqrt(min2 * dist2), dist2)

    with np.errstate(divide="ignore"):
        weight = np.where(dist2 > 0, strength * alpha / dist2, 0.0)
    np.fill_diagonal(weight, 0.0)

    return np.einsum("ij,ijk->ik", weight, diff)


def center_shift(
    positions: np.ndarray,
    center: tuple[float, float],
    strength: float,
    anchor: int | None = None,
) -> np.ndarray:
    """Translation that moves the mean position, or the anchor node, toward center."""
    if positions.shape[0] == 0:
        return np.zeros(2)
    reference = positions[anchor] if anchor is not None else positions.mean(axis=0)
    return (np.asarray(center, dtype=float) - reference) * strength


def collision_force(
    positions: np.ndarray,
    velocities: np.ndarray,
    radii: np.ndarray,
    strength: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Push apart overlapping circles, judged on their next positions."""
    n = positions.shape[0]
    dv = np.zeros_like(velocities)
    if n < 2:
        return dv

    predicted = positions + velocities
    diff = predicted[:, None, :] - predicted[None, :, :]  # diff[i, j] = q_i - q_j
    dist2 = np.einsum("ijk,ijk->ij", diff, diff)
    reach = radii[:, None] + radii[None, :]

    overlap = np.triu(dist2 < reach * reach, k=1)
    if not overlap.any():
        return dv

    ii, jj = np.nonzero(overlap)
    delta = diff[ii, jj]
    coincident = ~delta.any(axis=1)
    if coincident.any():
        delta[coincident] = jiggle(rng, (int(coincident.sum()), 2))

    dist = np.hypot(delta[:, 0], delta[:, 1])
    factor = (reach[ii, jj] - dist) / dist * strength
    push = delta * factor[:, None]

    ri2 = radii[ii] ** 2
    rj2 = radii[jj] ** 2
    share_i = rj2 / (ri2 + rj2)

    np.add.at(dv, ii, push * share_i[:, None])
    np.add.at(dv, jj, -push * (1 - share_i)[:, None])
    return dv


def vertical_bias_force(
    positions: np.ndarray,
    target_y: np.ndarray,
    strength: float,
    alpha: float,
) -> np.ndarray:
    """Pull y toward a per-node target; NaN targets are left alone."""
    dv = np.zeros_like(positions)
    has_target = ~np.isnan(target_y)
    dv[has_target, 1] = (target_y[has_target] - positions[has_target, 1]) * strength * alpha
    return dv
