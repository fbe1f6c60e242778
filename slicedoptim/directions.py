from __future__ import annotations

import math

import numpy as np

from .rng import make_rng, shared_engine, shared_lock

# 2-D branch thresholds: stratified angle below STRATIFIED_P, x axis up to
# AXIS_X_P, y axis above
STRATIFIED_P = 0.70
AXIS_X_P = 0.85

BRANCH_STRATIFIED = 0
BRANCH_AXIS_X = 1
BRANCH_AXIS_Y = 2


def _check_args(dim: int, count: int) -> None:
    if dim <= 0:
        raise ValueError(f"dim must be positive, got {dim}")
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")


def _stratified_2d(count: int, rng: np.random.Generator) -> np.ndarray:
    out = np.empty((count, 2), dtype=np.float64)
    for k in range(count):
        r = rng.random()
        if r < STRATIFIED_P:
            # one jittered sample per angular bin [k/count, (k+1)/count)
            theta = ((k + rng.random()) / count) * 2.0 * math.pi
            out[k, 0] = math.cos(theta)
            out[k, 1] = math.sin(theta)
        elif r < AXIS_X_P:
            out[k, 0] = 1.0
            out[k, 1] = 0.0
        else:
            out[k, 0] = 0.0
            out[k, 1] = 1.0
    return out


def random_unit_vectors(n: int, dim: int, rng: np.random.Generator) -> np.ndarray:
    """Generate n random unit vectors in R^dim (Gaussian -> normalize)."""

    v = rng.standard_normal(size=(n, dim))
    norms = np.linalg.norm(v, axis=1)
    # a zero draw has no direction, redraw it
    while np.any(norms == 0.0):
        bad = norms == 0.0
        v[bad] = rng.standard_normal(size=(int(bad.sum()), dim))
        norms = np.linalg.norm(v, axis=1)
    v /= norms[:, None]
    return v


def choose_directions(dim: int, count: int, rng: np.random.Generator) -> np.ndarray:
    """Draw ``count`` unit projection directions in R^dim from ``rng``.

    In 2-D, 70% of the directions are stratified over the circle (one jittered
    angle per bin of width 2*pi/count, bin given by the direction's index) and
    the remaining draws are split evenly between the x and y axes, so that
    axis-aligned structure in the point set is projected out more often.

    In any other dimension the directions are uniform on the unit hypersphere.

    Returns an array of shape (count, dim).
    """

    _check_args(dim, count)
    if dim == 2:
        return _stratified_2d(count, rng)
    return random_unit_vectors(count, dim, rng)


def choose_directions_shared(dim: int, count: int, seed: int) -> np.ndarray:
    """Same as :func:`choose_directions` but drawing from the process-wide engine.

    The engine is seeded by the first call only. Later calls continue its
    stream and ignore ``seed``.
    """

    _check_args(dim, count)
    with shared_lock():
        return choose_directions(dim, count, shared_engine(seed))


def classify_directions(directions: np.ndarray) -> np.ndarray:
    """Tag each 2-D direction with the branch of the policy that produced it.

    Returns BRANCH_AXIS_X for exactly (1, 0), BRANCH_AXIS_Y for exactly (0, 1)
    and BRANCH_STRATIFIED otherwise.
    """

    d = np.asarray(directions, dtype=np.float64)
    if d.ndim != 2 or d.shape[1] != 2:
        raise ValueError(f"expected an (n, 2) array, got shape {d.shape}")
    tags = np.full(d.shape[0], BRANCH_STRATIFIED, dtype=np.int64)
    tags[(d[:, 0] == 1.0) & (d[:, 1] == 0.0)] = BRANCH_AXIS_X
    tags[(d[:, 0] == 0.0) & (d[:, 1] == 1.0)] = BRANCH_AXIS_Y
    return tags


class DirectionSampler:
    """Projection direction source owning its own generator.

    One instance per caller gives an independent, reproducible stream.
    """

    def __init__(self, dim: int, rng: np.random.Generator | None = None, seed: int | None = None) -> None:
        if dim <= 0:
            raise ValueError(f"dim must be positive, got {dim}")
        if rng is not None and seed is not None:
            raise ValueError("pass either rng or seed, not both")
        self.dim = dim
        self.rng = rng if rng is not None else make_rng(seed)

    def sample(self, count: int) -> np.ndarray:
        return choose_directions(self.dim, count, self.rng)
