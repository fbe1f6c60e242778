from __future__ import annotations

import numpy as np
from numba import njit, prange


def _as_pair(v1, v2) -> tuple[np.ndarray, np.ndarray]:
    a = np.asarray(v1, dtype=np.float64)
    b = np.asarray(v2, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"dimension mismatch: {a.shape} vs {b.shape}")
    return a, b


def toroidal_difference(v1, v2) -> np.ndarray:
    """Per-axis difference v1 - v2 shifted by +1 or -1 when that lands in [0, 1).

    The -1 shift is tested last and wins when both shifts qualify. The rule is
    a range test, not a magnitude test, so for a negative raw difference the
    result is raw + 1 even when |raw| < 0.5 (e.g. -0.1 gives 0.9). Use
    :func:`minimum_image` for the symmetric shortest representative.
    """

    a, b = _as_pair(v1, v2)
    raw = a - b
    res = raw.copy()
    up = raw + 1.0
    down = raw - 1.0
    res = np.where((up >= 0.0) & (up < 1.0), up, res)
    res = np.where((down >= 0.0) & (down < 1.0), down, res)
    return res


def minimum_image(v1, v2) -> np.ndarray:
    """Shortest periodic representative of v1 - v2, components in [-0.5, 0.5]."""

    a, b = _as_pair(v1, v2)
    raw = a - b
    return raw - np.round(raw)


def toroidal_distance(v1, v2) -> float:
    """Euclidean distance on the unit torus (minimum-image convention).

    For each axis the candidates raw, raw + 1 and raw - 1 are compared by
    squared magnitude, a candidate replacing the current one only when
    strictly smaller.
    """

    a, b = _as_pair(v1, v2)
    raw = a - b
    res = raw.copy()
    up = raw + 1.0
    down = raw - 1.0
    res = np.where(res * res > up * up, up, res)
    res = np.where(res * res > down * down, down, res)
    return float(np.linalg.norm(res))


@njit(cache=True)
def _axis_min_image(raw: float) -> float:
    res = raw
    up = raw + 1.0
    down = raw - 1.0
    if res * res > up * up:
        res = up
    if res * res > down * down:
        res = down
    return res


@njit(parallel=True, cache=True)
def _distances_to(points: np.ndarray, ref: np.ndarray) -> np.ndarray:
    n = points.shape[0]
    dim = points.shape[1]
    out = np.empty(n, dtype=np.float64)
    for i in prange(n):
        s = 0.0
        for k in range(dim):
            d = _axis_min_image(points[i, k] - ref[k])
            s += d * d
        out[i] = np.sqrt(s)
    return out


@njit(parallel=True, cache=True)
def _distance_matrix(points: np.ndarray) -> np.ndarray:
    n = points.shape[0]
    dim = points.shape[1]
    out = np.zeros((n, n), dtype=np.float64)
    for i in prange(n):
        for j in range(n):
            if j == i:
                continue
            s = 0.0
            for k in range(dim):
                d = _axis_min_image(points[i, k] - points[j, k])
                s += d * d
            out[i, j] = np.sqrt(s)
    return out


def _as_points(points) -> np.ndarray:
    p = np.ascontiguousarray(points, dtype=np.float64)
    if p.ndim != 2:
        raise ValueError(f"expected an (n, dim) array, got shape {p.shape}")
    return p


def toroidal_distances_to(points, ref) -> np.ndarray:
    """Toroidal distance from every row of ``points`` to ``ref``."""

    p = _as_points(points)
    r = np.ascontiguousarray(ref, dtype=np.float64)
    if r.shape != (p.shape[1],):
        raise ValueError(f"dimension mismatch: points {p.shape}, ref {r.shape}")
    return _distances_to(p, r)


def toroidal_distance_matrix(points) -> np.ndarray:
    """Symmetric (n, n) matrix of pairwise toroidal distances, zero diagonal."""

    return _distance_matrix(_as_points(points))


def wrap_unit(points: np.ndarray) -> None:
    """In-place periodic wrapping of coordinates into [0, 1)."""

    points -= np.floor(points)
    # tiny negatives round up to exactly 1.0
    points[points >= 1.0] = 0.0
