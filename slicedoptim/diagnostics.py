from __future__ import annotations

import numpy as np

from .toroidal import _as_points, toroidal_distance_matrix


def _nearest_neighbor_distances(points: np.ndarray) -> np.ndarray:
    d = toroidal_distance_matrix(points)
    np.fill_diagonal(d, np.inf)
    return np.min(d, axis=1)


def min_toroidal_distance(points) -> float:
    """Smallest pairwise toroidal distance in the point set (larger is better spread)."""

    p = _as_points(points)
    if p.shape[0] < 2:
        return float("inf")
    return float(np.min(_nearest_neighbor_distances(p)))


def mean_nearest_neighbor_distance(points) -> float:
    p = _as_points(points)
    if p.shape[0] < 2:
        return float("inf")
    return float(np.mean(_nearest_neighbor_distances(p)))
