from __future__ import annotations

import numpy as np

from .directions import random_unit_vectors


def _check_dim(dim: int) -> None:
    if dim <= 0:
        raise ValueError(f"dim must be positive, got {dim}")


def random_vector_in_ball(dim: int, rng: np.random.Generator) -> np.ndarray:
    """Uniform point inside the unit ball of R^dim.

    A Gaussian direction is scaled by U**(1/dim): the volume of the ball of
    radius r grows as r**dim, so this radius law makes the density uniform
    over the solid ball rather than concentrated near the center.
    """

    _check_dim(dim)
    v = random_unit_vectors(1, dim, rng)[0]
    v *= rng.random() ** (1.0 / dim)
    return v


def random_vector_in_cube(dim: int, rng: np.random.Generator) -> np.ndarray:
    """Uniform point in [0, 1)^dim."""

    _check_dim(dim)
    return rng.random(dim)


def random_points_in_ball(n: int, dim: int, rng: np.random.Generator) -> np.ndarray:
    _check_dim(dim)
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")
    v = random_unit_vectors(n, dim, rng)
    v *= (rng.random(n) ** (1.0 / dim))[:, None]
    return v


def random_points_in_cube(n: int, dim: int, rng: np.random.Generator) -> np.ndarray:
    """(n, dim) array of uniform points in the unit cube, used to seed a point set."""

    _check_dim(dim)
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")
    return rng.random((n, dim))
