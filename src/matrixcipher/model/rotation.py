"""
Rotation Matrices
=================
Builds planar (Givens) rotations: the identity everywhere except a 2x2
rotation block on a chosen pair of axes.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional

import numpy as np

from matrixcipher.model.errors import InvalidDimension, InvalidAxis
from matrixcipher.model.matrix import Matrix

logger = logging.getLogger(__name__)

# Uniform sampler over [0, 1)
RandomSource = Callable[[], float]


def default_random_source(seed: Optional[int] = None) -> RandomSource:
    """Uniform [0, 1) sampler backed by a numpy Generator."""
    rng = np.random.default_rng(seed)
    return lambda: float(rng.random())


def rotation(n: int, theta: float, a: int, b: int) -> Matrix:
    """
    Generate an n-by-n rotation matrix in the plane of axes ``a`` and ``b``.

    Args:
        n: Matrix dimension, at least 2.
        theta: Rotation angle in radians.
        a: First axis index.
        b: Second axis index, different from ``a``.

    Raises:
        InvalidDimension: If ``n < 2``.
        InvalidAxis: If ``a == b`` or either index is outside ``[0, n)``.

    Returns:
        The rotation matrix.
    """
    if n < 2:
        raise InvalidDimension(f"Rotation needs a dimension of at least 2, got {n}.")
    if not (0 <= a < n and 0 <= b < n):
        raise InvalidAxis(f"Axes ({a}, {b}) out of range for dimension {n}.")
    if a == b:
        raise InvalidAxis(f"Rotation axes must differ, got ({a}, {b}).")

    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    mat = np.eye(n)
    mat[a, a] = cos_t
    mat[a, b] = -sin_t
    mat[b, a] = sin_t
    mat[b, b] = cos_t
    return Matrix(mat)


def random_rotation(n: int, random: Optional[RandomSource] = None) -> Matrix:
    """
    Generate a random n-by-n rotation matrix.

    The angle is drawn first, then axis ``a``, then axis ``b`` until it
    differs from ``a``.
    """
    if n < 2:
        raise InvalidDimension(f"Rotation needs a dimension of at least 2, got {n}.")
    if random is None:
        random = default_random_source()

    def dim() -> int:
        # Guard against a sampler returning exactly 1.0
        return min(int(math.floor(random() * n)), n - 1)

    theta = random() * math.pi * 2.0
    a = dim()
    b = dim()
    while a == b:
        b = dim()

    logger.debug(f"Random rotation: n={n}, theta={theta:.4f}, axes=({a}, {b})")
    return rotation(n, theta, a, b)
