"""
Small vector helpers shared by the engine.

Positions, directions and field values are plain ``numpy`` arrays of
shape ``(3,)`` and dtype ``float64``. The helpers here create, copy and
normalise such arrays so that modules never alias a candidate's state by
accident.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

#: Type alias for a 3-vector.
Vec3 = np.ndarray


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(value: Iterable[float]) -> Vec3:
    """Return an independent float64 copy of ``value`` with shape ``(3,)``."""
    arr = np.array(value, dtype=np.float64).reshape(3)
    return arr


def norm(v: Vec3) -> float:
    return math.sqrt(float(v[0] * v[0] + v[1] * v[1] + v[2] * v[2]))


def unit_vector(v: Vec3) -> Vec3:
    """Return ``v / |v|``.

    A zero vector has no direction; the result is then filled with NaN,
    which callers detect with ``np.isfinite`` instead of catching a
    division error.
    """
    r = norm(v)
    if r == 0.0:
        return np.full(3, np.nan)
    return v / r


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def random_unit_vector(rng: np.random.Generator) -> Vec3:
    """Draw a direction uniformly distributed on the unit sphere."""
    z = rng.uniform(-1.0, 1.0)
    t = rng.uniform(-math.pi, math.pi)
    r = math.sqrt(1.0 - z * z)
    return vec3(r * math.cos(t), r * math.sin(t), z)
