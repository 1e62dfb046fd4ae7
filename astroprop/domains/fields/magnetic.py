"""
Magnetic field evaluators.

Transport modules consume a field through a single call,
``get_field(position, z)``, returning the field vector in tesla at a
position in metres and redshift ``z``. Evaluators are immutable after
construction and are evaluated many times per candidate per step, so
they may be shared by any number of modules and read concurrently.

Only a few analytic models are provided here; turbulent or gridded
field models plug in by subclassing ``MagneticField``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Iterable, List

import numpy as np

from ...core.types import Vec3, as_vec3, vec3


class MagneticField(ABC):
    """Field evaluator contract."""

    @abstractmethod
    def get_field(self, position: Vec3, z: float = 0.0) -> Vec3:
        """Return the field vector at ``position`` and redshift ``z``."""


class UniformMagneticField(MagneticField):
    """Field with the same value everywhere."""

    def __init__(self, value: Iterable[float]):
        self.value = as_vec3(value)
        self.value.setflags(write=False)

    def get_field(self, position: Vec3, z: float = 0.0) -> Vec3:
        return self.value.copy()


class HelicalMagneticField(MagneticField):
    """Smooth field whose direction rotates about the z axis.

    ``B(x, y, z) = b0 * (cos(k z), sin(k z), axial)`` with
    ``k = 2 pi / wavelength``. Field lines are helices with axis along z,
    which gives transport modules a curved but never vanishing field.
    """

    def __init__(self, b0: float, wavelength: float, axial: float = 1.0):
        if wavelength <= 0:
            raise ValueError(f"HelicalMagneticField: wavelength must be > 0, got {wavelength}")
        self.b0 = b0
        self.wavelength = wavelength
        self.axial = axial

    def get_field(self, position: Vec3, z: float = 0.0) -> Vec3:
        phase = 2.0 * math.pi * position[2] / self.wavelength
        return vec3(
            self.b0 * math.cos(phase),
            self.b0 * math.sin(phase),
            self.b0 * self.axial,
        )


class MagneticFieldList(MagneticField):
    """Superposition of several fields."""

    def __init__(self, fields: Iterable[MagneticField] = ()):
        self.fields: List[MagneticField] = list(fields)

    def add_field(self, field: MagneticField) -> None:
        self.fields.append(field)

    def get_field(self, position: Vec3, z: float = 0.0) -> Vec3:
        b = np.zeros(3)
        for field in self.fields:
            b += field.get_field(position, z)
        return b
