"""Magnetic field evaluators."""

from .magnetic import (
    HelicalMagneticField,
    MagneticField,
    MagneticFieldList,
    UniformMagneticField,
)

__all__ = [
    "MagneticField",
    "UniformMagneticField",
    "HelicalMagneticField",
    "MagneticFieldList",
]
