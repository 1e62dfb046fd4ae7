"""Flow control modules: particle filters and break conditions."""

from .break_conditions import (
    AbstractCondition,
    MaximumSteps,
    MaximumTrajectoryLength,
    MinimumEnergy,
    SphericalBoundary,
)
from .filters import ParticleFilter

__all__ = [
    "AbstractCondition",
    "MaximumSteps",
    "MaximumTrajectoryLength",
    "MinimumEnergy",
    "SphericalBoundary",
    "ParticleFilter",
]
