"""Core engine components: candidates, units, configuration and pipeline."""

from .candidate import Candidate, ParticleState
from .config import SimulationConfig
from .module import Module, ModuleList

__all__ = [
    "Candidate",
    "ParticleState",
    "SimulationConfig",
    "Module",
    "ModuleList",
]
