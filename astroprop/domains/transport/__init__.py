"""Transport modules that move candidates through space."""

from .diffusion_sde import DiffusionSDE
from .propagation import SimplePropagation

__all__ = ["DiffusionSDE", "SimplePropagation"]
