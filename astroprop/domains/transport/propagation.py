"""
Rectilinear propagation.

``SimplePropagation`` moves a candidate along its current direction
without deflection. It is the transport module for neutral particles
and for test setups that do not need a magnetic field.
"""

from __future__ import annotations

from ...core import units
from ...core.candidate import Candidate
from ...core.module import Module
from ...core.types import clamp


class SimplePropagation(Module):
    """Move candidates in a straight line.

    The step length is the candidate's ``next_step`` clipped to
    ``[min_step, max_step]``. After the step the next step is reset to
    ``max_step`` so that later modules in the same pass can lower it.
    """

    def __init__(self, min_step: float = 0.0, max_step: float = 10 * units.Mpc):
        super().__init__()
        if min_step < 0:
            raise ValueError(f"SimplePropagation: min_step must be >= 0, got {min_step}")
        if min_step > max_step:
            raise ValueError(
                f"SimplePropagation: min_step ({min_step}) must not exceed max_step ({max_step})"
            )
        self.min_step = min_step
        self.max_step = max_step
        self.description = (
            f"SimplePropagation: step between {min_step / units.kpc:g} kpc "
            f"and {max_step / units.kpc:g} kpc"
        )

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        candidate.save_previous()
        step = clamp(candidate.next_step, self.min_step, self.max_step)
        current = candidate.current
        current.position = current.position + current.direction * step
        candidate.set_current_step(step)
        candidate.next_step = self.max_step
