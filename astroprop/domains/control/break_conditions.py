"""
Break conditions.

Break conditions end the propagation of a candidate when it leaves the
region or the parameter range of interest. A rejected candidate is
deactivated; optionally a flag is written into its properties and a
``reject_action`` module (for example an output writer) is run on it
first. Conditions also lower the candidate's next step so that the
propagation modules do not overshoot the boundary.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from ...core import units
from ...core.candidate import Candidate
from ...core.module import Module
from ...core.types import as_vec3, norm


class AbstractCondition(Module):
    """Common handling of rejected candidates.

    Attributes:
        reject_action: Module run on rejected candidates.
        reject_flag_key: Property key written on rejection, if any.
        reject_flag_value: Value stored under ``reject_flag_key``.
        make_rejected_inactive: Deactivate rejected candidates.
    """

    def __init__(self, description: str = ""):
        super().__init__(description)
        self.reject_action: Optional[Module] = None
        self.reject_flag_key: str = ""
        self.reject_flag_value: Any = ""
        self.make_rejected_inactive = True

    def on_reject(self, action: Module) -> None:
        self.reject_action = action

    def set_reject_flag(self, key: str, value: Any) -> None:
        self.reject_flag_key = key
        self.reject_flag_value = value

    def reject(self, candidate: Candidate) -> None:
        if self.reject_flag_key:
            candidate.properties[self.reject_flag_key] = self.reject_flag_value
        if self.reject_action is not None:
            self.reject_action.process(candidate)
        if self.make_rejected_inactive:
            candidate.active = False


class MaximumTrajectoryLength(AbstractCondition):
    """Reject candidates once their trajectory reaches ``max_length``."""

    def __init__(self, max_length: float = 100 * units.Mpc):
        if max_length <= 0:
            raise ValueError(f"MaximumTrajectoryLength: max_length must be > 0, got {max_length}")
        super().__init__(f"Maximum trajectory length: {max_length / units.Mpc:g} Mpc")
        self.max_length = max_length

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        length = candidate.trajectory_length
        if length >= self.max_length:
            self.reject(candidate)
        else:
            candidate.limit_next_step(self.max_length - length)


class MaximumSteps(AbstractCondition):
    """Reject candidates after ``max_steps`` completed pipeline passes."""

    def __init__(self, max_steps: int = 1000):
        if max_steps < 1:
            raise ValueError(f"MaximumSteps: max_steps must be >= 1, got {max_steps}")
        super().__init__(f"Maximum steps: {max_steps}")
        self.max_steps = max_steps

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        # the current pass counts as a step
        if candidate.step_count + 1 >= self.max_steps:
            self.reject(candidate)


class MinimumEnergy(AbstractCondition):
    """Reject candidates whose energy fell to or below ``min_energy``."""

    def __init__(self, min_energy: float = 0.0):
        if min_energy < 0:
            raise ValueError(f"MinimumEnergy: min_energy must be >= 0, got {min_energy}")
        super().__init__(f"Minimum energy: {min_energy / units.EeV:g} EeV")
        self.min_energy = min_energy

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        if candidate.current.energy > self.min_energy:
            return
        self.reject(candidate)


class SphericalBoundary(AbstractCondition):
    """Reject candidates leaving a sphere.

    The next step is limited to the distance to the surface plus
    ``margin`` so that a candidate crosses the surface by at most
    ``margin``.
    """

    def __init__(self, center: Iterable[float], radius: float, margin: float = 0.1 * units.kpc):
        if radius <= 0:
            raise ValueError(f"SphericalBoundary: radius must be > 0, got {radius}")
        super().__init__(f"Spherical boundary: radius {radius / units.Mpc:g} Mpc")
        self.center = as_vec3(center)
        self.radius = radius
        self.margin = margin

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        r = norm(candidate.current.position - self.center)
        if r >= self.radius:
            self.reject(candidate)
        else:
            candidate.limit_next_step(self.radius - r + self.margin)
