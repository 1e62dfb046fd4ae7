"""
Candidate data model.

A ``Candidate`` is the unit of simulation state: one particle
trajectory in flight. Its kinematics live in ``ParticleState``
snapshots. ``current`` is mutated in place by the modules of the
pipeline; ``previous`` is an explicit copy of ``current`` taken by the
propagation modules before they move the candidate, so that step
rollback and crossing checks never alias live state; ``source`` keeps
the initial state for reference.

Bookkeeping fields (redshift, trajectory length, step sizes, step count
and the ``active`` flag) live directly on the candidate. ``properties``
is a free-form dictionary used by observers and break conditions to
leave flags on a candidate.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, Optional

import numpy as np

from . import particle_id
from . import units
from .types import Vec3, as_vec3, norm


class ParticleState:
    """Kinematic snapshot of a particle.

    Attributes:
        id: Signed particle id (see ``astroprop.core.particle_id``).
        energy: Total energy in joules, never negative.
        position: Position in metres.
        direction: Unit direction of motion.
    """

    def __init__(
        self,
        id: int = particle_id.nucleus_id(1, 1),
        energy: float = 0.0,
        position: Iterable[float] = (0.0, 0.0, 0.0),
        direction: Iterable[float] = (-1.0, 0.0, 0.0),
    ):
        self.id = int(id)
        self.energy = energy
        self.position = position
        self.direction = direction

    @property
    def energy(self) -> float:
        return self._energy

    @energy.setter
    def energy(self, value: float) -> None:
        self._energy = max(0.0, float(value))

    @property
    def position(self) -> Vec3:
        return self._position

    @position.setter
    def position(self, value: Iterable[float]) -> None:
        self._position = as_vec3(value)

    @property
    def direction(self) -> Vec3:
        return self._direction

    @direction.setter
    def direction(self, value: Iterable[float]) -> None:
        # callers need not normalise; a zero vector is kept as given
        d = as_vec3(value)
        r = norm(d)
        self._direction = d / r if r > 0.0 else d

    # ------------------------------------------------------------------
    # Derived quantities

    @property
    def charge_number(self) -> int:
        return particle_id.charge_number(self.id)

    @property
    def mass_number(self) -> int:
        return particle_id.mass_number(self.id)

    @property
    def is_nucleus(self) -> bool:
        return particle_id.is_nucleus(self.id)

    @property
    def charge(self) -> float:
        return self.charge_number * units.eplus

    @property
    def mass(self) -> float:
        apid = abs(self.id)
        if apid == particle_id.ELECTRON:
            return units.mass_electron
        if apid == particle_id.NEUTRON:
            return units.mass_neutron
        if apid == particle_id.PROTON or (self.mass_number == 1 and self.charge_number != 0):
            return units.mass_proton
        return self.mass_number * units.amu

    @property
    def rigidity(self) -> float:
        """Energy per charge in volts; infinite for neutral particles."""
        q = self.charge
        if q == 0.0:
            return float("inf")
        return self.energy / q

    @property
    def momentum(self) -> Vec3:
        return self.direction * (self.energy / units.c_light)

    def copy(self) -> "ParticleState":
        state = ParticleState.__new__(ParticleState)
        state.id = self.id
        state._energy = self._energy
        state._position = self._position.copy()
        state._direction = self._direction.copy()
        return state

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParticleState):
            return NotImplemented
        return (
            self.id == other.id
            and self.energy == other.energy
            and np.array_equal(self._position, other._position)
            and np.array_equal(self._direction, other._direction)
        )

    def __repr__(self) -> str:
        return (
            f"ParticleState(id={self.id}, energy={self.energy / units.EeV:g} EeV, "
            f"position={self._position.tolist()}, direction={self._direction.tolist()})"
        )


class Candidate:
    """A particle in flight together with its propagation bookkeeping.

    Attributes:
        current: State mutated by the pipeline.
        previous: Copy of ``current`` before the last propagation step.
        source: Copy of the initial state.
        redshift: Cosmological redshift at the current position.
        trajectory_length: Comoving path length travelled so far.
        current_step: Length of the last propagation step.
        next_step: Step length requested for the next propagation step.
        active: False once any module has terminated the candidate.
        step_count: Number of completed pipeline passes.
        properties: Flags written by observers and break conditions.
    """

    def __init__(
        self,
        state: Optional[ParticleState] = None,
        redshift: float = 0.0,
        trajectory_length: float = 0.0,
    ):
        self.current = state.copy() if state is not None else ParticleState()
        self.previous = self.current.copy()
        self.source = self.current.copy()
        self.redshift = redshift
        self.trajectory_length = trajectory_length
        self.current_step = 0.0
        self.next_step = 0.0
        self.active = True
        self.removed = False
        self.step_count = 0
        self.properties: Dict[str, Any] = {}

    @classmethod
    def from_values(
        cls,
        id: int,
        energy: float,
        position: Iterable[float] = (0.0, 0.0, 0.0),
        direction: Iterable[float] = (-1.0, 0.0, 0.0),
        redshift: float = 0.0,
    ) -> "Candidate":
        return cls(ParticleState(id, energy, position, direction), redshift=redshift)

    def is_alive(self) -> bool:
        """Return True while the candidate may still be processed."""
        return self.active and self.current.energy > 0.0

    def set_current_step(self, step: float) -> None:
        """Record the length of the step just taken and accumulate it."""
        self.current_step = step
        self.trajectory_length += step

    def limit_next_step(self, step: float) -> None:
        """Lower the next step to ``step``; a larger value is ignored."""
        if step < self.next_step:
            self.next_step = step

    def save_previous(self) -> None:
        self.previous = self.current.copy()

    def rollback(self) -> None:
        """Restore ``current`` from the saved ``previous`` snapshot."""
        self.current = self.previous.copy()

    def clone(self) -> "Candidate":
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return (
            f"Candidate({self.current!r}, redshift={self.redshift}, "
            f"trajectory_length={self.trajectory_length:g}, active={self.active})"
        )

