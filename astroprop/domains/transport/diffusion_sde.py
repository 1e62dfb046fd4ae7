"""
Diffusive transport with stochastic differential equations.

``DiffusionSDE`` propagates charged candidates as pseudo-particles: the
transport equation is solved by integrating the equivalent stochastic
differential equation with an Euler-Maruyama scheme. The diffusion
tensor is anisotropic with respect to the local field line frame. Its
tangential component advances the candidate along the field line,
integrated with a Cash-Karp embedded Runge-Kutta step whose error
estimate drives step halving. The normal and binormal components are
random displacements perpendicular to the field line.

All lengths are metres and all times seconds. ``min_step`` and
``max_step`` are lengths; the integration time step is the step length
divided by the speed of light.

Numerical behaviour:

* The tangential step is halved until the embedded error estimate is
  within ``tolerance`` (relative to one kiloparsec) or until the halved
  step would fall below ``min_step``. At that floor the step is accepted
  as it is.
* A vanishing field has no tangent direction. The candidate then moves
  rectilinearly and the next step is enlarged.
* Neutral candidates always move rectilinearly.
* A zero step length (no step requested and ``min_step`` of zero) is
  replaced by ``max_step``, so every call moves the candidate.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Tuple

import numpy as np

from ...core import units
from ...core.candidate import Candidate
from ...core.module import Module
from ...core.types import Vec3, clamp, norm, random_unit_vector, unit_vector
from ..fields.magnetic import MagneticField

logger = logging.getLogger(__name__)

# Cash-Karp coefficients
_A = np.array([
    [0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [1.0 / 5.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [3.0 / 40.0, 9.0 / 40.0, 0.0, 0.0, 0.0, 0.0],
    [3.0 / 10.0, -9.0 / 10.0, 6.0 / 5.0, 0.0, 0.0, 0.0],
    [-11.0 / 54.0, 5.0 / 2.0, -70.0 / 27.0, 35.0 / 27.0, 0.0, 0.0],
    [1631.0 / 55296.0, 175.0 / 512.0, 575.0 / 13824.0, 44275.0 / 110592.0, 253.0 / 4096.0, 0.0],
])
#: Fifth order weights.
_B = np.array([37.0 / 378.0, 0.0, 250.0 / 621.0, 125.0 / 594.0, 0.0, 512.0 / 1771.0])
#: Embedded fourth order weights.
_BS = np.array([2825.0 / 27648.0, 0.0, 18575.0 / 48384.0, 13525.0 / 55296.0, 277.0 / 14336.0, 1.0 / 4.0])

#: Reference diffusion coefficient in m^2/s at a rigidity of 4 GV.
DIFFUSION_COEFFICIENT_REF = 6.1e24
#: Rigidity in volts at which ``DIFFUSION_COEFFICIENT_REF`` applies.
RIGIDITY_REF = 4.0e9
#: Upper bound on the number of step halvings (2**20 sub-steps).
MAX_HALVINGS = 20


class DiffusionSDE(Module):
    """Anisotropic diffusion along magnetic field lines.

    Args:
        field: Magnetic field evaluator, shared and never modified.
        tolerance: Relative error tolerance of the field line step.
        min_step: Minimum step length in metres.
        max_step: Maximum step length in metres.
        epsilon: Ratio of perpendicular to parallel diffusion.
        alpha: Power law index of the rigidity dependence, in [0, 1].
        scale: Overall scaling of the diffusion coefficient.
        rng: Random generator.
        seed: Seed used when ``rng`` is omitted. Without either, the
            generator takes ``SimulationConfig.seed`` when the module is
            added to a ``ModuleList``.
    """

    def __init__(
        self,
        field: MagneticField,
        tolerance: float = 1e-4,
        min_step: float = 10 * units.pc,
        max_step: float = 1 * units.kpc,
        epsilon: float = 0.1,
        alpha: float = 1.0 / 3.0,
        scale: float = 1.0,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        super().__init__()
        self.field = field
        self._min_step = 0.0
        self.max_step = max_step
        self.min_step = min_step
        self.tolerance = tolerance
        self.epsilon = epsilon
        self.alpha = alpha
        self.scale = scale
        self._seeded = rng is not None or seed is not None
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    # ------------------------------------------------------------------
    # Configuration

    @property
    def min_step(self) -> float:
        return self._min_step

    @min_step.setter
    def min_step(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"DiffusionSDE: min_step must be >= 0, got {value}")
        if value > self._max_step:
            raise ValueError(f"DiffusionSDE: min_step ({value}) must not exceed max_step ({self._max_step})")
        self._min_step = value

    @property
    def max_step(self) -> float:
        return self._max_step

    @max_step.setter
    def max_step(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"DiffusionSDE: max_step must be > 0, got {value}")
        if value < self._min_step:
            raise ValueError(f"DiffusionSDE: max_step ({value}) must not be below min_step ({self._min_step})")
        self._max_step = value

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @tolerance.setter
    def tolerance(self, value: float) -> None:
        if value < 0 or value > 1:
            raise ValueError(f"DiffusionSDE: tolerance must be in [0, 1], got {value}")
        self._tolerance = value

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @epsilon.setter
    def epsilon(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"DiffusionSDE: epsilon must be >= 0, got {value}")
        self._epsilon = value

    @property
    def alpha(self) -> float:
        return self._alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        if not 0 <= value <= 1:
            raise ValueError(f"DiffusionSDE: alpha must be in [0, 1], got {value}")
        self._alpha = value

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"DiffusionSDE: scale must be >= 0, got {value}")
        self._scale = value

    @property
    def description(self) -> str:
        return (
            f"DiffusionSDE: minStep {self._min_step / units.pc:g} pc, "
            f"maxStep {self._max_step / units.kpc:g} kpc, "
            f"tolerance {self._tolerance:g}, epsilon {self._epsilon:g}, "
            f"alpha {self._alpha:g}, scale {self._scale:g}"
        )

    # ------------------------------------------------------------------
    # Integration

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        current = candidate.current
        candidate.save_previous()

        step = clamp(candidate.next_step, self._min_step, self._max_step)
        if step <= 0.0:
            # no step requested and no lower bound: start from max_step
            step = self._max_step
        h = step / units.c_light
        pos_in = current.position.copy()
        dir_in = current.direction.copy()

        if current.charge == 0.0:
            self._move_rectilinear(candidate, h, next_step=self._max_step)
            return

        z = candidate.redshift
        rigidity = current.energy / current.charge
        b_tensor = self.calculate_b_tensor(rigidity, pos_in, dir_in, z)

        eta = self.rng.standard_normal(3)
        t_step = b_tensor[0] * eta[0]
        n_step = b_tensor[4] * eta[1]
        b_step = b_tensor[8] * eta[2]
        sqrt_h = math.sqrt(h)

        # halve the field line step until the error estimate is acceptable
        min_time = self._min_step / units.c_light
        prop_time = t_step * sqrt_h / units.c_light
        counter = 0
        while True:
            _, _, pos_err = self.try_step(pos_in, z, prop_time)
            r = norm(pos_err) / self._tolerance if self._tolerance > 0 else math.inf
            prop_time *= 0.5
            counter += 1
            if not (r > 1 and abs(prop_time) >= min_time and counter <= MAX_HALVINGS):
                break
        if r > 1:
            logger.debug(f"DiffusionSDE: accepting step at the minimum step size (error ratio {r:g})")

        step_number = 2 ** (counter - 1)
        allowed_time = t_step * sqrt_h / units.c_light / step_number
        pos_out = pos_in
        for _ in range(step_number):
            pos_out, _, _ = self.try_step(pos_out, z, allowed_time)

        t_vec = unit_vector(pos_out - pos_in)
        if not np.all(np.isfinite(t_vec)):
            # vanishing field: no field line to follow
            self._move_rectilinear(candidate, h, next_step=clamp(5 * h * units.c_light, self._min_step, self._max_step))
            return

        n_vec = np.zeros(3)
        while norm(n_vec) == 0.0:
            n_vec = np.cross(t_vec, random_unit_vector(self.rng))
        n_vec = unit_vector(n_vec)
        b_vec = unit_vector(np.cross(t_vec, n_vec))

        # Euler-Maruyama step perpendicular to the field line
        pos_final = pos_out + (n_vec * n_step + b_vec * b_step) * sqrt_h
        if not np.all(np.isfinite(pos_final)):
            candidate.active = False
            logger.warning(
                f"DiffusionSDE: candidate with non-finite position deactivated "
                f"(position {pos_final}, start {pos_in}, tangent {t_vec}, "
                f"steps T={abs(t_step):g} N={n_step:g} B={b_step:g})"
            )
            return

        dir_out = unit_vector(pos_final - pos_in)
        # random orientation along the tangent averages over pitch angles
        if self.rng.random() < 0.5:
            dir_out = -dir_out
        current.position = pos_final
        current.direction = dir_out
        candidate.set_current_step(h * units.c_light)

        if step_number > 1:
            candidate.next_step = h * units.c_light / step_number ** 2
        else:
            candidate.next_step = 4 * h * units.c_light

    def seed_from(self, seed: int) -> None:
        """Seed the generator from a run configuration.

        Ignored when a generator or seed was passed to the constructor or
        when the module was already seeded.
        """
        if self._seeded:
            return
        self.rng = np.random.default_rng(seed)
        self._seeded = True

    def _move_rectilinear(self, candidate: Candidate, h: float, next_step: float) -> None:
        current = candidate.current
        current.position = current.position + current.direction * (h * units.c_light)
        candidate.set_current_step(h * units.c_light)
        candidate.next_step = next_step

    def try_step(self, pos: Vec3, z: float, prop_step: float) -> Tuple[Vec3, Vec3, Vec3]:
        """Advance ``pos`` along the field line for a time ``prop_step``.

        Returns the fifth order position, the embedded fourth order
        position and their difference in kiloparsec, which serves as the
        error estimate. The candidate is not touched.
        """
        pos = np.asarray(pos, dtype=np.float64)
        k = np.zeros((6, 3))
        pos_out = pos.copy()
        pos_low = pos.copy()
        pos_err = np.zeros(3)
        for i in range(6):
            y_n = pos.copy()
            for j in range(i):
                y_n += k[j] * _A[i, j] * prop_step
            k[i] = self._field_direction(y_n, z) * units.c_light
            pos_out += k[i] * _B[i] * prop_step
            pos_low += k[i] * _BS[i] * prop_step
            pos_err += k[i] * (_B[i] - _BS[i]) * prop_step / units.kpc
        return pos_out, pos_low, pos_err

    def _field_direction(self, position: Vec3, z: float) -> Vec3:
        try:
            b = self.field.get_field(position, z)
        except Exception as e:
            logger.error(f"DiffusionSDE: exception in magnetic field evaluation: {e}")
            b = np.zeros(3)
        return unit_vector(np.asarray(b, dtype=np.float64))

    def calculate_b_tensor(self, rigidity: float, pos: Vec3, dir: Vec3, z: float) -> np.ndarray:
        """Return the square root of the diffusion tensor as a flat buffer.

        The tensor is diagonal in the field line frame (tangent, normal,
        binormal): entry 0 is the parallel component and entries 4 and 8
        the perpendicular ones. The coefficient scales as
        ``(|rigidity| / 4 GV) ** alpha``.
        """
        d = self._scale * DIFFUSION_COEFFICIENT_REF * (abs(rigidity) / RIGIDITY_REF) ** self._alpha
        b_tensor = np.zeros(9)
        b_tensor[0] = math.sqrt(2.0 * d)
        b_tensor[4] = math.sqrt(2.0 * self._epsilon * d)
        b_tensor[8] = math.sqrt(2.0 * self._epsilon * d)
        return b_tensor
