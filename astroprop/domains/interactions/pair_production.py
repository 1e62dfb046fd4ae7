"""
Electron-positron pair production on background photons.

Charged nuclei lose energy continuously by producing electron-positron
pairs on the cosmic microwave and infrared backgrounds. The loss rate
per nucleon is tabulated as a function of energy per nucleon; the loss
of a nucleus with charge ``Z`` scales with ``Z**2``. Above the
tabulated range the rate is extrapolated with a power law of index 0.4;
below it no loss is applied.

The tables are read once at construction time with
``astroprop.core.interpolation.load_table`` and are shared read-only by
every candidate.
"""

from __future__ import annotations

import logging
import math
import sys
from enum import Enum
from typing import Optional, Union

from ...core import units
from ...core.candidate import Candidate
from ...core.config import SimulationConfig, get_data_path
from ...core.interpolation import interpolate, load_table
from ...core.module import Module
from ...core import particle_id

logger = logging.getLogger(__name__)

#: Power law index used above the tabulated energy range.
EXTRAPOLATION_INDEX = 0.4


class PhotonField(Enum):
    CMB = "CMB"
    IRB = "IRB"
    CMB_IRB = "CMB_IRB"


_TABLE_FILES = {
    PhotonField.CMB: "epair_CMB.txt",
    PhotonField.IRB: "epair_IRB.txt",
    PhotonField.CMB_IRB: "epair_CMB_IRB.txt",
}


class ElectronPairProduction(Module):
    """Continuous energy loss of nuclei by pair production.

    Args:
        photon_field: Background to use; a ``PhotonField`` or its name.
        table_file: Explicit loss rate table overriding the default file
            of ``photon_field``. Columns are energy per nucleon in eV
            and loss rate in eV/Mpc.
        data_path: Directory holding the default tables.
        config: Run configuration whose ``data_path`` is used when
            ``data_path`` is not given.
    """

    def __init__(
        self,
        photon_field: Union[PhotonField, str] = PhotonField.CMB,
        table_file: Optional[str] = None,
        data_path: Optional[str] = None,
        config: Optional[SimulationConfig] = None,
    ):
        super().__init__()
        try:
            self.photon_field = PhotonField(photon_field)
        except ValueError:
            raise ValueError(
                f"ElectronPairProduction: unknown photon background '{photon_field}'"
            ) from None
        if data_path is None and config is not None:
            data_path = config.data_path
        if table_file is None:
            table_file = get_data_path(_TABLE_FILES[self.photon_field], data_path)
        try:
            self.energy, self.loss_rate = load_table(table_file, units.eV, units.eV / units.Mpc)
        except FileNotFoundError as e:
            raise FileNotFoundError(f"ElectronPairProduction: {e}") from e
        if self.energy.size == 0:
            raise ValueError(f"ElectronPairProduction: no data rows in {table_file}")
        self.table_file = table_file
        self.description = f"ElectronPairProduction: {self.photon_field.value}"
        logger.debug(f"{self.description} loaded {self.energy.size} rows from {table_file}")

    def _rate(self, energy_per_nucleon: float) -> float:
        if energy_per_nucleon < self.energy[-1]:
            return interpolate(energy_per_nucleon, self.energy, self.loss_rate)
        return float(self.loss_rate[-1]) * (energy_per_nucleon / self.energy[-1]) ** EXTRAPOLATION_INDEX

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        current = candidate.current
        if not current.is_nucleus:
            return
        Z = current.charge_number
        if Z < 1:
            return
        A = current.mass_number
        E = current.energy
        z = candidate.redshift
        EpA = E / A * (1 + z)
        if EpA < self.energy[0]:
            return

        rate = self._rate(EpA)
        # comoving step converted to the local frame
        step = candidate.current_step / (1 + z)
        dE = Z * Z * rate * (1 + z) ** 2 * step
        current.energy = E - min(E, dE)

    def energy_loss_length(self, pid: int, energy: float) -> float:
        """Return ``E / (dE/dx)`` for a particle at redshift zero."""
        Z = particle_id.charge_number(pid)
        A = particle_id.mass_number(pid)
        if not particle_id.is_nucleus(pid) or Z < 1 or A < 1:
            return sys.float_info.max
        EpA = energy / A
        if EpA < self.energy[0]:
            return sys.float_info.max
        loss = Z * Z * self._rate(EpA) / energy
        if loss <= 0.0 or math.isnan(loss):
            return sys.float_info.max
        return 1.0 / loss
