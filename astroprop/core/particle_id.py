"""
Particle identity codes.

Particles are identified by signed integers following the PDG Monte
Carlo numbering scheme. The sign distinguishes matter from antimatter.
Nuclei use the ten digit form ``100ZZZAAAI``: ``ZZZ`` is the charge
number, ``AAA`` the mass number and ``I`` the isomer level (always zero
here). Protons (2212) and neutrons (2112) are treated as nuclei with
``A = 1``.
"""

from __future__ import annotations

PROTON = 2212
NEUTRON = 2112
ELECTRON = 11
MUON = 13
TAU = 15
PHOTON = 22
NEUTRINOS = (12, 14, 16)

#: Charge numbers of the charged leptons (particle, not antiparticle).
_LEPTON_CHARGE = {ELECTRON: -1, MUON: -1, TAU: -1}

_NUCLEUS_BASE = 1000000000


def nucleus_id(a: int, z: int) -> int:
    """Return the particle id of a nucleus with mass number ``a`` and
    charge number ``z``.

    Raises ``ValueError`` for combinations that do not describe a
    nucleus.
    """
    if a < 1:
        raise ValueError(f"nucleus_id: mass number must be >= 1, got {a}")
    if z < 0:
        raise ValueError(f"nucleus_id: charge number must be >= 0, got {z}")
    if z > a:
        raise ValueError(f"nucleus_id: charge number {z} exceeds mass number {a}")
    return _NUCLEUS_BASE + z * 10000 + a * 10


def is_nucleus(pid: int) -> bool:
    if pid == NEUTRON or abs(pid) == PROTON:
        return True
    return _NUCLEUS_BASE <= abs(pid) < 1100000000


def charge_number(pid: int) -> int:
    sign = 1 if pid >= 0 else -1
    apid = abs(pid)
    if apid == PROTON:
        return sign
    if apid == NEUTRON:
        return 0
    if is_nucleus(pid):
        return sign * ((apid // 10000) % 1000)
    return sign * _LEPTON_CHARGE.get(apid, 0)


def mass_number(pid: int) -> int:
    apid = abs(pid)
    if apid in (PROTON, NEUTRON):
        return 1
    if is_nucleus(pid):
        return (apid // 10) % 1000
    return 0
