"""
Units and physical constants.

All quantities in astroprop are expressed in SI base units. The names
defined here are multiplicative conversion factors: ``5 * Mpc`` is a
length in metres and ``energy / EeV`` converts an energy in joules to
exa-electronvolts. Values follow CODATA 2006 and the IAU 2012/2015
resolutions.

The constants are fixed at import time. ``CONSTANTS`` exposes the same
values through a read-only mapping for lookup by name; there is no
setter and no code path that alters a constant at runtime.
"""

from __future__ import annotations

import math
from types import MappingProxyType

# SI units
meter = 1.0
second = 1.0
kilogram = 1.0
ampere = 1.0
mol = 1.0
kelvin = 1.0

# derived units
newton = 1.0 * kilogram * meter / second / second
pascal = 1.0 * newton / meter / meter
joule = 1.0 * newton * meter
tesla = 1.0 * newton / ampere / meter
volt = 1.0 * kilogram * meter * meter / ampere / second / second / second
coulomb = 1.0 * ampere * second

# physical constants
eplus = 1.602176487e-19 * ampere * second
c_light = 2.99792458e8 * meter / second
c_squared = c_light * c_light
amu = 1.660538921e-27 * kilogram
mass_proton = 1.67262158e-27 * kilogram
mass_neutron = 1.67492735e-27 * kilogram
mass_electron = 9.10938291e-31 * kilogram
h_planck = 6.62606957e-34 * joule * second
k_boltzmann = 1.3806488e-23 * joule / kelvin
mu0 = 4 * math.pi * 1e-7 * newton / ampere / ampere
epsilon0 = 1.0 / mu0 / c_squared * ampere * second / volt / meter

# gauss
gauss = 1e-4 * tesla
microgauss = 1e-6 * gauss
nanogauss = 1e-9 * gauss
muG = microgauss
nG = nanogauss

# electron volt
electronvolt = eplus * joule
kiloelectronvolt = 1e3 * electronvolt
megaelectronvolt = 1e6 * electronvolt
gigaelectronvolt = 1e9 * electronvolt
teraelectronvolt = 1e12 * electronvolt
petaelectronvolt = 1e15 * electronvolt
exaelectronvolt = 1e18 * electronvolt
eV = electronvolt
keV = kiloelectronvolt
MeV = megaelectronvolt
GeV = gigaelectronvolt
TeV = teraelectronvolt
PeV = petaelectronvolt
EeV = exaelectronvolt

# astronomical distances
au = 149597870700 * meter
ly = 365.25 * 24 * 3600 * second * c_light
parsec = 648000 / math.pi * au
kiloparsec = 1e3 * parsec
megaparsec = 1e6 * parsec
gigaparsec = 1e9 * parsec
pc = parsec
kpc = kiloparsec
Mpc = megaparsec
Gpc = gigaparsec

CONSTANTS = MappingProxyType({
    name: value
    for name, value in sorted(globals().items())
    if not name.startswith("_") and isinstance(value, float)
})
