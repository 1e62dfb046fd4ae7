"""
astroprop: propagation engine for high-energy particle candidates.

This package contains the candidate data model, the module pipeline
that drives each candidate through a sequence of physical processes,
and the domain modules (transport, interactions, detection and flow
control) that plug into that pipeline.

The major subpackages are:

``astroprop.core``                 Candidate state, units and constants,
                                   configuration, logging, interpolation
                                   tables and the module pipeline engine.
``astroprop.domains.fields``       Magnetic field evaluators consumed by
                                   transport modules.
``astroprop.domains.transport``    Rectilinear propagation and the
                                   stochastic diffusion integrator.
``astroprop.domains.interactions`` Table driven energy loss processes.
``astroprop.domains.control``      Particle filters and break conditions.
``astroprop.domains.detection``    Observers and observer features.

Please see the individual modules for further documentation.
"""

__all__ = [
    "core",
    "domains",
]
