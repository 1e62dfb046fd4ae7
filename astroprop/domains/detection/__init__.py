"""Observers deciding when a candidate is detected."""

from .observer import (
    DetectionState,
    Observer,
    ObserverDetectAll,
    ObserverElectronVeto,
    ObserverFeature,
    ObserverInactiveVeto,
    ObserverLargeSphere,
    ObserverNeutrinoVeto,
    ObserverNucleusVeto,
    ObserverParticleIdVeto,
    ObserverPhotonVeto,
    ObserverPoint,
    ObserverRedshiftWindow,
    ObserverSmallSphere,
    OnDetection,
)

__all__ = [
    "DetectionState",
    "OnDetection",
    "Observer",
    "ObserverFeature",
    "ObserverDetectAll",
    "ObserverPoint",
    "ObserverSmallSphere",
    "ObserverLargeSphere",
    "ObserverRedshiftWindow",
    "ObserverInactiveVeto",
    "ObserverNucleusVeto",
    "ObserverNeutrinoVeto",
    "ObserverPhotonVeto",
    "ObserverElectronVeto",
    "ObserverParticleIdVeto",
]
