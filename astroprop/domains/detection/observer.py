"""
Observers and observer features.

An ``Observer`` is a module that decides whether a candidate has
reached a measurement condition. The decision is delegated to an
ordered list of ``ObserverFeature`` instances, each returning a
``DetectionState``. Features are evaluated in insertion order:

* the first ``VETO`` stops the evaluation and the overall result is
  ``VETO``; later features are not called,
* ``DETECTED`` does not stop the evaluation; the overall result is
  ``DETECTED`` when any evaluated feature detected the candidate.

Each evaluated feature is therefore called exactly once per
``Observer.process`` call, which keeps stateful features (counters,
collectors) consistent.

Candidates that are no longer alive (deactivated, or with zero energy)
are skipped without calling any feature. Processing one candidate
repeatedly therefore counts it only until it is detected and
deactivated; a zero energy candidate is never counted. Counting
features are expected to see fresh, alive candidates.

On detection the observer notifies its features, runs an optional
detection action (on a clone of the candidate when ``clone`` is set),
writes an optional flag into the candidate's properties and applies its
``OnDetection`` policy.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum, IntEnum
from typing import Any, Iterable, List, Optional

from ...core import particle_id
from ...core.candidate import Candidate
from ...core.module import Module
from ...core.types import as_vec3, norm

logger = logging.getLogger(__name__)


class DetectionState(IntEnum):
    NOTHING = 0
    DETECTED = 1
    VETO = 2


class OnDetection(Enum):
    """What happens to a candidate once it is detected."""
    DEACTIVATE = "deactivate"
    FLAG_ONLY = "flag_only"
    REMOVE = "remove"


class ObserverFeature(ABC):
    """Detection condition evaluated by an ``Observer``.

    Implementations must not raise for ordinary candidate states;
    invalid arguments are rejected in the constructor.
    """

    @abstractmethod
    def check_detection(self, candidate: Candidate) -> DetectionState:
        """Return the detection state of ``candidate``."""

    def on_detection(self, candidate: Candidate) -> None:
        """Called for every feature once the observer detected ``candidate``."""

    @property
    def description(self) -> str:
        return type(self).__name__


class Observer(Module):
    """Container evaluating a list of features.

    Args:
        features: Initial features; they are shared, not copied.
        on_detection: Policy applied to detected candidates.
    """

    def __init__(
        self,
        features: Iterable[ObserverFeature] = (),
        on_detection: OnDetection = OnDetection.DEACTIVATE,
    ):
        super().__init__()
        self.features: List[ObserverFeature] = []
        for feature in features:
            self.add(feature)
        self.policy = OnDetection(on_detection)
        self.detection_action: Optional[Module] = None
        self.clone = False
        self.flag_key = ""
        self.flag_value: Any = ""

    def add(self, feature: ObserverFeature) -> None:
        if not callable(getattr(feature, "check_detection", None)):
            raise TypeError(f"Observer: {feature!r} has no check_detection() method")
        self.features.append(feature)

    def on_detection(self, action: Module, clone: bool = False) -> None:
        self.detection_action = action
        self.clone = clone

    def set_flag(self, key: str, value: Any) -> None:
        self.flag_key = key
        self.flag_value = value

    def deactivate_on_detection(self, deactivate: bool) -> None:
        self.policy = OnDetection.DEACTIVATE if deactivate else OnDetection.FLAG_ONLY

    @property
    def description(self) -> str:
        names = ", ".join(f.description for f in self.features)
        return f"Observer [{names}] on detection: {self.policy.value}"

    def evaluate(self, candidate: Candidate) -> DetectionState:
        """Return the aggregate decision of the features."""
        state = DetectionState.NOTHING
        for feature in self.features:
            s = feature.check_detection(candidate)
            if s == DetectionState.VETO:
                return DetectionState.VETO
            if s == DetectionState.DETECTED:
                state = DetectionState.DETECTED
        return state

    def process(self, candidate: Candidate) -> DetectionState:
        if not candidate.is_alive():
            return DetectionState.NOTHING
        state = self.evaluate(candidate)
        if state != DetectionState.DETECTED:
            return state
        logger.debug(f"Detected {candidate!r}")

        for feature in self.features:
            feature.on_detection(candidate)

        if self.detection_action is not None:
            if self.clone:
                self.detection_action.process(candidate.clone())
            else:
                self.detection_action.process(candidate)

        if self.flag_key:
            candidate.properties[self.flag_key] = self.flag_value

        if self.policy == OnDetection.DEACTIVATE:
            candidate.active = False
        elif self.policy == OnDetection.REMOVE:
            candidate.active = False
            candidate.removed = True
        return state


# ----------------------------------------------------------------------
# Built-in features


class ObserverDetectAll(ObserverFeature):
    """Detects every candidate."""

    def check_detection(self, candidate: Candidate) -> DetectionState:
        return DetectionState.DETECTED


class ObserverPoint(ObserverFeature):
    """Detects candidates at or behind the plane x = 0 (one-dimensional setups)."""

    def check_detection(self, candidate: Candidate) -> DetectionState:
        x = candidate.current.position[0]
        if x > 0:
            candidate.limit_next_step(x)
            return DetectionState.NOTHING
        return DetectionState.DETECTED


class ObserverSmallSphere(ObserverFeature):
    """Detects candidates entering a sphere.

    A candidate that was already inside at the previous step is not
    detected again.
    """

    def __init__(self, center: Iterable[float], radius: float):
        if radius <= 0:
            raise ValueError(f"ObserverSmallSphere: radius must be > 0, got {radius}")
        self.center = as_vec3(center)
        self.radius = radius

    def check_detection(self, candidate: Candidate) -> DetectionState:
        d = norm(candidate.current.position - self.center)
        # limit the next step so the surface is not overshot
        candidate.limit_next_step(abs(d - self.radius))
        if d > self.radius:
            return DetectionState.NOTHING
        d_prev = norm(candidate.previous.position - self.center)
        if d_prev <= self.radius:
            return DetectionState.NOTHING
        return DetectionState.DETECTED


class ObserverLargeSphere(ObserverFeature):
    """Detects candidates leaving a sphere."""

    def __init__(self, center: Iterable[float], radius: float):
        if radius <= 0:
            raise ValueError(f"ObserverLargeSphere: radius must be > 0, got {radius}")
        self.center = as_vec3(center)
        self.radius = radius

    def check_detection(self, candidate: Candidate) -> DetectionState:
        d = norm(candidate.current.position - self.center)
        candidate.limit_next_step(abs(self.radius - d))
        if d < self.radius:
            return DetectionState.NOTHING
        d_prev = norm(candidate.previous.position - self.center)
        if d_prev >= self.radius:
            return DetectionState.NOTHING
        return DetectionState.DETECTED


class ObserverRedshiftWindow(ObserverFeature):
    """Vetoes candidates outside ``[zmin, zmax]``."""

    def __init__(self, zmin: float = 0.0, zmax: float = 0.1):
        if zmin > zmax:
            raise ValueError(f"ObserverRedshiftWindow: zmin ({zmin}) must not exceed zmax ({zmax})")
        self.zmin = zmin
        self.zmax = zmax

    def check_detection(self, candidate: Candidate) -> DetectionState:
        z = candidate.redshift
        if z < self.zmin or z > self.zmax:
            return DetectionState.VETO
        return DetectionState.NOTHING


class ObserverNucleusVeto(ObserverFeature):
    def check_detection(self, candidate: Candidate) -> DetectionState:
        if candidate.current.is_nucleus:
            return DetectionState.VETO
        return DetectionState.NOTHING


class ObserverNeutrinoVeto(ObserverFeature):
    def check_detection(self, candidate: Candidate) -> DetectionState:
        if abs(candidate.current.id) in particle_id.NEUTRINOS:
            return DetectionState.VETO
        return DetectionState.NOTHING


class ObserverPhotonVeto(ObserverFeature):
    def check_detection(self, candidate: Candidate) -> DetectionState:
        if candidate.current.id == particle_id.PHOTON:
            return DetectionState.VETO
        return DetectionState.NOTHING


class ObserverElectronVeto(ObserverFeature):
    def check_detection(self, candidate: Candidate) -> DetectionState:
        if abs(candidate.current.id) == particle_id.ELECTRON:
            return DetectionState.VETO
        return DetectionState.NOTHING


class ObserverParticleIdVeto(ObserverFeature):
    """Vetoes one exact particle id."""

    def __init__(self, pid: int):
        self.pid = int(pid)

    def check_detection(self, candidate: Candidate) -> DetectionState:
        if candidate.current.id == self.pid:
            return DetectionState.VETO
        return DetectionState.NOTHING


class ObserverInactiveVeto(ObserverFeature):
    """Vetoes candidates that another module has deactivated.

    ``Observer.process`` already skips such candidates; the feature
    matters when features are evaluated directly.
    """

    def check_detection(self, candidate: Candidate) -> DetectionState:
        if not candidate.active:
            return DetectionState.VETO
        return DetectionState.NOTHING
