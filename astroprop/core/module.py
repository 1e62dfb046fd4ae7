"""
Module pipeline engine.

A ``Module`` is one stage of the propagation pipeline: its ``process``
method is applied once per candidate per step and may mutate the
candidate, deactivate it or hand it on to child modules. ``ModuleList``
is itself a module holding an ordered sequence of modules; it runs that
sequence against a candidate repeatedly until the candidate is
deactivated or one of the configured guards fires.

Modules carry configuration only. Field evaluators and tables are held
as shared references and are never modified by a module, so one module
instance may be applied to any number of candidates in any order. The
pipeline dispatches purely through ``process`` and never inspects the
concrete type of a module, which makes user-defined subclasses
indistinguishable from the built-in ones.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, List, Optional

from .candidate import Candidate
from .config import SimulationConfig

logger = logging.getLogger(__name__)


class Module(ABC):
    """Abstract pipeline stage.

    Subclasses implement ``process``. Configuration problems are raised
    from the constructor or setters; per-candidate edge cases are
    handled by returning early from ``process`` without touching the
    candidate.
    """

    def __init__(self, description: str = ""):
        self._description = description

    @property
    def description(self) -> str:
        return self._description or type(self).__name__

    @description.setter
    def description(self, value: str) -> None:
        self._description = value

    @abstractmethod
    def process(self, candidate: Candidate) -> None:
        """Apply this module to ``candidate`` once."""

    def seed_from(self, seed: int) -> None:
        """Seed the module's random generator from a run configuration.

        Called by ``ModuleList.add``. Modules that draw no random numbers,
        or that were given their own generator or seed, ignore it.
        """

    def __call__(self, candidate: Candidate) -> None:
        self.process(candidate)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.description}>"


class ModuleList(Module):
    """Ordered sequence of modules driving candidates to a terminal state.

    ``process`` performs one step: each module is applied in insertion
    order and the step ends early once the candidate is no longer
    alive, so that module ``n`` always sees the mutations of module
    ``n - 1``. ``run`` repeats steps until the candidate is inactive or
    a guard from ``SimulationConfig`` fires.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, modules: Iterable[Module] = ()):
        super().__init__("ModuleList")
        self.cfg = config if config is not None else SimulationConfig()
        self.modules: List[Module] = []
        for module in modules:
            self.add(module)

    # ------------------------------------------------------------------
    # Container interface

    def add(self, module: Module) -> None:
        if not callable(getattr(module, "process", None)):
            raise TypeError(f"ModuleList: {module!r} has no process() method")
        seed_from = getattr(module, "seed_from", None)
        if callable(seed_from):
            seed_from(self.cfg.seed)
        self.modules.append(module)

    def remove(self, index: int) -> Module:
        return self.modules.pop(index)

    def clear(self) -> None:
        self.modules.clear()

    def __len__(self) -> int:
        return len(self.modules)

    def __iter__(self) -> Iterator[Module]:
        return iter(self.modules)

    def __getitem__(self, index: int) -> Module:
        return self.modules[index]

    # ------------------------------------------------------------------
    # Execution

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        for module in self.modules:
            module.process(candidate)
            if not candidate.is_alive():
                break
        candidate.step_count += 1

    def guard_reached(self, candidate: Candidate) -> bool:
        """Return True when a step or length guard ends the candidate."""
        if candidate.step_count >= self.cfg.max_steps:
            logger.debug(f"Step guard reached after {candidate.step_count} steps: {candidate!r}")
            return True
        if candidate.trajectory_length >= self.cfg.max_trajectory_length:
            logger.debug(f"Length guard reached at {candidate.trajectory_length:g} m: {candidate!r}")
            return True
        return False

    def run(self, candidate: Candidate) -> Candidate:
        """Propagate ``candidate`` until it reaches a terminal state.

        On return the candidate is always inactive, including when its
        energy was used up.
        """
        while candidate.is_alive():
            if self.guard_reached(candidate):
                candidate.active = False
                break
            self.process(candidate)
        candidate.active = False
        return candidate

    def run_all(self, candidates: Iterable[Candidate]) -> List[Candidate]:
        """Propagate each candidate independently.

        Returns the candidates in input order, leaving out those that an
        observer removed from the run.
        """
        finished = []
        n = 0
        for candidate in candidates:
            self.run(candidate)
            n += 1
            if not candidate.removed:
                finished.append(candidate)
        logger.info(f"Propagated {n} candidates, {n - len(finished)} removed.")
        return finished

    def __repr__(self) -> str:
        lines = [f"ModuleList ({len(self.modules)} modules):"]
        lines.extend(f"  {module!r}" for module in self.modules)
        return "\n".join(lines)
