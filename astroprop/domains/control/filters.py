"""
Branching by particle identity.

``ParticleFilter`` routes a candidate into one of two child module
chains depending on whether its particle id is in a configured set.
Matching is exact on the signed id, so a particle and its antiparticle
are distinct entries.
"""

from __future__ import annotations

from typing import Iterable, List, Set

from ...core.candidate import Candidate
from ...core.module import Module


class ParticleFilter(Module):
    """Apply ``on_accept`` modules to listed ids and ``on_reject`` to the rest.

    The filter itself never changes the candidate. Either branch may be
    empty, in which case nothing happens for that branch.
    """

    def __init__(self, ids: Iterable[int] = ()):
        super().__init__()
        self.ids: Set[int] = set()
        for pid in ids:
            self.add_id(pid)
        self.on_accept: List[Module] = []
        self.on_reject: List[Module] = []

    @property
    def description(self) -> str:
        return f"ParticleFilter: accepting ids {sorted(self.ids)}"

    def add_id(self, pid: int) -> None:
        if isinstance(pid, bool) or int(pid) != pid:
            raise ValueError(f"ParticleFilter: particle id must be an integer, got {pid!r}")
        self.ids.add(int(pid))

    def remove_id(self, pid: int) -> None:
        self.ids.discard(pid)

    def on_accept_add(self, module: Module) -> None:
        self.on_accept.append(module)

    def on_reject_add(self, module: Module) -> None:
        self.on_reject.append(module)

    def seed_from(self, seed: int) -> None:
        # only branch modules already added at this point are seeded
        for module in self.on_accept + self.on_reject:
            seed_from = getattr(module, "seed_from", None)
            if callable(seed_from):
                seed_from(seed)

    def accepts(self, candidate: Candidate) -> bool:
        return candidate.current.id in self.ids

    def process(self, candidate: Candidate) -> None:
        if not candidate.is_alive():
            return
        branch = self.on_accept if self.accepts(candidate) else self.on_reject
        for module in branch:
            module.process(candidate)
