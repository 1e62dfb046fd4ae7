"""
Simulation configuration definitions.

This module defines the configuration dataclass used to parameterise a
propagation run. Fields carry explicit defaults so that test runs can be
created without supplying every value. ``SimulationConfig`` is consumed
by ``ModuleList``; modules take their own options as constructor
arguments.

Tabulated interaction data is looked up relative to ``data_path``. The
default is the ``ASTROPROP_DATA_PATH`` environment variable when set and
the ``data`` directory beside the package otherwise.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def default_data_path() -> str:
    """Return the directory searched for interaction tables."""
    env = os.environ.get("ASTROPROP_DATA_PATH")
    if env:
        return env
    # config.py is in astroprop/core/
    return str(Path(__file__).resolve().parent.parent / "data")


def get_data_path(filename: str, data_path: str | None = None) -> str:
    return os.path.join(data_path or default_data_path(), filename)


@dataclass
class SimulationConfig:
    """Top level configuration for propagation runs.

    The two guards end a candidate's propagation as a normal terminal
    state: once it has completed ``max_steps`` pipeline passes or
    travelled ``max_trajectory_length`` metres it is deactivated.

    ``seed`` is handed by ``ModuleList`` to every random module added
    without its own generator or seed. ``log_level`` and ``log_file``
    are applied by ``astroprop.core.logging_config.configure_logging``
    and ``data_path`` is where interaction modules built with this
    configuration look for their tables.
    """

    # Propagation guards
    max_steps: int = 1_000_000
    max_trajectory_length: float = float("inf")

    # Seed for modules that draw random numbers and take no generator
    seed: int = 42

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Interaction tables
    data_path: str = field(default_factory=default_data_path)

    def __post_init__(self) -> None:
        if self.max_steps < 1:
            raise ValueError(f"SimulationConfig: max_steps must be >= 1, got {self.max_steps}")
        if self.max_trajectory_length <= 0:
            raise ValueError(
                f"SimulationConfig: max_trajectory_length must be > 0, got {self.max_trajectory_length}"
            )

    def to_dict(self) -> dict:
        """Return a dict representation of the configuration."""
        return self.__dict__.copy()
