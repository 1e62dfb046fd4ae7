"""Interaction modules that change a candidate's energy."""

from .pair_production import ElectronPairProduction, PhotonField

__all__ = ["ElectronPairProduction", "PhotonField"]
