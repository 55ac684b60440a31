"""Deterministic pseudo-random numbers from an additive tap generator."""

from .normal import Normal
from .rand import Rand
from .source import LockedSource, RngSource, Source
from .zipf import Zipf

__all__ = ["LockedSource", "Normal", "Rand", "RngSource", "Source", "Zipf"]
