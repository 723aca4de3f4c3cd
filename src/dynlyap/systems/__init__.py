"""Dynamical-system representations consumed by the exponent algorithms."""

from .base import DynamicalSystem, SystemKind
from .discrete import BigDiscreteDS, DiscreteDS, DiscreteDS1D
from .continuous import ContinuousDS

__all__ = [
    "DynamicalSystem",
    "SystemKind",
    "DiscreteDS",
    "BigDiscreteDS",
    "DiscreteDS1D",
    "ContinuousDS",
]
