# src/dynlyap/systems/discrete.py
"""
Discrete-time (map) system representations.

Three representations with different update semantics:

- ``DiscreteDS``: small/fixed-size state, value semantics.
      eom(u) -> u_next,  jacob(u) -> J
- ``BigDiscreteDS``: large state, in-place semantics.
      eom(out, u) writes u_next into out,  jacob(J, u) writes J in place
- ``DiscreteDS1D``: scalar state.
      eom(x) -> x_next,  deriv(x) -> f'(x)
"""
from __future__ import annotations

from typing import Callable, Optional
import numpy as np

from dynlyap.errors import ConfigError
from .base import DynamicalSystem

__all__ = ["DiscreteDS", "BigDiscreteDS", "DiscreteDS1D"]


class DiscreteDS(DynamicalSystem):
    """Map with value semantics: every evaluation returns a new array."""

    kind = "discrete"

    def __init__(
        self,
        state,
        eom: Callable[[np.ndarray], np.ndarray],
        jacob: Optional[Callable[[np.ndarray], np.ndarray]] = None,
    ) -> None:
        super().__init__(state)
        if not callable(eom):
            raise ConfigError("DiscreteDS eom must be callable")
        self.eom = eom
        self.jacob = jacob


class BigDiscreteDS(DynamicalSystem):
    """
    Map with in-place semantics for large state dimensions.

    ``jit=True`` compiles the in-place QR kernel used by the spectrum method
    with numba. The user callables are called as given.
    """

    kind = "big_discrete"

    def __init__(
        self,
        state,
        eom: Callable[[np.ndarray, np.ndarray], None],
        jacob: Optional[Callable[[np.ndarray, np.ndarray], None]] = None,
        *,
        jit: bool = False,
    ) -> None:
        super().__init__(state)
        if not callable(eom):
            raise ConfigError("BigDiscreteDS eom must be callable")
        self.eom = eom
        self.jacob = jacob
        self.jit = bool(jit)


class DiscreteDS1D(DynamicalSystem):
    """Scalar map ``x -> eom(x)`` with derivative ``deriv(x)``."""

    kind = "discrete_1d"

    def __init__(
        self,
        state,
        eom: Callable[[float], float],
        deriv: Callable[[float], float],
    ) -> None:
        super().__init__(state)
        if self.dimension != 1:
            raise ConfigError(
                f"DiscreteDS1D state must be a scalar; got {self.dimension} components"
            )
        self.eom = eom
        self.deriv = deriv

    @property
    def state(self) -> float:
        return float(self._state[0])
