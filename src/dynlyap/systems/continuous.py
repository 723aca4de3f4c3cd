# src/dynlyap/systems/continuous.py
from __future__ import annotations

from typing import Callable, Optional
import numpy as np

from dynlyap.errors import ConfigError
from dynlyap.steppers.registry import get_stepper
from .base import DynamicalSystem

__all__ = ["ContinuousDS"]


class ContinuousDS(DynamicalSystem):
    """
    Flow ``dy/dt = rhs(t, y)`` with optional Jacobian.

    Callables write their output in place:
        rhs(t, y, dy_out) -> None
        jacob(t, y, J_out) -> None

    ``stepper`` names the registered kernel used by the integrator and
    ``jit=True`` compiles the kernel, ``rhs`` and ``jacob`` with numba (the
    callables must then be numba-compatible).
    """

    kind = "continuous"

    def __init__(
        self,
        state,
        rhs: Callable[[float, np.ndarray, np.ndarray], None],
        jacob: Optional[Callable[[float, np.ndarray, np.ndarray], None]] = None,
        *,
        t0: float = 0.0,
        stepper: str = "rk45",
        jit: bool = False,
    ) -> None:
        super().__init__(state)
        if not callable(rhs):
            raise ConfigError("ContinuousDS rhs must be callable")
        try:
            get_stepper(stepper)
        except KeyError:
            raise ConfigError(f"Unknown stepper '{stepper}'") from None
        self.rhs = rhs
        self.jacob = jacob
        self.t0 = float(t0)
        self.stepper = stepper
        self.jit = bool(jit)
