# src/dynlyap/steppers/rk4.py
"""Classic fixed-step Runge-Kutta of order 4."""
from __future__ import annotations

from typing import Callable, NamedTuple
import numpy as np

from .base import StepperMeta
from .registry import register
from dynlyap.runtime.status import OK

__all__ = ["RK4Spec"]

_STAGES = 4
_C = np.array([0.0, 0.5, 0.5, 1.0])
_A = np.array([
    [0.0, 0.0, 0.0, 0.0],
    [0.5, 0.0, 0.0, 0.0],
    [0.0, 0.5, 0.0, 0.0],
    [0.0, 0.0, 1.0, 0.0],
])
_B = np.array([1.0/6.0, 1.0/3.0, 1.0/3.0, 1.0/6.0])


class RK4Spec:
    """Fixed-step RK4; ``dt`` is the step and is returned unchanged as the hint."""

    class Workspace(NamedTuple):
        y_stage: np.ndarray
        k: np.ndarray  # (4, n)

    def __init__(self, meta: StepperMeta | None = None):
        self.meta = meta or StepperMeta(
            name="rk4",
            time_control="fixed",
            family="runge-kutta",
            order=4,
            aliases=("rk4_classic", "classical_rk4"),
        )

    def make_workspace(self, n_state: int, dtype: np.dtype = np.float64) -> "RK4Spec.Workspace":
        return RK4Spec.Workspace(
            y_stage=np.zeros((n_state,), dtype=dtype),
            k=np.zeros((_STAGES, n_state), dtype=dtype),
        )

    def default_config(self, atol: float | None = None, rtol: float | None = None) -> None:
        # tolerances do not apply to a fixed step
        return None

    def pack_config(self, config) -> np.ndarray:
        return np.zeros((0,), dtype=np.float64)

    def emit(self) -> Callable:
        def rk4_stepper(
            t, dt,
            y_curr, rhs,
            ws,
            stepper_config,
            y_prop, t_prop, dt_next, err_est
        ):
            n = y_curr.size
            k = ws.k
            y_stage = ws.y_stage

            for s in range(_STAGES):
                for i in range(n):
                    acc = 0.0
                    for j in range(s):
                        acc += _A[s, j] * k[j, i]
                    y_stage[i] = y_curr[i] + dt * acc
                rhs(t + _C[s] * dt, y_stage, k[s])

            for i in range(n):
                acc = 0.0
                for j in range(_STAGES):
                    acc += _B[j] * k[j, i]
                y_prop[i] = y_curr[i] + dt * acc

            t_prop[0] = t + dt
            dt_next[0] = dt
            err_est[0] = 0.0
            return OK

        return rk4_stepper


register(RK4Spec())
