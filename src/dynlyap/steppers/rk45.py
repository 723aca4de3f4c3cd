# src/dynlyap/steppers/rk45.py
"""
Dormand-Prince 5(4) stepper with adaptive step size.

The kernel walks the Butcher tableau below. The last stage is evaluated at the
5th-order solution, so its tableau row doubles as the 5th-order weights; the
local error is ``h * sum(E[j] * k[j])`` with ``E`` the difference between the
5th-order and the embedded 4th-order weights.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Callable, NamedTuple
import numpy as np

from .base import StepperMeta
from .registry import register
from dynlyap.runtime.status import OK, NAN_DETECTED, STEPFAIL

__all__ = ["RK45Spec", "RK45Config"]

_STAGES = 7

_C = np.array([0.0, 1.0/5.0, 3.0/10.0, 4.0/5.0, 8.0/9.0, 1.0, 1.0])

_A = np.array([
    [0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [1.0/5.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [3.0/40.0, 9.0/40.0, 0.0, 0.0, 0.0, 0.0, 0.0],
    [44.0/45.0, -56.0/15.0, 32.0/9.0, 0.0, 0.0, 0.0, 0.0],
    [19372.0/6561.0, -25360.0/2187.0, 64448.0/6561.0, -212.0/729.0, 0.0, 0.0, 0.0],
    [9017.0/3168.0, -355.0/33.0, 46732.0/5247.0, 49.0/176.0, -5103.0/18656.0, 0.0, 0.0],
    [35.0/384.0, 0.0, 500.0/1113.0, 125.0/192.0, -2187.0/6784.0, 11.0/84.0, 0.0],
])

_B_EMBEDDED = np.array([
    5179.0/57600.0, 0.0, 7571.0/16695.0, 393.0/640.0,
    -92097.0/339200.0, 187.0/2100.0, 1.0/40.0,
])

_E = _A[_STAGES - 1] - _B_EMBEDDED


@dataclass
class RK45Config:
    """Tolerances and step-size controller settings."""
    atol: float = 1e-8
    rtol: float = 1e-5
    safety: float = 0.9
    min_factor: float = 0.2
    max_factor: float = 10.0
    max_tries: int = 10
    min_step: float = 1e-12


class RK45Spec:
    """
    Adaptive Dormand-Prince pair: 5th-order solution, 4th-order error estimate.

    Rejected steps are retried inside the kernel with a smaller ``h`` until the
    error norm drops below 1, ``h`` falls under ``min_step`` or ``max_tries``
    attempts are used up.
    """

    class Workspace(NamedTuple):
        y_stage: np.ndarray   # (n,) input of the current stage
        k: np.ndarray         # (7, n) stage derivatives

    def __init__(self, meta: StepperMeta | None = None):
        self.meta = meta or StepperMeta(
            name="rk45",
            time_control="adaptive",
            family="runge-kutta",
            order=5,
            embedded_order=4,
            aliases=("dopri5", "dormand_prince"),
        )

    def make_workspace(self, n_state: int, dtype: np.dtype = np.float64) -> "RK45Spec.Workspace":
        return RK45Spec.Workspace(
            y_stage=np.zeros((n_state,), dtype=dtype),
            k=np.zeros((_STAGES, n_state), dtype=dtype),
        )

    def default_config(self, atol: float | None = None, rtol: float | None = None) -> RK45Config:
        overrides = {}
        if atol is not None:
            overrides["atol"] = float(atol)
        if rtol is not None:
            overrides["rtol"] = float(rtol)
        return dataclasses.replace(RK45Config(), **overrides)

    def pack_config(self, config: RK45Config | None) -> np.ndarray:
        """
        Flatten the config for the kernel:
        ``[atol, rtol, safety, min_factor, max_factor, max_tries, min_step]``.
        """
        cfg = config if config is not None else RK45Config()
        return np.array(
            [cfg.atol, cfg.rtol, cfg.safety, cfg.min_factor, cfg.max_factor,
             float(cfg.max_tries), cfg.min_step],
            dtype=np.float64,
        )

    def emit(self) -> Callable:
        """Return the kernel; ``stepper_config`` must come from ``pack_config``."""

        def rk45_stepper(
            t, dt,
            y_curr, rhs,
            ws,
            stepper_config,
            y_prop, t_prop, dt_next, err_est
        ):
            n = y_curr.size
            k = ws.k
            y_stage = ws.y_stage

            atol = stepper_config[0]
            rtol = stepper_config[1]
            safety = stepper_config[2]
            min_factor = stepper_config[3]
            max_factor = stepper_config[4]
            max_tries = int(stepper_config[5])
            min_step = stepper_config[6]

            h = dt
            for _ in range(max_tries):
                for s in range(_STAGES):
                    for i in range(n):
                        acc = 0.0
                        for j in range(s):
                            acc += _A[s, j] * k[j, i]
                        y_stage[i] = y_curr[i] + h * acc
                    rhs(t + _C[s] * h, y_stage, k[s])

                # y_stage holds the 5th-order solution after the last stage
                err = 0.0
                for i in range(n):
                    y_prop[i] = y_stage[i]
                    e_i = 0.0
                    for j in range(_STAGES):
                        e_i += _E[j] * k[j, i]
                    scale = atol + rtol * max(abs(y_curr[i]), abs(y_prop[i]))
                    err += (h * e_i / scale) ** 2
                err = (err / n) ** 0.5
                err_est[0] = err

                if err != err:
                    return NAN_DETECTED

                if err <= 1.0 or h <= min_step:
                    t_prop[0] = t + h
                    if err > 0.0:
                        grow = safety * err ** -0.2
                        dt_next[0] = h * max(min_factor, min(grow, max_factor))
                    else:
                        dt_next[0] = h * max_factor
                    return OK

                h = h * max(min_factor, safety * err ** -0.25)
                if h < min_step:
                    return STEPFAIL

            return STEPFAIL

        return rk45_stepper


register(RK45Spec())
