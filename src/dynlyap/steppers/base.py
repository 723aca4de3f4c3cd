# src/dynlyap/steppers/base.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Literal, Protocol
import numpy as np

__all__ = ["StepperMeta", "StepperSpec", "TimeCtrl"]

TimeCtrl = Literal["fixed", "adaptive"]


@dataclass(frozen=True)
class StepperMeta:
    """
    Descriptive data of a stepper.

    ``time_control`` tells the integrator whether the ``dt_next`` written by
    the kernel is a real proposal ("adaptive") or just the input step echoed
    back ("fixed").
    """
    name: str
    time_control: TimeCtrl = "fixed"
    family: str = ""
    order: int = 1
    embedded_order: int | None = None
    aliases: tuple[str, ...] = ()


class StepperSpec(Protocol):
    """
    What the integrator needs from a stepper.

    ``make_workspace`` allocates the kernel scratch once per integrator,
    ``default_config``/``pack_config`` turn tolerances into the float64 array
    handed to the kernel, and ``emit`` returns the kernel itself, a plain
    function that numba can compile::

        status = stepper(t, dt, y_curr, rhs, ws, stepper_config,
                         y_prop, t_prop, dt_next, err_est)
    """

    meta: StepperMeta

    def make_workspace(self, n_state: int, dtype: np.dtype) -> object: ...
    def default_config(self, atol: float | None = None, rtol: float | None = None): ...
    def pack_config(self, config) -> np.ndarray: ...
    def emit(self) -> Callable: ...
