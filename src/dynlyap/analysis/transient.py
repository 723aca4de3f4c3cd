# src/dynlyap/analysis/transient.py
"""Transient (burn-in) evolution discarded before measurement."""
from __future__ import annotations

import numbers
from typing import Optional, Union
import numpy as np

from dynlyap.errors import ConfigError
from dynlyap.integrate.integrator import ODEIntegrator

__all__ = ["evolve", "check_steps"]


def check_steps(value, *, name: str, who: str, allow_zero: bool) -> int:
    """Coerce an integral step budget, rejecting fractional or negative values."""
    if isinstance(value, bool):
        raise ConfigError(f"{who} {name} must be an integer; got {value!r}")
    if isinstance(value, numbers.Integral):
        steps = int(value)
    elif isinstance(value, numbers.Real) and float(value).is_integer():
        steps = int(value)
    else:
        raise ConfigError(f"{who} {name} must be an integer for discrete systems; got {value!r}")
    if steps < 0 or (steps == 0 and not allow_zero):
        bound = ">= 0" if allow_zero else "> 0"
        raise ConfigError(f"{who} {name} must be {bound}; got {steps}")
    return steps


def _evolve_discrete(ds, steps: int) -> np.ndarray:
    u = ds.state
    eom = ds.eom
    for _ in range(steps):
        u = np.asarray(eom(u), dtype=np.float64)
    return u


def _evolve_big_discrete(ds, steps: int) -> np.ndarray:
    u = ds.state
    dummy = np.empty_like(u)
    eom = ds.eom
    for _ in range(steps):
        dummy[:] = u
        eom(u, dummy)
    return u


def _evolve_discrete_1d(ds, steps: int) -> float:
    x = ds.state
    eom = ds.eom
    for _ in range(steps):
        x = eom(x)
    return float(x)


def evolve(
    ds,
    Ttr: Union[int, float] = 0,
    *,
    atol: Optional[float] = None,
    rtol: Optional[float] = None,
    dt: float = 0.01,
):
    """
    Return the state of ``ds`` after ``Ttr`` steps (maps) or time units (flows).

    ``ds`` itself is not modified. ``Ttr == 0`` returns the current state.
    ``atol``/``rtol``/``dt`` configure the integrator of continuous systems.
    """
    kind = getattr(ds, "kind", None)
    if kind == "continuous":
        if not isinstance(Ttr, numbers.Real) or isinstance(Ttr, bool) or Ttr < 0:
            raise ConfigError(f"evolve Ttr must be a non-negative number; got {Ttr!r}")
        if Ttr == 0:
            return ds.state
        integ = ODEIntegrator(
            ds.rhs,
            ds.state,
            t0=ds.t0,
            dt=min(dt, float(Ttr)),
            stepper=ds.stepper,
            atol=atol,
            rtol=rtol,
            jit=ds.jit,
        )
        integ.advance_to(ds.t0 + float(Ttr))
        return integ.u.copy()

    evolver = _DISCRETE_EVOLVERS.get(kind)
    if evolver is None:
        raise TypeError(f"evolve does not support systems of kind {kind!r}")
    steps = check_steps(Ttr, name="Ttr", who="evolve", allow_zero=True)
    return evolver(ds, steps)


_DISCRETE_EVOLVERS = {
    "discrete": _evolve_discrete,
    "big_discrete": _evolve_big_discrete,
    "discrete_1d": _evolve_discrete_1d,
}
