# src/dynlyap/integrate/integrator.py
"""
Continuous-time integrator driving a stepper kernel.

The integrator owns its state buffer ``u`` and mutates it in place. Callers
advance it to checkpoints with ``advance_to``; the last step before a
checkpoint is clipped so the integrator lands on it exactly.
"""
from __future__ import annotations

from typing import Callable, Optional
import numpy as np

from dynlyap.errors import ConfigError, StepFailError
from dynlyap.jit.compile import jit_compile
from dynlyap.runtime.guards import get_guards
from dynlyap.runtime.status import OK, NAN_DETECTED, STEPFAIL
from dynlyap.steppers.registry import get_stepper

__all__ = [
    "ODEIntegrator",
    "variational_integrator",
    "state_view",
    "tangent_view",
]

# Relative slack under which a step is stretched onto the checkpoint instead
# of leaving a sliver step behind.
_LANDING_RTOL = 1e-12


class ODEIntegrator:
    """
    Step-by-step integrator for ``dy/dt = rhs(t, y)``.

    Parameters:
        rhs: In-place right-hand side ``rhs(t, y, dy_out)``.
        u0: Initial state (copied).
        t0: Initial time.
        dt: Initial step-size hint (the fixed step for fixed-step kernels).
        stepper: Registered stepper name (default "rk45").
        atol, rtol: Tolerances for adaptive kernels; ignored by fixed-step ones.
        jit: Compile the kernel and ``rhs`` with numba.
        max_steps: Upper bound on accepted steps per ``advance_to`` call.
    """

    def __init__(
        self,
        rhs: Callable[[float, np.ndarray, np.ndarray], None],
        u0,
        *,
        t0: float = 0.0,
        dt: float = 0.01,
        stepper: str = "rk45",
        atol: Optional[float] = None,
        rtol: Optional[float] = None,
        jit: bool = False,
        max_steps: int = 10_000_000,
    ) -> None:
        if not dt > 0.0:
            raise ConfigError(f"ODEIntegrator dt must be positive; got {dt}")
        try:
            spec = get_stepper(stepper)
        except KeyError:
            raise ConfigError(f"Unknown stepper '{stepper}'") from None

        self.spec = spec
        self.u = np.array(u0, dtype=np.float64, copy=True).reshape(-1)
        n_state = self.u.size
        self.t = float(t0)
        self.dt = float(dt)
        self.max_steps = int(max_steps)
        self.steps = 0
        self.jit = bool(jit)

        self._ws = spec.make_workspace(n_state, np.float64)
        self._config = spec.pack_config(spec.default_config(atol=atol, rtol=rtol))
        self._rhs = jit_compile(rhs, jit=jit, component="rhs").fn
        self._stepper = jit_compile(spec.emit(), jit=jit, component=f"{spec.meta.name}_stepper").fn
        self._allfinite = get_guards(jit)

        # Proposals / outs (len-1 where applicable)
        self._y_prop = np.zeros((n_state,), dtype=np.float64)
        self._t_prop = np.zeros((1,), dtype=np.float64)
        self._dt_next = np.zeros((1,), dtype=np.float64)
        self._err_est = np.zeros((1,), dtype=np.float64)

    @property
    def adaptive(self) -> bool:
        return self.spec.meta.time_control == "adaptive"

    def step(self, t_limit: Optional[float] = None) -> None:
        """Take one accepted step, never past ``t_limit`` when given."""
        h = self.dt
        clipped = False
        if t_limit is not None:
            remaining = t_limit - self.t
            if h >= remaining - _LANDING_RTOL * max(1.0, abs(t_limit)):
                h = remaining
                clipped = True

        status = self._stepper(
            self.t, h,
            self.u, self._rhs,
            self._ws,
            self._config,
            self._y_prop, self._t_prop, self._dt_next, self._err_est,
        )
        status = int(status)
        target = t_limit if t_limit is not None else self.t + h
        if status != OK:
            raise StepFailError(status, self.t, target)
        if not self._allfinite(self._y_prop):
            raise StepFailError(NAN_DETECTED, self.t, target)

        self.u[:] = self._y_prop
        t_new = float(self._t_prop[0])
        dt_next = float(self._dt_next[0])
        full_step = t_new == self.t + h
        if clipped and full_step:
            # Land exactly on the checkpoint and keep the unclipped hint.
            self.t = float(t_limit)
            if self.adaptive:
                self.dt = max(self.dt, dt_next)
        else:
            self.t = t_new
            if self.adaptive:
                self.dt = dt_next
        self.steps += 1

    def advance_to(self, t_target: float) -> None:
        """Step until ``t == t_target``. Targets at or before ``t`` are no-ops."""
        t_target = float(t_target)
        taken = 0
        while self.t < t_target:
            if taken >= self.max_steps:
                raise StepFailError(STEPFAIL, self.t, t_target)
            self.step(t_limit=t_target)
            taken += 1

    def set_u(self, values) -> None:
        """Overwrite the internal state in place."""
        self.u[:] = values

    def set_proposed_dt(self, other: "ODEIntegrator") -> None:
        """Adopt the step-size hint of ``other``."""
        self.dt = float(other.dt)


# --------------------------- variational flow -------------------------------

def _make_variational_rhs(
    rhs: Callable[[float, np.ndarray, np.ndarray], None],
    jacob: Callable[[float, np.ndarray, np.ndarray], None],
    n: int,
) -> Callable[[float, np.ndarray, np.ndarray], None]:
    """
    Augmented right-hand side over ``[u, W]`` (W row-major, shape (n, n)):
        u' = f(t, u)
        W' = J(t, u) W
    """
    def variational_rhs(t, y, dy):
        u = y[:n]
        rhs(t, u, dy[:n])
        J = np.empty((n, n))
        jacob(t, u, J)
        W = y[n:].reshape((n, n))
        dW = dy[n:].reshape((n, n))
        for i in range(n):
            for j in range(n):
                acc = 0.0
                for k in range(n):
                    acc += J[i, k] * W[k, j]
                dW[i, j] = acc

    return variational_rhs


def variational_integrator(
    ds,
    Q: np.ndarray,
    *,
    u0: Optional[np.ndarray] = None,
    t0: Optional[float] = None,
    dt: float = 0.01,
    atol: Optional[float] = None,
    rtol: Optional[float] = None,
) -> ODEIntegrator:
    """Integrator over the state of ``ds`` joined with the tangent frame ``Q``."""
    if ds.jacob is None:
        raise ConfigError(
            "the variational equations require a Jacobian; pass jacob= to ContinuousDS"
        )
    n = ds.dimension
    start = ds.state if u0 is None else np.asarray(u0, dtype=np.float64)
    augmented = np.empty((n + n * n,), dtype=np.float64)
    augmented[:n] = start
    augmented[n:] = np.asarray(Q, dtype=np.float64).reshape(-1)

    rhs = ds.rhs
    jacob = ds.jacob
    if ds.jit:
        # The closure must capture compiled callables to compile itself.
        rhs = jit_compile(rhs, jit=True, component="rhs").fn
        jacob = jit_compile(jacob, jit=True, component="jacob").fn
    return ODEIntegrator(
        _make_variational_rhs(rhs, jacob, n),
        augmented,
        t0=ds.t0 if t0 is None else t0,
        dt=dt,
        stepper=ds.stepper,
        atol=atol,
        rtol=rtol,
        jit=ds.jit,
    )


def state_view(integ: ODEIntegrator, n: int) -> np.ndarray:
    """View of the state part of an augmented integrator."""
    return integ.u[:n]


def tangent_view(integ: ODEIntegrator, n: int) -> np.ndarray:
    """(n, n) view of the tangent frame part of an augmented integrator."""
    return integ.u[n:].reshape((n, n))
