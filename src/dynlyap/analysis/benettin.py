# src/dynlyap/analysis/benettin.py
"""
Maximum Lyapunov exponent by the two-trajectory method of Benettin et al.,
Phys. Rev. A 14, 2338 (1976).

A reference and a test trajectory start ``d0`` apart. When their distance
reaches ``threshold`` the growth factor ``a = dist/d0`` is accumulated as
``log(a)`` and the test trajectory is pulled back to distance ``d0`` along
the current separation direction. On maps the separation is also rescaled,
back up to ``d0``, when it contracts below ``d0**2 / threshold``. The exponent
is the accumulated sum over the elapsed steps (maps) or the time of the last
rescale (flows).
"""
from __future__ import annotations

import math
from typing import Optional, Union
import numpy as np

from dynlyap.config import BenettinConfig, check_tolerances, merge_config
from dynlyap.errors import ConfigError, DegenerateRunError
from dynlyap.integrate.integrator import ODEIntegrator
from .convergence import ConvergenceRecorder, LyapunovConvergence, NullRecorder
from .spectrum import lyapunovs
from .strategy import rescale_along, scaled_norm, strategy_for
from .transient import check_steps, evolve

__all__ = ["lyapunov", "compute_max_exponent"]


def _log_growth(a: float) -> float:
    return math.log(a) if a > 0.0 else -math.inf


def _benettin_map(strategy, st1, st2, N: int, d0: float, threshold: float, recorder) -> float:
    lower = d0 * d0 / threshold
    dist = d0
    lam = 0.0
    i = 0
    while i < N:
        # evolve until rescaling
        while lower < dist < threshold:
            st1 = strategy.advance(st1)
            st2 = strategy.advance(st2)
            dist = strategy.distance(st1, st2)
            i += 1
            if i >= N:
                break
        a = dist / d0
        lam += _log_growth(a)
        recorder.record(i, lam / i)
        if i >= N or not a > 0.0:
            # coincident (or non-finite) trajectories cannot be rescaled
            break
        st2 = strategy.rescale(st1, st2, a)
        dist = d0
    return lam / i


def _benettin_discrete(ds, N, Ttr, cfg: BenettinConfig, recorder) -> float:
    N = check_steps(N, name="N", who="lyapunov", allow_zero=False)
    strategy = strategy_for(ds, need_jacobian=False, who="lyapunov")
    st1 = strategy.prepare(evolve(ds, Ttr))
    st2 = strategy.prepare(cfg.resolve_inittest(ds.dimension)(st1.copy(), cfg.d0))
    if st2.shape != st1.shape:
        raise ConfigError(
            f"inittest returned shape {st2.shape}; expected {st1.shape}"
        )
    return _benettin_map(strategy, st1, st2, N, cfg.d0, cfg.threshold, recorder)


def _checkpoint_count(T: float, dt: float) -> int:
    # Checkpoints dt, 2dt, ... up to and including T (within rounding).
    return int(math.floor(T / dt + 1e-9))


def _benettin_continuous(ds, T, Ttr, cfg: BenettinConfig, recorder) -> float:
    if not isinstance(T, (int, float, np.number)) or isinstance(T, bool) or not T > 0:
        raise ConfigError(f"lyapunov T must be a positive number; got {T!r}")
    T = float(T)
    d0 = cfg.d0
    threshold = cfg.threshold
    dt = cfg.dt
    atol, rtol = cfg.solver_tolerances()
    check_tolerances(d0, atol, rtol)

    n_checks = _checkpoint_count(T, dt)
    if n_checks == 0:
        raise ConfigError(f"lyapunov T={T} is shorter than the sampling interval dt={dt}")

    st1 = evolve(ds, Ttr, atol=atol, rtol=rtol)
    st2 = np.asarray(cfg.resolve_inittest(ds.dimension)(st1.copy(), d0), dtype=np.float64)
    if st2.shape != st1.shape:
        raise ConfigError(f"inittest returned shape {st2.shape}; expected {st1.shape}")
    t_start = ds.t0 + float(Ttr)

    integ1 = ODEIntegrator(ds.rhs, st1, t0=t_start, dt=dt, stepper=ds.stepper,
                           atol=atol, rtol=rtol, jit=ds.jit)
    integ2 = ODEIntegrator(ds.rhs, st2, t0=t_start, dt=dt, stepper=ds.stepper,
                           atol=atol, rtol=rtol, jit=ds.jit)
    diff = np.empty_like(integ1.u)

    lam = 0.0
    dist = d0
    t_last: Optional[float] = None
    for k in range(1, n_checks + 1):
        elapsed = k * dt
        tau = t_start + elapsed
        integ1.advance_to(tau)
        integ2.advance_to(tau)
        np.subtract(integ1.u, integ2.u, out=diff)
        dist = scaled_norm(diff)
        if dist >= threshold:
            a = dist / d0
            lam += _log_growth(a)
            t_last = elapsed
            recorder.record(elapsed, lam / elapsed)
            # rescale along the separation direction
            rescale_along(integ1.u, integ2.u, a, out=integ2.u)
            integ2.set_proposed_dt(integ1)
            dist = d0

    if t_last is None:
        raise DegenerateRunError(T, threshold, dist)
    return lam / t_last


_BENETTIN = {
    "discrete": _benettin_discrete,
    "big_discrete": _benettin_discrete,
    "continuous": _benettin_continuous,
}


def lyapunov(
    ds,
    T: Union[int, float] = 10000,
    *,
    return_convergence: bool = False,
    Ttr: Union[int, float] = 0,
    d0: Optional[float] = None,
    threshold: Optional[float] = None,
    inittest=None,
    dt: Optional[float] = None,
    atol: Optional[float] = None,
    rtol: Optional[float] = None,
    config: Optional[BenettinConfig] = None,
) -> Union[float, LyapunovConvergence]:
    """
    Compute the maximum Lyapunov exponent of ``ds``.

    Parameters
    ----------
    ds : DiscreteDS, BigDiscreteDS, DiscreteDS1D or ContinuousDS
        The dynamical system.
    T : int or float
        Total evolution: number of steps for maps, time for flows.
    return_convergence : bool, default=False
        Return the running estimate at every rescale instead of the final value.
    Ttr : int or float, default=0
        Transient evolved (and discarded) before measurement.
    d0 : float, default=1e-9
        Initial and post-rescale distance between the trajectories.
    threshold : float, default=1e-5
        Distance that triggers a rescale. Must be bigger than ``d0``.
    inittest : callable, optional
        ``inittest(state, d0) -> test_state``. Defaults to shifting every
        component by ``d0/sqrt(D)``.
    dt : float, default=0.1
        Flows only: time between distance checks.
    atol, rtol : float, optional
        Flows only: integrator tolerances, ``d0`` when omitted.
    config : BenettinConfig, optional
        Base configuration; the keyword arguments above override it.

    Returns
    -------
    float or LyapunovConvergence
        The exponent, or ``(exponents, times)`` with one entry per rescale.

    Raises
    ------
    ConfigError
        ``threshold <= d0`` or other invalid parameters (before any evolution).
    DegenerateRunError
        Flows only: no rescale happened within ``T``.

    Notes
    -----
    One-dimensional maps use the derivative method of ``lyapunovs``; there is
    no separation to rescale in one dimension.
    """
    cfg = merge_config(
        config or BenettinConfig(),
        d0=d0, threshold=threshold, inittest=inittest, dt=dt, atol=atol, rtol=rtol,
    )
    cfg.validate()

    kind = getattr(ds, "kind", None)
    if kind == "discrete_1d":
        N = check_steps(T, name="N", who="lyapunov", allow_zero=False)
        lam = float(lyapunovs(ds, N, Ttr=Ttr)[0])
        if return_convergence:
            return LyapunovConvergence(
                exponents=np.array([lam], dtype=np.float64),
                times=np.array([N], dtype=np.int64),
            )
        return lam

    algorithm = _BENETTIN.get(kind)
    if algorithm is None:
        raise TypeError(f"lyapunov does not support systems of kind {kind!r}")

    if return_convergence:
        recorder = ConvergenceRecorder(np.float64 if kind == "continuous" else np.int64)
        algorithm(ds, T, Ttr, cfg, recorder)
        return recorder.as_result()
    return algorithm(ds, T, Ttr, cfg, NullRecorder())


compute_max_exponent = lyapunov
