# tests/models.py
"""Small reference systems shared by the test suite."""
from __future__ import annotations

import numpy as np

from dynlyap import BigDiscreteDS, ContinuousDS, DiscreteDS, DiscreteDS1D

HENON_A = 1.4
HENON_B = 0.3


def henon_eom(u):
    x = u[0]
    y = u[1]
    return np.array([1.0 - HENON_A * x * x + y, HENON_B * x])


def henon_jacob(u):
    return np.array([[-2.0 * HENON_A * u[0], 1.0], [HENON_B, 0.0]])


def henon_eom_inplace(out, u):
    x = u[0]
    y = u[1]
    out[0] = 1.0 - HENON_A * x * x + y
    out[1] = HENON_B * x


def henon_jacob_inplace(J, u):
    J[0, 0] = -2.0 * HENON_A * u[0]
    J[0, 1] = 1.0
    J[1, 0] = HENON_B
    J[1, 1] = 0.0


def henon(state=(0.0, 0.0)) -> DiscreteDS:
    return DiscreteDS(state, henon_eom, henon_jacob)


def big_henon(state=(0.0, 0.0), *, jit: bool = False) -> BigDiscreteDS:
    return BigDiscreteDS(state, henon_eom_inplace, henon_jacob_inplace, jit=jit)


def diagonal_map(scales, state=None) -> DiscreteDS:
    """Linear map u -> diag(scales) u (Jacobian constant everywhere)."""
    scales = np.asarray(scales, dtype=np.float64)
    if state is None:
        state = np.zeros_like(scales)
    J = np.diag(scales)
    return DiscreteDS(state, lambda u: scales * u, lambda u: J)


def big_diagonal_map(scales, state=None) -> BigDiscreteDS:
    scales = np.asarray(scales, dtype=np.float64)
    if state is None:
        state = np.zeros_like(scales)

    def eom(out, u):
        np.multiply(scales, u, out=out)

    def jacob(J, u):
        J[...] = 0.0
        np.fill_diagonal(J, scales)

    return BigDiscreteDS(state, eom, jacob)


def logistic(r: float = 4.0, x0: float = 0.4) -> DiscreteDS1D:
    return DiscreteDS1D(x0, lambda x: r * x * (1.0 - x), lambda x: r * (1.0 - 2.0 * x))


def linear_flow(rates, state=None, **kwargs) -> ContinuousDS:
    """dy/dt = diag(rates) y."""
    rates = np.asarray(rates, dtype=np.float64)
    if state is None:
        state = np.zeros_like(rates)

    def rhs(t, y, dy):
        for i in range(y.size):
            dy[i] = rates[i] * y[i]

    def jacob(t, y, J):
        J[...] = 0.0
        for i in range(y.size):
            J[i, i] = rates[i]

    return ContinuousDS(state, rhs, jacob, **kwargs)


def saddle_rhs(t, y, dy):
    dy[0] = y[0]
    dy[1] = -y[1]


def saddle_jacob(t, y, J):
    J[0, 0] = 1.0
    J[0, 1] = 0.0
    J[1, 0] = 0.0
    J[1, 1] = -1.0


def saddle(jit: bool = False) -> ContinuousDS:
    """Linear saddle with rates +1 and -1, written with numba-compatible callables."""
    return ContinuousDS([0.0, 0.0], saddle_rhs, saddle_jacob, jit=jit)


LORENZ_SIGMA = 10.0
LORENZ_RHO = 28.0
LORENZ_BETA = 8.0 / 3.0


def lorenz_rhs(t, y, dy):
    dy[0] = LORENZ_SIGMA * (y[1] - y[0])
    dy[1] = y[0] * (LORENZ_RHO - y[2]) - y[1]
    dy[2] = y[0] * y[1] - LORENZ_BETA * y[2]


def lorenz_jacob(t, y, J):
    J[0, 0] = -LORENZ_SIGMA
    J[0, 1] = LORENZ_SIGMA
    J[0, 2] = 0.0
    J[1, 0] = LORENZ_RHO - y[2]
    J[1, 1] = -1.0
    J[1, 2] = -y[0]
    J[2, 0] = y[1]
    J[2, 1] = y[0]
    J[2, 2] = -LORENZ_BETA


def lorenz(state=(1.0, 1.0, 1.0)) -> ContinuousDS:
    return ContinuousDS(state, lorenz_rhs, lorenz_jacob)
