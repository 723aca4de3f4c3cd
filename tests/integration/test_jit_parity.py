# tests/integration/test_jit_parity.py
"""
Numba-compiled kernels agree with their Python counterparts.

Skipped when numba is not installed.
"""
from __future__ import annotations

import numpy as np
import pytest

pytest.importorskip("numba")

from dynlyap import ODEIntegrator, lyapunov, lyapunovs
from dynlyap.analysis.renormalize import get_mgs_kernel, mgs_qr_inplace
from dynlyap.jit import jit_compile
from dynlyap.runtime.guards import get_guards

from models import big_henon, saddle


def _decay(t, y, dy):
    for i in range(y.size):
        dy[i] = -y[i]


def test_mgs_kernel_jit_matches_python():
    rng = np.random.default_rng(11)
    K = rng.normal(size=(5, 5))
    A_py = K.copy()
    A_jit = K.copy()
    d_py = np.empty(5)
    d_jit = np.empty(5)

    mgs_qr_inplace(A_py, d_py)
    kernel = get_mgs_kernel(True)
    assert kernel is not mgs_qr_inplace
    kernel(A_jit, d_jit)

    np.testing.assert_allclose(d_jit, d_py, rtol=1e-12)
    np.testing.assert_allclose(A_jit, A_py, atol=1e-12)


def test_guard_jit_detects_non_finite():
    guard = get_guards(True)
    assert guard(np.array([1.0, 2.0]))
    assert not guard(np.array([1.0, np.nan]))
    assert not guard(np.array([np.inf]))


def test_jit_compile_reuses_dispatcher():
    first = jit_compile(_decay, jit=True)
    assert first.jitted
    again = jit_compile(first.fn, jit=True)
    assert again.fn is first.fn


def test_rk45_jit_matches_python():
    py = ODEIntegrator(_decay, [1.0, 2.0], dt=0.1, atol=1e-10, rtol=1e-8)
    jt = ODEIntegrator(_decay, [1.0, 2.0], dt=0.1, atol=1e-10, rtol=1e-8, jit=True)
    py.advance_to(3.0)
    jt.advance_to(3.0)
    assert jt.t == py.t == 3.0
    np.testing.assert_allclose(jt.u, py.u, rtol=1e-10)
    np.testing.assert_allclose(jt.u, np.exp(-3.0) * np.array([1.0, 2.0]), rtol=1e-7)


def test_big_spectrum_jit_matches_python():
    lam_py = lyapunovs(big_henon((0.1, 0.1)), 300, Ttr=10)
    lam_jit = lyapunovs(big_henon((0.1, 0.1), jit=True), 300, Ttr=10)
    np.testing.assert_allclose(lam_jit, lam_py, rtol=1e-9)


def test_flow_spectrum_jit_matches_python():
    kw = dict(dt=0.1, atol=1e-10, rtol=1e-8)
    lam_py = lyapunovs(saddle(), 50, **kw)
    lam_jit = lyapunovs(saddle(jit=True), 50, **kw)
    np.testing.assert_allclose(lam_jit, lam_py, rtol=1e-8)
    np.testing.assert_allclose(lam_jit, [1.0, -1.0], atol=1e-3)


def test_flow_maximum_exponent_jit_matches_python():
    lam_py = lyapunov(saddle(), 30.0, threshold=1e-7)
    lam_jit = lyapunov(saddle(jit=True), 30.0, threshold=1e-7)
    assert lam_jit == pytest.approx(lam_py, rel=1e-8)
    assert lam_jit == pytest.approx(1.0, abs=0.02)
