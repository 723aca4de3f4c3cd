# tests/unit/test_renormalize.py
"""
Frame renormalization kernels.

Tests verify:
- Householder (value) and Gram-Schmidt (in-place) QR give the same |diag R|
- Q is orthonormal after renormalization
- Zero columns record 0.0 and keep the frame orthonormal
- log accumulation maps zero factors to -inf without warnings
"""
from __future__ import annotations

import warnings

import numpy as np
import pytest

from dynlyap.analysis.renormalize import (
    accumulate_log_scale,
    get_mgs_kernel,
    log_scale_factors,
    mgs_qr_inplace,
    qr_frame,
)


def _random_matrix(n: int, seed: int = 3) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.normal(size=(n, n))


@pytest.mark.parametrize("n", [1, 2, 3, 6])
def test_value_and_inplace_qr_agree(n: int):
    K = _random_matrix(n)
    Q_ref, diag_ref = qr_frame(K)

    A = K.copy()
    diag = np.empty(n)
    mgs_qr_inplace(A, diag)

    np.testing.assert_allclose(diag, diag_ref, rtol=1e-10)
    np.testing.assert_allclose(A.T @ A, np.eye(n), atol=1e-12)
    np.testing.assert_allclose(Q_ref.T @ Q_ref, np.eye(n), atol=1e-12)
    # Same subspace column by column: Q columns agree up to sign.
    np.testing.assert_allclose(np.abs(np.sum(A * Q_ref, axis=0)), np.ones(n), atol=1e-10)


def test_qr_frame_diagonal_is_non_negative():
    K = np.array([[-2.0, 0.0], [0.0, -0.5]])
    _, diag = qr_frame(K)
    assert np.all(diag >= 0.0)
    np.testing.assert_allclose(diag, [2.0, 0.5])


def test_inplace_qr_zero_column_is_reseeded():
    A = np.array([[3.0, 0.0, 1.0], [0.0, 0.0, 1.0], [0.0, 0.0, 1.0]])
    diag = np.empty(3)
    mgs_qr_inplace(A, diag)

    assert diag[0] == pytest.approx(3.0)
    assert diag[1] == 0.0
    np.testing.assert_allclose(A.T @ A, np.eye(3), atol=1e-12)


def test_inplace_qr_all_zero_matrix():
    A = np.zeros((3, 3))
    diag = np.ones(3)
    mgs_qr_inplace(A, diag)
    np.testing.assert_array_equal(diag, np.zeros(3))
    np.testing.assert_allclose(A.T @ A, np.eye(3), atol=1e-12)


def test_log_accumulation_handles_zero_factor():
    acc = np.zeros(3)
    diag = np.array([2.0, 0.0, -0.5])
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        accumulate_log_scale(acc, diag)
    assert acc[0] == pytest.approx(np.log(2.0))
    assert acc[1] == -np.inf
    assert acc[2] == pytest.approx(np.log(0.5))


def test_log_scale_factors_does_not_mutate_input():
    diag = np.array([4.0, 0.0])
    out = log_scale_factors(diag)
    np.testing.assert_array_equal(diag, [4.0, 0.0])
    assert out[0] == pytest.approx(np.log(4.0))
    assert out[1] == -np.inf


def test_mgs_kernel_python_mode_is_plain_function():
    assert get_mgs_kernel(False) is mgs_qr_inplace
