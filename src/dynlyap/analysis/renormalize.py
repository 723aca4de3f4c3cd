# src/dynlyap/analysis/renormalize.py
"""Frame renormalization: QR factorizations of an evolved tangent frame."""
from __future__ import annotations

import math
from typing import Callable, Tuple
import numpy as np

from dynlyap.jit.compile import jit_compile

__all__ = [
    "qr_frame",
    "mgs_qr_inplace",
    "get_mgs_kernel",
    "accumulate_log_scale",
    "log_scale_factors",
]


def qr_frame(K: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Householder QR of ``K`` with value semantics.

    Returns the orthonormal factor ``Q`` and the absolute diagonal ``|R[j, j]|``.
    LAPACK does not guarantee a positive diagonal, so only magnitudes are used.
    """
    Q, R = np.linalg.qr(np.asarray(K, dtype=np.float64))
    return Q, np.abs(np.diagonal(R)).copy()


def mgs_qr_inplace(A: np.ndarray, diag: np.ndarray) -> None:
    """
    Modified Gram-Schmidt on the columns of ``A`` (in place).

    On return ``A`` holds Q and ``diag[j]`` the norm of the j-th orthogonalized
    column, i.e. ``|R[j, j]|``. A column that collapses to zero records 0.0
    and is replaced by a unit vector orthogonal to the previous columns.
    """
    n = A.shape[0]
    k = A.shape[1]
    for j in range(k):
        # subtract projections onto previous q_i (stored in A[:, i])
        for i_prev in range(j):
            dot = 0.0
            for r in range(n):
                dot += A[r, i_prev] * A[r, j]
            for r in range(n):
                A[r, j] -= dot * A[r, i_prev]

        norm_sq = 0.0
        for r in range(n):
            val = A[r, j]
            norm_sq += val * val
        norm = math.sqrt(norm_sq)

        if norm == 0.0:
            diag[j] = 0.0
            # reseed: first canonical axis with a non-vanishing orthogonal part
            for axis in range(n):
                for r in range(n):
                    A[r, j] = 0.0
                A[axis, j] = 1.0
                for i_prev in range(j):
                    dot = A[axis, i_prev]
                    for r in range(n):
                        A[r, j] -= dot * A[r, i_prev]
                norm_sq = 0.0
                for r in range(n):
                    norm_sq += A[r, j] * A[r, j]
                norm = math.sqrt(norm_sq)
                if norm > 1e-8:
                    break
        else:
            diag[j] = norm

        inv = 1.0 / norm
        for r in range(n):
            A[r, j] *= inv


_MGS_KERNELS: dict[bool, Callable[[np.ndarray, np.ndarray], None]] = {}


def get_mgs_kernel(jit: bool) -> Callable[[np.ndarray, np.ndarray], None]:
    """Return the in-place QR kernel, numba-compiled when ``jit`` is True."""
    kernel = _MGS_KERNELS.get(jit)
    if kernel is None:
        compiled = jit_compile(mgs_qr_inplace, jit=jit, component="mgs_qr_inplace")
        kernel = compiled.fn
        # A missing numba falls back to Python; do not cache that under jit=True
        # so a later install in the same process is not masked.
        if compiled.jitted or not jit:
            _MGS_KERNELS[jit] = kernel
    return kernel


def accumulate_log_scale(acc: np.ndarray, diag: np.ndarray) -> None:
    """
    ``acc += log(|diag|)`` without allocating; ``diag`` is used as scratch.

    Zero factors contribute ``-inf``.
    """
    np.abs(diag, out=diag)
    with np.errstate(divide="ignore"):
        np.log(diag, out=diag)
    acc += diag


def log_scale_factors(diag: np.ndarray) -> np.ndarray:
    """``log(|diag|)`` as a new array, ``-inf`` for zero factors."""
    out = np.array(diag, dtype=np.float64, copy=True)
    np.abs(out, out=out)
    with np.errstate(divide="ignore"):
        np.log(out, out=out)
    return out
