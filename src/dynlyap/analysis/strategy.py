# src/dynlyap/analysis/strategy.py
"""
Buffer-ownership strategies for the discrete algorithms.

Both exponent algorithms are written once against the small capability set
below; the strategy decides whether updates return new arrays (value
semantics) or overwrite scratch buffers allocated once per run (large-state
systems).

    advance(u) -> u_next
    propagate(u, Q) -> K = J(u) Q
    renormalize(K) -> (Q, |diag R|)
    distance(u1, u2) -> ||u1 - u2||
    rescale(u1, u2, a) -> u1 + (u2 - u1) / a
"""
from __future__ import annotations

import math
from typing import Optional, Tuple
import numpy as np

from dynlyap.errors import ConfigError
from .renormalize import get_mgs_kernel, qr_frame

__all__ = ["ValueStrategy", "BufferStrategy", "strategy_for", "rescale_along", "scaled_norm"]


def rescale_along(
    reference: np.ndarray,
    perturbed: np.ndarray,
    a: float,
    out: Optional[np.ndarray] = None,
) -> np.ndarray:
    """
    Divide the separation ``perturbed - reference`` by ``a``, keeping its
    direction. In place when ``out`` is given
    (``out`` may alias ``perturbed``).
    """
    if out is None:
        return reference + (perturbed - reference) / a
    np.subtract(perturbed, reference, out=out)
    out /= a
    out += reference
    return out


def scaled_norm(v: np.ndarray) -> float:
    """
    Euclidean norm of ``v`` taken on ``v / max|v|``, so separations near the
    float range limits do not underflow or overflow when squared.

    ``v`` is overwritten; pass a scratch array.
    """
    scale = max(abs(float(v.max())), abs(float(v.min())))
    if scale == 0.0 or not math.isfinite(scale):
        return scale
    v /= scale
    return scale * float(np.linalg.norm(v))


class ValueStrategy:
    """Fixed-size systems: every update returns a new array."""

    def __init__(self, ds) -> None:
        self.ds = ds
        self.dimension = ds.dimension

    def prepare(self, u) -> np.ndarray:
        return np.array(u, dtype=np.float64, copy=True)

    def initial_frame(self) -> np.ndarray:
        return np.eye(self.dimension)

    def advance(self, u: np.ndarray) -> np.ndarray:
        return np.asarray(self.ds.eom(u), dtype=np.float64)

    def propagate(self, u: np.ndarray, Q: np.ndarray) -> np.ndarray:
        return np.asarray(self.ds.jacob(u), dtype=np.float64) @ Q

    def renormalize(self, K: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        return qr_frame(K)

    def distance(self, u1: np.ndarray, u2: np.ndarray) -> float:
        return scaled_norm(u1 - u2)

    def rescale(self, u1: np.ndarray, u2: np.ndarray, a: float) -> np.ndarray:
        return rescale_along(u1, u2, a)


class BufferStrategy:
    """
    Large systems: all scratch is allocated in ``__init__`` and every update
    writes into it. Trajectory states passed through ``prepare`` are mutated
    in place.
    """

    def __init__(self, ds, *, jit: bool = False) -> None:
        self.ds = ds
        n = ds.dimension
        self.dimension = n
        self._dummy = np.empty((n,), dtype=np.float64)
        self._diff = np.empty((n,), dtype=np.float64)
        self._J = np.zeros((n, n), dtype=np.float64)
        self._K = np.empty((n, n), dtype=np.float64)
        self._Q = np.eye(n, dtype=np.float64)
        self._diag = np.empty((n,), dtype=np.float64)
        self._qr = get_mgs_kernel(jit)

    def prepare(self, u) -> np.ndarray:
        return np.array(u, dtype=np.float64, copy=True)

    def initial_frame(self) -> np.ndarray:
        self._Q[...] = 0.0
        np.fill_diagonal(self._Q, 1.0)
        return self._Q

    def advance(self, u: np.ndarray) -> np.ndarray:
        self._dummy[:] = u
        self.ds.eom(u, self._dummy)
        return u

    def propagate(self, u: np.ndarray, Q: np.ndarray) -> np.ndarray:
        self.ds.jacob(self._J, u)
        np.matmul(self._J, Q, out=self._K)
        return self._K

    def renormalize(self, K: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        self._qr(K, self._diag)
        # K now holds the new frame; the old frame buffer becomes next step's K.
        self._K, self._Q = self._Q, K
        return K, self._diag

    def distance(self, u1: np.ndarray, u2: np.ndarray) -> float:
        np.subtract(u1, u2, out=self._diff)
        return scaled_norm(self._diff)

    def rescale(self, u1: np.ndarray, u2: np.ndarray, a: float) -> np.ndarray:
        return rescale_along(u1, u2, a, out=u2)


def strategy_for(ds, *, need_jacobian: bool, who: str):
    """Select the buffer strategy from the system's variant tag."""
    if need_jacobian and getattr(ds, "jacob", None) is None:
        raise ConfigError(f"{who} requires a Jacobian; pass jacob= to {type(ds).__name__}")
    if ds.kind == "discrete":
        return ValueStrategy(ds)
    if ds.kind == "big_discrete":
        return BufferStrategy(ds, jit=ds.jit)
    raise TypeError(f"{who} has no buffer strategy for systems of kind {ds.kind!r}")
