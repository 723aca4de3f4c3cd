# src/dynlyap/jit/compile.py
"""
The single place where numba is applied.

Kernels are written as plain Python functions restricted to what numba can
compile (scalar loops, array indexing, NamedTuples of arrays). With
``jit=False`` or without numba they run as ordinary Python.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import warnings

__all__ = ["JittedCallable", "jit_compile", "njit"]

try:
    from numba import njit
    _NUMBA_OK = True
except ImportError:
    _NUMBA_OK = False
    njit = None  # type: ignore


@dataclass(frozen=True)
class JittedCallable:
    fn: Callable
    jitted: bool
    component: str | None = None


def _is_dispatcher(fn) -> bool:
    return hasattr(fn, "py_func") and getattr(fn, "signatures", None) is not None


def jit_compile(fn: Callable, *, jit: bool = True, component: str | None = None) -> JittedCallable:
    """
    Wrap ``fn`` with ``numba.njit`` when ``jit`` is requested.

    A missing numba is not fatal: a RuntimeWarning is emitted and ``fn`` is
    returned unchanged. A numba failure on a requested compilation is raised
    as RuntimeError naming ``component``. Functions that already are numba
    dispatchers are passed through.
    """
    if not jit:
        return JittedCallable(fn=fn, jitted=False, component=component)

    if not _NUMBA_OK:
        warnings.warn(
            "numba is not installed; running kernels as pure Python "
            "(install numba for compiled kernels).",
            RuntimeWarning,
            stacklevel=3,
        )
        return JittedCallable(fn=fn, jitted=False, component=component)

    if _is_dispatcher(fn):
        return JittedCallable(fn=fn, jitted=True, component=component)

    try:
        compiled = njit(cache=False)(fn)
    except Exception as exc:
        label = component or getattr(fn, "__name__", "callable")
        raise RuntimeError(
            f"numba could not compile '{label}': {type(exc).__name__}: {exc}"
        ) from exc
    return JittedCallable(fn=compiled, jitted=True, component=component)
