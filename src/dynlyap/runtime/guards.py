# src/dynlyap/runtime/guards.py
from __future__ import annotations

import math
from typing import Callable
import numpy as np

from dynlyap.jit.compile import njit

__all__ = ["allfinite1d", "get_guards"]


def allfinite1d(x: np.ndarray) -> bool:
    """True when every entry of the 1D array ``x`` is finite."""
    for i in range(x.size):
        if not math.isfinite(x[i]):
            return False
    return True


# compiled once at import; the integrator picks a variant per instance
_allfinite1d_jit = njit(cache=True)(allfinite1d) if njit is not None else allfinite1d


def get_guards(jit: bool) -> Callable[[np.ndarray], bool]:
    """Finite-state check matching the integrator's execution mode."""
    return _allfinite1d_jit if jit else allfinite1d
