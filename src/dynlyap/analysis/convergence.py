# src/dynlyap/analysis/convergence.py
from __future__ import annotations

from typing import List, NamedTuple
import numpy as np

__all__ = ["LyapunovConvergence", "ConvergenceRecorder", "NullRecorder"]


class LyapunovConvergence(NamedTuple):
    """Running exponent estimate after each rescale, with the elapsed steps or time."""

    exponents: np.ndarray
    times: np.ndarray

    @property
    def final(self) -> float:
        return float(self.exponents[-1])

    @property
    def rescales(self) -> int:
        return int(self.exponents.shape[0])


class ConvergenceRecorder:
    """Appends one ``(elapsed, estimate)`` pair per rescale event."""

    def __init__(self, time_dtype=np.float64) -> None:
        self._times: List[float] = []
        self._values: List[float] = []
        self._time_dtype = time_dtype

    def record(self, elapsed, estimate: float) -> None:
        self._times.append(elapsed)
        self._values.append(float(estimate))

    def as_result(self) -> LyapunovConvergence:
        return LyapunovConvergence(
            exponents=np.asarray(self._values, dtype=np.float64),
            times=np.asarray(self._times, dtype=self._time_dtype),
        )


class NullRecorder:
    """Recorder used when only the final value is wanted."""

    def record(self, elapsed, estimate: float) -> None:
        pass
