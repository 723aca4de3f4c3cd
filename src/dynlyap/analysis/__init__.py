"""Lyapunov exponent algorithms."""

from .benettin import compute_max_exponent, lyapunov
from .convergence import ConvergenceRecorder, LyapunovConvergence
from .renormalize import get_mgs_kernel, mgs_qr_inplace, qr_frame
from .spectrum import compute_spectrum, lyapunovs
from .strategy import BufferStrategy, ValueStrategy, rescale_along
from .transient import evolve

__all__ = [
    "lyapunovs",
    "lyapunov",
    "compute_spectrum",
    "compute_max_exponent",
    "evolve",
    "LyapunovConvergence",
    "ConvergenceRecorder",
    "rescale_along",
    "ValueStrategy",
    "BufferStrategy",
    "qr_frame",
    "mgs_qr_inplace",
    "get_mgs_kernel",
]
