# src/dynlyap/runtime/status.py
from __future__ import annotations
from enum import IntEnum

__all__ = [
    "Status",
    # int constants (jit-friendly)
    "OK", "STEPFAIL", "NAN_DETECTED",
]

class Status(IntEnum):
    """Stable status codes returned by stepper kernels."""
    OK = 0              # step accepted
    STEPFAIL = 2        # step size underflow or too many rejections
    NAN_DETECTED = 3    # non-finite error estimate or state

# Plain int constants for JIT friendliness in kernels
OK: int = int(Status.OK)
STEPFAIL: int = int(Status.STEPFAIL)
NAN_DETECTED: int = int(Status.NAN_DETECTED)


# ---- Canonical stepper signature (documentation) -----------------------------
__doc__ = (__doc__ or "") + r"""

STEPPER KERNEL ABI (names/order/shapes)

stepper(
  t: float64, dt: float64,
  y_curr: float64[:], rhs,
  ws: NamedTuple of float64[:] scratch lanes,
  stepper_config: float64[:],
  y_prop: float64[:], t_prop: float64[1], dt_next: float64[1], err_est: float64[1],
) -> int32

Rules:
- Stepper reads t, dt, y_curr, stepper_config; writes y_prop, t_prop[0], dt_next[0], err_est[0].
- RHS: rhs(t: float64, y_vec: float64[:], dy_out: float64[:]) -> None.
- Returns OK on an accepted step, STEPFAIL or NAN_DETECTED otherwise.
- dt_next[0] is the proposed size of the following step (the step-size hint).
"""
