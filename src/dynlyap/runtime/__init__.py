from .status import Status, OK, STEPFAIL, NAN_DETECTED
from .guards import allfinite1d, get_guards

__all__ = [
    "Status", "OK", "STEPFAIL", "NAN_DETECTED",
    "allfinite1d", "get_guards",
]
