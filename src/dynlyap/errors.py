# src/dynlyap/errors.py
from __future__ import annotations
from typing import Iterable

__all__ = [
    "DynlyapError",
    "ConfigError",
    "DegenerateRunError",
    "StepFailError",
]

class DynlyapError(Exception):
    """Base error for the dynlyap package."""


class ConfigError(DynlyapError):
    """Raised when run parameters or a configuration file are invalid."""
    def __init__(self, message: str):
        super().__init__(message)

    @classmethod
    def unknown_keys(cls, section: str, unknown: Iterable[str], valid: Iterable[str]) -> "ConfigError":
        msg = f"Unknown key(s) in [{section}]: {', '.join(sorted(unknown))}\n"
        msg += "Valid keys:\n"
        for k in sorted(valid):
            msg += f"  - {k}\n"
        return cls(msg.rstrip("\n"))


class DegenerateRunError(DynlyapError):
    """Raised when a two-trajectory run never reaches the rescale threshold."""
    def __init__(self, T: float, threshold: float, last_distance: float):
        self.T = T
        self.threshold = threshold
        self.last_distance = last_distance
        msg = f"No rescale occurred within T={T}\n"
        msg += f"Threshold: {threshold}\n"
        msg += f"Last distance: {last_distance}\n"
        msg += "The maximum exponent is undefined; increase T or lower the threshold."
        super().__init__(msg)


class StepFailError(DynlyapError):
    """Raised when the continuous integrator cannot reach a requested time."""
    def __init__(self, status: int, t: float, t_target: float):
        from dynlyap.runtime.status import Status

        self.status = int(status)
        self.t = t
        self.t_target = t_target
        try:
            name = Status(self.status).name
        except ValueError:
            name = "UNKNOWN"
        msg = f"Integrator stopped with status {name} ({self.status})\n"
        msg += f"Reached t={t}, requested t={t_target}"
        super().__init__(msg)
