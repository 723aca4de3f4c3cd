# src/dynlyap/config.py
"""
Run configuration for the exponent algorithms.

Configuration is passed explicitly into each call; there is no process-wide
default object. Values can be read from TOML:

    [lyapunov.benettin]
    d0 = 1e-9
    threshold = 1e-5
    dt = 0.1

    [lyapunov.spectrum]
    dt = 0.1
    sort = true
"""
from __future__ import annotations

import dataclasses
import math
import warnings
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union
import numpy as np

try:  # Python 3.11+
    import tomllib  # type: ignore
except Exception:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from dynlyap.errors import ConfigError

__all__ = [
    "BenettinConfig",
    "SpectrumConfig",
    "default_inittest",
    "check_tolerances",
    "merge_config",
    "load_config",
    "benettin_config_from_toml",
    "spectrum_config_from_toml",
]

InitTest = Callable[[np.ndarray, float], np.ndarray]


def default_inittest(dimension: int) -> InitTest:
    """
    Perturbation initializer ``(state, d0) -> state + d0/sqrt(D)``.

    Every component is shifted by the same amount, so the test state lies at
    Euclidean distance exactly ``d0`` from ``state``.
    """
    if dimension <= 0:
        raise ConfigError(f"dimension must be positive; got {dimension}")
    shift_per_d0 = 1.0 / math.sqrt(dimension)

    def inittest(state: np.ndarray, d0: float) -> np.ndarray:
        return np.asarray(state, dtype=np.float64) + d0 * shift_per_d0

    return inittest


def check_tolerances(d0: float, atol: Optional[float], rtol: Optional[float]) -> None:
    """Warn when a solver tolerance exceeds the separation being measured."""
    for name, tol in (("atol", atol), ("rtol", rtol)):
        if tol is not None and tol > d0:
            warnings.warn(
                f"Solver {name}={tol:g} is larger than d0={d0:g}; integration error "
                f"may dominate the separation between trajectories.",
                RuntimeWarning,
                stacklevel=3,
            )


@dataclass(frozen=True)
class BenettinConfig:
    """Parameters of the two-trajectory (maximum exponent) method."""
    d0: float = 1e-9
    threshold: float = 1e-5
    dt: float = 0.1              # continuous only: distance sampling cadence
    atol: Optional[float] = None  # continuous only: None -> d0
    rtol: Optional[float] = None  # continuous only: None -> d0
    inittest: Optional[InitTest] = None

    def validate(self) -> "BenettinConfig":
        if not self.d0 > 0.0:
            raise ConfigError(f"d0 must be positive; got {self.d0}")
        if not self.threshold > self.d0:
            raise ConfigError(
                f"threshold must be bigger than d0; got threshold={self.threshold}, d0={self.d0}"
            )
        if not self.dt > 0.0:
            raise ConfigError(f"dt must be positive; got {self.dt}")
        for name in ("atol", "rtol"):
            tol = getattr(self, name)
            if tol is not None and not tol > 0.0:
                raise ConfigError(f"{name} must be positive; got {tol}")
        if self.inittest is not None and not callable(self.inittest):
            raise ConfigError("inittest must be callable")
        return self

    def solver_tolerances(self) -> tuple[float, float]:
        atol = self.d0 if self.atol is None else float(self.atol)
        rtol = self.d0 if self.rtol is None else float(self.rtol)
        return atol, rtol

    def resolve_inittest(self, dimension: int) -> InitTest:
        if self.inittest is not None:
            return self.inittest
        return default_inittest(dimension)


@dataclass(frozen=True)
class SpectrumConfig:
    """Parameters of the QR (full spectrum) method."""
    dt: float = 0.1              # continuous only: time between renormalizations
    atol: float = 1e-8           # continuous only
    rtol: float = 1e-5           # continuous only
    sort: bool = False           # sort the result descending

    def validate(self) -> "SpectrumConfig":
        if not self.dt > 0.0:
            raise ConfigError(f"dt must be positive; got {self.dt}")
        if not (self.atol > 0.0 and self.rtol > 0.0):
            raise ConfigError(f"tolerances must be positive; got atol={self.atol}, rtol={self.rtol}")
        return self


def merge_config(config, **overrides):
    """``dataclasses.replace`` with the overrides that are not None."""
    updates = {k: v for k, v in overrides.items() if v is not None}
    if updates:
        config = dataclasses.replace(config, **updates)
    return config


def load_config(path: Union[str, Path], section: str = "lyapunov") -> Dict[str, Dict[str, Any]]:
    """
    Read the ``[section.*]`` tables of a TOML file.

    Returns a mapping ``{"benettin": {...}, "spectrum": {...}}``; absent tables
    map to empty dicts.
    """
    p = Path(path)
    try:
        with p.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {p}") from None
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed TOML in {p}: {exc}") from exc

    root = data.get(section, {})
    if not isinstance(root, dict):
        raise ConfigError(f"[{section}] must be a table")
    out: Dict[str, Dict[str, Any]] = {}
    for name in ("benettin", "spectrum"):
        table = root.get(name, {})
        if not isinstance(table, dict):
            raise ConfigError(f"[{section}.{name}] must be a table")
        out[name] = dict(table)
    unknown = set(root) - {"benettin", "spectrum"}
    if unknown:
        raise ConfigError.unknown_keys(section, unknown, ("benettin", "spectrum"))
    return out


def _from_table(cls, table: Dict[str, Any], section: str):
    valid = {f.name for f in fields(cls) if f.name != "inittest"}
    unknown = set(table) - valid
    if unknown:
        raise ConfigError.unknown_keys(section, unknown, valid)
    return cls(**table).validate()


def benettin_config_from_toml(path: Union[str, Path], section: str = "lyapunov") -> BenettinConfig:
    tables = load_config(path, section)
    return _from_table(BenettinConfig, tables["benettin"], f"{section}.benettin")


def spectrum_config_from_toml(path: Union[str, Path], section: str = "lyapunov") -> SpectrumConfig:
    tables = load_config(path, section)
    return _from_table(SpectrumConfig, tables["spectrum"], f"{section}.spectrum")
