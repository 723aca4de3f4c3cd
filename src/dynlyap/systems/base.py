# src/dynlyap/systems/base.py
from __future__ import annotations

import copy
from typing import Literal
import numpy as np

from dynlyap.errors import ConfigError

__all__ = ["SystemKind", "DynamicalSystem", "coerce_state"]

# Closed set of variant tags. Algorithms dispatch on these.
SystemKind = Literal["discrete", "big_discrete", "discrete_1d", "continuous"]


def coerce_state(state, *, who: str) -> np.ndarray:
    """Copy ``state`` into a fresh 1D float64 array (guard only; not for hot loops)."""
    arr = np.array(state, dtype=np.float64, copy=True)
    if arr.ndim == 0:
        arr = arr.reshape((1,))
    if arr.ndim != 1:
        raise ConfigError(f"{who} state must be 1D; got shape {arr.shape}")
    if arr.size == 0:
        raise ConfigError(f"{who} state must have at least one component")
    return arr


class DynamicalSystem:
    """
    Common surface of the system representations.

    Subclasses set ``kind`` and store the current state in ``_state``. Reading
    ``state`` returns a copy, so algorithms never mutate the caller's system.
    """

    kind: SystemKind

    def __init__(self, state) -> None:
        self._state = coerce_state(state, who=type(self).__name__)

    @property
    def dimension(self) -> int:
        return int(self._state.size)

    @property
    def state(self) -> np.ndarray:
        return self._state.copy()

    def set_state(self, state) -> "DynamicalSystem":
        """Return a copy of this system holding ``state``."""
        new_state = coerce_state(state, who=type(self).__name__)
        if new_state.size != self.dimension:
            raise ConfigError(
                f"{type(self).__name__}.set_state expects {self.dimension} components; "
                f"got {new_state.size}"
            )
        other = copy.copy(self)
        other._state = new_state
        return other

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, dimension={self.dimension})"
