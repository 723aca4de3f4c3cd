# src/dynlyap/steppers/registry.py
from __future__ import annotations
from typing import Dict

from .base import StepperSpec

__all__ = ["register", "get_stepper", "registry"]

# canonical names and aliases share one namespace
_steppers: Dict[str, StepperSpec] = {}


def register(spec: StepperSpec) -> None:
    """
    Make ``spec`` reachable under ``spec.meta.name`` and each of its aliases.

    Re-registering the same instance is a no-op; claiming a name held by a
    different stepper raises ValueError.
    """
    for key in (spec.meta.name, *spec.meta.aliases):
        owner = _steppers.get(key)
        if owner is not None and owner is not spec:
            raise ValueError(
                f"Stepper name '{key}' is taken by '{owner.meta.name}'"
            )
    for key in (spec.meta.name, *spec.meta.aliases):
        _steppers[key] = spec


def get_stepper(name: str) -> StepperSpec:
    """Look up a stepper by name or alias; KeyError when unknown."""
    try:
        return _steppers[name]
    except KeyError:
        raise KeyError(
            f"Unknown stepper '{name}'; available: {', '.join(sorted(_steppers))}"
        ) from None


def registry() -> Dict[str, StepperSpec]:
    """Snapshot of the name -> stepper mapping."""
    return dict(_steppers)
