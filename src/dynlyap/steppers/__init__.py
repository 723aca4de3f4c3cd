from .base import StepperMeta, StepperSpec
from .registry import register, get_stepper, registry

# Import concrete steppers to trigger auto-registration
from . import rk4, rk45

__all__ = [
    "StepperMeta", "StepperSpec",
    "register", "get_stepper", "registry",
]
