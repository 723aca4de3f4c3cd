from __future__ import annotations

from .errors import ConfigError, DegenerateRunError, DynlyapError, StepFailError
from .config import (
    BenettinConfig,
    SpectrumConfig,
    benettin_config_from_toml,
    default_inittest,
    load_config,
    spectrum_config_from_toml,
)
from .systems import BigDiscreteDS, ContinuousDS, DiscreteDS, DiscreteDS1D
from .integrate import ODEIntegrator
from .analysis import (
    LyapunovConvergence,
    compute_max_exponent,
    compute_spectrum,
    evolve,
    lyapunov,
    lyapunovs,
)

__version__ = "0.1.0"

__all__ = [
    # Systems
    "DiscreteDS", "BigDiscreteDS", "DiscreteDS1D", "ContinuousDS",
    # Algorithms
    "lyapunovs", "lyapunov", "compute_spectrum", "compute_max_exponent",
    "evolve", "LyapunovConvergence",
    # Configuration
    "BenettinConfig", "SpectrumConfig", "default_inittest",
    "load_config", "benettin_config_from_toml", "spectrum_config_from_toml",
    # Integrator
    "ODEIntegrator",
    # Errors
    "DynlyapError", "ConfigError", "DegenerateRunError", "StepFailError",
]
