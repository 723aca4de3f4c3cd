from .integrator import ODEIntegrator, state_view, tangent_view, variational_integrator

__all__ = ["ODEIntegrator", "variational_integrator", "state_view", "tangent_view"]
