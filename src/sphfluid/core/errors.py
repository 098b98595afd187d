from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid simulation tunables or initial placement, raised before any stepping."""


class LifecycleError(RuntimeError):
    """Operation not allowed in the simulation's current lifecycle state."""


class SimulationNotInitializedError(LifecycleError):
    """Raised when stepping or reading a simulation that has no particles placed yet."""
