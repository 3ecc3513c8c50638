"""Exception types raised by the optimization engine."""


class ConfigurationError(ValueError):
    """Raised before a run starts when its configuration cannot work."""


class PopulationCollapseError(RuntimeError):
    """Raised when selection leaves a genetic population empty."""
