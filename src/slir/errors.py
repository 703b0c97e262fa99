"""Exception types raised by the simulation engine."""


class ConfigurationError(ValueError):
    """Invalid simulation parameters, raised before any state is created."""


class SinkError(RuntimeError):
    """A graph or record sink failed to accept a snapshot; the run is aborted."""
