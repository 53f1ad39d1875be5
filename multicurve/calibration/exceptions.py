"""
Exceptions raised by the calibration engine.
"""


class CalibrationConfigurationError(ValueError):
    """Raised when a calibration spec references a curve or product type that cannot be resolved."""

    pass


class SolverError(RuntimeError):
    """Raised when the optimizer fails; the root cause is chained as ``__cause__``."""

    pass


class CalibrationCancelledError(SolverError):
    """Raised when a calibration run is cancelled through its cancel event."""

    pass


class CloneNotSupportedError(TypeError):
    """Raised when a clone (or an in-place write) is requested on an object that does not support it."""

    pass
