"""Exception hierarchy for ukfusion.

The pure estimation functions never raise on numerical problems (they must
stay traceable under ``jax.jit``); they return a ``valid`` tag instead.
:class:`~ukfusion.tracker.UnscentedKalmanFilter` turns those tags into
:class:`NumericalError`.
"""


class UKFusionError(RuntimeError):
    """Base exception for ukfusion errors."""


class NumericalError(UKFusionError, ArithmeticError):
    """Raised when a filter cycle cannot be computed.

    Covers a non-positive-definite augmented covariance, a singular
    innovation covariance, and a radar sigma point at zero range. The
    cycle is abandoned and the filter keeps its state from before it.
    """


class MeasurementError(UKFusionError, ValueError):
    """Raised when a measurement violates the caller contract.

    Examples are a reading of the wrong length for its sensor, a
    non-finite reading, or a timestamp earlier than the filter clock.
    """
