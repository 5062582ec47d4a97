"""Unscented Kalman filter building blocks for CTRV tracking.

Available components:

- :class:`FilterState` -- Filter state (estimate and covariance)
- :class:`UKFConfig` -- Sensor switches and noise configuration
- :class:`SigmaPoints` -- Augmented sigma points with weights
- :class:`Prediction` -- Predicted state and propagated sigma points
- :class:`UpdateResult` -- Update result with diagnostics
- :func:`generate_sigma_points` -- Augmented sigma point generation
- :func:`predict` -- CTRV sigma point propagation
- :func:`update_lidar` -- Laser measurement update
- :func:`update_radar` -- Radar measurement update

All functions are compatible with ``jax.jit`` and ``jax.lax.scan``.
Numerical failures are reported through the ``valid`` field of the
returned value rather than by raising.
"""

from ukfusion.estimation._types import (
    FilterState,
    Prediction,
    SigmaPoints,
    UKFConfig,
    UpdateResult,
)
from ukfusion.estimation.lidar import lidar_measurement, lidar_noise, update_lidar
from ukfusion.estimation.motion import ctrv_transition, predict
from ukfusion.estimation.radar import (
    radar_measurement,
    radar_noise,
    radar_sigma_points,
    update_radar,
)
from ukfusion.estimation.sigma_points import (
    augment,
    generate_sigma_points,
    sigma_points_from,
    sigma_weights,
)
from ukfusion.estimation.state import initial_covariance, initial_state

__all__ = [
    "FilterState",
    "UKFConfig",
    "SigmaPoints",
    "Prediction",
    "UpdateResult",
    "sigma_weights",
    "augment",
    "sigma_points_from",
    "generate_sigma_points",
    "ctrv_transition",
    "predict",
    "lidar_measurement",
    "lidar_noise",
    "update_lidar",
    "radar_measurement",
    "radar_noise",
    "radar_sigma_points",
    "update_radar",
    "initial_covariance",
    "initial_state",
]
