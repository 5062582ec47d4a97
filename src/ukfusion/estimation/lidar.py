"""Laser measurement model and update.

A laser return observes the target position directly, so the measurement
model is linear and has no angular components.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ukfusion.config import get_dtype
from ukfusion.estimation._types import Prediction, UKFConfig, UpdateResult
from ukfusion.estimation._unscented import unscented_update


def lidar_measurement(state: ArrayLike) -> Array:
    """Map a CTRV state to laser measurement space ``[px, py]``.

    Args:
        state: State vector ``[px, py, v, yaw, yaw_rate]``.

    Returns:
        jax.Array: Position of shape ``(2,)``.
    """
    state = jnp.asarray(state, dtype=get_dtype())
    return state[:2]


def lidar_noise(config: UKFConfig) -> Array:
    """Construct the laser measurement noise covariance.

    Args:
        config: Filter configuration.

    Returns:
        jax.Array: ``diag(laser_noise_std_x^2, laser_noise_std_y^2)``.
    """
    dtype = get_dtype()
    return jnp.diag(
        jnp.array([config.laser_noise_std_x**2, config.laser_noise_std_y**2], dtype=dtype)
    )


def update_lidar(prediction: Prediction, z: ArrayLike, config: UKFConfig) -> UpdateResult:
    """Incorporate a laser measurement into a prediction.

    Args:
        prediction: Output of :func:`~ukfusion.estimation.predict`.
        z: Laser reading ``[px, py]``.
        config: Filter configuration providing the laser noise.

    Returns:
        UpdateResult: Updated state, innovation, innovation covariance,
        Kalman gain of shape ``(5, 2)`` and NIS.

    Examples:
        ```python
        import jax.numpy as jnp
        from ukfusion.estimation import FilterState, UKFConfig, predict, update_lidar

        config = UKFConfig()
        fs = FilterState(x=jnp.array([1.0, 0.8, 0.0, 0.0, 0.0]), P=jnp.eye(5))
        result = update_lidar(predict(fs, 0.05, config), jnp.array([1.1, 0.75]), config)
        result.nis
        ```
    """
    z_sigma = jax.vmap(lidar_measurement)(prediction.sigma_points)
    return unscented_update(prediction, z, z_sigma, lidar_noise(config))
