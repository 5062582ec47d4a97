"""Radar measurement model and update.

A radar return observes range ``rho``, bearing ``theta`` and range-rate
``rho_dot`` in polar coordinates centred on the sensor. The bearing is an
angle and every residual involving it is wrapped into ``(-pi, pi]``.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ukfusion.config import get_dtype, get_range_tolerance
from ukfusion.constants import BEARING_INDEX
from ukfusion.estimation._types import Prediction, UKFConfig, UpdateResult
from ukfusion.estimation._unscented import unscented_update


def radar_measurement(state: ArrayLike) -> Array:
    """Map a CTRV state to radar measurement space ``[rho, theta, rho_dot]``.

    ``rho = sqrt(px^2 + py^2)``, ``theta = atan2(py, px)`` and
    ``rho_dot = (px*v*cos(yaw) + py*v*sin(yaw)) / rho``.

    ``rho_dot`` is undefined at the sensor origin; it is reported as 0
    there so the function stays NaN-free. Use :func:`radar_sigma_points`
    to detect the degenerate case.

    Args:
        state: State vector ``[px, py, v, yaw, yaw_rate]``.

    Returns:
        jax.Array: Radar measurement of shape ``(3,)``.
    """
    state = jnp.asarray(state, dtype=get_dtype())
    px, py, v, yaw = state[0], state[1], state[2], state[3]

    rho = jnp.sqrt(px * px + py * py)
    theta = jnp.arctan2(py, px)

    vx = v * jnp.cos(yaw)
    vy = v * jnp.sin(yaw)
    nonzero = rho > 0.0
    rho_dot = jnp.where(nonzero, (px * vx + py * vy) / jnp.where(nonzero, rho, 1.0), 0.0)

    return jnp.stack([rho, theta, rho_dot])


def radar_sigma_points(sigma_points: ArrayLike) -> tuple[Array, Array]:
    """Map predicted sigma points to radar measurement space.

    Args:
        sigma_points: Predicted sigma points of shape ``(k, 5)``.

    Returns:
        A tuple ``(z_sigma, valid)``: measurements of shape ``(k, 3)`` and
        a scalar boolean that is ``False`` when any point lies within the
        range tolerance of the sensor origin.
    """
    sigma_points = jnp.asarray(sigma_points, dtype=get_dtype())
    z_sigma = jax.vmap(radar_measurement)(sigma_points)
    valid = jnp.all(z_sigma[:, 0] > get_range_tolerance())
    return z_sigma, valid


def radar_noise(config: UKFConfig) -> Array:
    """Construct the radar measurement noise covariance.

    Args:
        config: Filter configuration.

    Returns:
        jax.Array: ``diag(range^2, bearing^2, range_rate^2)`` noise.
    """
    dtype = get_dtype()
    return jnp.diag(
        jnp.array(
            [
                config.radar_noise_std_range**2,
                config.radar_noise_std_bearing**2,
                config.radar_noise_std_range_rate**2,
            ],
            dtype=dtype,
        )
    )


def update_radar(prediction: Prediction, z: ArrayLike, config: UKFConfig) -> UpdateResult:
    """Incorporate a radar measurement into a prediction.

    Bearing residuals are wrapped into ``(-pi, pi]`` in the innovation
    covariance, the cross-covariance and the innovation itself; yaw
    residuals are wrapped in the cross-covariance.

    Args:
        prediction: Output of :func:`~ukfusion.estimation.predict`.
        z: Radar reading ``[rho, theta, rho_dot]``.
        config: Filter configuration providing the radar noise.

    Returns:
        UpdateResult: Updated state and diagnostics. ``valid`` is
        ``False`` if a predicted sigma point sits at zero range or ``S``
        is singular; the predicted state is then returned unchanged.
    """
    z_sigma, model_valid = radar_sigma_points(prediction.sigma_points)
    return unscented_update(
        prediction,
        z,
        z_sigma,
        radar_noise(config),
        angle_index=BEARING_INDEX,
        model_valid=model_valid,
    )
