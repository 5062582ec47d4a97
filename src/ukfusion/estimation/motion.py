"""CTRV motion model and the unscented prediction step.

The constant turn-rate and velocity (CTRV) model assumes the target keeps
its speed and yaw rate between measurements. Each augmented sigma point
carries its own longitudinal and yaw acceleration noise sample, which is
applied as a second-order kinematic term after the noiseless propagation.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ukfusion.config import get_dtype
from ukfusion.constants import YAW_INDEX, YAW_RATE_THRESHOLD
from ukfusion.estimation._types import FilterState, Prediction, UKFConfig
from ukfusion.estimation.sigma_points import generate_sigma_points
from ukfusion.utils import normalize_component


def ctrv_transition(point: ArrayLike, dt: ArrayLike) -> Array:
    """Propagate one augmented sigma point through the CTRV model.

    For ``|yaw_rate| > 0.001`` rad/s the target follows a circular arc::

        px' = px + v/yaw_rate * (sin(yaw + yaw_rate*dt) - sin(yaw))
        py' = py + v/yaw_rate * (cos(yaw) - cos(yaw + yaw_rate*dt))

    otherwise a straight line along the current heading. Speed and yaw
    rate are held, yaw advances by ``yaw_rate * dt``, and the noise terms
    ``nu_a``, ``nu_yawdd`` are added as::

        px' += 0.5*dt^2*cos(yaw)*nu_a      v'        += dt*nu_a
        py' += 0.5*dt^2*sin(yaw)*nu_a      yaw'      += 0.5*dt^2*nu_yawdd
                                           yaw_rate' += dt*nu_yawdd

    Args:
        point: Augmented state ``[px, py, v, yaw, yaw_rate, nu_a, nu_yawdd]``.
        dt: Elapsed time in seconds, ``>= 0``.

    Returns:
        jax.Array: Predicted state ``[px, py, v, yaw, yaw_rate]``.
    """
    px, py, v, yaw, yawd, nu_a, nu_yawdd = point

    yaw_p = yaw + yawd * dt

    turning = jnp.abs(yawd) > YAW_RATE_THRESHOLD
    # Keep the unused branch finite so jnp.where does not leak NaNs
    safe_yawd = jnp.where(turning, yawd, 1.0)
    px_p = jnp.where(
        turning,
        px + v / safe_yawd * (jnp.sin(yaw_p) - jnp.sin(yaw)),
        px + v * dt * jnp.cos(yaw),
    )
    py_p = jnp.where(
        turning,
        py + v / safe_yawd * (jnp.cos(yaw) - jnp.cos(yaw_p)),
        py + v * dt * jnp.sin(yaw),
    )

    half_dt2 = 0.5 * dt * dt
    return jnp.stack(
        [
            px_p + half_dt2 * jnp.cos(yaw) * nu_a,
            py_p + half_dt2 * jnp.sin(yaw) * nu_a,
            v + dt * nu_a,
            yaw_p + half_dt2 * nu_yawdd,
            yawd + dt * nu_yawdd,
        ]
    )


def predict(filter_state: FilterState, dt: ArrayLike, config: UKFConfig) -> Prediction:
    """Propagate the filter state forward by ``dt`` seconds.

    Generates the augmented sigma points, propagates each through
    :func:`ctrv_transition` via ``jax.vmap``, and recombines them into the
    predicted mean and covariance. Yaw residuals are wrapped into
    ``(-pi, pi]`` before entering the covariance.

    Args:
        filter_state: Current filter state ``(x, P)``.
        dt: Elapsed time in seconds. Must be ``>= 0``; negative values are
            rejected by the caller, not here.
        config: Filter configuration providing the process noise.

    Returns:
        Prediction: Predicted state, predicted sigma points of shape
        ``(15, 5)`` and their weights. If the augmented covariance is not
        positive definite, ``valid`` is ``False`` and the state is
        returned unchanged.

    Examples:
        ```python
        import jax.numpy as jnp
        from ukfusion.estimation import FilterState, UKFConfig, predict

        fs = FilterState(x=jnp.array([1.0, 0.8, 2.0, 0.1, 0.0]), P=jnp.eye(5))
        pred = predict(fs, 0.1, UKFConfig())
        pred.state.x
        ```
    """
    dtype = get_dtype()
    x = jnp.asarray(filter_state.x, dtype=dtype)
    P = jnp.asarray(filter_state.P, dtype=dtype)
    dt = jnp.asarray(dt, dtype=dtype)

    sigma = generate_sigma_points(FilterState(x=x, P=P), config)
    weights = sigma.weights

    propagated = jax.vmap(ctrv_transition, in_axes=(0, None))(sigma.points, dt)

    # Weighted mean
    x_pred = jnp.einsum("i,ij->j", weights, propagated)

    # Weighted covariance
    diff = normalize_component(propagated - x_pred[None, :], YAW_INDEX)
    P_pred = jnp.einsum("i,ij,ik->jk", weights, diff, diff)

    state = FilterState(
        x=jnp.where(sigma.valid, x_pred, x),
        P=jnp.where(sigma.valid, P_pred, P),
    )
    return Prediction(state=state, sigma_points=propagated, weights=weights, valid=sigma.valid)
