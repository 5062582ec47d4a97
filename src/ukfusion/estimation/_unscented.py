"""Unscented measurement correction shared by the laser and radar updaters."""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array

from ukfusion.config import get_dtype
from ukfusion.constants import YAW_INDEX
from ukfusion.estimation._types import FilterState, Prediction, UpdateResult
from ukfusion.utils import normalize_component


def unscented_update(
    prediction: Prediction,
    z: Array,
    z_sigma: Array,
    R: Array,
    angle_index: int | None = None,
    model_valid: Array | bool = True,
) -> UpdateResult:
    """Correct a prediction with a measurement mapped through sigma points.

    Args:
        prediction: Output of :func:`~ukfusion.estimation.predict`.
        z: Measurement vector of shape ``(m,)``.
        z_sigma: Predicted sigma points in measurement space, shape
            ``(15, m)``.
        R: Measurement noise covariance of shape ``(m, m)``.
        angle_index: Measurement component holding an angle, wrapped into
            ``(-pi, pi]`` in every residual. ``None`` if there is none.
        model_valid: ``False`` if the measurement model was undefined for
            some sigma point.

    Returns:
        UpdateResult: Updated state and diagnostics. When ``S`` is
        singular or *model_valid* is ``False`` the predicted state is
        returned unchanged with ``valid=False``.
    """
    dtype = get_dtype()
    x = prediction.state.x
    P = prediction.state.P
    weights = prediction.weights
    z = jnp.asarray(z, dtype=dtype)

    # Predicted measurement (weighted mean)
    z_pred = jnp.einsum("i,ij->j", weights, z_sigma)

    z_diff = z_sigma - z_pred[None, :]
    innovation = z - z_pred
    if angle_index is not None:
        z_diff = normalize_component(z_diff, angle_index)
        innovation = normalize_component(innovation, angle_index)

    # Innovation covariance
    S = jnp.einsum("i,ij,ik->jk", weights, z_diff, z_diff) + R
    # Cholesky yields a non-finite factor when S is not positive definite
    S_factorizable = jnp.all(jnp.isfinite(jnp.linalg.cholesky(S)))

    # Cross-covariance between state and measurement, shape (5, m)
    x_diff = normalize_component(prediction.sigma_points - x[None, :], YAW_INDEX)
    Tc = jnp.einsum("i,ij,ik->jk", weights, x_diff, z_diff)

    # Kalman gain: K = Tc @ S^{-1}
    K = jnp.linalg.solve(S, Tc.T).T

    x_upd = x + K @ innovation
    P_upd = P - K @ S @ K.T
    nis = innovation @ jnp.linalg.solve(S, innovation)

    valid = (
        jnp.asarray(model_valid)
        & prediction.valid
        & S_factorizable
        & jnp.isfinite(nis)
        & jnp.all(jnp.isfinite(x_upd))
        & jnp.all(jnp.isfinite(P_upd))
    )

    return UpdateResult(
        state=FilterState(
            x=jnp.where(valid, x_upd, x),
            P=jnp.where(valid, P_upd, P),
        ),
        innovation=innovation,
        innovation_covariance=S,
        kalman_gain=K,
        nis=jnp.where(valid, nis, jnp.nan),
        valid=valid,
    )
