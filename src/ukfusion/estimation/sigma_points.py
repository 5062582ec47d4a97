"""Augmented sigma point generation.

The CTRV state is augmented with the two zero-mean process-noise terms
(longitudinal and yaw acceleration) so that noise passes through the
nonlinear motion model instead of being added linearly afterwards.

Sigma points are drawn along the columns of the lower Cholesky factor of
the augmented covariance, scaled by ``sqrt(lambda + n_aug)`` with
``lambda = 3 - n_aug``.  Their weighted mean and covariance reproduce the
augmented mean and covariance exactly.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array

from ukfusion.config import get_dtype
from ukfusion.constants import N_AUG, N_X
from ukfusion.estimation._types import FilterState, SigmaPoints, UKFConfig


def sigma_weights(n_aug: int = N_AUG, lam: float | None = None) -> Array:
    """Return the sigma point weights.

    ``w0 = lam / (lam + n_aug)`` and ``wi = 1 / (2 * (lam + n_aug))`` for
    the remaining ``2 * n_aug`` points. The weights sum to one for any
    ``lam + n_aug > 0``.

    Args:
        n_aug: Augmented state dimension. Default: 7.
        lam: Spreading parameter. Default: ``3 - n_aug``.

    Returns:
        jax.Array: Weights of shape ``(2 * n_aug + 1,)``.

    Raises:
        ValueError: If ``lam + n_aug`` is not positive.
    """
    dtype = get_dtype()
    if lam is None:
        lam = 3 - n_aug
    if lam + n_aug <= 0:
        raise ValueError(f"lam + n_aug must be positive, got {lam + n_aug}")

    w0 = jnp.asarray(lam / (lam + n_aug), dtype=dtype)
    wi = jnp.asarray(0.5 / (lam + n_aug), dtype=dtype)
    return jnp.concatenate([w0[None], jnp.full(2 * n_aug, wi, dtype=dtype)])


def augment(filter_state: FilterState, config: UKFConfig) -> tuple[Array, Array]:
    """Build the augmented mean and covariance.

    Args:
        filter_state: Current filter state ``(x, P)``.
        config: Filter configuration providing the process noise.

    Returns:
        A tuple ``(x_aug, P_aug)`` of shapes ``(7,)`` and ``(7, 7)``.
        ``P_aug`` is block diagonal: ``P`` on top, then the longitudinal
        and yaw acceleration variances.
    """
    dtype = get_dtype()
    x = jnp.asarray(filter_state.x, dtype=dtype)
    P = jnp.asarray(filter_state.P, dtype=dtype)

    x_aug = jnp.concatenate([x, jnp.zeros(N_AUG - N_X, dtype=dtype)])

    P_aug = jnp.zeros((N_AUG, N_AUG), dtype=dtype)
    P_aug = P_aug.at[:N_X, :N_X].set(P)
    P_aug = P_aug.at[N_X, N_X].set(config.process_noise_accel_std**2)
    P_aug = P_aug.at[N_X + 1, N_X + 1].set(config.process_noise_yawdd_std**2)

    return x_aug, P_aug


def sigma_points_from(x_aug: Array, P_aug: Array) -> SigmaPoints:
    """Generate sigma points for an arbitrary mean and covariance.

    Args:
        x_aug: Mean of shape ``(n,)``.
        P_aug: Covariance of shape ``(n, n)``.

    Returns:
        SigmaPoints: ``2n + 1`` points. ``valid`` is ``False`` if
        ``P_aug`` is not positive definite, in which case every point
        equals the mean.
    """
    n = x_aug.shape[0]
    lam = 3 - n

    # JAX returns NaNs rather than raising for a non-positive-definite input
    L = jnp.linalg.cholesky(P_aug)
    valid = jnp.all(jnp.isfinite(L))
    L = jnp.where(valid, L, jnp.zeros_like(L))

    spread = jnp.sqrt(jnp.asarray(lam + n, dtype=x_aug.dtype)) * L.T
    points = jnp.concatenate([x_aug[None, :], x_aug[None, :] + spread, x_aug[None, :] - spread])

    return SigmaPoints(points=points, weights=sigma_weights(n, lam), valid=valid)


def generate_sigma_points(filter_state: FilterState, config: UKFConfig) -> SigmaPoints:
    """Generate the 15 augmented sigma points of the CTRV filter.

    Args:
        filter_state: Current filter state ``(x, P)``.
        config: Filter configuration providing the process noise.

    Returns:
        SigmaPoints: Points of shape ``(15, 7)`` and weights of shape
        ``(15,)``. Row ``i + 1`` is offset along the positive ``i``-th
        Cholesky column and row ``i + 8`` along the negative one.

    Examples:
        ```python
        import jax.numpy as jnp
        from ukfusion.estimation import FilterState, UKFConfig, generate_sigma_points

        fs = FilterState(x=jnp.zeros(5), P=jnp.eye(5))
        sigma = generate_sigma_points(fs, UKFConfig())
        sigma.points.shape  # (15, 7)
        ```
    """
    x_aug, P_aug = augment(filter_state, config)
    return sigma_points_from(x_aug, P_aug)
