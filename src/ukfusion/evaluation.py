"""Accuracy and consistency metrics for filter output.

Estimates are compared with ground truth in Cartesian position/velocity
``[px, py, vx, vy]``. Filter consistency is judged by how often the NIS
exceeds the 95% chi-square limit for the measurement dimension; a well
tuned filter exceeds it about 5% of the time.
"""

from __future__ import annotations

from collections.abc import Sequence

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ukfusion.config import get_dtype
from ukfusion.constants import CHI2_95
from ukfusion.estimation import FilterState


def state_to_cartesian(x: ArrayLike) -> Array:
    """Convert a CTRV state to ``[px, py, vx, vy]``.

    Args:
        x: State ``[px, py, v, yaw, yaw_rate]``, or a stack of states of
            shape ``(N, 5)``.

    Returns:
        jax.Array: Shape ``(4,)`` or ``(N, 4)``.
    """
    x = jnp.asarray(x, dtype=get_dtype())
    px, py, v, yaw = x[..., 0], x[..., 1], x[..., 2], x[..., 3]
    return jnp.stack([px, py, v * jnp.cos(yaw), v * jnp.sin(yaw)], axis=-1)


def estimates_to_array(estimates: Sequence[FilterState]) -> Array:
    """Stack filter states into Cartesian estimates of shape ``(N, 4)``."""
    if not estimates:
        raise ValueError("No estimates given")
    return jax.vmap(state_to_cartesian)(jnp.stack([fs.x for fs in estimates]))


def rmse(estimates: ArrayLike, ground_truth: ArrayLike) -> Array:
    """Root mean squared error per component.

    Args:
        estimates: Estimates of shape ``(N, k)``.
        ground_truth: Ground truth of shape ``(N, k)``.

    Returns:
        jax.Array: RMSE of shape ``(k,)``.

    Raises:
        ValueError: If the inputs are empty or their shapes differ.
    """
    dtype = get_dtype()
    estimates = jnp.asarray(estimates, dtype=dtype)
    ground_truth = jnp.asarray(ground_truth, dtype=dtype)
    if estimates.size == 0:
        raise ValueError("No estimates given")
    if estimates.shape != ground_truth.shape:
        raise ValueError(
            f"Estimates shape {estimates.shape} does not match ground truth {ground_truth.shape}"
        )
    return jnp.sqrt(jnp.mean((estimates - ground_truth) ** 2, axis=0))


def nis_exceedance_rate(nis: ArrayLike, dof: int) -> float:
    """Fraction of NIS values above the 95% chi-square limit.

    Args:
        nis: NIS values.
        dof: Measurement dimension, 2 for laser or 3 for radar.

    Returns:
        float: Fraction in ``[0, 1]``.

    Raises:
        ValueError: If *dof* is not 2 or 3, or *nis* is empty.
    """
    if dof not in CHI2_95:
        raise ValueError(f"dof must be one of {sorted(CHI2_95)}, got {dof}")
    nis = jnp.asarray(nis, dtype=get_dtype())
    if nis.size == 0:
        raise ValueError("No NIS values given")
    return float(jnp.mean(nis > CHI2_95[dof]))
