"""Filter state seeding."""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ukfusion.config import get_dtype
from ukfusion.constants import INITIAL_COVARIANCE_DIAGONAL, N_X
from ukfusion.estimation._types import FilterState
from ukfusion.measurement import SensorType, reading_to_position


def initial_covariance() -> Array:
    """Return the default initial covariance ``diag(0.15, 0.15, 1, 1, 1)``."""
    return jnp.diag(jnp.array(INITIAL_COVARIANCE_DIAGONAL, dtype=get_dtype()))


def initial_state(
    sensor: SensorType,
    reading: ArrayLike,
    P0: ArrayLike | None = None,
) -> FilterState:
    """Seed a filter state from the first measurement.

    Position comes from the reading (converted from polar for radar);
    speed, yaw and yaw rate start at zero.

    Args:
        sensor: Sensor that produced the reading.
        reading: Raw reading vector.
        P0: Initial covariance of shape ``(5, 5)``. Default:
            :func:`initial_covariance`.

    Returns:
        FilterState: Seeded state.
    """
    dtype = get_dtype()
    position = reading_to_position(sensor, reading)
    x = jnp.zeros(N_X, dtype=dtype).at[:2].set(position)
    P = initial_covariance() if P0 is None else jnp.asarray(P0, dtype=dtype)
    return FilterState(x=x, P=P)
