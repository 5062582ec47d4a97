"""Sensor measurements consumed by the filter.

A :class:`Measurement` carries the sensor that produced it, the raw reading
vector, and a timestamp in microseconds:

- ``LASER``: ``[px, py]`` Cartesian position [m].
- ``RADAR``: ``[rho, theta, rho_dot]`` range [m], bearing [rad] and
  range-rate [m/s].
"""

from __future__ import annotations

import enum
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ukfusion.config import get_dtype
from ukfusion.constants import N_LASER, N_RADAR
from ukfusion.errors import MeasurementError


class SensorType(enum.Enum):
    """Sensor that produced a measurement."""

    LASER = "L"
    RADAR = "R"

    @property
    def dim(self) -> int:
        """Length of a reading from this sensor."""
        return N_LASER if self is SensorType.LASER else N_RADAR


class Measurement(NamedTuple):
    """A single sensor reading.

    Attributes:
        sensor: Sensor that produced the reading.
        reading: Raw reading vector, length 2 for ``LASER`` and 3 for
            ``RADAR``.
        timestamp: Measurement time in microseconds. Must not decrease
            along a stream fed to one filter.
    """

    sensor: SensorType
    reading: Array
    timestamp: int

    @classmethod
    def laser(cls, px: float, py: float, timestamp: int) -> Measurement:
        """Build a laser measurement from a Cartesian position."""
        return cls(SensorType.LASER, jnp.array([px, py], dtype=get_dtype()), int(timestamp))

    @classmethod
    def radar(cls, rho: float, theta: float, rho_dot: float, timestamp: int) -> Measurement:
        """Build a radar measurement from range, bearing and range-rate."""
        return cls(
            SensorType.RADAR,
            jnp.array([rho, theta, rho_dot], dtype=get_dtype()),
            int(timestamp),
        )


def validate_measurement(measurement: Measurement) -> Array:
    """Check a measurement against its sensor contract.

    Args:
        measurement: Measurement to check.

    Returns:
        jax.Array: The reading as a 1-D array in the configured dtype.

    Raises:
        MeasurementError: If the sensor type is unknown, the reading has
            the wrong length for its sensor, or contains non-finite values.
    """
    if not isinstance(measurement.sensor, SensorType):
        raise MeasurementError(f"Unknown sensor type {measurement.sensor!r}")

    reading = jnp.ravel(jnp.asarray(measurement.reading, dtype=get_dtype()))
    expected = measurement.sensor.dim
    if reading.shape[0] != expected:
        raise MeasurementError(
            f"{measurement.sensor.name} reading must have {expected} components, "
            f"got {reading.shape[0]}"
        )
    if not bool(jnp.all(jnp.isfinite(reading))):
        raise MeasurementError(f"{measurement.sensor.name} reading is not finite: {reading}")
    return reading


def reading_to_position(sensor: SensorType, reading: ArrayLike) -> Array:
    """Convert a raw reading to a Cartesian position ``[px, py]``.

    Laser readings are already Cartesian; radar readings are converted
    with ``px = rho*cos(theta)``, ``py = rho*sin(theta)``.

    Args:
        sensor: Sensor that produced the reading.
        reading: Raw reading vector.

    Returns:
        jax.Array: Position of shape ``(2,)``.
    """
    reading = jnp.asarray(reading, dtype=get_dtype())
    if sensor is SensorType.LASER:
        return reading[:2]
    rho, theta = reading[0], reading[1]
    return jnp.stack([rho * jnp.cos(theta), rho * jnp.sin(theta)])
