"""Stateful per-measurement CTRV tracker.

:class:`UnscentedKalmanFilter` owns the current state estimate and the
filter clock, and drives the pure functions of :mod:`ukfusion.estimation`
once per incoming measurement:

1. Seed the state from the first measurement (no prediction or update).
2. Predict across the elapsed time since the previous measurement.
3. Correct with the laser or radar updater matching the measurement.

A cycle either commits completely or raises and leaves the state, the
covariance and the clock exactly as they were before it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from ukfusion.config import get_dtype
from ukfusion.constants import N_X, US_PER_SECOND
from ukfusion.errors import MeasurementError, NumericalError
from ukfusion.estimation import (
    FilterState,
    UKFConfig,
    UpdateResult,
    initial_covariance,
    initial_state,
    predict,
    update_lidar,
    update_radar,
)
from ukfusion.measurement import Measurement, SensorType, validate_measurement

logger = logging.getLogger(__name__)


class UnscentedKalmanFilter:
    """CTRV unscented Kalman filter fusing laser and radar measurements.

    Args:
        config: Sensor switches and noise standard deviations. Default:
            ``UKFConfig()``.
        initial_covariance: Covariance assigned when the filter is seeded,
            shape ``(5, 5)``. Default: ``diag(0.15, 0.15, 1, 1, 1)``.

    Raises:
        ValueError: If a noise standard deviation in *config* is not
            positive, or *initial_covariance* has the wrong shape.

    Examples:
        ```python
        from ukfusion import Measurement, UnscentedKalmanFilter

        ukf = UnscentedKalmanFilter()
        ukf.process_measurement(Measurement.laser(1.0, 0.8, 0))
        ukf.process_measurement(Measurement.radar(1.28, 0.68, 3.0, 100_000))
        ukf.x
        ```
    """

    def __init__(
        self,
        config: UKFConfig | None = None,
        initial_covariance: ArrayLike | None = None,
    ) -> None:
        self._config = (config if config is not None else UKFConfig()).validate()
        if initial_covariance is None:
            self._P0 = None
        else:
            self._P0 = jnp.asarray(initial_covariance, dtype=get_dtype())
            if self._P0.shape != (N_X, N_X):
                raise ValueError(
                    f"initial_covariance must have shape ({N_X}, {N_X}), got {self._P0.shape}"
                )
        self.reset()

    def __repr__(self) -> str:
        return (
            f"UnscentedKalmanFilter(initialized={self._initialized}, "
            f"timestamp={self._timestamp}, x={self._state.x})"
        )

    def reset(self) -> None:
        """Return the filter to its uninitialized state."""
        P = initial_covariance() if self._P0 is None else self._P0
        self._state = FilterState(x=jnp.zeros(N_X, dtype=get_dtype()), P=P)
        self._initialized = False
        self._timestamp: int | None = None
        self._nis_history: list[tuple[SensorType, float]] = []

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def config(self) -> UKFConfig:
        """Filter configuration."""
        return self._config

    @property
    def state(self) -> FilterState:
        """Current state estimate and covariance."""
        return self._state

    @property
    def x(self) -> Array:
        """Current state estimate ``[px, py, v, yaw, yaw_rate]``."""
        return self._state.x

    @property
    def P(self) -> Array:
        """Current state covariance."""
        return self._state.P

    @property
    def initialized(self) -> bool:
        """Whether the filter has been seeded by a measurement."""
        return self._initialized

    @property
    def timestamp(self) -> int | None:
        """Timestamp [us] of the last committed measurement."""
        return self._timestamp

    @property
    def nis_history(self) -> list[tuple[SensorType, float]]:
        """NIS of every committed update, oldest first."""
        return list(self._nis_history)

    @property
    def nis_laser(self) -> float | None:
        """NIS of the most recent laser update."""
        return self._last_nis(SensorType.LASER)

    @property
    def nis_radar(self) -> float | None:
        """NIS of the most recent radar update."""
        return self._last_nis(SensorType.RADAR)

    def _last_nis(self, sensor: SensorType) -> float | None:
        for recorded, nis in reversed(self._nis_history):
            if recorded is sensor:
                return nis
        return None

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def sensor_enabled(self, sensor: SensorType) -> bool:
        """Whether measurements from *sensor* drive predict/update cycles."""
        if sensor is SensorType.LASER:
            return self._config.use_laser
        return self._config.use_radar

    def elapsed_seconds(self, timestamp: int) -> float:
        """Return the time in seconds from the filter clock to *timestamp*.

        Raises:
            MeasurementError: If the filter is uninitialized or
                *timestamp* is earlier than the filter clock.
        """
        if self._timestamp is None:
            raise MeasurementError("Filter clock is not set; process a measurement first")
        if timestamp < self._timestamp:
            raise MeasurementError(
                f"Measurement timestamp {timestamp} us precedes filter clock "
                f"{self._timestamp} us"
            )
        return (timestamp - self._timestamp) / US_PER_SECOND

    def process_measurement(self, measurement: Measurement) -> UpdateResult | None:
        """Run one filter cycle for *measurement*.

        The first measurement seeds the state, whichever sensor produced
        it. Afterwards, measurements from disabled sensors are ignored and
        every other measurement drives one prediction and one update.

        Args:
            measurement: Incoming measurement.

        Returns:
            UpdateResult | None: Diagnostics of the update, or ``None`` if
            the measurement seeded the filter or was ignored.

        Raises:
            MeasurementError: If the measurement is malformed or its
                timestamp precedes the filter clock.
            NumericalError: If the cycle could not be computed. The filter
                keeps its state from before the call.
        """
        reading = validate_measurement(measurement)
        sensor = measurement.sensor

        if not self._initialized:
            self._state = initial_state(sensor, reading, self._P0)
            self._timestamp = measurement.timestamp
            self._initialized = True
            logger.info(
                "Initialized from %s measurement at t=%d us: x=%s",
                sensor.name,
                measurement.timestamp,
                self._state.x,
            )
            return None

        if not self.sensor_enabled(sensor):
            logger.debug("Ignoring %s measurement at t=%d us", sensor.name, measurement.timestamp)
            return None

        dt = self.elapsed_seconds(measurement.timestamp)

        prediction = predict(self._state, dt, self._config)
        if not bool(prediction.valid):
            raise NumericalError(
                f"Augmented covariance is not positive definite at t={measurement.timestamp} us"
            )

        if sensor is SensorType.LASER:
            result = update_lidar(prediction, reading, self._config)
        else:
            result = update_radar(prediction, reading, self._config)
        if not bool(result.valid):
            raise NumericalError(
                f"{sensor.name} update failed at t={measurement.timestamp} us: "
                "singular innovation covariance or sigma point at zero range"
            )

        self._state = result.state
        self._timestamp = measurement.timestamp
        nis = float(result.nis)
        self._nis_history.append((sensor, nis))
        logger.debug(
            "%s update at t=%d us (dt=%.6f s): NIS=%.4f x=%s",
            sensor.name,
            measurement.timestamp,
            dt,
            nis,
            self._state.x,
        )
        return result


def run_filter(
    measurements: Iterable[Measurement],
    ukf: UnscentedKalmanFilter | None = None,
) -> list[FilterState]:
    """Feed a measurement stream through a filter.

    Cycles that raise :class:`~ukfusion.errors.NumericalError` are logged
    and skipped; the filter continues with the next measurement.
    :class:`~ukfusion.errors.MeasurementError` propagates.

    Args:
        measurements: Measurements in timestamp order.
        ukf: Filter to drive. Default: a new ``UnscentedKalmanFilter()``.

    Returns:
        list[FilterState]: The filter state after each measurement.
    """
    if ukf is None:
        ukf = UnscentedKalmanFilter()

    estimates: list[FilterState] = []
    skipped = 0
    for measurement in measurements:
        try:
            ukf.process_measurement(measurement)
        except NumericalError as exc:
            skipped += 1
            logger.warning("Skipping measurement at t=%d us: %s", measurement.timestamp, exc)
        estimates.append(ukf.state)

    if skipped:
        logger.warning("Skipped %d of %d measurements", skipped, len(estimates))
    return estimates
