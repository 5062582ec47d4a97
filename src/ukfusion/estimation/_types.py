"""Type definitions for the CTRV unscented filter.

Provides the core data types passed between the filter stages:

- :class:`FilterState`: Current state estimate and covariance matrix.
- :class:`UKFConfig`: Sensor switches and fixed noise standard deviations.
- :class:`SigmaPoints`: Augmented sigma points, their weights and a
  validity tag.
- :class:`Prediction`: Predicted state plus the propagated sigma points
  consumed by the next measurement update.
- :class:`UpdateResult`: Output of a measurement update, with diagnostic
  quantities (innovation, innovation covariance, Kalman gain, NIS).

All types are :class:`~typing.NamedTuple` instances, which JAX treats as
pytrees automatically. This means they work seamlessly with ``jax.jit``,
``jax.vmap``, and ``jax.lax`` control flow primitives.
"""

from __future__ import annotations

import math
from typing import NamedTuple

from jax import Array


class FilterState(NamedTuple):
    """State of the CTRV filter.

    Attributes:
        x: State estimate ``[px, py, v, yaw, yaw_rate]`` of shape ``(5,)``.
            ``yaw`` may hold any real value; it is periodic in ``2*pi``.
        P: Error covariance matrix of shape ``(5, 5)``. Must be symmetric
            positive semi-definite.
    """

    x: Array
    P: Array


class UKFConfig(NamedTuple):
    """Configuration of the unscented filter.

    All values are fixed for the life of a filter. Defaults are tuned for
    a bicycle-scale target observed by automotive laser and radar sensors.

    Attributes:
        use_laser: Process laser measurements. When ``False``, laser
            measurements are only used to seed an uninitialized filter.
            Default: True.
        use_radar: Same as *use_laser* for radar measurements. Default: True.
        process_noise_accel_std: Longitudinal acceleration noise [m/s^2].
            Default: 2.0.
        process_noise_yawdd_std: Yaw acceleration noise [rad/s^2].
            Default: 0.4.
        laser_noise_std_x: Laser position noise along x [m]. Default: 0.15.
        laser_noise_std_y: Laser position noise along y [m]. Default: 0.15.
        radar_noise_std_range: Radar range noise [m]. Default: 0.3.
        radar_noise_std_bearing: Radar bearing noise [rad]. Default: 0.03.
        radar_noise_std_range_rate: Radar range-rate noise [m/s].
            Default: 0.3.
    """

    use_laser: bool = True
    use_radar: bool = True
    process_noise_accel_std: float = 2.0
    process_noise_yawdd_std: float = 0.4
    laser_noise_std_x: float = 0.15
    laser_noise_std_y: float = 0.15
    radar_noise_std_range: float = 0.3
    radar_noise_std_bearing: float = 0.03
    radar_noise_std_range_rate: float = 0.3

    def validate(self) -> UKFConfig:
        """Check that every noise standard deviation is positive and finite.

        Returns:
            UKFConfig: ``self``, to allow chaining.

        Raises:
            ValueError: If a standard deviation is zero, negative or not
                finite.
        """
        for name in self._fields[2:]:
            value = getattr(self, name)
            if not (math.isfinite(value) and value > 0.0):
                raise ValueError(f"{name} must be positive and finite, got {value!r}")
        return self


class SigmaPoints(NamedTuple):
    """Augmented sigma points and weights.

    Attributes:
        points: Sigma points of shape ``(15, 7)``, one row per point.
            Row 0 is the augmented mean.
        weights: Weights of shape ``(15,)``. They sum to one.
        valid: Scalar boolean, ``False`` when the augmented covariance was
            not positive definite and ``points`` is meaningless.
    """

    points: Array
    weights: Array
    valid: Array


class Prediction(NamedTuple):
    """Output of the motion prediction step.

    Attributes:
        state: Predicted :class:`FilterState`.
        sigma_points: Predicted (non-augmented) sigma points of shape
            ``(15, 5)``, consumed by the measurement update that follows.
        weights: Sigma point weights of shape ``(15,)``.
        valid: Scalar boolean, ``False`` when sigma point generation
            failed. ``state`` is then the input state, unchanged.
    """

    state: FilterState
    sigma_points: Array
    weights: Array
    valid: Array


class UpdateResult(NamedTuple):
    """Result of a measurement update step.

    Attributes:
        state: Updated :class:`FilterState`. Equal to the predicted state
            when ``valid`` is ``False``.
        innovation: Measurement residual ``z - z_pred`` of shape ``(m,)``,
            with angular components wrapped into ``(-pi, pi]``.
        innovation_covariance: Innovation covariance ``S`` of shape
            ``(m, m)``.
        kalman_gain: Kalman gain ``K`` of shape ``(5, m)``.
        nis: Normalized innovation squared
            ``innovation.T @ S^{-1} @ innovation``. Should follow a
            chi-squared distribution with ``m`` degrees of freedom.
        valid: Scalar boolean, ``False`` when ``S`` was singular or the
            measurement model was undefined for a sigma point.
    """

    state: FilterState
    innovation: Array
    innovation_covariance: Array
    kalman_gain: Array
    nis: Array
    valid: Array
