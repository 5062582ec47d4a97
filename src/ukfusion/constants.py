"""Fixed dimensions and numerical constants of the CTRV unscented filter.

State vector layout is ``[px, py, v, yaw, yaw_rate]``; the augmented state
appends the longitudinal and yaw acceleration noise terms.
"""

N_X = 5
"""Dimension of the CTRV state vector."""

N_AUG = 7
"""Dimension of the augmented state (state plus two process-noise terms)."""

N_SIGMA = 2 * N_AUG + 1
"""Number of sigma points."""

LAMBDA = 3 - N_AUG
"""Sigma point spreading parameter."""

N_LASER = 2
"""Dimension of a laser measurement ``[px, py]``."""

N_RADAR = 3
"""Dimension of a radar measurement ``[rho, theta, rho_dot]``."""

YAW_INDEX = 3
"""Index of the heading angle in the state vector."""

BEARING_INDEX = 1
"""Index of the bearing angle in the radar measurement vector."""

YAW_RATE_THRESHOLD = 0.001
"""Yaw rates at or below this magnitude [rad/s] use straight-line motion."""

US_PER_SECOND = 1_000_000.0
"""Measurement timestamps are in microseconds."""

INITIAL_COVARIANCE_DIAGONAL = (0.15, 0.15, 1.0, 1.0, 1.0)
"""Diagonal of the initial state covariance: confident in position,
agnostic on speed, heading and yaw rate."""

CHI2_95 = {2: 5.991, 3: 7.815}
"""95% quantiles of the chi-square distribution by degrees of freedom,
used to judge NIS consistency for laser (2) and radar (3) updates."""
