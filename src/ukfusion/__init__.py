"""
ukfusion is an unscented Kalman filter for tracking a single target from
laser and radar measurements with a CTRV motion model, implemented in JAX.
"""

from .constants import (
    N_X,
    N_AUG,
    N_SIGMA,
    LAMBDA,
    YAW_RATE_THRESHOLD,
)

from .config import set_dtype, get_dtype

from .errors import (
    UKFusionError,
    NumericalError,
    MeasurementError,
)

from .measurement import (
    SensorType,
    Measurement,
)

from .utils import normalize_angle

from .estimation import (
    FilterState,
    UKFConfig,
    Prediction,
    UpdateResult,
    generate_sigma_points,
    predict,
    update_lidar,
    update_radar,
)

from .tracker import (
    UnscentedKalmanFilter,
    run_filter,
)

from .evaluation import (
    state_to_cartesian,
    rmse,
    nis_exceedance_rate,
)

__all__ = [
    # Constants
    "N_X",
    "N_AUG",
    "N_SIGMA",
    "LAMBDA",
    "YAW_RATE_THRESHOLD",
    # Config
    "set_dtype",
    "get_dtype",
    # Errors
    "UKFusionError",
    "NumericalError",
    "MeasurementError",
    # Measurements
    "SensorType",
    "Measurement",
    # Utils
    "normalize_angle",
    # Estimation
    "FilterState",
    "UKFConfig",
    "Prediction",
    "UpdateResult",
    "generate_sigma_points",
    "predict",
    "update_lidar",
    "update_radar",
    # Tracker
    "UnscentedKalmanFilter",
    "run_filter",
    # Evaluation
    "state_to_cartesian",
    "rmse",
    "nis_exceedance_rate",
]
