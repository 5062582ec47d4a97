"""Measurement log loading.

Reads the tab-separated laser/radar logs produced by the tracking
simulator into Polars DataFrames, and converts them to
:class:`~ukfusion.measurement.Measurement` values and ground-truth arrays.
"""

from ukfusion.datasets._parsers import (
    GROUND_TRUTH_COLUMNS,
    dataframe_to_measurements,
    ground_truth_array,
    load_measurement_log,
)

__all__ = [
    "GROUND_TRUTH_COLUMNS",
    "dataframe_to_measurements",
    "ground_truth_array",
    "load_measurement_log",
]
