"""Parsing utilities for laser/radar measurement logs.

Each line of a log holds one measurement followed by optional ground
truth, separated by tabs or spaces::

    L  px   py     timestamp  gt_px gt_py gt_vx gt_vy [gt_yaw gt_yawrate]
    R  rho  theta  rho_dot  timestamp  gt_px gt_py gt_vx gt_vy [gt_yaw gt_yawrate]

Timestamps are integer microseconds.
"""

from __future__ import annotations

import logging
from pathlib import Path

import jax.numpy as jnp
import polars as pl
from jax import Array

from ukfusion.config import get_dtype
from ukfusion.measurement import Measurement, SensorType

logger = logging.getLogger(__name__)

GROUND_TRUTH_COLUMNS = ("gt_px", "gt_py", "gt_vx", "gt_vy")


def _parse_line(line: str, lineno: int) -> dict:
    fields = line.split()
    tag = fields[0]
    try:
        sensor = SensorType(tag)
    except ValueError:
        raise ValueError(f"Line {lineno}: unknown sensor tag {tag!r}") from None

    n = sensor.dim
    if len(fields) < n + 2:
        raise ValueError(
            f"Line {lineno}: {sensor.name} line needs {n} readings and a timestamp, "
            f"got {len(fields) - 1} fields"
        )

    try:
        reading = [float(v) for v in fields[1 : n + 1]]
        timestamp = int(fields[n + 1])
        truth = [float(v) for v in fields[n + 2 : n + 2 + len(GROUND_TRUTH_COLUMNS)]]
    except ValueError as exc:
        raise ValueError(f"Line {lineno}: {exc}") from None

    if truth and len(truth) != len(GROUND_TRUTH_COLUMNS):
        raise ValueError(f"Line {lineno}: incomplete ground truth, got {len(truth)} values")

    reading += [None] * (3 - n)
    truth = truth or [None] * len(GROUND_TRUTH_COLUMNS)
    row = {"sensor": tag, "z0": reading[0], "z1": reading[1], "z2": reading[2]}
    row["timestamp"] = timestamp
    row.update(zip(GROUND_TRUTH_COLUMNS, truth))
    return row


def load_measurement_log(filepath: str | Path) -> pl.DataFrame:
    """Load a measurement log into a Polars DataFrame.

    Blank lines and lines starting with ``#`` are skipped.

    Args:
        filepath: Path to the log file.

    Returns:
        Polars DataFrame with columns: ``sensor`` (``"L"`` or ``"R"``),
        ``z0``, ``z1``, ``z2`` (``z2`` is null for laser rows),
        ``timestamp``, ``gt_px``, ``gt_py``, ``gt_vx``, ``gt_vy`` (null
        when the line carries no ground truth).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a line is malformed. The message names the line.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Measurement log not found: {filepath}")

    logger.info("Loading measurements from %s", filepath)
    rows = []
    with open(filepath, encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            rows.append(_parse_line(line, lineno))

    schema = {
        "sensor": pl.Utf8,
        "z0": pl.Float64,
        "z1": pl.Float64,
        "z2": pl.Float64,
        "timestamp": pl.Int64,
        **{col: pl.Float64 for col in GROUND_TRUTH_COLUMNS},
    }
    df = pl.DataFrame(rows, schema=schema)

    logger.info(
        "Loaded %d measurements (%d laser, %d radar)",
        len(df),
        df.filter(pl.col("sensor") == "L").height,
        df.filter(pl.col("sensor") == "R").height,
    )
    return df


def dataframe_to_measurements(df: pl.DataFrame) -> list[Measurement]:
    """Convert a measurement log DataFrame to :class:`Measurement` values.

    Args:
        df: DataFrame from :func:`load_measurement_log`.

    Returns:
        list[Measurement]: One measurement per row, in row order.
    """
    dtype = get_dtype()
    measurements = []
    for row in df.select("sensor", "z0", "z1", "z2", "timestamp").iter_rows():
        tag, z0, z1, z2, timestamp = row
        sensor = SensorType(tag)
        values = [z0, z1] if sensor is SensorType.LASER else [z0, z1, z2]
        measurements.append(Measurement(sensor, jnp.array(values, dtype=dtype), timestamp))
    return measurements


def ground_truth_array(df: pl.DataFrame) -> Array:
    """Extract ground truth ``[px, py, vx, vy]`` as an array.

    Args:
        df: DataFrame from :func:`load_measurement_log`.

    Returns:
        jax.Array: Ground truth of shape ``(N, 4)``.

    Raises:
        ValueError: If any row lacks ground truth.
    """
    truth = df.select(GROUND_TRUTH_COLUMNS)
    if truth.null_count().sum_horizontal().item() > 0:
        raise ValueError("Measurement log has rows without ground truth")
    return jnp.asarray(truth.to_numpy(), dtype=get_dtype())
