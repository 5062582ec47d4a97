"""Tests for the ukfusion.config module."""

import jax
import jax.numpy as jnp
import pytest

from ukfusion.config import (
    get_dtype,
    get_range_tolerance,
    set_dtype,
)
from ukfusion.estimation import FilterState, UKFConfig, predict

pytestmark = pytest.mark.order("first")


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float32 before and after each test."""
    set_dtype(jnp.float32)
    yield
    set_dtype(jnp.float32)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float32

    def test_set_float64(self):
        set_dtype(jnp.float64)
        assert get_dtype() == jnp.float64

    def test_roundtrip(self):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_float64_enables_x64(self):
        set_dtype(jnp.float64)
        assert jax.config.jax_enable_x64 is True


class TestTolerances:
    def test_range_tolerance_float32(self):
        assert get_range_tolerance() == 1e-4

    def test_range_tolerance_float64(self):
        set_dtype(jnp.float64)
        assert get_range_tolerance() == 1e-6

    def test_range_tolerance_half(self):
        set_dtype(jnp.float16)
        assert get_range_tolerance() == 1e-2


class TestDtypePropagation:
    def test_predict_float32(self):
        """predict returns arrays in the configured dtype."""
        fs = FilterState(x=jnp.array([1.0, 0.8, 2.0, 0.1, 0.05]), P=jnp.eye(5) * 0.5)
        pred = predict(fs, 0.1, UKFConfig())
        assert pred.state.x.dtype == jnp.float32
        assert pred.state.P.dtype == jnp.float32
        assert pred.sigma_points.dtype == jnp.float32

    def test_predict_float64(self):
        set_dtype(jnp.float64)
        fs = FilterState(x=jnp.array([1.0, 0.8, 2.0, 0.1, 0.05]), P=jnp.eye(5) * 0.5)
        pred = predict(fs, 0.1, UKFConfig())
        assert pred.state.x.dtype == jnp.float64
