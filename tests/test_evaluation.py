"""Tests for ukfusion.evaluation metrics."""

import math

import jax.numpy as jnp
import pytest

from ukfusion.estimation import FilterState
from ukfusion.evaluation import (
    estimates_to_array,
    nis_exceedance_rate,
    rmse,
    state_to_cartesian,
)


class TestStateToCartesian:
    def test_single_state(self):
        out = state_to_cartesian(jnp.array([1.0, 2.0, 2.0, math.pi / 2, 0.3]))
        assert jnp.allclose(out, jnp.array([1.0, 2.0, 0.0, 2.0]), atol=1e-12)

    def test_stacked_states(self):
        x = jnp.array([[0.0, 0.0, 1.0, 0.0, 0.0], [1.0, 1.0, 2.0, math.pi, 0.0]])
        out = state_to_cartesian(x)
        assert out.shape == (2, 4)
        assert jnp.allclose(out[1], jnp.array([1.0, 1.0, -2.0, 0.0]), atol=1e-12)

    def test_estimates_to_array(self):
        estimates = [
            FilterState(x=jnp.array([0.0, 0.0, 1.0, 0.0, 0.0]), P=jnp.eye(5)),
            FilterState(x=jnp.array([1.0, 0.0, 1.0, 0.0, 0.0]), P=jnp.eye(5)),
        ]
        out = estimates_to_array(estimates)
        assert jnp.allclose(out, jnp.array([[0.0, 0.0, 1.0, 0.0], [1.0, 0.0, 1.0, 0.0]]))

    def test_estimates_to_array_empty(self):
        with pytest.raises(ValueError, match="No estimates"):
            estimates_to_array([])


class TestRMSE:
    def test_known_value(self):
        est = jnp.array([[1.0, 1.0], [3.0, 3.0]])
        truth = jnp.zeros((2, 2))
        assert jnp.allclose(rmse(est, truth), jnp.full(2, math.sqrt(5.0)))

    def test_perfect_estimates(self):
        est = jnp.arange(8.0).reshape(2, 4)
        assert jnp.allclose(rmse(est, est), 0.0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="does not match"):
            rmse(jnp.zeros((2, 4)), jnp.zeros((3, 4)))

    def test_empty(self):
        with pytest.raises(ValueError, match="No estimates"):
            rmse(jnp.zeros((0, 4)), jnp.zeros((0, 4)))


class TestNISExceedance:
    def test_laser(self):
        assert nis_exceedance_rate(jnp.array([1.0, 6.0, 8.0, 2.0]), 2) == pytest.approx(0.5)

    def test_radar(self):
        assert nis_exceedance_rate(jnp.array([1.0, 6.0, 8.0, 2.0]), 3) == pytest.approx(0.25)

    def test_unsupported_dof(self):
        with pytest.raises(ValueError, match="dof"):
            nis_exceedance_rate(jnp.array([1.0]), 4)

    def test_empty(self):
        with pytest.raises(ValueError, match="No NIS"):
            nis_exceedance_rate(jnp.array([]), 2)
