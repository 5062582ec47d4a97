import jax.numpy as jnp
import pytest

from ukfusion.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    The library default is float32. Tests get float64 unless they override
    it, as test_config.py and the float32 tracker tests do with their own
    fixtures.
    """
    set_dtype(jnp.float64)
