"""Angle wrap-around helpers.

Angle residuals must be range-reduced before they enter any weighted sum
or outer product, since raw differences are meaningless across the
``±pi`` boundary.
"""

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

_TWO_PI = 2.0 * jnp.pi


def normalize_angle(angle: ArrayLike) -> Array:
    """Wrap an angle into the half-open interval ``(-pi, pi]``.

    The result equals the input modulo ``2*pi`` and normalizing twice is
    the same as normalizing once. Works elementwise on arrays and is
    JAX-traceable.

    Args:
        angle (ArrayLike): Angle(s) in radians, any real value.

    Returns:
        Angle(s) in radians within ``(-pi, pi]``.

    Examples:
        ```python
        from ukfusion.utils import normalize_angle

        normalize_angle(3.5 * jnp.pi)   # -0.5 * pi
        normalize_angle(-jnp.pi)        # pi
        ```
    """
    angle = jnp.asarray(angle)
    wrapped = angle - _TWO_PI * jnp.ceil((angle - jnp.pi) / _TWO_PI)
    # Rounding can land just outside the interval near odd multiples of pi
    wrapped = jnp.where(wrapped <= -jnp.pi, wrapped + _TWO_PI, wrapped)
    return jnp.where(wrapped > jnp.pi, wrapped - _TWO_PI, wrapped)


def normalize_component(vectors: ArrayLike, index: int) -> Array:
    """Wrap one component of a stack of residual vectors into ``(-pi, pi]``.

    Args:
        vectors (ArrayLike): Array of shape ``(..., m)``.
        index (int): Component along the last axis holding an angle.

    Returns:
        Copy of *vectors* with component *index* normalized.
    """
    vectors = jnp.asarray(vectors)
    return vectors.at[..., index].set(normalize_angle(vectors[..., index]))
