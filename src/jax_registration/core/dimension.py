"""Dimension tag and point coercion helpers.

Points are plain JAX arrays whose trailing axis holds the D coordinates.
Every space, transformation and sampler carries an explicit ``Dim`` tag
which is checked whenever points cross its boundary.
"""

from enum import IntEnum
from typing import Union

import jax
import jax.numpy as jnp

from .errors import InvalidArgumentError

Array = jax.Array
ArrayLike = Union[Array, float, list, tuple]


class Dim(IntEnum):
    ONE = 1
    TWO = 2
    THREE = 3

    @classmethod
    def of(cls, value: Union[int, "Dim"]) -> "Dim":
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise InvalidArgumentError(f"dimension must be 1, 2 or 3, got {value!r}") from None


def as_points(points: ArrayLike, dim: Dim) -> Array:
    """Coerce *points* to a float array of shape (..., dim)."""
    points = jnp.asarray(points, dtype=float)
    if points.ndim == 0 or points.shape[-1] != dim:
        raise InvalidArgumentError(f"expected points of shape (..., {int(dim)}), got {points.shape}")
    return points


def as_point(point: ArrayLike, dim: Dim) -> Array:
    """Coerce *point* to a single float point of shape (dim,)."""
    point = as_points(point, dim)
    if point.ndim != 1:
        raise InvalidArgumentError(f"expected a single point of shape ({int(dim)},), got {point.shape}")
    return point
