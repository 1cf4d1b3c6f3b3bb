"""Axis-aligned box domains used by samplers and continuous images."""

from __future__ import annotations

from dataclasses import dataclass

import jax
import jax.numpy as jnp

from .dimension import ArrayLike, Dim, as_point, as_points
from .errors import InvalidArgumentError

Array = jax.Array


@dataclass(frozen=True, eq=False)
class BoxDomain:
    """Closed box ``[origin, origin + extent]``."""
    origin: Array
    extent: Array

    def __post_init__(self):
        origin = jnp.atleast_1d(jnp.asarray(self.origin, dtype=float))
        extent = jnp.atleast_1d(jnp.asarray(self.extent, dtype=float))
        if origin.shape != extent.shape or origin.ndim != 1:
            raise InvalidArgumentError(
                f"origin and extent must be vectors of equal length, got {origin.shape} and {extent.shape}"
            )
        Dim.of(origin.shape[0])
        if bool(jnp.any(extent < 0)):
            raise InvalidArgumentError(f"extent must be non-negative, got {extent}")
        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "extent", extent)

    @classmethod
    def from_corners(cls, origin: ArrayLike, opposite_corner: ArrayLike) -> "BoxDomain":
        origin = jnp.atleast_1d(jnp.asarray(origin, dtype=float))
        return cls(origin, jnp.atleast_1d(jnp.asarray(opposite_corner, dtype=float)) - origin)

    @classmethod
    def from_grid(cls, origin: ArrayLike, spacing: ArrayLike, size: ArrayLike) -> "BoxDomain":
        """Box spanned by a regular grid of ``size`` points per axis."""
        spacing = jnp.atleast_1d(jnp.asarray(spacing, dtype=float))
        size = jnp.atleast_1d(jnp.asarray(size))
        return cls(origin, spacing * (size - 1))

    @property
    def dim(self) -> Dim:
        return Dim.of(self.origin.shape[0])

    @property
    def opposite_corner(self) -> Array:
        return self.origin + self.extent

    @property
    def center(self) -> Array:
        return self.origin + 0.5 * self.extent

    @property
    def volume(self) -> float:
        return float(jnp.prod(self.extent))

    def is_defined_at(self, point: ArrayLike) -> bool:
        point = as_point(point, self.dim)
        return bool(jnp.all((point >= self.origin) & (point <= self.opposite_corner)))

    def contains(self, points: ArrayLike) -> Array:
        """Vectorised membership test for points of shape (..., D)."""
        points = as_points(points, self.dim)
        return jnp.all((points >= self.origin) & (points <= self.opposite_corner), axis=-1)
