"""Continuous images defined by functions on a domain.

An image only exposes what the transformation algebra and the integrator
need: a domain-membership test, value lookup and an optional gradient.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import jax
import jax.numpy as jnp

from ..core import BoxDomain, Dim, InvalidArgumentError, UnsupportedOperationError, as_point
from ..core.dimension import ArrayLike
from ..transforms import Transformation

Array = jax.Array


@dataclass(frozen=True, eq=False)
class ContinuousImage:
    """
    Image ``x ↦ value_fn(x)`` defined where ``domain_fn(x)`` holds.

    Attributes:
        dim: Dimension of the image domain.
        domain_fn: Membership test for single points.
        value_fn: Value at a point; scalar, or a vector of
            ``value_dimensionality`` entries.
        derivative_fn: Optional gradient (scalar images only).
        value_dimensionality: None for scalar images.
    """
    dim: Dim
    domain_fn: Callable[[Array], bool]
    value_fn: Callable[[Array], Array]
    derivative_fn: Optional[Callable[[Array], Array]] = None
    value_dimensionality: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "dim", Dim.of(self.dim))

    def is_defined_at(self, point: ArrayLike) -> bool:
        return bool(self.domain_fn(as_point(point, self.dim)))

    def __call__(self, point: ArrayLike) -> Array:
        point = as_point(point, self.dim)
        if not self.domain_fn(point):
            raise InvalidArgumentError(f"point {point} is outside the image domain")
        return self.value_fn(point)

    def lift_values(self, point: ArrayLike) -> Optional[Array]:
        """Value at *point*, or None outside the domain."""
        point = as_point(point, self.dim)
        if not self.domain_fn(point):
            return None
        return self.value_fn(point)

    def take_derivative(self, point: ArrayLike) -> Array:
        if self.derivative_fn is None:
            raise UnsupportedOperationError("image is not differentiable")
        point = as_point(point, self.dim)
        if not self.domain_fn(point):
            raise InvalidArgumentError(f"point {point} is outside the image domain")
        return self.derivative_fn(point)

    def compose(self, transformation: Transformation) -> "ContinuousImage":
        """
        The warped image ``x ↦ self(t(x))``.

        It is defined where ``t(x)`` lies in this image's domain. Its
        gradient is ``J_t(x)^T grad(t(x))`` when both are available.
        """
        if transformation.dim != self.dim:
            raise InvalidArgumentError(
                f"cannot warp a {int(self.dim)}D image with a {int(transformation.dim)}D transformation"
            )
        t = transformation.apply_fn

        derivative_fn = None
        if self.derivative_fn is not None and transformation.jacobian_fn is not None:
            gradient, jacobian = self.derivative_fn, transformation.jacobian_fn

            def derivative_fn(x: Array) -> Array:
                return jnp.matmul(jacobian(x).T, gradient(t(x)))

        return ContinuousImage(
            dim=self.dim,
            domain_fn=lambda x: self.domain_fn(t(x)),
            value_fn=lambda x: self.value_fn(t(x)),
            derivative_fn=derivative_fn,
            value_dimensionality=self.value_dimensionality,
        )


def scalar_image(domain: BoxDomain, fn: Callable[[Array], Array],
                 derivative_fn: Optional[Callable[[Array], Array]] = None) -> ContinuousImage:
    return ContinuousImage(domain.dim, domain.is_defined_at, fn, derivative_fn)


def vector_image(domain: BoxDomain, fn: Callable[[Array], Array],
                 value_dimensionality: Optional[int] = None) -> ContinuousImage:
    return ContinuousImage(
        domain.dim,
        domain.is_defined_at,
        fn,
        value_dimensionality=int(domain.dim) if value_dimensionality is None else value_dimensionality,
    )


def warp_points(points: ArrayLike, transformation: Transformation) -> Array:
    """Apply *transformation* to every row of an (N, D) point set."""
    points = jnp.asarray(points, dtype=float)
    if points.ndim != 2:
        raise InvalidArgumentError(f"points must have shape (N, D), got {points.shape}")
    return transformation(points)
