"""Parametric point transformations as immutable closures."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Tuple

import jax
import jax.numpy as jnp

from ..core import Dim, InvalidArgumentError, UnsupportedOperationError, as_point, as_points
from ..core.dimension import ArrayLike

Array = jax.Array
PointFn = Callable[[Array], Array]
MatrixFn = Callable[[Array], Array]


class TransformKind(str, Enum):
    TRANSLATION = "translation"
    SCALING = "scaling"
    ANISOTROPIC_SCALING = "anisotropic_scaling"
    ROTATION = "rotation"
    RIGID = "rigid"
    ANISOTROPIC_SIMILARITY = "anisotropic_similarity"
    COMPOSED = "composed"


@dataclass(frozen=True, eq=False)
class Transformation:
    """
    Immutable mapping of D-dimensional points.

    The behaviour lives in closures over the parameters the transformation
    was created from. Derivatives and the inverse are optional capabilities;
    asking for a missing one raises ``UnsupportedOperationError``.

    Attributes:
        kind: Variant tag.
        dim: Dimension of the space the transformation acts on.
        apply_fn: Maps points of shape (..., D) to points of shape (..., D).
        jacobian_fn: Maps a point (D,) to the (D, D) Jacobian.
        parameter_jacobian_fn: Maps a point (D,) to the (D, P) derivative
            with respect to the parameters.
        inverse_fn: Builds the inverse transformation on demand.
        operands: (outer, inner) for composed transformations.
    """
    kind: TransformKind
    dim: Dim
    apply_fn: PointFn
    jacobian_fn: Optional[MatrixFn] = None
    parameter_jacobian_fn: Optional[MatrixFn] = None
    inverse_fn: Optional[Callable[[], "Transformation"]] = None
    operands: Tuple["Transformation", ...] = ()

    def __call__(self, points: ArrayLike) -> Array:
        """
        Apply the transformation to *points*.

        Accepted shapes
        ---------------
        * (D,)        – single point
        * (..., D)    – any batch of points
        """
        return self.apply_fn(as_points(points, self.dim))

    def take_derivative(self, point: ArrayLike) -> Array:
        """(D, D) Jacobian with respect to the point."""
        if self.jacobian_fn is None:
            raise UnsupportedOperationError(f"{self.kind.value} transformation has no derivative")
        return self.jacobian_fn(as_point(point, self.dim))

    def take_derivative_wrt_parameters(self, point: ArrayLike) -> Array:
        """(D, P) derivative with respect to the parameters."""
        if self.parameter_jacobian_fn is None:
            raise UnsupportedOperationError(
                f"{self.kind.value} transformation has no derivative with respect to its parameters"
            )
        return self.parameter_jacobian_fn(as_point(point, self.dim))

    @property
    def is_invertible(self) -> bool:
        return self.inverse_fn is not None

    def inverse(self) -> "Transformation":
        if self.inverse_fn is None:
            raise UnsupportedOperationError(f"{self.kind.value} transformation does not define an inverse")
        return self.inverse_fn()

    def compose(self, inner: "Transformation") -> "Transformation":
        """Self ∘ inner (apply *inner* first, then self)."""
        return compose(self, inner)

    def with_inverse(
        self, inverse_fn: Callable[[], "Transformation"], kind: Optional[TransformKind] = None
    ) -> "Transformation":
        """Copy of this transformation that knows how to build its inverse."""
        return replace(self, inverse_fn=inverse_fn, kind=kind or self.kind)


def compose(outer: Transformation, inner: Transformation) -> Transformation:
    """
    Build ``outer ∘ inner``.

    The point Jacobian follows the chain rule. The parameter derivative is
    the horizontal concatenation of both operands' parameter derivatives at
    the same point, which matches operands with independent parameter blocks.
    The result has no inverse unless one is attached with ``with_inverse``.
    """
    if outer.dim != inner.dim:
        raise InvalidArgumentError(
            f"cannot compose a {int(outer.dim)}D transformation with a {int(inner.dim)}D one"
        )

    return Transformation(
        kind=TransformKind.COMPOSED,
        dim=outer.dim,
        apply_fn=lambda x: outer.apply_fn(inner.apply_fn(x)),
        jacobian_fn=_chain_rule(outer.jacobian_fn, inner.apply_fn, inner.jacobian_fn),
        parameter_jacobian_fn=_concatenated(outer.parameter_jacobian_fn, inner.parameter_jacobian_fn),
        operands=(outer, inner),
    )


def _chain_rule(outer_jacobian: Optional[MatrixFn], inner_apply: PointFn,
                inner_jacobian: Optional[MatrixFn]) -> Optional[MatrixFn]:
    if outer_jacobian is None or inner_jacobian is None:
        return None
    return lambda x: jnp.matmul(outer_jacobian(inner_apply(x)), inner_jacobian(x))


def _concatenated(first: Optional[MatrixFn], second: Optional[MatrixFn]) -> Optional[MatrixFn]:
    if first is None or second is None:
        return None
    return lambda x: jnp.concatenate([first(x), second(x)], axis=1)
