"""Elementary transformations: translation, scaling and rotation.

Each constructor closes over its parameters and attaches an analytic
point Jacobian, parameter derivative and inverse.
"""

from typing import Optional

import jax
import jax.numpy as jnp

from ..core import Dim, InvalidArgumentError
from ..core.dimension import ArrayLike
from . import rotation as rot
from .transformation import TransformKind, Transformation

Array = jax.Array


def _vector(values: ArrayLike, name: str) -> Array:
    values = jnp.atleast_1d(jnp.asarray(values, dtype=float))
    if values.ndim != 1:
        raise InvalidArgumentError(f"{name} must be a vector, got shape {values.shape}")
    return values


def as_center(center: Optional[ArrayLike], dim: Dim) -> Array:
    """Validated center of rotation or scaling; the origin when *center* is None."""
    if center is None:
        return jnp.zeros(int(dim))
    center = _vector(center, "center")
    if center.shape[0] != dim:
        raise InvalidArgumentError(f"center must have {int(dim)} coordinates, got {center.shape[0]}")
    return center


def translation(t: ArrayLike) -> Transformation:
    """x ↦ x + t"""
    t = _vector(t, "translation")
    dim = Dim.of(t.shape[0])
    eye = jnp.eye(dim)

    return Transformation(
        kind=TransformKind.TRANSLATION,
        dim=dim,
        apply_fn=lambda x: x + t,
        jacobian_fn=lambda x: eye,
        parameter_jacobian_fn=lambda x: eye,
        inverse_fn=lambda: translation(-t),
    )


def scaling(factor: ArrayLike, center: ArrayLike) -> Transformation:
    """x ↦ c + s (x - c), isotropic about *center*."""
    center = _vector(center, "center")
    dim = Dim.of(center.shape[0])
    s = jnp.reshape(jnp.asarray(factor, dtype=float), ())
    eye = jnp.eye(dim)

    return Transformation(
        kind=TransformKind.SCALING,
        dim=dim,
        apply_fn=lambda x: center + s * (x - center),
        jacobian_fn=lambda x: s * eye,
        parameter_jacobian_fn=lambda x: (x - center)[:, None],
        # a zero factor yields inf here; callers must not invert it
        inverse_fn=lambda: scaling(1.0 / s, center),
    )


def anisotropic_scaling(factors: ArrayLike) -> Transformation:
    """x ↦ (x_i s_i)_i, one factor per axis."""
    s = _vector(factors, "scaling factors")
    dim = Dim.of(s.shape[0])

    return Transformation(
        kind=TransformKind.ANISOTROPIC_SCALING,
        dim=dim,
        apply_fn=lambda x: x * s,
        jacobian_fn=lambda x: jnp.diag(s),
        parameter_jacobian_fn=lambda x: jnp.diag(x),
        inverse_fn=lambda: anisotropic_scaling(1.0 / s),
    )


def inverse_angles(angles: ArrayLike) -> Array:
    """Angles of the inverse rotation: -θ in 2D, (-psi, -theta, -phi) in 3D."""
    angles = _vector(angles, "angles")
    return -angles[::-1]


def rotation(angles: ArrayLike, center: Optional[ArrayLike] = None) -> Transformation:
    """x ↦ c + R(θ) (x - c)"""
    angles = _vector(angles, "angles")
    R = rot.matrix(angles)
    return _rotation(angles, R, as_center(center, Dim.of(R.shape[0])))


def _rotation(angles: Array, R: Array, center: Array) -> Transformation:
    dim = Dim.of(R.shape[0])

    def parameter_jacobian(x: Array) -> Array:
        dR = rot.matrix_derivative(angles)          # (D, D, P)
        return jnp.einsum("ijk,j->ik", dR, x - center)

    return Transformation(
        kind=TransformKind.ROTATION,
        dim=dim,
        apply_fn=lambda x: center + rot.apply(R, x - center),
        jacobian_fn=lambda x: R,
        parameter_jacobian_fn=parameter_jacobian,
        inverse_fn=lambda: _rotation(inverse_angles(angles), rot.inverse(R), center),
    )
