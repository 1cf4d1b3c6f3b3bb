"""Rotation matrices parametrised by angles, in JAX.

2D rotations take a single angle. 3D rotations take the Euler angles
(phi, theta, psi) of the z-x-z "x-convention". All functions are pure
and operate on JAX arrays.
"""

import jax
import jax.numpy as jnp

from ..core import Dim, InvalidArgumentError

Array = jax.Array

_NUMBER_OF_ANGLES = {Dim.TWO: 1, Dim.THREE: 3}


def number_of_angles(dim: Dim) -> int:
    """Number of rotation parameters for dimension *dim*."""
    try:
        return _NUMBER_OF_ANGLES[Dim.of(dim)]
    except KeyError:
        raise InvalidArgumentError(f"rotations are defined for 2D and 3D only, got {int(dim)}D") from None


def matrix_2d(angles: Array) -> Array:
    """
    Counter-clockwise rotation matrix in the plane.

    Args:
        angles: (1,) array holding the rotation angle

    Returns:
        (2, 2) rotation matrix
    """
    c, s = jnp.cos(angles[0]), jnp.sin(angles[0])
    return jnp.stack([
        jnp.stack([c, -s]),
        jnp.stack([s, c]),
    ])


def matrix_3d(angles: Array) -> Array:
    """
    Rotation matrix from Euler angles in the z-x-z "x-convention".

    Args:
        angles: (3,) array of (phi, theta, psi)

    Returns:
        (3, 3) rotation matrix
    """
    phi, theta, psi = angles[0], angles[1], angles[2]
    cphi, sphi = jnp.cos(phi), jnp.sin(phi)
    ctht, stht = jnp.cos(theta), jnp.sin(theta)
    cpsi, spsi = jnp.cos(psi), jnp.sin(psi)

    return jnp.stack([
        jnp.stack([cpsi * cphi - ctht * sphi * spsi, cpsi * sphi + ctht * cphi * spsi, spsi * stht]),
        jnp.stack([-spsi * cphi - ctht * sphi * cpsi, -spsi * sphi + ctht * cphi * cpsi, cpsi * stht]),
        jnp.stack([stht * sphi, -stht * cphi, ctht]),
    ])


def matrix(angles: Array) -> Array:
    """Rotation matrix for 1 (2D) or 3 (3D) angles."""
    if angles.shape == (1,):
        return matrix_2d(angles)
    if angles.shape == (3,):
        return matrix_3d(angles)
    raise InvalidArgumentError(f"expected 1 or 3 rotation angles, got shape {angles.shape}")


def matrix_derivative(angles: Array) -> Array:
    """
    Derivative of the rotation matrix with respect to its angles.

    Returns:
        (D, D, P) array where entry [i, j, k] is dR_ij / d angle_k
    """
    return jax.jacfwd(matrix)(angles)


def inverse(R: Array) -> Array:
    """For rotation matrices, the inverse is simply the transpose."""
    return jnp.swapaxes(R, -1, -2)


def apply(R: Array, v: Array) -> Array:
    """
    Apply rotation to vector(s).

    Args:
        R: (D, D) rotation matrix
        v: (..., D) vector(s) to rotate

    Returns:
        (..., D) rotated vector(s)
    """
    return jnp.einsum("ij,...j->...i", R, v)
