"""Transformation spaces: parameter vectors to transformations.

A space fixes the dimension D and the number of parameters P, and maps
every parameter vector of length P to a ``Transformation`` closed over it.
Composite spaces are built with ``product``; only the named composite
spaces (rigid, anisotropic similarity) attach an inverse.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional

import jax
import jax.numpy as jnp

from ..core import Dim, InvalidArgumentError
from ..core.dimension import ArrayLike
from . import elementary
from . import rotation as rot
from .transformation import TransformKind, Transformation

Array = jax.Array


class TransformationSpace(ABC):
    """Base class of all parametric transformation families."""

    def __init__(self, dim: int):
        self.dim = Dim.of(dim)

    @property
    @abstractmethod
    def parameters_dimensionality(self) -> int:
        """Length P of the parameter vectors this space accepts."""

    @property
    @abstractmethod
    def identity_parameters(self) -> Array:
        """Parameter vector selecting the identity transformation."""

    @abstractmethod
    def _transform(self, parameters: Array) -> Transformation:
        """Build the transformation for already validated *parameters*."""

    def transform_for_parameters(self, parameters: ArrayLike) -> Transformation:
        return self._transform(self._check_parameters(parameters))

    @property
    def identity_transformation(self) -> Transformation:
        return self.transform_for_parameters(self.identity_parameters)

    def take_derivative_wrt_parameters(self, parameters: ArrayLike) -> Callable[[ArrayLike], Array]:
        """Returns x ↦ (D, P) derivative of the transformation at *parameters*."""
        return self.transform_for_parameters(parameters).take_derivative_wrt_parameters

    def product(self, other: "TransformationSpace") -> "ProductSpace":
        """Space of ``self(p1) ∘ other(p2)`` for parameters ``p1 ++ p2``."""
        return ProductSpace(self, other)

    def _check_parameters(self, parameters: ArrayLike) -> Array:
        parameters = jnp.asarray(parameters, dtype=float)
        if parameters.ndim != 1 or parameters.shape[0] != self.parameters_dimensionality:
            raise InvalidArgumentError(
                f"{type(self).__name__} expects a parameter vector of length "
                f"{self.parameters_dimensionality}, got shape {parameters.shape}"
            )
        return parameters

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dim={int(self.dim)}, parameters={self.parameters_dimensionality})"


class TranslationSpace(TransformationSpace):

    @property
    def parameters_dimensionality(self) -> int:
        return int(self.dim)

    @property
    def identity_parameters(self) -> Array:
        return jnp.zeros(int(self.dim))

    def _transform(self, parameters: Array) -> Transformation:
        return elementary.translation(parameters)


class ScalingSpace(TransformationSpace):
    """Isotropic scaling about a fixed center (the origin by default)."""

    def __init__(self, dim: int, center: Optional[ArrayLike] = None):
        super().__init__(dim)
        self.center = elementary.as_center(center, self.dim)

    @property
    def parameters_dimensionality(self) -> int:
        return 1

    @property
    def identity_parameters(self) -> Array:
        return jnp.ones(1)

    def _transform(self, parameters: Array) -> Transformation:
        return elementary.scaling(parameters[0], self.center)


class AnisotropicScalingSpace(TransformationSpace):

    @property
    def parameters_dimensionality(self) -> int:
        return int(self.dim)

    @property
    def identity_parameters(self) -> Array:
        return jnp.ones(int(self.dim))

    def _transform(self, parameters: Array) -> Transformation:
        return elementary.anisotropic_scaling(parameters)


class RotationSpace(TransformationSpace):
    """Rotation about a fixed center: one angle in 2D, three Euler angles in 3D."""

    def __init__(self, dim: int, center: Optional[ArrayLike] = None):
        super().__init__(dim)
        self._num_angles = rot.number_of_angles(self.dim)
        self.center = elementary.as_center(center, self.dim)

    @property
    def parameters_dimensionality(self) -> int:
        return self._num_angles

    @property
    def identity_parameters(self) -> Array:
        return jnp.zeros(self._num_angles)

    def _transform(self, parameters: Array) -> Transformation:
        return elementary.rotation(parameters, self.center)


class ProductSpace(TransformationSpace):
    """
    Parameter concatenation of two spaces.

    ``transform_for_parameters(p1 ++ p2)`` is ``outer(p1) ∘ inner(p2)``.
    The resulting transformations are not invertible.
    """

    def __init__(self, outer: TransformationSpace, inner: TransformationSpace):
        if outer.dim != inner.dim:
            raise InvalidArgumentError(
                f"cannot combine a {int(outer.dim)}D space with a {int(inner.dim)}D space"
            )
        super().__init__(outer.dim)
        self.outer = outer
        self.inner = inner

    @property
    def parameters_dimensionality(self) -> int:
        return self.outer.parameters_dimensionality + self.inner.parameters_dimensionality

    @property
    def identity_parameters(self) -> Array:
        return jnp.concatenate([self.outer.identity_parameters, self.inner.identity_parameters])

    def split(self, parameters: Array):
        """Split a product parameter vector into the (outer, inner) blocks."""
        n = self.outer.parameters_dimensionality
        return parameters[:n], parameters[n:]

    def _transform(self, parameters: Array) -> Transformation:
        p1, p2 = self.split(parameters)
        return self.outer.transform_for_parameters(p1).compose(self.inner.transform_for_parameters(p2))


def _invertible_chain(kind: TransformKind, *components: Transformation) -> Transformation:
    """
    ``c_1 ∘ ... ∘ c_n`` with inverse ``c_n^-1 ∘ ... ∘ c_1^-1``.

    The inverse in turn has the forward chain as its inverse.
    """
    forward = components[0]
    for component in components[1:]:
        forward = forward.compose(component)

    def build_inverse() -> Transformation:
        result = components[-1].inverse()
        for component in reversed(components[:-1]):
            result = result.compose(component.inverse())
        return result.with_inverse(lambda: invertible)

    invertible = forward.with_inverse(build_inverse, kind=kind)
    return invertible


class RigidTransformationSpace(TransformationSpace):
    """Translation after rotation about *center*; parameters are (t, θ)."""

    def __init__(self, dim: int, center: Optional[ArrayLike] = None):
        super().__init__(dim)
        self.translation = TranslationSpace(self.dim)
        self.rotation = RotationSpace(self.dim, center)

    @property
    def center(self) -> Array:
        return self.rotation.center

    @property
    def parameters_dimensionality(self) -> int:
        return self.translation.parameters_dimensionality + self.rotation.parameters_dimensionality

    @property
    def identity_parameters(self) -> Array:
        return jnp.concatenate([self.translation.identity_parameters, self.rotation.identity_parameters])

    def _transform(self, parameters: Array) -> Transformation:
        n = self.translation.parameters_dimensionality
        translation = self.translation.transform_for_parameters(parameters[:n])
        rotation = self.rotation.transform_for_parameters(parameters[n:])
        return _invertible_chain(TransformKind.RIGID, translation, rotation)


class AnisotropicSimilarityTransformationSpace(TransformationSpace):
    """Translation ∘ rotation about *center* ∘ anisotropic scaling; parameters are (t, θ, s)."""

    def __init__(self, dim: int, center: Optional[ArrayLike] = None):
        super().__init__(dim)
        self.translation = TranslationSpace(self.dim)
        self.rotation = RotationSpace(self.dim, center)
        self.scaling = AnisotropicScalingSpace(self.dim)

    @property
    def center(self) -> Array:
        return self.rotation.center

    @property
    def _components(self):
        return self.translation, self.rotation, self.scaling

    @property
    def parameters_dimensionality(self) -> int:
        return sum(space.parameters_dimensionality for space in self._components)

    @property
    def identity_parameters(self) -> Array:
        return jnp.concatenate([space.identity_parameters for space in self._components])

    def _transform(self, parameters: Array) -> Transformation:
        transforms = []
        start = 0
        for space in self._components:
            stop = start + space.parameters_dimensionality
            transforms.append(space.transform_for_parameters(parameters[start:stop]))
            start = stop

        translation, rotation, scaling = transforms
        return _invertible_chain(TransformKind.ANISOTROPIC_SIMILARITY, translation, rotation, scaling)
