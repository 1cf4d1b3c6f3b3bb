"""
Parametric transformation algebra for 1D, 2D and 3D space.

This module provides:
- Transformation: immutable point mappings with derivatives and inverses
- elementary: translation, scaling, anisotropic scaling and rotation
- spaces: parameter vectors to transformations, and their products
- rotation: rotation matrices from angles
"""

from . import elementary
from . import rotation
from .spaces import (
    AnisotropicScalingSpace,
    AnisotropicSimilarityTransformationSpace,
    ProductSpace,
    RigidTransformationSpace,
    RotationSpace,
    ScalingSpace,
    TransformationSpace,
    TranslationSpace,
)
from .transformation import TransformKind, Transformation, compose

__all__ = [
    "elementary",
    "rotation",
    "Transformation",
    "TransformKind",
    "compose",
    "TransformationSpace",
    "TranslationSpace",
    "ScalingSpace",
    "AnisotropicScalingSpace",
    "RotationSpace",
    "ProductSpace",
    "RigidTransformationSpace",
    "AnisotropicSimilarityTransformationSpace",
]
