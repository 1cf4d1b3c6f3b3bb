"""Continuous images as integrands and warp targets."""

from .continuous import ContinuousImage, scalar_image, vector_image, warp_points

__all__ = ["ContinuousImage", "scalar_image", "vector_image", "warp_points"]
