"""Geometry primitives shared by transforms, samplers and images.

This module provides the dimension tag, point coercion, box domains
and the package's exception hierarchy.
"""

from .dimension import Dim, as_point, as_points
from .domain import BoxDomain
from .errors import InvalidArgumentError, RegistrationError, UnsupportedOperationError

__all__ = [
    "Dim",
    "as_point",
    "as_points",
    "BoxDomain",
    "RegistrationError",
    "InvalidArgumentError",
    "UnsupportedOperationError",
]
