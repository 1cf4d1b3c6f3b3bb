"""
JAX Registration: parametric transformations and Monte-Carlo integration.

This library provides JAX implementations of transformation spaces
(translation, scaling, rotation, rigid and similarity transforms) with
Jacobians, parameter derivatives and inverses, together with a
sampling-based integrator for evaluating integrals of continuous images.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import core
from . import transforms
from . import numerics
from . import image

__version__ = "0.1.0"
__all__ = ["core", "transforms", "numerics", "image"]
