"""Monte-Carlo integration of functions and images over sampled points.

For samples ``(p_i, d_i)`` the estimate is ``sum_i f(p_i) / d_i`` divided by
the sample count. Points where the integrand has no value contribute zero.
"""

from __future__ import annotations

import functools
import logging
import operator
from typing import Any, Callable, Iterable, List, Optional, Tuple

import jax
import jax.numpy as jnp
from flax import struct

from ..core import InvalidArgumentError
from .sampling import Sample, Sampler

Array = jax.Array
PointwiseIntegrand = Callable[[Array], Tuple[Array, Array]]
MapFn = Callable[[Callable[[Any], Any], Iterable[Any]], Iterable[Any]]

logger = logging.getLogger(__name__)


@struct.dataclass
class IntegratorConfiguration:
    """Immutable integrator settings.

    Attributes:
        sampler: Source of the sample points.
        chunk_size: Number of samples reduced together before partial sums
            are combined.
        map_fn: Applied to (chunk reducer, chunks). Pass an executor's ``map``
            to evaluate chunks in parallel.
    """
    sampler: Sampler = struct.field(pytree_node=False)
    chunk_size: int = struct.field(pytree_node=False, default=256)
    map_fn: MapFn = struct.field(pytree_node=False, default=map)


def _lift(integrand):
    """Accept either a plain integrand or an object exposing ``lift_values``."""
    return getattr(integrand, "lift_values", integrand)


class Integrator:

    def __init__(self, configuration: IntegratorConfiguration):
        if configuration.chunk_size <= 0:
            raise InvalidArgumentError(f"chunk_size must be positive, got {configuration.chunk_size}")
        self.configuration = configuration

    @property
    def sampler(self) -> Sampler:
        return self.configuration.sampler

    def integrate_scalar(self, f) -> float:
        """Estimate the integral of a scalar function or image."""
        f = _lift(f)
        samples = self.sampler.sample()

        def contribution(sample: Sample):
            value = f(sample.point)
            return 0.0 if value is None else value * (1.0 / sample.density)

        total = self._map_reduce(samples, contribution, 0.0)
        return float(total / jnp.asarray(len(samples), dtype=float))

    def integrate_vector(self, f, dimensionality: Optional[int] = None) -> Array:
        """
        Estimate the integral of a vector-valued function or image.

        Args:
            f: Integrand returning a vector or None, or an image.
            dimensionality: Length of the values; defaults to the sampler's
                dimension.

        Returns:
            (dimensionality,) array. The sum is divided by
            ``number_of_points - 1``.
        """
        f = _lift(f)
        n = int(self.sampler.dim) if dimensionality is None else int(dimensionality)
        zero = jnp.zeros(n)
        samples = self.sampler.sample()

        def contribution(sample: Sample) -> Array:
            value = f(sample.point)
            if value is None:
                return zero
            value = jnp.asarray(value, dtype=float)
            if value.shape != (n,):
                raise InvalidArgumentError(f"integrand returned shape {value.shape}, expected ({n},)")
            return value * (1.0 / sample.density)

        total = self._map_reduce(samples, contribution, zero)
        return total * jnp.reciprocal(jnp.asarray(self.sampler.number_of_points - 1, dtype=float))

    def integrate_scalar_batched(self, f: PointwiseIntegrand) -> float:
        """
        Vectorised variant of ``integrate_scalar``.

        Args:
            f: Traceable map from a point ``(D,)`` to ``(value, defined)``.
               It is vectorised over all samples with ``jax.vmap``;
               undefined entries contribute zero.
        """
        points, densities = self.sampler.sample_arrays()
        values, defined = jax.vmap(f)(points)
        weighted = jnp.where(defined, values / densities, 0.0)
        return float(jnp.sum(weighted) / jnp.asarray(points.shape[0], dtype=float))

    def _map_reduce(self, samples: List[Sample], contribution: Callable[[Sample], Any], zero):
        size = self.configuration.chunk_size
        chunks = [samples[i:i + size] for i in range(0, len(samples), size)]
        logger.debug("Integrating %d samples in %d chunks", len(samples), len(chunks))

        def reduce_chunk(chunk: List[Sample]):
            return functools.reduce(operator.add, map(contribution, chunk), zero)

        partials = self.configuration.map_fn(reduce_chunk, chunks)
        return functools.reduce(operator.add, partials, zero)
