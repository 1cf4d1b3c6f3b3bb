"""Samplers producing points together with the density they were drawn from."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Sequence, Tuple, Union

import jax
import jax.numpy as jnp

from ..core import BoxDomain, Dim, InvalidArgumentError, as_points
from ..core.dimension import ArrayLike

Array = jax.Array

logger = logging.getLogger(__name__)


class Sample(NamedTuple):
    """A sample point and the probability density it was drawn with.

    The integrator weights each point by ``1 / density``.
    """
    point: Array
    density: float


class Sampler(ABC):
    """Base class for sampling strategies.

    Subclasses produce a fixed, finite sample set. ``sample`` must return
    the same set on every call for deterministic samplers.
    """

    @property
    @abstractmethod
    def dim(self) -> Dim:
        """Dimension of the sampled points."""

    @property
    @abstractmethod
    def number_of_points(self) -> int:
        """Number of samples returned by ``sample``."""

    @abstractmethod
    def sample_arrays(self) -> Tuple[Array, Array]:
        """Stacked ``(N, D)`` points and ``(N,)`` densities."""

    def sample(self) -> List[Sample]:
        points, densities = self.sample_arrays()
        return [Sample(point, float(density)) for point, density in zip(points, densities)]


class GridSampler(Sampler):
    """Cell-centred regular grid over a box, with uniform density 1 / volume."""

    def __init__(self, domain: BoxDomain, points_per_axis: Union[int, Sequence[int]]):
        counts = jnp.broadcast_to(jnp.asarray(points_per_axis, dtype=int), (int(domain.dim),))
        if bool(jnp.any(counts <= 0)):
            raise InvalidArgumentError(f"points_per_axis must be positive, got {points_per_axis}")
        if domain.volume <= 0:
            raise InvalidArgumentError("cannot sample a domain of zero volume")
        self.domain = domain
        self.points_per_axis = tuple(int(n) for n in counts)
        logger.debug("Grid sampler over %s with %s points per axis", domain.extent, self.points_per_axis)

    @property
    def dim(self) -> Dim:
        return self.domain.dim

    @property
    def number_of_points(self) -> int:
        n = 1
        for count in self.points_per_axis:
            n *= count
        return n

    def sample_arrays(self) -> Tuple[Array, Array]:
        axes = [
            origin + (jnp.arange(count) + 0.5) * (extent / count)
            for origin, extent, count in zip(self.domain.origin, self.domain.extent, self.points_per_axis)
        ]
        grid = jnp.meshgrid(*axes, indexing="ij")
        points = jnp.stack([g.reshape(-1) for g in grid], axis=-1)
        densities = jnp.full(points.shape[0], 1.0 / self.domain.volume)
        return points, densities


class RandomSampler(Sampler):
    """Uniform random points in a box, drawn with an explicit PRNG seed."""

    def __init__(self, domain: BoxDomain, number_of_points: int, seed: int = 0):
        if number_of_points <= 0:
            raise InvalidArgumentError(f"number_of_points must be positive, got {number_of_points}")
        if domain.volume <= 0:
            raise InvalidArgumentError("cannot sample a domain of zero volume")
        self.domain = domain
        self._number_of_points = int(number_of_points)
        self.seed = seed

    @property
    def dim(self) -> Dim:
        return self.domain.dim

    @property
    def number_of_points(self) -> int:
        return self._number_of_points

    def sample_arrays(self) -> Tuple[Array, Array]:
        key = jax.random.PRNGKey(self.seed)
        unit = jax.random.uniform(key, (self._number_of_points, int(self.dim)))
        points = self.domain.origin + unit * self.domain.extent
        densities = jnp.full(self._number_of_points, 1.0 / self.domain.volume)
        return points, densities


class PointSetSampler(Sampler):
    """A fixed, possibly irregular set of points with per-point densities."""

    def __init__(self, points: ArrayLike, densities: ArrayLike):
        points = jnp.asarray(points, dtype=float)
        if points.ndim != 2:
            raise InvalidArgumentError(f"points must have shape (N, D), got {points.shape}")
        self.points = as_points(points, Dim.of(points.shape[1]))
        densities = jnp.asarray(densities, dtype=float)
        if densities.shape not in ((), (points.shape[0],)):
            raise InvalidArgumentError(
                f"densities must be a scalar or have shape ({points.shape[0]},), got {densities.shape}"
            )
        if bool(jnp.any(densities <= 0)):
            raise InvalidArgumentError("densities must be positive")
        self.densities = jnp.broadcast_to(densities, (points.shape[0],))

    @property
    def dim(self) -> Dim:
        return Dim.of(self.points.shape[1])

    @property
    def number_of_points(self) -> int:
        return int(self.points.shape[0])

    def sample_arrays(self) -> Tuple[Array, Array]:
        return self.points, self.densities
