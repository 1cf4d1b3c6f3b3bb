"""Sampling and Monte-Carlo integration."""

from .integrator import Integrator, IntegratorConfiguration
from .sampling import GridSampler, PointSetSampler, RandomSampler, Sample, Sampler

__all__ = [
    "Integrator",
    "IntegratorConfiguration",
    "Sample",
    "Sampler",
    "GridSampler",
    "RandomSampler",
    "PointSetSampler",
]
