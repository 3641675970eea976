"""Sampling strategies and their resolution from configuration."""

from ziptrace.sampler.otel_sampler import ZipkinSamplerAdapter, to_otel_sampler
from ziptrace.sampler.resolver import resolve_sampler
from ziptrace.sampler.samplers import (
    ALWAYS_SAMPLE,
    AlwaysSample,
    BoundarySampler,
    CountingSampler,
    Sampler,
    validate_rate,
)

__all__ = [
    "Sampler",
    "AlwaysSample",
    "ALWAYS_SAMPLE",
    "BoundarySampler",
    "CountingSampler",
    "validate_rate",
    "resolve_sampler",
    "ZipkinSamplerAdapter",
    "to_otel_sampler",
]
