"""Choose the sampling strategy for a configuration."""

from __future__ import annotations

import logging

from ziptrace.config import TracingConfig
from ziptrace.sampler.samplers import (
    ALWAYS_SAMPLE,
    BoundarySampler,
    CountingSampler,
    Sampler,
    validate_rate,
)

logger = logging.getLogger(__name__)


def resolve_sampler(config: TracingConfig) -> Sampler:
    """
    Resolve the sampler for ``config``.

    The first matching rule wins: a boundary rate selects BoundarySampler, a
    counting rate selects CountingSampler, otherwise every trace is sampled.

    Raises:
        ConfigurationError: If any configured rate is invalid, including a
            counting rate shadowed by a boundary rate
    """
    boundary_rate = config.boundary_rate
    counting_rate = config.counting_rate

    if boundary_rate is not None:
        if counting_rate is not None:
            validate_rate(counting_rate, "Counting", CountingSampler.PRECISION)
            logger.warning(
                "Both boundary_rate=%s and counting_rate=%s are configured; "
                "using the boundary sampler and ignoring counting_rate",
                boundary_rate,
                counting_rate,
            )
        return BoundarySampler(boundary_rate)

    if counting_rate is not None:
        return CountingSampler(counting_rate)

    return ALWAYS_SAMPLE
