"""Assemble a tracer from its parts and an ordered list of customizers."""

from __future__ import annotations

import logging
from typing import Callable, Sequence, Union

from ziptrace.reporter.base import Reporter
from ziptrace.sampler.samplers import Sampler
from ziptrace.tracer.builder import TracerBuilder
from ziptrace.tracer.tracer import Tracer

logger = logging.getLogger(__name__)


class TracerCustomizer:
    """Base class for customizers; plain callables taking the builder work too."""

    def customize(self, builder: TracerBuilder) -> None:
        raise NotImplementedError


Customizer = Union[TracerCustomizer, Callable[[TracerBuilder], None]]


def assemble_tracer(
    service_name: str,
    sampler: Sampler,
    reporter: Reporter,
    customizers: Sequence[Customizer] = (),
) -> Tracer:
    """
    Build a sealed Tracer.

    Each customizer is applied, in list order, to the same builder, so later
    customizers observe the changes of earlier ones.

    Args:
        service_name: Local service name
        sampler: Root sampling strategy
        reporter: Destination of finished spans
        customizers: Applied in order before the builder is sealed

    Returns:
        The sealed Tracer
    """
    builder = TracerBuilder(service_name, sampler, reporter)
    for customizer in customizers:
        customize = getattr(customizer, "customize", customizer)
        customize(builder)

    tracer = builder.build()
    logger.info(
        "Tracer assembled for service %r (sampler=%r, reporter=%s, customizers=%d)",
        tracer.service_name,
        tracer.sampler,
        type(tracer.reporter).__name__,
        len(customizers),
    )
    return tracer
