"""OpenTelemetry SDK wiring: span processors and TracerProvider construction."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from opentelemetry import context as context_api
from opentelemetry.sdk.resources import SERVICE_NAME
from opentelemetry.sdk.resources import Resource as OTelResource
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace import Span as OTelSpan
from opentelemetry.sdk.trace import SpanProcessor as OTelSpanProcessor
from opentelemetry.sdk.trace import TracerProvider as OTelTracerProvider
from opentelemetry.sdk.trace.id_generator import IdGenerator

from ziptrace.reporter.base import Reporter
from ziptrace.sampler.otel_sampler import to_otel_sampler
from ziptrace.sampler.samplers import Sampler

logger = logging.getLogger(__name__)


class DefaultTagsSpanProcessor(OTelSpanProcessor):
    """
    Applies the tracer's default tags to every span at start.
    
    Attributes passed explicitly when the span is started take precedence.
    """

    def __init__(self, tags: Sequence[Tuple[str, Any]]) -> None:
        self.tags = tuple(tags)

    def on_start(self, span: OTelSpan, parent_context: Optional[context_api.Context] = None) -> None:
        existing = span.attributes or {}
        for key, value in self.tags:
            if key not in existing:
                span.set_attribute(key, value)


class ReportingSpanProcessor(OTelSpanProcessor):
    """Hands every finished span to a ziptrace Reporter."""

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter

    def on_end(self, span: ReadableSpan) -> None:
        try:
            self.reporter.report(span)
        except Exception:
            # Reporters must not raise, but a custom one might.
            logger.exception("Reporter %r failed to accept span %s", self.reporter, span.name)

    def shutdown(self) -> None:
        self.reporter.close()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self.reporter.flush(timeout=timeout_millis / 1000.0)


def build_tracer_provider(
    service_name: str,
    sampler: Sampler,
    reporter: Reporter,
    tags: Sequence[Tuple[str, Any]] = (),
    resource_attributes: Optional[Dict[str, Any]] = None,
    id_generator: Optional[IdGenerator] = None,
) -> OTelTracerProvider:
    """
    Create the OpenTelemetry TracerProvider backing a Tracer.
    
    Args:
        service_name: Recorded as the ``service.name`` resource attribute
        sampler: Root sampler; children follow their parent's decision
        reporter: Receives every finished, sampled span
        tags: Default span attributes, applied in order
        resource_attributes: Extra resource attributes
        id_generator: Optional trace/span id generator
    
    Returns:
        Configured OTel TracerProvider
    """
    attributes = dict(resource_attributes or {})
    attributes[SERVICE_NAME] = service_name

    kwargs: Dict[str, Any] = {
        "resource": OTelResource.create(attributes),
        "sampler": to_otel_sampler(sampler),
    }
    if id_generator is not None:
        kwargs["id_generator"] = id_generator

    provider = OTelTracerProvider(**kwargs)
    if tags:
        provider.add_span_processor(DefaultTagsSpanProcessor(tags))
    provider.add_span_processor(ReportingSpanProcessor(reporter))
    return provider
