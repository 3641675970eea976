"""The sealed tracer handed to the application."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

from opentelemetry import context as context_api
from opentelemetry.sdk.trace import TracerProvider as OTelTracerProvider
from opentelemetry.sdk.trace.id_generator import IdGenerator
from opentelemetry.trace import Span as OTelSpan
from opentelemetry.trace import SpanKind
from opentelemetry.trace import Tracer as OTelTracer
from opentelemetry.util.types import Attributes

from ziptrace.reporter.base import Reporter
from ziptrace.sampler.samplers import Sampler
from ziptrace.tracer.provider import build_tracer_provider


class Tracer:
    """
    Read-only tracer bound to a service identity.
    
    Owns the sampler and reporter for its lifetime. Spans are OpenTelemetry
    spans; finished sampled spans flow to the reporter. Instances are created
    by TracerBuilder.build() and cannot be reconfigured.
    """

    __slots__ = (
        "_service_name",
        "_sampler",
        "_reporter",
        "_tags",
        "_provider",
        "_otel_tracer",
        "_closed",
    )

    def __init__(
        self,
        service_name: str,
        sampler: Sampler,
        reporter: Reporter,
        tags: Sequence[Tuple[str, Any]] = (),
        resource_attributes: Optional[Dict[str, Any]] = None,
        id_generator: Optional[IdGenerator] = None,
        instrumentation_scope: str = "ziptrace",
    ) -> None:
        self._service_name = service_name
        self._sampler = sampler
        self._reporter = reporter
        self._tags = tuple(tags)
        self._provider = build_tracer_provider(
            service_name,
            sampler,
            reporter,
            tags=self._tags,
            resource_attributes=resource_attributes,
            id_generator=id_generator,
        )
        self._otel_tracer = self._provider.get_tracer(instrumentation_scope)
        self._closed = False

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def sampler(self) -> Sampler:
        return self._sampler

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    @property
    def tags(self) -> Tuple[Tuple[str, Any], ...]:
        """Default span tags in the order they were added."""
        return self._tags

    @property
    def provider(self) -> OTelTracerProvider:
        """The underlying OpenTelemetry TracerProvider."""
        return self._provider

    @property
    def closed(self) -> bool:
        return self._closed

    def start_span(
        self,
        name: str,
        attributes: Attributes = None,
        kind: SpanKind = SpanKind.INTERNAL,
        context: Optional[context_api.Context] = None,
    ) -> OTelSpan:
        """Start a span; the caller must end it."""
        return self._otel_tracer.start_span(name, context=context, kind=kind, attributes=attributes)

    def start_as_current_span(
        self,
        name: str,
        attributes: Attributes = None,
        kind: SpanKind = SpanKind.INTERNAL,
        context: Optional[context_api.Context] = None,
    ):
        """Start a span and make it current (context manager)."""
        return self._otel_tracer.start_as_current_span(
            name, context=context, kind=kind, attributes=attributes
        )

    def get_tracer(self, instrumentation_scope: str) -> OTelTracer:
        """Get an OTel tracer for another instrumentation scope sharing this pipeline."""
        return self._provider.get_tracer(instrumentation_scope)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Send pending spans; returns True if nothing is left pending."""
        return self._reporter.flush(timeout=timeout)

    def close(self, timeout: Optional[float] = None) -> None:
        """Flush best-effort within ``timeout`` seconds and stop reporting."""
        if self._closed:
            return
        self._closed = True
        self._reporter.close(timeout=timeout)
        self._provider.shutdown()

    def __repr__(self) -> str:
        return f"Tracer(service_name={self._service_name!r}, sampler={self._sampler!r})"
