"""Bridge between ziptrace samplers and the OpenTelemetry SDK sampler API."""

from __future__ import annotations

from typing import Optional, Sequence

from opentelemetry.context import Context
from opentelemetry.sdk.trace.sampling import Decision, ParentBased, SamplingResult
from opentelemetry.sdk.trace.sampling import Sampler as OTelSampler
from opentelemetry.trace import Link, SpanKind, TraceState, get_current_span
from opentelemetry.util.types import Attributes

from ziptrace.sampler.samplers import Sampler


class ZipkinSamplerAdapter(OTelSampler):
    """Root-span sampler delegating the keep/drop decision to a ziptrace Sampler."""

    def __init__(self, sampler: Sampler) -> None:
        self.sampler = sampler

    def should_sample(
        self,
        parent_context: Optional[Context],
        trace_id: int,
        name: str,
        kind: Optional[SpanKind] = None,
        attributes: Attributes = None,
        links: Optional[Sequence[Link]] = None,
        trace_state: Optional[TraceState] = None,
    ) -> SamplingResult:
        parent_span_context = get_current_span(parent_context).get_span_context()
        parent_trace_state = parent_span_context.trace_state if parent_span_context is not None else None

        if self.sampler.decide(trace_id):
            return SamplingResult(Decision.RECORD_AND_SAMPLE, attributes, parent_trace_state)
        return SamplingResult(Decision.DROP, None, parent_trace_state)

    def get_description(self) -> str:
        return f"ZipkinSampler{{{self.sampler!r}}}"


def to_otel_sampler(sampler: Sampler) -> OTelSampler:
    """Wrap ``sampler`` so that only root spans decide and children follow their parent."""
    return ParentBased(root=ZipkinSamplerAdapter(sampler))
