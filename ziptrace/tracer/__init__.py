"""Tracer components for ziptrace."""

from ziptrace.tracer.assembler import Customizer, TracerCustomizer, assemble_tracer
from ziptrace.tracer.builder import TracerBuilder
from ziptrace.tracer.provider import (
    DefaultTagsSpanProcessor,
    ReportingSpanProcessor,
    build_tracer_provider,
)
from ziptrace.tracer.tracer import Tracer

__all__ = [
    "Tracer",
    "TracerBuilder",
    "TracerCustomizer",
    "Customizer",
    "assemble_tracer",
    "DefaultTagsSpanProcessor",
    "ReportingSpanProcessor",
    "build_tracer_provider",
]
