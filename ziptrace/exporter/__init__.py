"""Endpoint resolution and span transport to Zipkin collectors."""

from ziptrace.exporter.endpoint import resolve_endpoint
from ziptrace.exporter.zipkin_exporter import ZipkinHttpExporter, encoder_for

__all__ = ["resolve_endpoint", "ZipkinHttpExporter", "encoder_for"]
