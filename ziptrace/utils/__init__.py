"""Utility functions for ziptrace."""

from ziptrace.utils.helpers import (
    format_trace_id,
    format_span_id,
    lower_64_bits,
)

__all__ = [
    "format_trace_id",
    "format_span_id",
    "lower_64_bits",
]
