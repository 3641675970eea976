"""Helper functions for trace identifiers."""

from __future__ import annotations

_LOWER_64_MASK = (1 << 64) - 1


def format_trace_id(trace_id: int) -> str:
    """
    Format OTel trace_id (128-bit int) to hex string.
    
    Args:
        trace_id: OTel trace_id as int
    
    Returns:
        32-character hex string
    """
    return format(trace_id, '032x')


def format_span_id(span_id: int) -> str:
    """
    Format OTel span_id (64-bit int) to hex string.
    
    Args:
        span_id: OTel span_id as int
    
    Returns:
        16-character hex string
    """
    return format(span_id, '016x')


def lower_64_bits(trace_id: int) -> int:
    """Return the low 64 bits of a trace id, which Zipkin treats as the id proper."""
    return trace_id & _LOWER_64_MASK
