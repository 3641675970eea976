"""Reporter that logs spans instead of sending them."""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry.sdk.trace import ReadableSpan

from ziptrace.reporter.base import Reporter
from ziptrace.utils.helpers import format_span_id, format_trace_id


class LoggingReporter(Reporter):
    """Logs a span summary using the standard logging module."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("ziptrace.spans")

    def report(self, span: ReadableSpan) -> None:
        duration_ns = None
        if span.end_time is not None and span.start_time is not None:
            duration_ns = span.end_time - span.start_time
        attrs = dict(span.attributes or {})
        self.logger.info(
            "[span] name=%s trace_id=%s span_id=%s status=%s duration_ns=%s attrs=%s",
            span.name,
            format_trace_id(span.context.trace_id),
            format_span_id(span.context.span_id),
            span.status.status_code.name,
            duration_ns,
            attrs,
        )
