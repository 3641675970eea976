"""Reporter interface and the no-op reporter."""

from __future__ import annotations

from typing import Optional

from opentelemetry.sdk.trace import ReadableSpan


class Reporter:
    """
    Receives finished spans and delivers them somewhere.

    ``report`` is called from application threads and must never raise.
    """

    def report(self, span: ReadableSpan) -> None:
        raise NotImplementedError

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Deliver pending spans; returns True when nothing is left pending."""
        return True

    def close(self, timeout: Optional[float] = None) -> None:
        """Flush best-effort within ``timeout`` and release resources."""
        return None


class NoopReporter(Reporter):
    """Discards every span. Used when tracing is disabled and in tests."""

    def report(self, span: ReadableSpan) -> None:
        return None
