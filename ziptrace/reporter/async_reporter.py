"""Batching span reporter with bounded queue and background flush."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Deque, Dict, List, Optional

from opentelemetry.sdk.trace import ReadableSpan

from ziptrace.errors import ZiptraceError
from ziptrace.reporter.base import Reporter
from ziptrace.reporter.drop_policy import DEFAULT_DROP_POLICY, DropPolicy

logger = logging.getLogger(__name__)


class AsyncReporter(Reporter):
    """
    Queues finished spans and sends them to the collector in batches.
    
    ``report`` only enqueues under a lock and returns. A daemon worker drains
    the queue every ``flush_interval`` seconds, or as soon as
    ``max_batch_size`` spans are pending, encodes the batch and posts it in a
    single call. Batches whose encoded size exceeds ``max_batch_bytes`` are
    split in halves. Failed batches are logged and dropped, never re-queued.
    
    The exporter must provide ``encode(spans) -> bytes``, ``send(payload)``
    and ``shutdown()`` (see ZipkinHttpExporter).
    """
    
    def __init__(
        self,
        exporter,
        *,
        flush_interval: float = 1.0,
        max_batch_size: int = 10_000,
        max_batch_bytes: int = 5_000_000,
        max_queue_size: int = 10_000,
        drop_policy: Optional[DropPolicy] = None,
        close_timeout: float = 5.0,
    ) -> None:
        self.exporter = exporter
        self.flush_interval = flush_interval
        self.max_batch_size = max_batch_size
        self.max_batch_bytes = max_batch_bytes
        self.max_queue_size = max_queue_size
        self.drop_policy = drop_policy or DEFAULT_DROP_POLICY
        self.close_timeout = close_timeout

        self._queue: Deque[ReadableSpan] = deque()
        self._lock = threading.Lock()
        self._export_lock = threading.Lock()
        self._event = threading.Event()
        self._shutdown = False
        self._overflowing = False
        self._stats: Dict[str, int] = {
            "spans_reported": 0,
            "spans_dropped": 0,
            "batches_sent": 0,
            "batches_dropped": 0,
        }
        self._worker = threading.Thread(
            target=self._worker_loop, name="ziptrace-reporter", daemon=True
        )
        self._worker.start()

    def report(self, span: ReadableSpan) -> None:
        """Enqueue a finished span. Never blocks on I/O and never raises."""
        warn_overflow = False
        with self._lock:
            if self._shutdown:
                self._stats["spans_dropped"] += 1
                return
            dropped = self.drop_policy.handle(self._queue, span, self.max_queue_size)
            if self._queue and self._queue[-1] is span:
                self._stats["spans_reported"] += 1
            if dropped:
                self._stats["spans_dropped"] += dropped
                warn_overflow = not self._overflowing
                self._overflowing = True
            if len(self._queue) >= self.max_batch_size:
                self._event.set()

        if warn_overflow:
            logger.warning(
                "Span queue is full (%d spans); dropping spans until the reporter catches up",
                self.max_queue_size,
            )

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Send pending spans batch by batch.
        
        A batch the worker is already sending is waited for. No new batch is
        started once ``timeout`` seconds have passed.
        
        Returns:
            True if the queue was emptied and no batch is still in flight
        """
        deadline = time.monotonic() + timeout if timeout is not None else None
        while True:
            if deadline is None:
                acquired = self._export_lock.acquire()
            else:
                remaining = deadline - time.monotonic()
                acquired = remaining > 0 and self._export_lock.acquire(timeout=remaining)
            if not acquired:
                break
            try:
                sent = self._send_next_batch()
            finally:
                self._export_lock.release()
            if not sent:
                return True
        return self.pending() == 0 and not self._export_lock.locked()

    def close(self, timeout: Optional[float] = None) -> None:
        """
        Stop the worker, flush within ``timeout`` seconds and discard the rest.
        
        Args:
            timeout: Bound for the whole shutdown, defaults to close_timeout
        """
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True

        timeout = self.close_timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        self._event.set()
        self._worker.join(timeout=timeout)
        self.flush(timeout=max(0.0, deadline - time.monotonic()))

        with self._lock:
            discarded = len(self._queue)
            self._queue.clear()
            self._stats["spans_dropped"] += discarded
        if discarded:
            logger.warning("Discarded %d unsent spans at shutdown", discarded)

        self.exporter.shutdown()

    def pending(self) -> int:
        """Number of spans waiting to be sent."""
        with self._lock:
            return len(self._queue)

    def get_stats(self) -> Dict[str, int]:
        """Get delivery counters."""
        with self._lock:
            return dict(self._stats)

    @property
    def closed(self) -> bool:
        return self._shutdown

    # Internal
    def _worker_loop(self) -> None:
        """Background worker that periodically flushes spans."""
        while not self._shutdown:
            self._event.wait(timeout=self.flush_interval)
            self._event.clear()
            if self._shutdown:
                return
            self._flush_once()
            if self.pending() >= self.max_batch_size:
                self._event.set()

    def _flush_once(self) -> bool:
        """Flush one batch of spans."""
        with self._export_lock:
            return self._send_next_batch()

    def _send_next_batch(self) -> bool:
        spans = self._drain_queue(self.max_batch_size)
        if not spans:
            return False
        self._export(spans)
        return True

    def _drain_queue(self, limit: int) -> List[ReadableSpan]:
        """Drain spans from queue up to limit."""
        items: List[ReadableSpan] = []
        with self._lock:
            while self._queue and len(items) < limit:
                items.append(self._queue.popleft())
            if not self._queue:
                self._overflowing = False
        return items

    def _export(self, spans: List[ReadableSpan]) -> None:
        """Encode and send a batch, splitting it when the payload is too large."""
        try:
            payload = self.exporter.encode(spans)
        except Exception as exc:
            self._drop_batch(spans, exc)
            return

        if len(payload) > self.max_batch_bytes:
            if len(spans) == 1:
                self._drop_batch(spans, f"encoded span is {len(payload)} bytes, limit is {self.max_batch_bytes}")
                return
            middle = len(spans) // 2
            self._export(spans[:middle])
            self._export(spans[middle:])
            return

        try:
            self.exporter.send(payload)
        except Exception as exc:
            self._drop_batch(spans, exc)
            return

        with self._lock:
            self._stats["batches_sent"] += 1

    def _drop_batch(self, spans: List[ReadableSpan], reason) -> None:
        with self._lock:
            self._stats["batches_dropped"] += 1
            self._stats["spans_dropped"] += len(spans)
        if isinstance(reason, Exception) and not isinstance(reason, ZiptraceError):
            logger.error("Dropped batch of %d spans", len(spans), exc_info=reason)
        else:
            logger.warning("Dropped batch of %d spans: %s", len(spans), reason)
