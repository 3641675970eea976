"""Construction of the live Zipkin span reporter."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ziptrace.config import ReporterSettings
from ziptrace.exporter.zipkin_exporter import ZipkinHttpExporter
from ziptrace.reporter.async_reporter import AsyncReporter
from ziptrace.reporter.drop_policy import drop_policy_for

logger = logging.getLogger(__name__)

def build_reporter(
    endpoint: str,
    encoding: Any,
    settings: Optional[ReporterSettings] = None,
    session: Optional[requests.Session] = None,
) -> AsyncReporter:
    """
    Build an asynchronous batching reporter posting to ``endpoint``.
    
    Args:
        endpoint: Resolved collector URL
        encoding: Wire encoding; selects both the codec and the Content-Type
        settings: Batching policy, defaults to ReporterSettings()
        session: Optional requests session for the transport
    
    Returns:
        A started AsyncReporter
    """
    settings = settings or ReporterSettings()
    drop_policy = drop_policy_for(settings.drop_policy)

    exporter = ZipkinHttpExporter(endpoint, encoding, timeout=settings.timeout, session=session)
    logger.debug("Reporting spans to %s as %s", endpoint, exporter.encoding.value)
    return AsyncReporter(
        exporter,
        flush_interval=settings.flush_interval,
        max_batch_size=settings.max_batch_size,
        max_batch_bytes=settings.max_batch_bytes,
        max_queue_size=settings.max_queue_size,
        drop_policy=drop_policy,
        close_timeout=settings.close_timeout,
    )
