"""Shared fixtures for ziptrace tests."""

import os
import time

import pytest
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from ziptrace import stop_tracing
from ziptrace.reporter.base import Reporter


class CapturingReporter(Reporter):
    """Keeps reported spans in memory."""

    def __init__(self):
        self.spans = []
        self.closed = False

    def report(self, span):
        self.spans.append(span)

    def close(self, timeout=None):
        self.closed = True


@pytest.fixture(autouse=True)
def clean_environment():
    """Drop ZIPTRACE_* variables and any registered tracer around each test."""
    saved = {k: v for k, v in os.environ.items() if k.startswith("ZIPTRACE_")}
    for key in saved:
        del os.environ[key]
    yield
    stop_tracing(timeout=0)
    for key in [k for k in os.environ if k.startswith("ZIPTRACE_")]:
        del os.environ[key]
    os.environ.update(saved)


@pytest.fixture
def capturing_reporter():
    return CapturingReporter()


@pytest.fixture
def make_spans():
    """Factory producing finished OpenTelemetry SDK spans."""
    providers = []

    def _make(count=1, service_name="test-service", name="op"):
        exporter = InMemorySpanExporter()
        provider = TracerProvider(
            resource=Resource.create({"service.name": service_name}),
            shutdown_on_exit=False,
        )
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        providers.append(provider)
        tracer = provider.get_tracer("ziptrace-tests")
        for i in range(count):
            tracer.start_span(f"{name}-{i}", attributes={"index": i}).end()
        return list(exporter.get_finished_spans())

    yield _make
    for provider in providers:
        provider.shutdown()


def wait_for(predicate, timeout=2.0, interval=0.01):
    """Poll ``predicate`` until it is truthy or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return bool(predicate())
