"""Zipkin tracing client assembly on top of OpenTelemetry."""

from ziptrace.bootstrap import (
    endpoint_from_config,
    get_config,
    get_tracer,
    init,
    reporter_from_config,
    sampler_from_config,
    stop_tracing,
    tracer_from_config,
)
from ziptrace.config import (
    DEFAULT_SERVICE_NAME,
    ReporterSettings,
    TracingConfig,
    WireEncoding,
    ZiptraceSettings,
    load_config,
    validate_config,
)
from ziptrace.errors import (
    ConfigurationError,
    EncodingError,
    TracerSealedError,
    TransportError,
    ZiptraceError,
)
from ziptrace.exporter import resolve_endpoint
from ziptrace.reporter import AsyncReporter, LoggingReporter, NoopReporter, Reporter, build_reporter
from ziptrace.sampler import AlwaysSample, BoundarySampler, CountingSampler, Sampler, resolve_sampler
from ziptrace.tracer import Tracer, TracerBuilder, TracerCustomizer, assemble_tracer

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "init",
    "get_tracer",
    "get_config",
    "stop_tracing",
    "sampler_from_config",
    "endpoint_from_config",
    "reporter_from_config",
    "tracer_from_config",
    "TracingConfig",
    "ReporterSettings",
    "WireEncoding",
    "ZiptraceSettings",
    "DEFAULT_SERVICE_NAME",
    "load_config",
    "validate_config",
    "ZiptraceError",
    "ConfigurationError",
    "TransportError",
    "EncodingError",
    "TracerSealedError",
    "resolve_endpoint",
    "Reporter",
    "NoopReporter",
    "AsyncReporter",
    "LoggingReporter",
    "build_reporter",
    "Sampler",
    "AlwaysSample",
    "BoundarySampler",
    "CountingSampler",
    "resolve_sampler",
    "Tracer",
    "TracerBuilder",
    "TracerCustomizer",
    "assemble_tracer",
]
