"""Explicit factory functions wiring configuration into a tracer.

Each factory can be called on its own: the resolved endpoint and sampler are
available without starting a reporter. ``init`` runs the whole chain and
registers the resulting tracer process-wide.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Sequence

import requests

from ziptrace import runtime_config
from ziptrace.config import TracingConfig, load_config
from ziptrace.errors import ConfigurationError
from ziptrace.exporter.endpoint import resolve_endpoint
from ziptrace.reporter.base import NoopReporter, Reporter
from ziptrace.reporter.factory import build_reporter
from ziptrace.sampler.resolver import resolve_sampler
from ziptrace.sampler.samplers import Sampler
from ziptrace.tracer.assembler import Customizer, assemble_tracer
from ziptrace.tracer.tracer import Tracer

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()


def sampler_from_config(config: TracingConfig) -> Sampler:
    """Resolve the sampler; raises ConfigurationError on invalid rates."""
    return resolve_sampler(config)


def endpoint_from_config(config: TracingConfig) -> str:
    """
    Resolve the collector endpoint for ``config``.

    Raises:
        ConfigurationError: If no base URL is configured or it is invalid
    """
    if not config.collector_base_url:
        raise ConfigurationError(
            "collector.base_url is required to report spans",
            details={"service_name": config.service_name},
        )
    return resolve_endpoint(config.collector_base_url, config.wire_encoding)


def reporter_from_config(
    config: TracingConfig,
    session: Optional[requests.Session] = None,
) -> Reporter:
    """Build the live reporter, or a NoopReporter when tracing is disabled."""
    if not config.enabled:
        logger.info("Tracing is disabled; spans for %r will be discarded", config.service_name)
        return NoopReporter()
    endpoint = endpoint_from_config(config)
    return build_reporter(endpoint, config.wire_encoding, config.reporter, session=session)


def tracer_from_config(
    config: TracingConfig,
    sampler: Optional[Sampler] = None,
    reporter: Optional[Reporter] = None,
    customizers: Sequence[Customizer] = (),
    session: Optional[requests.Session] = None,
) -> Tracer:
    """
    Assemble a tracer for ``config``.

    A sampler or reporter passed in replaces the one the configuration would
    produce. The sampler is resolved first so an invalid rate fails before
    any reporter thread is started.
    """
    if sampler is None:
        sampler = sampler_from_config(config)

    owns_reporter = reporter is None
    if owns_reporter:
        reporter = reporter_from_config(config, session=session)

    try:
        return assemble_tracer(config.service_name, sampler, reporter, customizers)
    except BaseException:
        if owns_reporter:
            reporter.close(timeout=0)
        raise


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.getLogger("ziptrace").setLevel(logging.DEBUG)


def init(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    customizers: Sequence[Customizer] = (),
    sampler: Optional[Sampler] = None,
    reporter: Optional[Reporter] = None,
    session: Optional[requests.Session] = None,
) -> Tracer:
    """
    Load settings, assemble a tracer and register it process-wide.

    Args:
        config_file: TOML config path; discovered automatically if None
        overrides: Nested settings overriding file and environment values
        customizers: Applied in order to the tracer builder
        sampler: Replaces the configured sampler
        reporter: Replaces the configured reporter
        session: Optional requests session for the live reporter

    Returns:
        The registered Tracer

    Raises:
        ConfigurationError: If settings are invalid or incomplete
    """
    settings = load_config(config_file=config_file, overrides=overrides)
    _configure_logging(settings.logging.debug)
    config = settings.to_tracing_config()

    with _init_lock:
        previous = runtime_config.get_tracer()
        if previous is not None:
            logger.warning("init() called while a tracer is active; closing the previous tracer")
            previous.close()
            runtime_config.set_tracer(None)

        tracer = tracer_from_config(
            config,
            sampler=sampler,
            reporter=reporter,
            customizers=customizers,
            session=session,
        )
        runtime_config.set_tracer(tracer)
        runtime_config.set_tracing_config(config)
    return tracer


def get_tracer() -> Optional[Tracer]:
    """Return the tracer registered by init(), if any."""
    return runtime_config.get_tracer()


def get_config() -> Optional[TracingConfig]:
    """Return the configuration the registered tracer was built from, if any."""
    return runtime_config.get_tracing_config()


def stop_tracing(timeout: Optional[float] = None) -> None:
    """Close the registered tracer, flushing within ``timeout`` seconds."""
    with _init_lock:
        tracer = runtime_config.get_tracer()
        if tracer is None:
            return
        runtime_config.set_tracer(None)
        runtime_config.set_tracing_config(None)
    tracer.close(timeout=timeout)
