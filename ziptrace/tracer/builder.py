"""Mutable builder customizers operate on before the tracer is sealed."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from opentelemetry.sdk.trace.id_generator import IdGenerator

from ziptrace.config import DEFAULT_SERVICE_NAME
from ziptrace.errors import TracerSealedError
from ziptrace.reporter.base import Reporter
from ziptrace.sampler.samplers import Sampler
from ziptrace.tracer.tracer import Tracer


class TracerBuilder:
    """
    Collects tracer settings until ``build()`` seals them into a Tracer.
    
    Setters return the builder so calls can be chained. After ``build()``
    every setter, and ``build()`` itself, raises TracerSealedError.
    """

    def __init__(self, service_name: str, sampler: Sampler, reporter: Reporter) -> None:
        self._service_name = service_name or DEFAULT_SERVICE_NAME
        self._sampler = sampler
        self._reporter = reporter
        self._tags: List[Tuple[str, Any]] = []
        self._resource_attributes: Dict[str, Any] = {}
        self._id_generator: Optional[IdGenerator] = None
        self._instrumentation_scope = "ziptrace"
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def sampler(self) -> Sampler:
        return self._sampler

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    @property
    def tags(self) -> Tuple[Tuple[str, Any], ...]:
        return tuple(self._tags)

    @property
    def resource_attributes(self) -> Dict[str, Any]:
        return dict(self._resource_attributes)

    def set_service_name(self, service_name: str) -> "TracerBuilder":
        self._check_not_sealed()
        self._service_name = service_name or DEFAULT_SERVICE_NAME
        return self

    def set_sampler(self, sampler: Sampler) -> "TracerBuilder":
        self._check_not_sealed()
        self._sampler = sampler
        return self

    def set_reporter(self, reporter: Reporter) -> "TracerBuilder":
        self._check_not_sealed()
        self._reporter = reporter
        return self

    def add_tag(self, key: str, value: Any) -> "TracerBuilder":
        """Add a default tag recorded on every span started by the tracer."""
        self._check_not_sealed()
        self._tags.append((key, value))
        return self

    def set_resource_attribute(self, key: str, value: Any) -> "TracerBuilder":
        self._check_not_sealed()
        self._resource_attributes[key] = value
        return self

    def set_id_generator(self, id_generator: IdGenerator) -> "TracerBuilder":
        self._check_not_sealed()
        self._id_generator = id_generator
        return self

    def set_instrumentation_scope(self, name: str) -> "TracerBuilder":
        self._check_not_sealed()
        self._instrumentation_scope = name
        return self

    def build(self) -> Tracer:
        """Seal the builder and create the Tracer."""
        self._check_not_sealed()
        if not isinstance(self._sampler, Sampler):
            raise TypeError(f"sampler must be a ziptrace Sampler, got {type(self._sampler).__name__}")
        if not isinstance(self._reporter, Reporter):
            raise TypeError(f"reporter must be a ziptrace Reporter, got {type(self._reporter).__name__}")
        self._sealed = True
        return Tracer(
            self._service_name,
            self._sampler,
            self._reporter,
            tags=self._tags,
            resource_attributes=self._resource_attributes,
            id_generator=self._id_generator,
            instrumentation_scope=self._instrumentation_scope,
        )

    def _check_not_sealed(self) -> None:
        if self._sealed:
            raise TracerSealedError(
                "Tracer builder is sealed", details={"service_name": self._service_name}
            )
