"""Configuration values and layered settings loading.

Settings are merged with the priority explicit overrides > environment
variables > TOML config file > defaults, then validated by the pydantic
``ZiptraceSettings`` model. The validated settings are flattened into the
immutable ``TracingConfig`` consumed by the resolvers and factories.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ziptrace.errors import ConfigurationError

DEFAULT_SERVICE_NAME = "unknown-service"
CONFIG_FILE_NAME = "ziptrace.toml"
ENV_PREFIX = "ZIPTRACE_"


class WireEncoding(str, Enum):
    """Serialization format spans are converted to before transport."""

    JSON_V1 = "JSON_V1"
    JSON_V2 = "JSON_V2"
    PROTO3 = "PROTO3"

    @property
    def content_type(self) -> str:
        if self is WireEncoding.PROTO3:
            return "application/x-protobuf"
        return "application/json"

    @classmethod
    def parse(cls, value: Any) -> Optional["WireEncoding"]:
        """Return the member matching ``value`` (case-insensitive), or None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                return None
        return None


@dataclass(frozen=True)
class ReporterSettings:
    """Batching policy of the asynchronous span reporter."""

    flush_interval: float = 1.0
    max_batch_size: int = 10_000
    max_batch_bytes: int = 5_000_000
    max_queue_size: int = 10_000
    drop_policy: str = "oldest"
    close_timeout: float = 5.0
    timeout: float = 10.0


@dataclass(frozen=True)
class TracingConfig:
    service_name: str = DEFAULT_SERVICE_NAME
    collector_base_url: Optional[str] = None
    wire_encoding: WireEncoding = WireEncoding.JSON_V2
    boundary_rate: Optional[float] = None
    counting_rate: Optional[float] = None
    enabled: bool = True
    reporter: ReporterSettings = field(default_factory=ReporterSettings)

    def __post_init__(self) -> None:
        if not self.service_name or not self.service_name.strip():
            object.__setattr__(self, "service_name", DEFAULT_SERVICE_NAME)


# Pydantic settings model

class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TracingSection(_Section):
    service_name: str = DEFAULT_SERVICE_NAME
    enabled: bool = True


class CollectorSection(_Section):
    base_url: Optional[str] = None
    encoding: WireEncoding = WireEncoding.JSON_V2

    @field_validator("encoding", mode="before")
    @classmethod
    def _normalize_encoding(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


class SamplerSection(_Section):
    boundary_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    counting_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class ReporterSection(_Section):
    flush_interval: float = Field(default=1.0, gt=0)
    max_batch_size: int = Field(default=10_000, gt=0)
    max_batch_bytes: int = Field(default=5_000_000, gt=0)
    max_queue_size: int = Field(default=10_000, gt=0)
    drop_policy: Literal["oldest", "newest"] = "oldest"
    close_timeout: float = Field(default=5.0, ge=0)
    timeout: float = Field(default=10.0, gt=0)


class LoggingSection(_Section):
    debug: bool = False


class ZiptraceSettings(_Section):
    """Validated settings tree, one attribute per TOML section."""

    tracing: TracingSection = Field(default_factory=TracingSection)
    collector: CollectorSection = Field(default_factory=CollectorSection)
    sampler: SamplerSection = Field(default_factory=SamplerSection)
    reporter: ReporterSection = Field(default_factory=ReporterSection)
    logging: LoggingSection = Field(default_factory=LoggingSection)

    def to_tracing_config(self) -> TracingConfig:
        return TracingConfig(
            service_name=self.tracing.service_name,
            collector_base_url=self.collector.base_url,
            wire_encoding=self.collector.encoding,
            boundary_rate=self.sampler.boundary_rate,
            counting_rate=self.sampler.counting_rate,
            enabled=self.tracing.enabled,
            reporter=ReporterSettings(**self.reporter.model_dump()),
        )


# Loading

def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in ("true", "1", "yes", "on"):
        return True
    if normalized in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {value!r}")


# env var -> (section, key, converter)
_ENV_VARS: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "ZIPTRACE_SERVICE_NAME": ("tracing", "service_name", str),
    "ZIPTRACE_ENABLED": ("tracing", "enabled", _parse_bool),
    "ZIPTRACE_BASE_URL": ("collector", "base_url", str),
    "ZIPTRACE_ENCODING": ("collector", "encoding", str),
    "ZIPTRACE_BOUNDARY_RATE": ("sampler", "boundary_rate", float),
    "ZIPTRACE_COUNTING_RATE": ("sampler", "counting_rate", float),
    "ZIPTRACE_FLUSH_INTERVAL": ("reporter", "flush_interval", float),
    "ZIPTRACE_MAX_QUEUE_SIZE": ("reporter", "max_queue_size", int),
    "ZIPTRACE_DEBUG": ("logging", "debug", _parse_bool),
}


def find_config_file() -> Optional[str]:
    """
    Locate a config file.

    Looks for ``ziptrace.toml`` in the current directory, then
    ``~/.ziptrace/config.toml``.

    Returns:
        Path of the first file found, or None
    """
    candidates = [
        Path.cwd() / CONFIG_FILE_NAME,
        Path.home() / ".ziptrace" / "config.toml",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load a TOML config file into a nested dict.

    A missing file yields an empty dict. A malformed, undecodable or
    unreadable one raises ConfigurationError.
    """
    config_path = Path(path)
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(
            "Invalid TOML in config file", details={"path": str(config_path), "error": exc}
        ) from exc
    except UnicodeDecodeError as exc:
        raise ConfigurationError(
            "Config file is not valid UTF-8", details={"path": str(config_path), "error": exc}
        ) from exc
    except OSError as exc:
        raise ConfigurationError(
            "Cannot read config file", details={"path": str(config_path), "error": exc}
        ) from exc


def load_config_from_env(flat: bool = False) -> Dict[str, Any]:
    """
    Read ``ZIPTRACE_*`` environment variables.

    Args:
        flat: Return ``{key: value}`` instead of ``{section: {key: value}}``

    Returns:
        Only the variables that are set, converted to their field types
    """
    nested: Dict[str, Dict[str, Any]] = {}
    flat_values: Dict[str, Any] = {}
    for env_name, (section, key, convert) in _ENV_VARS.items():
        raw = os.environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            value = convert(raw)
        except ValueError as exc:
            raise ConfigurationError(
                "Invalid environment variable", details={"name": env_name, "value": raw}
            ) from exc
        nested.setdefault(section, {})[key] = value
        flat_values[key] = value
    return flat_values if flat else nested


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> ZiptraceSettings:
    """
    Load and validate settings.

    Args:
        config_file: Explicit TOML path; discovered with find_config_file() if None
        overrides: Nested dict of explicit values, highest priority

    Returns:
        Validated ZiptraceSettings

    Raises:
        ConfigurationError: If the merged settings fail validation
    """
    path = config_file or find_config_file()
    merged = load_toml_config(path) if path else {}
    merged = _deep_merge(merged, load_config_from_env())
    merged = _deep_merge(merged, overrides or {})
    try:
        return ZiptraceSettings.model_validate(merged)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigurationError(
            "Invalid ziptrace configuration",
            details={"field": location, "error": first["msg"]},
        ) from exc


def validate_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Tuple[bool, str, Optional[ZiptraceSettings]]:
    """Validate settings without raising; returns (is_valid, message, settings)."""
    try:
        settings = load_config(config_file=config_file, overrides=overrides)
    except ConfigurationError as exc:
        return False, str(exc), None
    return True, "Configuration is valid", settings
