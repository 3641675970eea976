"""Runtime state of the process-wide tracer."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ziptrace.config import TracingConfig
    from ziptrace.tracer.tracer import Tracer

# Global runtime state
_config = {
    "tracer": None,
    "tracing_config": None,
}


def set_tracer(value: Optional["Tracer"]) -> None:
    _config["tracer"] = value


def get_tracer() -> Optional["Tracer"]:
    return _config["tracer"]


def set_tracing_config(value: Optional["TracingConfig"]) -> None:
    _config["tracing_config"] = value


def get_tracing_config() -> Optional["TracingConfig"]:
    return _config["tracing_config"]
