"""Construction of the Zipkin collector endpoint URL."""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import urlparse

from ziptrace.config import WireEncoding
from ziptrace.errors import ConfigurationError

_SPAN_PATHS: Dict[WireEncoding, str] = {
    WireEncoding.JSON_V1: "api/v1/spans",
    WireEncoding.JSON_V2: "api/v2/spans",
    WireEncoding.PROTO3: "api/v2/spans",
}


def resolve_endpoint(base_url: str, encoding: Any) -> str:
    """
    Build the span upload URL for a collector.

    The base URL is normalized to end with exactly one slash, then the path
    for the encoding's API version is appended. Encodings without a known
    path get the normalized base URL back unchanged.

    Args:
        base_url: Collector root, e.g. ``http://zipkin:9411``
        encoding: WireEncoding member or its name

    Returns:
        Fully-qualified endpoint URL

    Raises:
        ConfigurationError: If the base URL is blank or not an absolute http(s) URL
    """
    if not base_url or not base_url.strip():
        raise ConfigurationError("Collector base URL is required")

    base = base_url.strip().rstrip("/") + "/"
    parsed = urlparse(base)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            "Collector base URL must be an absolute http(s) URL", details={"base_url": base_url}
        )

    wire_encoding = WireEncoding.parse(encoding)
    suffix = _SPAN_PATHS.get(wire_encoding) if wire_encoding is not None else None
    if suffix is None:
        return base

    # Already resolved: do not append the suffix twice.
    if base.endswith(f"/{suffix}/"):
        return base[:-1]
    return base + suffix
