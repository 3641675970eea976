"""HTTP transport posting encoded span batches to a Zipkin collector."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import requests
from opentelemetry.exporter.zipkin.encoder import DEFAULT_MAX_TAG_VALUE_LENGTH, Encoder
from opentelemetry.exporter.zipkin.json.v1 import JsonV1Encoder
from opentelemetry.exporter.zipkin.json.v2 import JsonV2Encoder
from opentelemetry.exporter.zipkin.node_endpoint import NodeEndpoint
from opentelemetry.exporter.zipkin.proto.http.v2 import ProtobufEncoder
from opentelemetry.sdk.resources import SERVICE_NAME
from opentelemetry.sdk.trace import ReadableSpan

from ziptrace.config import WireEncoding
from ziptrace.errors import ConfigurationError, EncodingError, TransportError

logger = logging.getLogger(__name__)


def encoder_for(encoding: WireEncoding, max_tag_value_length: Optional[int] = None) -> Encoder:
    """Return the span codec for a wire encoding."""
    if max_tag_value_length is None:
        max_tag_value_length = DEFAULT_MAX_TAG_VALUE_LENGTH
    if encoding is WireEncoding.JSON_V1:
        return JsonV1Encoder(max_tag_value_length)
    if encoding is WireEncoding.JSON_V2:
        return JsonV2Encoder(max_tag_value_length)
    if encoding is WireEncoding.PROTO3:
        return ProtobufEncoder(max_tag_value_length)
    raise ConfigurationError("Unsupported wire encoding", details={"encoding": encoding})


class ZipkinHttpExporter:
    """
    Encodes span batches with the OpenTelemetry Zipkin codecs and posts them.

    Unlike an OpenTelemetry SpanExporter, failures are raised as
    EncodingError / TransportError so the caller decides what to drop.
    """

    def __init__(
        self,
        endpoint: str,
        encoding: Any,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        max_tag_value_length: Optional[int] = None,
    ) -> None:
        """
        Initialize the exporter.
        
        Args:
            endpoint: Resolved collector URL (see resolve_endpoint)
            encoding: WireEncoding member or its name
            timeout: Request timeout in seconds
            session: Optional requests session (a new one is created otherwise)
            max_tag_value_length: Optional truncation length for tag values
        """
        wire_encoding = WireEncoding.parse(encoding)
        if wire_encoding is None:
            raise ConfigurationError("Unsupported wire encoding", details={"encoding": encoding})

        self.endpoint = endpoint
        self.encoding = wire_encoding
        self.timeout = timeout
        self._encoder = encoder_for(wire_encoding, max_tag_value_length)
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": wire_encoding.content_type})

    def encode(self, spans: Sequence[ReadableSpan]) -> bytes:
        """
        Encode a batch in the configured wire format.
        
        The local endpoint's service name is taken from the first span's
        resource, the same way the OpenTelemetry Zipkin exporter does.
        
        Raises:
            EncodingError: If the codec fails on any span of the batch
        """
        spans = list(spans)
        try:
            local_node = NodeEndpoint()
            if spans and spans[0].resource is not None:
                service_name = spans[0].resource.attributes.get(SERVICE_NAME)
                if service_name:
                    local_node.service_name = service_name
            payload = self._encoder.serialize(spans, local_node)
        except Exception as exc:
            raise EncodingError(
                "Failed to encode span batch",
                details={"encoding": self.encoding.value, "spans": len(spans), "error": exc},
            ) from exc

        if isinstance(payload, str):
            payload = payload.encode("utf-8")
        return payload

    def send(self, payload: bytes) -> None:
        """
        Post one encoded batch.
        
        Raises:
            TransportError: On network failure or a non-2xx response
        """
        try:
            response = self._session.post(self.endpoint, data=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(
                "Failed to reach Zipkin collector",
                details={"endpoint": self.endpoint, "error": exc},
            ) from exc

        if not 200 <= response.status_code < 300:
            raise TransportError(
                "Zipkin collector rejected span batch",
                details={"endpoint": self.endpoint, "status_code": response.status_code},
            )
        logger.debug("Sent %d bytes to %s", len(payload), self.endpoint)

    def export(self, spans: Sequence[ReadableSpan]) -> None:
        """Encode and send a batch in one transport call."""
        self.send(self.encode(spans))

    def shutdown(self) -> None:
        """Release the HTTP session."""
        self._session.close()
