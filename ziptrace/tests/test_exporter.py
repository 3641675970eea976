"""Tests for the Zipkin HTTP transport."""

import json
from unittest import mock

import pytest
import requests
from opentelemetry.exporter.zipkin.encoder import DEFAULT_MAX_TAG_VALUE_LENGTH

from ziptrace.config import WireEncoding
from ziptrace.errors import ConfigurationError, EncodingError, TransportError
from ziptrace.exporter import ZipkinHttpExporter
from ziptrace.exporter.zipkin_exporter import encoder_for

ENDPOINT = "http://zipkin:9411/api/v2/spans"


def make_session(status_code=202):
    session = mock.MagicMock()
    session.headers = {}
    session.post.return_value = mock.Mock(status_code=status_code)
    return session


class TestEncoding:
    """Test codec selection and payloads."""

    def test_json_v2_payload(self, make_spans):
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V2, session=make_session())

        payload = exporter.encode(make_spans(2, service_name="checkout"))

        decoded = json.loads(payload)
        assert [span["name"] for span in decoded] == ["op-0", "op-1"]
        assert decoded[0]["localEndpoint"]["serviceName"] == "checkout"

    def test_json_v1_payload(self, make_spans):
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V1, session=make_session())

        decoded = json.loads(exporter.encode(make_spans(1)))

        assert decoded[0]["name"] == "op-0"

    def test_json_v1_payload_carries_tags(self, make_spans):
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V1, session=make_session())

        decoded = json.loads(exporter.encode(make_spans(1, service_name="checkout")))

        annotations = {item["key"]: item for item in decoded[0]["binaryAnnotations"]}
        assert annotations["index"]["value"] == "0"
        assert annotations["index"]["endpoint"]["serviceName"] == "checkout"

    @pytest.mark.parametrize("encoding", list(WireEncoding))
    def test_default_tag_value_length(self, encoding):
        assert encoder_for(encoding).max_tag_value_length == DEFAULT_MAX_TAG_VALUE_LENGTH

    def test_explicit_tag_value_length(self):
        assert encoder_for(WireEncoding.JSON_V1, 16).max_tag_value_length == 16

    def test_proto3_payload_is_binary(self, make_spans):
        session = make_session()
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.PROTO3, session=session)

        payload = exporter.encode(make_spans(1, name="grpc-call"))

        assert isinstance(payload, bytes)
        assert b"grpc-call-0" in payload
        assert session.headers["Content-Type"] == "application/x-protobuf"

    def test_json_content_type(self):
        session = make_session()
        ZipkinHttpExporter(ENDPOINT, "JSON_V1", session=session)

        assert session.headers["Content-Type"] == "application/json"

    def test_encoding_failure_raises_encoding_error(self):
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V2, session=make_session())

        with pytest.raises(EncodingError):
            exporter.encode([object()])

    def test_unknown_encoding_is_rejected(self):
        with pytest.raises(ConfigurationError):
            ZipkinHttpExporter(ENDPOINT, "THRIFT", session=make_session())


class TestTransport:
    """Test HTTP submission."""

    def test_export_posts_one_request(self, make_spans):
        session = make_session()
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V2, timeout=3.0, session=session)

        exporter.export(make_spans(3))

        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == ENDPOINT
        assert kwargs["timeout"] == 3.0
        assert len(json.loads(kwargs["data"])) == 3

    def test_error_status_raises_transport_error(self):
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V2, session=make_session(500))

        with pytest.raises(TransportError) as excinfo:
            exporter.send(b"[]")
        assert excinfo.value.details["status_code"] == 500

    def test_network_failure_raises_transport_error(self):
        session = make_session()
        session.post.side_effect = requests.ConnectionError("connection refused")
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V2, session=session)

        with pytest.raises(TransportError):
            exporter.send(b"[]")

    def test_shutdown_closes_session(self):
        session = make_session()
        exporter = ZipkinHttpExporter(ENDPOINT, WireEncoding.JSON_V2, session=session)

        exporter.shutdown()

        session.close.assert_called_once()
