"""Upstream client tests: one attempt per send(), errors mapped to TransportFailure.

Tests cover:
    - POST to the configured URL with SOAP headers and the envelope as body
    - Non-2xx responses returned verbatim (status is not a failure)
    - Connection errors → TransportFailure with cause
    - httpx timeouts and the round-trip bound → TransportFailure(timed_out=True)
    - Unreadable certificate material → CertificateLoadError (startup fault)

Design Decisions:
    - httpx.MockTransport: no sockets, handlers may be sync or async
"""

import asyncio

import httpx
import pytest

from search_relay.core.errors import CertificateLoadError, TransportFailure
from search_relay.infrastructure.upstream_client import (
    UpstreamClient,
    load_client_ssl_context,
)

from tests.mock_upstream import make_settings

ENVELOPE = b"<soapenv:Envelope>payload</soapenv:Envelope>"


def _client(handler, timeout_seconds: float = 0.5) -> UpstreamClient:
    return UpstreamClient(
        "https://upstream.test/TLOWebService.asmx",
        "http://tlo.com/PersonSearch",
        timeout_seconds,
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


async def test_posts_envelope_with_soap_headers():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, content=b"<ok/>")

    client = _client(handler)
    outcome = await client.send(ENVELOPE)
    await client.aclose()

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://upstream.test/TLOWebService.asmx"
    assert request.headers["content-type"] == "text/xml; charset=utf-8"
    assert request.headers["soapaction"] == '"http://tlo.com/PersonSearch"'
    assert request.content == ENVELOPE
    assert outcome.http_status == 200
    assert outcome.raw_body == b"<ok/>"


async def test_error_status_returned_verbatim():
    client = _client(lambda request: httpx.Response(500, content=b"<fault/>"))
    outcome = await client.send(ENVELOPE)
    assert outcome.http_status == 500
    assert outcome.raw_body == b"<fault/>"


async def test_connect_error_maps_to_transport_failure():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(TransportFailure) as exc_info:
        await _client(handler).send(ENVELOPE)
    assert exc_info.value.timed_out is False
    assert "Connection refused" in exc_info.value.cause
    assert exc_info.value.code == "TRANSPORT_ERROR"


async def test_remote_protocol_error_maps_to_transport_failure():
    def handler(request):
        raise httpx.RemoteProtocolError("peer closed connection", request=request)

    with pytest.raises(TransportFailure) as exc_info:
        await _client(handler).send(ENVELOPE)
    assert "peer closed" in exc_info.value.cause


async def test_httpx_timeout_maps_to_timed_out_failure():
    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(TransportFailure) as exc_info:
        await _client(handler).send(ENVELOPE)
    assert exc_info.value.timed_out is True
    assert exc_info.value.code == "TRANSPORT_TIMEOUT"


async def test_round_trip_bounded_by_timeout():
    async def slow_handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, content=b"<late/>")

    with pytest.raises(TransportFailure) as exc_info:
        await _client(slow_handler, timeout_seconds=0.05).send(ENVELOPE)
    assert exc_info.value.timed_out is True
    assert "0.05" in exc_info.value.cause


def test_missing_certificate_is_fatal():
    with pytest.raises(CertificateLoadError) as exc_info:
        load_client_ssl_context("/nonexistent/client.crt", "/nonexistent/client.key")
    assert exc_info.value.code == "CERTIFICATE_UNREADABLE"


def test_invalid_certificate_content_is_fatal(tmp_path):
    cert = tmp_path / "client.crt"
    key = tmp_path / "client.key"
    cert.write_text("not a certificate")
    key.write_text("not a key")
    with pytest.raises(CertificateLoadError):
        load_client_ssl_context(str(cert), str(key))


def test_from_settings_loads_certificates_first():
    with pytest.raises(CertificateLoadError):
        UpstreamClient.from_settings(make_settings())
