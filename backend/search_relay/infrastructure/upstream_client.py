"""Upstream Client: one mutually-authenticated SOAP POST per call.

Invariants:
    - Exactly one HTTP attempt per send(); retries live in services/retry_controller.py
    - Full round trip bounded by timeout_seconds → TransportFailure(timed_out=True)
    - Connection-level faults (DNS, TLS handshake, reset, protocol) → TransportFailure(cause)
    - Any completed exchange is returned verbatim, whatever the HTTP status
    - Client certificate/key loaded once at startup; unreadable → CertificateLoadError

Design Decisions:
    - Single pooled httpx.AsyncClient shared by all requests: keep-alive reuse,
      concurrency-safe without locks
    - SSLContext passed as verify=: cert material read once, held read-only
    - asyncio.wait_for around the POST: httpx timeouts are per phase, the
      upstream contract is per round trip
"""

import asyncio
import logging
import ssl

import httpx

from search_relay.config import Settings
from search_relay.core.domain_types import TransportOutcome
from search_relay.core.errors import CertificateLoadError, TransportFailure

logger = logging.getLogger(__name__)


def load_client_ssl_context(cert_path: str, key_path: str) -> ssl.SSLContext:
    """Build a TLS context presenting the client certificate. Fatal on failure."""
    context = ssl.create_default_context()
    try:
        context.load_cert_chain(certfile=cert_path, keyfile=key_path)
    except FileNotFoundError as e:
        raise CertificateLoadError(e.filename or cert_path, "file not found") from e
    except (OSError, ssl.SSLError) as e:
        raise CertificateLoadError(f"{cert_path}, {key_path}", str(e)) from e
    return context


class UpstreamClient:
    """Sends SOAP envelopes to the person search endpoint."""

    def __init__(
        self,
        url: str,
        soap_action: str,
        timeout_seconds: float,
        http_client: httpx.AsyncClient,
    ):
        self.url = url
        self.soap_action = soap_action
        self.timeout_seconds = timeout_seconds
        self._client = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> "UpstreamClient":
        """Load certificate material and open the pooled connection client."""
        context = load_client_ssl_context(
            settings.tlo_cert_path, settings.tlo_key_path,
        )
        http_client = httpx.AsyncClient(
            verify=context,
            timeout=httpx.Timeout(settings.tlo_timeout_seconds),
        )
        return cls(
            settings.tlo_url,
            settings.tlo_soap_action,
            settings.tlo_timeout_seconds,
            http_client,
        )

    async def send(self, envelope: bytes) -> TransportOutcome:
        """POST one envelope. Raises TransportFailure when no response arrives."""
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self.url, content=envelope, headers=self._headers(),
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise TransportFailure(
                str(e) or f"no response within {self.timeout_seconds}s",
                timed_out=True,
            ) from e
        except httpx.TransportError as e:
            raise TransportFailure(str(e) or type(e).__name__) from e

        logger.debug(
            "Upstream responded",
            extra={"upstream_status": response.status_code},
        )
        return TransportOutcome(
            http_status=response.status_code, raw_body=response.content,
        )

    async def aclose(self) -> None:
        """Close pooled connections (shutdown)."""
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": f'"{self.soap_action}"',
        }
