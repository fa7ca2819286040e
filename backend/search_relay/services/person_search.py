"""Person Search Pipeline: envelope → retried transport → classification.

Invariants:
    - Exactly one ClassifiedResult per call
    - Classification is logged once, without credentials or the SSN
    - Malformed or error-status responses are classified, never retried

Design Decisions:
    - Imperative shell around two pure functions (build, classify): all IO is
      the single awaited send_with_retries call
"""

import logging

from search_relay.core.classify_response import classify_response
from search_relay.core.domain_types import (
    ClassifiedResult,
    OutboundCredentials,
    SearchQuery,
    Success,
    TransportExhausted,
    UpstreamBusinessError,
)
from search_relay.core.soap_envelope import build_person_search_envelope
from search_relay.services.retry_controller import EnvelopeSender, send_with_retries

logger = logging.getLogger(__name__)


async def run_person_search(
    query: SearchQuery,
    credentials: OutboundCredentials,
    sender: EnvelopeSender,
    retries: int,
) -> ClassifiedResult:
    """Run one person search end to end and classify the outcome."""
    envelope = build_person_search_envelope(query, credentials)
    outcome = await send_with_retries(sender, envelope, retries)

    if isinstance(outcome, TransportExhausted):
        result: ClassifiedResult = outcome
    else:
        result = classify_response(outcome.raw_body)
        if not isinstance(result, Success) and outcome.http_status >= 400:
            logger.info(
                "Upstream returned an error status",
                extra={"upstream_status": outcome.http_status},
            )

    _log_classification(result)
    return result


def _log_classification(result: ClassifiedResult) -> None:
    extra: dict = {"classification": result.classification.value}
    if isinstance(result, Success):
        extra["transaction_id"] = result.transaction_id
        extra["records_found"] = result.records_found
        logger.info("Person search succeeded", extra=extra)
    elif isinstance(result, UpstreamBusinessError):
        extra["error_code"] = result.error_code
        logger.info("Person search rejected upstream", extra=extra)
    elif isinstance(result, TransportExhausted):
        extra["attempts"] = result.attempts
        logger.error("Person search timed out", extra=extra)
    else:
        logger.error("Person search response unparsable", extra=extra)
