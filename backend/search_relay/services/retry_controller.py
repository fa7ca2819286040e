"""Retry Controller: sequential upstream attempts under a fixed retry budget.

Invariants:
    - At most retries + 1 attempts, strictly sequential, no backoff delay
    - Only TransportFailure triggers a retry; any completed exchange stops the loop
    - Every failed attempt is logged (attempt number, cause) before the next one
    - Exhaustion returns TransportExhausted, it is never raised or dropped

Design Decisions:
    - Immediate retry: each attempt is already bounded by the upstream timeout
    - Sender typed as a Protocol (UpstreamClient in production)
"""

import logging
from typing import Protocol

from search_relay.core.domain_types import TransportExhausted, TransportOutcome
from search_relay.core.errors import TransportFailure

logger = logging.getLogger(__name__)


class EnvelopeSender(Protocol):
    async def send(self, envelope: bytes) -> TransportOutcome: ...


async def send_with_retries(
    sender: EnvelopeSender, envelope: bytes, retries: int,
) -> TransportOutcome | TransportExhausted:
    """Send until one exchange completes or the budget runs out."""
    attempts = retries + 1
    for attempt in range(1, attempts + 1):
        try:
            return await sender.send(envelope)
        except TransportFailure as e:
            e.context.attempt = attempt
            logger.warning(
                f"Upstream attempt {attempt}/{attempts} failed: {e.cause}",
                extra={
                    "attempt": attempt,
                    "cause": e.cause,
                    "timed_out": e.timed_out,
                    "error_code": e.code,
                },
            )

    logger.error(
        f"Upstream unreachable after {attempts} attempts",
        extra={"attempts": attempts},
    )
    return TransportExhausted(attempts=attempts)
