"""Retry controller tests: sequential attempts under a fixed budget.

Tests cover:
    - First success → single attempt
    - Fail, fail, succeed → third outcome returned, two warnings logged
    - All attempts fail → TransportExhausted(retries + 1), error logged
    - Completed exchanges (any status) are never retried
    - retries=0 → exactly one attempt
"""

import logging

from search_relay.core.domain_types import TransportExhausted, TransportOutcome
from search_relay.core.errors import TransportFailure
from search_relay.services.retry_controller import send_with_retries

ENVELOPE = b"<Envelope/>"


class _ScriptedSender:
    """Returns or raises the next scripted step on every send()."""

    def __init__(self, *steps):
        self.steps = list(steps)
        self.calls = 0

    async def send(self, envelope: bytes) -> TransportOutcome:
        self.calls += 1
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


def _ok(status: int = 200) -> TransportOutcome:
    return TransportOutcome(http_status=status, raw_body=b"<r/>")


def _attempt_warnings(caplog):
    return [
        r for r in caplog.records
        if r.levelno == logging.WARNING and r.name.endswith("retry_controller")
    ]


async def test_first_attempt_success_makes_one_call():
    sender = _ScriptedSender(_ok())
    outcome = await send_with_retries(sender, ENVELOPE, retries=2)
    assert outcome == _ok()
    assert sender.calls == 1


async def test_two_failures_then_success_uses_third_response(caplog):
    third = TransportOutcome(http_status=200, raw_body=b"<third/>")
    sender = _ScriptedSender(
        TransportFailure("Connection refused"),
        TransportFailure("timed out", timed_out=True),
        third,
    )
    outcome = await send_with_retries(sender, ENVELOPE, retries=2)

    assert outcome is third
    assert sender.calls == 3
    warnings = _attempt_warnings(caplog)
    assert len(warnings) == 2
    assert [w.attempt for w in warnings] == [1, 2]
    assert warnings[0].cause == "Connection refused"
    assert warnings[1].timed_out is True


async def test_all_attempts_failing_returns_exhausted(caplog):
    sender = _ScriptedSender(*(TransportFailure("reset") for _ in range(3)))
    outcome = await send_with_retries(sender, ENVELOPE, retries=2)

    assert outcome == TransportExhausted(attempts=3)
    assert sender.calls == 3
    assert len(_attempt_warnings(caplog)) == 3
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert errors[-1].attempts == 3


async def test_error_status_is_not_retried():
    sender = _ScriptedSender(_ok(status=500), _ok())
    outcome = await send_with_retries(sender, ENVELOPE, retries=2)
    assert outcome.http_status == 500
    assert sender.calls == 1


async def test_zero_retries_means_single_attempt():
    sender = _ScriptedSender(TransportFailure("refused"), _ok())
    outcome = await send_with_retries(sender, ENVELOPE, retries=0)
    assert outcome == TransportExhausted(attempts=1)
    assert sender.calls == 1


async def test_same_envelope_sent_on_every_attempt():
    seen = []

    class _Recorder(_ScriptedSender):
        async def send(self, envelope):
            seen.append(envelope)
            return await super().send(envelope)

    sender = _Recorder(TransportFailure("refused"), _ok())
    await send_with_retries(sender, ENVELOPE, retries=2)
    assert seen == [ENVELOPE, ENVELOPE]
