"""Domain Types: immutable values that flow through one person search.

Invariants:
    - SearchQuery and OutboundCredentials are frozen; never mutated after construction
    - OutboundCredentials never renders its values in repr()
    - Exactly one ClassifiedResult variant is produced per handled request
    - TransportOutcome only describes a completed HTTP exchange (failures are raised)

Design Decisions:
    - Frozen dataclasses over Pydantic models: core/ stays framework-free
    - ClassifiedResult as a Union of dataclasses: callers dispatch with isinstance,
      type checkers see every case
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


@dataclass(frozen=True)
class SearchQuery:
    """Validated person search input. Fields are raw caller text (unescaped)."""
    first_name: str
    last_name: str
    ssn: str

    def __repr__(self) -> str:
        return f"SearchQuery(first_name={self.first_name!r}, last_name={self.last_name!r}, ssn='***')"


@dataclass(frozen=True)
class OutboundCredentials:
    """Upstream account credentials embedded in every envelope."""
    username: str = field(repr=False)
    password: str = field(repr=False)


@dataclass(frozen=True)
class TransportOutcome:
    """A completed HTTP exchange with the upstream, any status code."""
    http_status: int
    raw_body: bytes


# ─── Classified results ──────────────────────────────────────────

class Classification(str, Enum):
    """Stable names for the terminal outcomes, used in logs."""
    SUCCESS = "success"
    UPSTREAM_BUSINESS_ERROR = "upstream_business_error"
    PARSE_FAILURE = "parse_failure"
    TRANSPORT_EXHAUSTED = "transport_exhausted"


@dataclass(frozen=True)
class Success:
    transaction_id: str | None
    records_found: int
    payload: dict[str, Any]

    classification = Classification.SUCCESS


@dataclass(frozen=True)
class UpstreamBusinessError:
    """Well-formed negative answer from upstream (not found, rejected input, limits)."""
    error_code: Any
    error_message: Any

    classification = Classification.UPSTREAM_BUSINESS_ERROR


@dataclass(frozen=True)
class ParseFailure:
    """Response without a recognizable result node. raw_prefix is bounded."""
    raw_prefix: str

    classification = Classification.PARSE_FAILURE


@dataclass(frozen=True)
class TransportExhausted:
    attempts: int

    classification = Classification.TRANSPORT_EXHAUSTED


ClassifiedResult = Union[Success, UpstreamBusinessError, ParseFailure, TransportExhausted]
