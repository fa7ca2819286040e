"""Response Classifier: raw upstream bytes → one ClassifiedResult.

Invariants:
    - Pure function of the response body: no network, no auth, no logging
    - ParseFailure never carries more than RAW_PREFIX_CHARS characters of the body
    - ErrorCode other than "0" (when truthy) → UpstreamBusinessError, code/message verbatim
    - Success payload is the full result mapping, unmodified
    - NumberOfRecordsFound must be plain ASCII digits, else ParseFailure
    - Any body ElementTree cannot read → ParseFailure, including unsupported
      declared encodings and nesting past the recursion limit

Design Decisions:
    - Lenient conversion: namespace URIs stripped, single children collapsed to
      scalars, repeated siblings become lists. Upstream prefix choices
      (soap: vs s: vs soapenv:) do not change the navigation path.
    - Attributes under "@name", mixed content text under "#text", empty elements → ""
    - Leaf text kept as sent (whitespace included); whitespace between child
      elements is layout and dropped
"""

import xml.etree.ElementTree as ET
from typing import Any

from search_relay.core.domain_types import (
    ClassifiedResult,
    ParseFailure,
    Success,
    UpstreamBusinessError,
)

RAW_PREFIX_CHARS = 500

RESULT_PATH = ("Envelope", "Body", "PersonSearchResponse", "PersonSearchResult")


# ─── XML → dict ──────────────────────────────────────────────────

def xml_to_dict(xml_bytes: bytes) -> dict[str, Any]:
    """Convert XML bytes into a JSON-compatible dict keyed by the root tag.

    Raises:
        ET.ParseError: If *xml_bytes* is not well-formed XML.
        ValueError: If the declared encoding is multi-byte (utf-16, shift_jis).
        LookupError: If the declared encoding is unknown.
        RecursionError: If nesting exceeds the interpreter recursion limit.
    """
    root = ET.fromstring(xml_bytes)
    return {_strip_ns(root.tag): _element_to_value(root)}


def _strip_ns(tag: str) -> str:
    """Remove namespace URI prefix: ``{http://tlo.com/}Name`` → ``Name``."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def _element_to_value(element: ET.Element) -> dict[str, Any] | str:
    result: dict[str, Any] = {}

    for name, value in element.attrib.items():
        if name.startswith("{"):
            continue  # xsi:nil, xml:lang and friends
        result[f"@{name}"] = value

    for child in element:
        key = _strip_ns(child.tag)
        value = _element_to_value(child)
        if key not in result:
            result[key] = value
        elif isinstance(result[key], list):
            result[key].append(value)
        else:
            result[key] = [result[key], value]

    text = element.text or ""
    if not result:
        return text if text.strip() else ""
    if text.strip():
        result["#text"] = text.strip()
    return result


# ─── Classification ──────────────────────────────────────────────

def classify_response(raw_body: bytes) -> ClassifiedResult:
    """Classify an upstream PersonSearch response body."""
    result = _find_result_node(raw_body)
    if result is None:
        return _parse_failure(raw_body)

    error_code = result.get("ErrorCode")
    if error_code and error_code != "0":
        return UpstreamBusinessError(
            error_code=error_code, error_message=result.get("ErrorMessage"),
        )

    records_found = _parse_record_count(result.get("NumberOfRecordsFound"))
    if records_found is None:
        return _parse_failure(raw_body)

    return Success(
        transaction_id=result.get("TransactionId"),
        records_found=records_found,
        payload=result,
    )


def _find_result_node(raw_body: bytes) -> dict[str, Any] | None:
    if not raw_body or not raw_body.strip():
        return None
    try:
        node: Any = xml_to_dict(raw_body)
    except (ET.ParseError, ValueError, LookupError, RecursionError):
        return None
    for key in RESULT_PATH:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    if not isinstance(node, dict) or not node:
        return None
    return node


def _parse_record_count(value: Any) -> int | None:
    if not isinstance(value, str):
        return None
    digits = value.strip()
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(digits)


def _parse_failure(raw_body: bytes) -> ParseFailure:
    text = raw_body.decode("utf-8", errors="replace")
    return ParseFailure(raw_prefix=text[:RAW_PREFIX_CHARS])
