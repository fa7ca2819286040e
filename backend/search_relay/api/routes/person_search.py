"""Person Search Route: the relay's single authenticated operation.

Invariants:
    - Auth (dependency) → validation → pipeline → HTTP mapping, in that order
    - 401 and 400 paths never call upstream
    - Every ClassifiedResult variant maps to exactly one status/body pair:
        Success → 200 ok:true, UpstreamBusinessError → 200 ok:false tloError:true,
        ParseFailure → 502 SOAP_PARSE_FAILED, TransportExhausted → 504 TLO_TIMEOUT

Design Decisions:
    - Body read manually (not a Pydantic body param) so the shared-secret check
      is guaranteed to run first and malformed JSON maps to INVALID_INPUT
    - Mounted under settings.person_search_path by create_app
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from search_relay.api.dependencies import (
    get_relay_settings,
    get_upstream_client,
    require_shared_secret,
)
from search_relay.config import Settings
from search_relay.core.domain_types import (
    ClassifiedResult,
    ParseFailure,
    Success,
    UpstreamBusinessError,
)
from search_relay.core.errors import ValidationFailure
from search_relay.infrastructure.upstream_client import UpstreamClient
from search_relay.schemas.person_search import parse_search_query
from search_relay.services.person_search import run_person_search

router = APIRouter(tags=["person-search"])


@router.post("", dependencies=[Depends(require_shared_secret)])
async def person_search(
    request: Request,
    settings: Settings = Depends(get_relay_settings),
    upstream: UpstreamClient = Depends(get_upstream_client),
):
    """Relay a person search to the upstream SOAP service."""
    try:
        payload = await request.json()
    except ValueError as e:
        raise ValidationFailure("body") from e
    query = parse_search_query(payload)

    result = await run_person_search(
        query, settings.outbound_credentials(), upstream, settings.tlo_retries,
    )
    return render_result(result)


def render_result(result: ClassifiedResult) -> JSONResponse:
    """Map a classified outcome onto the relay's HTTP contract."""
    if isinstance(result, Success):
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "ok": True,
                "transactionId": result.transaction_id,
                "recordsFound": result.records_found,
                "data": result.payload,
            },
        )
    if isinstance(result, UpstreamBusinessError):
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={
                "ok": False,
                "tloError": True,
                "errorCode": result.error_code,
                "errorMessage": result.error_message,
            },
        )
    if isinstance(result, ParseFailure):
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "ok": False,
                "error": "SOAP_PARSE_FAILED",
                "rawStart": result.raw_prefix,
            },
        )
    return JSONResponse(
        status_code=status.HTTP_504_GATEWAY_TIMEOUT,
        content={"ok": False, "error": "TLO_TIMEOUT"},
    )
