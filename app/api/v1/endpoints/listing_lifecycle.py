"""
Listing lifecycle endpoints - /v1/listings/lifecycle:evaluate and :inspect
Gate confirm / releaseEscrow / endSession buttons and explain why they are blocked.
"""
from fastapi import APIRouter, HTTPException
from datetime import datetime, timezone
from typing import List, Optional, Tuple
import uuid

from eth_utils import is_address

from app.api.v1.schemas.requests import LifecycleEvaluateRequest, LifecycleInspectRequest
from app.api.v1.schemas.responses import (
    ErrorCode,
    LifecycleResponse,
    StructuredError,
)
from app.core.enums import FactStatus
from app.core.logging_config import get_logger
from app.core.models import RemoteFactSet
from app.services.lifecycle_engine import LifecycleDecisionEngine
from app.services.listing_reader import ListingFactReader

router = APIRouter()
logger = get_logger(__name__)

engine = LifecycleDecisionEngine()


@router.post("/listings/lifecycle:evaluate", response_model=LifecycleResponse)
async def evaluate_lifecycle(request: LifecycleEvaluateRequest):
    """
    **Evaluate a fact snapshot**

    Pure decision over facts the client already fetched.
    No RPC calls are made. Re-post whenever any fact changes.
    """
    facts = request.to_fact_set()
    return _build_response(facts)


@router.post("/listings/lifecycle:inspect", response_model=LifecycleResponse)
async def inspect_lifecycle(request: LifecycleInspectRequest):
    """
    **Read a listing from chain and evaluate it**

    Reads owner, creator, state and escrow of the listing (and the escrow
    contract when one exists), then returns the same decision as :evaluate.
    Failed reads show up as ERRORED facts, not as request failures.
    """
    if not is_address(request.listing_address):
        _bad_request(ErrorCode.INVALID_ADDRESS, f"Invalid listing address: {request.listing_address}", "listing_address")

    if request.caller_address and not is_address(request.caller_address):
        _bad_request(ErrorCode.INVALID_ADDRESS, f"Invalid caller address: {request.caller_address}", "caller_address")

    try:
        reader = ListingFactReader(request.chain)
    except ValueError as e:
        _bad_request(ErrorCode.UNSUPPORTED_CHAIN, str(e), request.chain)

    logger.info("Inspecting listing %s on %s", request.listing_address, reader.chain)
    facts = await reader.read_facts(request.listing_address, request.caller_address)

    return _build_response(facts, listing_address=request.listing_address, chain=reader.chain)


def _build_response(
    facts: RemoteFactSet,
    listing_address: Optional[str] = None,
    chain: Optional[str] = None
) -> LifecycleResponse:
    decision = engine.decide(facts)
    warnings, errors = _collect_fact_failures(facts)

    return LifecycleResponse(
        request_id=str(uuid.uuid4()),
        as_of=datetime.now(timezone.utc).isoformat(),
        listing_address=listing_address,
        chain=chain,
        decision=decision,
        facts=facts,
        warnings=warnings,
        errors=errors
    )


def _collect_fact_failures(facts: RemoteFactSet) -> Tuple[List[str], List[StructuredError]]:
    """Surface ERRORED facts as partial failures."""
    warnings = []
    errors = []

    for name in RemoteFactSet.model_fields:
        fact = getattr(facts, name)
        if fact.status == FactStatus.ERRORED:
            errors.append(StructuredError(
                code=ErrorCode.UPSTREAM_ERROR,
                message=fact.cause or f"Failed to read {name}",
                source=name,
                retryable=True
            ))
            warnings.append(f"{name} unavailable; dependent actions are blocked")

    return warnings, errors


def _bad_request(code: ErrorCode, message: str, source: Optional[str] = None):
    error = StructuredError(code=code, message=message, source=source, retryable=False)
    raise HTTPException(status_code=400, detail=error.model_dump(mode="json"))
