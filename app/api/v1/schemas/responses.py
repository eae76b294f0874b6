"""
Response schemas for v1 API endpoints.
Includes structured error handling.
"""
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime, timezone
from enum import Enum
from app.core.models import LifecycleDecision, RemoteFactSet


# ===== Error Handling =====

class ErrorCode(str, Enum):
    """Standardized error codes."""
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    UNSUPPORTED_CHAIN = "UNSUPPORTED_CHAIN"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class StructuredError(BaseModel):
    """Structured error for failed requests and partial failures."""
    code: ErrorCode
    message: str
    source: Optional[str] = Field(None, description="Which fact/provider failed")
    retryable: bool = Field(False, description="Whether client should retry")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ===== Lifecycle Response =====

class LifecycleResponse(BaseModel):
    """Response for /v1/listings/lifecycle:evaluate and :inspect"""
    request_id: str
    as_of: str
    listing_address: Optional[str] = None
    chain: Optional[str] = None

    decision: LifecycleDecision
    facts: RemoteFactSet = Field(..., description="Snapshot the decision was computed from")

    warnings: List[str] = Field(default=[])
    errors: List[StructuredError] = Field(default=[])
