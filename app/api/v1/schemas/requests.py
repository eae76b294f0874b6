"""
Request schemas for v1 API endpoints.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field
from app.core.enums import FactStatus
from app.core.models import RemoteFact, RemoteFactSet


# ===== Lifecycle Evaluate Schemas =====

class FactInput(BaseModel):
    """One remote fact as the client last saw it."""
    status: FactStatus = Field(default=FactStatus.LOADING, description="LOADING, PRESENT or ERRORED")
    value: Any = None
    cause: Optional[str] = Field(None, description="Read failure message (ERRORED only)")

    def to_fact(self) -> RemoteFact:
        return RemoteFact(status=self.status, value=self.value, cause=self.cause)


class LifecycleEvaluateRequest(BaseModel):
    """Request for /v1/listings/lifecycle:evaluate"""
    listing_state: FactInput = Field(default_factory=FactInput, description="getStateString() result")
    owner: FactInput = Field(default_factory=FactInput, description="owner() result")
    creator: FactInput = Field(default_factory=FactInput, description="getCreator() result")
    escrow_address: FactInput = Field(default_factory=FactInput, description="escrow() result")
    escrow_state: FactInput = Field(default_factory=FactInput, description="Escrow state() result (0/1/2)")
    escrow_beneficiary: FactInput = Field(default_factory=FactInput)
    total_deposits: FactInput = Field(default_factory=FactInput)
    caller: FactInput = Field(default_factory=FactInput, description="Connected wallet; PRESENT with null when disconnected")

    def to_fact_set(self) -> RemoteFactSet:
        return RemoteFactSet(**{
            name: getattr(self, name).to_fact() for name in RemoteFactSet.model_fields
        })


# ===== Lifecycle Inspect Schemas =====

class LifecycleInspectRequest(BaseModel):
    """Request for /v1/listings/lifecycle:inspect"""
    chain: str = Field(default="sepolia", description="Chain name: sepolia, ethereum, base, polygon")
    listing_address: str = Field(..., description="DEDListing contract address")
    caller_address: Optional[str] = Field(None, description="Connected wallet, omitted when disconnected")
