"""
Pydantic models for facts, decoded states and decisions.
Every model is frozen: snapshots are rebuilt, never mutated.
"""
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from .enums import (
    EscrowPresenceStatus,
    EscrowStateName,
    FactStatus,
    GuardedAction,
    ListingStateName,
    Precondition,
    ReasonCode,
)


class RemoteFact(BaseModel):
    """One independently fetched value, tagged with its availability."""
    model_config = ConfigDict(frozen=True)

    status: FactStatus = FactStatus.LOADING
    value: Any = None
    cause: Optional[str] = None  # Why the read failed (ERRORED only)

    @classmethod
    def present(cls, value: Any) -> "RemoteFact":
        return cls(status=FactStatus.PRESENT, value=value)

    @classmethod
    def loading(cls) -> "RemoteFact":
        return cls(status=FactStatus.LOADING)

    @classmethod
    def errored(cls, cause: str) -> "RemoteFact":
        return cls(status=FactStatus.ERRORED, cause=cause)

    @property
    def is_present(self) -> bool:
        return self.status == FactStatus.PRESENT


class RemoteFactSet(BaseModel):
    """
    Snapshot of everything read about one listing.
    Each slot resolves on its own; missing slots stay LOADING.
    """
    model_config = ConfigDict(frozen=True)

    # Listing contract
    listing_state: RemoteFact = Field(default_factory=RemoteFact)
    owner: RemoteFact = Field(default_factory=RemoteFact)
    creator: RemoteFact = Field(default_factory=RemoteFact)
    escrow_address: RemoteFact = Field(default_factory=RemoteFact)

    # Escrow contract
    escrow_state: RemoteFact = Field(default_factory=RemoteFact)
    escrow_beneficiary: RemoteFact = Field(default_factory=RemoteFact)  # Informational
    total_deposits: RemoteFact = Field(default_factory=RemoteFact)      # Informational

    # Connected wallet
    caller: RemoteFact = Field(default_factory=RemoteFact)

    def with_fact(self, name: str, fact: RemoteFact) -> "RemoteFactSet":
        """Return a new snapshot with one slot replaced."""
        if name not in type(self).model_fields:
            raise KeyError(f"Unknown fact: {name}")
        return self.model_copy(update={name: fact})


class ListingState(BaseModel):
    """Decoded listing state. raw is kept only for UNKNOWN."""
    model_config = ConfigDict(frozen=True)

    name: ListingStateName
    raw: Optional[str] = None

    @computed_field
    @property
    def label(self) -> str:
        if self.name == ListingStateName.LOADING:
            return "Loading..."
        if self.name == ListingStateName.UNKNOWN:
            return f"Unknown ({self.raw})"
        return self.name.value


class EscrowState(BaseModel):
    """Decoded escrow state. raw is kept only for UNKNOWN, as text when it was not a number."""
    model_config = ConfigDict(frozen=True)

    name: EscrowStateName
    raw: Optional[Union[int, str]] = None

    @computed_field
    @property
    def label(self) -> str:
        if self.name == EscrowStateName.LOADING:
            return "Loading..."
        if self.name == EscrowStateName.UNKNOWN:
            return f"Unknown ({self.raw})"
        return self.name.value


class EscrowPresence(BaseModel):
    """Tagged escrow existence; address set only when PRESENT."""
    model_config = ConfigDict(frozen=True)

    status: EscrowPresenceStatus
    address: Optional[str] = None


class PermissionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_owner: bool = False
    is_creator: bool = False
    privileged: bool = False


class ActionRequirement(BaseModel):
    """What a guarded action needs, and where it moves the listing."""
    model_config = ConfigDict(frozen=True)

    listing_state: ListingStateName
    requires_escrow: bool = False
    escrow_state: Optional[EscrowStateName] = None
    target_state: ListingStateName


class ActionEligibility(BaseModel):
    """Whether one guarded action may be invoked now."""
    model_config = ConfigDict(frozen=True)

    action: GuardedAction
    allowed: bool
    violations: List[Precondition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _violations_match_allowed(self) -> "ActionEligibility":
        if self.allowed and self.violations:
            raise ValueError("An allowed action cannot have violations")
        if not self.allowed and not self.violations:
            raise ValueError("A blocked action needs at least one violation")
        return self


class FactIssue(BaseModel):
    """A fact behind a blocker that is not available yet."""
    model_config = ConfigDict(frozen=True)

    fact: str
    status: FactStatus
    cause: Optional[str] = None


class Reason(BaseModel):
    """The single most actionable blocker for an action."""
    model_config = ConfigDict(frozen=True)

    code: ReasonCode
    action: GuardedAction
    message: str
    required: Optional[str] = None  # WrongListingState / WrongEscrowState only
    actual: Optional[str] = None
    issues: List[FactIssue] = Field(default_factory=list)


class LifecycleDecision(BaseModel):
    """Everything derived from one fact snapshot."""
    model_config = ConfigDict(frozen=True)

    listing_state: ListingState
    escrow_state: EscrowState
    escrow_presence: EscrowPresence
    permission: PermissionResult

    eligibility: Dict[GuardedAction, ActionEligibility]
    reasons: Dict[GuardedAction, Optional[Reason]]

    expected_action: Optional[GuardedAction] = None  # What the lifecycle expects next
    next_action: Optional[GuardedAction] = None      # First action this caller may take
    is_terminal: bool = False
