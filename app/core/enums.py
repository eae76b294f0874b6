"""
Core enums and types for the lifecycle decision engine.
Defines fact availability, contract states, guarded actions and reason codes.
"""
from enum import Enum


class FactStatus(str, Enum):
    """Every remote fact is in exactly one of these states."""
    LOADING = "LOADING"     # Not fetched yet (or the read was cancelled)
    PRESENT = "PRESENT"     # Read completed with a value
    ERRORED = "ERRORED"     # Read failed; cause kept for display


class ListingStateName(str, Enum):
    """States of the listing contract, as returned by getStateString()."""
    CREATED = "Created"
    ACCEPTING_PARTICIPANTS = "AcceptingParticipants"
    ACCEPTING_DEPOSIT = "AcceptingDeposit"
    AWAITING_CONFIRM = "AwaitingConfirm"
    IN_PROGRESS = "InProgress"
    REFUNDED = "Refunded"
    RELEASED = "Released"

    # Not contract states
    LOADING = "Loading"
    UNKNOWN = "Unknown"


class EscrowStateName(str, Enum):
    """States of the escrow contract (state() returns 0/1/2)."""
    ACTIVE = "Active"
    REFUNDING = "Refunding"
    CLOSED = "Closed"

    # Not contract states
    LOADING = "Loading"
    UNKNOWN = "Unknown"


class EscrowPresenceStatus(str, Enum):
    """Whether the listing has an escrow contract yet."""
    PRESENT = "PRESENT"
    MISSING = "MISSING"         # escrow() returned the zero address
    UNRESOLVED = "UNRESOLVED"   # escrow() not read yet, or the read failed


class GuardedAction(str, Enum):
    """State-changing listing calls gated by the engine."""
    CONFIRM = "confirm"
    RELEASE_ESCROW = "releaseEscrow"
    END_SESSION = "endSession"


class Precondition(str, Enum):
    """Preconditions of a guarded action, in diagnostic priority order."""
    CALLER_CONNECTED = "CALLER_CONNECTED"
    ESCROW_CREATED = "ESCROW_CREATED"
    CALLER_PRIVILEGED = "CALLER_PRIVILEGED"
    LISTING_STATE = "LISTING_STATE"
    ESCROW_STATE = "ESCROW_STATE"


class ReasonCode(str, Enum):
    """Single blocker shown to the user for an ineligible action."""
    WALLET_NOT_CONNECTED = "WalletNotConnected"
    ESCROW_NOT_CREATED = "EscrowNotCreated"
    NOT_AUTHORIZED = "NotAuthorized"
    WRONG_LISTING_STATE = "WrongListingState"
    WRONG_ESCROW_STATE = "WrongEscrowState"
    ALL_CONDITIONS_MET = "AllConditionsMet"  # Eligibility and diagnostics disagree


class Chain(str, Enum):
    """Supported blockchain networks."""
    ETHEREUM = "ethereum"
    SEPOLIA = "sepolia"
    BASE = "base"
    POLYGON = "polygon"
