"""
Eligibility rules for guarded listing actions.
Shared by the decision engine and the diagnostic reasoner so both read
a fact snapshot the same way.
"""
from typing import List, NamedTuple, Optional
from app.core.address import escrow_presence, normalize_address
from app.core.enums import (
    EscrowPresenceStatus,
    EscrowStateName,
    GuardedAction,
    ListingStateName,
    Precondition,
)
from app.core.models import (
    ActionEligibility,
    ActionRequirement,
    EscrowPresence,
    EscrowState,
    ListingState,
    PermissionResult,
    RemoteFact,
    RemoteFactSet,
)
from app.services.permission_evaluator import PermissionEvaluator
from app.services.state_codec import EscrowStateCodec, ListingStateCodec


_RELEASE = ActionRequirement(
    listing_state=ListingStateName.IN_PROGRESS,
    requires_escrow=True,
    escrow_state=EscrowStateName.ACTIVE,
    target_state=ListingStateName.RELEASED
)

ACTION_REQUIREMENTS = {
    GuardedAction.CONFIRM: ActionRequirement(
        listing_state=ListingStateName.AWAITING_CONFIRM,
        target_state=ListingStateName.IN_PROGRESS
    ),
    GuardedAction.RELEASE_ESCROW: _RELEASE,
    # Ending a session submits releaseEscrow
    GuardedAction.END_SESSION: _RELEASE,
}


class SnapshotView(NamedTuple):
    """Facts of one snapshot, decoded into symbolic values."""
    caller: Optional[str]
    listing_state: ListingState
    escrow_presence: EscrowPresence
    escrow_state: EscrowState
    permission: PermissionResult


def fact_value(fact: RemoteFact):
    """Value of a resolved fact; None while loading or after a failed read."""
    return fact.value if fact.is_present else None


def view_snapshot(facts: RemoteFactSet) -> SnapshotView:
    presence = escrow_presence(facts.escrow_address)

    # The escrow contract is only read once its address is known
    if presence.status == EscrowPresenceStatus.PRESENT:
        escrow_state = EscrowStateCodec.decode(fact_value(facts.escrow_state))
    else:
        escrow_state = EscrowStateCodec.decode(None)

    return SnapshotView(
        caller=normalize_address(fact_value(facts.caller)),
        listing_state=ListingStateCodec.decode(fact_value(facts.listing_state)),
        escrow_presence=presence,
        escrow_state=escrow_state,
        permission=PermissionEvaluator.evaluate(
            fact_value(facts.caller),
            fact_value(facts.owner),
            fact_value(facts.creator)
        )
    )


def check_preconditions(action: GuardedAction, view: SnapshotView) -> ActionEligibility:
    """List every violated precondition, in diagnostic priority order."""
    requirement = ACTION_REQUIREMENTS[action]
    violations: List[Precondition] = []

    if view.caller is None:
        violations.append(Precondition.CALLER_CONNECTED)

    if requirement.requires_escrow and view.escrow_presence.status == EscrowPresenceStatus.MISSING:
        violations.append(Precondition.ESCROW_CREATED)

    if not view.permission.privileged:
        violations.append(Precondition.CALLER_PRIVILEGED)

    # UNKNOWN and LOADING never equal a required state
    if view.listing_state.name != requirement.listing_state:
        violations.append(Precondition.LISTING_STATE)

    if requirement.escrow_state is not None and not escrow_state_met(requirement, view):
        violations.append(Precondition.ESCROW_STATE)

    return ActionEligibility(
        action=action,
        allowed=not violations,
        violations=violations
    )


def escrow_state_met(requirement: ActionRequirement, view: SnapshotView) -> bool:
    return (
        view.escrow_presence.status == EscrowPresenceStatus.PRESENT
        and view.escrow_state.name == requirement.escrow_state
    )
