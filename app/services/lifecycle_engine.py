"""
Lifecycle Decision Engine - decides which listing actions are legal right now.
Combines listing state, escrow state and caller permission into eligibility,
diagnostics and the next action in the listing lifecycle.
"""
import logging
from typing import Dict, Optional
from app.core.enums import GuardedAction, ListingStateName
from app.core.logging_config import get_logger
from app.core.models import ActionEligibility, LifecycleDecision, RemoteFactSet
from app.services.diagnostic_reasoner import DiagnosticReasoner
from app.services.eligibility import check_preconditions, view_snapshot
from app.services.state_codec import ListingStateCodec

logger = get_logger(__name__)


class LifecycleDecisionEngine:
    """
    Snapshot function over a RemoteFactSet.
    Holds no state between calls: re-invoke whenever any fact changes.

    AwaitingConfirm --confirm--> InProgress --releaseEscrow--> Released
    """

    # Order in which the lifecycle offers actions
    LIFECYCLE_ORDER = [
        GuardedAction.CONFIRM,
        GuardedAction.RELEASE_ESCROW,
    ]

    # Action the lifecycle expects from each state, whoever the caller is
    EXPECTED_ACTIONS = {
        ListingStateName.AWAITING_CONFIRM: GuardedAction.CONFIRM,
        ListingStateName.IN_PROGRESS: GuardedAction.RELEASE_ESCROW,
    }

    def __init__(self, reasoner: Optional[DiagnosticReasoner] = None):
        self.reasoner = reasoner or DiagnosticReasoner()

    def evaluate(self, action: GuardedAction, facts: RemoteFactSet) -> ActionEligibility:
        """Eligibility of a single action."""
        return check_preconditions(action, view_snapshot(facts))

    def evaluate_all(self, facts: RemoteFactSet) -> Dict[GuardedAction, ActionEligibility]:
        """Eligibility of every guarded action, each judged independently."""
        view = view_snapshot(facts)
        return {action: check_preconditions(action, view) for action in GuardedAction}

    def decide(self, facts: RemoteFactSet) -> LifecycleDecision:
        """
        Full decision for a snapshot.
        Returns eligibility and reason per action plus the next legal action.
        """
        view = view_snapshot(facts)
        eligibility = {action: check_preconditions(action, view) for action in GuardedAction}

        reasons = {
            action: self.reasoner.explain(action, facts, eligibility[action])
            for action in GuardedAction
        }

        next_action = next(
            (action for action in self.LIFECYCLE_ORDER if eligibility[action].allowed),
            None
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Decision for listing state %s, escrow %s/%s: allowed=%s",
                view.listing_state.label,
                view.escrow_presence.status.value,
                view.escrow_state.label,
                [a.value for a, e in eligibility.items() if e.allowed]
            )

        return LifecycleDecision(
            listing_state=view.listing_state,
            escrow_state=view.escrow_state,
            escrow_presence=view.escrow_presence,
            permission=view.permission,
            eligibility=eligibility,
            reasons=reasons,
            expected_action=self.EXPECTED_ACTIONS.get(view.listing_state.name),
            next_action=next_action,
            is_terminal=ListingStateCodec.is_terminal(view.listing_state)
        )
