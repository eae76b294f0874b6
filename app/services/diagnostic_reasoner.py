"""
Diagnostic Reasoner - explains why a guarded action is blocked.
Picks one reason per action, most actionable blocker first:
connect the wallet before hearing about state mismatches.
"""
from typing import List, Optional
from app.core.address import is_malformed_address
from app.core.enums import EscrowPresenceStatus, FactStatus, GuardedAction, ReasonCode
from app.core.logging_config import get_logger
from app.core.models import ActionEligibility, FactIssue, Reason, RemoteFactSet
from app.services.eligibility import (
    ACTION_REQUIREMENTS,
    check_preconditions,
    escrow_state_met,
    view_snapshot,
)

logger = get_logger(__name__)


class DiagnosticReasoner:
    """Turns a blocked eligibility result into a single displayable reason."""

    FACT_LABELS = {
        "caller": "wallet address",
        "owner": "listing owner",
        "creator": "listing creator",
        "listing_state": "listing state",
        "escrow_address": "escrow address",
        "escrow_state": "escrow state",
    }

    ADDRESS_FACTS = {"caller", "owner", "creator", "escrow_address"}

    MESSAGES = {
        ReasonCode.WALLET_NOT_CONNECTED: "Wallet not connected",
        ReasonCode.ESCROW_NOT_CREATED: "Escrow not created (call finalizeEducators first)",
        ReasonCode.NOT_AUTHORIZED: "Not owner or creator",
        ReasonCode.WRONG_LISTING_STATE: "Listing not in {required} state (current: {actual})",
        ReasonCode.WRONG_ESCROW_STATE: "Escrow not in {required} state (current: {actual})",
        ReasonCode.ALL_CONDITIONS_MET: "All conditions met - eligibility and diagnostics disagree",
    }

    def explain(
        self,
        action: GuardedAction,
        facts: RemoteFactSet,
        eligibility: Optional[ActionEligibility] = None
    ) -> Optional[Reason]:
        """
        Explain a blocked action; None when the action is allowed.
        Checks run in priority order and the first match wins.
        """
        view = view_snapshot(facts)
        if eligibility is None:
            eligibility = check_preconditions(action, view)

        if eligibility.allowed:
            return None

        requirement = ACTION_REQUIREMENTS[action]

        # 1. Wallet
        if view.caller is None:
            return self._reason(action, ReasonCode.WALLET_NOT_CONNECTED, self._issues(facts, "caller"))

        # 2. Escrow existence (release only)
        if requirement.requires_escrow and view.escrow_presence.status == EscrowPresenceStatus.MISSING:
            return self._reason(action, ReasonCode.ESCROW_NOT_CREATED)

        # 3. Permission
        if not view.permission.privileged:
            return self._reason(action, ReasonCode.NOT_AUTHORIZED, self._issues(facts, "owner", "creator"))

        # 4. Listing state
        if view.listing_state.name != requirement.listing_state:
            return self._reason(
                action,
                ReasonCode.WRONG_LISTING_STATE,
                self._issues(facts, "listing_state"),
                required=requirement.listing_state.value,
                actual=view.listing_state.label
            )

        # 5. Escrow state (release only)
        if requirement.escrow_state is not None and not escrow_state_met(requirement, view):
            if view.escrow_presence.status == EscrowPresenceStatus.UNRESOLVED:
                issues = self._issues(facts, "escrow_address")
            else:
                issues = self._issues(facts, "escrow_state")
            return self._reason(
                action,
                ReasonCode.WRONG_ESCROW_STATE,
                issues,
                required=requirement.escrow_state.value,
                actual=view.escrow_state.label
            )

        # 6. Unreachable while eligibility and this ordering agree
        logger.error(
            "No blocker found for %s although it is not allowed (violations: %s)",
            action.value,
            [v.value for v in eligibility.violations]
        )
        return self._reason(action, ReasonCode.ALL_CONDITIONS_MET)

    def _issues(self, facts: RemoteFactSet, *names: str) -> List[FactIssue]:
        """Facts among names that have not resolved to a usable value."""
        issues = []
        for name in names:
            fact = getattr(facts, name)
            if fact.status != FactStatus.PRESENT:
                issues.append(FactIssue(fact=name, status=fact.status, cause=fact.cause))
            elif name in self.ADDRESS_FACTS and is_malformed_address(fact.value):
                issues.append(FactIssue(
                    fact=name,
                    status=FactStatus.ERRORED,
                    cause=f"not a valid address: {fact.value!r}"
                ))
        return issues

    def _reason(
        self,
        action: GuardedAction,
        code: ReasonCode,
        issues: Optional[List[FactIssue]] = None,
        required: Optional[str] = None,
        actual: Optional[str] = None
    ) -> Reason:
        issues = issues or []
        message = self.MESSAGES[code].format(required=required, actual=actual)

        if issues:
            message = f"{message} ({self._describe_issues(issues)})"

        return Reason(
            code=code,
            action=action,
            message=message,
            required=required,
            actual=actual,
            issues=issues
        )

    def _describe_issues(self, issues: List[FactIssue]) -> str:
        parts = []
        for issue in issues:
            label = self.FACT_LABELS.get(issue.fact, issue.fact)
            if issue.status == FactStatus.ERRORED:
                parts.append(f"{label} could not be read: {issue.cause or 'unknown error'}")
            else:
                parts.append(f"{label} still loading")
        return "; ".join(parts)
