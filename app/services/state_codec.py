"""
State codecs - the one place contract enums are mapped to symbolic states.
Decoding is total: unmapped values become UNKNOWN, absent values LOADING.
"""
from typing import Any, Optional
from app.core.enums import EscrowStateName, ListingStateName
from app.core.models import EscrowState, ListingState


class EscrowStateCodec:
    """Maps DEDEscrow.State (uint8) to EscrowState and back."""

    STATES = {
        0: EscrowStateName.ACTIVE,
        1: EscrowStateName.REFUNDING,
        2: EscrowStateName.CLOSED,
    }
    CODES = {name: code for code, name in STATES.items()}

    @classmethod
    def decode(cls, raw: Any) -> EscrowState:
        if raw is None:
            return EscrowState(name=EscrowStateName.LOADING)

        # bool is an int subclass but never a valid state
        if isinstance(raw, bool) or not isinstance(raw, int):
            try:
                raw = int(str(raw), 0)
            except ValueError:
                return EscrowState(name=EscrowStateName.UNKNOWN, raw=str(raw))

        name = cls.STATES.get(raw)
        if name is None:
            return EscrowState(name=EscrowStateName.UNKNOWN, raw=raw)
        return EscrowState(name=name)

    @classmethod
    def encode(cls, state: EscrowState) -> Optional[int]:
        """Numeric value for a state; None while loading or when it never was a number."""
        if state.name == EscrowStateName.UNKNOWN:
            return state.raw if isinstance(state.raw, int) else None
        return cls.CODES.get(state.name)


class ListingStateCodec:
    """
    Maps the listing contract state to ListingState.
    Accepts the getStateString() display string or the raw state() index.
    """

    INDEXED_STATES = {
        0: ListingStateName.CREATED,
        1: ListingStateName.ACCEPTING_PARTICIPANTS,
        2: ListingStateName.ACCEPTING_DEPOSIT,
        3: ListingStateName.AWAITING_CONFIRM,
        4: ListingStateName.IN_PROGRESS,
        5: ListingStateName.REFUNDED,
        6: ListingStateName.RELEASED,
    }
    CONTRACT_STATES = {name.value: name for name in INDEXED_STATES.values()}

    TERMINAL_STATES = {
        ListingStateName.RELEASED,
        ListingStateName.REFUNDED,
    }

    @classmethod
    def decode(cls, raw: Any) -> ListingState:
        if raw is None:
            return ListingState(name=ListingStateName.LOADING)

        if isinstance(raw, int) and not isinstance(raw, bool):
            name = cls.INDEXED_STATES.get(raw)
        else:
            raw = str(raw)
            name = cls.CONTRACT_STATES.get(raw)

        if name is None:
            return ListingState(name=ListingStateName.UNKNOWN, raw=str(raw))
        return ListingState(name=name)

    @classmethod
    def is_terminal(cls, state: ListingState) -> bool:
        return state.name in cls.TERMINAL_STATES
