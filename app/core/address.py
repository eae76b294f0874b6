"""
Address helpers.
Addresses compare case-insensitively; the zero address means "no escrow yet".
Anything that is not a 20-byte hex address counts as no address at all.
"""
from typing import Any, Optional

from eth_utils import is_hex_address

from app.core.enums import EscrowPresenceStatus, FactStatus
from app.core.models import EscrowPresence, RemoteFact

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def normalize_address(address: Any) -> Optional[str]:
    """Lower-case an address; None for anything absent or malformed."""
    if not isinstance(address, str):
        return None
    address = address.strip().lower()
    if not is_hex_address(address):
        return None
    return address


def is_blank(value: Any) -> bool:
    """An unset address slot: None or an empty string."""
    return value is None or (isinstance(value, str) and not value.strip())


def is_malformed_address(value: Any) -> bool:
    """Set, but not something normalize_address accepts."""
    return not is_blank(value) and normalize_address(value) is None


def addresses_equal(a: Any, b: Any) -> bool:
    """Exact match after lower-casing. Absent addresses never match."""
    a = normalize_address(a)
    b = normalize_address(b)
    return a is not None and b is not None and a == b


def escrow_presence(escrow_address: RemoteFact) -> EscrowPresence:
    """Turn the raw escrow() read into a tagged presence value."""
    if escrow_address.status != FactStatus.PRESENT:
        return EscrowPresence(status=EscrowPresenceStatus.UNRESOLVED)

    if is_blank(escrow_address.value):
        return EscrowPresence(status=EscrowPresenceStatus.MISSING)

    # A value like "0x0" is not an address we can trust either way
    address = normalize_address(escrow_address.value)
    if address is None:
        return EscrowPresence(status=EscrowPresenceStatus.UNRESOLVED)

    if address == ZERO_ADDRESS:
        return EscrowPresence(status=EscrowPresenceStatus.MISSING)

    return EscrowPresence(status=EscrowPresenceStatus.PRESENT, address=address)
