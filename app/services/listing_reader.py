"""
Listing fact reader.
Reads the listing and escrow contracts over RPC and packs every read into a
RemoteFactSet. Each read is independent; a failed read becomes an ERRORED fact.
"""
import asyncio
from typing import Dict, Optional, Tuple
from web3 import Web3
from eth_utils import to_checksum_address
from app.core.address import escrow_presence
from app.core.config import settings
from app.core.enums import EscrowPresenceStatus
from app.core.logging_config import get_logger
from app.core.models import RemoteFact, RemoteFactSet

logger = get_logger(__name__)


class ListingFactReader:
    """Fetches the facts the decision engine needs for one listing."""

    # fact name -> (function signature, return type)
    LISTING_CALLS: Dict[str, Tuple[str, str]] = {
        "owner": ("owner()", "address"),
        "creator": ("getCreator()", "address"),
        "listing_state": ("getStateString()", "string"),
        "escrow_address": ("escrow()", "address"),
    }

    # Only queried once escrow() returned a non-zero address
    ESCROW_CALLS: Dict[str, Tuple[str, str]] = {
        "escrow_state": ("state()", "uint8"),
        "escrow_beneficiary": ("escrowBeneficiary()", "address"),
        "total_deposits": ("totalDeposits()", "uint256"),
    }

    def __init__(self, chain: str, web3: Optional[Web3] = None):
        self.chain = chain.lower()

        if web3 is None:
            rpc_url = settings.get_rpc_url(self.chain)
            if not rpc_url:
                raise ValueError(f"No RPC URL configured for chain: {chain}")
            web3 = Web3(Web3.HTTPProvider(
                rpc_url,
                request_kwargs={"timeout": settings.rpc_timeout_seconds}
            ))

        self.web3 = web3

    async def read_facts(self, listing_address: str, caller_address: Optional[str] = None) -> RemoteFactSet:
        """
        Read every fact for a listing.
        A missing caller_address means no wallet is connected.
        """
        listing = to_checksum_address(listing_address)
        facts = await self._read_calls(listing, self.LISTING_CALLS)

        presence = escrow_presence(facts["escrow_address"])
        if presence.status == EscrowPresenceStatus.PRESENT:
            escrow = to_checksum_address(presence.address)
            facts.update(await self._read_calls(escrow, self.ESCROW_CALLS))

        facts["caller"] = RemoteFact.present(caller_address or None)

        return RemoteFactSet(**facts)

    async def _read_calls(self, address: str, calls: Dict[str, Tuple[str, str]]) -> Dict[str, RemoteFact]:
        """Run a group of reads concurrently; none of them can fail the others."""
        names = list(calls)
        results = await asyncio.gather(*(
            asyncio.to_thread(self._read, address, *calls[name]) for name in names
        ))
        return dict(zip(names, results))

    def _read(self, address: str, signature: str, return_type: str) -> RemoteFact:
        try:
            selector = Web3.to_hex(self.web3.keccak(text=signature)[:4])
            result = self.web3.eth.call({"to": address, "data": selector})
            return RemoteFact.present(self._decode(bytes(result), return_type))

        except Exception as e:
            logger.warning("%s on %s failed: %s", signature, address, e)
            return RemoteFact.errored(f"{signature} call failed: {e}")

    def _decode(self, result: bytes, return_type: str):
        if len(result) < 32:
            raise ValueError("empty return data (not a listing/escrow contract?)")

        if return_type == "address":
            return to_checksum_address("0x" + result[12:32].hex())

        if return_type == "string":
            return self.web3.codec.decode(["string"], result)[0]

        # uint8 / uint256
        return int.from_bytes(result[:32], "big")
