"""
Permission evaluation for listing calls guarded by onlyOwnerOrCreator.
"""
from typing import Any
from app.core.address import addresses_equal, normalize_address
from app.core.models import PermissionResult


class PermissionEvaluator:
    """Decides whether a caller is the listing owner or its creator."""

    @staticmethod
    def evaluate(caller: Any, owner: Any, creator: Any) -> PermissionResult:
        # Unknown identity never grants privilege
        if normalize_address(caller) is None:
            return PermissionResult()

        is_owner = addresses_equal(caller, owner)
        is_creator = addresses_equal(caller, creator)

        return PermissionResult(
            is_owner=is_owner,
            is_creator=is_creator,
            privileged=is_owner or is_creator
        )
