"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from app.core.models import RemoteFact, RemoteFactSet


OWNER = "0x42acda9ac173cbde6382abf6c2220f34a87343bc"
CREATOR = "0x333D0C688B86AEA531520630F4366B6CD40564CE"
STRANGER = "0x55557245b1fd154558c1ef3dba459565b9db69a2"
ESCROW = "0xafa25dbf8a5af87ea1c482139a66764a89973f44"
ZERO = "0x0000000000000000000000000000000000000000"

# Markers for build_facts
LOADING = object()


class Errored:
    def __init__(self, cause: str = "execution reverted"):
        self.cause = cause


def _fact(value) -> RemoteFact:
    if value is LOADING:
        return RemoteFact.loading()
    if isinstance(value, Errored):
        return RemoteFact.errored(value.cause)
    return RemoteFact.present(value)


def build_facts(
    listing_state="InProgress",
    owner=OWNER,
    creator=CREATOR,
    escrow_address=ESCROW,
    escrow_state=0,
    caller=OWNER,
    total_deposits=10**18,
    escrow_beneficiary=OWNER,
) -> RemoteFactSet:
    """Fact snapshot defaulting to a listing that is ready for release."""
    return RemoteFactSet(
        listing_state=_fact(listing_state),
        owner=_fact(owner),
        creator=_fact(creator),
        escrow_address=_fact(escrow_address),
        escrow_state=_fact(escrow_state),
        caller=_fact(caller),
        total_deposits=_fact(total_deposits),
        escrow_beneficiary=_fact(escrow_beneficiary),
    )


@pytest.fixture
def make_facts():
    return build_facts


@pytest.fixture
def client():
    from app.main import app

    return TestClient(app)
