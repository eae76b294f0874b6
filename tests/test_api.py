"""Tests for the listing lifecycle HTTP endpoints."""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

from conftest import CREATOR, ESCROW, OWNER, STRANGER, ZERO, build_facts, Errored


def present(value):
    return {"status": "PRESENT", "value": value}


def ready_for_release(**overrides):
    body = {
        "listing_state": present("InProgress"),
        "owner": present(OWNER),
        "creator": present(CREATOR),
        "escrow_address": present(ESCROW),
        "escrow_state": present(0),
        "caller": present(OWNER),
    }
    body.update(overrides)
    return body


class TestServiceInfo:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "evaluate" in response.json()["endpoints"]

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestEvaluateEndpoint:
    def test_release_allowed(self, client):
        response = client.post("/v1/listings/lifecycle:evaluate", json=ready_for_release())

        assert response.status_code == 200
        data = response.json()
        decision = data["decision"]
        assert decision["eligibility"]["releaseEscrow"]["allowed"] is True
        assert decision["eligibility"]["endSession"]["allowed"] is True
        assert decision["reasons"]["releaseEscrow"] is None
        assert decision["next_action"] == "releaseEscrow"
        assert decision["escrow_state"]["label"] == "Active"
        assert data["errors"] == []

    def test_refunding_reason(self, client):
        body = ready_for_release(escrow_state=present(1))
        data = client.post("/v1/listings/lifecycle:evaluate", json=body).json()

        reason = data["decision"]["reasons"]["releaseEscrow"]
        assert reason["code"] == "WrongEscrowState"
        assert reason["required"] == "Active"
        assert reason["actual"] == "Refunding"
        assert data["decision"]["eligibility"]["releaseEscrow"]["violations"] == ["ESCROW_STATE"]

    def test_empty_snapshot_blocks_everything(self, client):
        data = client.post("/v1/listings/lifecycle:evaluate", json={}).json()

        for eligibility in data["decision"]["eligibility"].values():
            assert eligibility["allowed"] is False
        assert data["decision"]["reasons"]["confirm"]["code"] == "WalletNotConnected"
        assert data["decision"]["listing_state"]["label"] == "Loading..."

    def test_errored_fact_reported(self, client):
        body = ready_for_release(owner={"status": "ERRORED", "cause": "execution reverted"})
        data = client.post("/v1/listings/lifecycle:evaluate", json=body).json()

        assert data["decision"]["reasons"]["releaseEscrow"]["code"] == "NotAuthorized"
        assert data["errors"][0]["code"] == "UPSTREAM_ERROR"
        assert data["errors"][0]["source"] == "owner"
        assert data["warnings"]

    def test_short_zero_escrow_blocks_release(self, client):
        body = ready_for_release(escrow_address=present("0x0"))
        data = client.post("/v1/listings/lifecycle:evaluate", json=body).json()

        decision = data["decision"]
        assert decision["escrow_presence"]["status"] == "UNRESOLVED"
        assert decision["eligibility"]["releaseEscrow"]["allowed"] is False
        assert decision["reasons"]["releaseEscrow"]["issues"][0]["fact"] == "escrow_address"

    def test_name_is_not_an_identity(self, client):
        body = ready_for_release(
            escrow_address=present("not-an-address"),
            owner=present("bob"),
            caller=present("BOB"),
        )
        decision = client.post("/v1/listings/lifecycle:evaluate", json=body).json()["decision"]

        assert decision["permission"]["privileged"] is False
        assert decision["eligibility"]["releaseEscrow"]["allowed"] is False

    def test_error_timestamps_are_utc(self, client):
        body = ready_for_release(owner={"status": "ERRORED", "cause": "execution reverted"})
        data = client.post("/v1/listings/lifecycle:evaluate", json=body).json()

        timestamp = datetime.fromisoformat(data["errors"][0]["timestamp"].replace("Z", "+00:00"))
        assert timestamp.utcoffset() == timedelta(0)

    def test_invalid_status_rejected(self, client):
        body = ready_for_release(owner={"status": "MAYBE"})
        response = client.post("/v1/listings/lifecycle:evaluate", json=body)
        assert response.status_code == 422

    def test_same_snapshot_same_decision(self, client):
        body = ready_for_release(caller=present(STRANGER))
        first = client.post("/v1/listings/lifecycle:evaluate", json=body).json()
        second = client.post("/v1/listings/lifecycle:evaluate", json=body).json()
        assert first["decision"] == second["decision"]
        assert first["request_id"] != second["request_id"]


class TestInspectEndpoint:
    LISTING = "0x2de109ee75da6d0cd9c3321e2576600411b2a711"

    def test_invalid_listing_address(self, client):
        response = client.post(
            "/v1/listings/lifecycle:inspect",
            json={"listing_address": "not-an-address"},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_ADDRESS"

    def test_invalid_caller_address(self, client):
        response = client.post(
            "/v1/listings/lifecycle:inspect",
            json={"listing_address": self.LISTING, "caller_address": "0x123"},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["source"] == "caller_address"

    def test_unsupported_chain(self, client):
        response = client.post(
            "/v1/listings/lifecycle:inspect",
            json={"chain": "solana", "listing_address": self.LISTING},
        )
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "UNSUPPORTED_CHAIN"

    def test_reads_and_decides(self, client):
        facts = build_facts(listing_state="AwaitingConfirm", escrow_address=ZERO, caller=CREATOR)

        with patch(
            "app.api.v1.endpoints.listing_lifecycle.ListingFactReader.read_facts",
            new_callable=AsyncMock,
        ) as mock_read:
            mock_read.return_value = facts
            response = client.post(
                "/v1/listings/lifecycle:inspect",
                json={"listing_address": self.LISTING, "caller_address": CREATOR.lower()},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["chain"] == "sepolia"
        assert data["listing_address"] == self.LISTING
        assert data["decision"]["next_action"] == "confirm"
        assert data["decision"]["escrow_presence"]["status"] == "MISSING"
        assert data["decision"]["reasons"]["releaseEscrow"]["code"] == "EscrowNotCreated"
        mock_read.assert_awaited_once_with(self.LISTING, CREATOR.lower())

    def test_partial_failure_is_not_5xx(self, client):
        facts = build_facts(escrow_state=Errored("rpc timeout"))

        with patch(
            "app.api.v1.endpoints.listing_lifecycle.ListingFactReader.read_facts",
            new_callable=AsyncMock,
        ) as mock_read:
            mock_read.return_value = facts
            response = client.post(
                "/v1/listings/lifecycle:inspect",
                json={"listing_address": self.LISTING, "caller_address": OWNER},
            )

        assert response.status_code == 200
        data = response.json()
        assert data["facts"]["escrow_state"]["status"] == "ERRORED"
        assert data["errors"][0]["source"] == "escrow_state"
        reason = data["decision"]["reasons"]["releaseEscrow"]
        assert "rpc timeout" in reason["message"]
