# This project was developed with assistance from AI tools.
"""Committee decision reads and member voting."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from .data_factory import (
    make_committee_review_app,
    make_decision,
    make_member_decision,
    make_member_review_app,
)
from .mock_db import fill_on_refresh, make_mock_session
from .personas import (
    MEMBER_OTHER_USER_ID,
    MEMBER_USER_ID,
    approval_committee,
    committee_member,
    credit_analyst,
    relationship_manager,
)

pytestmark = pytest.mark.functional

REFERENCE_MEMBER = "DASHEN-202601-1004"
REFERENCE_COMMITTEE = "DASHEN-202601-1005"
VOTE = {"decision": "APPROVED", "decision_reason": "Acceptable risk"}


class TestMemberVotes:
    def test_member_votes_during_member_review(self, make_client, audit_writer):
        session = make_mock_session(single=make_member_review_app())
        fill_on_refresh(session, id=801, decision_date=datetime.now(UTC))
        client = make_client(committee_member(), session)

        resp = client.post(f"/api/decisions/{REFERENCE_MEMBER}/members", json=VOTE)

        assert resp.status_code == 201
        body = resp.json()
        assert body["user_id"] == MEMBER_USER_ID
        assert body["member_name"] == "Yonas Haile"
        assert body["decision"] == "APPROVED"
        session.commit.assert_awaited_once()
        assert audit_writer.await_args.kwargs["event_type"] == "member_decision"

    def test_second_vote_conflicts(self, make_client):
        session = make_mock_session(single=make_member_review_app())
        session.flush = AsyncMock(
            side_effect=IntegrityError("INSERT", {}, Exception("uq_member_decision"))
        )
        client = make_client(committee_member(), session)

        resp = client.post(f"/api/decisions/{REFERENCE_MEMBER}/members", json=VOTE)

        assert resp.status_code == 409
        assert "already recorded" in resp.json()["detail"]
        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()

    def test_voting_closed_outside_member_review(self, make_client):
        session = make_mock_session(single=make_committee_review_app())
        client = make_client(committee_member(), session)

        resp = client.post(f"/api/decisions/{REFERENCE_COMMITTEE}/members", json=VOTE)

        assert resp.status_code == 409
        assert "voting is closed" in resp.json()["detail"]
        session.add.assert_not_called()

    def test_unknown_application_is_404(self, make_client):
        client = make_client(committee_member(), make_mock_session(single=None))

        resp = client.post("/api/decisions/DASHEN-202601-9999/members", json=VOTE)

        assert resp.status_code == 404

    @pytest.mark.parametrize("persona", [credit_analyst, relationship_manager])
    def test_non_members_cannot_vote(self, make_client, persona):
        client = make_client(persona(), make_mock_session(single=make_member_review_app()))

        resp = client.post(f"/api/decisions/{REFERENCE_MEMBER}/members", json=VOTE)

        assert resp.status_code == 403

    def test_vote_requires_reason(self, make_client):
        client = make_client(committee_member(), make_mock_session(single=make_member_review_app()))

        resp = client.post(
            f"/api/decisions/{REFERENCE_MEMBER}/members",
            json={"decision": "REJECTED", "decision_reason": ""},
        )

        assert resp.status_code == 422

    def test_list_votes(self, make_client):
        votes = [
            make_member_decision(802, user_id=MEMBER_OTHER_USER_ID),
            make_member_decision(801),
        ]
        session = make_mock_session(single=make_member_review_app(), items=votes)
        client = make_client(approval_committee(), session)

        resp = client.get(f"/api/decisions/{REFERENCE_MEMBER}/members")

        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 2
        assert [v["id"] for v in body["data"]] == [802, 801]

    def test_own_vote(self, make_client):
        session = make_mock_session(
            single=make_member_review_app(), plain_single=make_member_decision()
        )
        client = make_client(committee_member(), session)

        resp = client.get(f"/api/decisions/{REFERENCE_MEMBER}/members/me")

        assert resp.status_code == 200
        assert resp.json()["user_id"] == MEMBER_USER_ID

    def test_own_vote_missing(self, make_client):
        session = make_mock_session(single=make_member_review_app(), plain_single=None)
        client = make_client(committee_member(), session)

        resp = client.get(f"/api/decisions/{REFERENCE_MEMBER}/members/me")

        assert resp.status_code == 404


class TestCommitteeDecision:
    def test_read_decision(self, make_client):
        session = make_mock_session(
            single=make_committee_review_app(), plain_single=make_decision()
        )
        client = make_client(credit_analyst(), session)

        resp = client.get(f"/api/decisions/{REFERENCE_COMMITTEE}")

        assert resp.status_code == 200
        assert resp.json()["responsible_unit_name"] == "Tigist Worku"

    def test_no_decision_yet(self, make_client):
        session = make_mock_session(single=make_committee_review_app(), plain_single=None)
        client = make_client(credit_analyst(), session)

        resp = client.get(f"/api/decisions/{REFERENCE_COMMITTEE}")

        assert resp.status_code == 404
