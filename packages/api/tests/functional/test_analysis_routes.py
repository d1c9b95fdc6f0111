# This project was developed with assistance from AI tools.
"""Analysis records, external credit analysis hand-off and admin audit views."""

from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest
from db.enums import ApplicationStatus

from src.core.config import settings
from src.schemas.credit_analysis import CreditAnalysisResponse
from src.services.credit_analysis import CreditAnalysisFailed

from .data_factory import make_analysis, make_application, make_supervising_app
from .mock_db import make_mock_session
from .personas import (
    ANALYST_USER_ID,
    SUPERVISOR_USER_ID,
    admin,
    committee_member,
    credit_analyst,
    relationship_manager,
    supervisor,
)

pytestmark = pytest.mark.functional

REFERENCE = "DASHEN-202601-1003"


def _session_with_analysis(app, record):
    session = make_mock_session(single=app, plain_single=record)
    session.execute.return_value.scalar_one.return_value = record
    return session


class TestAnalysis:
    def test_analyst_saves_findings(self, make_client):
        session = _session_with_analysis(make_supervising_app(), make_analysis())
        client = make_client(credit_analyst(), session)

        resp = client.put(
            f"/api/analysis/{REFERENCE}",
            json={"analyst_conclusion": "Cash flow supports repayment"},
        )

        assert resp.status_code == 200
        assert resp.json()["analyzed_by"] == ANALYST_USER_ID
        session.commit.assert_awaited_once()

    def test_supervisor_saves_scores(self, make_client):
        record = make_analysis(overall_score=82, reviewed_by=SUPERVISOR_USER_ID)
        session = _session_with_analysis(make_supervising_app(), record)
        client = make_client(supervisor(), session)

        resp = client.put(f"/api/analysis/{REFERENCE}/review", json={"overall_score": 82})

        assert resp.status_code == 200
        assert resp.json()["overall_score"] == 82

    def test_score_out_of_range(self, make_client):
        client = make_client(supervisor(), make_mock_session(single=make_supervising_app()))

        resp = client.put(f"/api/analysis/{REFERENCE}/review", json={"risk_score": 140})

        assert resp.status_code == 422

    def test_locked_after_final_decision(self, make_client):
        approved = make_application(103, application_status=ApplicationStatus.APPROVED)
        session = _session_with_analysis(approved, make_analysis())
        client = make_client(credit_analyst(), session)

        resp = client.put(f"/api/analysis/{REFERENCE}", json={"analyst_conclusion": "late"})

        assert resp.status_code == 409
        session.commit.assert_not_awaited()

    def test_supervisor_cannot_write_findings(self, make_client):
        client = make_client(supervisor(), make_mock_session(single=make_supervising_app()))

        resp = client.put(f"/api/analysis/{REFERENCE}", json={"analyst_conclusion": "x"})

        assert resp.status_code == 403

    def test_read_analysis(self, make_client):
        session = _session_with_analysis(make_supervising_app(), make_analysis())
        client = make_client(committee_member(), session)

        resp = client.get(f"/api/analysis/{REFERENCE}")

        assert resp.status_code == 200
        assert resp.json()["analyst_recommendation"] == "Approve"

    def test_analysis_not_started(self, make_client):
        session = make_mock_session(single=make_supervising_app(), plain_single=None)
        client = make_client(committee_member(), session)

        resp = client.get(f"/api/analysis/{REFERENCE}")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Analysis not found"


class TestCreditAnalysisHandOff:
    def test_not_configured_is_503(self, make_client, monkeypatch):
        monkeypatch.setattr(settings, "CREDIT_ANALYSIS_URL", None)
        client = make_client(credit_analyst(), make_mock_session(single=make_supervising_app()))

        resp = client.post("/api/applications/103/credit-analysis")

        assert resp.status_code == 503

    def test_forwarded(self, make_client):
        result = CreditAnalysisResponse(
            application_reference_number=REFERENCE,
            forwarded_documents=2,
            upstream_status=200,
            result={"score": 71},
        )
        client = make_client(credit_analyst(), make_mock_session())
        with patch(
            "src.services.credit_analysis.forward_analysis_documents", return_value=result
        ) as forward:
            resp = client.post("/api/applications/103/credit-analysis")

        assert resp.status_code == 200
        assert resp.json()["result"] == {"score": 71}
        assert forward.await_args.args[2] == 103

    def test_upstream_failure_is_502(self, make_client):
        client = make_client(credit_analyst(), make_mock_session())
        with patch(
            "src.services.credit_analysis.forward_analysis_documents",
            side_effect=CreditAnalysisFailed("Credit analysis service returned 500"),
        ):
            resp = client.post("/api/applications/103/credit-analysis")

        assert resp.status_code == 502

    def test_no_analysis_documents_is_422(self, make_client, monkeypatch):
        monkeypatch.setattr(settings, "CREDIT_ANALYSIS_URL", "http://analysis.test/run")
        session = make_mock_session(single=make_supervising_app(), items=[])
        client = make_client(credit_analyst(), session)

        resp = client.post("/api/applications/103/credit-analysis")

        assert resp.status_code == 422
        assert "no analysis documents" in resp.json()["detail"]

    def test_relationship_manager_cannot_forward(self, make_client):
        client = make_client(relationship_manager(), make_mock_session())

        resp = client.post("/api/applications/103/credit-analysis")

        assert resp.status_code == 403


def _audit_event(event_id: int, event_type: str) -> MagicMock:
    event = MagicMock()
    event.id = event_id
    event.timestamp = datetime(2026, 1, 6, 9, event_id, tzinfo=UTC)
    event.event_type = event_type
    event.user_id = ANALYST_USER_ID
    event.user_role = "credit_analyst"
    event.application_id = 103
    event.event_data = {"from": "PENDING", "to": "UNDER_REVIEW"}
    return event


class TestAdminAudit:
    def test_audit_trail_for_application(self, make_client):
        events = [_audit_event(1, "application_created"), _audit_event(2, "status_transition")]
        client = make_client(admin(), make_mock_session(items=events))

        resp = client.get("/api/admin/audit/application/103")

        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 2
        assert [e["event_type"] for e in body["events"]] == [
            "application_created",
            "status_transition",
        ]

    def test_verify_empty_chain(self, make_client):
        client = make_client(admin(), make_mock_session(items=[]))

        resp = client.get("/api/admin/audit/verify")

        assert resp.json() == {"status": "OK", "events_checked": 0, "first_break_id": None}

    def test_audit_is_admin_only(self, make_client):
        client = make_client(supervisor(), make_mock_session(items=[]))

        resp = client.get("/api/admin/audit/verify")

        assert resp.status_code == 403
