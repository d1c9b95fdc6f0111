# This project was developed with assistance from AI tools.
"""Document upload, registration and download through the API."""

from datetime import UTC, datetime

import pytest

from .data_factory import make_document, make_pending_app, make_under_review_app
from .mock_db import fill_on_refresh, make_mock_session
from .personas import (
    RM_USER_ID,
    committee_member,
    credit_analyst,
    relationship_manager,
    supervisor,
)

pytestmark = pytest.mark.functional

PDF = b"%PDF-1.4 test document"


class TestUploadUrl:
    def test_draft_upload_url_without_application(self, make_upload_client):
        client, storage = make_upload_client(relationship_manager(), make_mock_session())

        resp = client.post(
            "/api/documents/upload-url",
            json={
                "doc_type": "national_id",
                "file_name": "id.pdf",
                "content_type": "application/pdf",
            },
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["upload_url"] == "https://s3.test/put-signed"
        assert body["object_key"].startswith(f"drafts/{RM_USER_ID}/national_id/")
        assert body["object_key"].endswith("-id.pdf")
        storage.get_upload_url.assert_awaited_once()

    def test_upload_url_for_application_uses_reference(self, make_upload_client):
        session = make_mock_session(single=make_under_review_app())
        client, _ = make_upload_client(credit_analyst(), session)

        resp = client.post(
            "/api/documents/upload-url",
            json={
                "doc_type": "swot_analysis",
                "file_name": "../../swot.pdf",
                "content_type": "application/pdf",
                "application_id": 102,
            },
        )

        assert resp.status_code == 200
        key = resp.json()["object_key"]
        assert key.startswith("DASHEN-202601-1002/swot_analysis/")
        assert ".." not in key

    def test_upload_url_rejects_content_type(self, make_upload_client):
        client, _ = make_upload_client(relationship_manager(), make_mock_session())

        resp = client.post(
            "/api/documents/upload-url",
            json={
                "doc_type": "national_id",
                "file_name": "id.exe",
                "content_type": "application/x-msdownload",
            },
        )

        assert resp.status_code == 422

    def test_upload_url_for_hidden_application(self, make_upload_client):
        client, _ = make_upload_client(relationship_manager(), make_mock_session(single=None))

        resp = client.post(
            "/api/documents/upload-url",
            json={
                "doc_type": "national_id",
                "file_name": "id.pdf",
                "content_type": "application/pdf",
                "application_id": 102,
            },
        )

        assert resp.status_code == 404


class TestRegister:
    def test_register_uploaded_object(self, make_upload_client):
        session = make_mock_session(single=make_pending_app())
        fill_on_refresh(session, id=601, created_at=datetime.now(UTC))
        client, storage = make_upload_client(relationship_manager(), session)

        resp = client.post(
            "/api/applications/101/documents",
            json={
                "doc_type": "collateral_profile",
                "object_key": "DASHEN-202601-1001/collateral_profile/abc-deed.pdf",
                "file_name": "deed.pdf",
                "content_type": "application/pdf",
            },
        )

        assert resp.status_code == 201
        assert resp.json()["id"] == 601
        storage.object_exists.assert_awaited_once()
        session.commit.assert_awaited_once()

    def test_register_foreign_key_rejected(self, make_upload_client):
        session = make_mock_session(single=make_pending_app())
        client, storage = make_upload_client(relationship_manager(), session)

        resp = client.post(
            "/api/applications/101/documents",
            json={
                "doc_type": "collateral_profile",
                "object_key": "DASHEN-202601-1999/collateral_profile/abc-deed.pdf",
            },
        )

        assert resp.status_code == 422
        storage.object_exists.assert_not_awaited()
        session.add.assert_not_called()

    def test_register_missing_object_rejected(self, make_upload_client):
        session = make_mock_session(single=make_pending_app())
        client, storage = make_upload_client(relationship_manager(), session)
        storage.object_exists.return_value = False

        resp = client.post(
            "/api/applications/101/documents",
            json={
                "doc_type": "collateral_profile",
                "object_key": "DASHEN-202601-1001/collateral_profile/abc-deed.pdf",
            },
        )

        assert resp.status_code == 422
        assert "has not been uploaded" in resp.json()["detail"]


class TestDirectUpload:
    def test_upload_pdf(self, make_upload_client):
        session = make_mock_session(single=make_under_review_app())
        fill_on_refresh(session, id=602, created_at=datetime.now(UTC))
        client, storage = make_upload_client(credit_analyst(), session)

        resp = client.post(
            "/api/applications/102/documents/upload",
            files={"file": ("risk.pdf", PDF, "application/pdf")},
            data={"doc_type": "risk_assessment"},
        )

        assert resp.status_code == 201
        assert resp.json()["doc_type"] == "risk_assessment"
        key = storage.upload_file.await_args.args[1]
        assert key.startswith("DASHEN-202601-1002/risk_assessment/")

    def test_upload_rejects_unsupported_type(self, make_upload_client):
        client, storage = make_upload_client(
            credit_analyst(), make_mock_session(single=make_under_review_app())
        )

        resp = client.post(
            "/api/applications/102/documents/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            data={"doc_type": "risk_assessment"},
        )

        assert resp.status_code == 422
        storage.upload_file.assert_not_awaited()

    def test_upload_too_large(self, make_upload_client, monkeypatch):
        monkeypatch.setattr("src.services.document.settings.UPLOAD_MAX_SIZE_MB", 0)
        client, _ = make_upload_client(
            credit_analyst(), make_mock_session(single=make_under_review_app())
        )

        resp = client.post(
            "/api/applications/102/documents/upload",
            files={"file": ("risk.pdf", PDF, "application/pdf")},
            data={"doc_type": "risk_assessment"},
        )

        assert resp.status_code == 413

    @pytest.mark.parametrize("persona", [supervisor, committee_member])
    def test_reviewers_cannot_upload(self, make_upload_client, persona):
        client, _ = make_upload_client(persona(), make_mock_session(single=make_pending_app()))

        resp = client.post(
            "/api/applications/101/documents/upload",
            files={"file": ("id.pdf", PDF, "application/pdf")},
            data={"doc_type": "national_id"},
        )

        assert resp.status_code == 403


class TestListAndDownload:
    def test_list_documents(self, make_client):
        docs = [make_document(501), make_document(502)]
        client = make_client(supervisor(), make_mock_session(items=docs))

        resp = client.get("/api/applications/101/documents")

        assert resp.status_code == 200
        body = resp.json()
        assert body["pagination"]["total"] == 2
        assert {d["id"] for d in body["data"]} == {501, 502}

    def test_list_rejects_unknown_doc_type(self, make_client):
        client = make_client(supervisor(), make_mock_session(items=[]))

        resp = client.get("/api/applications/101/documents?doc_type=selfie")

        assert resp.status_code == 422

    def test_download_url(self, make_upload_client):
        session = make_mock_session(single=make_document(501))
        client, storage = make_upload_client(supervisor(), session)

        resp = client.get("/api/documents/501/download")

        assert resp.status_code == 200
        assert resp.json() == {
            "document_id": 501,
            "url": "https://s3.test/get-signed",
            "expires_in": 900,
        }
        storage.get_download_url.assert_awaited_once()

    def test_download_missing_document(self, make_upload_client):
        client, _ = make_upload_client(supervisor(), make_mock_session(single=None))

        resp = client.get("/api/documents/999/download")

        assert resp.status_code == 404
