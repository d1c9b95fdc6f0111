# This project was developed with assistance from AI tools.
"""Tests for the public status lookup and intake catalog."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

from db.enums import ApplicationStatus, CommitteeOutcome

from src.services.catalog import LOAN_TYPES, get_catalog
from src.services.status import STATUS_INFO, get_public_status

from .factories import make_mock_app, make_result, make_session


def test_every_status_has_display_info():
    assert set(STATUS_INFO) == set(ApplicationStatus)


def _decision():
    record = MagicMock()
    record.decision = CommitteeOutcome.REJECTED
    record.decision_reason = "Insufficient collateral"
    record.decision_date = datetime(2026, 2, 1, tzinfo=UTC)
    return record


def _app(status):
    app = make_mock_app(status=status)
    app.created_at = datetime(2026, 1, 5, tzinfo=UTC)
    app.updated_at = datetime(2026, 1, 9, tzinfo=UTC)
    return app


async def test_unknown_reference_returns_none():
    session = make_session(make_result(plain=None))

    assert await get_public_status(session, "DASHEN-202601-0000") is None


async def test_active_application_hides_decision():
    session = make_session(make_result(plain=_app(ApplicationStatus.COMMITTE_REVIEW)))

    result = await get_public_status(session, "DASHEN-202601-1234")

    assert result.status == ApplicationStatus.COMMITTE_REVIEW
    assert result.decision is None
    # no decision lookup for non-terminal statuses
    assert session.execute.await_count == 1


async def test_terminal_application_shows_decision():
    session = make_session(
        make_result(plain=_app(ApplicationStatus.REJECTED)),
        make_result(plain=_decision()),
    )

    result = await get_public_status(session, "DASHEN-202601-1234")

    assert result.decision == CommitteeOutcome.REJECTED
    assert result.decision_reason == "Insufficient collateral"
    assert result.status_info.label == "Rejected"


def test_catalog_lists_options():
    catalog = get_catalog()
    assert catalog.loan_types == LOAN_TYPES
    assert catalog.economic_sectors
    assert catalog.customer_segmentations
    assert catalog.credit_initiation_centers
