# This project was developed with assistance from AI tools.
"""Loan analysis record: analyst findings and supervisor review scores.

One record per application, keyed by reference number. Both writers upsert
with ``INSERT ... ON CONFLICT DO UPDATE`` so concurrent first saves cannot
create duplicates.
"""

import logging

from db import LoanAnalysis
from db.enums import ApplicationStatus
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.analysis import AnalysisSaveRequest
from ..schemas.auth import UserContext
from ..schemas.workflow import ReviewScores
from ..services.application import get_by_reference

logger = logging.getLogger(__name__)


class AnalysisLockedError(ValueError):
    """Raised when analysis is edited after the final decision."""


async def _upsert(session: AsyncSession, reference: str, fields: dict) -> LoanAnalysis:
    stmt = (
        pg_insert(LoanAnalysis)
        .values(application_reference_number=reference, **fields)
        .on_conflict_do_update(
            index_elements=[LoanAnalysis.application_reference_number],
            set_={**fields, "updated_at": func.now()},
        )
    )
    await session.execute(stmt)
    result = await session.execute(
        select(LoanAnalysis)
        .where(LoanAnalysis.application_reference_number == reference)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def upsert_review(
    session: AsyncSession,
    reference: str,
    scores: ReviewScores,
    user: UserContext,
) -> LoanAnalysis:
    """Write supervisor scores without committing (joins the caller's transaction)."""
    fields = scores.model_dump(exclude_unset=True)
    fields["reviewed_by"] = user.user_id
    return await _upsert(session, reference, fields)


async def save_analysis(
    session: AsyncSession,
    user: UserContext,
    reference: str,
    body: AnalysisSaveRequest,
) -> LoanAnalysis | None:
    """Upsert the analyst's conclusion and recommendations.

    Returns None if the application is not visible to the caller.
    """
    app = await get_by_reference(session, user, reference)
    if app is None:
        return None
    if app.application_status in ApplicationStatus.terminal_statuses():
        raise AnalysisLockedError(
            f"Application {reference} is {app.application_status.value}; analysis is closed"
        )
    fields = body.model_dump(exclude_unset=True)
    fields["analyzed_by"] = user.user_id
    record = await _upsert(session, reference, fields)
    await session.commit()
    await session.refresh(record)
    logger.info("Analysis saved for %s by %s", reference, user.user_id)
    return record


async def save_review(
    session: AsyncSession,
    user: UserContext,
    reference: str,
    scores: ReviewScores,
) -> LoanAnalysis | None:
    app = await get_by_reference(session, user, reference)
    if app is None:
        return None
    if app.application_status in ApplicationStatus.terminal_statuses():
        raise AnalysisLockedError(
            f"Application {reference} is {app.application_status.value}; review is closed"
        )
    record = await upsert_review(session, reference, scores, user)
    await session.commit()
    await session.refresh(record)
    return record


async def get_analysis(
    session: AsyncSession,
    user: UserContext,
    reference: str,
) -> LoanAnalysis | None:
    app = await get_by_reference(session, user, reference)
    if app is None:
        return None
    result = await session.execute(
        select(LoanAnalysis).where(LoanAnalysis.application_reference_number == reference)
    )
    return result.scalar_one_or_none()
