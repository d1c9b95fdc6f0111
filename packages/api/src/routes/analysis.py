# This project was developed with assistance from AI tools.
"""Loan analysis routes keyed by application reference number."""

from typing import Annotated

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import STAFF_ROLES
from ..middleware.auth import CurrentUser, require_roles
from ..schemas.analysis import AnalysisResponse, AnalysisSaveRequest, ReviewSaveRequest
from ..schemas.application import REFERENCE_PATTERN
from ..services import analysis as analysis_service

router = APIRouter()

Reference = Annotated[str, Path(pattern=REFERENCE_PATTERN)]


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")


@router.put(
    "/{reference}",
    response_model=AnalysisResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.CREDIT_ANALYST))],
)
async def save_analysis(
    body: AnalysisSaveRequest,
    reference: Reference,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AnalysisResponse:
    """Create or update the analyst's findings."""
    try:
        record = await analysis_service.save_analysis(session, user, reference, body)
    except analysis_service.AnalysisLockedError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if record is None:
        raise _not_found()
    return AnalysisResponse.model_validate(record)


@router.put(
    "/{reference}/review",
    response_model=AnalysisResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.SUPERVISOR))],
)
async def save_review(
    body: ReviewSaveRequest,
    reference: Reference,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AnalysisResponse:
    """Create or update supervisor review scores without changing status."""
    try:
        record = await analysis_service.save_review(session, user, reference, body)
    except analysis_service.AnalysisLockedError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if record is None:
        raise _not_found()
    return AnalysisResponse.model_validate(record)


@router.get(
    "/{reference}",
    response_model=AnalysisResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def get_analysis(
    reference: Reference,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> AnalysisResponse:
    record = await analysis_service.get_analysis(session, user, reference)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analysis not found")
    return AnalysisResponse.model_validate(record)
