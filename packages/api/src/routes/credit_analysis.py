# This project was developed with assistance from AI tools.
"""Hand-off to the external credit analysis service."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.credit_analysis import CreditAnalysisResponse
from ..services import credit_analysis as credit_service

router = APIRouter()


@router.post(
    "/{application_id}/credit-analysis",
    response_model=CreditAnalysisResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN, UserRole.CREDIT_ANALYST))],
)
async def send_for_credit_analysis(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> CreditAnalysisResponse:
    """Forward the application's analysis documents to the external service."""
    try:
        result = await credit_service.forward_analysis_documents(session, user, application_id)
    except credit_service.CreditAnalysisUnavailable as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    except credit_service.CreditAnalysisFailed as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except credit_service.NoAnalysisDocuments as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return result
