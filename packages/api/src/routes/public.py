# This project was developed with assistance from AI tools.
"""Public API routes -- no authentication required."""

from typing import Annotated

from db import get_db
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.application import REFERENCE_PATTERN
from ..schemas.status import CatalogResponse, PublicStatusResponse
from ..services.catalog import get_catalog
from ..services.status import get_public_status

router = APIRouter()


@router.get("/status/{reference}", response_model=PublicStatusResponse)
async def application_status(
    reference: Annotated[str, Path(pattern=REFERENCE_PATTERN)],
    session: AsyncSession = Depends(get_db),
) -> PublicStatusResponse:
    """Applicant-facing status by reference number. Carries no customer data."""
    result = await get_public_status(session, reference)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found with this reference number",
        )
    return result


@router.get("/catalog", response_model=CatalogResponse)
async def catalog() -> CatalogResponse:
    """Option lists for the intake wizard."""
    return get_catalog()
