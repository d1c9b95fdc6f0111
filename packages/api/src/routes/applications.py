# This project was developed with assistance from AI tools.
"""Application intake and query routes with RBAC enforcement."""

from typing import Annotated

from db import get_db
from db.enums import ApplicationStatus, UserRole
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import STAFF_ROLES
from ..core.config import settings
from ..middleware.auth import CurrentUser, require_roles
from ..schemas import Pagination
from ..schemas.application import (
    REFERENCE_PATTERN,
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationSummary,
    EntityCheckRequest,
    EntityCheckResponse,
)
from ..services import application as app_service
from ..services import workflow as workflow_service

router = APIRouter()

_INTAKE_ROLES = (UserRole.ADMIN, UserRole.RELATIONSHIP_MANAGER)


def _parse_status(value: str) -> ApplicationStatus | None:
    if value == "all":
        return None
    try:
        return ApplicationStatus(value)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown status filter: {value}",
        ) from exc


def _list_response(applications, total: int, offset: int, limit: int) -> ApplicationListResponse:
    return ApplicationListResponse(
        data=[ApplicationSummary.model_validate(app) for app in applications],
        pagination=Pagination(
            total=total,
            offset=offset,
            limit=limit,
            has_more=(offset + limit < total),
        ),
    )


@router.post(
    "/",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_INTAKE_ROLES))],
)
async def create_application(
    body: ApplicationCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Submit a completed intake wizard. The application starts PENDING."""
    try:
        app = await app_service.create_application(session, user, body)
    except app_service.DuplicateApplicationError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except app_service.DocumentOwnershipError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except app_service.ReferenceNumberExhausted as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    return ApplicationResponse.model_validate(app)


@router.get(
    "/",
    response_model=ApplicationListResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def list_applications(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=settings.MAX_PAGE_SIZE),
    filter_status: str = Query(default="all", alias="status"),
    search: str | None = Query(default=None, max_length=100),
) -> ApplicationListResponse:
    """List applications visible to the current user's role and data scope."""
    applications, total = await app_service.list_applications(
        session,
        user,
        offset=offset,
        limit=limit,
        status=_parse_status(filter_status),
        search=search,
    )
    return _list_response(applications, total, offset, limit)


@router.get(
    "/worklist",
    response_model=ApplicationListResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def get_worklist(
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=settings.MAX_PAGE_SIZE),
) -> ApplicationListResponse:
    """Applications waiting on the caller's role."""
    applications, total = await workflow_service.list_worklist(
        session, user, offset=offset, limit=limit
    )
    return _list_response(applications, total, offset, limit)


@router.post(
    "/check-entity",
    response_model=EntityCheckResponse,
    dependencies=[Depends(require_roles(*_INTAKE_ROLES))],
)
async def check_entity(
    body: EntityCheckRequest,
    session: AsyncSession = Depends(get_db),
) -> EntityCheckResponse:
    """Tell the intake wizard whether a customer or company already applied."""
    exists = await app_service.entity_exists(session, body.number, body.type)
    return EntityCheckResponse(exists=exists)


@router.get(
    "/by-reference/{reference}",
    response_model=ApplicationResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def get_by_reference(
    reference: Annotated[str, Path(pattern=REFERENCE_PATTERN)],
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    app = await app_service.get_by_reference(session, user, reference)
    if app is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )
    return ApplicationResponse.model_validate(app)


@router.get(
    "/{application_id}",
    response_model=ApplicationResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def get_application(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> ApplicationResponse:
    """Get a single application. Returns 404 for out-of-scope resources."""
    app = await app_service.get_application(session, user, application_id)
    if app is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )
    return ApplicationResponse.model_validate(app)
