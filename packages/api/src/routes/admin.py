# This project was developed with assistance from AI tools.
"""Audit trail queries and chain verification (admin only)."""

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import require_roles
from ..schemas.admin import (
    AuditByApplicationResponse,
    AuditChainVerifyResponse,
    AuditEventItem,
)
from ..services import audit as audit_service

router = APIRouter(dependencies=[Depends(require_roles(UserRole.ADMIN))])


@router.get("/audit/application/{application_id}", response_model=AuditByApplicationResponse)
async def audit_by_application(
    application_id: int,
    event_type: str | None = None,
    session: AsyncSession = Depends(get_db),
) -> AuditByApplicationResponse:
    """Events recorded for one application, oldest first.

    ``event_type`` narrows the trail, e.g. to ``status_transition``.
    """
    events = await audit_service.get_events_by_application(
        session, application_id, event_type=event_type
    )
    return AuditByApplicationResponse(
        application_id=application_id,
        count=len(events),
        events=[AuditEventItem.model_validate(event) for event in events],
    )


@router.get("/audit/verify", response_model=AuditChainVerifyResponse)
async def verify_audit(session: AsyncSession = Depends(get_db)) -> AuditChainVerifyResponse:
    return AuditChainVerifyResponse(**await audit_service.verify_audit_chain(session))
