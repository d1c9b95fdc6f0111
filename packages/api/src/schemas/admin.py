# This project was developed with assistance from AI tools.
"""Audit trail responses for the admin endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class AuditEventItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    timestamp: datetime
    event_type: str
    user_id: str | None = None
    user_role: str | None = None
    application_id: int | None = None
    event_data: dict | str | None = None


class AuditByApplicationResponse(BaseModel):
    application_id: int
    count: int
    events: list[AuditEventItem]


class AuditChainVerifyResponse(BaseModel):
    """``first_break_id`` is set only when the chain is TAMPERED."""

    status: str
    events_checked: int
    first_break_id: int | None = None
