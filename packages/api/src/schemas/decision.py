# This project was developed with assistance from AI tools.
"""Committee and member decision schemas."""

from datetime import datetime

from db.enums import CommitteeOutcome
from pydantic import BaseModel, ConfigDict, Field


class DecisionResponse(BaseModel):
    """The approval committee's decision for an application."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    application_reference_number: str
    decision: CommitteeOutcome
    decision_reason: str
    responsible_unit_name: str
    responsible_unit_email: str | None = None
    responsible_unit_phone: str | None = None
    decided_by: str | None = None
    decision_date: datetime


class MemberDecisionCreate(BaseModel):
    decision: CommitteeOutcome
    decision_reason: str = Field(min_length=1)


class MemberDecisionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_reference_number: str
    user_id: str
    member_name: str | None = None
    member_email: str | None = None
    decision: CommitteeOutcome
    decision_reason: str
    decision_date: datetime


class MemberDecisionListResponse(BaseModel):
    application_reference_number: str
    count: int
    data: list[MemberDecisionResponse]
