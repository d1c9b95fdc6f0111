# This project was developed with assistance from AI tools.
"""Public status and catalog schemas."""

from datetime import datetime

from db.enums import ApplicationStatus, CommitteeOutcome
from pydantic import BaseModel


class StatusInfo(BaseModel):
    """Human-readable info about an application status."""

    label: str
    description: str
    next_step: str


class PublicStatusResponse(BaseModel):
    """What an applicant may see given only the reference number."""

    application_reference_number: str
    status: ApplicationStatus
    status_info: StatusInfo
    submitted_at: datetime
    last_updated: datetime
    decision: CommitteeOutcome | None = None
    decision_reason: str | None = None
    decision_date: datetime | None = None


class CatalogResponse(BaseModel):
    """Option lists offered by the intake wizard."""

    economic_sectors: list[str]
    loan_types: list[str]
    customer_segmentations: list[str]
    credit_initiation_centers: list[str]
