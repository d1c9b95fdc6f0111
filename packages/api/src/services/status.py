# This project was developed with assistance from AI tools.
"""Public application status lookup.

Applicants check progress with their reference number only, so the
response carries a status label and the final decision but no customer
data. The committee decision is disclosed only once the application has
reached a terminal status.
"""

import logging

from db import LoanApplication
from db.enums import ApplicationStatus
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.status import PublicStatusResponse, StatusInfo
from ..services.decision import find_committee_decision

logger = logging.getLogger(__name__)

_IN_REVIEW = "Your application is being assessed by our credit team."
_COMMITTEE = "Your application is with the credit committee for a decision."

STATUS_INFO: dict[ApplicationStatus, StatusInfo] = {
    ApplicationStatus.PENDING: StatusInfo(
        label="Pending",
        description="Your application has been received and is queued for processing.",
        next_step="A credit analyst will pick up your application shortly.",
    ),
    ApplicationStatus.UNDER_REVIEW: StatusInfo(
        label="Under Review",
        description=_IN_REVIEW,
        next_step="This may take a few days. We appreciate your patience.",
    ),
    ApplicationStatus.RM_RECCOMENDATION: StatusInfo(
        label="RM Recommendation",
        description="The credit analyst asked your relationship manager for more information.",
        next_step="Your relationship manager may contact you.",
    ),
    ApplicationStatus.ANALYSIS_COMPLETED: StatusInfo(
        label="Analysis Completed",
        description="Credit analysis is complete.",
        next_step="A supervisor will review the analysis.",
    ),
    ApplicationStatus.CONDITIONAL: StatusInfo(
        label="Conditional",
        description="Credit analysis is complete with conditions.",
        next_step="A supervisor will review the analysis and its conditions.",
    ),
    ApplicationStatus.SUPERVISOR_REVIEWING: StatusInfo(
        label="Supervisor Reviewing",
        description="A supervisor is reviewing the credit analysis.",
        next_step="The application will move to the committee once supervised.",
    ),
    ApplicationStatus.SUPERVISED: StatusInfo(
        label="Supervised",
        description="The supervisor review is complete.",
        next_step="The application is being prepared for the committee.",
    ),
    ApplicationStatus.FINAL_ANALYSIS: StatusInfo(
        label="Final Analysis",
        description=_IN_REVIEW,
        next_step="Committee members will review the final analysis.",
    ),
    ApplicationStatus.MEMBER_REVIEW: StatusInfo(
        label="Committee Review",
        description=_COMMITTEE,
        next_step="Committee members are recording their opinions.",
    ),
    ApplicationStatus.COMMITTE_REVIEW: StatusInfo(
        label="Committee Review",
        description=_COMMITTEE,
        next_step="The approval committee will issue the final decision.",
    ),
    ApplicationStatus.COMMITTE_REVERSED: StatusInfo(
        label="Committee Reversed",
        description="The committee returned the application for further analysis.",
        next_step="The credit analyst will revise and resubmit the application.",
    ),
    ApplicationStatus.APPROVED: StatusInfo(
        label="Approved",
        description="Your loan application has been approved.",
        next_step="Your relationship manager will contact you about next steps.",
    ),
    ApplicationStatus.REJECTED: StatusInfo(
        label="Rejected",
        description="Your loan application was not approved at this time.",
        next_step="Your relationship manager can explain the decision.",
    ),
}


async def get_public_status(
    session: AsyncSession,
    reference: str,
) -> PublicStatusResponse | None:
    """Return the applicant-facing status of an application, or None."""
    result = await session.execute(
        select(LoanApplication).where(LoanApplication.application_reference_number == reference)
    )
    app = result.scalar_one_or_none()
    if app is None:
        return None

    status = app.application_status
    response = PublicStatusResponse(
        application_reference_number=reference,
        status=status,
        status_info=STATUS_INFO[status],
        submitted_at=app.created_at,
        last_updated=app.updated_at,
    )
    if status in ApplicationStatus.terminal_statuses():
        decision = await find_committee_decision(session, reference)
        if decision is not None:
            response.decision = decision.decision
            response.decision_reason = decision.decision_reason
            response.decision_date = decision.decision_date
    return response
