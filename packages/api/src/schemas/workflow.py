# This project was developed with assistance from AI tools.
"""Request/response schemas for workflow actions."""

from typing import Literal

from db.enums import ApplicationStatus, CommitteeOutcome
from pydantic import BaseModel, Field

from .decision import DecisionResponse


class RecommendationRequest(BaseModel):
    """Analyst question sent back to the relationship manager."""

    comment: str = Field(min_length=1)


class AnswerRequest(BaseModel):
    """Relationship manager's reply to the analyst."""

    recommendation: str = Field(min_length=1)


class CompleteAnalysisRequest(BaseModel):
    conditional: bool = Field(
        default=False,
        description="Recommend conditionally; the application moves to CONDITIONAL.",
    )


class TakeSupervisionRequest(BaseModel):
    """The supervisor states which completed status they saw in their queue."""

    expected_status: Literal["ANALYSIS_COMPLETED", "CONDITIONAL"]


class ReviewScores(BaseModel):
    """Supervisor scores for each analysis section, 0-100."""

    pestel_score: int | None = Field(default=None, ge=0, le=100)
    swot_score: int | None = Field(default=None, ge=0, le=100)
    risk_score: int | None = Field(default=None, ge=0, le=100)
    esg_score: int | None = Field(default=None, ge=0, le=100)
    financial_need_score: int | None = Field(default=None, ge=0, le=100)
    overall_score: int | None = Field(default=None, ge=0, le=100)
    review_notes: str | None = None


class CommitteeDecisionRequest(BaseModel):
    decision: CommitteeOutcome
    decision_reason: str = Field(min_length=1)
    responsible_unit_name: str | None = Field(
        default=None,
        description="Defaults to the deciding user's name.",
    )


class StatusOverrideRequest(BaseModel):
    """Admin correction. The caller must state the status it observed."""

    expected_status: ApplicationStatus
    new_status: ApplicationStatus
    reason: str = Field(min_length=1)


class TransitionResponse(BaseModel):
    """Result of a successful status transition."""

    id: int
    application_reference_number: str
    previous_status: ApplicationStatus
    application_status: ApplicationStatus


class CommitteeDecisionResult(TransitionResponse):
    """Transition plus the stored committee decision."""

    decision: DecisionResponse
    created: bool
