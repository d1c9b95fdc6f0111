# This project was developed with assistance from AI tools.
"""Loan analysis schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .workflow import ReviewScores


class AnalysisSaveRequest(BaseModel):
    """Credit analyst findings. Omitted fields keep their stored value."""

    analyst_conclusion: str | None = None
    analyst_recommendation: str | None = None
    rm_recommendation: str | None = None


class ReviewSaveRequest(ReviewScores):
    pass


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    application_reference_number: str
    analyst_conclusion: str | None = None
    analyst_recommendation: str | None = None
    rm_recommendation: str | None = None
    analyzed_by: str | None = None
    pestel_score: int | None = None
    swot_score: int | None = None
    risk_score: int | None = None
    esg_score: int | None = None
    financial_need_score: int | None = None
    overall_score: int | None = None
    review_notes: str | None = None
    reviewed_by: str | None = None
    created_at: datetime
    updated_at: datetime
