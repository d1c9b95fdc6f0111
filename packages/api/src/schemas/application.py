# This project was developed with assistance from AI tools.
"""Application request/response schemas.

``ApplicationCreate`` mirrors the intake wizard: basic info, business info,
loan details, shareholders, and the documents uploaded along the way.
"""

from datetime import date, datetime
from decimal import Decimal

from db.enums import (
    ApplicationStatus,
    CustomerKind,
    DocumentType,
    Gender,
    MaritalStatus,
)
from pydantic import BaseModel, ConfigDict, Field, model_validator

from . import Pagination

REFERENCE_PATTERN = r"^[A-Z]+-\d{6}-\d{4}$"


class BasicInfo(BaseModel):
    """Customer identity and contact details."""

    customer_number: str = Field(min_length=1, max_length=50)
    tin_number: str | None = Field(default=None, max_length=50)
    company_name: str | None = Field(default=None, max_length=255)
    annual_revenue: Decimal | None = Field(default=None, ge=0)
    first_name: str = Field(min_length=1, max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    mothers_name: str | None = Field(default=None, max_length=100)
    gender: Gender | None = None
    marital_status: MaritalStatus | None = None
    date_of_birth: date | None = None
    national_id: str | None = Field(default=None, max_length=50)
    phone: str = Field(min_length=1, max_length=30)
    email: str | None = Field(default=None, max_length=255)
    region: str | None = None
    zone: str | None = None
    city: str | None = None
    subcity: str | None = None
    woreda: str | None = None
    monthly_income: Decimal | None = Field(default=None, ge=0)
    customer_status: str | None = None
    account_type: str | None = None


class BusinessInfo(BaseModel):
    """Lines of business and their establishment dates."""

    major_line_business: str = Field(min_length=1, max_length=255)
    date_of_establishment_mlb: date
    other_line_business: str | None = Field(default=None, max_length=255)
    date_of_establishment_olb: date | None = None

    @model_validator(mode="after")
    def _dates_not_in_future(self):
        today = date.today()
        for label, value in (
            ("date_of_establishment_mlb", self.date_of_establishment_mlb),
            ("date_of_establishment_olb", self.date_of_establishment_olb),
        ):
            if value is not None and value > today:
                raise ValueError(f"{label} cannot be in the future")
        return self


class LoanDetails(BaseModel):
    """Requested facility."""

    purpose_of_loan: str | None = None
    loan_type: str = Field(min_length=1, max_length=100)
    loan_amount: Decimal = Field(gt=0)
    loan_period: int = Field(gt=0, description="Loan period in months.")
    mode_of_repayment: str | None = None
    economic_sector: str | None = None
    customer_segmentation: str | None = None
    credit_initiation_center: str | None = None


class ShareholderIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    share_value: Decimal = Field(ge=0)
    share_percentage: Decimal = Field(gt=0, le=100)
    nationality: str | None = None
    id_number: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    is_director: bool = False
    position: str | None = None
    date_of_birth: date | None = None


class DocumentRef(BaseModel):
    """An object already uploaded to storage through a presigned URL."""

    doc_type: DocumentType
    object_key: str = Field(min_length=1, max_length=500)
    file_name: str | None = None
    content_type: str | None = None


class ApplicationCreate(BaseModel):
    """Submit a completed intake wizard."""

    application_reference_number: str | None = Field(default=None, pattern=REFERENCE_PATTERN)
    basic_info: BasicInfo
    business_info: BusinessInfo
    loan_details: LoanDetails
    shareholders: list[ShareholderIn] = []
    documents: list[DocumentRef]

    @model_validator(mode="after")
    def _check_wizard(self):
        total = sum((s.share_percentage for s in self.shareholders), Decimal(0))
        if total > 100:
            raise ValueError(f"Shareholder percentages total {total}, which exceeds 100")

        provided = {d.doc_type for d in self.documents}
        analysis_docs = provided & DocumentType.analysis_documents()
        if analysis_docs:
            raise ValueError(
                "Analysis documents cannot be attached at intake: "
                + ", ".join(sorted(d.value for d in analysis_docs))
            )
        missing = DocumentType.required_at_submission() - provided
        if missing:
            raise ValueError(
                "Missing required documents: " + ", ".join(sorted(d.value for d in missing))
            )
        if (
            DocumentType.OTHER_LINE_BUSINESS in provided
            and not self.business_info.other_line_business
        ):
            raise ValueError("other_line_business document given without other_line_business")
        return self


class ShareholderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    share_value: Decimal
    share_percentage: Decimal
    nationality: str | None = None
    id_number: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    is_director: bool = False
    position: str | None = None
    date_of_birth: date | None = None


class ApplicationSummary(BaseModel):
    """Row in a pipeline or worklist."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    application_reference_number: str
    customer_number: str
    first_name: str
    last_name: str
    company_name: str | None = None
    tin_number: str | None = None
    loan_type: str
    loan_amount: Decimal
    application_status: ApplicationStatus
    relation_manager_id: str
    credit_analyst_id: str | None = None
    supervisor_id: str | None = None
    created_at: datetime
    updated_at: datetime


class ApplicationResponse(ApplicationSummary):
    """Full application, including wizard sections and review comments."""

    middle_name: str | None = None
    mothers_name: str | None = None
    annual_revenue: Decimal | None = None
    gender: Gender | None = None
    marital_status: MaritalStatus | None = None
    date_of_birth: date | None = None
    national_id: str | None = None
    phone: str
    email: str | None = None
    region: str | None = None
    zone: str | None = None
    city: str | None = None
    subcity: str | None = None
    woreda: str | None = None
    monthly_income: Decimal | None = None
    customer_status: str | None = None
    account_type: str | None = None
    major_line_business: str
    date_of_establishment_mlb: date
    other_line_business: str | None = None
    date_of_establishment_olb: date | None = None
    purpose_of_loan: str | None = None
    loan_period: int
    mode_of_repayment: str | None = None
    economic_sector: str | None = None
    customer_segmentation: str | None = None
    credit_initiation_center: str | None = None
    application_date: datetime | None = None
    credit_analyst_comment: str | None = None
    rm_recommendation: str | None = None
    shareholders: list[ShareholderResponse] = []


class ApplicationListResponse(BaseModel):
    """Paginated list of applications."""

    data: list[ApplicationSummary]
    pagination: Pagination


class EntityCheckRequest(BaseModel):
    number: str = Field(min_length=1)
    type: CustomerKind


class EntityCheckResponse(BaseModel):
    exists: bool
