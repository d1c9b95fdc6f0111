# This project was developed with assistance from AI tools.
"""
Domain enums for the credit application workflow.

Shared domain types used by both SQLAlchemy models (db package)
and Pydantic schemas (api package). Status values are the wire values
the front end and existing records already use, spelling included.
"""

import enum


class ApplicationStatus(str, enum.Enum):
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    RM_RECCOMENDATION = "RM_RECCOMENDATION"
    ANALYSIS_COMPLETED = "ANALYSIS_COMPLETED"
    CONDITIONAL = "CONDITIONAL"
    SUPERVISOR_REVIEWING = "SUPERVISOR_REVIEWING"
    SUPERVISED = "SUPERVISED"
    FINAL_ANALYSIS = "FINAL_ANALYSIS"
    MEMBER_REVIEW = "MEMBER_REVIEW"
    COMMITTE_REVIEW = "COMMITTE_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMMITTE_REVERSED = "COMMITTE_REVERSED"

    @classmethod
    def terminal_statuses(cls) -> frozenset["ApplicationStatus"]:
        """Statuses where an application is no longer active."""
        return frozenset({cls.APPROVED, cls.REJECTED})

    @classmethod
    def valid_transitions(cls) -> dict["ApplicationStatus", frozenset["ApplicationStatus"]]:
        """Allowed status transitions in the credit workflow."""
        return {
            cls.PENDING: frozenset({cls.UNDER_REVIEW}),
            cls.UNDER_REVIEW: frozenset(
                {cls.RM_RECCOMENDATION, cls.ANALYSIS_COMPLETED, cls.CONDITIONAL}
            ),
            cls.RM_RECCOMENDATION: frozenset({cls.UNDER_REVIEW}),
            cls.ANALYSIS_COMPLETED: frozenset({cls.SUPERVISOR_REVIEWING}),
            cls.CONDITIONAL: frozenset({cls.SUPERVISOR_REVIEWING}),
            cls.SUPERVISOR_REVIEWING: frozenset({cls.SUPERVISED}),
            cls.SUPERVISED: frozenset({cls.FINAL_ANALYSIS, cls.COMMITTE_REVIEW}),
            cls.FINAL_ANALYSIS: frozenset({cls.MEMBER_REVIEW}),
            cls.MEMBER_REVIEW: frozenset({cls.COMMITTE_REVIEW}),
            cls.COMMITTE_REVIEW: frozenset(
                {cls.APPROVED, cls.REJECTED, cls.COMMITTE_REVERSED}
            ),
            cls.COMMITTE_REVERSED: frozenset({cls.COMMITTE_REVIEW}),
            cls.APPROVED: frozenset(),
            cls.REJECTED: frozenset(),
        }


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"
    RELATIONSHIP_MANAGER = "relationship_manager"
    CREDIT_ANALYST = "credit_analyst"
    SUPERVISOR = "supervisor"
    COMMITTE_MEMBER = "committe_member"
    APPROVAL_COMMITTE = "approval_committe"
    BANNED = "banned"


class CommitteeOutcome(str, enum.Enum):
    """Outcomes a committee or committee member may record."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMMITTE_REVERSED = "COMMITTE_REVERSED"


class DocumentType(str, enum.Enum):
    # Customer documents collected by the relationship manager
    NATIONAL_ID = "national_id"
    AGREEMENT_FORM = "agreement_form"
    APPLICATION_FORM = "application_form"
    SHAREHOLDERS_DETAILS = "shareholders_details"
    CREDIT_PROFILE = "credit_profile"
    TRANSACTION_PROFILE = "transaction_profile"
    COLLATERAL_PROFILE = "collateral_profile"
    FINANCIAL_PROFILE = "financial_profile"
    MAJOR_LINE_BUSINESS = "major_line_business"
    OTHER_LINE_BUSINESS = "other_line_business"
    # Analysis documents produced by the credit analyst
    FINANCIAL_ANALYSIS = "financial_analysis"
    PESTEL_ANALYSIS = "pestel_analysis"
    SWOT_ANALYSIS = "swot_analysis"
    RISK_ASSESSMENT = "risk_assessment"
    ESG_ASSESSMENT = "esg_assessment"
    FINANCIAL_NEED = "financial_need"

    @classmethod
    def required_at_submission(cls) -> frozenset["DocumentType"]:
        """Documents a relationship manager must attach before submitting."""
        return frozenset(
            {
                cls.NATIONAL_ID,
                cls.AGREEMENT_FORM,
                cls.APPLICATION_FORM,
                cls.CREDIT_PROFILE,
                cls.TRANSACTION_PROFILE,
                cls.COLLATERAL_PROFILE,
                cls.FINANCIAL_PROFILE,
                cls.MAJOR_LINE_BUSINESS,
            }
        )

    @classmethod
    def analysis_documents(cls) -> frozenset["DocumentType"]:
        return frozenset(
            {
                cls.FINANCIAL_ANALYSIS,
                cls.PESTEL_ANALYSIS,
                cls.SWOT_ANALYSIS,
                cls.RISK_ASSESSMENT,
                cls.ESG_ASSESSMENT,
                cls.FINANCIAL_NEED,
            }
        )


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"


class MaritalStatus(str, enum.Enum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class CustomerKind(str, enum.Enum):
    """Entity kinds checked for existing records during intake."""

    CUSTOMER = "customer"
    COMPANY = "company"
