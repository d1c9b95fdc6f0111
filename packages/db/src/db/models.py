# This project was developed with assistance from AI tools.
"""
Credit workflow domain models

Loan applications with their customer, business and loan details,
shareholders, documents, analysis records, committee decisions and
the audit trail.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    ApplicationStatus,
    CommitteeOutcome,
    DocumentType,
    Gender,
    MaritalStatus,
)


class LoanApplication(Base):
    """Loan application submitted by a relationship manager."""

    __tablename__ = "loan_applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_reference_number = Column(String(50), unique=True, nullable=False, index=True)
    customer_number = Column(String(50), unique=True, nullable=False, index=True)
    tin_number = Column(String(50), nullable=True, index=True)
    company_name = Column(String(255), nullable=True)
    annual_revenue = Column(Numeric(16, 2), nullable=True)

    # -- Basic info --
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=False)
    mothers_name = Column(String(100), nullable=True)
    gender = Column(Enum(Gender, name="gender", native_enum=False), nullable=True)
    marital_status = Column(
        Enum(MaritalStatus, name="marital_status", native_enum=False),
        nullable=True,
    )
    date_of_birth = Column(Date, nullable=True)
    national_id = Column(String(50), nullable=True)
    phone = Column(String(30), nullable=False)
    email = Column(String(255), nullable=True)
    region = Column(String(100), nullable=True)
    zone = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    subcity = Column(String(100), nullable=True)
    woreda = Column(String(100), nullable=True)
    monthly_income = Column(Numeric(16, 2), nullable=True)
    customer_status = Column(String(50), nullable=True)
    account_type = Column(String(50), nullable=True)

    # -- Business info --
    major_line_business = Column(String(255), nullable=False)
    date_of_establishment_mlb = Column(Date, nullable=False)
    other_line_business = Column(String(255), nullable=True)
    date_of_establishment_olb = Column(Date, nullable=True)

    # -- Loan details --
    purpose_of_loan = Column(Text, nullable=True)
    loan_type = Column(String(100), nullable=False)
    loan_amount = Column(Numeric(16, 2), nullable=False)
    loan_period = Column(Integer, nullable=False)
    mode_of_repayment = Column(String(100), nullable=True)
    economic_sector = Column(String(100), nullable=True)
    customer_segmentation = Column(String(100), nullable=True)
    credit_initiation_center = Column(String(255), nullable=True)
    application_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_document_received_date = Column(DateTime(timezone=True), nullable=True)

    # -- Workflow --
    application_status = Column(
        Enum(ApplicationStatus, name="application_status", native_enum=False, length=30),
        nullable=False,
        default=ApplicationStatus.PENDING,
        index=True,
    )
    relation_manager_id = Column(String(255), nullable=False, index=True)
    credit_analyst_id = Column(String(255), nullable=True, index=True)
    supervisor_id = Column(String(255), nullable=True, index=True)
    credit_analyst_comment = Column(Text, nullable=True)
    rm_recommendation = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    shareholders = relationship(
        "Shareholder", back_populates="application", cascade="all, delete-orphan",
    )
    documents = relationship(
        "Document", back_populates="application", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return (
            f"<LoanApplication(id={self.id}, ref='{self.application_reference_number}', "
            f"status='{self.application_status}')>"
        )


class Shareholder(Base):
    """Shareholder of the applying business."""

    __tablename__ = "shareholders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Integer, ForeignKey("loan_applications.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    name = Column(String(255), nullable=False)
    share_value = Column(Numeric(16, 2), nullable=False)
    share_percentage = Column(Numeric(5, 2), nullable=False)
    nationality = Column(String(100), nullable=True)
    id_number = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    is_director = Column(Boolean, nullable=False, default=False)
    position = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    application = relationship("LoanApplication", back_populates="shareholders")

    def __repr__(self):
        return f"<Shareholder(id={self.id}, name='{self.name}', pct={self.share_percentage})>"


class Document(Base):
    """Document stored in object storage for an application."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Integer, ForeignKey("loan_applications.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    doc_type = Column(
        Enum(DocumentType, name="document_type", native_enum=False),
        nullable=False,
    )
    object_key = Column(String(500), nullable=False)
    file_name = Column(String(255), nullable=True)
    content_type = Column(String(100), nullable=True)
    uploaded_by = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    application = relationship("LoanApplication", back_populates="documents")

    def __repr__(self):
        return f"<Document(id={self.id}, type='{self.doc_type}')>"


class LoanAnalysis(Base):
    """Credit analyst findings and supervisor review scores, one per application."""

    __tablename__ = "loan_analyses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_reference_number = Column(
        String(50),
        ForeignKey("loan_applications.application_reference_number", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    analyst_conclusion = Column(Text, nullable=True)
    analyst_recommendation = Column(Text, nullable=True)
    rm_recommendation = Column(Text, nullable=True)
    analyzed_by = Column(String(255), nullable=True)

    pestel_score = Column(Integer, nullable=True)
    swot_score = Column(Integer, nullable=True)
    risk_score = Column(Integer, nullable=True)
    esg_score = Column(Integer, nullable=True)
    financial_need_score = Column(Integer, nullable=True)
    overall_score = Column(Integer, nullable=True)
    review_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<LoanAnalysis(ref='{self.application_reference_number}')>"


class Decision(Base):
    """Approval committee decision. One per application reference number."""

    __tablename__ = "decisions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_reference_number = Column(
        String(50),
        ForeignKey("loan_applications.application_reference_number", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    decision = Column(
        Enum(CommitteeOutcome, name="committee_outcome", native_enum=False),
        nullable=False,
    )
    decision_reason = Column(Text, nullable=False)
    responsible_unit_name = Column(String(255), nullable=False)
    responsible_unit_email = Column(String(255), nullable=True)
    responsible_unit_phone = Column(String(30), nullable=True)
    decided_by = Column(String(255), nullable=True)
    decision_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Decision(ref='{self.application_reference_number}', decision='{self.decision}')>"


class MemberDecision(Base):
    """Committee member vote. One per member per application."""

    __tablename__ = "member_decisions"
    __table_args__ = (
        UniqueConstraint(
            "application_reference_number", "user_id", name="uq_member_decision_ref_user",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_reference_number = Column(
        String(50),
        ForeignKey("loan_applications.application_reference_number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(255), nullable=False, index=True)
    member_name = Column(String(255), nullable=True)
    member_email = Column(String(255), nullable=True)
    decision = Column(
        Enum(CommitteeOutcome, name="member_outcome", native_enum=False),
        nullable=False,
    )
    decision_reason = Column(Text, nullable=False)
    decision_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return (
            f"<MemberDecision(ref='{self.application_reference_number}', "
            f"user='{self.user_id}', decision='{self.decision}')>"
        )


class AuditEvent(Base):
    """Append-only audit trail. INSERT + SELECT only -- no UPDATE or DELETE."""

    __tablename__ = "audit_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    prev_hash = Column(String(64), nullable=True)
    user_id = Column(String(255), nullable=True)
    user_role = Column(String(50), nullable=True)
    event_type = Column(String(100), nullable=False, index=True)
    application_id = Column(Integer, nullable=True, index=True)
    event_data = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<AuditEvent(id={self.id}, type='{self.event_type}')>"
