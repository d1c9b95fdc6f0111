# This project was developed with assistance from AI tools.
"""Shared persistence layer: ORM models, workflow enums and the async engine."""

__version__ = "0.1.0"

from .database import Base, DatabaseService, get_db, get_db_service
from .enums import (
    ApplicationStatus,
    CommitteeOutcome,
    CustomerKind,
    DocumentType,
    Gender,
    MaritalStatus,
    UserRole,
)
from .models import (
    AuditEvent,
    Decision,
    Document,
    LoanAnalysis,
    LoanApplication,
    MemberDecision,
    Shareholder,
)

__all__ = [
    "__version__",
    "ApplicationStatus",
    "AuditEvent",
    "Base",
    "CommitteeOutcome",
    "CustomerKind",
    "DatabaseService",
    "Decision",
    "Document",
    "DocumentType",
    "Gender",
    "LoanAnalysis",
    "LoanApplication",
    "MaritalStatus",
    "MemberDecision",
    "Shareholder",
    "UserRole",
    "get_db",
    "get_db_service",
]
