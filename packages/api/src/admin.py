# This project was developed with assistance from AI tools.
"""
SQLAdmin back-office views.

Access the admin panel at: http://localhost:8000/admin

Applications and decisions are read-only here: status changes must go
through the guarded workflow endpoints, and a form edit would bypass the
status check.

When AUTH_DISABLED=false, requires admin credentials via login form.
When AUTH_DISABLED=true, admin panel is open (dev mode).
"""

from db import (
    AuditEvent,
    Decision,
    Document,
    LoanAnalysis,
    LoanApplication,
    MemberDecision,
    Shareholder,
)
from sqladmin import Admin, ModelView
from sqladmin.authentication import AuthenticationBackend
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, make_url
from starlette.requests import Request
from starlette.responses import Response

from .core.config import settings


def sync_database_url(url: str) -> URL:
    """SQLAdmin needs a sync engine; pin psycopg2 whatever async driver is configured."""
    return make_url(url).set(drivername="postgresql+psycopg2")


engine = create_engine(sync_database_url(settings.DATABASE_URL), echo=False)


class AdminAuth(AuthenticationBackend):
    """Session-based login gate using SQLADMIN_USER / SQLADMIN_PASSWORD."""

    async def login(self, request: Request) -> bool:
        form = await request.form()
        username = form.get("username")
        password = form.get("password")
        if username == settings.SQLADMIN_USER and password == settings.SQLADMIN_PASSWORD:
            request.session.update({"admin_authenticated": True})
            return True
        return False

    async def logout(self, request: Request) -> bool:
        request.session.clear()
        return True

    async def authenticate(self, request: Request) -> Response | bool:
        if settings.AUTH_DISABLED:
            return True
        return request.session.get("admin_authenticated", False)


class LoanApplicationAdmin(ModelView, model=LoanApplication):
    column_list = [
        LoanApplication.id,
        LoanApplication.application_reference_number,
        LoanApplication.customer_number,
        LoanApplication.last_name,
        LoanApplication.loan_type,
        LoanApplication.loan_amount,
        LoanApplication.application_status,
        LoanApplication.credit_analyst_id,
        LoanApplication.created_at,
    ]
    column_searchable_list = [
        LoanApplication.application_reference_number,
        LoanApplication.customer_number,
        LoanApplication.last_name,
    ]
    column_sortable_list = [
        LoanApplication.id,
        LoanApplication.application_status,
        LoanApplication.created_at,
    ]
    column_default_sort = [(LoanApplication.created_at, True)]
    can_create = False
    can_edit = False
    name = "Application"
    name_plural = "Applications"
    icon = "fa-solid fa-file-alt"


class ShareholderAdmin(ModelView, model=Shareholder):
    column_list = [
        Shareholder.id,
        Shareholder.application_id,
        Shareholder.name,
        Shareholder.share_percentage,
        Shareholder.is_director,
    ]
    column_searchable_list = [Shareholder.name]
    name = "Shareholder"
    name_plural = "Shareholders"
    icon = "fa-solid fa-users"


class LoanAnalysisAdmin(ModelView, model=LoanAnalysis):
    column_list = [
        LoanAnalysis.id,
        LoanAnalysis.application_reference_number,
        LoanAnalysis.analyzed_by,
        LoanAnalysis.overall_score,
        LoanAnalysis.reviewed_by,
        LoanAnalysis.updated_at,
    ]
    column_default_sort = [(LoanAnalysis.updated_at, True)]
    name = "Analysis"
    name_plural = "Analyses"
    icon = "fa-solid fa-chart-line"


class DecisionAdmin(ModelView, model=Decision):
    column_list = [
        Decision.id,
        Decision.application_reference_number,
        Decision.decision,
        Decision.responsible_unit_name,
        Decision.decided_by,
        Decision.decision_date,
    ]
    column_default_sort = [(Decision.decision_date, True)]
    can_create = False
    can_edit = False
    name = "Decision"
    name_plural = "Decisions"
    icon = "fa-solid fa-gavel"


class MemberDecisionAdmin(ModelView, model=MemberDecision):
    column_list = [
        MemberDecision.id,
        MemberDecision.application_reference_number,
        MemberDecision.member_name,
        MemberDecision.decision,
        MemberDecision.decision_date,
    ]
    column_default_sort = [(MemberDecision.decision_date, True)]
    can_create = False
    can_edit = False
    name = "Member Decision"
    name_plural = "Member Decisions"
    icon = "fa-solid fa-user-check"


class DocumentAdmin(ModelView, model=Document):
    column_list = [
        Document.id,
        Document.application_id,
        Document.doc_type,
        Document.file_name,
        Document.uploaded_by,
        Document.created_at,
    ]
    column_searchable_list = [Document.uploaded_by, Document.file_name]
    column_sortable_list = [Document.id, Document.doc_type, Document.created_at]
    column_default_sort = [(Document.created_at, True)]
    name = "Document"
    name_plural = "Documents"
    icon = "fa-solid fa-file-upload"


class AuditEventAdmin(ModelView, model=AuditEvent):
    column_list = [
        AuditEvent.id,
        AuditEvent.timestamp,
        AuditEvent.event_type,
        AuditEvent.user_id,
        AuditEvent.user_role,
        AuditEvent.application_id,
    ]
    column_sortable_list = [AuditEvent.id, AuditEvent.timestamp, AuditEvent.event_type]
    column_default_sort = [(AuditEvent.timestamp, True)]
    can_create = False
    can_edit = False
    can_delete = False
    name = "Audit Event"
    name_plural = "Audit Events"
    icon = "fa-solid fa-shield-alt"


def setup_admin(app):
    """Set up SQLAdmin and mount it to the FastAPI app."""
    auth_backend = AdminAuth(secret_key=settings.SQLADMIN_SECRET_KEY)
    admin = Admin(app, engine, title="Credit Workflow Admin", authentication_backend=auth_backend)

    for view in (
        LoanApplicationAdmin,
        ShareholderAdmin,
        LoanAnalysisAdmin,
        DecisionAdmin,
        MemberDecisionAdmin,
        DocumentAdmin,
        AuditEventAdmin,
    ):
        admin.add_view(view)

    return admin
