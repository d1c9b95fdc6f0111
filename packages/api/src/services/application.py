# This project was developed with assistance from AI tools.
"""Application intake and queries with role-based data scope filtering.

Every query is filtered through the caller's DataScope so that relationship
managers see only the applications they originated while analysts,
supervisors, committee roles and admins see the whole pipeline.
"""

import logging
import random
from datetime import UTC, datetime

from db import Document, LoanApplication, Shareholder
from db.enums import ApplicationStatus, CustomerKind
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..schemas.application import ApplicationCreate, DocumentRef
from ..schemas.auth import UserContext
from ..services.audit import write_audit_event
from ..services.scope import apply_data_scope
from ..services.storage import StorageService

logger = logging.getLogger(__name__)


class DuplicateApplicationError(ValueError):
    """Raised when a customer number or reference number is already registered."""


class ReferenceNumberExhausted(RuntimeError):
    """Raised when no unused reference number could be drawn."""


class DocumentOwnershipError(ValueError):
    """Raised when an intake document was not uploaded by the submitting user."""


def generate_reference_number(now: datetime | None = None) -> str:
    """Return a candidate reference number: PREFIX-YYYYMM-NNNN."""
    now = now or datetime.now(UTC)
    return f"{settings.REFERENCE_PREFIX}-{now:%Y%m}-{random.randint(1000, 9999)}"


async def reference_exists(session: AsyncSession, reference: str) -> bool:
    stmt = (
        select(func.count())
        .select_from(LoanApplication)
        .where(LoanApplication.application_reference_number == reference)
    )
    return ((await session.execute(stmt)).scalar() or 0) > 0


async def customer_exists(session: AsyncSession, customer_number: str) -> bool:
    stmt = (
        select(func.count())
        .select_from(LoanApplication)
        .where(LoanApplication.customer_number == customer_number)
    )
    return ((await session.execute(stmt)).scalar() or 0) > 0


async def entity_exists(session: AsyncSession, number: str, kind: CustomerKind) -> bool:
    """Check whether a customer or company already has an application.

    Companies are registered under their customer number too, so both
    kinds resolve to the same lookup.
    """
    logger.debug("Entity check: kind=%s number=%s", kind.value, number)
    return await customer_exists(session, number.strip())


def _apply_filters(stmt, status: ApplicationStatus | None, search: str | None):
    """Apply optional WHERE clauses for status and free-text search."""
    if status is not None:
        stmt = stmt.where(LoanApplication.application_status == status)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        stmt = stmt.where(
            or_(
                LoanApplication.customer_number.ilike(pattern),
                LoanApplication.first_name.ilike(pattern),
                LoanApplication.last_name.ilike(pattern),
                LoanApplication.application_reference_number.ilike(pattern),
                LoanApplication.tin_number.ilike(pattern),
            )
        )
    return stmt


async def list_applications(
    session: AsyncSession,
    user: UserContext,
    *,
    offset: int = 0,
    limit: int = 20,
    status: ApplicationStatus | None = None,
    search: str | None = None,
    extra_filter=None,
) -> tuple[list[LoanApplication], int]:
    """Return applications visible to the current user, newest first.

    Args:
        status: Only return applications in this status.
        search: Case-insensitive match on customer number, first/last name,
            reference number or TIN.
        extra_filter: Additional WHERE clause (used by role worklists).
    """
    count_stmt = select(func.count(LoanApplication.id))
    count_stmt = apply_data_scope(count_stmt, user.data_scope, user)
    count_stmt = _apply_filters(count_stmt, status, search)
    if extra_filter is not None:
        count_stmt = count_stmt.where(extra_filter)
    total = (await session.execute(count_stmt)).scalar() or 0

    stmt = (
        select(LoanApplication)
        .order_by(LoanApplication.created_at.desc(), LoanApplication.id.desc())
        .offset(offset)
        .limit(limit)
    )
    stmt = apply_data_scope(stmt, user.data_scope, user)
    stmt = _apply_filters(stmt, status, search)
    if extra_filter is not None:
        stmt = stmt.where(extra_filter)
    result = await session.execute(stmt)
    applications = result.unique().scalars().all()

    return applications, total


async def get_application(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
) -> LoanApplication | None:
    """Return a single application if visible to the current user.

    Returns None (which the route maps to 404) for out-of-scope applications
    rather than 403, to avoid leaking existence of resources.
    """
    stmt = (
        select(LoanApplication)
        .options(selectinload(LoanApplication.shareholders))
        .where(LoanApplication.id == application_id)
        .execution_options(populate_existing=True)
    )
    stmt = apply_data_scope(stmt, user.data_scope, user)
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


async def get_by_reference(
    session: AsyncSession,
    user: UserContext,
    reference: str,
    *,
    for_share: bool = False,
) -> LoanApplication | None:
    """Same as ``get_application`` but keyed by reference number.

    ``for_share`` holds a FOR SHARE lock on the row until the transaction
    ends, so a guarded status UPDATE waits for the caller to commit.
    """
    stmt = (
        select(LoanApplication)
        .options(selectinload(LoanApplication.shareholders))
        .where(LoanApplication.application_reference_number == reference)
        .execution_options(populate_existing=True)
    )
    stmt = apply_data_scope(stmt, user.data_scope, user)
    if for_share:
        stmt = stmt.with_for_update(read=True, of=LoanApplication)
    result = await session.execute(stmt)
    return result.unique().scalar_one_or_none()


def _check_document_keys(user: UserContext, documents: list[DocumentRef]) -> None:
    """Intake documents must come from the submitting user's draft area."""
    prefix = StorageService.draft_owner(user.user_id) + "/"
    foreign = [d.object_key for d in documents if not d.object_key.startswith(prefix)]
    if foreign:
        raise DocumentOwnershipError(
            f"Documents were not uploaded by this user: {', '.join(foreign)}"
        )


async def _allocate_reference(session: AsyncSession) -> str:
    for _ in range(settings.REFERENCE_MAX_ATTEMPTS):
        candidate = generate_reference_number()
        if not await reference_exists(session, candidate):
            return candidate
    raise ReferenceNumberExhausted(
        f"No free reference number after {settings.REFERENCE_MAX_ATTEMPTS} attempts"
    )


async def create_application(
    session: AsyncSession,
    user: UserContext,
    body: ApplicationCreate,
) -> LoanApplication:
    """Create a PENDING application from a completed intake wizard.

    Raises:
        DuplicateApplicationError: customer number or reference already registered.
        DocumentOwnershipError: a document key lies outside the caller's drafts.
        ReferenceNumberExhausted: no reference number could be allocated.
    """
    basic = body.basic_info
    if await customer_exists(session, basic.customer_number):
        raise DuplicateApplicationError(
            f"Customer number {basic.customer_number} already has an application"
        )
    _check_document_keys(user, body.documents)

    reference = body.application_reference_number
    if reference is not None:
        if await reference_exists(session, reference):
            raise DuplicateApplicationError(f"Reference number {reference} already exists")
    else:
        reference = await _allocate_reference(session)

    application = LoanApplication(
        application_reference_number=reference,
        application_status=ApplicationStatus.PENDING,
        relation_manager_id=user.user_id,
        last_document_received_date=datetime.now(UTC),
        **basic.model_dump(),
        **body.business_info.model_dump(),
        **body.loan_details.model_dump(),
    )
    application.shareholders = [Shareholder(**s.model_dump()) for s in body.shareholders]
    application.documents = [
        Document(**d.model_dump(), uploaded_by=user.user_id) for d in body.documents
    ]
    session.add(application)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateApplicationError(
            "Customer number or reference number already registered"
        ) from exc

    await write_audit_event(
        session,
        event_type="application_created",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=application.id,
        event_data={
            "application_reference_number": reference,
            "customer_number": basic.customer_number,
            "documents": len(body.documents),
            "shareholders": len(body.shareholders),
        },
    )
    app_id = application.id  # capture before commit expires the object
    await session.commit()
    logger.info("Application %s created by %s", reference, user.user_id)
    return await get_application(session, user, app_id)
