# This project was developed with assistance from AI tools.
"""Status-guarded workflow transitions.

Every status change is one conditional UPDATE:

    UPDATE loan_applications
       SET application_status = :new, ...
     WHERE id = :id AND application_status = :expected

When no row matches, another actor moved the application first (or it was
never in the expected status) and the caller gets ``TransitionConflictError``.
At most one actor wins a given race; no row lock is taken.

``transition`` never commits. The named operations below commit once, so a
status change and the records written with it (review scores, the committee
decision, the audit event) land together or not at all.
"""

import logging

from db import LoanApplication
from db.enums import ApplicationStatus, CommitteeOutcome, UserRole
from sqlalchemy import and_, false, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from ..schemas.workflow import ReviewScores
from ..services.analysis import upsert_review
from ..services.application import get_application, list_applications
from ..services.audit import write_audit_event
from ..services.decision import upsert_committee_decision

logger = logging.getLogger(__name__)

# (updated application, status it moved out of)
TransitionResult = tuple[LoanApplication, ApplicationStatus]

# Columns a transition may set alongside the status.
TRANSITION_FIELDS = frozenset(
    {
        "credit_analyst_id",
        "supervisor_id",
        "credit_analyst_comment",
        "rm_recommendation",
    }
)


class InvalidTransitionError(ValueError):
    """Raised when a status pair is not in the transition table."""


class TransitionConflictError(Exception):
    """Raised when the guarded update matched no row."""

    def __init__(
        self,
        application_id: int,
        expected: ApplicationStatus,
        current: ApplicationStatus | None,
    ):
        self.application_id = application_id
        self.expected = expected
        self.current = current
        if current is None:
            message = f"Application {application_id} no longer exists"
        else:
            message = (
                f"Application {application_id} is {current.value}, "
                f"expected {expected.value}"
            )
        super().__init__(message)


class NotAssignedError(PermissionError):
    """Raised when the caller is not the user the application is assigned to."""


async def transition(
    session: AsyncSession,
    application_id: int,
    expected: ApplicationStatus,
    new_status: ApplicationStatus,
    *,
    extra: dict | None = None,
    user: UserContext | None = None,
    allow_any: bool = False,
) -> None:
    """Move an application from ``expected`` to ``new_status``.

    Args:
        extra: Accompanying column values, restricted to ``TRANSITION_FIELDS``.
        user: Actor recorded in the audit trail.
        allow_any: Skip the transition table (admin override). The status
            guard still applies.

    Raises:
        InvalidTransitionError: the pair is not allowed; nothing is executed.
        TransitionConflictError: the stored status is not ``expected``; the
            row is left untouched.
    """
    if allow_any:
        if expected == new_status:
            raise InvalidTransitionError(f"Application is already {new_status.value}")
    else:
        allowed = ApplicationStatus.valid_transitions().get(expected, frozenset())
        if new_status not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from '{expected.value}' to '{new_status.value}'. "
                f"Allowed: {sorted(s.value for s in allowed) if allowed else 'none (terminal status)'}."
            )

    values = dict(extra or {})
    unknown = set(values) - TRANSITION_FIELDS
    if unknown:
        raise ValueError(f"Fields not settable during a transition: {sorted(unknown)}")

    stmt = (
        update(LoanApplication)
        .where(
            LoanApplication.id == application_id,
            LoanApplication.application_status == expected,
        )
        .values(application_status=new_status, updated_at=func.now(), **values)
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(stmt)

    if result.rowcount != 1:
        current_stmt = select(LoanApplication.application_status).where(
            LoanApplication.id == application_id
        )
        current = (await session.execute(current_stmt)).scalar_one_or_none()
        logger.warning(
            "Transition conflict: app=%s expected=%s found=%s wanted=%s",
            application_id,
            expected.value,
            current.value if current is not None else None,
            new_status.value,
        )
        raise TransitionConflictError(application_id, expected, current)

    await write_audit_event(
        session,
        event_type="status_transition",
        user_id=user.user_id if user else None,
        user_role=user.role.value if user else None,
        application_id=application_id,
        event_data={"from": expected.value, "to": new_status.value, "fields": sorted(values)},
    )
    logger.info(
        "Application %s: %s -> %s (by %s)",
        application_id,
        expected.value,
        new_status.value,
        user.user_id if user else "system",
    )


# ---------------------------------------------------------------------------
# Named operations
# ---------------------------------------------------------------------------


def _require_assignee(app: LoanApplication, field: str, user: UserContext) -> None:
    if user.role == UserRole.ADMIN:
        return
    assignee = getattr(app, field)
    if assignee != user.user_id:
        raise NotAssignedError(
            f"Application {app.application_reference_number} is assigned to another user"
        )


async def _run(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    expected: ApplicationStatus,
    new_status: ApplicationStatus,
    *,
    assignee_field: str | None = None,
    extra: dict | None = None,
) -> TransitionResult | None:
    """Scope check, optional assignee check, guarded transition, commit."""
    app = await get_application(session, user, application_id)
    if app is None:
        return None
    if assignee_field is not None:
        _require_assignee(app, assignee_field, user)
    await transition(session, app.id, expected, new_status, extra=extra, user=user)
    await session.commit()
    updated = await get_application(session, user, application_id)
    return updated, expected


async def take_application(
    session: AsyncSession, user: UserContext, application_id: int,
) -> TransitionResult | None:
    """Credit analyst picks up a pending application."""
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.PENDING,
        ApplicationStatus.UNDER_REVIEW,
        extra={"credit_analyst_id": user.user_id},
    )


async def request_rm_recommendation(
    session: AsyncSession, user: UserContext, application_id: int, comment: str,
) -> TransitionResult | None:
    """Send the application back to its relationship manager with a question."""
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.UNDER_REVIEW,
        ApplicationStatus.RM_RECCOMENDATION,
        assignee_field="credit_analyst_id",
        extra={"credit_analyst_comment": comment},
    )


async def answer_rm_request(
    session: AsyncSession, user: UserContext, application_id: int, recommendation: str,
) -> TransitionResult | None:
    """Relationship manager answers and returns the file to the analyst."""
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.RM_RECCOMENDATION,
        ApplicationStatus.UNDER_REVIEW,
        assignee_field="relation_manager_id",
        extra={"rm_recommendation": recommendation},
    )


async def complete_analysis(
    session: AsyncSession, user: UserContext, application_id: int, *, conditional: bool = False,
) -> TransitionResult | None:
    target = ApplicationStatus.CONDITIONAL if conditional else ApplicationStatus.ANALYSIS_COMPLETED
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.UNDER_REVIEW,
        target,
        assignee_field="credit_analyst_id",
    )


async def take_supervision(
    session: AsyncSession, user: UserContext, application_id: int, expected: ApplicationStatus,
) -> TransitionResult | None:
    """Supervisor claims a completed analysis.

    ``expected`` is the status the supervisor saw (ANALYSIS_COMPLETED or
    CONDITIONAL). A mismatch surfaces as a conflict instead of a silent claim.
    """
    return await _run(
        session,
        user,
        application_id,
        expected,
        ApplicationStatus.SUPERVISOR_REVIEWING,
        extra={"supervisor_id": user.user_id},
    )


async def complete_supervision(
    session: AsyncSession, user: UserContext, application_id: int, scores: ReviewScores,
) -> TransitionResult | None:
    """Record review scores and mark the application SUPERVISED in one commit."""
    app = await get_application(session, user, application_id)
    if app is None:
        return None
    _require_assignee(app, "supervisor_id", user)
    await transition(
        session,
        app.id,
        ApplicationStatus.SUPERVISOR_REVIEWING,
        ApplicationStatus.SUPERVISED,
        user=user,
    )
    await upsert_review(session, app.application_reference_number, scores, user)
    await session.commit()
    updated = await get_application(session, user, application_id)
    return updated, ApplicationStatus.SUPERVISOR_REVIEWING


async def escalate_to_committee(
    session: AsyncSession, user: UserContext, application_id: int,
) -> TransitionResult | None:
    """Supervisor sends a supervised file straight to the approval committee."""
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.SUPERVISED,
        ApplicationStatus.COMMITTE_REVIEW,
        assignee_field="supervisor_id",
    )


async def start_final_analysis(
    session: AsyncSession, user: UserContext, application_id: int,
) -> TransitionResult | None:
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.SUPERVISED,
        ApplicationStatus.FINAL_ANALYSIS,
        assignee_field="credit_analyst_id",
    )


async def submit_for_member_review(
    session: AsyncSession, user: UserContext, application_id: int,
) -> TransitionResult | None:
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.FINAL_ANALYSIS,
        ApplicationStatus.MEMBER_REVIEW,
        assignee_field="credit_analyst_id",
    )


async def forward_to_committee(
    session: AsyncSession, user: UserContext, application_id: int,
) -> TransitionResult | None:
    """Close member voting and put the application before the approval committee."""
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.MEMBER_REVIEW,
        ApplicationStatus.COMMITTE_REVIEW,
    )


async def resubmit_reversed(
    session: AsyncSession, user: UserContext, application_id: int,
) -> TransitionResult | None:
    """Analyst returns a reversed application to the committee after rework."""
    return await _run(
        session,
        user,
        application_id,
        ApplicationStatus.COMMITTE_REVERSED,
        ApplicationStatus.COMMITTE_REVIEW,
        assignee_field="credit_analyst_id",
    )


async def record_committee_decision(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    *,
    decision: CommitteeOutcome,
    decision_reason: str,
    responsible_unit_name: str | None = None,
):
    """Apply the committee outcome and upsert the decision record atomically.

    Re-posting the outcome the application already carries only updates the
    decision record, so a retried or corrected decision is not a conflict.

    Returns (application, decision, created, previous_status) or None when
    out of scope.
    """
    app = await get_application(session, user, application_id)
    if app is None:
        return None
    outcome_status = ApplicationStatus(decision.value)
    previous = ApplicationStatus.COMMITTE_REVIEW
    try:
        await transition(session, app.id, previous, outcome_status, user=user)
    except TransitionConflictError as exc:
        if exc.current != outcome_status:
            raise
        previous = outcome_status
        logger.info(
            "Application %s already %s; updating its decision record",
            app.id,
            outcome_status.value,
        )
        await write_audit_event(
            session,
            event_type="committee_decision_updated",
            user_id=user.user_id,
            user_role=user.role.value,
            application_id=app.id,
            event_data={"decision": decision.value, "reason": decision_reason},
        )
    record, created = await upsert_committee_decision(
        session,
        app.application_reference_number,
        user,
        decision=decision,
        decision_reason=decision_reason,
        responsible_unit_name=responsible_unit_name,
    )
    await session.commit()
    await session.refresh(record)
    return await get_application(session, user, application_id), record, created, previous


async def override_status(
    session: AsyncSession,
    user: UserContext,
    application_id: int,
    *,
    expected: ApplicationStatus,
    new_status: ApplicationStatus,
    reason: str,
):
    """Admin correction. Bypasses the transition table but keeps the guard."""
    app = await get_application(session, user, application_id)
    if app is None:
        return None
    await transition(session, app.id, expected, new_status, user=user, allow_any=True)
    await write_audit_event(
        session,
        event_type="status_override",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app.id,
        event_data={"from": expected.value, "to": new_status.value, "reason": reason},
    )
    await session.commit()
    logger.warning(
        "Status override on %s: %s -> %s by %s",
        app.application_reference_number,
        expected.value,
        new_status.value,
        user.user_id,
    )
    updated = await get_application(session, user, application_id)
    return updated, expected


# ---------------------------------------------------------------------------
# Worklists
# ---------------------------------------------------------------------------

_ANALYST_OWN = (
    ApplicationStatus.UNDER_REVIEW,
    ApplicationStatus.SUPERVISED,
    ApplicationStatus.FINAL_ANALYSIS,
    ApplicationStatus.COMMITTE_REVERSED,
)
_SUPERVISOR_POOL = (ApplicationStatus.ANALYSIS_COMPLETED, ApplicationStatus.CONDITIONAL)
_SUPERVISOR_OWN = (ApplicationStatus.SUPERVISOR_REVIEWING, ApplicationStatus.SUPERVISED)
_APPROVAL_COMMITTEE = (ApplicationStatus.MEMBER_REVIEW, ApplicationStatus.COMMITTE_REVIEW)


def worklist_filter(user: UserContext):
    """WHERE clause selecting what the caller's role acts on next."""
    status = LoanApplication.application_status
    uid = user.user_id
    if user.role == UserRole.CREDIT_ANALYST:
        return or_(
            status == ApplicationStatus.PENDING,
            and_(LoanApplication.credit_analyst_id == uid, status.in_(_ANALYST_OWN)),
        )
    if user.role == UserRole.RELATIONSHIP_MANAGER:
        return and_(
            LoanApplication.relation_manager_id == uid,
            status == ApplicationStatus.RM_RECCOMENDATION,
        )
    if user.role == UserRole.SUPERVISOR:
        return or_(
            status.in_(_SUPERVISOR_POOL),
            and_(LoanApplication.supervisor_id == uid, status.in_(_SUPERVISOR_OWN)),
        )
    if user.role == UserRole.COMMITTE_MEMBER:
        return status == ApplicationStatus.MEMBER_REVIEW
    if user.role == UserRole.APPROVAL_COMMITTE:
        return status.in_(_APPROVAL_COMMITTEE)
    if user.role == UserRole.ADMIN:
        return status.notin_(list(ApplicationStatus.terminal_statuses()))
    return false()


async def list_worklist(
    session: AsyncSession,
    user: UserContext,
    *,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[LoanApplication], int]:
    return await list_applications(
        session, user, offset=offset, limit=limit, extra_filter=worklist_filter(user),
    )
