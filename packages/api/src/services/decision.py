# This project was developed with assistance from AI tools.
"""Decision records keyed by application reference number.

The approval committee's decision is an upsert: re-posting for the same
reference updates the stored record. Member decisions are additive, one
per member per application, enforced by a unique constraint.
"""

import logging

from db import Decision, MemberDecision
from db.enums import ApplicationStatus, CommitteeOutcome
from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..schemas.auth import UserContext
from ..schemas.decision import MemberDecisionCreate
from ..services.application import get_by_reference
from ..services.audit import write_audit_event

logger = logging.getLogger(__name__)


class DuplicateMemberDecisionError(ValueError):
    """Raised when a member votes twice on the same application."""


class VotingClosedError(ValueError):
    """Raised when a member votes outside MEMBER_REVIEW."""


async def find_committee_decision(session: AsyncSession, reference: str) -> Decision | None:
    """Unscoped lookup. Callers must check access to the application first."""
    result = await session.execute(
        select(Decision)
        .where(Decision.application_reference_number == reference)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def upsert_committee_decision(
    session: AsyncSession,
    reference: str,
    user: UserContext,
    *,
    decision: CommitteeOutcome,
    decision_reason: str,
    responsible_unit_name: str | None = None,
) -> tuple[Decision, bool]:
    """Insert or update the committee decision without committing.

    Returns (record, created).
    """
    existing = (
        await session.execute(
            select(func.count())
            .select_from(Decision)
            .where(Decision.application_reference_number == reference)
        )
    ).scalar() or 0

    fields = {
        "decision": decision,
        "decision_reason": decision_reason,
        "responsible_unit_name": responsible_unit_name or user.name,
        "responsible_unit_email": user.email or None,
        "responsible_unit_phone": user.phone,
        "decided_by": user.user_id,
    }
    insert = pg_insert(Decision).values(application_reference_number=reference, **fields)
    # The responsible unit stays the one that first recorded the decision.
    stmt = insert.on_conflict_do_update(
        index_elements=[Decision.application_reference_number],
        set_={
            "decision": insert.excluded.decision,
            "decision_reason": insert.excluded.decision_reason,
            "decided_by": insert.excluded.decided_by,
            "decision_date": func.now(),
            "updated_at": func.now(),
        },
    )
    await session.execute(stmt)
    record = await find_committee_decision(session, reference)
    logger.info(
        "Committee decision %s for %s (%s)",
        decision.value,
        reference,
        "created" if not existing else "updated",
    )
    return record, not existing


async def get_committee_decision(
    session: AsyncSession,
    user: UserContext,
    reference: str,
) -> Decision | None:
    app = await get_by_reference(session, user, reference)
    if app is None:
        return None
    return await find_committee_decision(session, reference)


async def add_member_decision(
    session: AsyncSession,
    user: UserContext,
    reference: str,
    body: MemberDecisionCreate,
) -> MemberDecision | None:
    """Record a committee member's vote.

    Returns None if the application is not visible to the caller.

    Raises:
        VotingClosedError: the application is not in MEMBER_REVIEW.
        DuplicateMemberDecisionError: the member already voted.
    """
    # The share lock keeps forward_to_committee from closing voting before
    # this vote commits.
    app = await get_by_reference(session, user, reference, for_share=True)
    if app is None:
        return None
    if app.application_status != ApplicationStatus.MEMBER_REVIEW:
        raise VotingClosedError(
            f"Application {reference} is {app.application_status.value}; member voting is closed"
        )
    app_id = app.id

    vote = MemberDecision(
        application_reference_number=reference,
        user_id=user.user_id,
        member_name=user.name,
        member_email=user.email or None,
        decision=body.decision,
        decision_reason=body.decision_reason,
    )
    session.add(vote)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateMemberDecisionError(
            f"User {user.user_id} already recorded a decision for {reference}"
        ) from exc

    await write_audit_event(
        session,
        event_type="member_decision",
        user_id=user.user_id,
        user_role=user.role.value,
        application_id=app_id,
        event_data={"reference": reference, "decision": body.decision.value},
    )
    await session.commit()
    await session.refresh(vote)
    return vote


async def get_member_decision(
    session: AsyncSession,
    user: UserContext,
    reference: str,
) -> MemberDecision | None:
    """The caller's own vote on an application."""
    app = await get_by_reference(session, user, reference)
    if app is None:
        return None
    result = await session.execute(
        select(MemberDecision).where(
            MemberDecision.application_reference_number == reference,
            MemberDecision.user_id == user.user_id,
        )
    )
    return result.scalar_one_or_none()


async def list_member_decisions(
    session: AsyncSession,
    user: UserContext,
    reference: str,
) -> list[MemberDecision] | None:
    """All member votes on an application, newest first."""
    app = await get_by_reference(session, user, reference)
    if app is None:
        return None
    result = await session.execute(
        select(MemberDecision)
        .where(MemberDecision.application_reference_number == reference)
        .order_by(MemberDecision.decision_date.desc(), MemberDecision.id.desc())
    )
    return list(result.scalars().all())
