# This project was developed with assistance from AI tools.
"""Append-only audit trail with a SHA-256 hash chain.

Each event stores the digest of the event written before it, so editing or
deleting a stored event breaks the chain at the following row. Writers take
a transaction-scoped PostgreSQL advisory lock so two concurrent transitions
cannot link to the same predecessor.
"""

import hashlib
import json
import logging

from db import AuditEvent
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# Serializes audit inserts only; other statements are unaffected.
AUDIT_LOCK_KEY = 900_001
GENESIS = "genesis"


def _event_digest(event: AuditEvent) -> str:
    """SHA-256 over the fields of ``event`` that the chain protects."""
    payload = json.dumps(
        [
            event.id,
            event.timestamp.isoformat(),
            event.event_type,
            event.application_id,
            event.event_data,
        ],
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(payload.encode()).hexdigest()


async def write_audit_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: str | None = None,
    user_role: str | None = None,
    application_id: int | None = None,
    event_data: dict | None = None,
) -> AuditEvent:
    """Append an event to the chain without committing.

    The event joins the caller's transaction: it is committed or rolled
    back together with the change it records.

    Args:
        event_type: e.g. 'status_transition', 'application_created',
            'member_decision', 'status_override'.
        user_id: User who triggered the event.
        user_role: Role at the time of the event.
        application_id: Related application, if any.
        event_data: JSON-serializable payload.
    """
    # Released automatically when the transaction commits or rolls back.
    await session.execute(text(f"SELECT pg_advisory_xact_lock({AUDIT_LOCK_KEY})"))

    result = await session.execute(select(AuditEvent).order_by(AuditEvent.id.desc()).limit(1))
    previous = result.scalar_one_or_none()

    event = AuditEvent(
        event_type=event_type,
        user_id=user_id,
        user_role=user_role,
        application_id=application_id,
        event_data=event_data,
        prev_hash=_event_digest(previous) if previous is not None else GENESIS,
    )
    session.add(event)
    await session.flush()
    return event


async def verify_audit_chain(session: AsyncSession) -> dict:
    """Recompute every link of the chain, oldest first.

    Returns:
        {"status": "OK", "events_checked": N} when intact, or
        {"status": "TAMPERED", "first_break_id": id, "events_checked": N}
        where ``id`` is the first event whose stored link does not match.
    """
    result = await session.execute(select(AuditEvent).order_by(AuditEvent.id.asc()))
    expected = GENESIS
    checked = 0
    for event in result.scalars().all():
        checked += 1
        if event.prev_hash != expected:
            logger.error("Audit chain break at event %s", event.id)
            return {"status": "TAMPERED", "first_break_id": event.id, "events_checked": checked}
        expected = _event_digest(event)
    return {"status": "OK", "events_checked": checked}


async def get_events_by_application(
    session: AsyncSession,
    application_id: int,
    *,
    event_type: str | None = None,
) -> list[AuditEvent]:
    """Return the audit trail of one application, oldest first."""
    stmt = select(AuditEvent).where(AuditEvent.application_id == application_id)
    if event_type is not None:
        stmt = stmt.where(AuditEvent.event_type == event_type)
    result = await session.execute(stmt.order_by(AuditEvent.id.asc()))
    return list(result.scalars().all())
