# This project was developed with assistance from AI tools.
"""Committee and member decision routes.

The committee decision itself is recorded through the workflow action
``POST /api/applications/{id}/committee-decision`` because it changes the
application status. These routes read it and manage member votes.
"""

from typing import Annotated

from db import get_db
from db.enums import UserRole
from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth import STAFF_ROLES
from ..middleware.auth import CurrentUser, require_roles
from ..schemas.application import REFERENCE_PATTERN
from ..schemas.decision import (
    DecisionResponse,
    MemberDecisionCreate,
    MemberDecisionListResponse,
    MemberDecisionResponse,
)
from ..services import decision as decision_service

router = APIRouter()

Reference = Annotated[str, Path(pattern=REFERENCE_PATTERN)]
_VOTERS = (UserRole.COMMITTE_MEMBER, UserRole.APPROVAL_COMMITTE)


@router.get(
    "/{reference}",
    response_model=DecisionResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def get_decision(
    reference: Reference,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> DecisionResponse:
    record = await decision_service.get_committee_decision(session, user, reference)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Decision not found")
    return DecisionResponse.model_validate(record)


@router.post(
    "/{reference}/members",
    response_model=MemberDecisionResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_VOTERS))],
)
async def add_member_decision(
    body: MemberDecisionCreate,
    reference: Reference,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MemberDecisionResponse:
    """Record the caller's vote. One vote per member per application."""
    try:
        vote = await decision_service.add_member_decision(session, user, reference, body)
    except (
        decision_service.DuplicateMemberDecisionError,
        decision_service.VotingClosedError,
    ) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    if vote is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return MemberDecisionResponse.model_validate(vote)


@router.get(
    "/{reference}/members",
    response_model=MemberDecisionListResponse,
    dependencies=[Depends(require_roles(*STAFF_ROLES))],
)
async def list_member_decisions(
    reference: Reference,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MemberDecisionListResponse:
    votes = await decision_service.list_member_decisions(session, user, reference)
    if votes is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return MemberDecisionListResponse(
        application_reference_number=reference,
        count=len(votes),
        data=[MemberDecisionResponse.model_validate(v) for v in votes],
    )


@router.get(
    "/{reference}/members/me",
    response_model=MemberDecisionResponse,
    dependencies=[Depends(require_roles(*_VOTERS))],
)
async def get_my_member_decision(
    reference: Reference,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> MemberDecisionResponse:
    vote = await decision_service.get_member_decision(session, user, reference)
    if vote is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No decision recorded")
    return MemberDecisionResponse.model_validate(vote)
