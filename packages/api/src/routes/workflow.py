# This project was developed with assistance from AI tools.
"""Workflow action routes.

Each action names the status it expects to move the application out of.
When another user got there first the route answers 409 and the stored
application is unchanged.
"""

from collections.abc import Awaitable

from db import get_db
from db.enums import ApplicationStatus, UserRole
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..middleware.auth import CurrentUser, require_roles
from ..schemas.decision import DecisionResponse
from ..schemas.workflow import (
    AnswerRequest,
    CommitteeDecisionRequest,
    CommitteeDecisionResult,
    CompleteAnalysisRequest,
    RecommendationRequest,
    ReviewScores,
    StatusOverrideRequest,
    TakeSupervisionRequest,
    TransitionResponse,
)
from ..services import workflow as workflow_service
from ..services.workflow import (
    InvalidTransitionError,
    NotAssignedError,
    TransitionConflictError,
    TransitionResult,
)

router = APIRouter()

_ANALYST = (UserRole.ADMIN, UserRole.CREDIT_ANALYST)
_SUPERVISOR = (UserRole.ADMIN, UserRole.SUPERVISOR)
_RM = (UserRole.ADMIN, UserRole.RELATIONSHIP_MANAGER)
_APPROVAL = (UserRole.ADMIN, UserRole.APPROVAL_COMMITTE)


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, TransitionConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, NotAssignedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc))
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")


async def _apply(action: Awaitable[TransitionResult | None]) -> TransitionResponse:
    try:
        result = await action
    except (TransitionConflictError, InvalidTransitionError, NotAssignedError) as exc:
        raise _http_error(exc) from exc
    if result is None:
        raise _not_found()
    app, previous = result
    return TransitionResponse(
        id=app.id,
        application_reference_number=app.application_reference_number,
        previous_status=previous,
        application_status=app.application_status,
    )


@router.post(
    "/{application_id}/take",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_ANALYST))],
)
async def take_application(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    """Claim a PENDING application. Of two analysts racing, one gets 409."""
    return await _apply(workflow_service.take_application(session, user, application_id))


@router.post(
    "/{application_id}/request-recommendation",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_ANALYST))],
)
async def request_recommendation(
    application_id: int,
    body: RecommendationRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(
        workflow_service.request_rm_recommendation(session, user, application_id, body.comment)
    )


@router.post(
    "/{application_id}/answer",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_RM))],
)
async def answer_request(
    application_id: int,
    body: AnswerRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(
        workflow_service.answer_rm_request(session, user, application_id, body.recommendation)
    )


@router.post(
    "/{application_id}/complete-analysis",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_ANALYST))],
)
async def complete_analysis(
    application_id: int,
    body: CompleteAnalysisRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(
        workflow_service.complete_analysis(
            session, user, application_id, conditional=body.conditional
        )
    )


@router.post(
    "/{application_id}/take-supervision",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_SUPERVISOR))],
)
async def take_supervision(
    application_id: int,
    body: TakeSupervisionRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(
        workflow_service.take_supervision(
            session, user, application_id, ApplicationStatus(body.expected_status)
        )
    )


@router.post(
    "/{application_id}/complete-supervision",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_SUPERVISOR))],
)
async def complete_supervision(
    application_id: int,
    body: ReviewScores,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    """Save review scores and mark the application SUPERVISED."""
    return await _apply(
        workflow_service.complete_supervision(session, user, application_id, body)
    )


@router.post(
    "/{application_id}/escalate",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_SUPERVISOR))],
)
async def escalate(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(workflow_service.escalate_to_committee(session, user, application_id))


@router.post(
    "/{application_id}/final-analysis",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_ANALYST))],
)
async def final_analysis(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(workflow_service.start_final_analysis(session, user, application_id))


@router.post(
    "/{application_id}/member-review",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_ANALYST))],
)
async def member_review(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(
        workflow_service.submit_for_member_review(session, user, application_id)
    )


@router.post(
    "/{application_id}/forward-to-committee",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_APPROVAL))],
)
async def forward_to_committee(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    """Close member voting."""
    return await _apply(workflow_service.forward_to_committee(session, user, application_id))


@router.post(
    "/{application_id}/resubmit",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(*_ANALYST))],
)
async def resubmit(
    application_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    return await _apply(workflow_service.resubmit_reversed(session, user, application_id))


@router.post(
    "/{application_id}/committee-decision",
    response_model=CommitteeDecisionResult,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(*_APPROVAL))],
)
async def committee_decision(
    application_id: int,
    body: CommitteeDecisionRequest,
    user: CurrentUser,
    response: Response,
    session: AsyncSession = Depends(get_db),
) -> CommitteeDecisionResult:
    """Record the committee outcome. Answers 200 when an earlier record was updated."""
    try:
        result = await workflow_service.record_committee_decision(
            session,
            user,
            application_id,
            decision=body.decision,
            decision_reason=body.decision_reason,
            responsible_unit_name=body.responsible_unit_name,
        )
    except (TransitionConflictError, InvalidTransitionError) as exc:
        raise _http_error(exc) from exc
    if result is None:
        raise _not_found()

    app, record, created, previous = result
    if not created:
        response.status_code = status.HTTP_200_OK
    return CommitteeDecisionResult(
        id=app.id,
        application_reference_number=app.application_reference_number,
        previous_status=previous,
        application_status=app.application_status,
        decision=DecisionResponse.model_validate(record),
        created=created,
    )


@router.patch(
    "/{application_id}/status",
    response_model=TransitionResponse,
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
)
async def override_status(
    application_id: int,
    body: StatusOverrideRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_db),
) -> TransitionResponse:
    """Admin correction outside the transition table. Still guarded."""
    return await _apply(
        workflow_service.override_status(
            session,
            user,
            application_id,
            expected=body.expected_status,
            new_status=body.new_status,
            reason=body.reason,
        )
    )
