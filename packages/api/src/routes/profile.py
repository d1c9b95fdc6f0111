# This project was developed with assistance from AI tools.
"""The caller's own identity."""

from fastapi import APIRouter

from ..middleware.auth import CurrentUser
from ..schemas.auth import ProfileResponse

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: CurrentUser) -> ProfileResponse:
    return ProfileResponse(
        user_id=user.user_id,
        role=user.role,
        email=user.email,
        name=user.name,
        phone=user.phone,
    )
