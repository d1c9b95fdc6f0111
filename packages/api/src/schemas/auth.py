# This project was developed with assistance from AI tools.
"""Authentication and authorization schemas."""

from db.enums import UserRole
from pydantic import BaseModel, ConfigDict, Field


class DataScope(BaseModel):
    """Data visibility rules injected by RBAC middleware."""

    originated_by: str | None = None
    user_id: str | None = None
    full_pipeline: bool = False
    no_access: bool = False


class UserContext(BaseModel):
    """Injected by auth middleware into every authenticated request."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    role: UserRole
    email: str
    name: str
    phone: str | None = None
    data_scope: DataScope = Field(default_factory=DataScope)


class TokenPayload(BaseModel):
    """Decoded JWT token claims from Keycloak."""

    sub: str
    email: str = ""
    preferred_username: str = ""
    name: str = ""
    phone_number: str | None = None
    role: str | None = None
    realm_access: dict = Field(default_factory=dict)


class ProfileResponse(BaseModel):
    """Response for GET /api/profile."""

    user_id: str
    role: UserRole
    email: str
    name: str
    phone: str | None = None
