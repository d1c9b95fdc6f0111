# This project was developed with assistance from AI tools.
"""Pure auth utility functions with no FastAPI or HTTP dependencies.

Keeping them separate from ``middleware/auth.py`` lets services and
tests build scopes without pulling in Starlette request handling.
"""

from db.enums import UserRole

from ..schemas.auth import DataScope

# Roles that act on applications they did not originate.
PIPELINE_ROLES = frozenset(
    {
        UserRole.ADMIN,
        UserRole.CREDIT_ANALYST,
        UserRole.SUPERVISOR,
        UserRole.COMMITTE_MEMBER,
        UserRole.APPROVAL_COMMITTE,
    }
)

# Every role that works inside the application.
STAFF_ROLES = (
    UserRole.ADMIN,
    UserRole.RELATIONSHIP_MANAGER,
    UserRole.CREDIT_ANALYST,
    UserRole.SUPERVISOR,
    UserRole.COMMITTE_MEMBER,
    UserRole.APPROVAL_COMMITTE,
)


def build_data_scope(role: UserRole, user_id: str) -> DataScope:
    """Build data scope rules based on the user's role."""
    if role == UserRole.RELATIONSHIP_MANAGER:
        return DataScope(originated_by=user_id, user_id=user_id)
    if role in PIPELINE_ROLES:
        return DataScope(full_pipeline=True, user_id=user_id)
    # plain users and banned accounts -- no application access
    return DataScope(no_access=True, user_id=user_id)
