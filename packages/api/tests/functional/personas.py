# This project was developed with assistance from AI tools.
"""Persona factories for functional tests.

Each function returns a UserContext matching the DataScope built by
``core/auth.py:build_data_scope()`` for that role. Fixed user IDs
ensure cross-test consistency.
"""

from db.enums import UserRole

from src.core.auth import build_data_scope
from src.schemas.auth import UserContext

# Fixed IDs for cross-test referencing
RM_USER_ID = "abebe-kebede-rm"
RM_OTHER_USER_ID = "hana-tesfaye-rm"
ANALYST_USER_ID = "meron-alemu-ca"
ANALYST_OTHER_USER_ID = "dawit-bekele-ca"
SUPERVISOR_USER_ID = "selam-girma-sv"
MEMBER_USER_ID = "yonas-haile-cm"
MEMBER_OTHER_USER_ID = "liya-mengistu-cm"
APPROVAL_USER_ID = "tigist-worku-ac"
ADMIN_USER_ID = "admin-user"
PLAIN_USER_ID = "plain-user"


def _persona(user_id: str, role: UserRole, name: str, **extra) -> UserContext:
    return UserContext(
        user_id=user_id,
        role=role,
        email=f"{user_id}@credit-workflow.local",
        name=name,
        data_scope=build_data_scope(role, user_id),
        **extra,
    )


def relationship_manager() -> UserContext:
    return _persona(RM_USER_ID, UserRole.RELATIONSHIP_MANAGER, "Abebe Kebede")


def relationship_manager_other() -> UserContext:
    return _persona(RM_OTHER_USER_ID, UserRole.RELATIONSHIP_MANAGER, "Hana Tesfaye")


def credit_analyst() -> UserContext:
    return _persona(ANALYST_USER_ID, UserRole.CREDIT_ANALYST, "Meron Alemu")


def credit_analyst_other() -> UserContext:
    return _persona(ANALYST_OTHER_USER_ID, UserRole.CREDIT_ANALYST, "Dawit Bekele")


def supervisor() -> UserContext:
    return _persona(SUPERVISOR_USER_ID, UserRole.SUPERVISOR, "Selam Girma")


def committee_member() -> UserContext:
    return _persona(MEMBER_USER_ID, UserRole.COMMITTE_MEMBER, "Yonas Haile")


def committee_member_other() -> UserContext:
    return _persona(MEMBER_OTHER_USER_ID, UserRole.COMMITTE_MEMBER, "Liya Mengistu")


def approval_committee() -> UserContext:
    return _persona(
        APPROVAL_USER_ID,
        UserRole.APPROVAL_COMMITTE,
        "Tigist Worku",
        phone="+251911000000",
    )


def admin() -> UserContext:
    return _persona(ADMIN_USER_ID, UserRole.ADMIN, "Admin User")


def plain_user() -> UserContext:
    return _persona(PLAIN_USER_ID, UserRole.USER, "Plain User")
