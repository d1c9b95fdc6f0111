# This project was developed with assistance from AI tools.
"""
Bearer-token authentication against Keycloak.

Tokens are RS256 JWTs checked with the realm's published JWKS. The user's
workflow role comes from the ``role`` claim (a single user attribute mapped
into the token) or, failing that, from ``realm_access.roles``.

Set AUTH_DISABLED=true to bypass validation (tests / local dev without Keycloak).
"""

import logging
import time
from typing import Annotated

import httpx
import jwt
from db.enums import UserRole
from fastapi import Depends, HTTPException, Request, status

from ..core.auth import build_data_scope
from ..core.config import settings
from ..schemas.auth import DataScope, TokenPayload, UserContext

logger = logging.getLogger(__name__)

# Highest first. A token carrying several known roles acts as the first match.
ROLE_PRECEDENCE: tuple[UserRole, ...] = (
    UserRole.BANNED,
    UserRole.ADMIN,
    UserRole.APPROVAL_COMMITTE,
    UserRole.COMMITTE_MEMBER,
    UserRole.SUPERVISOR,
    UserRole.CREDIT_ANALYST,
    UserRole.RELATIONSHIP_MANAGER,
    UserRole.USER,
)


def _realm_url() -> str:
    return f"{settings.KEYCLOAK_URL}/realms/{settings.KEYCLOAK_REALM}"


class JwksCache:
    """Signing keys of the realm, refetched after ``JWKS_CACHE_TTL`` seconds.

    An unknown ``kid`` forces one refetch so rotated keys are picked up
    without waiting for the TTL.
    """

    def __init__(self):
        self._keys: dict[str, jwt.PyJWK] = {}
        self._fetched_at: float = 0

    def _refresh(self) -> None:
        response = httpx.get(f"{_realm_url()}/protocol/openid-connect/certs", timeout=5)
        response.raise_for_status()
        jwk_set = jwt.PyJWKSet.from_dict(response.json())
        self._keys = {key.key_id: key for key in jwk_set.keys}
        self._fetched_at = time.time()

    def _stale(self) -> bool:
        return not self._keys or time.time() - self._fetched_at > settings.JWKS_CACHE_TTL

    def get(self, kid: str | None) -> jwt.PyJWK:
        try:
            if self._stale():
                self._refresh()
            if kid not in self._keys:
                self._refresh()
        except httpx.HTTPError as exc:
            logger.error("Failed to fetch JWKS from Keycloak: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Authentication service unavailable",
            ) from exc
        key = self._keys.get(kid)
        if key is None:
            raise jwt.InvalidTokenError(f"No signing key for kid={kid}")
        return key


_jwks = JwksCache()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def _decode_token(token: str) -> TokenPayload:
    """Verify signature, issuer and expiry, then parse the claims."""
    kid = jwt.get_unverified_header(token).get("kid")
    signing_key = _jwks.get(kid)
    claims = jwt.decode(
        token,
        signing_key.key,
        algorithms=["RS256"],
        issuer=_realm_url(),
        audience=settings.KEYCLOAK_CLIENT_ID,
        options={
            "require": ["exp", "sub"],
            "verify_aud": settings.KEYCLOAK_CLIENT_ID is not None,
        },
    )
    return TokenPayload(**claims)


def _parse_role(raw: str) -> UserRole | None:
    """Match a role by value or by name, ignoring case."""
    wanted = raw.strip().lower()
    for role in UserRole:
        if wanted in (role.value, role.name.lower()):
            return role
    return None


def _resolve_role(token_payload: TokenPayload) -> UserRole:
    """Pick the acting role from the token's role claim and realm roles.

    Unknown entries (Keycloak built-ins such as ``offline_access``) are
    ignored. Raises 403 when nothing known remains.
    """
    raw_roles = list(token_payload.realm_access.get("roles", []))
    if token_payload.role:
        raw_roles.append(token_payload.role)
    found = {role for role in map(_parse_role, raw_roles) if role is not None}

    if not found:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No recognized role assigned",
        )
    role = next(r for r in ROLE_PRECEDENCE if r in found)
    if len(found - {UserRole.USER}) > 1:
        logger.warning(
            "User %s has roles %s, acting as %s",
            token_payload.sub,
            sorted(r.value for r in found),
            role.value,
        )
    return role


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

_DISABLED_USER = UserContext(
    user_id="dev-user",
    role=UserRole.ADMIN,
    email="dev@credit-workflow.local",
    name="Dev User",
    data_scope=DataScope(full_pipeline=True, user_id="dev-user"),
)


async def get_current_user(request: Request) -> UserContext:
    """FastAPI dependency: validate the bearer token and return UserContext.

    When AUTH_DISABLED=true, returns a dev admin user without token validation.
    Banned accounts are refused with 403 here, before any route runs.
    """
    if settings.AUTH_DISABLED:
        return _DISABLED_USER

    token = _bearer_token(request)
    if token is None:
        raise _unauthorized("Missing authentication token")

    try:
        payload = _decode_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise _unauthorized("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected token: %s", exc)
        raise _unauthorized("Invalid token") from exc

    role = _resolve_role(payload)
    if role == UserRole.BANNED:
        logger.warning("Banned user %s attempted access", payload.sub)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is banned")

    return UserContext(
        user_id=payload.sub,
        role=role,
        email=payload.email,
        name=payload.name or payload.preferred_username,
        phone=payload.phone_number,
        data_scope=build_data_scope(role, payload.sub),
    )


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


def require_roles(*allowed_roles: UserRole):
    """Dependency factory: restrict a route to the given workflow roles."""
    allowed = frozenset(allowed_roles)

    async def _check(user: CurrentUser) -> UserContext:
        if user.role not in allowed:
            logger.warning(
                "RBAC denied: user=%s role=%s path requires one of %s",
                user.user_id,
                user.role.value,
                sorted(r.value for r in allowed),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _check
