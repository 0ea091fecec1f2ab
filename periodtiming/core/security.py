"""
Security module — Mock bearer-token auth + Role guard.

Auth Flow:
1. The console sends "Authorization: Bearer <token>"
2. The token is looked up in MOCK_USERS (or parsed as "mock-<role>-<school_id>")
3. The resolved user carries role and school_id
4. Routers read school_id through get_school_id to scope every store call
"""

import logging
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from periodtiming.core.config import settings

logger = logging.getLogger(__name__)

security_scheme = HTTPBearer()

ROLES = ("admin", "teacher")

# ---------------------------------------------------------------------------
# Mock users (demo tokens; real authentication lives in the school console)
# ---------------------------------------------------------------------------
MOCK_USERS = {
    "demo-admin-token": {
        "user_id": "u-demo-admin",
        "name": "Demo Admin",
        "role": "admin",
        "school_id": "demo-school",
    },
    "demo-teacher-token": {
        "user_id": "u-demo-teacher",
        "name": "Demo Teacher",
        "role": "teacher",
        "school_id": "demo-school",
    },
}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security_scheme),
) -> dict:
    """Validate the Bearer token and return the user dict."""
    token = credentials.credentials

    if settings.AUTH_MODE == "mock":
        return _mock_auth(token)

    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail=f"Auth mode '{settings.AUTH_MODE}' is not supported",
    )


def _mock_auth(token: str) -> dict:
    """Look up token in MOCK_USERS, then try the "mock-<role>-<school_id>" form."""
    user = MOCK_USERS.get(token)
    if user:
        return user

    if token.startswith("mock-"):
        role, _, school_id = token[5:].partition("-")
        if role in ROLES and school_id:
            return {
                "user_id": f"u-{role}-{school_id}",
                "name": f"{role.title()} ({school_id})",
                "role": role,
                "school_id": school_id,
            }

    logger.warning("Rejected unknown token")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid token.",
    )


# ---------------------------------------------------------------------------
# Role guard dependency
# ---------------------------------------------------------------------------
def require_role(allowed_roles: list[str]):
    """
    Usage:
        @router.put("/")
        async def endpoint(user=Depends(require_role(["admin"]))):
    """

    async def role_checker(
        user: dict = Depends(get_current_user),
    ) -> dict:
        if user["role"] not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{user['role']}' not authorized. Required: {allowed_roles}",
            )
        return user

    return role_checker
