from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from typing import Iterable, Optional

from ..core.config import settings
from ..core.database import get_redis
from ..core.errors import RateLimited
from ..core.security import security, authorize, Identity, UserRole

def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[str]:
    """Extract the raw token from an ``Authorization: Bearer`` header."""
    if credentials is None:
        return None
    return credentials.credentials

# Role-based access control dependencies
def require_role(allowed_roles: Iterable[UserRole] = ()):
    """Create a dependency that requires one of ``allowed_roles``.

    With no roles given, any authenticated caller is admitted.
    """
    allowed = tuple(UserRole(role) for role in allowed_roles)

    async def role_checker(token: Optional[str] = Depends(get_bearer_token)) -> Identity:
        return authorize(token, allowed)

    return role_checker

get_current_identity = require_role()

get_admin_identity = require_role([UserRole.ADMIN])

get_appointment_writer = require_role(settings.APPOINTMENT_WRITE_ROLES)

get_appointment_remover = require_role(settings.APPOINTMENT_DELETE_ROLES)

async def get_appointment_reader(
    token: Optional[str] = Depends(get_bearer_token)
) -> Optional[Identity]:
    """Guard for read routes; open unless APPOINTMENTS_LIST_REQUIRES_AUTH is set."""
    if settings.APPOINTMENTS_LIST_REQUIRES_AUTH:
        return authorize(token)
    return None

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limit for the login endpoint, keyed by client address."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:login:{client_ip}"

    # INCR is atomic, so concurrent logins each see a distinct count
    current_requests = redis_client.incr(key)
    if current_requests == 1:
        redis_client.expire(key, settings.LOGIN_RATE_WINDOW_SECONDS)
    if current_requests > settings.LOGIN_RATE_LIMIT:
        raise RateLimited()
