from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel
from enum import Enum

from .config import settings
from .errors import Forbidden, InvalidToken, Unauthenticated

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer extraction; missing headers are reported by authorize()
security = HTTPBearer(auto_error=False)

class UserRole(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"

class TokenPayload(BaseModel):
    sub: Optional[int] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    exp: Optional[int] = None
    token_type: Optional[str] = None

class Identity(BaseModel):
    """Caller identity decoded from a verified token."""
    id: int
    role: UserRole
    email: Optional[str] = None

# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

# JWT utilities
def create_access_token(
    user_id: int,
    role: UserRole,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token for the given identity."""
    if not settings.SECRET_KEY:
        raise RuntimeError("SECRET_KEY is not configured")

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "role": UserRole(role).value,
        "exp": datetime.now(timezone.utc) + expires_delta,
        "token_type": "access",
    }
    if email is not None:
        to_encode["email"] = email

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def verify_token(token: str) -> Optional[TokenPayload]:
    """Verify and decode JWT token. Returns None when it cannot be trusted."""
    if not settings.SECRET_KEY:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        return TokenPayload(**payload)
    except (JWTError, ValueError):
        return None

def authorize(token: Optional[str], allowed_roles: Iterable[UserRole] = ()) -> Identity:
    """Check a presented token against an operation's allowed roles.

    An empty ``allowed_roles`` admits any authenticated caller.
    """
    if not token:
        raise Unauthenticated()

    payload = verify_token(token)
    if payload is None or payload.token_type != "access":
        raise InvalidToken()
    if payload.sub is None or payload.role is None:
        raise InvalidToken("Invalid token payload")

    allowed = {UserRole(role) for role in allowed_roles}
    if allowed and payload.role not in allowed:
        raise Forbidden(
            f"Access denied. Required roles: {sorted(role.value for role in allowed)}"
        )

    return Identity(id=payload.sub, role=payload.role, email=payload.email)
