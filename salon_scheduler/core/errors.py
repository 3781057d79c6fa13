from fastapi import HTTPException, status
from typing import Any, Dict, Optional


class SchedulingError(HTTPException):
    """Base class for every failure the API reports to its clients.

    Subclasses pin an HTTP status and a stable machine-readable ``code``;
    the ``detail`` carries the human-readable message.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"
    default_detail: str = "Request failed"
    retryable: bool = False

    def __init__(
        self,
        detail: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.detail}


class NotFound(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Resource not found"


class InvalidCredential(SchedulingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credential"
    default_detail = "Incorrect password"


class Conflict(SchedulingError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_detail = "An appointment already exists for that employee at that time"


class Unauthenticated(SchedulingError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "Authentication required"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidToken(Unauthenticated):
    code = "invalid_token"
    default_detail = "Invalid or expired token"


class Forbidden(SchedulingError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "Not enough permissions"


class ValidationError(SchedulingError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "validation_error"
    default_detail = "Invalid request"


class StoreUnavailable(SchedulingError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "store_unavailable"
    default_detail = "The appointment store is temporarily unavailable, please retry"
    retryable = True

    def __init__(self, detail: Optional[str] = None, retry_after: int = 5):
        super().__init__(detail, headers={"Retry-After": str(retry_after)})


class RateLimited(SchedulingError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "rate_limited"
    default_detail = "Too many requests. Please try again later."
