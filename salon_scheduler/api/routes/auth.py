from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import Identity
from ...api.deps import get_admin_identity, get_current_identity, rate_limit_check
from ...services.auth_service import AuthService
from ...schemas.auth import UserLogin, TokenResponse, UserResponse, IdentityResponse

router = APIRouter(tags=["Authentication"])

@router.post("/login", response_model=TokenResponse)
def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    _: None = Depends(rate_limit_check)
):
    """Authenticate a staff member and return a session token."""
    auth_service = AuthService(db)
    return auth_service.authenticate_user(login_data)

@router.get("/me", response_model=IdentityResponse)
async def get_current_identity_info(
    identity: Identity = Depends(get_current_identity)
):
    """Return the identity carried by the presented token."""
    return IdentityResponse(**identity.model_dump())

# Admin routes
@router.get("/users", response_model=List[UserResponse])
def list_users(
    skip: int = 0,
    limit: int = 50,
    db: Session = Depends(get_db),
    _: Identity = Depends(get_admin_identity)
):
    """List staff accounts (admin only)."""
    auth_service = AuthService(db)
    return [UserResponse.model_validate(user) for user in auth_service.list_users(skip, limit)]
