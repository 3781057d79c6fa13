from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from ..core.security import UserRole

class UserLogin(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool = True

class TokenResponse(BaseModel):
    token: str
    role: UserRole
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse

class IdentityResponse(BaseModel):
    id: int
    role: UserRole
    email: Optional[str] = None
