from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List
import logging

from ..models.user import User
from ..core.config import settings
from ..core.errors import Conflict, InvalidCredential, NotFound, ValidationError
from ..core.security import (
    verify_password, get_password_hash, create_access_token, UserRole
)
from ..schemas.auth import UserLogin, TokenResponse, UserResponse

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def create_user(self, name: str, email: str, password: str, role: UserRole) -> User:
        """Provision a staff account."""
        if not name.strip() or not email.strip():
            raise ValidationError("Name and email are required")
        if not password:
            raise ValidationError("Password must not be empty")

        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise Conflict("Email already registered")

        new_user = User(
            name=name.strip(),
            email=email,
            password_hash=get_password_hash(password),
            role=UserRole(role),
            is_active=True,
        )

        self.db.add(new_user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Email already registered")
        self.db.refresh(new_user)

        logger.info(f"Provisioned {new_user.role.value} account {new_user.email}")
        return new_user

    def authenticate_user(self, login_data: UserLogin) -> TokenResponse:
        """Authenticate user and return a session token."""
        user = self.db.query(User).filter(
            User.email == login_data.email
        ).first()

        if not user:
            logger.info(f"Login failed for {login_data.email}: unknown user")
            raise NotFound("User does not exist")

        if not verify_password(login_data.password, user.password_hash):
            logger.info(f"Login failed for {login_data.email}: incorrect password")
            raise InvalidCredential("Incorrect password")

        if not user.is_active:
            logger.info(f"Login refused for {login_data.email}: account deactivated")
            raise InvalidCredential("Account is deactivated")

        token = create_access_token(user.id, user.role, email=user.email)
        logger.info(f"Login succeeded for {user.email} ({user.role.value})")

        return TokenResponse(
            token=token,
            role=user.role,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user),
        )

    def list_users(self, skip: int = 0, limit: int = 50) -> List[User]:
        return self.db.query(User).order_by(User.id).offset(skip).limit(limit).all()
