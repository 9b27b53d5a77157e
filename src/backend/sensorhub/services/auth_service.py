"""Authentication service for user management and token operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sensorhub.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_password,
    verify_token,
)
from sensorhub.models.user import User


class AuthenticationError(Exception):
    """Authentication related errors."""

    pass


class AuthService:
    """Service for authentication operations."""

    MIN_PASSWORD_LENGTH = 8

    def __init__(self, db: AsyncSession):
        """Initialize auth service with database session."""
        self.db = db

    async def authenticate_user(self, email: str, password: str) -> User:
        """Authenticate user with email and password."""
        user = await self._get_user_by_email(email)

        if user is None or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        return user

    async def create_tokens(self, user: User) -> dict[str, str]:
        """Create access and refresh tokens for user."""
        access_token = create_access_token(
            subject=str(user.id),
            additional_claims={"email": user.email},
        )
        refresh_token = create_refresh_token(subject=str(user.id))

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
        }

    async def refresh_access_token(self, refresh_token: str) -> dict[str, str]:
        """Refresh access token using refresh token."""
        user = await self._user_from_token(refresh_token, token_type="refresh")
        return await self.create_tokens(user)

    async def create_user(self, email: str, password: str, full_name: str) -> User:
        """Create a new user."""
        existing_user = await self._get_user_by_email(email)
        if existing_user:
            raise AuthenticationError("Email already registered")

        if len(password) < self.MIN_PASSWORD_LENGTH:
            raise AuthenticationError(
                f"Password must be at least {self.MIN_PASSWORD_LENGTH} characters long"
            )

        user = User(
            email=email.lower(),
            hashed_password=get_password_hash(password),
            full_name=full_name,
        )

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        return user

    async def get_current_user(self, token: str) -> User:
        """Get current user from access token."""
        return await self._user_from_token(token, token_type="access")

    async def _user_from_token(self, token: str, token_type: str) -> User:
        payload = verify_token(token, token_type=token_type)

        if payload is None:
            raise AuthenticationError("Invalid or expired token")

        user_id = payload.get("sub")
        if user_id is None:
            raise AuthenticationError("Invalid token payload")

        try:
            user = await self._get_user_by_id(uuid.UUID(user_id))
        except ValueError:
            raise AuthenticationError("Invalid token payload")
        if user is None:
            raise AuthenticationError("User not found")

        if not user.is_active:
            raise AuthenticationError("Account is deactivated")

        return user

    async def _get_user_by_email(self, email: str) -> User | None:
        """Get user by email."""
        result = await self.db.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def _get_user_by_id(self, user_id: uuid.UUID) -> User | None:
        """Get user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()
