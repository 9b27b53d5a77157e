"""Authentication API endpoints."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, EmailStr, Field

from sensorhub.core.deps import CurrentUser, DbSession
from sensorhub.services.auth_service import AuthService, AuthenticationError

router = APIRouter()


# Request schemas
class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """User registration request schema."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    full_name: str = Field(..., min_length=2, max_length=200)


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema."""

    refresh_token: str


# Response schemas
class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User response schema."""

    id: str
    email: str
    full_name: str
    is_active: bool


def _to_user_response(user) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(register_request: RegisterRequest, db: DbSession) -> UserResponse:
    """Register a new API user."""
    auth_service = AuthService(db)

    try:
        user = await auth_service.create_user(
            email=register_request.email,
            password=register_request.password,
            full_name=register_request.full_name,
        )
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return _to_user_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(login_request: LoginRequest, db: DbSession) -> TokenResponse:
    """Authenticate user and return tokens."""
    auth_service = AuthService(db)

    try:
        user = await auth_service.authenticate_user(login_request.email, login_request.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    tokens = await auth_service.create_tokens(user)
    return TokenResponse(
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(request: RefreshTokenRequest, db: DbSession) -> TokenResponse:
    """Exchange a refresh token for a new token pair."""
    auth_service = AuthService(db)

    try:
        tokens = await auth_service.refresh_access_token(request.refresh_token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return TokenResponse(
        access_token=tokens["access_token"],
        refresh_token=tokens["refresh_token"],
    )


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Get current user information."""
    return _to_user_response(current_user)
