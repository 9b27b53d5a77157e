"""Dependency injection utilities for FastAPI."""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from sensorhub.core.config import settings
from sensorhub.models.user import User
from sensorhub.services.auth_service import AuthService, AuthenticationError
from sensorhub.services.reading_store import SQLReadingStore
from sensorhub.services.status_cache import StatusCache
from sensorhub.services.telemetry_ingestion_service import TelemetryIngestionService
from sensorhub.services.telemetry_query_service import TelemetryQueryService

# Database engine and session factory
engine = create_async_engine(settings.database_url, echo=settings.debug)
async_session_factory = async_sessionmaker(engine, expire_on_commit=False)

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_status_cache(request: Request) -> StatusCache:
    """Get the application's latest-status cache (created in the lifespan)."""
    return request.app.state.status_cache


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get current authenticated user from JWT token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    auth_service = AuthService(db)

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_ingestion_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TelemetryIngestionService:
    """Build the ingestion service over this request's session."""
    return TelemetryIngestionService(SQLReadingStore(db))


def get_query_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[StatusCache, Depends(get_status_cache)],
) -> TelemetryQueryService:
    """Build the query service over this request's session and the shared cache."""
    return TelemetryQueryService(SQLReadingStore(db), cache)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
IngestionService = Annotated[TelemetryIngestionService, Depends(get_ingestion_service)]
QueryService = Annotated[TelemetryQueryService, Depends(get_query_service)]
