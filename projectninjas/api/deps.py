"""
FastAPI dependencies for authentication, database sessions and services.

Long-lived collaborators (Database, JWTManager, ContentStore) are read from
``request.app.state``, where the application factory put them.
"""

from typing import Annotated, AsyncIterator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.database import Database
from projectninjas.exceptions import UnauthorizedError
from projectninjas.kernel.access.ledger import AccessRequestLedger
from projectninjas.kernel.files.file_service import ProjectFileService
from projectninjas.kernel.files.ingestion import FileIngestionPipeline
from projectninjas.kernel.files.storage import ContentStore
from projectninjas.kernel.identity.identity_service import IdentityService
from projectninjas.kernel.identity.jwt import JWTManager
from projectninjas.kernel.models.user import User
from projectninjas.kernel.projects.project_service import ProjectService


security = HTTPBearer(auto_error=False)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_jwt_manager(request: Request) -> JWTManager:
    return request.app.state.jwt_manager


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content_store


async def get_db(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncIterator[AsyncSession]:
    """Dependency that yields database sessions."""
    async with database.session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


DbSession = Annotated[AsyncSession, Depends(get_db)]
Store = Annotated[ContentStore, Depends(get_content_store)]


def get_identity_service(
    db: DbSession,
    jwt_manager: Annotated[JWTManager, Depends(get_jwt_manager)],
) -> IdentityService:
    return IdentityService(db, jwt_manager)


Identity = Annotated[IdentityService, Depends(get_identity_service)]


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    identity: Identity,
) -> User:
    """Get current authenticated user or raise 401."""
    token = credentials.credentials if credentials else None
    payload = identity.verify(token)

    user = await identity.get_user_by_id(payload.user_id)
    if user is None:
        raise UnauthorizedError("Invalid or expired token.")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_project_service(db: DbSession, store: Store) -> ProjectService:
    return ProjectService(db, store)


def get_file_service(db: DbSession, store: Store) -> ProjectFileService:
    return ProjectFileService(db, store)


def get_ingestion_pipeline(db: DbSession, store: Store) -> FileIngestionPipeline:
    return FileIngestionPipeline(db, store)


def get_access_ledger(db: DbSession) -> AccessRequestLedger:
    return AccessRequestLedger(db)


Projects = Annotated[ProjectService, Depends(get_project_service)]
Files = Annotated[ProjectFileService, Depends(get_file_service)]
Ingestion = Annotated[FileIngestionPipeline, Depends(get_ingestion_pipeline)]
Ledger = Annotated[AccessRequestLedger, Depends(get_access_ledger)]


def get_client_ip(request: Request) -> Optional[str]:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
