"""
Identity service: registration, login and token verification.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from projectninjas.exceptions import ConflictError, UnauthorizedError
from projectninjas.kernel.events.event_store import EventStore
from projectninjas.kernel.identity.jwt import AccessTokenPayload, JWTManager
from projectninjas.kernel.identity.password import (
    burn_password_check,
    hash_password,
    verify_password,
)
from projectninjas.kernel.models.event_log import EventType
from projectninjas.kernel.models.user import User
from projectninjas.logging_config import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


@dataclass(frozen=True)
class AuthResult:
    """A user together with a freshly issued access token."""

    user: User
    token: str
    expires_in: int


class IdentityService:
    """
    Service for user identity operations.

    Handles user registration, authentication, and token verification.
    """

    def __init__(self, session: AsyncSession, jwt_manager: JWTManager):
        self.session = session
        self.jwt_manager = jwt_manager
        self.event_store = EventStore(session)

    async def register(
        self,
        email: str,
        password: str,
        ip_address: Optional[str] = None,
    ) -> AuthResult:
        """
        Register a new user and issue a token.

        Args:
            email: User's email address (stored as given, exact match)
            password: Plain text password

        Raises:
            ConflictError: If the email is already registered
        """
        email = email.strip()
        if await self.get_user_by_email(email):
            raise ConflictError("A user with this email already exists.")

        user = User(
            email=email,
            password_hash=hash_password(password),
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration
            await self.session.rollback()
            raise ConflictError("A user with this email already exists.")

        await self.event_store.log(
            event_type=EventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user.id,
            user_id=user.id,
            ip_address=ip_address,
        )
        await self.session.commit()

        logger.info("User registered", extra={"user_id": str(user.id)})
        return self._issue(user)

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate with email and password.

        Unknown email and wrong password fail identically.

        Raises:
            UnauthorizedError: If the credentials do not match
        """
        user = await self.get_user_by_email(email.strip())
        if user is None:
            burn_password_check(password)
            raise UnauthorizedError(INVALID_CREDENTIALS)

        if not verify_password(password, user.password_hash):
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return self._issue(user)

    def verify(self, token: Optional[str]) -> AccessTokenPayload:
        """
        Decode a bearer token into the caller's identity.

        Raises:
            UnauthorizedError: If the token is missing, malformed or expired
        """
        if not token:
            raise UnauthorizedError("Authorization token is required.")

        payload = self.jwt_manager.verify_access_token(token)
        if payload is None:
            raise UnauthorizedError("Invalid or expired token.")
        return payload

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    def _issue(self, user: User) -> AuthResult:
        token, _, _ = self.jwt_manager.create_access_token(user.id, user.email)
        return AuthResult(user=user, token=token, expires_in=self.jwt_manager.expires_in)
