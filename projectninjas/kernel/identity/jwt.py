"""
JWT token management for authentication.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict

ACCESS_TOKEN_TYPE = "access"


class AccessTokenPayload(BaseModel):
    """Decoded access token claims."""

    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    email: str
    exp: datetime
    iat: datetime
    jti: str


class JWTManager:
    """
    JWT token creation and verification.

    The secret comes from configuration; there is no built-in default.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_token_expire_minutes: int = 1440,
    ):
        if not secret_key:
            raise ValueError("A JWT secret key is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_token_expire_minutes = access_token_expire_minutes

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return self.access_token_expire_minutes * 60

    def create_access_token(
        self,
        user_id: uuid.UUID,
        email: str,
        expires_delta: Optional[timedelta] = None,
    ) -> tuple[str, datetime, str]:
        """
        Create a new access token.

        Args:
            user_id: User's unique identifier
            email: User's email
            expires_delta: Optional custom expiration time

        Returns:
            Tuple of (token, expiration_datetime, token_id)
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))
        jti = str(uuid.uuid4())

        payload = {
            "sub": str(user_id),
            "userId": str(user_id),
            "email": email,
            "exp": expire,
            "iat": now,
            "jti": jti,
            "type": ACCESS_TOKEN_TYPE,
        }

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        return token, expire, jti

    def verify_access_token(self, token: str) -> Optional[AccessTokenPayload]:
        """
        Verify and decode an access token.

        Returns:
            AccessTokenPayload if valid, None for a bad signature, an expired
            token, the wrong token type or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
            )
        except JWTError:
            return None

        if payload.get("type") != ACCESS_TOKEN_TYPE:
            return None

        try:
            return AccessTokenPayload(
                user_id=uuid.UUID(payload["userId"]),
                email=payload["email"],
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                jti=payload["jti"],
            )
        except (KeyError, TypeError, ValueError):
            return None
