"""
Identity Core - Authentication and user management.
"""

from projectninjas.kernel.identity.password import PasswordHasher, verify_password, hash_password
from projectninjas.kernel.identity.jwt import JWTManager, AccessTokenPayload
from projectninjas.kernel.identity.identity_service import AuthResult, IdentityService

__all__ = [
    "PasswordHasher",
    "verify_password",
    "hash_password",
    "JWTManager",
    "AccessTokenPayload",
    "AuthResult",
    "IdentityService",
]
