"""
Password hashing utilities using bcrypt.
"""

from functools import lru_cache

import bcrypt

# Number of rounds for bcrypt hashing (12 is secure default)
BCRYPT_ROUNDS = 12


class PasswordHasher:
    """Password hashing service."""

    @staticmethod
    def _truncate_password(password: str) -> bytes:
        """
        Encode and cut the password to bcrypt's 72-byte input limit.
        """
        return password.encode("utf-8")[:72]

    @staticmethod
    def hash(password: str) -> str:
        """
        Hash a password using bcrypt with a fresh random salt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        pwd_bytes = PasswordHasher._truncate_password(password)
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(pwd_bytes, salt).decode("utf-8")

    @staticmethod
    def verify(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        A malformed stored hash counts as a mismatch.
        """
        try:
            pwd_bytes = PasswordHasher._truncate_password(plain_password)
            return bcrypt.checkpw(pwd_bytes, hashed_password.encode("utf-8"))
        except ValueError:
            return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Checked when the email is unknown, so a failed login costs the same
    # either way.
    return PasswordHasher.hash("projectninjas-timing-equaliser")


# Convenience functions
def hash_password(password: str) -> str:
    """Hash a password."""
    return PasswordHasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher.verify(plain_password, hashed_password)


def burn_password_check(plain_password: str) -> None:
    """Run a throwaway bcrypt comparison for a login with an unknown email."""
    PasswordHasher.verify(plain_password, _dummy_hash())
