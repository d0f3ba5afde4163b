"""Unit tests for password hashing."""

from projectninjas.kernel.identity.password import (
    PasswordHasher,
    burn_password_check,
    hash_password,
    verify_password,
)


class TestPasswordHasher:
    """Tests for PasswordHasher."""

    def test_hash_creates_different_hashes(self):
        """Same password should create different hashes (due to salt)."""
        password = "TestPassword123"
        hash1 = PasswordHasher.hash(password)
        hash2 = PasswordHasher.hash(password)

        assert hash1 != hash2
        assert hash1.startswith("$2b$")  # bcrypt prefix

    def test_verify_correct_password(self):
        password = "TestPassword123"
        hashed = PasswordHasher.hash(password)

        assert PasswordHasher.verify(password, hashed) is True

    def test_verify_wrong_password(self):
        hashed = PasswordHasher.hash("TestPassword123")

        assert PasswordHasher.verify("WrongPassword", hashed) is False

    def test_malformed_hash_is_a_mismatch(self):
        assert PasswordHasher.verify("TestPassword123", "not-a-bcrypt-hash") is False

    def test_only_first_72_bytes_count(self):
        """bcrypt ignores input past 72 bytes; long passwords must not error."""
        base = "a" * 72
        hashed = hash_password(base + "tail-one")

        assert verify_password(base + "tail-two", hashed) is True

    def test_convenience_functions(self):
        password = "TestPassword123"
        hashed = hash_password(password)

        assert verify_password(password, hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_burn_password_check_returns_nothing(self):
        assert burn_password_check("whatever") is None
