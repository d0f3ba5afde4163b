"""Unit tests for JWT access tokens."""

import uuid
from datetime import timedelta

import pytest
from jose import jwt

from projectninjas.kernel.identity.jwt import JWTManager


class TestJWTManager:

    def test_round_trip_claims(self, jwt_manager: JWTManager):
        user_id = uuid.uuid4()
        token, expire, jti = jwt_manager.create_access_token(user_id, "a@example.com")

        payload = jwt_manager.verify_access_token(token)

        assert payload is not None
        assert payload.user_id == user_id
        assert payload.email == "a@example.com"
        assert payload.jti == jti
        assert payload.exp == expire.replace(microsecond=0)

    def test_token_carries_sub_user_id_and_type(self, jwt_manager: JWTManager):
        user_id = uuid.uuid4()
        token, _, _ = jwt_manager.create_access_token(user_id, "a@example.com")

        claims = jwt.get_unverified_claims(token)

        assert claims["sub"] == str(user_id)
        assert claims["userId"] == str(user_id)
        assert claims["type"] == "access"

    def test_default_lifetime_is_24_hours(self):
        manager = JWTManager(secret_key="x" * 32)

        assert manager.expires_in == 24 * 60 * 60

    def test_expired_token_rejected(self, jwt_manager: JWTManager):
        token, _, _ = jwt_manager.create_access_token(
            uuid.uuid4(), "a@example.com", expires_delta=timedelta(seconds=-10)
        )

        assert jwt_manager.verify_access_token(token) is None

    def test_wrong_secret_rejected(self, jwt_manager: JWTManager):
        other = JWTManager(secret_key="another-secret-key-that-is-long-enough")
        token, _, _ = other.create_access_token(uuid.uuid4(), "a@example.com")

        assert jwt_manager.verify_access_token(token) is None

    def test_wrong_token_type_rejected(self, jwt_manager: JWTManager):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "userId": str(uuid.uuid4()), "type": "refresh"},
            jwt_manager.secret_key,
            algorithm="HS256",
        )

        assert jwt_manager.verify_access_token(token) is None

    def test_garbage_rejected(self, jwt_manager: JWTManager):
        assert jwt_manager.verify_access_token("not.a.token") is None

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            JWTManager(secret_key="")
