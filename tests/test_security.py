"""
Unit tests for the security helpers.
Password hashing, token issuing and token verification.
"""
from datetime import timedelta

import jwt
import pytest

from utils.exceptions import InvalidTokenError
from utils.security import (
    create_access_token,
    create_refresh_token,
    create_tokens,
    decode_access_token,
    hash_password,
    verify_password,
    verify_refresh_token,
)

IDENTITY = {"id": 5, "email": "five@example.com"}


class TestPasswordHashing:

    def test_hash_is_salted(self):
        first = hash_password("pw1234")
        second = hash_password("pw1234")
        assert first != second
        assert first.startswith("$argon2")

    def test_verify_password_success(self):
        assert verify_password("pw1234", hash_password("pw1234")) is True

    def test_verify_password_mismatch(self):
        assert verify_password("wrong", hash_password("pw1234")) is False

    def test_verify_password_bad_inputs(self):
        assert verify_password("pw1234", "not-a-hash") is False
        assert verify_password("pw1234", "") is False
        assert verify_password("", hash_password("pw1234")) is False
        assert verify_password("pw1234", None) is False


class TestTokens:

    def test_access_round_trip(self, app):
        with app.app_context():
            token = create_access_token(IDENTITY)
            assert decode_access_token(token) == IDENTITY

    def test_refresh_round_trip(self, app):
        with app.app_context():
            token = create_refresh_token(IDENTITY)
            assert verify_refresh_token(token) == IDENTITY

    def test_access_token_is_not_a_refresh_token(self, app):
        with app.app_context():
            assert verify_refresh_token(create_access_token(IDENTITY)) is None

    def test_refresh_token_is_not_an_access_token(self, app):
        with app.app_context():
            with pytest.raises(InvalidTokenError):
                decode_access_token(create_refresh_token(IDENTITY))

    def test_distinct_secrets(self, app):
        with app.app_context():
            token = create_access_token(IDENTITY)
            payload = jwt.decode(token, app.config["JWT_SECRET"], algorithms=["HS256"])
            assert payload["type"] == "access"
            with pytest.raises(jwt.InvalidSignatureError):
                jwt.decode(token, app.config["JWT_REFRESH_SECRET"], algorithms=["HS256"])

    def test_forged_type_claim_with_access_secret(self, app):
        # a "refresh" payload signed with the access secret must still be rejected
        with app.app_context():
            forged = jwt.encode(
                {"id": 5, "email": "five@example.com", "type": "refresh", "iat": 0, "exp": 9999999999},
                app.config["JWT_SECRET"],
                algorithm="HS256",
            )
            assert verify_refresh_token(forged) is None

    def test_create_tokens_returns_both_classes(self, app):
        with app.app_context():
            tokens = create_tokens(IDENTITY)
            assert decode_access_token(tokens["accessToken"]) == IDENTITY
            assert verify_refresh_token(tokens["refreshToken"]) == IDENTITY

    def test_tokens_are_unique(self, app):
        with app.app_context():
            assert create_access_token(IDENTITY) != create_access_token(IDENTITY)

    def test_access_lifetime_from_config(self, app):
        with app.app_context():
            payload = jwt.decode(
                create_access_token(IDENTITY), app.config["JWT_SECRET"], algorithms=["HS256"]
            )
            assert payload["exp"] - payload["iat"] == 15 * 60

    def test_expired_access_token(self, app):
        app.config["ACCESS_TOKEN_EXPIRES"] = timedelta(seconds=-10)
        with app.app_context():
            token = create_access_token(IDENTITY)
            with pytest.raises(InvalidTokenError, match="expired"):
                decode_access_token(token)

    def test_expired_refresh_token(self, app):
        app.config["REFRESH_TOKEN_EXPIRES"] = timedelta(seconds=-10)
        with app.app_context():
            assert verify_refresh_token(create_refresh_token(IDENTITY)) is None

    def test_garbage_tokens(self, app):
        with app.app_context():
            with pytest.raises(InvalidTokenError):
                decode_access_token("not.a.jwt")
            assert verify_refresh_token("garbage") is None

    def test_tampered_token(self, app):
        with app.app_context():
            head, _, sig = create_access_token(IDENTITY).split(".")
            _, other_body, _ = create_access_token({"id": 6, "email": "six@example.com"}).split(".")
            tampered = ".".join([head, other_body, sig])
            with pytest.raises(InvalidTokenError):
                decode_access_token(tampered)
