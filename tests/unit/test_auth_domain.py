from datetime import datetime, timedelta, timezone

import jwt
import pytest

from ticket_assistant.auth.application.services import parse_role
from ticket_assistant.auth.domain import User, normalize_skills
from ticket_assistant.auth.infrastructure import JWTTokenCodec, PasslibPasswordHasher
from ticket_assistant.config import UserRole
from ticket_assistant.core import AuthenticationException, ValidationException

SECRET = "unit-test-secret"


def test_normalize_skills_trims_and_dedupes():
    assert normalize_skills([" React", "react", "", "Node.js ", None, "CSS"]) == ["React", "Node.js", "CSS"]
    assert normalize_skills(None) == []


def test_staff_roles():
    assert User(id="1", email="a@x.io", role=UserRole.MODERATOR).is_staff
    assert User(id="1", email="a@x.io", role=UserRole.ADMIN).is_staff
    assert not hasattr(User, "is_admin")
    assert not User(id="1", email="a@x.io", role=UserRole.USER).is_staff


def test_parse_role_rejects_unknown():
    assert parse_role("moderator") == UserRole.MODERATOR
    with pytest.raises(ValidationException):
        parse_role("superuser")


def test_token_carries_identity_and_role():
    codec = JWTTokenCodec(secret=SECRET, algorithm="HS256", expire_minutes=5)
    user = User(id="42", email="dev@x.io", role=UserRole.MODERATOR, skills=["Go"])

    claims = codec.decode(codec.encode(user))

    assert claims["sub"] == "42"
    assert claims["email"] == "dev@x.io"
    assert claims["role"] == "moderator"
    assert claims["skills"] == ["Go"]
    assert claims["exp"] > claims["iat"]


def test_token_signed_with_other_secret_is_rejected():
    user = User(id="42", email="dev@x.io", role=UserRole.USER)
    token = JWTTokenCodec(secret="other-secret").encode(user)

    with pytest.raises(AuthenticationException):
        JWTTokenCodec(secret=SECRET).decode(token)


def test_expired_token_is_rejected():
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = jwt.encode({"sub": "42", "iat": past, "exp": past + timedelta(minutes=1)}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationException, match="expired"):
        JWTTokenCodec(secret=SECRET).decode(token)


def test_password_hashing():
    hasher = PasslibPasswordHasher()
    password_hash = hasher.hash("secret123")

    assert password_hash.startswith("$argon2")
    assert hasher.verify("secret123", password_hash)
    assert not hasher.verify("wrong", password_hash)
    assert not hasher.verify("secret123", "not-a-hash")
