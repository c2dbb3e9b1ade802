from datetime import timedelta

import pytest
from jose import jwt, JWTError

from core.config import settings
from services.token_service import TokenService


def test_access_token_creation():
    test_token = TokenService.create_access_token(email="user@example.com", user_id=1, role="customer")
    assert test_token

    payload = jwt.decode(test_token, key=settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == "user@example.com"
    assert payload["id"] == 1
    assert payload["role"] == "customer"
    assert payload["type"] == "access"
    assert payload["exp"]


def test_refresh_token_creation():
    token, jti, expires_at = TokenService.create_refresh_token(email="user@example.com", user_id=1, role="customer")

    payload = jwt.decode(token, key=settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["jti"] == jti
    assert payload["type"] == "refresh"
    assert payload["exp"] == int(expires_at.timestamp())


def test_expired_access_token_rejected():
    access_token = TokenService.create_access_token(
        email="user@example.com",
        user_id=1,
        role="customer",
        expires_delta=timedelta(seconds=-1)
    )

    with pytest.raises(JWTError):
        jwt.decode(access_token, key=settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
