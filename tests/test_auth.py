"""Tests for token lookup through Supabase Auth"""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from cloud_tracker.modules.auth import service as auth_service
from cloud_tracker.modules.auth.schemas import LoginRequest
from cloud_tracker.modules.auth.service import AuthService


class FakeAuth:
    def __init__(self, user=None, error=None):
        self.user = user
        self.error = error
        self.lookups = 0

    def get_user(self, jwt):
        self.lookups += 1
        if self.error:
            raise self.error
        return SimpleNamespace(user=self.user)

    def sign_in_with_password(self, credentials):
        raise Exception("Invalid login credentials")


@pytest.fixture(autouse=True)
def empty_cache():
    auth_service._AUTH_USER_CACHE.clear()
    yield
    auth_service._AUTH_USER_CACHE.clear()


def service_with(auth):
    return AuthService(SimpleNamespace(auth=auth))


def test_current_user_is_cached():
    auth = FakeAuth(user=SimpleNamespace(id="user-1", email="jb@example.com", user_metadata=None, created_at=None))
    service = service_with(auth)

    first = service.get_current_user("token")
    second = service.get_current_user("token")

    assert first == second
    assert first["id"] == "user-1"
    assert first["user_metadata"] == {}
    assert auth.lookups == 1


def test_expired_token_is_401():
    service = service_with(FakeAuth(error=Exception("JWT expired")))

    with pytest.raises(HTTPException) as exc:
        service.get_current_user("token")
    assert exc.value.status_code == 401


def test_missing_user_is_401():
    with pytest.raises(HTTPException) as exc:
        service_with(FakeAuth(user=None)).get_current_user("token")
    assert exc.value.detail == "Invalid or expired token"


def test_bad_password_is_401():
    with pytest.raises(HTTPException) as exc:
        service_with(FakeAuth()).login(LoginRequest(email="jb@example.com", password="wrong"))
    assert exc.value.status_code == 401
