"""Pytest configuration and fixtures."""

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from accounts.tokens import issue_token
from core.throttling import get_counter_store


@pytest.fixture(autouse=True)
def isolated_settings(settings, tmp_path):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.MEDIA_ROOT = str(tmp_path / "uploads")
    settings.CONTACT_RECEIVER_EMAIL = ""
    return settings


@pytest.fixture(autouse=True)
def reset_rate_limits():
    get_counter_store().clear()
    yield
    get_counter_store().clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role="user", password="secret123", **extra):
        counter["n"] += 1
        email = extra.pop("email", f"{role}{counter['n']}@example.com")
        return get_user_model().objects.create_user(
            username=email, email=email, password=password,
            name=extra.pop("name", f"{role.title()} {counter['n']}"), role=role, **extra,
        )

    return _make


@pytest.fixture
def api_client():
    return APIClient()


def _client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
    return client


@pytest.fixture
def admin_user(make_user):
    return make_user(role="admin")


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def user_client(make_user):
    return _client_for(make_user(role="user"))
