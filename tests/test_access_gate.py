from datetime import datetime, timedelta, timezone

import jwt
import pytest
from django.conf import settings
from rest_framework.test import APIClient

from accounts.gate import ADMIN, PUBLIC, STAFF, access_for
from accounts.tokens import decode_token, issue_token

pytestmark = pytest.mark.django_db

PROTECTED = "/api/messages/"


def _bearer(token):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
    return client


def _token(payload, secret=None):
    conf = settings.PORTFOLIO_AUTH
    return jwt.encode(payload, secret or conf["JWT_SECRET"], algorithm=conf["JWT_ALGORITHM"])


def test_missing_token_is_401(api_client):
    resp = api_client.get(PROTECTED)
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert body["reason"] == "not_authenticated"


def test_wrong_role_is_403(user_client):
    resp = user_client.get(PROTECTED)
    assert resp.status_code == 403
    assert "not authorized" in resp.json()["message"]


def test_admin_passes(admin_client):
    assert admin_client.get(PROTECTED).status_code == 200


def test_expired_token_reason(admin_user):
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = _token({"id": admin_user.pk, "role": "admin", "iat": past, "exp": past + timedelta(hours=1)})

    resp = _bearer(token).get(PROTECTED)
    assert resp.status_code == 401
    assert resp.json()["reason"] == "token_expired"


def test_bad_signature_is_invalid(admin_user):
    token = _token(
        {"id": admin_user.pk, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        secret="some-other-secret-that-is-long-enough-for-hs256",
    )
    resp = _bearer(token).get(PROTECTED)
    assert resp.status_code == 401
    assert resp.json()["reason"] == "token_invalid"


def test_garbage_token_is_invalid():
    resp = _bearer("not.a.token").get(PROTECTED)
    assert resp.status_code == 401
    assert resp.json()["reason"] == "token_invalid"


def test_deleted_user_looks_like_invalid_token(admin_user):
    token = issue_token(admin_user)
    admin_user.delete()

    resp = _bearer(token).get(PROTECTED)
    assert resp.status_code == 401
    assert resp.json()["reason"] == "token_invalid"
    assert resp.json()["message"] == "Invalid token. Please login again."


def test_inactive_user_is_rejected(admin_user):
    token = issue_token(admin_user)
    admin_user.is_active = False
    admin_user.save()

    assert _bearer(token).get(PROTECTED).status_code == 401


def test_public_route_ignores_bad_token():
    resp = _bearer("not.a.token").get("/api/projects/")
    assert resp.status_code == 200


def test_optional_route_attaches_principal_when_valid(admin_user):
    assert _bearer("not.a.token").get("/api/health/").json()["authenticated"] is False
    assert _bearer(issue_token(admin_user)).get("/api/health/").json()["authenticated"] is True


def test_issued_token_carries_id_and_role(admin_user):
    payload = decode_token(issue_token(admin_user))
    assert payload["id"] == admin_user.pk
    assert payload["role"] == "admin"


class _View:
    def __init__(self, access, action=None):
        self.access = access
        self.action = action


class _Request:
    method = "GET"


def test_access_for_resolves_action_then_fallback():
    view = _View({"list": PUBLIC, "*": STAFF}, action="list")
    assert access_for(view, _Request()) is PUBLIC
    view.action = "destroy"
    assert access_for(view, _Request()) is STAFF


def test_access_for_defaults_to_admin():
    assert access_for(object(), _Request()) == ADMIN
    assert access_for(_View({"post": PUBLIC}), _Request()) == ADMIN
