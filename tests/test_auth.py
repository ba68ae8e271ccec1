from datetime import UTC, datetime, timedelta

import jwt
import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from src.briefdesk.api.main import app
from src.briefdesk.security import auth
from src.briefdesk.security.rbac import Permission, _is_authorized
from .utils import DESIGNER_EMAIL, bearer, designer_headers, viewer_headers


client = TestClient(app)


def _raw_token(claims, secret=None):
    cfg = auth.JwtConfig.from_env()
    return jwt.encode(claims, secret or cfg.secret, algorithm=cfg.algorithm)


def test_me_echoes_identity_and_permissions():
    r = client.get("/auth/me", headers=designer_headers(client))
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["email"] == DESIGNER_EMAIL
    assert body["user"]["roles"] == ["designer"]
    assert "project:deliver" in body["permissions"]
    assert "admin:*" not in body["permissions"]

    viewer = client.get("/auth/me", headers=viewer_headers(client)).json()
    assert viewer["permissions"] == ["project:read"]


def test_missing_or_garbage_token_is_401():
    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.headers.get("WWW-Authenticate") == "Bearer"
    assert client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_token_signed_with_other_secret_is_rejected():
    now = datetime.now(UTC)
    token = _raw_token(
        {"sub": DESIGNER_EMAIL, "roles": ["designer"], "exp": now + timedelta(minutes=5)},
        secret="someone-elses-secret-that-is-long-enough",
    )
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"


def test_expired_token_rejected():
    past = datetime.now(UTC) - timedelta(hours=2)
    token = _raw_token({"sub": DESIGNER_EMAIL, "roles": ["designer"], "iat": past, "exp": past + timedelta(minutes=1)})
    with pytest.raises(HTTPException) as excinfo:
        auth.decode_token(token)
    assert excinfo.value.status_code == 401
    assert excinfo.value.detail == "Token expired"


def test_token_without_exp_is_rejected():
    token = _raw_token({"sub": DESIGNER_EMAIL, "roles": ["designer"]})
    with pytest.raises(HTTPException) as excinfo:
        auth.decode_token(token)
    assert excinfo.value.status_code == 401


def test_unknown_roles_are_dropped():
    assert auth.normalize_roles(["Designer", "superuser", "viewer"]) == ["designer", "viewer"]
    assert auth.normalize_roles("admin viewer") == ["admin", "viewer"]
    assert auth.normalize_roles(None) == []

    r = client.get("/auth/me", headers=bearer("intruder@example.com", ["superuser"]))
    assert r.status_code == 403


def test_audience_is_checked_when_configured(monkeypatch):
    monkeypatch.setenv("JWT_AUDIENCE", "briefdesk-api")
    good = bearer(DESIGNER_EMAIL, ["designer"])
    assert client.get("/auth/me", headers=good).status_code == 200

    monkeypatch.setenv("JWT_AUDIENCE", "another-api")
    assert client.get("/auth/me", headers=good).status_code == 401


def test_public_mode_allows_guest(monkeypatch):
    monkeypatch.setenv("BRIEFDESK_PUBLIC_MODE", "1")
    r = client.get("/auth/me")
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "guest@example.com"
    # a bad token is still an error
    assert client.get("/auth/me", headers={"Authorization": "Bearer nope"}).status_code == 401


def test_role_permissions():
    designer = auth.User(email=DESIGNER_EMAIL, name="D", roles=["designer"])
    viewer = auth.User(email="v@example.com", name="V", roles=["viewer"])
    admin = auth.User(email="a@example.com", name="A", roles=["admin"])
    assert _is_authorized(designer, Permission.PROJECT_DELIVER)
    assert not _is_authorized(designer, Permission.ADMIN)
    assert _is_authorized(viewer, Permission.PROJECT_READ)
    assert not _is_authorized(viewer, Permission.REVISION_WRITE)
    assert _is_authorized(admin, Permission.DELIVERABLE_WRITE)
