"""Tests for bearer-token verification and role checks."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
from jose import JWTError, jwt

from autoclinic.core import auth as auth_core
from autoclinic.core.auth import create_access_token, decode_access_token
from autoclinic.core.config import settings

MISSING = {"error": "Authorization token missing or malformed."}
INVALID = {"error": "Invalid or expired token."}


class TestDecode:
    def test_claims_round_trip(self):
        token = create_access_token({"sub": "7", "role": "staff", "name": "Sam", "type": "Employee"})
        identity = decode_access_token(token)
        assert identity.id == 7
        assert identity.role == "staff"
        assert identity.name == "Sam"
        assert identity.account_type == "Employee"
        assert not identity.is_admin

    def test_missing_role_and_type_fall_back(self):
        identity = decode_access_token(create_access_token({"sub": "3"}))
        assert identity.role == "user"
        assert identity.account_type == "User"

    def test_token_without_subject(self):
        with pytest.raises(JWTError):
            decode_access_token(create_access_token({"role": "admin"}))

    def test_non_numeric_subject(self):
        with pytest.raises(JWTError):
            decode_access_token(create_access_token({"sub": "abc"}))

    def test_expiry_is_seven_days(self):
        token = create_access_token({"sub": "1"})
        claims = jwt.get_unverified_claims(token)
        remaining = claims["exp"] - datetime.now(timezone.utc).timestamp()
        assert timedelta(days=7) - timedelta(minutes=1) < timedelta(seconds=remaining) <= timedelta(days=7)


class TestGate:
    def test_no_header(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json() == MISSING

    def test_wrong_scheme(self, client):
        resp = client.get("/api/auth/me", headers={"Authorization": "Token abc"})
        assert resp.status_code == 401
        assert resp.json() == MISSING

    def test_garbage_token(self, client):
        resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401
        assert resp.json() == INVALID

    def test_foreign_signature(self, client):
        token = jwt.encode({"sub": "1", "role": "admin"}, "some-other-secret", algorithm="HS256")
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json() == INVALID

    def test_expired_token(self, client):
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        token = jwt.encode({"sub": "1", "exp": past}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json() == INVALID

    def test_valid_token(self, client, bearer):
        resp = client.get("/api/auth/me", headers=bearer(5, role="user", name="Ann"))
        assert resp.status_code == 200
        assert resp.json() == {"id": 5, "role": "user", "name": "Ann", "type": "User"}

    def test_protected_routes_need_token(self, client):
        for path in ("/api/profile", "/api/workers", "/api/shifts", "/api/customers"):
            resp = client.get(path)
            assert resp.status_code == 401, path
            assert resp.json() == MISSING

    def test_public_routes_need_no_token(self, client):
        assert client.get("/api/health").status_code == 200
        assert client.get("/").status_code == 200
        assert client.get("/api/support/whatsnew").status_code == 200


class TestAdminGuard:
    def test_staff_is_forbidden(self, client, make_employee, staff_headers):
        worker = make_employee()
        resp = client.post(f"/api/workers/{worker.id}/reset-password", headers=staff_headers)
        assert resp.status_code == 403
        assert resp.json() == {"error": "Admin only"}

    def test_admin_passes(self, client, make_employee, admin_headers):
        worker = make_employee()
        resp = client.post(f"/api/workers/{worker.id}/reset-password", headers=admin_headers)
        assert resp.status_code == 200


class TestErrorBodies:
    def test_unknown_route(self, client):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert "error" in resp.json()

    def test_validation_error_is_400(self, client, bearer):
        resp = client.post(
            "/api/shifts",
            json={"worker": "Sam", "date": "17/10/2026", "clock_in": "08:00:00 AM"},
            headers=bearer(1),
        )
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("date")


class TestInsecureSecret:
    def test_warns_on_default_secret(self, monkeypatch, caplog):
        monkeypatch.setattr(settings, "SECRET_KEY", "dev_secret_key")
        with caplog.at_level(logging.WARNING, logger="autoclinic.core.auth"):
            assert auth_core.warn_if_insecure_secret() is True
        assert "SECRET_KEY" in caplog.text

    def test_quiet_with_real_secret(self):
        assert auth_core.warn_if_insecure_secret() is False
