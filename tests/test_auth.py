# =============================================================================
# tests/test_auth.py - Admin Authentication Endpoint Tests
# =============================================================================
# Login flow (lockout, generic failures, timing floor), the bearer-token
# guard, and profile/password management, all through TestClient.
# =============================================================================

import time
from datetime import datetime, timedelta, timezone

import pytest

from app.auth.login_attempts import get_login_attempt_store
from app.auth.passwords import DUMMY_HASH, PasswordHasher
from app.auth.tokens import issue_token, verify_token
from app.config import settings
from app.rate_limit import login_rate_limit

from tests.conftest import ADMIN_ID, FakeClock

ADMIN_EMAIL = "admin@interplast.pe"
ADMIN_PASSWORD = "Admin123!"
ADMIN_HASH = PasswordHasher.hash(ADMIN_PASSWORD, rounds=4)

ADMIN_ROW = {
    "id": ADMIN_ID,
    "email": ADMIN_EMAIL,
    "name": "Administrador",
    "password": ADMIN_HASH,
}


@pytest.fixture
def no_ip_limit(monkeypatch):
    """Isolate the per-account lockout from the per-IP login limit."""
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", False)


# =============================================================================
# Login
# =============================================================================

class TestLogin:

    def test_success_returns_token_and_profile(self, client, fake_db):
        fake_db.respond("admins", data=dict(ADMIN_ROW))

        resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert resp.status_code == 200
        body = resp.json()
        assert body["admin"] == {"id": ADMIN_ID, "email": ADMIN_EMAIL, "name": "Administrador"}
        assert verify_token(body["token"]).sub == ADMIN_ID
        assert "password" not in resp.text

    def test_email_is_normalized_before_lookup(self, client, fake_db):
        fake_db.respond("admins", data=dict(ADMIN_ROW))

        client.post("/api/admin/login", json={"email": "  ADMIN@Interplast.pe ", "password": ADMIN_PASSWORD})

        [query] = fake_db.queries_for("admins")
        assert query.called("eq") == [(("email", ADMIN_EMAIL), {})]

    @pytest.mark.parametrize("body", [
        {},
        {"email": ADMIN_EMAIL},
        {"password": "x"},
        {"email": "", "password": ""},
    ])
    def test_missing_credentials(self, client, fake_db, body):
        resp = client.post("/api/admin/login", json=body)
        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_CREDENTIALS"
        assert fake_db.queries == []

    def test_malformed_email(self, client, fake_db):
        resp = client.post("/api/admin/login", json={"email": "nope", "password": "x"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "INVALID_EMAIL_FORMAT"
        assert fake_db.queries == []

    def test_wrong_password_and_unknown_email_look_the_same(self, client, fake_db):
        fake_db.respond("admins", data=dict(ADMIN_ROW))
        wrong_password = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "bad-pass"})

        fake_db.respond("admins", data=None)
        unknown_email = client.post("/api/admin/login", json={"email": "ghost@interplast.pe", "password": "bad-pass"})

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json() == {
            "detail": "Credenciales inválidas",
            "code": "INVALID_CREDENTIALS",
        }

    def test_unknown_email_still_runs_password_check(self, client, fake_db, monkeypatch):
        checked = []

        def fake_verify(plaintext, hashed):
            checked.append(hashed)
            return False

        monkeypatch.setattr(PasswordHasher, "verify", staticmethod(fake_verify))
        fake_db.respond("admins", data=None)

        client.post("/api/admin/login", json={"email": "ghost@interplast.pe", "password": "whatever"})

        assert checked == [DUMMY_HASH]

    def test_response_time_floor(self, client, fake_db, monkeypatch):
        monkeypatch.setattr(settings, "LOGIN_MIN_RESPONSE_MS", 200)
        fake_db.respond("admins", data=None)

        start = time.perf_counter()
        resp = client.post("/api/admin/login", json={"email": "ghost@interplast.pe", "password": "x"})
        elapsed = time.perf_counter() - start

        assert resp.status_code == 401
        assert elapsed >= 0.2

    def test_lockout_after_five_failures(self, client, fake_db, no_ip_limit):
        for _ in range(5):
            fake_db.respond("admins", data=dict(ADMIN_ROW))
            resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong-pass"})
            assert resp.status_code == 401

        queries_before = len(fake_db.queries)
        # Correct password, but the account is locked
        resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert resp.status_code == 429
        body = resp.json()
        assert body["code"] == "ACCOUNT_LOCKED"
        assert body["details"]["remaining_minutes"] == 15
        assert "15 minutos" in body["detail"]
        assert len(fake_db.queries) == queries_before

    def test_lockout_reported_ahead_of_ip_limit(self, client, fake_db):
        # Default settings: the per-IP login limit is on and also allows 5
        for _ in range(5):
            fake_db.respond("admins", data=dict(ADMIN_ROW))
            resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong-pass"})
            assert resp.status_code == 401

        resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong-pass"})

        assert resp.status_code == 429
        body = resp.json()
        assert body["code"] == "ACCOUNT_LOCKED"
        assert 1 <= body["details"]["remaining_minutes"] <= 15

    def test_login_allowed_again_after_lockout_window(self, client, fake_db, monkeypatch):
        clock = FakeClock()
        monkeypatch.setattr(get_login_attempt_store(), "_clock", clock)
        monkeypatch.setattr(login_rate_limit.limiter, "_clock", clock)

        for _ in range(5):
            fake_db.respond("admins", data=dict(ADMIN_ROW))
            client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong-pass"})

        clock.advance(14 * 60)
        resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert resp.json()["code"] == "ACCOUNT_LOCKED"
        assert resp.json()["details"]["remaining_minutes"] == 1

        clock.advance(61)
        fake_db.respond("admins", data=dict(ADMIN_ROW))
        resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert resp.status_code == 200
        assert verify_token(resp.json()["token"]).sub == ADMIN_ID

    def test_lockout_is_per_normalized_email(self, client, fake_db, no_ip_limit):
        for _ in range(5):
            fake_db.respond("admins", data=dict(ADMIN_ROW))
            client.post("/api/admin/login", json={"email": ADMIN_EMAIL.upper(), "password": "wrong-pass"})

        resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert resp.status_code == 429

    def test_success_clears_failures(self, client, fake_db, no_ip_limit):
        for _ in range(4):
            fake_db.respond("admins", data=dict(ADMIN_ROW))
            client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong-pass"})

        fake_db.respond("admins", data=dict(ADMIN_ROW))
        assert client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}).status_code == 200

        # Four more failures do not lock: the counter restarted
        for _ in range(4):
            fake_db.respond("admins", data=dict(ADMIN_ROW))
            assert client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": "wrong-pass"}).status_code == 401
        fake_db.respond("admins", data=dict(ADMIN_ROW))
        assert client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}).status_code == 200

    def test_ip_rate_limit(self, client, fake_db):
        for index in range(5):
            fake_db.respond("admins", data=None)
            client.post("/api/admin/login", json={"email": f"user{index}@interplast.pe", "password": "x"})

        resp = client.post("/api/admin/login", json={"email": "user9@interplast.pe", "password": "x"})
        assert resp.status_code == 429
        assert resp.json()["code"] == "RATE_LIMITED"
        assert "Retry-After" in resp.headers

    def test_successful_logins_do_not_count_toward_ip_limit(self, client, fake_db):
        for _ in range(6):
            fake_db.respond("admins", data=dict(ADMIN_ROW))
            resp = client.post("/api/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
            assert resp.status_code == 200


# =============================================================================
# Bearer Token Guard
# =============================================================================

class TestAdminGuard:

    def test_missing_header(self, client, fake_db):
        resp = client.get("/api/admin/stats")
        assert resp.status_code == 401
        assert resp.json()["code"] == "UNAUTHORIZED"
        assert resp.headers["WWW-Authenticate"] == "Bearer"
        assert fake_db.queries == []

    def test_non_bearer_scheme(self, client):
        resp = client.get("/api/admin/stats", headers={"Authorization": "Basic YWRtaW46YWRtaW4="})
        assert resp.status_code == 401
        assert resp.json()["code"] == "UNAUTHORIZED"

    @pytest.mark.parametrize("token", ["not-a-jwt", "abc", "a.b", "a..c", "a.b.c.d"])
    def test_malformed_token(self, client, fake_db, token):
        resp = client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json()["code"] == "UNAUTHORIZED"
        assert fake_db.queries == []

    def test_expired_token(self, client):
        token = issue_token(ADMIN_ID, now=datetime.now(timezone.utc) - timedelta(days=30))
        resp = client.get("/api/admin/stats", headers={"Authorization": f"Bearer {token}"})
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Sesión expirada", "code": "SESSION_EXPIRED"}

    def test_tampered_token(self, client, auth_headers):
        header, payload, signature = auth_headers["Authorization"].removeprefix("Bearer ").split(".")
        tampered = f"{header}.{payload}.{signature[::-1]}"
        resp = client.get("/api/admin/stats", headers={"Authorization": f"Bearer {tampered}"})
        assert resp.status_code == 401
        assert resp.json()["code"] == "INVALID_TOKEN"

    def test_valid_token(self, client, fake_db, auth_headers):
        resp = client.get("/api/admin/stats", headers=auth_headers)
        assert resp.status_code == 200


# =============================================================================
# Profile
# =============================================================================

class TestProfile:

    def test_get_profile_never_exposes_password(self, client, fake_db, auth_headers):
        fake_db.respond("admins", data=dict(ADMIN_ROW))

        resp = client.get("/api/admin/profile", headers=auth_headers)

        assert resp.status_code == 200
        assert resp.json() == {"id": ADMIN_ID, "email": ADMIN_EMAIL, "name": "Administrador"}

    def test_get_profile_missing_admin(self, client, fake_db, auth_headers):
        fake_db.respond("admins", data=None)
        resp = client.get("/api/admin/profile", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == "ADMIN_NOT_FOUND"

    def test_update_profile(self, client, fake_db, auth_headers):
        fake_db.respond("admins", data=[])
        fake_db.respond("admins", data=[{**ADMIN_ROW, "name": "Nuevo", "email": "nuevo@interplast.pe"}])

        resp = client.put(
            "/api/admin/profile",
            headers=auth_headers,
            json={"name": " <Nuevo> ", "email": "Nuevo@Interplast.pe"},
        )

        assert resp.status_code == 200
        assert resp.json() == {"id": ADMIN_ID, "email": "nuevo@interplast.pe", "name": "Nuevo"}
        update = fake_db.queries_for("admins")[1]
        assert update.called("update") == [(({"name": "Nuevo", "email": "nuevo@interplast.pe"},), {})]

    def test_update_profile_email_in_use(self, client, fake_db, auth_headers):
        fake_db.respond("admins", data=[{"id": "someone-else"}])

        resp = client.put(
            "/api/admin/profile",
            headers=auth_headers,
            json={"name": "Ana", "email": "taken@interplast.pe"},
        )

        assert resp.status_code == 400
        assert resp.json()["code"] == "EMAIL_IN_USE"
        assert len(fake_db.queries) == 1

    def test_update_profile_requires_both_fields(self, client, fake_db, auth_headers):
        resp = client.put("/api/admin/profile", headers=auth_headers, json={"name": "Ana"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_FIELDS"
        assert fake_db.queries == []


# =============================================================================
# Password Change
# =============================================================================

class TestPasswordChange:

    def _body(self, current=ADMIN_PASSWORD, new="NuevaClave2024", confirm=None):
        return {"currentPassword": current, "newPassword": new, "confirmPassword": confirm or new}

    def test_success_stores_cost_12_hash(self, client, fake_db, auth_headers):
        fake_db.respond("admins", data={"id": ADMIN_ID, "password": ADMIN_HASH})
        fake_db.respond("admins", data=[{"id": ADMIN_ID}])

        resp = client.put("/api/admin/password", headers=auth_headers, json=self._body())

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Contraseña actualizada correctamente"}
        [(update_args, _)] = fake_db.queries_for("admins")[1].called("update")
        new_hash = update_args[0]["password"]
        assert new_hash.split("$")[2] == "12"
        assert PasswordHasher.verify("NuevaClave2024", new_hash)

    def test_wrong_current_password(self, client, fake_db, auth_headers):
        fake_db.respond("admins", data={"id": ADMIN_ID, "password": ADMIN_HASH})

        resp = client.put("/api/admin/password", headers=auth_headers, json=self._body(current="nope-nope"))

        assert resp.status_code == 401
        assert resp.json()["code"] == "INCORRECT_PASSWORD"
        assert len(fake_db.queries) == 1

    def test_mismatch(self, client, fake_db, auth_headers):
        resp = client.put("/api/admin/password", headers=auth_headers, json=self._body(confirm="Different123"))
        assert resp.status_code == 400
        assert resp.json()["code"] == "PASSWORD_MISMATCH"
        assert fake_db.queries == []

    def test_too_short(self, client, fake_db, auth_headers):
        resp = client.put("/api/admin/password", headers=auth_headers, json=self._body(new="short"))
        assert resp.status_code == 400
        assert resp.json()["code"] == "WEAK_PASSWORD"

    def test_missing_fields(self, client, auth_headers):
        resp = client.put("/api/admin/password", headers=auth_headers, json={"newPassword": "NuevaClave2024"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_FIELDS"
