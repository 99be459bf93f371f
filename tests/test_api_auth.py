"""Tests for signup/login, profile, settings and tenant isolation."""

from conftest import signup


# ---------------------------------------------------------------------------
# 1. Signup and login
# ---------------------------------------------------------------------------

class TestAuth:
    def test_signup_returns_token_and_user(self, client):
        resp = client.post(
            "/api/auth/signup",
            json={"email": "New@Example.com", "password": "long-enough",
                  "first_name": " Ada ", "last_name": "Lovelace"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["token_type"] == "bearer"
        assert body["user"]["email"] == "new@example.com"
        assert body["user"]["first_name"] == "Ada"
        assert body["user"]["role"] == "admin"

    def test_duplicate_email_conflicts(self, client):
        signup(client, "dup@example.com")
        resp = client.post(
            "/api/auth/signup",
            json={"email": "DUP@example.com", "password": "long-enough",
                  "first_name": "A", "last_name": "B"},
        )
        assert resp.status_code == 409

    def test_login(self, client):
        signup(client, "login@example.com")
        resp = client.post(
            "/api/auth/login", json={"email": "login@example.com", "password": "correct-horse"}
        )
        assert resp.status_code == 200
        assert resp.json()["access_token"]

    def test_login_bad_password(self, client, caplog):
        signup(client, "login@example.com")
        resp = client.post(
            "/api/auth/login", json={"email": "login@example.com", "password": "wrong"}
        )
        assert resp.status_code == 401
        assert "bad password" in caplog.text

    def test_login_unknown_user(self, client):
        resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "x"})
        assert resp.status_code == 401

    def test_protected_routes_need_token(self, client):
        assert client.get("/api/trades").status_code in (401, 403)
        resp = client.get("/api/trades", headers={"Authorization": "Bearer not.a.token"})
        assert resp.status_code == 401

    def test_health_is_public(self, client):
        assert client.get("/api/system/health").json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# 2. Profile and settings
# ---------------------------------------------------------------------------

class TestAccount:
    def test_profile_round_trip(self, client, auth_headers):
        assert client.get("/api/auth/profile", headers=auth_headers).json()["first_name"] == "Sam"
        resp = client.put("/api/auth/profile", json={"last_name": "Smith"}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["last_name"] == "Smith"

    def test_settings_defaults_and_update(self, client, auth_headers):
        prefs = client.get("/api/auth/settings", headers=auth_headers).json()
        assert prefs["currency"] == "USD"
        assert prefs["theme"] == "system"

        resp = client.put(
            "/api/auth/settings",
            json={"currency": "eur", "theme": "dark", "compact_mode": True},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["currency"] == "EUR"
        assert resp.json()["theme"] == "dark"
        assert resp.json()["compact_mode"] is True

    def test_settings_rejects_unknown_theme(self, client, auth_headers):
        resp = client.put("/api/auth/settings", json={"theme": "neon"}, headers=auth_headers)
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# 3. Tenant isolation
# ---------------------------------------------------------------------------

def test_other_organization_cannot_see_rows(client, auth_headers, coin):
    other = signup(client, "other@example.com")
    assert client.get(f"/api/masters/coins/{coin['id']}", headers=other).status_code == 404
    assert client.get("/api/masters/coins", headers=other).json()["items"] == []
    resp = client.post(
        "/api/trades",
        json={"coin_id": coin["id"], "trade_date": "2024-01-01", "trade_time": "09:00:00",
              "avg_entry": 100, "stop_loss": 95, "quantity": 1},
        headers=other,
    )
    assert resp.status_code == 404
