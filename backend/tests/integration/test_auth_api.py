"""Integration tests for authentication endpoints."""

from __future__ import annotations

from tests.helpers.http import API, bearer, login


def test_login_returns_user_and_token_pair(client, editor) -> None:
    resp = client.post(
        f"{API}/auth/login",
        json={"email": "EDITOR@agency.com", "password": "Passw0rd!"},
        headers={"User-Agent": "pytest-agent"},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == 200
    assert body["message"] == "Login successful"
    data = body["data"]
    assert data["token_type"] == "Bearer"
    assert data["expires_in"] == 3600
    assert data["user"]["email"] == "editor@agency.com"
    assert data["user"]["role"] == "EDITOR"
    assert "password_hash" not in data["user"]
    assert "token_version" not in data["user"]
    assert data["refresh_token"].startswith(f"{editor.id}.0.")


def test_bad_credentials_look_identical(client, editor) -> None:
    wrong = client.post(f"{API}/auth/login", json={"email": editor.email, "password": "nope"})
    unknown = client.post(f"{API}/auth/login", json={"email": "ghost@agency.com", "password": "nope"})

    assert wrong.status_code == unknown.status_code == 401
    a, b = wrong.get_json(), unknown.get_json()
    for key in ("status", "error", "code", "message"):
        assert a[key] == b[key]
    assert a["code"] == "invalid_credentials"


def test_login_validation_error(client) -> None:
    resp = client.post(f"{API}/auth/login", json={"email": "not-an-email"})

    assert resp.status_code == 422
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert set(body["details"]["errors"]) == {"email", "password"}
    assert body["request_id"]


def test_refresh_rotates_once(client, editor) -> None:
    rt1 = login(client, editor.email)["refresh_token"]

    first = client.post(f"{API}/auth/refresh", json={"refresh_token": rt1})
    assert first.status_code == 200
    assert first.get_json()["message"] == "Token refreshed successfully"
    assert first.get_json()["data"]["refresh_token"] != rt1

    again = client.post(f"{API}/auth/refresh", json={"refresh_token": rt1})
    assert again.status_code == 401
    assert again.get_json()["code"] == "invalid_refresh_token"


def test_refresh_with_oversized_owner_id(client, editor) -> None:
    resp = client.post(f"{API}/auth/refresh", json={"refresh_token": "99999999999999999999999.0.abc"})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_refresh_token"


def test_refresh_with_lone_surrogate(client) -> None:
    # Raw body: the test client cannot encode a lone surrogate itself
    resp = client.post(
        f"{API}/auth/refresh",
        data='{"refresh_token": "\\ud800"}',
        content_type="application/json",
    )

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_refresh_token"


def test_login_with_lone_surrogate_password(client, editor) -> None:
    resp = client.post(
        f"{API}/auth/login",
        data='{"email": "editor@agency.com", "password": "\\ud800"}',
        content_type="application/json",
    )

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_credentials"


def test_logout_all_revokes_access_and_refresh(client, editor) -> None:
    tokens = login(client, editor.email)
    headers = bearer(tokens["access_token"])

    resp = client.post(f"{API}/auth/logout-all", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Logged out from all devices successfully"

    profile = client.get(f"{API}/auth/profile", headers=headers)
    assert profile.status_code == 401
    assert profile.get_json()["code"] == "token_invalid"

    refreshed = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 401
    assert refreshed.get_json()["code"] == "refresh_token_revoked_or_expired"


def test_logout_ends_one_session(client, editor) -> None:
    tokens = login(client, editor.email)
    other = login(client, editor.email)
    headers = bearer(tokens["access_token"])

    resp = client.post(
        f"{API}/auth/logout", json={"refresh_token": tokens["refresh_token"]}, headers=headers
    )
    assert resp.status_code == 200

    gone = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert gone.status_code == 401
    kept = client.post(f"{API}/auth/refresh", json={"refresh_token": other["refresh_token"]})
    assert kept.status_code == 200


def test_profile_lists_sessions_without_hashes(client, editor) -> None:
    tokens = login(client, editor.email)
    login(client, editor.email)

    resp = client.get(f"{API}/auth/profile", headers=bearer(tokens["access_token"]))

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["email"] == editor.email
    assert len(data["sessions"]) == 2
    assert all("token_hash" not in s for s in data["sessions"])


def test_update_profile(client, editor, admin) -> None:
    headers = bearer(login(client, editor.email)["access_token"])

    resp = client.put(f"{API}/auth/profile", json={"name": "Ed Itor"}, headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["data"]["name"] == "Ed Itor"

    clash = client.put(f"{API}/auth/profile", json={"email": admin.email}, headers=headers)
    assert clash.status_code == 422
    assert clash.get_json()["details"]["errors"]["email"] == ["This email is already in use."]


def test_protected_route_without_token(client) -> None:
    resp = client.get(f"{API}/auth/profile")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "authentication_required"


def test_protected_route_with_garbage_token(client) -> None:
    resp = client.get(f"{API}/auth/profile", headers=bearer("garbage"))

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "token_invalid"

    basic = client.get(f"{API}/auth/profile", headers={"Authorization": "Basic abc"})
    assert basic.get_json()["code"] == "token_malformed"


def test_request_id_is_echoed(client) -> None:
    resp = client.get(f"{API}/auth/profile", headers={"X-Request-ID": "req-123"})

    assert resp.headers["X-Request-ID"] == "req-123"
    assert resp.get_json()["request_id"] == "req-123"


REGISTRATION = {
    "name": "Copy Writer",
    "email": "copy@agency.com",
    "password": "Passw0rdX",
    "password_confirmation": "Passw0rdX",
    "role": "VIEWER",
}


def test_admin_registers_account(client, admin_headers) -> None:
    resp = client.post(f"{API}/auth/register", json=REGISTRATION, headers=admin_headers)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "User registered successfully"
    assert body["data"]["role"] == "VIEWER"
    assert login(client, "copy@agency.com", "Passw0rdX")["user"]["email"] == "copy@agency.com"


def test_register_is_admin_only(client, editor_headers) -> None:
    anonymous = client.post(f"{API}/auth/register", json=REGISTRATION)
    editor = client.post(f"{API}/auth/register", json=REGISTRATION, headers=editor_headers)

    assert anonymous.status_code == 401
    assert editor.status_code == 403
    assert editor.get_json()["code"] == "permission_denied"
