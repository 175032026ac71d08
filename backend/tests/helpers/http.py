"""HTTP helper utilities for tests."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD

API = "/api/v1"


def bearer(access_token: str) -> dict[str, str]:
    """Return an ``Authorization`` header for ``access_token``."""
    return {"Authorization": f"Bearer {access_token}"}


def login(client, email: str, password: str = DEFAULT_PASSWORD) -> dict:
    """Log in through the API and return the ``data`` payload.

    Raises
    ------
    AssertionError
        If the login call does not succeed.
    """
    resp = client.post(f"{API}/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["data"]
