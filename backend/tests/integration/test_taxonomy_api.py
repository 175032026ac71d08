"""Integration tests for category and tag administration."""

from __future__ import annotations

from tests.helpers.http import API, bearer, login


def test_viewer_cannot_manage_taxonomy(client, viewer) -> None:
    headers = bearer(login(client, viewer.email)["access_token"])

    for path in ("/categories", "/tags"):
        resp = client.get(f"{API}{path}", headers=headers)
        assert resp.status_code == 403
        assert resp.get_json()["details"] == {
            "required_roles": ["ADMIN", "EDITOR"],
            "your_role": "VIEWER",
        }

    assert client.get(f"{API}/categories").status_code == 401


def test_category_lifecycle(client, editor_headers) -> None:
    created = client.post(
        f"{API}/categories",
        json={"name": "Product Updates", "type": "article", "description": "Release notes"},
        headers=editor_headers,
    )
    assert created.status_code == 201
    body = created.get_json()
    assert body["message"] == "Category created successfully"
    category = body["data"]
    assert category["slug"] == "product-updates"
    assert category["type"] == "article"

    cid = category["id"]
    fetched = client.get(f"{API}/categories/{cid}", headers=editor_headers)
    assert fetched.get_json()["message"] == "Category retrieved successfully"

    updated = client.put(
        f"{API}/categories/{cid}", json={"name": "Changelog"}, headers=editor_headers
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["slug"] == "changelog"

    toggled = client.patch(f"{API}/categories/{cid}/status", headers=editor_headers)
    assert toggled.get_json()["data"]["is_active"] is False

    deleted = client.delete(f"{API}/categories/{cid}", headers=editor_headers)
    assert deleted.get_json()["message"] == "Category deleted successfully"
    missing = client.get(f"{API}/categories/{cid}", headers=editor_headers)
    assert missing.status_code == 404
    assert missing.get_json()["code"] == "category_not_found"


def test_duplicate_category_slug_is_validation_error(client, admin_headers) -> None:
    payload = {"name": "Tutorials", "type": "video"}
    assert client.post(f"{API}/categories", json=payload, headers=admin_headers).status_code == 201

    again = client.post(f"{API}/categories", json=payload, headers=admin_headers)
    assert again.status_code == 422
    body = again.get_json()
    assert body["code"] == "validation_error"
    assert body["details"]["errors"] == {"slug": ["This slug is already in use."]}


def test_category_filters_reorder_and_statistics(client, editor_headers) -> None:
    ids = []
    for name, kind in (("First", "article"), ("Second", "video"), ("Third", "article")):
        resp = client.post(
            f"{API}/categories",
            json={"name": name, "type": kind, "order": len(ids)},
            headers=editor_headers,
        )
        ids.append(resp.get_json()["data"]["id"])

    videos = client.get(f"{API}/categories?type=video", headers=editor_headers)
    assert [c["name"] for c in videos.get_json()["data"]] == ["Second"]

    reordered = client.put(
        f"{API}/categories/reorder",
        json={"categories": [{"id": ids[0], "order": 2}, {"id": ids[2], "order": 0}]},
        headers=editor_headers,
    )
    assert reordered.get_json()["message"] == "Categories reordered successfully"
    listing = client.get(f"{API}/categories", headers=editor_headers).get_json()["data"]
    assert [c["name"] for c in listing] == ["Third", "Second", "First"]

    unknown = client.put(
        f"{API}/categories/reorder",
        json={"categories": [{"id": 999999, "order": 0}]},
        headers=editor_headers,
    )
    assert unknown.status_code == 422

    stats = client.get(f"{API}/categories/statistics", headers=editor_headers).get_json()["data"]
    assert stats["total"] == 3
    assert stats["by_type"] == {"article": 2, "video": 1}


def test_tag_endpoints(client, editor_headers) -> None:
    created = client.post(
        f"{API}/tags", json={"name": "Flask", "color": "#10B981"}, headers=editor_headers
    )
    assert created.status_code == 201
    flask_tag = created.get_json()["data"]
    assert flask_tag["slug"] == "flask"

    resolved = client.post(
        f"{API}/tags/find-or-create", json={"tags": ["flask", "SQLAlchemy"]}, headers=editor_headers
    )
    assert resolved.status_code == 200
    tags = resolved.get_json()["data"]
    assert [t["slug"] for t in tags] == ["flask", "sqlalchemy"]
    assert tags[0]["id"] == flask_tag["id"]

    bad = client.post(f"{API}/tags/bulk-delete", json={"ids": [999999]}, headers=editor_headers)
    assert bad.status_code == 422

    removed = client.post(
        f"{API}/tags/bulk-delete", json={"ids": [t["id"] for t in tags]}, headers=editor_headers
    )
    assert removed.get_json()["data"] == {"deleted_count": 2}
    assert removed.get_json()["message"] == "2 tags deleted successfully"

    stats = client.get(f"{API}/tags/statistics", headers=editor_headers).get_json()["data"]
    assert stats == {"total": 0, "recently_created": 0, "most_used": []}


def test_tag_validation(client, editor_headers) -> None:
    resp = client.post(f"{API}/tags", json={"name": "x", "color": "red"}, headers=editor_headers)

    assert resp.status_code == 422
    assert "color" in resp.get_json()["details"]["errors"]
