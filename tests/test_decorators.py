# tests/test_decorators.py
import pytest

from conftest import bearer


@pytest.mark.parametrize("headers", [
    {},
    {"Authorization": "Bearer"},
    {"Authorization": "Token abc"},
    {"Authorization": "Bearer not-a-jwt"},
])
def test_login_required_rejects_missing_or_bad_token(client, headers):
    r = client.get("/api/my-quotes", headers=headers)
    assert r.status_code == 401
    assert "error" in r.get_json()


def test_admin_required_blocks_non_admin(client, user_headers):
    r = client.get("/api/admin/quotes", headers=user_headers)
    assert r.status_code == 403
    assert r.get_json()["error"] == "Admin access required"


def test_admin_required_without_token(client):
    assert client.get("/api/admin/users").status_code == 401


def test_admin_required_allows_admin(client, admin_headers):
    assert client.get("/api/admin/users", headers=admin_headers).status_code == 200


def test_bearer_scheme_is_case_insensitive(app, client, user_normal):
    from conftest import token_for
    token = token_for(app, user_normal)
    r = client.get("/api/my-quotes", headers={"Authorization": f"bearer {token}"})
    assert r.status_code == 200
