from auth import repository, security
from conftest import API, bearer, make_user
from news.repository import NEWS


def test_protected_route_without_token_is_401(client):
    response = client.get(f"{API}/me")
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_malformed_token_is_401(client):
    response = client.get(f"{API}/me", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


def test_token_for_deleted_user_is_401(client, store):
    headers = {"Authorization": f"Bearer {security.build_access_token(user_id=999, role='ADMIN')}"}
    response = client.get(f"{API}/me", headers=headers)
    assert response.status_code == 401
    assert "no longer exists" in response.json()["message"]


def test_inactive_user_is_401(client, store):
    user = make_user(store, is_active=False)
    response = client.get(f"{API}/me", headers=bearer(user))
    assert response.status_code == 401


def test_cookie_token_is_accepted(client, store):
    user = make_user(store)
    token = security.build_access_token(user_id=user["id"], role=user["role"])
    response = client.get(f"{API}/me", headers={"Cookie": f"{security.cookie_name()}={token}"})
    assert response.status_code == 200
    assert response.json()["data"]["email"] == user["email"]


def test_me_never_exposes_secrets(client, store):
    user = make_user(store, verification_code="123456")
    body = client.get(f"{API}/me", headers=bearer(user)).json()["data"]
    assert "passwordHash" not in body
    assert "verificationCode" not in body
    assert "resetPasswordTokenHash" not in body


def test_editor_cannot_manage_users(client, editor_headers):
    response = client.get(f"{API}/user", headers=editor_headers)
    assert response.status_code == 403


def test_editor_cannot_read_newsletter_stats(client, editor_headers):
    response = client.get(f"{API}/newsletter/stats", headers=editor_headers)
    assert response.status_code == 403


def test_editor_can_write_content(client, editor_headers):
    response = client.post(
        f"{API}/events",
        json={"title": "Opening", "description": "Doors open", "date": "2030-05-01T18:00:00Z"},
        headers=editor_headers,
    )
    assert response.status_code == 201


def test_admin_passes_editor_gate(client, admin_headers):
    response = client.get(f"{API}/news", headers=admin_headers)
    assert response.status_code == 200


def test_admin_list_requires_login(client):
    assert client.get(f"{API}/news").status_code == 401
    assert client.get(f"{API}/blogs").status_code == 401


def test_public_list_is_anonymous(client):
    response = client.get(f"{API}/news/public")
    assert response.status_code == 200
    assert response.json()["data"]["news"] == []


def test_invalid_token_on_optional_route_means_anonymous(client, store):
    row = store.add(NEWS, title="Draft", content="x", category="c", is_active=False)
    response = client.get(f"{API}/news/{row['id']}", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 404


def test_role_constants():
    assert repository.ROLES == ("EDITOR", "ADMIN")
