from auth import repository, security
from conftest import API, make_user


def test_admin_creates_verified_user(client, store, admin_headers):
    response = client.post(
        f"{API}/user",
        json={"email": "Editor@Example.com", "password": "supersecret", "name": "Ed"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "editor@example.com"
    assert data["role"] == "EDITOR"
    assert data["isVerified"] is True
    assert "passwordHash" not in data


def test_create_user_validation(client, store, admin_headers):
    bad_email = client.post(f"{API}/user", json={"email": "x", "password": "supersecret"}, headers=admin_headers)
    assert bad_email.status_code == 400

    bad_role = client.post(
        f"{API}/user",
        json={"email": "r@example.com", "password": "supersecret", "role": "OWNER"},
        headers=admin_headers,
    )
    assert bad_role.status_code == 400
    assert bad_role.json()["message"] == "Role must be either EDITOR or ADMIN"

    make_user(store, email="dup@example.com")
    duplicate = client.post(
        f"{API}/user", json={"email": "dup@example.com", "password": "supersecret"}, headers=admin_headers
    )
    assert duplicate.status_code == 400


def test_list_users_filters(client, store, admin_headers):
    make_user(store, email="anna@example.com", name="Anna")
    make_user(store, email="bo@example.com", name="Bo", is_active=False)

    by_search = client.get(f"{API}/user", params={"search": "anna"}, headers=admin_headers).json()["data"]
    assert [u["email"] for u in by_search["users"]] == ["anna@example.com"]

    inactive = client.get(f"{API}/user", params={"isActive": "false"}, headers=admin_headers).json()["data"]
    assert [u["email"] for u in inactive["users"]] == ["bo@example.com"]

    admins = client.get(f"{API}/user", params={"role": "ADMIN"}, headers=admin_headers).json()["data"]
    assert all(u["role"] == "ADMIN" for u in admins["users"])
    assert all("passwordHash" not in u for u in admins["users"])


def test_get_user_by_id(client, store, admin_headers):
    user = make_user(store, email="find@example.com")
    assert client.get(f"{API}/user/{user['id']}", headers=admin_headers).json()["data"]["email"] == "find@example.com"
    missing = client.get(f"{API}/user/9999", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "User not found"


def test_update_user_checks_email_uniqueness_and_rehashes(client, store, admin_headers):
    make_user(store, email="first@example.com")
    user = make_user(store, email="second@example.com")

    taken = client.put(f"{API}/user/{user['id']}", json={"email": "first@example.com"}, headers=admin_headers)
    assert taken.status_code == 400
    assert taken.json()["message"] == "Email is already taken by another user"

    same = client.put(f"{API}/user/{user['id']}", json={"email": "second@example.com"}, headers=admin_headers)
    assert same.status_code == 200

    response = client.put(
        f"{API}/user/{user['id']}",
        json={"password": "brand-new-pass", "role": "admin", "isVerified": False},
        headers=admin_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "ADMIN"
    assert data["isVerified"] is False

    stored = store.table(repository.USERS.table)[user["id"]]
    assert security.verify_password("brand-new-pass", stored["password_hash"])


def test_password_endpoint(client, store, admin_headers):
    user = make_user(store)
    response = client.patch(f"{API}/user/{user['id']}/password", json={"password": "another-pass"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"] == {"id": user["id"]}
    assert security.verify_password("another-pass", store.table("users")[user["id"]]["password_hash"])

    assert client.patch(f"{API}/user/9999/password", json={"password": "another-pass"}, headers=admin_headers).status_code == 404


def test_toggle_status_message(client, store, admin_headers):
    user = make_user(store)
    response = client.patch(f"{API}/user/{user['id']}/toggle-status", headers=admin_headers)
    assert response.json()["message"] == "User deactivated successfully"
    assert response.json()["data"]["isActive"] is False

    response = client.patch(f"{API}/user/{user['id']}/toggle-status", headers=admin_headers)
    assert response.json()["message"] == "User activated successfully"


def test_delete_user_returns_identity(client, store, admin_headers):
    user = make_user(store, email="bye@example.com", name="Bye")
    response = client.delete(f"{API}/user/{user['id']}", headers=admin_headers)
    assert response.json()["data"] == {"id": user["id"], "email": "bye@example.com", "name": "Bye"}
    assert client.delete(f"{API}/user/{user['id']}", headers=admin_headers).status_code == 404
