def test_get_profile(client, auth_headers):
    response = client.get("/users/profile", headers=auth_headers)
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["email"] == "a@example.com"
    assert user["avatar"] is None


def test_update_profile(client, auth_headers):
    """Tester la modification du profil"""
    response = client.put("/users/profile", headers=auth_headers, json={
        "firstName": "  Alice ",
        "avatar": "https://example.com/me.png",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Profile updated successfully"
    assert data["user"]["firstName"] == "Alice"
    assert data["user"]["lastName"] == "User"
    assert data["user"]["avatar"] == "https://example.com/me.png"


def test_update_profile_username_taken(client, auth_headers, other_auth_headers):
    response = client.put("/users/profile", headers=auth_headers, json={"username": "owner_b"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "username"


def test_update_profile_keeps_own_username(client, auth_headers):
    response = client.put("/users/profile", headers=auth_headers, json={"username": "owner_a"})
    assert response.status_code == 200


def test_update_profile_invalid_avatar(client, auth_headers):
    response = client.put("/users/profile", headers=auth_headers, json={"avatar": "not a url"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "avatar"


def test_update_profile_null_name_rejected(client, auth_headers):
    response = client.put("/users/profile", headers=auth_headers, json={"firstName": None})
    assert response.status_code == 400


def test_change_password(client, auth_headers):
    """Tester le changement de mot de passe puis la reconnexion"""
    response = client.put("/users/change-password", headers=auth_headers, json={
        "currentPassword": "pass123",
        "newPassword": "newpass456",
    })
    assert response.status_code == 200

    old = client.post("/auth/login", json={"email": "a@example.com", "password": "pass123"})
    assert old.status_code == 401
    new = client.post("/auth/login", json={"email": "a@example.com", "password": "newpass456"})
    assert new.status_code == 200


def test_change_password_wrong_current(client, auth_headers):
    response = client.put("/users/change-password", headers=auth_headers, json={
        "currentPassword": "wrong",
        "newPassword": "newpass456",
    })
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "currentPassword"


def test_change_password_too_short(client, auth_headers):
    response = client.put("/users/change-password", headers=auth_headers, json={
        "currentPassword": "pass123",
        "newPassword": "123",
    })
    assert response.status_code == 400


def test_deactivate_wrong_password(client, auth_headers):
    response = client.request("DELETE", "/users/account", headers=auth_headers, json={"password": "nope"})
    assert response.status_code == 400


def test_deactivate_account(client, auth_headers):
    """Compte désactivé : token refusé et login impossible"""
    response = client.request("DELETE", "/users/account", headers=auth_headers, json={"password": "pass123"})
    assert response.status_code == 200
    assert response.json()["message"] == "Account deactivated successfully"

    me = client.get("/auth/me", headers=auth_headers)
    assert me.status_code == 401
    assert me.json()["message"] == "Account is deactivated"

    login = client.post("/auth/login", json={"email": "a@example.com", "password": "pass123"})
    assert login.status_code == 401
    assert login.json()["message"] == "Account is deactivated"
