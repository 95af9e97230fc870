from app.core.security import create_access_token, create_refresh_token


def test_register_success(client):
    """Test : créer un utilisateur avec succès"""
    response = client.post("/auth/register", json={
        "username": "alice_01",
        "email": "Alice@Example.com",
        "password": "password123",
        "firstName": "Alice",
        "lastName": "Martin",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User registered successfully"
    assert data["token"]
    assert data["refreshToken"]
    user = data["user"]
    assert user["username"] == "alice_01"
    assert user["email"] == "alice@example.com"
    assert user["firstName"] == "Alice"
    assert user["isActive"] is True
    assert "passwordHash" not in user
    assert "password_hash" not in user


def test_register_duplicate_email(signup, client):
    """Test : impossible de créer 2 users avec le même email"""
    signup(username="first_user", email="dup@example.com")
    response = client.post("/auth/register", json={
        "username": "second_user",
        "email": "dup@example.com",
        "password": "password123",
        "firstName": "B",
        "lastName": "B",
    })
    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["errors"]]
    assert fields == ["email"]


def test_register_invalid_fields(client):
    """Test : username trop court, password trop court, email invalide"""
    response = client.post("/auth/register", json={
        "username": "ab",
        "email": "not-an-email",
        "password": "123",
        "firstName": "A",
        "lastName": "B",
    })
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation failed"
    fields = {e["field"] for e in data["errors"]}
    assert {"username", "email", "password"} <= fields


def test_login_success(signup, client):
    """Test : se connecter avec succès"""
    signup(username="loginuser", email="login@example.com", password="password123")
    response = client.post("/auth/login", json={"email": "login@example.com", "password": "password123"})
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["tokenType"] == "bearer"
    assert data["user"]["lastLogin"] is not None


def test_login_wrong_password(signup, client):
    """Test : impossible de se connecter avec un mauvais password"""
    signup(username="wronguser", email="wrong@example.com", password="correctpassword")
    response = client.post("/auth/login", json={"email": "wrong@example.com", "password": "wrongpassword"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post("/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_me_returns_current_user(client, auth_headers):
    response = client.get("/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "owner_a"


def test_missing_token(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"


def test_invalid_token(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Token is not valid"


def test_token_for_deleted_user(client):
    token = create_access_token(999, "ghost@example.com")
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_refresh_token_cannot_be_used_as_access(signup, client):
    data = signup()
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {data['refreshToken']}"})
    assert response.status_code == 401


def test_refresh_success(signup, client):
    data = signup()
    response = client.post("/auth/refresh", json={"refreshToken": data["refreshToken"]})
    assert response.status_code == 200
    body = response.json()
    assert body["refreshToken"] == data["refreshToken"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200


def test_refresh_with_access_token_rejected(signup, client):
    data = signup()
    response = client.post("/auth/refresh", json={"refreshToken": data["token"]})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid refresh token"


def test_refresh_for_unknown_user(client):
    token = create_refresh_token(999, "ghost@example.com")
    response = client.post("/auth/refresh", json={"refreshToken": token})
    assert response.status_code == 401


def test_logout(client, auth_headers):
    response = client.post("/auth/logout", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"


def test_health(client):
    """Test : l'endpoint health fonctionne"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert "timestamp" in data
    assert "environment" in data


def test_register_race_on_unique_constraint(signup, client, monkeypatch):
    """Deux inscriptions simultanées : la contrainte unique donne un 400 par champ, pas un 500"""
    from app.services import user_service

    signup(username="racer", email="race@example.com")

    real_check = user_service._duplicate_errors
    calls = []

    def first_check_misses(db, email, username):
        # simule la requête concurrente : la première vérification ne voit rien
        calls.append(email)
        return [] if len(calls) == 1 else real_check(db, email, username)

    monkeypatch.setattr(user_service, "_duplicate_errors", first_check_misses)
    response = client.post("/auth/register", json={
        "username": "racer",
        "email": "race@example.com",
        "password": "password123",
        "firstName": "R",
        "lastName": "R",
    })
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "User already exists"
    assert {e["field"] for e in data["errors"]} == {"email", "username"}
