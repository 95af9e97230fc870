import os
import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

# SQLite pour les tests, AVANT d'importer app (le engine est créé à l'import)
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

import uuid

import pytest
from fastapi.testclient import TestClient

from app.core.database import Base, SessionLocal, engine
from app.main import app
from app.models.user import User


@pytest.fixture(autouse=True)
def setup_teardown():
    """Crée et nettoie la DB avant/après chaque test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """Client de test FastAPI"""
    return TestClient(app)


@pytest.fixture
def db():
    """Session DB pour les tests"""
    db = SessionLocal()
    yield db
    db.close()


def register(client, username=None, email=None, password="pass123"):
    unique_id = str(uuid.uuid4())[:8]
    username = username or f"user_{unique_id}"
    response = client.post("/auth/register", json={
        "username": username,
        "email": email or f"{username}@example.com",
        "password": password,
        "firstName": "Test",
        "lastName": "User",
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client):
    """Inscrit un utilisateur et retourne ses headers Authorization"""
    data = register(client, username="owner_a", email="a@example.com")
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def other_auth_headers(client):
    data = register(client, username="owner_b", email="b@example.com")
    return {"Authorization": f"Bearer {data['token']}"}


@pytest.fixture
def make_user(db):
    """Crée un utilisateur directement en base (tests de services)"""
    def _make(username=None):
        unique_id = str(uuid.uuid4())[:8]
        username = username or f"user{unique_id}"
        user = User(
            email=f"{username}@test.com",
            username=username,
            first_name="Test",
            last_name="User",
        )
        user.set_password("password123")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def signup(client):
    """Inscription via l'API, retourne le corps de la réponse"""
    def _signup(**kwargs):
        return register(client, **kwargs)
    return _signup
