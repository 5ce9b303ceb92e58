import os

# The db module requires DATABASE_URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import menuboard.config as config_mod
import menuboard.db as db
from menuboard.auth import create_access_token, hash_password
from menuboard.main import app
from menuboard.models import Base, User
from menuboard.routes import limiter
from menuboard.storage import LocalStorage, set_storage

TEST_PASSWORD = "s3cretpass"


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory SQLite DB.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the db module used by the app
    db.engine = engine
    db.SessionLocal = TestingSessionLocal

    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    """Local storage backend writing into a per-test directory."""
    backend = LocalStorage(str(tmp_path / "uploads"), "/uploads")
    set_storage(backend)
    yield backend
    set_storage(None)


@pytest.fixture
def client(session_factory, storage, monkeypatch):
    """Shared FastAPI TestClient using an in-memory SQLite DB."""
    monkeypatch.setattr(config_mod, "JWT_SECRET", "test-secret")
    limiter.enabled = False

    # Override FastAPI DB dependency
    def override_get_db():
        db_sess = session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    limiter.enabled = True


def make_user(session_factory, email="pepe@example.com", subdomain="don-pepe", role_id=None, active=True):
    user = User(
        name="Pepe",
        last_name="Argento",
        email=email,
        cel="+54 11 5555 0000",
        role_id=role_id or config_mod.ROLE_OWNER,
        subdomain=subdomain,
        active=active,
        password_hash=hash_password(TEST_PASSWORD),
    )
    with session_factory() as session:
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
    return user


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def owner(session_factory):
    return make_user(session_factory)


@pytest.fixture
def other_owner(session_factory):
    return make_user(session_factory, email="moni@example.com", subdomain="moni-cafe")


@pytest.fixture
def admin(session_factory):
    return make_user(
        session_factory,
        email="admin@example.com",
        subdomain="admin",
        role_id=config_mod.ROLE_ADMIN,
    )


@pytest.fixture
def owner_headers(client, owner):
    """Bearer auth headers for the default owner."""
    return bearer(owner)


@pytest.fixture
def other_headers(client, other_owner):
    return bearer(other_owner)


@pytest.fixture
def admin_headers(client, admin):
    return bearer(admin)


@pytest.fixture
def menu(client, owner_headers):
    resp = client.post("/menus", json={"title": "Carta"}, headers=owner_headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def category(client, owner_headers, menu):
    resp = client.post(
        "/categories",
        json={"menu_id": menu["id"], "title": "Pizzas"},
        headers=owner_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.fixture
def item(client, owner_headers, category):
    resp = client.post(
        "/items",
        json={
            "category_id": category["id"],
            "title": "Muzzarella",
            "price": 7500,
            "images": [
                {"url": "https://cdn.example.com/muzza.jpg", "alt": "Muzzarella"},
                {"url": "https://cdn.example.com/muzza-2.jpg"},
            ],
        },
        headers=owner_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
