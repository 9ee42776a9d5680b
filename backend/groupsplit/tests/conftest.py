"""
Shared fixtures: an in-memory SQLite database behind the API.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from groupsplit.db.base import Base
from groupsplit.db.session import get_db, init_db
from groupsplit.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Sign up and log in a user; returns its id and auth headers."""
    def _make_user(username: str):
        response = client.post(
            "/api/auth/signup",
            json={
                "username": username,
                "email": f"{username}@example.com",
                "password": "testpassword123"
            }
        )
        assert response.status_code == 201
        user_id = response.json()["id"]

        response = client.post(
            "/api/auth/login",
            json={"username": username, "password": "testpassword123"}
        )
        assert response.status_code == 200
        token = response.json()["access_token"]
        return {"id": user_id, "username": username, "headers": {"Authorization": f"Bearer {token}"}}

    return _make_user


@pytest.fixture
def make_group(client):
    """Create a group owned by ``owner`` and add the other users to it."""
    def _make_group(owner, *members, name: str = "Trip"):
        response = client.post("/api/groups", json={"name": name}, headers=owner["headers"])
        assert response.status_code == 201
        group_id = response.json()["id"]
        for member in members:
            response = client.post(
                f"/api/groups/{group_id}/members",
                json={"user_id": member["id"]},
                headers=owner["headers"]
            )
            assert response.status_code == 201
        return group_id

    return _make_group
