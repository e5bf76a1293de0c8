import os

# test environment, must be set before the engine is first created
os.environ["APP_ENV"] = "test"

from datetime import datetime, timedelta, UTC

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from galaxery.main import app
from galaxery.db.database import Base, get_session, SQLITE_TEST_DB
from galaxery.models.post import Post
from galaxery.models.reaction import Favorite, Like
from galaxery.models.user import User
from galaxery.services.tag_attachment import set_tags

test_engine = create_engine(SQLITE_TEST_DB, connect_args={"check_same_thread": False})
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

@pytest.fixture(autouse=True)
def clean_db():
    """Drop and recreate every table around each test"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)

@pytest.fixture
def session(clean_db):
    """A raw session for service level tests"""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def reader(clean_db):
    """A second, independent session"""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def client(clean_db):
    """Test client bound to the test database"""
    test_session = TestSessionLocal()

    def override_get_session():
        try:
            yield test_session
        finally:
            test_session.close()

    app.dependency_overrides[get_session] = override_get_session

    client = TestClient(app)
    yield client

    test_session.close()
    app.dependency_overrides.clear()

@pytest.fixture
def register(client):
    """Register and log in a user, returning a client carrying its token"""
    def _register(username="testuser", password="testpassword123"):
        client.post("/api/users/register", json={"username": username, "password": password})
        login_response = client.post("/api/users/login", json={"username": username, "password": password})
        token = login_response.json()["access_token"]
        auth_client = TestClient(client.app)
        auth_client.headers = {"Authorization": f"Bearer {token}"}
        return auth_client
    return _register

@pytest.fixture
def authenticated_client(register):
    return register()

@pytest.fixture
def make_user(session):
    """Insert a user directly"""
    def _make_user(username="alice"):
        user = User(username=username, password_hash="not-a-real-hash")
        session.add(user)
        session.commit()
        return user
    return _make_user

@pytest.fixture
def make_post(session):
    """Insert a post with tags directly, created ``minutes_ago`` before a fixed instant"""
    base_time = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def _make_post(user, tags=(), minutes_ago=0):
        post = Post(
            user_id=user.id,
            content_ref=f"https://cdn.example.com/{user.username}/{minutes_ago}.jpg",
            created_at=base_time - timedelta(minutes=minutes_ago),
        )
        session.add(post)
        session.flush()
        set_tags(session, post.id, list(tags))
        session.commit()
        return post
    return _make_post

@pytest.fixture
def like(session):
    def _like(user, post, model=Like):
        session.add(model(user_id=user.id, post_id=post.id))
        session.commit()
    return _like

@pytest.fixture
def favorite(like):
    def _favorite(user, post):
        like(user, post, model=Favorite)
    return _favorite
