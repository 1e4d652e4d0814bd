import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from uniride.config import settings
from uniride.database.base import Base, get_db
from uniride.main import app

ADMIN_PASSWORD = "open-sesame"
ADMIN_EMAIL = "admin@nd.edu"
PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def admin_settings(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "ADMIN_EMAIL", ADMIN_EMAIL)


@pytest.fixture
def client_factory(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield lambda: TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory):
    return client_factory()


@pytest.fixture
def student(client_factory):
    """Registers a student and returns a client logged in as them."""

    def _student(email, college="MIT", name="Student", **profile):
        client = client_factory()
        payload = {
            "email": email,
            "password": PASSWORD,
            "name": name,
            "college": college,
        }
        payload.update(profile)
        response = client.post("/api/register", json=payload)
        assert response.status_code == 200, response.text
        response = client.post(
            "/api/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200, response.text
        return client

    return _student
