from __future__ import annotations

import os
import tempfile
from typing import Generator, Any

# Keep the app engine away from the developer database during tests
_APP_DB_DIR = tempfile.mkdtemp(prefix="zenspend_app_")
os.environ.setdefault("ZENSPEND_DATABASE_URL", f"sqlite:///{os.path.join(_APP_DB_DIR, 'app.sqlite3')}")
os.environ.setdefault("ZENSPEND_AUTO_CREATE_SCHEMA", "0")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from zenspend import models  # noqa: E402
from zenspend.core.database import Base, get_db  # noqa: E402
from zenspend.main import app  # noqa: E402


@pytest.fixture(scope="session")
def test_db_url() -> Generator[str, Any, Any]:
    fd, path = tempfile.mkstemp(prefix="zenspend_test_", suffix=".sqlite3")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(test_db_url: str):
    eng = create_engine(test_db_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Any, Any, Any]:
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            for tbl in reversed(Base.metadata.sorted_tables):
                conn.execute(tbl.delete())


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_category(client):
    def _make(name="Groceries", budget=100, period="weekly", color="#10b981"):
        r = client.post("/api/categories", json={
            "name": name, "weeklyBudget": budget, "period": period, "color": color,
        })
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make


@pytest.fixture()
def make_transaction(client):
    def _make(**overrides):
        payload = {
            "date": "2025-03-10",
            "amount": 25.5,
            "categoryId": None,
            "description": "Coffee beans",
            "type": "expense",
        }
        payload.update(overrides)
        r = client.post("/api/transactions", json=payload)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make


@pytest.fixture()
def seeded_settings(db_session) -> models.UserSettings:
    from zenspend.services import SettingsService

    return SettingsService(db_session).get_or_create()
