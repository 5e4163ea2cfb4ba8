# tests/conftest.py

import os

os.environ.setdefault("TASKS_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from task_manager.database import Base, get_db
from task_manager.main import app
from task_manager import models  # noqa: F401


# ============================================================
# DATABASE (SQLite) FOR UNIT + API TESTS
# ============================================================

SQLALCHEMY_DATABASE_URL = "sqlite:///./test_tasks.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine
)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture(autouse=True)
def clean_db():
    """Recreate the tables before every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def task_payload():
    return {
        "title": "Review case documents",
        "description": "Check the bundle before the hearing",
        "status": "pending",
        "due_date": "2024-12-31T23:59:59.000Z",
    }
