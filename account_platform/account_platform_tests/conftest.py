import os

# Must be set before the service modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET"] = "test-secret-key-with-at-least-32-bytes"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from account_platform.account_platform.account_service.main import app
from account_platform.account_platform.account_service.db import Base, engine, SessionLocal
from account_platform.account_platform.account_service.models import User
from account_platform.account_platform.account_service.auth import hash_password


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture
def db_session():
    session = SessionLocal()
    yield session
    session.close()


def ensure_user(username: str, password: str, email: str = None, **fields):
    db = SessionLocal()
    try:
        user = User(username=username, password=hash_password(password), email=email, **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user.id
    finally:
        db.close()
