# tests/conftest.py
import os
import sys

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-contact-book-suite")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(os.path.abspath("."))

from contactbook.database import Base, build_engine, get_db
from contactbook.security import PasswordHasher
from contactbook.tokens import TokenService
from contactbook import models  # noqa: F401
from main import app

from tests.fakes import FakeClock, InMemoryContactRepository, InMemoryUserRepository


# DB (SQLite in-memory for tests)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = build_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

SECRET_KEY = os.environ["SECRET_KEY"]


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def token_service(clock):
    return TokenService(SECRET_KEY, clock=clock)


@pytest.fixture()
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture()
def contact_repo():
    return InMemoryContactRepository()
