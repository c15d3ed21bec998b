"""Shared fixtures: in-memory SQLite per test, seeded users, a class, and an API client."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token, hash_password
from app.database import Base, get_db
from app.models import User, UserRole
from app.services.authorization import Actor
from app.services.class_registry import ClassRegistry


def make_user(db, email: str, role: UserRole, password: str = "secret123") -> User:
    user = User(email=email, full_name=email.split("@")[0].title(), role=role.value, password=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def as_actor(user: User) -> Actor:
    return Actor(actor_id=user.id, role=UserRole(user.role))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin@school.test", UserRole.ADMIN)


@pytest.fixture
def second_admin_user(db):
    return make_user(db, "head@school.test", UserRole.ADMIN)


@pytest.fixture
def student_user(db):
    return make_user(db, "udin@school.test", UserRole.USER)


@pytest.fixture
def other_student_user(db):
    return make_user(db, "sari@school.test", UserRole.USER)


@pytest.fixture
def admin(admin_user):
    return as_actor(admin_user)


@pytest.fixture
def student(student_user):
    return as_actor(student_user)


@pytest.fixture
def other_student(other_student_user):
    return as_actor(other_student_user)


@pytest.fixture
def math_class(db, admin):
    return ClassRegistry(db).create(
        admin,
        name="Mathematics",
        description="Math files and resources",
        allowed_file_types=["pdf", "xlsx"],
    )


@pytest.fixture
def client(session_factory):
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}
    return _headers


@pytest.fixture
def user_factory():
    """make_user(db, email, role) -> (User, Actor), for tests that manage their own sessions."""
    def _make(db, email: str, role: UserRole):
        user = make_user(db, email, role)
        return user, as_actor(user)
    return _make
