"""Shared pytest fixtures: an in-memory database, an API client and seeded users."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.core.security import create_access_token
from marketplace.db.base import Base, get_db
from marketplace.db.models.category import Category
from marketplace.db.models.expert import Expert
from marketplace.db.models.specialization import Specialization
from marketplace.db.models.user import User
from marketplace.main import app


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def client(session_factory):
    def _override_get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _make_user(db, name, email, role, phone_number=None):
    u = User(name=name, email=email, role=role, phone_number=phone_number)
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture()
def admin_user(db):
    return _make_user(db, "Admin", "admin@example.com", "admin")


@pytest.fixture()
def member_user(db):
    return _make_user(db, "Meera Member", "member@example.com", "member")


@pytest.fixture()
def customer_user(db):
    return _make_user(db, "Chetan Customer", "customer@example.com", "customer")


@pytest.fixture()
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture()
def member_headers(member_user):
    return auth_headers(member_user)


@pytest.fixture()
def customer_headers(customer_user):
    return auth_headers(customer_user)


@pytest.fixture()
def make_category(db):
    def _make(name, parent=None, is_active=True, is_primary=False, description=None):
        c = Category(
            name=name,
            description=description,
            parent_category_id=parent.id if parent else None,
            is_active=is_active,
            is_primary=is_primary,
        )
        db.add(c)
        db.commit()
        db.refresh(c)
        return c

    return _make


@pytest.fixture()
def make_expert(db):
    counter = {"n": 0}

    def _make(user=None, **fields):
        if user is None:
            counter["n"] += 1
            user = _make_user(db, f"Expert {counter['n']}", f"expert{counter['n']}@example.com", "member")
        fields.setdefault("first_name", user.name.split()[0])
        fields.setdefault("last_name", "Sharma")
        e = Expert(user_id=user.id, **fields)
        db.add(e)
        db.commit()
        db.refresh(e)
        return e

    return _make


@pytest.fixture()
def make_specialization(db):
    def _make(expert, category, is_primary=False):
        s = Specialization(expert_id=expert.id, category_id=category.id, is_primary=is_primary)
        db.add(s)
        db.commit()
        db.refresh(s)
        return s

    return _make


@pytest.fixture()
def headers_for():
    return auth_headers
