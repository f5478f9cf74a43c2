import os
import tempfile
from decimal import Decimal

os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "intern-portal-test-logs"))

import pytest

from app import create_app
from config import TestConfig
from extensions import db as _db
from models import User


@pytest.fixture
def app(tmp_path):
    class _TestConfig(TestConfig):
        LOG_DIR = str(tmp_path / "logs")

    app = create_app(_TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make_user(name="Intern", email=None, password="secret123", total=0,
                   referred_by=None, is_active=True, referral_code=None):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name,
            email=email or f"user{n}@example.com",
            referral_code=referral_code or f"code{n}",
            total_donations=Decimal(str(total)),
            referred_by=referred_by.id if referred_by is not None else None,
            is_active=is_active,
        )
        user.set_password(password)
        _db.session.add(user)
        _db.session.commit()
        return user

    return _make_user


@pytest.fixture
def logged_in(client, make_user):
    """A client with a logged in user; returns (client, user)."""
    user = make_user(name="Jane Doe", email="jane@example.com")
    resp = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert resp.status_code == 200
    return client, user
