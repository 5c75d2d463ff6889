"""Shared fixtures: in-memory database, seeded users and an API client."""
import os

# Must be set before unimarket reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MESSAGE_RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from unimarket.database import Base, SessionLocal, engine, get_db
from unimarket.main import app
from unimarket.api.conversations import get_message_rate_limiter
from unimarket.middleware.auth import create_access_token
from unimarket.models import User, Item


@pytest.fixture
def db():
    """Create test database session."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    session = SessionLocal()

    yield session

    # Cleanup
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """TestClient sharing the test session, with rate limiting off."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_message_rate_limiter] = lambda: None

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def buyer(db):
    user = User(id=5, name="Buyer Bo", email="buyer@ait.asia")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def seller(db):
    user = User(id=9, name="Seller Sai", email="seller@ait.asia", is_verified=True)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def stranger(db):
    user = User(id=7, name="Third Party", email="stranger@ait.asia")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def item(db, seller):
    listing = Item(id=42, title="Rice cooker", price=350, seller_id=seller.id)
    db.add(listing)
    db.commit()
    return listing


def auth_headers(user_id: int) -> dict:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
