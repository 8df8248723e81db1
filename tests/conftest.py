"""
Pytest configuration and fixtures for order core tests.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cafe_pos.models import Base
from cafe_pos.seed import seed_menu as load_menu
from cafe_pos.services.domain import OrderService
from cafe_pos.services.permissions import Actor
from shared.infrastructure.db import build_engine, enable_sqlite_foreign_keys
from shared.infrastructure.locks import OrderLockRegistry


# Prices used throughout the tests (cents)
TEST_MENU = [
    {"name": "Coffee", "type": "drinks", "price_cents": 300},
    {"name": "Latte", "type": "drinks", "price_cents": 425},
    {"name": "Muffin", "type": "food", "price_cents": 250, "description": "Blueberry"},
    {"name": "Bagel", "type": "food", "price_cents": 325},
    {"name": "Water", "type": "drinks", "price_cents": 0},
]
PRICES = {item["name"]: item["price_cents"] for item in TEST_MENU}


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seed_menu(db_session):
    """Load the test menu."""
    load_menu(db_session, TEST_MENU)
    return PRICES


@pytest.fixture
def lock_registry():
    """Private lock registry so tests never share lock state."""
    return OrderLockRegistry(timeout=2.0)


@pytest.fixture
def service(db_session, seed_menu, lock_registry):
    """Order service over the seeded test database."""
    return OrderService(db_session, locks=lock_registry)


@pytest.fixture
def customer():
    return Actor.customer("alice")


@pytest.fixture
def other_customer():
    return Actor.customer("bob")


@pytest.fixture
def employee():
    return Actor.employee("carol")


@pytest.fixture
def manager():
    return Actor.manager("dave")


@pytest.fixture
def file_session_factory(tmp_path):
    """
    Session factory over a file-backed SQLite database.

    For multi-threaded tests: every thread opens its own session and
    connection, which the in-memory StaticPool engine cannot provide.
    """
    file_engine = build_engine(f"sqlite:///{tmp_path / 'cafe_test.db'}")
    Base.metadata.create_all(bind=file_engine)

    factory = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=file_engine
    )
    with factory() as session:
        load_menu(session, TEST_MENU)

    try:
        yield factory
    finally:
        file_engine.dispose()
