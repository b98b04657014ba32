"""
Pytest fixtures for the Flower Shop backend tests.

Provides an in-memory SQLite database, a session per test and an API test
client with authentication overridden.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import datetime
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
import models
from utils.auth_utils import get_current_user, ROLE_ADMIN, ROLE_SALES_STAFF

ADMIN_USER = {"sub": "1", "name": "admin", "role": ROLE_ADMIN}
STAFF_USER = {"sub": "2", "name": "counter", "role": ROLE_SALES_STAFF}


@pytest.fixture(scope='function')
def db_session():
    """Create a fresh database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _client_as(db_session, user):
    from main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: user
    return TestClient(app)


@pytest.fixture(scope='function')
def client(db_session):
    """API client authenticated as an admin."""
    yield _client_as(db_session, ADMIN_USER)
    from main import app
    app.dependency_overrides.clear()


@pytest.fixture(scope='function')
def staff_client(db_session):
    """API client authenticated as sales staff."""
    yield _client_as(db_session, STAFF_USER)
    from main import app
    app.dependency_overrides.clear()


# --- Record factories ---

@pytest.fixture
def product(db_session):
    db_product = models.Product(name="Red Rose", default_price=Decimal("20"), category="Roses")
    db_session.add(db_product)
    db_session.commit()
    return db_product


@pytest.fixture
def customer(db_session):
    db_customer = models.Customer(name="Asha", phone="9876543210", opening_balance=0, outstanding_balance=0)
    db_session.add(db_customer)
    db_session.commit()
    return db_customer


@pytest.fixture
def supplier(db_session):
    db_supplier = models.Supplier(name="Hosur Farms", opening_balance=0, outstanding_balance=0)
    db_session.add(db_supplier)
    db_session.commit()
    return db_supplier


@pytest.fixture
def bank_account(db_session):
    db_account = models.BankAccount(name="HDFC Current", account_number="50100", balance=0)
    db_session.add(db_account)
    db_session.commit()
    return db_account


@pytest.fixture
def fresh_batch(db_session, product):
    """A batch bought just now, so it is NEW."""
    from models.audit_mixin import shop_now
    batch = models.StockBatch(
        product_id=product.id,
        product_name=product.name,
        quantity=Decimal("50"),
        original_quantity=Decimal("50"),
        purchase_price=Decimal("10"),
        selling_price=Decimal("20"),
        purchase_date=shop_now().replace(tzinfo=None),
    )
    db_session.add(batch)
    db_session.commit()
    return batch


@pytest.fixture
def old_batch(db_session, product):
    """A batch bought long ago, so it is DAMAGED."""
    batch = models.StockBatch(
        product_id=product.id,
        product_name=product.name,
        quantity=Decimal("30"),
        original_quantity=Decimal("30"),
        purchase_price=Decimal("8"),
        selling_price=Decimal("15"),
        purchase_date=datetime(2020, 1, 1, 9, 0),
    )
    db_session.add(batch)
    db_session.commit()
    return batch
