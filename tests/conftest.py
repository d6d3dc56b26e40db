"""
Shared fixtures for the ledger tests.

Every test gets its own in-memory SQLite database. The environment is set up
before any application module is imported because config.py and database.py
read it at import time.

Usage:
    def test_example(db, tenant_id, customer):
        obligation = create_obligation(db, tenant_id, "sales_order", customer.id, 500, date(2024, 1, 1))
"""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="ledger-logs-"))
os.environ["SEQUENCE_RETRY_DELAY"] = "0"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from crud import business_partners as business_partners_crud
from crud.chart_of_accounts import initialize_default_accounts
from crud.invoices import create_obligation
from database import Base, get_db
from schemas.business_partners import BusinessPartnerCreate

TENANT_ID = "tenant-a"
OTHER_TENANT_ID = "tenant-b"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """A session on a fresh, empty database."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def tenant_id():
    return TENANT_ID


@pytest.fixture
def chart(db, tenant_id):
    """The default chart of accounts for the test tenant."""
    return initialize_default_accounts(db, tenant_id)


# =============================================================================
# Party & Obligation Fixtures
# =============================================================================


@pytest.fixture
def customer(db, tenant_id, chart):
    return business_partners_crud.create_partner(
        db, BusinessPartnerCreate(name="Sri Lakshmi Traders", is_vendor=False), tenant_id, "tester"
    )


@pytest.fixture
def vendor(db, tenant_id, chart):
    return business_partners_crud.create_partner(
        db, BusinessPartnerCreate(name="Kaveri Feeds", is_customer=False), tenant_id, "tester"
    )


@pytest.fixture
def customer_invoices(db, tenant_id, customer):
    """
    Two open credit sales for the customer.

    A: sales order, 500, 1 Jan. B: direct sale, 700, 5 Jan. B is created first
    so that allocation order has to come from the dates, not the ids.
    """
    invoice_b = create_obligation(db, tenant_id, "direct_sale", customer.id, 700, date(2024, 1, 5))
    invoice_a = create_obligation(db, tenant_id, "sales_order", customer.id, 500, date(2024, 1, 1))
    return invoice_a, invoice_b


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def client(db):
    """TestClient whose requests all run on the test session."""
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def headers(tenant_id):
    return {"X-Tenant-ID": tenant_id, "X-User-ID": "tester"}
