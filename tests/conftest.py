"""
Test fixtures and shared setup.

Uses a separate test database (SQLite file by default; point DATABASE_URL at
a Postgres instance to run against the real thing).
All DB tests run in transactions that are rolled back after each test —
so the DB is always clean without needing to truncate tables.

Importer tests never touch the DB: they run against InMemoryRecordStore.
"""

import os
import uuid
import pytest
from decimal import Decimal
from datetime import date
from typing import Optional

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

# ── Override settings BEFORE importing app modules ────────────────────────────
os.environ.setdefault("DATABASE_URL", "sqlite:////tmp/meterhub_test.db")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379")
os.environ.setdefault("ENVIRONMENT", "test")

from meterhub.main import app
from meterhub.database import get_db
from meterhub.models.base import Base
from meterhub.models import *  # noqa — ensures all models registered
from meterhub.models.customer import Customer, Gender
from meterhub.models.reading import KindOfMeter, Reading
from meterhub.services.storage.base import RecordStore

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "..", "fixtures")

PUMUKEL_ID = uuid.UUID("ec617965-88b4-4721-8158-ee36c38e4db3")
ERIKA_ID = uuid.UUID("848c39a1-0cbf-4a8d-ab5a-2b8dc3c1c8a6")
ALEX_ID = uuid.UUID("0b7a1dc1-2f3b-4f5d-9a9e-5b0a2a2e6c11")


# ── Test engine ───────────────────────────────────────────────────────────────
TEST_DATABASE_URL = os.environ["DATABASE_URL"]
_connect_args = (
    {"check_same_thread": False} if TEST_DATABASE_URL.startswith("sqlite") else {}
)
test_engine = create_engine(
    TEST_DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)

if TEST_DATABASE_URL.startswith("sqlite"):
    # pysqlite defers BEGIN and breaks SAVEPOINT; let SQLAlchemy emit both itself
    @event.listens_for(test_engine, "connect")
    def _sqlite_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(test_engine, "begin")
    def _sqlite_begin(conn):
        conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def create_test_tables():
    """
    Create all tables once per test session.
    NOT autouse — only runs for tests that need DB fixtures.
    DB-independent tests (value parsers, importers) run without this.
    """
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db(create_test_tables) -> Session:
    """
    Provide a DB session that is rolled back after each test.
    Route handlers commit and roll back freely: both act on a SAVEPOINT
    inside the outer transaction.
    """
    connection = test_engine.connect()
    transaction = connection.begin()
    session = TestSessionLocal(bind=connection, join_transaction_mode="create_savepoint")

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def client(db: Session) -> TestClient:
    """
    FastAPI test client with DB dependency overridden to use the test session.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ── In-memory store ───────────────────────────────────────────────────────────


class InMemoryRecordStore(RecordStore):
    """Dict-backed RecordStore for importer tests."""

    def __init__(self):
        self.customers: dict[uuid.UUID, Customer] = {}
        self.readings: dict[uuid.UUID, Reading] = {}

    def create_customer(self, customer: Customer) -> Customer:
        if customer.id is None:
            customer.id = uuid.uuid4()
        if customer.id in self.customers:
            raise ValueError(f"duplicate customer {customer.id}")
        self.customers[customer.id] = customer
        return customer

    def find_customer(self, customer_id: uuid.UUID) -> Optional[Customer]:
        return self.customers.get(customer_id)

    def list_customers(self) -> list[Customer]:
        return list(self.customers.values())

    def update_customer(self, customer: Customer) -> Customer:
        self.customers[customer.id] = customer
        return customer

    def delete_customer(self, customer_id: uuid.UUID) -> bool:
        if self.customers.pop(customer_id, None) is None:
            return False
        for reading in self.find_readings_by_customer(customer_id):
            del self.readings[reading.id]
        return True

    def create_reading(self, reading: Reading) -> Reading:
        if reading.id is None:
            reading.id = uuid.uuid4()
        self.readings[reading.id] = reading
        return reading

    def find_reading(self, reading_id: uuid.UUID) -> Optional[Reading]:
        return self.readings.get(reading_id)

    def find_readings_by_customer(self, customer_id: uuid.UUID) -> list[Reading]:
        return [r for r in self.readings.values() if r.customer_id == customer_id]

    def list_readings(self) -> list[Reading]:
        return list(self.readings.values())

    def update_reading(self, reading: Reading) -> Reading:
        self.readings[reading.id] = reading
        return reading

    def delete_reading(self, reading_id: uuid.UUID) -> bool:
        return self.readings.pop(reading_id, None) is not None


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


# ── Data builder fixtures ──────────────────────────────────────────────────────


@pytest.fixture
def known_customer(memory_store) -> Customer:
    """Pumukel Kobold, already present in the in-memory store."""
    customer = Customer(
        id=PUMUKEL_ID,
        first_name="Pumukel",
        last_name="Kobold",
        birth_date=date(1962, 2, 21),
        gender=Gender.MALE,
    )
    return memory_store.create_customer(customer)


@pytest.fixture
def sample_customer(db: Session) -> Customer:
    customer = Customer(
        id=ERIKA_ID,
        first_name="Erika",
        last_name="Mustermann",
        birth_date=date(1964, 8, 12),
        gender=Gender.FEMALE,
    )
    db.add(customer)
    db.flush()
    return customer


@pytest.fixture
def sample_reading(db: Session, sample_customer) -> Reading:
    reading = Reading(
        customer_id=sample_customer.id,
        meter_id="MST-af34569",
        kind_of_meter=KindOfMeter.ELECTRICITY,
        date_of_reading=date(2023, 1, 1),
        meter_count=Decimal("1234.5"),
        comment="",
        substitute=False,
    )
    db.add(reading)
    db.flush()
    return reading


@pytest.fixture
def fixtures_dir() -> str:
    return FIXTURES_DIR


def fixture_text(name: str) -> str:
    with open(os.path.join(FIXTURES_DIR, name), encoding="utf-8") as f:
        return f.read()


def fixture_bytes(name: str) -> bytes:
    with open(os.path.join(FIXTURES_DIR, name), "rb") as f:
        return f.read()


def series_csv(
    customer_id, meter_id: str = "MST-123456", rows: Optional[list[str]] = None
) -> str:
    """Build a series file in the export layout: preamble, separator, header, rows."""
    if rows is None:
        rows = ['"01.01.2024";"1234,5";""', '"15.01.2024";"1456,7";"Test comment"']
    lines = [
        f'"Kunde";"{customer_id}";',
        f'"Zählernummer";"{meter_id}";',
        ";;",
        '"Datum";"Zählerstand";"Kommentar"',
        *rows,
    ]
    return "\n".join(lines) + "\n"
