"""
RecordStore abstract interface.

The importers and routers only ever talk to a RecordStore. Production code
wraps the request's SQLAlchemy session; tests swap in an in-memory store
without touching the importers.
"""

import abc
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from meterhub.models.customer import Customer
from meterhub.models.reading import Reading


class RecordStore(abc.ABC):
    # ── Customers ────────────────────────────────────────────────────────────

    @abc.abstractmethod
    def create_customer(self, customer: Customer) -> Customer:
        """Persist a new customer. Assigns an id if the customer has none."""

    @abc.abstractmethod
    def find_customer(self, customer_id: uuid.UUID) -> Optional[Customer]:
        """Return the customer or None."""

    @abc.abstractmethod
    def list_customers(self) -> list[Customer]:
        """Return all customers."""

    @abc.abstractmethod
    def update_customer(self, customer: Customer) -> Customer:
        """Persist changes to an existing customer."""

    @abc.abstractmethod
    def delete_customer(self, customer_id: uuid.UUID) -> bool:
        """Delete a customer (and its readings). False if it did not exist."""

    # ── Readings ─────────────────────────────────────────────────────────────

    @abc.abstractmethod
    def create_reading(self, reading: Reading) -> Reading:
        """Persist a new reading. Assigns an id if the reading has none."""

    @abc.abstractmethod
    def find_reading(self, reading_id: uuid.UUID) -> Optional[Reading]:
        """Return the reading or None."""

    @abc.abstractmethod
    def find_readings_by_customer(self, customer_id: uuid.UUID) -> list[Reading]:
        """Return all readings owned by a customer."""

    @abc.abstractmethod
    def list_readings(self) -> list[Reading]:
        """Return all readings."""

    @abc.abstractmethod
    def update_reading(self, reading: Reading) -> Reading:
        """Persist a full replacement of an existing reading."""

    @abc.abstractmethod
    def delete_reading(self, reading_id: uuid.UUID) -> bool:
        """Delete a reading. False if it did not exist."""


class SqlAlchemyRecordStore(RecordStore):
    """
    RecordStore backed by a SQLAlchemy session.

    Writes are flushed, never committed. The caller (request handler, worker
    job, script) owns the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_customer(self, customer: Customer) -> Customer:
        if customer.id is None:
            customer.id = uuid.uuid4()
        self.db.add(customer)
        self.db.flush()
        return customer

    def find_customer(self, customer_id: uuid.UUID) -> Optional[Customer]:
        return self.db.get(Customer, customer_id)

    def list_customers(self) -> list[Customer]:
        stmt = select(Customer).order_by(Customer.last_name, Customer.first_name)
        return list(self.db.scalars(stmt))

    def update_customer(self, customer: Customer) -> Customer:
        self.db.flush()
        return customer

    def delete_customer(self, customer_id: uuid.UUID) -> bool:
        customer = self.find_customer(customer_id)
        if customer is None:
            return False
        self.db.delete(customer)
        self.db.flush()
        return True

    def create_reading(self, reading: Reading) -> Reading:
        if reading.id is None:
            reading.id = uuid.uuid4()
        self.db.add(reading)
        self.db.flush()
        return reading

    def find_reading(self, reading_id: uuid.UUID) -> Optional[Reading]:
        return self.db.get(Reading, reading_id)

    def find_readings_by_customer(self, customer_id: uuid.UUID) -> list[Reading]:
        stmt = (
            select(Reading)
            .where(Reading.customer_id == customer_id)
            .order_by(Reading.date_of_reading)
        )
        return list(self.db.scalars(stmt))

    def list_readings(self) -> list[Reading]:
        stmt = select(Reading).order_by(Reading.date_of_reading)
        return list(self.db.scalars(stmt))

    def update_reading(self, reading: Reading) -> Reading:
        self.db.flush()
        return reading

    def delete_reading(self, reading_id: uuid.UUID) -> bool:
        reading = self.find_reading(reading_id)
        if reading is None:
            return False
        self.db.delete(reading)
        self.db.flush()
        return True


def get_store(db: Session) -> RecordStore:
    """Factory — returns the RecordStore for a session."""
    return SqlAlchemyRecordStore(db)
