"""
Customer — a utility customer whose meters are read.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from meterhub.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from meterhub.models.reading import Reading


# ── Enums (stored as strings for readability + migration safety) ────────────


class Gender:
    MALE = "M"
    FEMALE = "W"
    DIVERSE = "D"
    UNKNOWN = "U"

    ALL = [DIVERSE, MALE, UNKNOWN, FEMALE]


# ── Models ──────────────────────────────────────────────────────────────────


class Customer(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "customers"
    __table_args__ = (
        CheckConstraint("gender IN ('D','M','U','W')", name="ck_customers_gender"),
    )

    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    gender: Mapped[str] = mapped_column(
        String(1),
        nullable=False,
        default=Gender.UNKNOWN,
        comment="M | W | D | U",
    )

    # Readings are deleted with their customer (ORM cascade + FK ondelete)
    readings: Mapped[list["Reading"]] = relationship(
        "Reading",
        back_populates="customer",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Customer {self.first_name!r} {self.last_name!r} id={self.id}>"
