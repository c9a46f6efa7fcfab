"""
Reading — a single dated meter reading belonging to a customer.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from meterhub.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from meterhub.models.customer import Customer


class KindOfMeter:
    HEATING = "HEIZUNG"
    ELECTRICITY = "STROM"
    WATER = "WASSER"
    UNKNOWN = "UNBEKANNT"

    ALL = [HEATING, ELECTRICITY, UNKNOWN, WATER]


class Reading(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "readings"
    __table_args__ = (
        CheckConstraint(
            "kind_of_meter IN ('HEIZUNG','STROM','UNBEKANNT','WASSER')",
            name="ck_readings_kind_of_meter",
        ),
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Free text from the exports, uncapped
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # NULL when the source cell was present but not a dd.MM.yyyy date
    date_of_reading: Mapped[Optional[date]] = mapped_column(
        Date, nullable=True, index=True
    )
    kind_of_meter: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=KindOfMeter.UNKNOWN,
        comment="HEIZUNG | STROM | WASSER | UNBEKANNT",
    )
    # NULL = unparseable in the source, which is not the same as zero
    meter_count: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(14, 4), nullable=True
    )
    meter_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    substitute: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="false",
        comment="True if the value was estimated rather than read off the meter",
    )

    customer: Mapped["Customer"] = relationship("Customer", back_populates="readings")

    def __repr__(self) -> str:
        return (
            f"<Reading meter={self.meter_id!r} kind={self.kind_of_meter!r} "
            f"date={self.date_of_reading} count={self.meter_count}>"
        )
