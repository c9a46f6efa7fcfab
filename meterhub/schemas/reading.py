"""
Reading schemas — request and response shapes for /readings.

A reading embeds its customer. On write only customer.id is used; the rest of
the customer object is accepted and ignored.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from meterhub.models.reading import KindOfMeter
from meterhub.schemas.common import BaseSchema
from meterhub.schemas.customer import CustomerResponse


class CustomerRef(BaseSchema):
    id: uuid.UUID


class ReadingBase(BaseSchema):
    comment: Optional[str] = None
    date_of_reading: date
    kind_of_meter: str
    meter_count: Decimal
    meter_id: str = Field(..., min_length=1)
    substitute: bool

    @field_validator("kind_of_meter")
    @classmethod
    def validate_kind(cls, v: str) -> str:
        v = v.upper()
        if v not in KindOfMeter.ALL:
            raise ValueError(f"kindOfMeter must be one of: {sorted(KindOfMeter.ALL)}")
        return v


class ReadingCreate(ReadingBase):
    id: Optional[uuid.UUID] = None
    customer: CustomerRef


class ReadingUpdate(ReadingBase):
    id: uuid.UUID
    customer: CustomerRef


class ReadingResponse(BaseSchema):
    """
    Imported readings may lack a date or a count (unparsable cells),
    so both are optional on the way out.
    """

    id: uuid.UUID
    customer: CustomerResponse
    comment: Optional[str] = None
    date_of_reading: Optional[date] = None
    kind_of_meter: str
    meter_count: Optional[float] = None
    meter_id: str
    substitute: bool


class ReadingCreateRequest(BaseSchema):
    reading: ReadingCreate


class ReadingUpdateRequest(BaseSchema):
    reading: ReadingUpdate


class ReadingEnvelope(BaseSchema):
    reading: ReadingResponse


class ReadingsResponse(BaseSchema):
    readings: list[ReadingResponse]


class CustomerWithReadingsResponse(BaseSchema):
    """Returned by DELETE /customers/{id}: what was removed."""

    customer: CustomerResponse
    readings: list[ReadingResponse]
