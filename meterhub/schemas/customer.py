"""
Customer schemas — request and response shapes for /customers.

Single-customer payloads are wrapped: {"customer": {...}}.
"""

import uuid
from datetime import date
from typing import Optional

from pydantic import Field, field_validator

from meterhub.models.customer import Gender
from meterhub.schemas.common import BaseSchema


class CustomerBase(BaseSchema):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    birth_date: Optional[date] = None
    gender: str = Gender.UNKNOWN

    @field_validator("gender")
    @classmethod
    def validate_gender(cls, v: str) -> str:
        v = v.upper()
        if v not in Gender.ALL:
            raise ValueError(f"gender must be one of: {sorted(Gender.ALL)}")
        return v


class CustomerCreate(CustomerBase):
    """id is optional on create — the server assigns one when absent."""

    id: Optional[uuid.UUID] = None


class CustomerUpdate(CustomerBase):
    id: uuid.UUID


class CustomerResponse(BaseSchema):
    """Outbound shape. Imported rows may carry empty names, so nothing is re-validated."""

    id: uuid.UUID
    first_name: str
    last_name: str
    birth_date: Optional[date] = None
    gender: str


class CustomerCreateRequest(BaseSchema):
    customer: CustomerCreate


class CustomerUpdateRequest(BaseSchema):
    customer: CustomerUpdate


class CustomerEnvelope(BaseSchema):
    customer: CustomerResponse


class CustomersResponse(BaseSchema):
    customers: list[CustomerResponse]
