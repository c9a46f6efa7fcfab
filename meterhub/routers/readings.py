"""
Reading API routes.

  GET    /readings           → all readings, optionally filtered by
                               ?customer=&start=&end=&kindOfMeter=
  GET    /readings/{id}      → one reading
  POST   /readings           → create (id assigned when absent)
  PUT    /readings           → full replace
  DELETE /readings/{id}      → delete; returns the deleted reading
"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meterhub.database import get_db
from meterhub.models.customer import Customer
from meterhub.models.reading import KindOfMeter, Reading
from meterhub.schemas.reading import (
    ReadingCreateRequest,
    ReadingEnvelope,
    ReadingsResponse,
    ReadingUpdateRequest,
)
from meterhub.services.storage.base import get_store

router = APIRouter(prefix="/readings", tags=["readings"])


@router.get("", response_model=ReadingsResponse)
def list_readings(
    customer: Optional[uuid.UUID] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    kind_of_meter: Optional[str] = Query(default=None, alias="kindOfMeter"),
    db: Session = Depends(get_db),
) -> ReadingsResponse:
    """Start and end are inclusive (yyyy-MM-dd). Undated readings never match a date filter."""
    store = get_store(db)
    readings = (
        store.find_readings_by_customer(customer) if customer else store.list_readings()
    )

    if kind_of_meter:
        kind = kind_of_meter.upper()
        if kind not in KindOfMeter.ALL:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid kindOfMeter. Valid values: {sorted(KindOfMeter.ALL)}",
            )
        readings = [r for r in readings if r.kind_of_meter == kind]
    if start is not None:
        readings = [r for r in readings if r.date_of_reading and r.date_of_reading >= start]
    if end is not None:
        readings = [r for r in readings if r.date_of_reading and r.date_of_reading <= end]

    return ReadingsResponse.model_validate({"readings": readings})


@router.get("/{reading_id}", response_model=ReadingEnvelope)
def get_reading(reading_id: uuid.UUID, db: Session = Depends(get_db)) -> ReadingEnvelope:
    reading = _get_reading_or_404(reading_id, db)
    return ReadingEnvelope.model_validate({"reading": reading})


@router.post("", response_model=ReadingEnvelope, status_code=status.HTTP_201_CREATED)
def create_reading(
    payload: ReadingCreateRequest, db: Session = Depends(get_db)
) -> ReadingEnvelope:
    data = payload.reading
    customer = _get_customer_or_404(data.customer.id, db)
    reading = Reading(
        id=data.id or uuid.uuid4(),
        customer=customer,
        comment=data.comment,
        date_of_reading=data.date_of_reading,
        kind_of_meter=data.kind_of_meter,
        meter_count=data.meter_count,
        meter_id=data.meter_id,
        substitute=data.substitute,
    )
    try:
        get_store(db).create_reading(reading)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Reading with ID {data.id} already exists",
        )
    db.refresh(reading)
    return ReadingEnvelope.model_validate({"reading": reading})


@router.put("", response_model=ReadingEnvelope)
def update_reading(
    payload: ReadingUpdateRequest, db: Session = Depends(get_db)
) -> ReadingEnvelope:
    """Full replace — every field of the stored reading is overwritten."""
    data = payload.reading
    reading = _get_reading_or_404(data.id, db)
    customer = _get_customer_or_404(data.customer.id, db)

    reading.customer = customer
    reading.comment = data.comment
    reading.date_of_reading = data.date_of_reading
    reading.kind_of_meter = data.kind_of_meter
    reading.meter_count = data.meter_count
    reading.meter_id = data.meter_id
    reading.substitute = data.substitute
    get_store(db).update_reading(reading)
    db.commit()
    db.refresh(reading)
    return ReadingEnvelope.model_validate({"reading": reading})


@router.delete("/{reading_id}", response_model=ReadingEnvelope)
def delete_reading(reading_id: uuid.UUID, db: Session = Depends(get_db)) -> ReadingEnvelope:
    reading = _get_reading_or_404(reading_id, db)
    snapshot = ReadingEnvelope.model_validate({"reading": reading})
    get_store(db).delete_reading(reading_id)
    db.commit()
    return snapshot


# ── Helpers ───────────────────────────────────────────────────────────────────


def _get_reading_or_404(reading_id: uuid.UUID, db: Session) -> Reading:
    reading = get_store(db).find_reading(reading_id)
    if reading is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reading with ID {reading_id} not found",
        )
    return reading


def _get_customer_or_404(customer_id: uuid.UUID, db: Session) -> Customer:
    customer = get_store(db).find_customer(customer_id)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer with ID {customer_id} not found",
        )
    return customer
