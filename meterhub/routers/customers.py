"""
Customer API routes.

  GET    /customers          → all customers
  GET    /customers/{id}     → one customer
  POST   /customers          → create (id assigned when absent)
  PUT    /customers          → full update
  DELETE /customers/{id}     → delete customer and its readings; returns both
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meterhub.database import get_db
from meterhub.models.customer import Customer
from meterhub.schemas.customer import (
    CustomerCreateRequest,
    CustomerEnvelope,
    CustomersResponse,
    CustomerUpdateRequest,
)
from meterhub.schemas.reading import CustomerWithReadingsResponse
from meterhub.services.storage.base import get_store

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=CustomersResponse)
def list_customers(db: Session = Depends(get_db)) -> CustomersResponse:
    customers = get_store(db).list_customers()
    return CustomersResponse.model_validate({"customers": customers})


@router.get("/{customer_id}", response_model=CustomerEnvelope)
def get_customer(customer_id: uuid.UUID, db: Session = Depends(get_db)) -> CustomerEnvelope:
    customer = _get_customer_or_404(customer_id, db)
    return CustomerEnvelope.model_validate({"customer": customer})


@router.post("", response_model=CustomerEnvelope, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreateRequest, db: Session = Depends(get_db)
) -> CustomerEnvelope:
    data = payload.customer
    customer = Customer(
        id=data.id,
        first_name=data.first_name,
        last_name=data.last_name,
        birth_date=data.birth_date,
        gender=data.gender,
    )
    try:
        get_store(db).create_customer(customer)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Customer with ID {data.id} already exists",
        )
    db.refresh(customer)
    return CustomerEnvelope.model_validate({"customer": customer})


@router.put("", response_model=CustomerEnvelope)
def update_customer(
    payload: CustomerUpdateRequest, db: Session = Depends(get_db)
) -> CustomerEnvelope:
    data = payload.customer
    customer = _get_customer_or_404(data.id, db)

    customer.first_name = data.first_name
    customer.last_name = data.last_name
    customer.birth_date = data.birth_date
    customer.gender = data.gender
    get_store(db).update_customer(customer)
    db.commit()
    db.refresh(customer)
    return CustomerEnvelope.model_validate({"customer": customer})


@router.delete("/{customer_id}", response_model=CustomerWithReadingsResponse)
def delete_customer(
    customer_id: uuid.UUID, db: Session = Depends(get_db)
) -> CustomerWithReadingsResponse:
    """
    Delete a customer. Their readings are deleted with them; the response is a
    snapshot of both, taken before the delete.
    """
    store = get_store(db)
    customer = _get_customer_or_404(customer_id, db)
    snapshot = CustomerWithReadingsResponse.model_validate(
        {"customer": customer, "readings": store.find_readings_by_customer(customer_id)}
    )
    store.delete_customer(customer_id)
    db.commit()
    return snapshot


# ── Helpers ───────────────────────────────────────────────────────────────────


def _get_customer_or_404(customer_id: uuid.UUID, db: Session) -> Customer:
    customer = get_store(db).find_customer(customer_id)
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer with ID {customer_id} not found",
        )
    return customer
