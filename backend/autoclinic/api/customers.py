from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from autoclinic.core.auth import AuthenticatedIdentity, get_current_identity
from autoclinic.core.database import get_db
from autoclinic.models.customer import Customer
from autoclinic.schemas.customer import CustomerBase, CustomerUpdate, CustomerResponse

router = APIRouter(prefix="/api/customers", tags=["customers"])


def _by_email(db: Session, email: str):
    return db.query(Customer).filter(func.lower(Customer.email) == email.lower()).first()


def _by_identity(db: Session, name: str, vehicle: str):
    return db.query(Customer).filter(
        func.lower(Customer.name) == name.lower(),
        func.lower(Customer.vehicle_details) == vehicle.lower(),
    ).first()


@router.get("/by-email", response_model=CustomerResponse)
def get_by_email(
    email: str = Query(""),
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    email = email.strip()
    if not email:
        raise HTTPException(status_code=400, detail="Missing email")
    customer = _by_email(db, email)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("/ensure", response_model=CustomerResponse)
def ensure_customer(
    payload: CustomerBase,
    response: Response,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    """Find a customer by email, then by (name, vehicle); create one if neither matches."""
    name = payload.name.strip()
    vehicle = payload.vehicle_details.strip()
    email = (payload.email or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")
    if not vehicle:
        raise HTTPException(status_code=400, detail="Vehicle details are required")

    found = _by_email(db, email) if email else None
    if found is None:
        found = _by_identity(db, name, vehicle)

    extra = payload.model_dump(exclude_none=True, exclude={"name", "vehicle_details", "email"})
    if found is not None:
        found.name = name
        found.vehicle_details = vehicle
        if email:
            found.email = email
        for key, value in extra.items():
            setattr(found, key, value)
        db.commit()
        db.refresh(found)
        return found

    customer = Customer(name=name, vehicle_details=vehicle, email=email, **extra)
    db.add(customer)
    try:
        db.commit()
    except IntegrityError:
        # lost a race on (name, vehicle_details)
        db.rollback()
        again = _by_identity(db, name, vehicle)
        if again is None:
            raise
        return again
    db.refresh(customer)
    response.status_code = status.HTTP_201_CREATED
    return customer


@router.get("", response_model=list[CustomerResponse])
def list_customers(
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    return db.query(Customer).order_by(Customer.name.asc()).all()


@router.get("/search", response_model=list[CustomerResponse])
def search_customers(
    name: str = Query(""),
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    q = name.strip()
    if not q:
        raise HTTPException(status_code=400, detail="Missing name")
    pattern = f"%{q.lower()}%"
    return (
        db.query(Customer)
        .filter(or_(
            func.lower(Customer.name).like(pattern),
            func.lower(Customer.vehicle_details).like(pattern),
            func.lower(Customer.email).like(pattern),
        ))
        .order_by(Customer.name.asc())
        .limit(6)
        .all()
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    customer = db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerBase,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    if not payload.name.strip() or not payload.vehicle_details.strip():
        raise HTTPException(status_code=400, detail="Name and vehicle details are required")
    customer = Customer(**payload.model_dump(exclude_none=True))
    db.add(customer)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Customer with this name and vehicle already exists")
    db.refresh(customer)
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    customer = db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    for key, value in payload.model_dump(exclude_none=True).items():
        setattr(customer, key, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Customer with this name and vehicle already exists")
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    customer = db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    db.delete(customer)
    db.commit()
    return {"message": "Customer deleted"}
