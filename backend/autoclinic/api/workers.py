import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from autoclinic.core.auth import AuthenticatedIdentity, get_current_identity, get_current_admin
from autoclinic.core.database import get_db
from autoclinic.models.employee import Employee, EMPLOYEE_ROLES
from autoclinic.schemas.worker import (
    WorkerCreate, WorkerUpdate, WorkerResponse,
    WorkerPasswordReset, WorkerPasswordResetResponse,
)
from autoclinic.services.accounts import normalize_email, update_account
from autoclinic.services.email import EmailDeliveryError, send_temporary_password_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/workers", tags=["workers"])

# Patching these needs an admin; other fields are open to any signed-in worker
_ADMIN_ONLY_FIELDS = {"role", "password"}


def _get_worker_or_404(db: Session, worker_id: int) -> Employee:
    worker = db.get(Employee, worker_id)
    if not worker:
        raise HTTPException(status_code=404, detail="Worker not found")
    return worker


def _check_role(role: str | None):
    if role is not None and role not in EMPLOYEE_ROLES:
        raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(EMPLOYEE_ROLES)}")


@router.get("", response_model=list[WorkerResponse])
def list_workers(
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    return db.query(Employee).order_by(Employee.created_at.desc(), Employee.id.desc()).all()


@router.get("/{worker_id}", response_model=WorkerResponse)
def get_worker(
    worker_id: int,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    return _get_worker_or_404(db, worker_id)


@router.post("", response_model=WorkerResponse, status_code=status.HTTP_201_CREATED)
def create_worker(
    payload: WorkerCreate,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    email = normalize_email(payload.email)
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")
    role = payload.role or "staff"
    _check_role(role)

    if db.query(Employee).filter(Employee.email == email).first():
        raise HTTPException(status_code=400, detail="A worker with this email already exists")

    # no password: the insert hook assigns the role default
    worker = Employee(
        name=payload.name.strip(),
        email=email,
        phone=payload.phone,
        role=role,
        hourly_rate=payload.hourly_rate or 0,
        clocked_in=False,
        created_by=identity.id,
    )
    db.add(worker)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="A worker with this email already exists")
    db.refresh(worker)
    logger.info("Worker %s created by %s %s", worker.id, identity.account_type, identity.id)
    return worker


@router.patch("/{worker_id}/clock", response_model=WorkerResponse)
def toggle_clock(
    worker_id: int,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    worker = _get_worker_or_404(db, worker_id)
    worker.clocked_in = not worker.clocked_in
    db.commit()
    db.refresh(worker)
    return worker


@router.post("/{worker_id}/reset-password", response_model=WorkerPasswordResetResponse)
def reset_worker_password(
    worker_id: int,
    payload: WorkerPasswordReset | None = None,
    db: Session = Depends(get_db),
    admin: AuthenticatedIdentity = Depends(get_current_admin),
):
    """Admin sets a random temporary password, optionally emailing it to the worker."""
    worker = _get_worker_or_404(db, worker_id)

    temporary_password = secrets.token_urlsafe(8)
    worker.password = temporary_password
    db.commit()
    logger.info("Admin %s reset password for worker %s", admin.id, worker.id)

    emailed = False
    if payload and payload.notify and worker.email:
        try:
            send_temporary_password_email(worker.email, worker.name, temporary_password)
            emailed = True
        except EmailDeliveryError as e:
            logger.warning("Temporary password email to worker %s failed: %s", worker.id, e)

    return WorkerPasswordResetResponse(temporary_password=temporary_password, emailed=emailed)


@router.put("/{worker_id}", response_model=WorkerResponse)
def update_worker(
    worker_id: int,
    payload: WorkerUpdate,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    values = payload.model_dump(exclude_none=True)
    if not identity.is_admin and _ADMIN_ONLY_FIELDS.intersection(values):
        raise HTTPException(status_code=403, detail="Admin only")
    _check_role(values.get("role"))
    try:
        worker = update_account(db, Employee, worker_id, values)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="A worker with this email already exists")
    if worker is None:
        raise HTTPException(status_code=404, detail="Worker not found")
    return worker


@router.delete("/{worker_id}")
def delete_worker(
    worker_id: int,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    worker = _get_worker_or_404(db, worker_id)
    db.delete(worker)
    db.commit()
    return {"message": "Worker deleted"}
