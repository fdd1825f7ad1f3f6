import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from autoclinic.core.auth import AuthenticatedIdentity, get_current_identity
from autoclinic.core.database import get_db
from autoclinic.models.shift import Shift
from autoclinic.schemas.shift import ShiftCreate, ShiftUpdate, ShiftResponse
from autoclinic.services.shifts import compute_totals

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/shifts", tags=["shifts"])

SHIFT_STATUSES = ("Active", "Completed")


def _live_shift_or_404(db: Session, shift_id: int) -> Shift:
    shift = db.get(Shift, shift_id)
    if not shift or shift.deleted_at is not None:
        raise HTTPException(status_code=404, detail="Shift not found")
    return shift


@router.get("", response_model=list[ShiftResponse])
def list_shifts(
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    return (
        db.query(Shift)
        .filter(Shift.deleted_at.is_(None))
        .order_by(Shift.created_at.desc(), Shift.id.desc())
        .limit(100)
        .all()
    )


@router.get("/last/{worker}", response_model=ShiftResponse)
def last_active_shift(
    worker: str,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    shift = (
        db.query(Shift)
        .filter(Shift.worker == worker, Shift.status == "Active", Shift.deleted_at.is_(None))
        .order_by(Shift.created_at.desc(), Shift.id.desc())
        .first()
    )
    if not shift:
        raise HTTPException(status_code=404, detail="No active shift found")
    return shift


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def clock_in(
    payload: ShiftCreate,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    shift = Shift(
        worker=payload.worker.strip(),
        date=payload.date,
        clock_in=payload.clock_in.strip(),
        status="Active",
    )
    db.add(shift)
    db.commit()
    db.refresh(shift)
    return shift


@router.put("/{shift_id}", response_model=ShiftResponse)
def update_shift(
    shift_id: int,
    payload: ShiftUpdate,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    """Record lunch start/end or clock-out. Clocking out computes the worked hours."""
    shift = _live_shift_or_404(db, shift_id)
    if payload.status is not None and payload.status not in SHIFT_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid shift status")

    if payload.lunch_start is not None:
        shift.lunch_start = payload.lunch_start.strip()
    if payload.lunch_end is not None:
        shift.lunch_end = payload.lunch_end.strip()
    if payload.clock_out is not None:
        shift.clock_out = payload.clock_out.strip()

    if payload.clock_out and payload.clock_out.strip():
        shift.hours, shift.hours_decimal = compute_totals(
            shift.date, shift.clock_in, shift.clock_out, shift.lunch_start, shift.lunch_end,
        )
        shift.status = payload.status or "Completed"
    elif payload.status:
        shift.status = payload.status

    db.commit()
    db.refresh(shift)
    return shift


@router.delete("/{shift_id}")
def delete_shift(
    shift_id: int,
    db: Session = Depends(get_db),
    identity: AuthenticatedIdentity = Depends(get_current_identity),
):
    shift = _live_shift_or_404(db, shift_id)
    shift.deleted_at = datetime.now(timezone.utc)
    shift.deleted_by = identity.name or str(identity.id)
    db.commit()
    logger.info("Shift %s soft-deleted by %s", shift_id, shift.deleted_by)
    return {"ok": True, "id": shift_id}
