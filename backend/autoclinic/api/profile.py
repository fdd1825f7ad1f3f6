import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from autoclinic.core.auth import AuthenticatedIdentity, get_current_identity
from autoclinic.core.database import get_db
from autoclinic.schemas.profile import ProfileResponse, ProfileUpdate
from autoclinic.services.accounts import get_provider, update_account

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


def _provider_for(identity: AuthenticatedIdentity):
    provider = get_provider(identity.account_type) or get_provider("User")
    return provider


def _to_response(account) -> ProfileResponse:
    notifications = getattr(account, "notifications_enabled", None)
    return ProfileResponse(
        id=account.id,
        name=account.name or "",
        email=account.email or "",
        phone=account.phone or "",
        avatar=account.avatar or "",
        role=account.role,
        notifications_enabled=notifications if isinstance(notifications, bool) else True,
    )


@router.get("", response_model=ProfileResponse)
def get_profile(
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    provider = _provider_for(identity)
    account = provider.get(db, identity.id)
    if account is None:
        raise HTTPException(status_code=404, detail=f"{provider.account_type} not found")
    return _to_response(account)


@router.put("", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    identity: AuthenticatedIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    provider = _provider_for(identity)
    values = payload.model_dump(exclude_none=True)
    if not hasattr(provider.model, "notifications_enabled"):
        values.pop("notifications_enabled", None)

    try:
        account = update_account(db, provider.model, identity.id, values)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email is already in use")
    if account is None:
        raise HTTPException(status_code=404, detail=f"{provider.account_type} not found")
    return _to_response(account)
