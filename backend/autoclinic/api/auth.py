import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from autoclinic.core.auth import AuthenticatedIdentity, create_access_token, get_current_identity
from autoclinic.core.database import get_db
from autoclinic.models.user import User
from autoclinic.schemas.auth import (
    RegisterRequest, LoginRequest, LoginResponse,
    ForgotPasswordRequest, ResetPasswordRequest,
    MessageResponse, IdentityResponse,
)
from autoclinic.services.accounts import authenticate, find_account_by_email, normalize_email
from autoclinic.services.email import EmailDeliveryError, build_reset_links, send_password_reset_email
from autoclinic.services.reset_tokens import ResetTokenError, issue_reset_token, redeem_reset_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

FORGOT_PASSWORD_ACK = "If this email exists, a reset link has been sent."
PRIVILEGED_ROLES = ("admin",)


# ─── Register (primary users only) ───
@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    email = normalize_email(data.email)
    if not data.name.strip() or not email or not data.password:
        raise HTTPException(status_code=400, detail="Name, email and password are required")

    # privileged roles are never self-assigned
    if (data.role or "").strip().lower() in PRIVILEGED_ROLES:
        raise HTTPException(status_code=400, detail="Role cannot be self-assigned")

    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="Email is already registered")

    user = User(name=data.name.strip(), email=email, password=data.password, role=data.role)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email is already registered")

    logger.info("Registered user %s", user.id)
    return MessageResponse(message="User registered successfully")


# ─── Login (User first, then Employee) ───
@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    account, provider = authenticate(db, data.email, data.password)
    if account is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(provider.issue_claims(account))
    return LoginResponse(
        id=account.id,
        name=account.name,
        email=account.email,
        role=account.role,
        token=token,
        type=provider.account_type,
    )


# ─── Get current identity ───
@router.get("/me", response_model=IdentityResponse)
def get_me(identity: AuthenticatedIdentity = Depends(get_current_identity)):
    return IdentityResponse(
        id=identity.id,
        role=identity.role,
        name=identity.name,
        type=identity.account_type,
    )


# ─── Password Reset: Request (public) ───
@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """
    Step 1 of password reset.
    Always returns the same message to avoid leaking whether an email exists.
    """
    email = normalize_email(data.email)
    if not email:
        raise HTTPException(status_code=400, detail="Email is required")

    try:
        account, provider = find_account_by_email(db, email)
        if account is None:
            return MessageResponse(message=FORGOT_PASSWORD_ACK)

        raw_token = issue_reset_token(db, account.id, provider.account_type)
        _app_link, web_link = build_reset_links(raw_token)
    except Exception:
        logger.exception("Forgot password failed")
        raise HTTPException(status_code=500, detail="Server error while sending reset link.")

    try:
        send_password_reset_email(account.email, web_link)
    except EmailDeliveryError as e:
        # the token stays issued; the response must not differ from the no-account case
        logger.error("Reset email for %s %s was not delivered: %s", provider.account_type, account.id, e)

    return MessageResponse(message=FORGOT_PASSWORD_ACK)


# ─── Password Reset: Confirm (public) ───
@router.post("/reset-password", response_model=MessageResponse)
def reset_password(data: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Step 2 of password reset. Burns the token, then sets the new password."""
    if not data.token or not data.password:
        raise HTTPException(status_code=400, detail="Token and new password are required.")

    try:
        account = redeem_reset_token(db, data.token)
    except ResetTokenError as e:
        raise HTTPException(status_code=400, detail=e.message)

    account.password = data.password
    db.commit()

    logger.info("Password reset completed for %s %s", type(account).__name__, account.id)
    return MessageResponse(message="Password reset successful. You can now log in.")
