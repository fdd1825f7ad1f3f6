"""
Password reset token ledger.

Only the SHA-256 digest of a reset secret is stored; the raw value leaves
this module once, for delivery by email. Tokens live for 30 minutes and can
be redeemed once. Issuing a new token for an account deletes the old ones.
This is delete-then-insert without a transaction, so two concurrent requests
for one account can briefly leave two valid tokens; each is still single-use.
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from autoclinic.models.password_reset import PasswordResetToken
from autoclinic.services.accounts import resolve_account

logger = logging.getLogger(__name__)

RESET_TOKEN_LIFETIME = timedelta(minutes=30)


class ResetTokenError(Exception):
    message = "Reset token is invalid."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class TokenNotFound(ResetTokenError):
    message = "Reset token is invalid."


class TokenAlreadyUsed(ResetTokenError):
    message = "Reset token has already been used."


class TokenExpired(ResetTokenError):
    message = "Reset token has expired."


class AccountMissing(ResetTokenError):
    message = "Account not found."


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _delete_tokens_for(db: Session, account_id: int, account_type: str) -> int:
    return db.query(PasswordResetToken).filter(
        PasswordResetToken.account_id == account_id,
        PasswordResetToken.account_type == account_type,
    ).delete(synchronize_session=False)


def issue_reset_token(db: Session, account_id: int, account_type: str) -> str:
    """Create a reset token for the account and return the raw secret."""
    _delete_tokens_for(db, account_id, account_type)

    raw_token = secrets.token_hex(32)  # 256 bits
    now = datetime.now(timezone.utc)
    db.add(PasswordResetToken(
        account_id=account_id,
        account_type=account_type,
        token_hash=hash_token(raw_token),
        created_at=now,
        expires_at=now + RESET_TOKEN_LIFETIME,
    ))
    db.commit()
    logger.info("Issued password reset token for %s %s", account_type, account_id)
    return raw_token


def redeem_reset_token(db: Session, raw_token: str):
    """Burn the token and return the account it refers to.

    Raises a ``ResetTokenError`` subclass when the token cannot be used. The
    caller changes the credential afterwards; if that fails the token stays
    burned and the old password stays valid.
    """
    record = db.query(PasswordResetToken).filter(
        PasswordResetToken.token_hash == hash_token(raw_token),
    ).first()

    if record is None:
        raise TokenNotFound()
    if record.used_at is not None:
        raise TokenAlreadyUsed()
    now = datetime.now(timezone.utc)
    if _as_utc(record.expires_at) < now:
        raise TokenExpired()

    account = resolve_account(db, record.account_id, record.account_type)
    if account is None:
        db.delete(record)
        db.commit()
        logger.warning(
            "Reset token referenced missing %s %s; token removed",
            record.account_type, record.account_id,
        )
        raise AccountMissing()

    record.used_at = now
    db.commit()

    db.query(PasswordResetToken).filter(
        PasswordResetToken.account_id == record.account_id,
        PasswordResetToken.account_type == record.account_type,
        PasswordResetToken.id != record.id,
    ).delete(synchronize_session=False)
    db.commit()
    return account


def purge_expired_tokens(db: Session) -> int:
    """Delete tokens past their expiry. Returns the number of rows removed."""
    now = datetime.now(timezone.utc)
    removed = db.query(PasswordResetToken).filter(
        PasswordResetToken.expires_at < now,
    ).delete(synchronize_session=False)
    db.commit()
    if removed:
        logger.info("Purged %d expired password reset tokens", removed)
    return removed
