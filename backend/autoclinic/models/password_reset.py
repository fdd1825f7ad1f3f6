from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Index

from autoclinic.core.database import Base

ACCOUNT_TYPES = ("User", "Employee")


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, index=True)
    # weak reference: resolved against users or employees depending on account_type
    account_id = Column(Integer, nullable=False)
    account_type = Column(String(20), nullable=False)
    # SHA-256 hex digest of the raw token; the raw token is never stored
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    expires_at = Column(DateTime, nullable=False, index=True)
    used_at = Column(DateTime, nullable=True, default=None)

    __table_args__ = (
        Index("idx_password_reset_account", "account_id", "account_type"),
    )
