from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import object_session

from autoclinic.core.credentials import (
    CredentialFormat, credential_format, hash_password, verify_password,
)


def _utcnow():
    return datetime.now(timezone.utc)


class AccountMixin:
    """Columns and credential behaviour shared by User and Employee."""

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(128))
    phone = Column(String(50), default="")
    avatar = Column(String(1024), default="")
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    @staticmethod
    def _normalize_email(value):
        return value.strip().lower() if value else value

    @staticmethod
    def _hash_on_assign(value):
        # empty values stay empty so the insert hook can apply a default
        return hash_password(value) if value else value

    def check_password(self, candidate: str) -> bool:
        """Verify ``candidate``; a matching legacy plaintext credential is re-hashed and committed."""
        stored = self.password or ""
        if not verify_password(candidate, stored):
            return False
        if credential_format(stored) is CredentialFormat.LEGACY_PLAINTEXT:
            self.password = candidate
            db = object_session(self)
            if db is not None:
                db.commit()
        return True
