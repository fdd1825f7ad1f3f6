from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import validates

from autoclinic.core.database import Base
from autoclinic.models.account import AccountMixin


class User(AccountMixin, Base):
    __tablename__ = "users"

    role = Column(String(30), nullable=True)
    notifications_enabled = Column(Boolean, default=True)

    @validates("email")
    def _validate_email(self, key, value):
        return self._normalize_email(value)

    @validates("password")
    def _validate_password(self, key, value):
        return self._hash_on_assign(value)
