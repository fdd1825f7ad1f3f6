from sqlalchemy import Column, Integer, String, Boolean, Float, event
from sqlalchemy.orm import validates

from autoclinic.core.credentials import default_password_for
from autoclinic.core.database import Base
from autoclinic.models.account import AccountMixin

EMPLOYEE_ROLES = ("admin", "staff")


class Employee(AccountMixin, Base):
    __tablename__ = "employees"

    role = Column(String(20), nullable=False, default="staff")
    hourly_rate = Column(Float, default=0)
    clocked_in = Column(Boolean, default=False)
    created_by = Column(Integer, nullable=True)  # User id, not enforced

    @validates("email")
    def _validate_email(self, key, value):
        return self._normalize_email(value)

    @validates("role")
    def _validate_role(self, key, value):
        if value not in EMPLOYEE_ROLES:
            raise ValueError(f"role must be one of {', '.join(EMPLOYEE_ROLES)}")
        return value

    @validates("password")
    def _validate_password(self, key, value):
        return self._hash_on_assign(value)


@event.listens_for(Employee, "before_insert")
def _assign_default_password(mapper, connection, target):
    if not target.password:
        # assignment goes through the validator, so the default is hashed
        target.password = default_password_for(target.role or "staff")
