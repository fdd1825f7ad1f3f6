"""
Lookup over the two account tables.

Login and password recovery walk ``ACCOUNT_PROVIDERS`` in order, so primary
users always win over employees that share an email address. Adding a new
account kind means appending a provider, not forking the flows.
"""

from dataclasses import dataclass

from sqlalchemy import update
from sqlalchemy.orm import Session

from autoclinic.core.credentials import hash_credential_patch
from autoclinic.models.employee import Employee
from autoclinic.models.user import User


@dataclass(frozen=True)
class AccountProvider:
    account_type: str
    model: type

    def lookup_by_email(self, db: Session, email: str):
        return db.query(self.model).filter(self.model.email == normalize_email(email)).first()

    def get(self, db: Session, account_id: int):
        return db.get(self.model, account_id)

    def verify(self, account, password: str) -> bool:
        return account.check_password(password)

    def issue_claims(self, account) -> dict:
        return {
            "sub": str(account.id),
            "role": account.role,
            "name": account.name,
            "type": self.account_type,
        }


ACCOUNT_PROVIDERS = (
    AccountProvider("User", User),
    AccountProvider("Employee", Employee),
)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def get_provider(account_type: str) -> AccountProvider | None:
    for provider in ACCOUNT_PROVIDERS:
        if provider.account_type == account_type:
            return provider
    return None


def find_account_by_email(db: Session, email: str):
    """Return ``(account, provider)`` for the first table holding ``email``, else ``(None, None)``."""
    for provider in ACCOUNT_PROVIDERS:
        account = provider.lookup_by_email(db, email)
        if account is not None:
            return account, provider
    return None, None


def authenticate(db: Session, email: str, password: str):
    """Return ``(account, provider)`` for the first table whose account matches, else ``(None, None)``."""
    for provider in ACCOUNT_PROVIDERS:
        account = provider.lookup_by_email(db, email)
        if account is not None and provider.verify(account, password):
            return account, provider
    return None, None


def resolve_account(db: Session, account_id: int, account_type: str):
    provider = get_provider(account_type)
    if provider is None:
        return None
    return provider.get(db, account_id)


def update_account(db: Session, model: type, account_id: int, values: dict):
    """Patch-style update by id. Passwords in the patch are hashed before the UPDATE is issued.

    Returns the refreshed account, or None when no row matched.
    """
    patch = hash_credential_patch(values)
    fields = dict(patch.pop("set", None) or {})
    fields.update(patch.pop("$set", None) or {})
    fields.update(patch)
    if "email" in fields:
        fields["email"] = normalize_email(fields["email"])

    if fields:
        result = db.execute(
            update(model).where(model.id == account_id).values(**fields)
        )
        db.commit()
        if result.rowcount == 0:
            return None
    account = db.get(model, account_id, populate_existing=True)
    return account
