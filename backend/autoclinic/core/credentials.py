"""
Password hashing and verification shared by both account tables.

Stored credentials are bcrypt hashes. Rows written before hashing was
introduced may still hold the plaintext password; those are recognised by
``credential_format`` and upgraded the first time they verify.
"""

import hmac
import re
from enum import Enum

import bcrypt

from autoclinic.core.config import settings

_BCRYPT_MARKER = re.compile(r"^\$2[aby]\$")

# Bootstrap credentials for employees created without one. Not a security
# control: the employee is expected to change it after first login.
DEFAULT_EMPLOYEE_PASSWORDS = {
    "admin": "Jw@admin1!",
    "staff": "Jw@staff1!",
}

# Keys under which a patch may nest its field assignments
_SET_CLAUSE_KEYS = ("set", "$set")


class CredentialFormat(str, Enum):
    HASHED = "hashed"
    LEGACY_PLAINTEXT = "legacy_plaintext"


def credential_format(stored: str | None) -> CredentialFormat:
    if stored and _BCRYPT_MARKER.match(stored):
        return CredentialFormat.HASHED
    return CredentialFormat.LEGACY_PLAINTEXT


def _encode(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases refuse longer input
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, stored: str | None) -> bool:
    if not stored:
        return False
    if credential_format(stored) is CredentialFormat.HASHED:
        try:
            return bcrypt.checkpw(_encode(plain), stored.encode("utf-8"))
        except ValueError:
            # carries the bcrypt marker but is not a well-formed hash
            return False
    return hmac.compare_digest(plain.encode("utf-8"), stored.encode("utf-8"))


def default_password_for(role: str | None) -> str:
    if role == "admin":
        return DEFAULT_EMPLOYEE_PASSWORDS["admin"]
    return DEFAULT_EMPLOYEE_PASSWORDS["staff"]


def hash_credential_patch(values: dict) -> dict:
    """Return a copy of an update patch with any ``password`` value hashed.

    The password may sit at the top level or inside a ``set``/``$set``
    clause. Empty passwords are dropped rather than stored.
    """
    patch = dict(values)
    if "password" in patch:
        if patch["password"]:
            patch["password"] = hash_password(patch["password"])
        else:
            patch.pop("password")
    for key in _SET_CLAUSE_KEYS:
        nested = patch.get(key)
        if isinstance(nested, dict) and "password" in nested:
            patch[key] = hash_credential_patch(nested)
    return patch
