import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from autoclinic.core.config import settings

logger = logging.getLogger(__name__)

# auto_error=False so a missing header gets our own 401 body
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

DEFAULT_ROLE = "user"
DEFAULT_ACCOUNT_TYPE = "User"


@dataclass(frozen=True)
class AuthenticatedIdentity:
    id: int
    role: str
    name: str
    account_type: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def warn_if_insecure_secret() -> bool:
    if settings.uses_default_secret:
        logger.warning(
            "SECRET_KEY is not set; using the built-in development secret. "
            "Session tokens are forgeable. Set SECRET_KEY before running in production."
        )
        return True
    return False


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> AuthenticatedIdentity:
    """Verify signature and expiry and build the identity. Raises JWTError."""
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    sub = payload.get("sub")
    if sub is None:
        raise JWTError("token has no subject")
    try:
        account_id = int(sub)
    except (TypeError, ValueError) as e:
        raise JWTError("token subject is not an account id") from e
    return AuthenticatedIdentity(
        id=account_id,
        role=payload.get("role") or DEFAULT_ROLE,
        name=payload.get("name") or "",
        account_type=payload.get("type") or DEFAULT_ACCOUNT_TYPE,
    )


def get_current_identity(token: str | None = Depends(oauth2_scheme)) -> AuthenticatedIdentity:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization token missing or malformed.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(token)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_roles(*roles: str):
    """Dependency factory rejecting identities whose role is not in ``roles``."""

    def _guard(identity: AuthenticatedIdentity = Depends(get_current_identity)) -> AuthenticatedIdentity:
        if identity.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
        return identity

    return _guard


get_current_admin = require_roles("admin")
