"""Password hashing and session tokens.

Tokens are HS256 JWTs carrying the subject id, email and role. The role in a
verified token is what the write endpoints check.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext  # type: ignore[import-untyped]

from hotel_inventory.config import settings
from hotel_inventory.exceptions import AuthenticationError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

ROLES = ("admin", "user")


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def token_ttl() -> timedelta:
    return timedelta(days=settings.auth_token_ttl_days)


def create_access_token(user: SessionUser, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(UTC) + (expires_delta if expires_delta is not None else token_ttl())
    claims: dict[str, Any] = {"sub": user.id, "email": user.email, "role": user.role, "exp": expire}
    return jwt.encode(claims, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> SessionUser:
    """Verify ``token`` and return the session it carries.

    Raises AuthenticationError for bad signatures, expired tokens and tokens
    missing a subject or carrying an unknown role.
    """
    try:
        payload = jwt.decode(token, settings.auth_secret_key, algorithms=[settings.auth_algorithm])
    except JWTError as exc:
        raise AuthenticationError("Invalid token") from exc

    subject = payload.get("sub")
    role = payload.get("role")
    if not subject or role not in ROLES:
        raise AuthenticationError("Invalid token")
    return SessionUser(id=subject, email=payload.get("email", ""), role=role)
