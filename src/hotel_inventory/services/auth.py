"""Registration and login.

Emails are stored lower-cased so the unique constraint is case-insensitive in
practice.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_inventory.exceptions import AuthenticationError, ConflictError
from hotel_inventory.logging import get_logger
from hotel_inventory.repositories.user import get_user_by_email, insert_user
from hotel_inventory.schemas.auth import LoginIn, RegisterIn
from hotel_inventory.security import SessionUser, hash_password, verify_password

logger = get_logger(__name__)


async def register_user(db: AsyncSession, payload: RegisterIn) -> SessionUser:
    email = payload.email.lower()
    if await get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered")

    try:
        user = await insert_user(
            db, email=email, password_hash=hash_password(payload.password), role=payload.role
        )
    except IntegrityError as exc:
        # lost a race with a concurrent registration
        raise ConflictError("Email already registered") from exc

    logger.info("user_registered", user_id=user.id, role=user.role)
    return SessionUser(id=user.id, email=user.email, role=user.role)


async def authenticate(db: AsyncSession, payload: LoginIn) -> SessionUser:
    user = await get_user_by_email(db, payload.email.lower())
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("login_failed")
        raise AuthenticationError("Invalid email or password")

    logger.info("login_succeeded", user_id=user.id)
    return SessionUser(id=user.id, email=user.email, role=user.role)
