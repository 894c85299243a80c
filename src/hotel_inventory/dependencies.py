"""Shared FastAPI dependencies.

Reusable type aliases that routers import. Defined here (not in main.py) to
avoid circular imports when routers are registered in main.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_inventory.config import settings
from hotel_inventory.db.session import get_db
from hotel_inventory.exceptions import AuthenticationError, AuthorizationError
from hotel_inventory.security import SessionUser, decode_access_token
from hotel_inventory.services.hotel import HotelListCache

# Function scope: the session commits before the response goes out, so a
# client reacting to the response already sees the write.
DB = Annotated[AsyncSession, Depends(get_db, scope="function")]


def get_hotel_cache(request: Request) -> HotelListCache:
    """The process-wide listing cache created alongside the app."""
    cache: HotelListCache = request.app.state.hotel_cache
    return cache


Cache = Annotated[HotelListCache, Depends(get_hotel_cache)]


def _session_token(request: Request) -> str | None:
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def get_current_user(request: Request) -> SessionUser:
    token = _session_token(request)
    if not token:
        raise AuthenticationError("Not authenticated")
    return decode_access_token(token)


CurrentUser = Annotated[SessionUser, Depends(get_current_user)]


def require_admin(user: CurrentUser) -> SessionUser:
    if not user.is_admin:
        raise AuthorizationError("Admin role required")
    return user


AdminUser = Annotated[SessionUser, Depends(require_admin)]
