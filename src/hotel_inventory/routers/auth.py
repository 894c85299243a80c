"""Auth endpoints: register, login/logout, current session."""

from fastapi import APIRouter, Response

from hotel_inventory.config import settings
from hotel_inventory.dependencies import DB, CurrentUser
from hotel_inventory.schemas.auth import LoginIn, RegisterIn, SessionOut, UserOut
from hotel_inventory.schemas.hotel import OkResponse
from hotel_inventory.security import SessionUser, create_access_token, token_ttl
from hotel_inventory.services.auth import authenticate, register_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_session_cookie(response: Response, user: SessionUser) -> None:
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=create_access_token(user),
        max_age=int(token_ttl().total_seconds()),
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite=settings.auth_cookie_samesite,
        path="/",
    )


def _session_out(user: SessionUser) -> SessionOut:
    return SessionOut(user=UserOut(id=user.id, email=user.email, role=user.role))  # type: ignore[arg-type]


@router.post("/register", response_model=OkResponse, status_code=201)
async def register(payload: RegisterIn, db: DB) -> OkResponse:
    await register_user(db, payload)
    return OkResponse()


@router.post("/login", response_model=SessionOut)
async def login(payload: LoginIn, response: Response, db: DB) -> SessionOut:
    user = await authenticate(db, payload)
    _set_session_cookie(response, user)
    return _session_out(user)


@router.post("/logout", response_model=OkResponse)
async def logout(response: Response) -> OkResponse:
    response.delete_cookie(settings.auth_cookie_name, path="/")
    return OkResponse()


@router.get("/me", response_model=SessionOut)
async def me(user: CurrentUser) -> SessionOut:
    """The session as the server sees it; clients use this instead of a cached role."""
    return _session_out(user)
