from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hotel_inventory.cache import ResultCache
from hotel_inventory.config import settings
from hotel_inventory.db.session import shutdown
from hotel_inventory.dependencies import DB
from hotel_inventory.exceptions import DomainError, TransientStoreError
from hotel_inventory.logging import get_logger
from hotel_inventory.middleware import RequestIDMiddleware, RequestTimingMiddleware
from hotel_inventory.routers import auth, hotel
from hotel_inventory.schemas.error import ErrorDetail, ErrorResponse
from hotel_inventory.schemas.hotel import HotelListResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Shutdown: close database connections gracefully."""
    yield
    await shutdown()


app = FastAPI(title="Hotel Inventory", lifespan=lifespan)
app.state.hotel_cache = ResultCache[HotelListResponse](ttl_seconds=settings.hotel_cache_ttl_seconds)

# Last added runs first: CORS, then request ID, then timing.
app.add_middleware(RequestTimingMiddleware, slow_ms=settings.slow_request_ms)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(hotel.router)


def _error_json(code: str, message: str) -> dict[str, object]:
    """Build the standard error envelope as a dict for JSONResponse."""
    return ErrorResponse(error=ErrorDetail(code=code, message=message)).model_dump()


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Map any domain exception to its status and code."""
    if exc.status_code >= 500:
        logger.error("domain_error", error=exc.message, path=request.url.path)
    else:
        logger.info("request_rejected", code=exc.code, error=exc.message, path=request.url.path)
    return JSONResponse(status_code=exc.status_code, content=_error_json(exc.code, exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with the first offending field, e.g. ``body.name: Field required``."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content=_error_json("validation_error", message))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log the store failure and hide its details (SQL text, parameters) from the client."""
    logger.exception("store_error", path=request.url.path, method=request.method)
    error = TransientStoreError()
    return JSONResponse(status_code=error.status_code, content=_error_json(error.code, error.message))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a safe error response."""
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content=_error_json("internal_error", "Internal server error"),
    )


@app.get("/api/health")
async def health(db: DB) -> dict[str, bool]:
    """Health check that also verifies database connectivity."""
    await db.execute(text("SELECT 1"))
    return {"ok": True}
