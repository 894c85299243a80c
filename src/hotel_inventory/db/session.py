import time
from collections.abc import AsyncGenerator, Callable
from typing import Any

from sqlalchemy import MetaData, event
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Session

from hotel_inventory.config import Settings, settings
from hotel_inventory.logging import get_logger

logger = get_logger(__name__)

# Predictable constraint names so Alembic autogenerate produces stable migrations.
NAMING_CONVENTION: dict[str, str] = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# session.info key holding callbacks that run once the transaction commits
POST_COMMIT_KEY = "post_commit"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Base.metadata tracks every registered table; Alembic's env.py points
    target_metadata at it.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def install_query_timing(engine: AsyncEngine, slow_ms: float) -> None:
    """Log every statement's duration; ``slow_query`` warns above ``slow_ms``."""

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _start(
        conn: Connection, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        conn.info.setdefault("query_start", []).append(time.perf_counter())

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def _finish(
        conn: Connection, cursor: Any, statement: str, parameters: Any, context: Any, executemany: bool
    ) -> None:
        elapsed_ms = (time.perf_counter() - conn.info["query_start"].pop()) * 1000
        # statement text only; bound values stay out of the logs
        query = " ".join(statement.split())[:200]
        if elapsed_ms > slow_ms:
            logger.warning("slow_query", duration_ms=round(elapsed_ms, 1), query=query)
        else:
            logger.debug("db_query", duration_ms=round(elapsed_ms, 1), query=query)


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for ``config.database_url``.

    Server databases get a tuned connection pool shared by all requests.
    SQLite (aiosqlite) picks its own pool class and rejects the sizing options.
    """
    kwargs: dict[str, Any] = {"echo": config.db_echo}
    if not config.is_sqlite:
        kwargs |= {
            "pool_size": config.db_pool_size,
            "max_overflow": config.db_max_overflow,
            "pool_timeout": config.db_pool_timeout,
            "pool_recycle": config.db_pool_recycle,
            "pool_pre_ping": config.db_pool_pre_ping,
        }
    if config.database_url.startswith("postgresql+asyncpg"):
        # asyncpg kills statements running longer than this
        kwargs["connect_args"] = {"command_timeout": config.db_statement_timeout}
    new_engine = create_async_engine(config.database_url, **kwargs)
    install_query_timing(new_engine, config.slow_query_ms)
    return new_engine


engine = build_engine(settings)

# expire_on_commit=False keeps loaded rows readable after commit without
# implicit (sync) refresh I/O.
async_session = async_sessionmaker(engine, expire_on_commit=False)


def on_commit(session: AsyncSession, callback: Callable[[], Any]) -> None:
    """Run ``callback`` after ``session``'s current transaction commits.

    Dropped without running if the transaction rolls back.
    """
    session.info.setdefault(POST_COMMIT_KEY, []).append(callback)


@event.listens_for(Session, "after_commit")
def _run_post_commit(session: Session) -> None:
    for callback in session.info.pop(POST_COMMIT_KEY, []):
        callback()


@event.listens_for(Session, "after_rollback")
def _discard_post_commit(session: Session) -> None:
    session.info.pop(POST_COMMIT_KEY, None)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency providing one session per request.

    Commits on success, rolls back on exception. Services and repositories
    never call commit() or rollback() themselves.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def shutdown() -> None:
    """Close all pooled connections. Called from the app lifespan."""
    await engine.dispose()
