import asyncio
from typing import AsyncGenerator, Awaitable, Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from app.core.config import settings
from app.core.exceptions import PortalError, StorageError, OperationTimeoutError
from app.core.logging_config import logger

# Create base class for models (can be defined before engine)
Base = declarative_base()

# Lazy engine initialization - create on first use to avoid import-time issues
_engine: Optional[AsyncEngine] = None
_async_session_local: Optional[async_sessionmaker[AsyncSession]] = None

T = TypeVar("T")


def get_database_url() -> str:
    """Get properly formatted database URL"""
    db_url = settings.DATABASE_URL
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://")
    return db_url


def get_engine() -> AsyncEngine:
    """
    Get or create the database engine (lazy initialization).

    Connection pooling strategy:
    - SQLite: NullPool (required for thread safety)
    - PostgreSQL Development: NullPool (simpler debugging)
    - PostgreSQL Production: QueuePool with connection limits

    PostgreSQL connections run at DB_ISOLATION_LEVEL (REPEATABLE READ by default)
    so the read-then-write steps of a tenure assignment see one snapshot.
    """
    global _engine
    if _engine is None:
        db_url = get_database_url()

        if "sqlite" in db_url:
            _engine = create_async_engine(
                db_url,
                echo=settings.DB_ECHO,
                connect_args={"check_same_thread": False},
                poolclass=NullPool,
            )
        elif settings.DEBUG or settings.ENVIRONMENT == "development":
            _engine = create_async_engine(
                db_url,
                echo=settings.DB_ECHO,
                poolclass=NullPool,
                isolation_level=settings.DB_ISOLATION_LEVEL,
            )
        else:
            _engine = create_async_engine(
                db_url,
                echo=settings.DB_ECHO,
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_pre_ping=True,  # Verify connections before use
                isolation_level=settings.DB_ISOLATION_LEVEL,
            )
    return _engine


def get_session_local() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory (lazy initialization)"""
    global _async_session_local
    if _async_session_local is None:
        _async_session_local = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )
    return _async_session_local


# Dependency to get DB session
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session - only commits if there are pending changes"""
    session_factory = get_session_local()
    async with session_factory() as session:
        try:
            yield session
            if session.new or session.dirty or session.deleted:
                await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def run_atomic(
    session: AsyncSession,
    work: Callable[[], Awaitable[T]],
    *,
    operation: str,
    timeout: Optional[float] = None,
    translate: Optional[Callable[[IntegrityError], Optional[PortalError]]] = None,
) -> T:
    """
    Run `work` as one unit of work: commit once on success, roll back on any failure.

    - IntegrityError is passed to `translate` so callers can map constraint
      violations to domain conflicts; unmapped ones become StorageError.
    - Other SQLAlchemy errors become StorageError (original chained).
    - Domain errors, cancellation and the deadline roll back and propagate.

    Raises:
        OperationTimeoutError: if the deadline passes before commit
    """
    deadline = settings.TENURE_OPERATION_TIMEOUT if timeout is None else timeout

    async def _unit() -> T:
        try:
            result = await work()
            await session.commit()
            return result
        except IntegrityError as exc:
            await session.rollback()
            mapped = translate(exc) if translate else None
            if mapped is None:
                logger.log_error_with_context(exc, context=operation)
                raise StorageError(f"{operation} violated a storage constraint", operation=operation) from exc
            raise mapped from exc
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.log_error_with_context(exc, context=operation)
            raise StorageError(f"{operation} failed: {type(exc).__name__}", operation=operation) from exc
        except (Exception, asyncio.CancelledError):
            await session.rollback()
            raise

    try:
        return await asyncio.wait_for(_unit(), timeout=deadline)
    except asyncio.TimeoutError:
        logger.warning(f"[DB] {operation} exceeded {deadline}s deadline, rolled back")
        raise OperationTimeoutError(operation, deadline)


# Database initialization
async def init_db():
    """Initialize database"""
    eng = get_engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connection"""
    global _engine, _async_session_local
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_local = None
