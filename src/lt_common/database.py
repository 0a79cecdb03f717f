from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

# One pool for every table. lock_timeout bounds row-lock waits so a stuck
# purchase surfaces as SQLSTATE 55P03 (retried) instead of hanging the request.
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=10,
    connect_args={
        "server_settings": {"lock_timeout": str(settings.DB_LOCK_TIMEOUT_MS)},
    },
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request.

    Closing a session with an open transaction rolls it back, which is what
    resolves an abandoned (timed-out) purchase.
    """
    async with async_session_factory() as session:
        yield session
