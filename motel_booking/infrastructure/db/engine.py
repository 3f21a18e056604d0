from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from motel_booking.config import Settings

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def build_engine(settings: Settings):
    """Async engine for ``settings.database_url``; in-memory SQLite when unset."""
    url = settings.database_url or DEFAULT_DATABASE_URL
    if url.startswith("sqlite"):
        # Local database, no pool tuning.
        return create_async_engine(url, echo=settings.sql_echo)
    return create_async_engine(
        url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def build_sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
