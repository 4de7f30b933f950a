from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from typing import AsyncGenerator

from config import settings, IS_PRODUCTION

# Validate production database configuration
if IS_PRODUCTION:
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL must be set in production. SQLite is not allowed in production.")
    if "sqlite" in settings.database_url.lower():
        raise RuntimeError("SQLite is forbidden in production. Use a PostgreSQL DATABASE_URL.")
    if not settings.jwt_secret_key:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")

# Default to SQLite with aiosqlite, but allow override via DATABASE_URL env var
DATABASE_URL = settings.database_url or "sqlite+aiosqlite:///./todos.db"


def to_async_url(url: str) -> str:
    """Point bare postgres URLs at the async psycopg driver."""
    for prefix in ("postgresql://", "postgres://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


# Create async engine
engine = create_async_engine(
    to_async_url(DATABASE_URL),
    echo=False,
    future=True,
)

# Create declarative base for models
Base = declarative_base()

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db():
    """
    Initialize the database by creating all tables.
    This should be called on application startup.
    """
    async with engine.begin() as conn:
        # Import models here to ensure they're registered with Base
        import database_models  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function that yields a database session.

    The session is committed once the request handler returns and rolled back
    if it raises, so every write in a request is all-or-nothing.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
