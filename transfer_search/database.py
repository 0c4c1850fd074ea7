"""
Async database configuration with SQLAlchemy
PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local development
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from .config import DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW


def create_engine_for(database_url: str):
    """Create an async engine; pool sizing only applies to server databases."""
    engine_kwargs = {
        "echo": False,  # Set to True for SQL debugging
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=DB_POOL_SIZE,
            max_overflow=DB_MAX_OVERFLOW,
            pool_recycle=3600,
        )
    if "+asyncpg" in database_url:
        engine_kwargs["connect_args"] = {
            "server_settings": {"application_name": "transfer_search"}
        }
    return create_async_engine(database_url, **engine_kwargs)


# Create async engine
engine = create_engine_for(DATABASE_URL)

# Create async session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# Base class for all models
Base = declarative_base()


# Dependency for FastAPI
async def get_session():
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db(bind=None):
    """Create catalog tables (development and tests only)"""
    from . import models  # noqa: F401  registers tables on Base.metadata

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections"""
    await engine.dispose()
