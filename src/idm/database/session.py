import logging

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from idm.config.settings import Settings
from .base import Base

logger = logging.getLogger(__name__)


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Build the async engine for the configured database.

    Pool sizing only applies to server databases; SQLite (used by the test
    suite) keeps SQLAlchemy's default pool for the dialect.
    """
    url = make_url(settings.SQLALCHEMY_DATABASE_URL)
    options: dict = {
        "echo": settings.SQLALCHEMY_ECHO,
        "pool_pre_ping": True,  # Enables connection health checks
    }
    if url.get_backend_name() != "sqlite":
        options["pool_size"] = settings.DB_POOL_SIZE

    logger.info(
        "database.engine.created",
        extra={"backend": url.get_backend_name(), "host": url.host, "database": url.database},
    )
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: responses are built from entities after commit.
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create the employee and role tables if they do not exist yet."""
    # Import for the side effect of registering the tables on Base.metadata.
    from idm import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ping(engine: AsyncEngine) -> None:
    """Round-trip a trivial query; raises whatever the driver raises."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
