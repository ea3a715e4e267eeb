import argparse
import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app import models  # noqa: F401
from app.config import settings
from app.exceptions import TransactionAborted
from app.models.base import Base
from app.utils.logger import setup_logger

logger = setup_logger("db")


def _normalize_database_url(url: str) -> str:
    """Force the async driver for the supported backends."""
    if url.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        return url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    raise ValueError(f"Unsupported database URL prefix: {url}")


if not settings.app_database_url:
    raise ValueError(
        "PROJECT_HUB_DATABASE_URL environment variable not set for Application DB"
    )

settings.app_database_url = _normalize_database_url(settings.app_database_url)
IS_POSTGRES = settings.app_database_url.startswith("postgresql")

logger.debug(f"Application DB URL: {settings.app_database_url}")
if IS_POSTGRES:
    app_engine = create_async_engine(
        settings.app_database_url,
        pool_pre_ping=True,
        pool_size=20,
        max_overflow=30,
        pool_timeout=60,
        pool_recycle=300,
        echo=False,
        connect_args={
            "timeout": 30,
            "server_settings": {"search_path": f"{settings.schema_name}, public"},
        },
    )
else:
    # One connection per session: SQLite connections must not be shared
    # between event loops (the test client runs its own).
    app_engine = create_async_engine(
        settings.app_database_url, poolclass=NullPool, echo=False
    )

AppAsyncSessionLocal = async_sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=app_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@asynccontextmanager
async def transaction(
    db: AsyncSession | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Unit of work: commit when the block exits normally, roll back otherwise.

    When `db` is given, the block joins that session's transaction and the
    outermost owner commits. Store errors are re-raised as TransactionAborted;
    application errors pass through unchanged after the rollback.
    """
    if db is not None:
        yield db
        return

    async with AppAsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Transaction rolled back after store error: {e}", exc_info=True)
            raise TransactionAborted() from e
        except BaseException:
            await session.rollback()
            raise


async def init_db():
    """Create the schema (PostgreSQL) and all tables that do not exist yet."""
    if not Base.metadata.tables:
        logger.warning("Base.metadata.tables is EMPTY! No tables will be created.")
    else:
        logger.debug(f"Tables registered in Base.metadata: {list(Base.metadata.tables)}")

    async with app_engine.begin() as conn:
        if IS_POSTGRES:
            await conn.execute(
                text(f"CREATE SCHEMA IF NOT EXISTS {settings.schema_name}")
            )
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database schema initialized.")


async def close_db():
    """Closes database connections."""
    logger.info("Closing database connections.")
    await app_engine.dispose()
    logger.info("Database connections closed.")


async def list_tables() -> list[str]:
    """Lists the tables visible to the application engine."""
    async with app_engine.connect() as conn:
        table_names = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_table_names(
                schema=settings.schema_name if IS_POSTGRES else None
            )
        )
    logger.info(f"Tables in application DB: {table_names}")
    return table_names


async def reset_db():
    logger.warning(
        "Attempting to reset the Application database. THIS IS A DESTRUCTIVE OPERATION."
    )
    async with app_engine.begin() as conn:
        if IS_POSTGRES:
            await conn.execute(
                text(f"DROP SCHEMA IF EXISTS {settings.schema_name} CASCADE")
            )
        else:
            await conn.run_sync(Base.metadata.drop_all)
    await init_db()
    logger.info("Application database has been reset and re-initialized.")


async def check_db_connection(engine_to_check=None, db_name="Application DB"):
    """Performs a simple query to check actual DB connectivity."""
    if engine_to_check is None:
        engine_to_check = app_engine

    async with engine_to_check.connect() as conn:
        try:
            result = await conn.execute(text("SELECT 1"))
            if result.scalar_one() == 1:
                logger.info(
                    f"Successfully connected to {db_name} and executed a test query."
                )
                return True
            raise RuntimeError(
                f"Test query to {db_name} returned an unexpected result."
            )
        except Exception as e:
            logger.error(
                f"Failed to execute test query on {db_name}: {e}", exc_info=True
            )
            raise RuntimeError(
                f"Database connectivity check failed for {db_name}."
            ) from e


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Project Hub database initialization utility"
    )
    parser.add_argument(
        "action",
        choices=["init", "reset", "list-tables"],
        help="'init' to create missing tables, 'reset' to drop and recreate "
        "everything, 'list-tables' to show the existing tables.",
    )
    args = parser.parse_args()

    if args.action == "init":
        asyncio.run(init_db())
    elif args.action == "reset":
        confirm = input(
            "WARNING: This will delete all data of the Application DB. Are you sure? (yes/no): "
        )
        if confirm.lower() == "yes":
            asyncio.run(reset_db())
        else:
            logger.info("Application Database reset cancelled by user.")
    elif args.action == "list-tables":
        asyncio.run(list_tables())
    logger.info("Application Database utility script finished.")
