import asyncio
import logging

from sqlalchemy import Column, inspect, text
from sqlalchemy.engine import Dialect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import AsyncAdaptedQueuePool

from sales_ledger.config import Config
from sales_ledger.errors import ErrorType
from sales_ledger.exceptions import AppException

logger = logging.getLogger(__name__)

# URL scheme -> async SQLAlchemy driver
ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def get_async_url(url: str) -> str:
    """Convert a plain database URL to its async SQLAlchemy form."""
    scheme, sep, rest = url.partition("://")
    if not sep or scheme not in ASYNC_DRIVERS:
        return url
    driver = ASYNC_DRIVERS[scheme]
    if driver == "postgresql+asyncpg":
        # Hosted Postgres hands out libpq style URLs; asyncpg spells it "ssl"
        rest = rest.replace("sslmode=", "ssl=")
    return f"{driver}://{rest}"


def column_ddl(column: Column, dialect: Dialect) -> str | None:
    """Render a column for ALTER TABLE ... ADD COLUMN.

    Returns None when the column can't be added to a populated table,
    i.e. it is NOT NULL without a constant default.
    """
    ddl = f"{column.name} {column.type.compile(dialect=dialect)}"
    default = column.server_default
    if default is not None:
        if not isinstance(default.arg, str):
            return None
        value = default.arg.replace("'", "''")
        ddl += f" DEFAULT '{value}'"
    elif not column.nullable:
        return None
    if not column.nullable:
        ddl += " NOT NULL"
    return ddl


class Database:
    """Owns the pooled async engine for one database."""

    def __init__(self, url: str | None = None):
        self.url = url or Config.DATABASE_URL
        self.engine: AsyncEngine | None = None

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name if self.engine else ""

    async def connect(self):
        """Create the engine and make sure the store answers."""
        if self.engine:
            return

        self.engine = create_async_engine(
            get_async_url(self.url),
            echo=False,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=Config.POOL_SIZE,
            max_overflow=Config.POOL_MAX_OVERFLOW,
            pool_recycle=Config.POOL_RECYCLE,
            pool_timeout=Config.QUERY_TIMEOUT,
            pool_pre_ping=True,
        )

        try:
            await asyncio.wait_for(self.ping(), timeout=Config.QUERY_TIMEOUT)
        except Exception as e:
            await self.disconnect()
            raise AppException(ErrorType.STORE_CONNECT_ERROR, f"Cannot connect to database: {e}") from e

        logger.info(
            f"Connected to {self.dialect} "
            f"(pool_size={Config.POOL_SIZE}, max_overflow={Config.POOL_MAX_OVERFLOW}, "
            f"recycle={Config.POOL_RECYCLE}s)"
        )

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None

    async def ping(self):
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def init_schema(self):
        """Create the sales table if missing and add any columns added since."""
        from sales_ledger.models.sale import Sale

        table = Sale.__table__

        def _existing_columns(sync_conn) -> set[str]:
            return {col["name"] for col in inspect(sync_conn).get_columns(table.name)}

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
                existing = await conn.run_sync(_existing_columns)

                for column in table.columns:
                    if column.name in existing:
                        continue
                    ddl = column_ddl(column, self.engine.dialect)
                    if ddl is None:
                        raise AppException(
                            ErrorType.SCHEMA_ERROR,
                            f"Column '{column.name}' is missing and has no constant default"
                        )
                    logger.info(f"Adding column {table.name}.{column.name}")
                    await conn.execute(text(f"ALTER TABLE {table.name} ADD COLUMN {ddl}"))
        except AppException:
            raise
        except SQLAlchemyError as e:
            raise AppException(ErrorType.SCHEMA_ERROR, f"Schema initialization failed: {e}") from e

        logger.info(f"Schema ready: table '{table.name}'")
