"""
Sale Repository - parameterized SQL against the sales table.

Every call is bounded by Config.QUERY_TIMEOUT.
"""
import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone

from pydantic import ValidationError
from sqlalchemy import DateTime, Numeric, bindparam, text
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeout

from sales_ledger.config import Config
from sales_ledger.db.database import Database
from sales_ledger.errors import ErrorType
from sales_ledger.exceptions import AppException
from sales_ledger.schemas.sale import SaleCreate, SaleOut

logger = logging.getLogger(__name__)

SELECT_SALES = """
    SELECT id AS sale_id, customer_name, product_name, cell_type, warranty,
           quantity, price, payment_method, created_date
    FROM sales
"""

INSERT_COLUMNS = [
    "customer_name", "product_name", "cell_type", "warranty",
    "quantity", "price", "payment_method",
]

RESULT_TYPES = {
    "price": Numeric(10, 2),
    "created_date": DateTime(timezone=True),
}


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def build_list_query(
    date_from: date | None,
    date_to: date | None,
    limit: int,
    dialect: str = "",
) -> tuple[str, dict]:
    """Build the listing SQL.

    SQLite keeps timestamps as text in more than one layout
    (CURRENT_TIMESTAMP has no fraction, bound values have six digits),
    so there both sides are compared as julianday() numbers.

    Returns:
        tuple: (sql_template, params_dict)
    """
    sql = SELECT_SALES
    params = {}
    conditions = []

    if dialect == "sqlite":
        column, start, end = "julianday(created_date)", "julianday(:start)", "julianday(:end)"
    else:
        column, start, end = "created_date", ":start", ":end"

    if date_from:
        conditions.append(f"{column} >= {start}")
        params["start"] = day_start(date_from)
    if date_to:
        # inclusive: everything before the next midnight
        conditions.append(f"{column} < {end}")
        params["end"] = day_start(date_to + timedelta(days=1))

    if conditions:
        sql += f" WHERE {' AND '.join(conditions)}"

    sql += f" ORDER BY {column} DESC, id DESC"

    if not conditions:
        sql += " LIMIT :limit"
        params["limit"] = limit

    return sql, params


def build_insert(sale: SaleCreate) -> tuple[str, dict]:
    columns = list(INSERT_COLUMNS)
    params = {
        "customer_name": sale.customer_name,
        "product_name": sale.product_name,
        "cell_type": sale.cell_type,
        "warranty": sale.warranty,
        "quantity": sale.quantity,
        "price": sale.price,
        "payment_method": sale.payment_method,
    }
    # Leave created_date out entirely so the column default applies
    if sale.created_date is not None:
        columns.append("created_date")
        params["created_date"] = sale.created_date

    placeholders = ", ".join(f":{col}" for col in columns)
    sql = f"INSERT INTO sales ({', '.join(columns)}) VALUES ({placeholders})"
    return sql, params


def clear_statements(dialect: str) -> list[str]:
    """Statements that empty the table and rewind the id sequence."""
    if dialect == "postgresql":
        return ["TRUNCATE TABLE sales RESTART IDENTITY"]
    if dialect == "sqlite":
        return [
            "DELETE FROM sales",
            "DELETE FROM sqlite_sequence WHERE name = 'sales'",
        ]
    return ["TRUNCATE TABLE sales"]


class SaleRepository:
    """List, create and delete sales through a shared Database."""

    def __init__(self, database: Database, timeout: float | None = None):
        self.database = database
        self.timeout = timeout if timeout is not None else Config.QUERY_TIMEOUT

    async def _bounded(self, coro, error_type: ErrorType, action: str):
        """Run a store call under the timeout, mapping failures to AppException."""
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except AppException:
            raise
        except (asyncio.TimeoutError, PoolTimeout, OSError) as e:
            reason = str(e) or f"timed out after {self.timeout}s"
            logger.error(f"{action}: database unavailable ({reason})")
            raise AppException(
                ErrorType.STORE_UNAVAILABLE,
                f"Database unavailable: {action}: {reason}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"{action} failed: {e}")
            raise AppException(error_type, f"{action} failed: {e}") from e

    async def list_sales(
        self,
        date_from: date | None = None,
        date_to: date | None = None,
        limit: int | None = None,
    ) -> list[SaleOut]:
        """Sales newest first; capped at `limit` rows when no range is given."""
        sql, params = build_list_query(
            date_from, date_to, limit or Config.LIST_LIMIT, self.database.dialect
        )
        statement = text(sql)
        for name in ("start", "end"):
            if name in params:
                statement = statement.bindparams(bindparam(name, type_=DateTime(timezone=True)))
        statement = statement.columns(**RESULT_TYPES)
        return await self._bounded(self._fetch(statement, params), ErrorType.QUERY_ERROR, "List sales")

    async def _fetch(self, statement, params: dict) -> list[SaleOut]:
        async with self.database.engine.connect() as conn:
            result = await conn.execute(statement, params)
            rows = result.fetchall()

        sales = []
        for row in rows:
            try:
                sales.append(SaleOut.model_validate(dict(row._mapping)))
            except ValidationError as e:
                # One bad row fails the whole listing
                logger.error(f"Cannot read sale row {row._mapping.get('sale_id')}: {e}")
                raise AppException(
                    ErrorType.SCAN_ERROR,
                    f"Cannot read sale {row._mapping.get('sale_id')}: {e}"
                ) from e
        return sales

    async def create_sale(self, sale: SaleCreate):
        sql, params = build_insert(sale)
        statement = text(sql)
        if "created_date" in params:
            statement = statement.bindparams(bindparam("created_date", type_=DateTime(timezone=True)))
        statement = statement.bindparams(bindparam("price", type_=Numeric(10, 2)))

        await self._bounded(self._write(statement, params), ErrorType.INSERT_ERROR, "Insert sale")
        logger.info(f"Sale recorded: {sale.product_name} x{sale.quantity} for {sale.customer_name}")

    async def delete_sale(self, sale_id: int):
        """Delete one sale; a missing id is not an error."""
        statement = text("DELETE FROM sales WHERE id = :sale_id")
        await self._bounded(
            self._write(statement, {"sale_id": sale_id}), ErrorType.DELETE_ERROR, "Delete sale"
        )
        logger.info(f"Sale {sale_id} deleted")

    async def clear_all(self):
        """Delete every sale and reset the id sequence. Irreversible."""
        statements = [text(sql) for sql in clear_statements(self.database.dialect)]
        await self._bounded(self._write_many(statements), ErrorType.DELETE_ERROR, "Clear sales")
        logger.warning("All sales cleared and id sequence reset")

    async def _write(self, statement, params: dict):
        async with self.database.engine.begin() as conn:
            await conn.execute(statement, params)

    async def _write_many(self, statements: list):
        async with self.database.engine.begin() as conn:
            for statement in statements:
                await conn.execute(statement)
