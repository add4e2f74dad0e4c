import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sales_ledger.config import Config
from sales_ledger.db.database import Database
from sales_ledger.schemas.sale import SaleCreate
from sales_ledger.services.sale_repository import SaleRepository

logger = logging.getLogger(__name__)

# Sample catalogue: (product, cell type, warranty, unit price)
PRODUCTS_DATA = [
    ("Titan Watch", "", "1 year", Decimal("2499.00")),
    ("Casio Digital Watch", "CR2025", "1 year", Decimal("1299.50")),
    ("Wall Clock", "AA", "6 months", Decimal("549.00")),
    ("Bluetooth Speaker", "", "1 year", Decimal("1799.00")),
    ("Earphones", "", "6 months", Decimal("399.00")),
    ("Watch Battery", "SR626SW", "", Decimal("60.00")),
    ("Remote Cell", "AAA", "", Decimal("25.00")),
    ("Power Bank", "Li-ion 10000mAh", "6 months", Decimal("999.00")),
]

CUSTOMERS = ["Asha", "Ravi", "Imran", "Priya", "Walk-in"]

PAYMENT_METHODS = ["CASH", "UPI", "CARD"]


def generate_sales(days: int = 7, now: datetime | None = None) -> list[SaleCreate]:
    """A few random sales per day over the last `days` days."""
    now = now or datetime.now(timezone.utc)
    sales = []
    for offset in range(days):
        day = now - timedelta(days=offset)
        for _ in range(random.randint(3, 8)):
            product, cell_type, warranty, price = random.choice(PRODUCTS_DATA)
            created = day.replace(hour=random.randint(9, 20), minute=random.randint(0, 59))
            sales.append(SaleCreate(
                customer_name=random.choice(CUSTOMERS),
                product_name=product,
                cell_type=cell_type,
                warranty=warranty,
                quantity=random.randint(1, 3),
                price=price,
                payment_method=random.choice(PAYMENT_METHODS),
                created_date=min(created, now),
            ))
    return sales


async def seed_database(database: Database, days: int = 7) -> int:
    """Insert demo sales unless the table already has rows. Returns rows added."""
    await database.init_schema()
    repository = SaleRepository(database)

    if await repository.list_sales(limit=1):
        logger.info("Database already seeded")
        return 0

    sales = generate_sales(days)
    for sale in sales:
        await repository.create_sale(sale)

    logger.info(f"Database seeded with {len(sales)} sales")
    return len(sales)


async def main():
    Config.validate()
    database = Database()
    await database.connect()
    try:
        await seed_database(database)
    finally:
        await database.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
