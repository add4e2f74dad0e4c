import pytest
from datetime import datetime, timedelta, timezone

from sales_ledger.db.seed import generate_sales, seed_database
from sales_ledger.services.sale_repository import SaleRepository


def test_generate_sales_within_window():
    now = datetime(2024, 6, 10, 15, 0, tzinfo=timezone.utc)

    sales = generate_sales(days=3, now=now)

    assert sales
    assert all(now - timedelta(days=3) < s.created_date <= now for s in sales)
    assert {s.payment_method for s in sales} <= {"CASH", "UPI", "CARD"}


@pytest.mark.asyncio
async def test_seed_only_once(database):
    added = await seed_database(database, days=2)
    assert added > 0

    assert await seed_database(database, days=2) == 0

    sales = await SaleRepository(database).list_sales(limit=500)
    assert len(sales) == added
