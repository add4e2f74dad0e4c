import pytest
from unittest.mock import AsyncMock
from httpx import AsyncClient, ASGITransport

from sales_ledger.main import create_app
from sales_ledger.db.database import Database
from sales_ledger.routers.sales import get_repository
from sales_ledger.services.sale_repository import SaleRepository


@pytest.fixture
def mock_repository():
    """Fake repository for testing without a real DB connection."""
    mock = AsyncMock(spec=SaleRepository)
    mock.list_sales.return_value = []
    return mock


@pytest.fixture
async def client(mock_repository):
    """Async test client with the repository swapped for a mock."""
    app = create_app()
    app.dependency_overrides[get_repository] = lambda: mock_repository

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'sales.db'}"


@pytest.fixture
async def database(database_url):
    """Real SQLite database with the schema in place."""
    db = Database(database_url)
    await db.connect()
    await db.init_schema()
    yield db
    await db.disconnect()


@pytest.fixture
def repository(database):
    return SaleRepository(database)


@pytest.fixture
async def live_client(database_url):
    """Client for an app started through its own lifespan against SQLite."""
    app = create_app(Database(database_url))

    async with app.router.lifespan_context(app):
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test"
        ) as ac:
            yield ac
