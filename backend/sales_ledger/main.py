import logging
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from sales_ledger.config import Config
from sales_ledger.db.database import Database
from sales_ledger.routers import dashboard, health, sales
from sales_ledger.services.sale_repository import SaleRepository
from sales_ledger.exceptions import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)

# Configure logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    """Build the API. Without a database one is made from DATABASE_URL at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Any failure here aborts startup: no traffic against an unknown schema
        if database is None:
            Config.validate()
        db = database or Database()
        await db.connect()
        try:
            await db.init_schema()
        except Exception:
            await db.disconnect()
            raise
        app.state.repository = SaleRepository(db)
        yield
        await db.disconnect()

    app = FastAPI(
        title="Sales Ledger API",
        version="1.0.0",
        description="Record point-of-sale transactions and list them for the dashboard",
        lifespan=lifespan
    )

    # Register exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.middleware("http")
    async def guard_requests(request: Request, call_next):
        # Real preflights are answered by CORSMiddleware; any other OPTIONS is a bare 200
        if request.method == "OPTIONS":
            return Response(status_code=200)
        try:
            return await call_next(request)
        except Exception as exc:
            # Answer here, inside CORSMiddleware, so the 500 carries CORS headers
            return await generic_exception_handler(request, exc)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(sales.router)
    app.include_router(dashboard.router)

    return app


app = create_app()
