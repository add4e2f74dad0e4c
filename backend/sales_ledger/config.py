import os

from sales_ledger.errors import ErrorType
from sales_ledger.exceptions import AppException


class Config:
    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "")

    # Connection pool (managed databases recycle idle connections)
    POOL_SIZE = int(os.getenv("POOL_SIZE", "3"))
    POOL_MAX_OVERFLOW = int(os.getenv("POOL_MAX_OVERFLOW", "0"))
    POOL_RECYCLE = int(os.getenv("POOL_RECYCLE", "300"))

    # Every store call is bounded by this many seconds
    QUERY_TIMEOUT = float(os.getenv("QUERY_TIMEOUT", "5"))

    # Row cap for GET /sales without a date range
    LIST_LIMIT = int(os.getenv("LIST_LIMIT", "200"))
    MAX_LIST_LIMIT = int(os.getenv("MAX_LIST_LIMIT", "500"))

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8080"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls):
        """Fail fast when required settings are missing."""
        if not cls.DATABASE_URL:
            raise AppException(ErrorType.CONFIG_ERROR, "DATABASE_URL is not set")
