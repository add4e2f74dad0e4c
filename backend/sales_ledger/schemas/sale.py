from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_PAYMENT_METHOD = "CASH"


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SaleCreate(CamelModel):
    customer_name: str
    product_name: str
    quantity: int
    price: Decimal
    payment_method: str = DEFAULT_PAYMENT_METHOD
    cell_type: str | None = None
    warranty: str | None = None
    created_date: datetime | None = None

    @field_validator("payment_method", mode="before")
    @classmethod
    def default_payment_method(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_PAYMENT_METHOD
        return value

    @field_validator("created_date", mode="before")
    @classmethod
    def empty_means_now(cls, value):
        # "" asks for the store's own clock
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("created_date")
    @classmethod
    def normalize_created_date(cls, value):
        return as_utc(value) if value is not None else None


class SaleOut(CamelModel):
    sale_id: int
    customer_name: str
    product_name: str
    cell_type: str = ""
    warranty: str = ""
    quantity: int
    price: float
    payment_method: str
    created_date: datetime

    @field_validator("cell_type", "warranty", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("created_date")
    @classmethod
    def normalize_created_date(cls, value):
        return as_utc(value)


class SaleDelete(CamelModel):
    sale_id: int


class MessageResponse(BaseModel):
    message: str
