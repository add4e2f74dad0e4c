import logging
from datetime import date

from fastapi import APIRouter, Depends, Query, Request

from sales_ledger.config import Config
from sales_ledger.schemas.sale import SaleCreate, SaleOut, SaleDelete, MessageResponse
from sales_ledger.services.sale_repository import SaleRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales", tags=["sales"])


def get_repository(request: Request) -> SaleRepository:
    """The repository built at startup, held on app.state."""
    return request.app.state.repository


@router.get("", response_model=list[SaleOut])
async def list_sales(
    date_from: date | None = Query(None, alias="from"),
    date_to: date | None = Query(None, alias="to"),
    limit: int = Query(Config.LIST_LIMIT, ge=1, le=Config.MAX_LIST_LIMIT),
    repository: SaleRepository = Depends(get_repository),
):
    return await repository.list_sales(date_from=date_from, date_to=date_to, limit=limit)


@router.post("/create", response_model=MessageResponse)
async def create_sale(sale: SaleCreate, repository: SaleRepository = Depends(get_repository)):
    await repository.create_sale(sale)
    return MessageResponse(message="Sale added successfully")


@router.post("/delete", response_model=MessageResponse)
async def delete_sale(body: SaleDelete, repository: SaleRepository = Depends(get_repository)):
    await repository.delete_sale(body.sale_id)
    return MessageResponse(message="Sale deleted")


@router.delete("/{sale_id}", response_model=MessageResponse)
async def delete_sale_by_id(sale_id: int, repository: SaleRepository = Depends(get_repository)):
    await repository.delete_sale(sale_id)
    return MessageResponse(message="Sale deleted")


@router.post("/reset", response_model=MessageResponse)
@router.post("/clear", response_model=MessageResponse)
async def clear_sales(repository: SaleRepository = Depends(get_repository)):
    await repository.clear_all()
    return MessageResponse(message="All sales cleared")
