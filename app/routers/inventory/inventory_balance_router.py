from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.inventory.inventory_balance_schemas import (
    BalanceOut,
    WarehouseInventoryRow,
    ProductInventoryRow,
)
from app.services.inventory.inventory_balance_service import (
    read_balance,
    inventory_by_warehouse,
    inventory_by_product,
)
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("/balance", response_model=APIResponse[BalanceOut])
async def balance_api(
    product_id: int = Query(...),
    warehouse_id: int = Query(...),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await read_balance(db, product_id, warehouse_id)
    return success_response("Balance fetched successfully", data)


@router.get("/warehouse/{warehouse_id}", response_model=APIResponse[list[WarehouseInventoryRow]])
async def warehouse_inventory_api(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await inventory_by_warehouse(db, warehouse_id)
    return success_response("Warehouse inventory fetched successfully", data)


@router.get("/product/{product_id}", response_model=APIResponse[list[ProductInventoryRow]])
async def product_inventory_api(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await inventory_by_product(db, product_id)
    return success_response("Product inventory fetched successfully", data)
