from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.masters.product_schemas import (
    ProductCreate,
    ProductUpdate,
    ProductOut,
    ProductListData,
    ProductStateChange,
    ProductAuditData,
)
from app.schemas.inventory.inventory_balance_schemas import ProductWithInventoryOut
from app.schemas.dashboard.dashboard_schemas import DailyMovementSummary
from app.services.masters.product_service import (
    list_products,
    get_product,
    create_product,
    update_product,
    deactivate_product,
    reactivate_product,
    list_product_audit,
)
from app.services.inventory.inventory_balance_service import product_with_inventory
from app.services.dashboard.dashboard_service import product_movement_summary
from app.models.enums.user_role import UserRole, WRITE_ROLES
from app.utils.check_roles import require_role
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/products", tags=["Products"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[ProductListData])
async def list_products_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),

    search: Optional[str] = Query(None),
    category_id: Optional[int] = Query(None),
    supplier_id: Optional[int] = Query(None),
    low_stock_only: bool = Query(False),
    include_inactive: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    data = await list_products(
        db,
        search=search,
        category_id=category_id,
        supplier_id=supplier_id,
        low_stock_only=low_stock_only,
        include_inactive=include_inactive,
        limit=limit,
        offset=offset,
    )
    return success_response("Products fetched successfully", data)


@router.get("/{product_id}", response_model=APIResponse[ProductOut])
async def get_product_api(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    product = await get_product(db, product_id)
    return success_response("Product fetched successfully", product)


@router.get("/{product_id}/inventory", response_model=APIResponse[ProductWithInventoryOut])
async def get_product_inventory_api(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await product_with_inventory(db, product_id)
    return success_response("Product inventory fetched successfully", data)


@router.get(
    "/{product_id}/movement-summary",
    response_model=APIResponse[list[DailyMovementSummary]],
)
async def product_movement_summary_api(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await product_movement_summary(db, product_id)
    return success_response("Movement summary fetched successfully", data)


@router.get("/{product_id}/audit", response_model=APIResponse[ProductAuditData])
async def product_audit_api(
    product_id: int,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_product_audit(db, product_id, limit=limit, offset=offset, user=user)
    return success_response("Product audit fetched successfully", data)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=APIResponse[ProductOut])
async def create_product_api(
    payload: ProductCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Create product", extra={"product_code": payload.code})

    product = await create_product(db, payload, user)
    return success_response("Product created successfully", product)


@router.patch("/{product_id}", response_model=APIResponse[ProductOut])
async def update_product_api(
    product_id: int,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Update product", extra={"product_id": product_id})

    product = await update_product(db, product_id, payload, user)
    return success_response("Product updated successfully", product)


@router.patch("/{product_id}/deactivate", response_model=APIResponse[ProductOut])
async def deactivate_product_api(
    product_id: int,
    payload: Optional[ProductStateChange] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role([UserRole.ADMINISTRATOR.value])),
):
    reason = payload.reason if payload else None
    product = await deactivate_product(db, product_id, reason, user)
    return success_response("Product deactivated successfully", product)


@router.patch("/{product_id}/reactivate", response_model=APIResponse[ProductOut])
async def reactivate_product_api(
    product_id: int,
    payload: Optional[ProductStateChange] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    reason = payload.reason if payload else None
    product = await reactivate_product(db, product_id, reason, user)
    return success_response("Product reactivated successfully", product)
