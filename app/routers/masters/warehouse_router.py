from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.masters.warehouse_schemas import (
    WarehouseCreate,
    WarehouseUpdate,
    WarehouseOut,
)
from app.services.masters.warehouse_service import (
    create_warehouse,
    get_warehouse,
    list_warehouses,
    update_warehouse,
    deactivate_warehouse,
)
from app.models.enums.user_role import UserRole, WRITE_ROLES
from app.utils.check_roles import require_role
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[list[WarehouseOut]])
async def list_warehouses_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    warehouses = await list_warehouses(db)
    return success_response("Warehouses fetched successfully", warehouses)


@router.get("/{warehouse_id}", response_model=APIResponse[WarehouseOut])
async def get_warehouse_api(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    warehouse = await get_warehouse(db, warehouse_id)
    return success_response("Warehouse fetched successfully", warehouse)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=APIResponse[WarehouseOut])
async def create_warehouse_api(
    payload: WarehouseCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Create warehouse", extra={"warehouse_name": payload.name})

    warehouse = await create_warehouse(db, payload, user)
    return success_response("Warehouse created successfully", warehouse)


@router.patch("/{warehouse_id}", response_model=APIResponse[WarehouseOut])
async def update_warehouse_api(
    warehouse_id: int,
    payload: WarehouseUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Update warehouse", extra={"warehouse_id": warehouse_id})

    warehouse = await update_warehouse(db, warehouse_id, payload, user)
    return success_response("Warehouse updated successfully", warehouse)


@router.patch("/{warehouse_id}/deactivate", response_model=APIResponse[WarehouseOut])
async def deactivate_warehouse_api(
    warehouse_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role([UserRole.ADMINISTRATOR.value])),
):
    warehouse = await deactivate_warehouse(db, warehouse_id, user)
    return success_response("Warehouse deactivated successfully", warehouse)
