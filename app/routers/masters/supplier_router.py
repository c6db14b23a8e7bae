from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.masters.supplier_schemas import (
    SupplierCreate,
    SupplierUpdate,
    SupplierOut,
)
from app.services.masters.supplier_service import (
    create_supplier,
    get_supplier,
    list_suppliers,
    update_supplier,
    deactivate_supplier,
)
from app.models.enums.user_role import UserRole, WRITE_ROLES
from app.utils.check_roles import require_role
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[list[SupplierOut]])
async def list_suppliers_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    suppliers = await list_suppliers(db)
    return success_response("Suppliers fetched successfully", suppliers)


@router.get("/{supplier_id}", response_model=APIResponse[SupplierOut])
async def get_supplier_api(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    supplier = await get_supplier(db, supplier_id)
    return success_response("Supplier fetched successfully", supplier)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=APIResponse[SupplierOut])
async def create_supplier_api(
    payload: SupplierCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Create supplier", extra={"supplier_name": payload.name})

    supplier = await create_supplier(db, payload, user)
    return success_response("Supplier created successfully", supplier)


@router.patch("/{supplier_id}", response_model=APIResponse[SupplierOut])
async def update_supplier_api(
    supplier_id: int,
    payload: SupplierUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Update supplier", extra={"supplier_id": supplier_id})

    supplier = await update_supplier(db, supplier_id, payload, user)
    return success_response("Supplier updated successfully", supplier)


@router.patch("/{supplier_id}/deactivate", response_model=APIResponse[SupplierOut])
async def deactivate_supplier_api(
    supplier_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role([UserRole.ADMINISTRATOR.value])),
):
    supplier = await deactivate_supplier(db, supplier_id, user)
    return success_response("Supplier deactivated successfully", supplier)
