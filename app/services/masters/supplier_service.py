# app/services/masters/supplier_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.masters.supplier_models import Supplier
from app.schemas.masters.supplier_schemas import (
    SupplierCreate,
    SupplierUpdate,
    SupplierOut,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity
from app.utils.changes import collect_changes
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _get_active(db: AsyncSession, supplier_id: int) -> Supplier:
    supplier = await db.get(Supplier, supplier_id)
    if not supplier or not supplier.is_active:
        raise AppException(
            404,
            "Supplier not found",
            ErrorCode.SUPPLIER_NOT_FOUND,
        )
    return supplier


# =========================
# LIST / GET
# =========================
async def list_suppliers(db: AsyncSession) -> list[SupplierOut]:
    result = await db.execute(
        select(Supplier)
        .where(Supplier.is_active.is_(True))
        .order_by(Supplier.name.asc())
    )
    return [SupplierOut.model_validate(s) for s in result.scalars().all()]


async def get_supplier(db: AsyncSession, supplier_id: int) -> SupplierOut:
    return SupplierOut.model_validate(await _get_active(db, supplier_id))


# =========================
# CREATE
# =========================
async def create_supplier(db: AsyncSession, payload: SupplierCreate, user) -> SupplierOut:
    supplier = Supplier(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(supplier)
    await db.flush()

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.CREATE_SUPPLIER,
        target_name=supplier.name,
    )

    await db.commit()
    await db.refresh(supplier)

    logger.info("Supplier created", extra={"supplier_id": supplier.id})
    return SupplierOut.model_validate(supplier)


# =========================
# UPDATE
# =========================
async def update_supplier(
    db: AsyncSession,
    supplier_id: int,
    payload: SupplierUpdate,
    user,
) -> SupplierOut:
    supplier = await _get_active(db, supplier_id)

    updates = payload.model_dump(exclude_unset=True)
    changes = collect_changes(supplier, updates)
    if not changes:
        raise AppException(
            400,
            "No changes detected",
            ErrorCode.NO_CHANGES_DETECTED,
        )

    for field, value in updates.items():
        setattr(supplier, field, value)
    supplier.updated_by_id = user.id

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.UPDATE_SUPPLIER,
        target_name=supplier.name,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(supplier)
    return SupplierOut.model_validate(supplier)


# =========================
# DEACTIVATE (soft delete)
# =========================
async def deactivate_supplier(db: AsyncSession, supplier_id: int, user) -> SupplierOut:
    supplier = await _get_active(db, supplier_id)

    supplier.is_active = False
    supplier.updated_by_id = user.id

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.DEACTIVATE_SUPPLIER,
        target_name=supplier.name,
    )

    await db.commit()
    await db.refresh(supplier)

    logger.info("Supplier deactivated", extra={"supplier_id": supplier_id, "actor_id": user.id})
    return SupplierOut.model_validate(supplier)
