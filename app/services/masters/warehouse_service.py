# app/services/masters/warehouse_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.masters.warehouse_models import Warehouse
from app.models.users.user_models import User
from app.schemas.masters.warehouse_schemas import (
    WarehouseCreate,
    WarehouseUpdate,
    WarehouseOut,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity
from app.utils.changes import collect_changes
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _get_active(db: AsyncSession, warehouse_id: int) -> Warehouse:
    warehouse = await db.get(Warehouse, warehouse_id)
    if not warehouse or not warehouse.is_active:
        raise AppException(
            404,
            "Warehouse not found",
            ErrorCode.WAREHOUSE_NOT_FOUND,
        )
    return warehouse


# =========================
# LIST / GET
# =========================
async def list_warehouses(db: AsyncSession) -> list[WarehouseOut]:
    result = await db.execute(
        select(Warehouse)
        .where(Warehouse.is_active.is_(True))
        .order_by(Warehouse.name.asc())
    )
    return [WarehouseOut.model_validate(w) for w in result.scalars().all()]


async def get_warehouse(db: AsyncSession, warehouse_id: int) -> WarehouseOut:
    return WarehouseOut.model_validate(await _get_active(db, warehouse_id))


# =========================
# CREATE
# =========================
async def _check_manager(db: AsyncSession, manager_id: int | None):
    if manager_id is None:
        return
    manager = await db.get(User, manager_id)
    if not manager or not manager.is_active:
        raise AppException(
            404,
            "Manager user not found",
            ErrorCode.USER_NOT_FOUND,
        )


async def create_warehouse(db: AsyncSession, payload: WarehouseCreate, user) -> WarehouseOut:
    await _check_manager(db, payload.manager_id)

    warehouse = Warehouse(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(warehouse)
    await db.flush()

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.CREATE_WAREHOUSE,
        target_name=warehouse.name,
    )

    await db.commit()
    await db.refresh(warehouse)

    logger.info("Warehouse created", extra={"warehouse_id": warehouse.id})
    return WarehouseOut.model_validate(warehouse)


# =========================
# UPDATE
# =========================
async def update_warehouse(
    db: AsyncSession,
    warehouse_id: int,
    payload: WarehouseUpdate,
    user,
) -> WarehouseOut:
    warehouse = await _get_active(db, warehouse_id)

    updates = payload.model_dump(exclude_unset=True)
    if "manager_id" in updates:
        await _check_manager(db, updates["manager_id"])
    changes = collect_changes(warehouse, updates)
    if not changes:
        raise AppException(
            400,
            "No changes detected",
            ErrorCode.NO_CHANGES_DETECTED,
        )

    for field, value in updates.items():
        setattr(warehouse, field, value)
    warehouse.updated_by_id = user.id

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.UPDATE_WAREHOUSE,
        target_name=warehouse.name,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(warehouse)
    return WarehouseOut.model_validate(warehouse)


# =========================
# DEACTIVATE (soft delete)
# =========================
async def deactivate_warehouse(db: AsyncSession, warehouse_id: int, user) -> WarehouseOut:
    warehouse = await _get_active(db, warehouse_id)

    warehouse.is_active = False
    warehouse.updated_by_id = user.id

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.DEACTIVATE_WAREHOUSE,
        target_name=warehouse.name,
    )

    await db.commit()
    await db.refresh(warehouse)

    logger.info("Warehouse deactivated", extra={"warehouse_id": warehouse_id, "actor_id": user.id})
    return WarehouseOut.model_validate(warehouse)
