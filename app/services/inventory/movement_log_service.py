# app/services/inventory/movement_log_service.py

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.models.inventory.movement_models import Movement
from app.models.masters.product_models import Product
from app.models.masters.warehouse_models import Warehouse
from app.models.users.user_models import User
from app.schemas.inventory.movement_schemas import (
    MovementFilters,
    MovementDetailOut,
    WarehouseRef,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode

SourceWarehouse = aliased(Warehouse)
DestinationWarehouse = aliased(Warehouse)


# =====================================================
# MAPPER
# =====================================================
def _map_movement(row) -> MovementDetailOut:
    movement, product_code, product_name, src_name, dst_name, username = row
    return MovementDetailOut(
        id=movement.id,
        product_id=movement.product_id,
        type=movement.type,
        quantity=movement.quantity,
        source_warehouse_id=movement.source_warehouse_id,
        destination_warehouse_id=movement.destination_warehouse_id,
        unit_price=movement.unit_price,
        total_value=movement.total_value,
        reason=movement.reason,
        user_id=movement.user_id,
        created_at=movement.created_at,
        product_code=product_code,
        product_name=product_name,
        source_warehouse=(
            WarehouseRef(id=movement.source_warehouse_id, name=src_name)
            if movement.source_warehouse_id
            else None
        ),
        destination_warehouse=(
            WarehouseRef(id=movement.destination_warehouse_id, name=dst_name)
            if movement.destination_warehouse_id
            else None
        ),
        user_name=username,
    )


def _detail_stmt():
    return (
        select(
            Movement,
            Product.code,
            Product.name,
            SourceWarehouse.name,
            DestinationWarehouse.name,
            User.username,
        )
        .join(Product, Product.id == Movement.product_id)
        .outerjoin(SourceWarehouse, SourceWarehouse.id == Movement.source_warehouse_id)
        .outerjoin(DestinationWarehouse, DestinationWarehouse.id == Movement.destination_warehouse_id)
        .join(User, User.id == Movement.user_id)
    )


def _filter_clauses(filters: MovementFilters) -> list:
    clauses = []
    if filters.product_id:
        clauses.append(Movement.product_id == filters.product_id)
    if filters.type:
        clauses.append(Movement.type == filters.type)
    if filters.date_from:
        clauses.append(Movement.created_at >= filters.date_from)
    if filters.date_to:
        clauses.append(Movement.created_at < filters.date_to)
    return clauses


# =====================================================
# APPEND (write side, no commit)
# =====================================================
async def append_movement(db: AsyncSession, movement: Movement) -> Movement:
    """Insert into the log and flush so id and created_at are assigned."""
    db.add(movement)
    await db.flush()
    return movement


# =====================================================
# QUERIES
# =====================================================
async def query_movements(
    db: AsyncSession,
    filters: MovementFilters,
    limit: int,
    offset: int,
) -> dict:
    clauses = _filter_clauses(filters)

    total = await db.scalar(
        select(func.count(Movement.id)).where(*clauses)
    )

    result = await db.execute(
        _detail_stmt()
        .where(*clauses)
        .order_by(desc(Movement.created_at), desc(Movement.id))
        .offset(offset)
        .limit(limit)
    )

    return {
        "items": [_map_movement(r) for r in result.all()],
        "total": total or 0,
    }


async def query_by_product(db: AsyncSession, product_id: int) -> list[MovementDetailOut]:
    result = await db.execute(
        _detail_stmt()
        .where(Movement.product_id == product_id)
        .order_by(desc(Movement.created_at), desc(Movement.id))
    )
    return [_map_movement(r) for r in result.all()]


async def recent_movements(db: AsyncSession, limit: int = 10) -> list[MovementDetailOut]:
    result = await db.execute(
        _detail_stmt()
        .order_by(desc(Movement.created_at), desc(Movement.id))
        .limit(limit)
    )
    return [_map_movement(r) for r in result.all()]


async def get_movement(db: AsyncSession, movement_id: int) -> MovementDetailOut:
    result = await db.execute(
        _detail_stmt().where(Movement.id == movement_id)
    )
    row = result.first()
    if not row:
        raise AppException(404, "Movement not found", ErrorCode.MOVEMENT_NOT_FOUND)
    return _map_movement(row)
