# app/services/inventory/stock_ledger_service.py

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select, update, func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.inventory.inventory_balance_models import InventoryBalance
from app.core.config import DB_TYPE
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# READS
# =====================================================
async def get_balance(db: AsyncSession, product_id: int, warehouse_id: int) -> int:
    stock = await db.scalar(
        select(InventoryBalance.current_stock).where(
            InventoryBalance.product_id == product_id,
            InventoryBalance.warehouse_id == warehouse_id,
        )
    )
    return stock or 0


async def sum_balances(
    db: AsyncSession,
    product_id: int,
    warehouse_ids: Optional[Iterable[int]] = None,
) -> int:
    stmt = select(func.coalesce(func.sum(InventoryBalance.current_stock), 0)).where(
        InventoryBalance.product_id == product_id
    )
    if warehouse_ids is not None:
        stmt = stmt.where(InventoryBalance.warehouse_id.in_(list(warehouse_ids)))

    return int(await db.scalar(stmt))


# =====================================================
# WRITE (only called from the movement processor)
# =====================================================
def _dialect_insert():
    return pg_insert if DB_TYPE == "postgres" else sqlite_insert


async def apply_delta(
    db: AsyncSession,
    *,
    product_id: int,
    warehouse_id: int,
    delta: int,
) -> int:
    """
    Add ``delta`` to one ledger row inside the caller's transaction and
    return the new balance.

    A positive delta is one ``INSERT ... ON CONFLICT DO UPDATE``: the first
    movement for a pair creates the row and concurrent first movements add
    up in the database. A negative delta is a conditional UPDATE that
    matches no row when the balance is too small, and INSUFFICIENT_STOCK
    is raised. Nothing is committed here.
    """
    if delta == 0:
        raise ValueError("Ledger delta cannot be zero")

    now = datetime.now(timezone.utc)

    if delta > 0:
        insert = _dialect_insert()
        stmt = insert(InventoryBalance).values(
            product_id=product_id,
            warehouse_id=warehouse_id,
            current_stock=delta,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[InventoryBalance.product_id, InventoryBalance.warehouse_id],
            set_={
                "current_stock": InventoryBalance.current_stock + delta,
                "updated_at": now,
            },
        ).returning(InventoryBalance.current_stock)

        return (await db.execute(stmt)).scalar_one()

    result = await db.execute(
        update(InventoryBalance)
        .where(
            InventoryBalance.product_id == product_id,
            InventoryBalance.warehouse_id == warehouse_id,
            InventoryBalance.current_stock + delta >= 0,
        )
        .values(
            current_stock=InventoryBalance.current_stock + delta,
            updated_at=now,
        )
        .returning(InventoryBalance.current_stock)
        .execution_options(synchronize_session=False)
    )
    new_stock = result.scalar_one_or_none()
    if new_stock is not None:
        return new_stock

    available = await get_balance(db, product_id, warehouse_id)
    logger.warning(
        "Withdrawal exceeds balance",
        extra={"product_id": product_id, "warehouse_id": warehouse_id, "available": available},
    )

    raise AppException(
        409,
        "Insufficient stock",
        ErrorCode.INSUFFICIENT_STOCK,
        details={
            "product_id": product_id,
            "warehouse_id": warehouse_id,
            "available": available,
            "requested": -delta,
        },
    )
