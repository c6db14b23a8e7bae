# app/services/dashboard/dashboard_service.py
#
# Read-only aggregates over the ledger and the movement log.

from datetime import datetime, timedelta

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.inventory.inventory_balance_models import InventoryBalance
from app.models.inventory.movement_models import Movement
from app.models.masters.product_models import Product
from app.models.masters.warehouse_models import Warehouse
from app.schemas.inventory.inventory_balance_schemas import LowStockRow
from app.schemas.dashboard.dashboard_schemas import (
    DashboardStats,
    TodayMovementCounts,
    DailyMovementSummary,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.inventory_movement_type import MovementType
from app.utils.clock import local_today, day_bounds, to_local_date

SUMMARY_DAYS = 7

# movement type -> DailyMovementSummary column
_SUMMARY_COLUMNS = {
    MovementType.ENTRY: "entries",
    MovementType.EXIT: "exits",
    MovementType.TRANSFER: "transfers",
    MovementType.ADJUSTMENT: "adjustments",
}


def _low_stock_clauses() -> list:
    return [
        InventoryBalance.current_stock <= Product.min_stock,
        Product.is_active.is_(True),
    ]


# =====================================================
# LOW STOCK
# =====================================================
async def low_stock_items(db: AsyncSession, limit: int | None = None) -> list[LowStockRow]:
    stmt = (
        select(
            Product.id,
            Product.code,
            Product.name,
            Warehouse.id,
            Warehouse.name,
            InventoryBalance.current_stock,
            Product.min_stock,
        )
        .select_from(InventoryBalance)
        .join(Product, Product.id == InventoryBalance.product_id)
        .join(Warehouse, Warehouse.id == InventoryBalance.warehouse_id)
        .where(*_low_stock_clauses())
        .order_by(
            InventoryBalance.current_stock.asc(),
            Product.name.asc(),
            Warehouse.name.asc(),
        )
    )
    if limit:
        stmt = stmt.limit(limit)

    result = await db.execute(stmt)
    return [
        LowStockRow(
            product_id=pid,
            product_code=code,
            product_name=pname,
            warehouse_id=wid,
            warehouse_name=wname,
            current_stock=stock,
            min_stock=min_stock,
        )
        for pid, code, pname, wid, wname, stock, min_stock in result.all()
    ]


# =====================================================
# STATS
# =====================================================
def _today_clause(now: datetime | None):
    start, end = day_bounds(local_today(now))
    return (Movement.created_at >= start) & (Movement.created_at < end)


async def dashboard_stats(db: AsyncSession, now: datetime | None = None) -> DashboardStats:
    total_products = await db.scalar(
        select(func.count(Product.id)).where(Product.is_active.is_(True))
    )

    low_stock = await db.scalar(
        select(func.count())
        .select_from(InventoryBalance)
        .join(Product, Product.id == InventoryBalance.product_id)
        .where(*_low_stock_clauses())
    )

    active_warehouses = await db.scalar(
        select(func.count(Warehouse.id)).where(Warehouse.is_active.is_(True))
    )

    today_movements = await db.scalar(
        select(func.count(Movement.id)).where(_today_clause(now))
    )

    return DashboardStats(
        total_products=total_products or 0,
        low_stock_items=low_stock or 0,
        active_warehouses=active_warehouses or 0,
        today_movements=today_movements or 0,
    )


async def today_movement_counts(db: AsyncSession, now: datetime | None = None) -> TodayMovementCounts:
    result = await db.execute(
        select(Movement.type, func.count(Movement.id))
        .where(_today_clause(now))
        .group_by(Movement.type)
    )

    counts = TodayMovementCounts()
    for movement_type, count in result.all():
        setattr(counts, MovementType(movement_type).value, count)
        counts.total += count
    return counts


# =====================================================
# PER-PRODUCT 7-DAY SUMMARY
# =====================================================
async def product_movement_summary(
    db: AsyncSession,
    product_id: int,
    now: datetime | None = None,
) -> list[DailyMovementSummary]:
    """Quantities per local calendar day, oldest first, days without movements zero-filled."""
    exists = await db.scalar(select(Product.id).where(Product.id == product_id))
    if not exists:
        raise AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)

    today = local_today(now)
    first_day = today - timedelta(days=SUMMARY_DAYS - 1)
    window_start, _ = day_bounds(first_day)
    _, window_end = day_bounds(today)

    result = await db.execute(
        select(Movement.created_at, Movement.type, Movement.quantity).where(
            Movement.product_id == product_id,
            Movement.created_at >= window_start,
            Movement.created_at < window_end,
        )
    )

    days = {
        first_day + timedelta(days=i): DailyMovementSummary(day=first_day + timedelta(days=i))
        for i in range(SUMMARY_DAYS)
    }

    for created_at, movement_type, quantity in result.all():
        bucket = days.get(to_local_date(created_at))
        if bucket is None:
            continue
        column = _SUMMARY_COLUMNS[MovementType(movement_type)]
        setattr(bucket, column, getattr(bucket, column) + quantity)

    return [days[d] for d in sorted(days)]
