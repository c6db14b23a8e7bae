# app/services/exports/export_service.py
#
# CSV renderings of the product, low-stock and movement read paths.

import csv
import io
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import EXPORT_MAX_ROWS_PRODUCTS, EXPORT_MAX_ROWS_MOVEMENTS
from app.schemas.inventory.movement_schemas import MovementFilters
from app.services.masters.product_service import list_products
from app.services.dashboard.dashboard_service import low_stock_items
from app.services.inventory.movement_log_service import query_movements
from app.utils.logger import get_logger

logger = get_logger(__name__)

PRODUCT_HEADER = [
    "id", "code", "name", "category", "supplier", "unit",
    "purchase_price", "sale_price", "min_stock", "max_stock",
    "total_stock", "is_low_stock", "is_active",
]

INVENTORY_HEADER = [
    "product_id", "product_code", "product_name",
    "warehouse_id", "warehouse_name", "current_stock", "min_stock",
]

MOVEMENT_HEADER = [
    "id", "created_at", "type", "product_code", "product_name", "quantity",
    "source_warehouse", "destination_warehouse", "unit_price", "total_value",
    "reason", "user",
]


def _render(header: list[str], rows) -> str:
    sio = io.StringIO()
    # BOM so spreadsheet apps pick UTF-8
    sio.write("\ufeff")
    writer = csv.writer(sio)
    writer.writerow(header)
    writer.writerows(rows)
    return sio.getvalue()


def _cell(value):
    return "" if value is None else value


def export_filename(prefix: str) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{stamp}.csv"


# =========================
# PRODUCTS
# =========================
async def export_products_csv(
    db: AsyncSession,
    *,
    search: str | None = None,
    category_id: int | None = None,
    supplier_id: int | None = None,
    low_stock_only: bool = False,
) -> str:
    data = await list_products(
        db,
        search=search,
        category_id=category_id,
        supplier_id=supplier_id,
        low_stock_only=low_stock_only,
        limit=EXPORT_MAX_ROWS_PRODUCTS,
        offset=0,
    )

    if data["total"] > EXPORT_MAX_ROWS_PRODUCTS:
        logger.warning(
            "Product export truncated",
            extra={"total": data["total"], "cap": EXPORT_MAX_ROWS_PRODUCTS},
        )

    rows = (
        [
            p.id, p.code, p.name, _cell(p.category_name), _cell(p.supplier_name), p.unit,
            _cell(p.purchase_price), _cell(p.sale_price), p.min_stock, _cell(p.max_stock),
            p.total_stock, "yes" if p.is_low_stock else "no", "yes" if p.is_active else "no",
        ]
        for p in data["items"]
    )
    return _render(PRODUCT_HEADER, rows)


# =========================
# INVENTORY (low-stock rows)
# =========================
async def export_inventory_csv(db: AsyncSession) -> str:
    items = await low_stock_items(db)
    rows = (
        [
            r.product_id, r.product_code, r.product_name,
            r.warehouse_id, r.warehouse_name, r.current_stock, r.min_stock,
        ]
        for r in items
    )
    return _render(INVENTORY_HEADER, rows)


# =========================
# MOVEMENTS
# =========================
async def export_movements_csv(db: AsyncSession, filters: MovementFilters) -> str:
    data = await query_movements(db, filters, limit=EXPORT_MAX_ROWS_MOVEMENTS, offset=0)

    if data["total"] > EXPORT_MAX_ROWS_MOVEMENTS:
        logger.warning(
            "Movement export truncated",
            extra={"total": data["total"], "cap": EXPORT_MAX_ROWS_MOVEMENTS},
        )

    rows = (
        [
            m.id,
            m.created_at.isoformat(),
            m.type.value,
            _cell(m.product_code),
            _cell(m.product_name),
            m.quantity,
            m.source_warehouse.name if m.source_warehouse else "",
            m.destination_warehouse.name if m.destination_warehouse else "",
            _cell(m.unit_price),
            _cell(m.total_value),
            _cell(m.reason),
            _cell(m.user_name),
        ]
        for m in data["items"]
    )
    return _render(MOVEMENT_HEADER, rows)
