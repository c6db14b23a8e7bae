from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from app.models.inventory.inventory_balance_models import InventoryBalance
from app.models.masters.product_models import Product
from app.models.masters.warehouse_models import Warehouse
from app.models.masters.category_models import Category
from app.schemas.inventory.inventory_balance_schemas import (
    BalanceOut,
    WarehouseInventoryRow,
    ProductInventoryRow,
    ProductStockLine,
    ProductWithInventoryOut,
)
from app.services.inventory.stock_ledger_service import get_balance
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode


# =====================================================
# HELPERS
# =====================================================
async def _get_warehouse_or_404(db: AsyncSession, warehouse_id: int) -> Warehouse:
    warehouse = await db.get(Warehouse, warehouse_id)
    if not warehouse:
        raise AppException(404, "Warehouse not found", ErrorCode.WAREHOUSE_NOT_FOUND)
    return warehouse


async def _get_product_or_404(db: AsyncSession, product_id: int) -> Product:
    product = await db.scalar(
        select(Product)
        .options(selectinload(Product.category), selectinload(Product.supplier))
        .where(Product.id == product_id)
    )
    if not product:
        raise AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)
    return product


# =====================================================
# POINT READ
# =====================================================
async def read_balance(db: AsyncSession, product_id: int, warehouse_id: int) -> BalanceOut:
    return BalanceOut(
        product_id=product_id,
        warehouse_id=warehouse_id,
        current_stock=await get_balance(db, product_id, warehouse_id),
    )


# =====================================================
# BY WAREHOUSE
# =====================================================
async def inventory_by_warehouse(db: AsyncSession, warehouse_id: int) -> list[WarehouseInventoryRow]:
    await _get_warehouse_or_404(db, warehouse_id)

    result = await db.execute(
        select(
            InventoryBalance.product_id,
            Product.code.label("product_code"),
            Product.name.label("product_name"),
            Category.name.label("category_name"),
            InventoryBalance.current_stock,
            Product.min_stock,
            InventoryBalance.updated_at,
        )
        .join(Product, Product.id == InventoryBalance.product_id)
        .outerjoin(Category, Category.id == Product.category_id)
        .where(
            InventoryBalance.warehouse_id == warehouse_id,
            Product.is_active.is_(True),
        )
        .order_by(Product.name.asc())
    )
    return [WarehouseInventoryRow.model_validate(r) for r in result.all()]


# =====================================================
# BY PRODUCT
# =====================================================
async def inventory_by_product(db: AsyncSession, product_id: int) -> list[ProductInventoryRow]:
    await _get_product_or_404(db, product_id)

    result = await db.execute(
        select(
            InventoryBalance.warehouse_id,
            Warehouse.name.label("warehouse_name"),
            InventoryBalance.current_stock,
            InventoryBalance.updated_at,
        )
        .join(Warehouse, Warehouse.id == InventoryBalance.warehouse_id)
        .where(InventoryBalance.product_id == product_id)
        .order_by(Warehouse.name.asc())
    )
    return [ProductInventoryRow.model_validate(r) for r in result.all()]


# =====================================================
# PRODUCT WITH INVENTORY (zero-filled per active warehouse)
# =====================================================
async def product_with_inventory(db: AsyncSession, product_id: int) -> ProductWithInventoryOut:
    product = await _get_product_or_404(db, product_id)

    result = await db.execute(
        select(
            Warehouse.id,
            Warehouse.name,
            func.coalesce(InventoryBalance.current_stock, 0),
        )
        .outerjoin(
            InventoryBalance,
            (InventoryBalance.warehouse_id == Warehouse.id)
            & (InventoryBalance.product_id == product_id),
        )
        .where(
            Warehouse.is_active.is_(True) | InventoryBalance.product_id.is_not(None)
        )
        .order_by(Warehouse.name.asc())
    )

    lines = [
        ProductStockLine(warehouse_id=wid, warehouse_name=name, current_stock=stock)
        for wid, name, stock in result.all()
    ]

    return ProductWithInventoryOut(
        id=product.id,
        code=product.code,
        name=product.name,
        min_stock=product.min_stock,
        max_stock=product.max_stock,
        is_active=product.is_active,
        category=(
            {"id": product.category.id, "name": product.category.name}
            if product.category
            else None
        ),
        supplier=(
            {"id": product.supplier.id, "name": product.supplier.name}
            if product.supplier
            else None
        ),
        total_stock=sum(line.current_stock for line in lines),
        inventory=lines,
    )
