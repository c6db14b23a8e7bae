# app/services/masters/product_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, desc
from sqlalchemy.exc import IntegrityError

from app.models.masters.product_models import Product
from app.models.masters.category_models import Category
from app.models.masters.supplier_models import Supplier
from app.models.inventory.inventory_balance_models import InventoryBalance
from app.models.inventory.product_audit_models import ProductAuditEvent
from app.models.users.user_models import User
from app.models.enums.product_audit_action import ProductAuditAction
from app.schemas.masters.product_schemas import (
    ProductCreate,
    ProductUpdate,
    ProductOut,
    ProductListItem,
    ProductAuditOut,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity
from app.utils.changes import collect_changes
from app.utils.logger import get_logger, audit_logger

logger = get_logger(__name__)


# =========================
# MAPPER
# =========================
def _map_product(product: Product) -> ProductOut:
    return ProductOut(
        id=product.id,
        code=product.code,
        name=product.name,
        description=product.description,
        category_id=product.category_id,
        brand=product.brand,
        unit=product.unit,
        purchase_price=product.purchase_price,
        sale_price=product.sale_price,
        min_stock=product.min_stock,
        max_stock=product.max_stock,
        supplier_id=product.supplier_id,
        barcode=product.barcode,
        attributes=product.attributes,
        is_active=product.is_active,
        created_by=product.created_by_id,
        updated_by=product.updated_by_id,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def _total_stock_expr():
    return (
        select(func.coalesce(func.sum(InventoryBalance.current_stock), 0))
        .where(InventoryBalance.product_id == Product.id)
        .correlate(Product)
        .scalar_subquery()
    )


async def _get_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if not product:
        raise AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)
    return product


async def _check_references(db: AsyncSession, category_id: int | None, supplier_id: int | None):
    if category_id is not None:
        category = await db.get(Category, category_id)
        if not category or not category.is_active:
            raise AppException(404, "Category not found", ErrorCode.CATEGORY_NOT_FOUND)

    if supplier_id is not None:
        supplier = await db.get(Supplier, supplier_id)
        if not supplier or not supplier.is_active:
            raise AppException(404, "Supplier not found", ErrorCode.SUPPLIER_NOT_FOUND)


# =========================
# LIST (with summed stock)
# =========================
async def list_products(
    db: AsyncSession,
    *,
    search: str | None = None,
    category_id: int | None = None,
    supplier_id: int | None = None,
    low_stock_only: bool = False,
    include_inactive: bool = False,
    limit: int = 50,
    offset: int = 0,
) -> dict:
    total_stock = _total_stock_expr()

    filters = []
    if not include_inactive:
        filters.append(Product.is_active.is_(True))

    if search:
        filters.append(
            or_(
                Product.name.ilike(f"%{search}%"),
                Product.code.ilike(f"%{search}%"),
            )
        )

    if category_id:
        filters.append(Product.category_id == category_id)

    if supplier_id:
        filters.append(Product.supplier_id == supplier_id)

    if low_stock_only:
        filters.append(total_stock <= Product.min_stock)

    total = await db.scalar(select(func.count(Product.id)).where(*filters))

    result = await db.execute(
        select(
            Product,
            Category.name,
            Supplier.name,
            total_stock.label("total_stock"),
        )
        .outerjoin(Category, Category.id == Product.category_id)
        .outerjoin(Supplier, Supplier.id == Product.supplier_id)
        .where(*filters)
        .order_by(Product.name.asc(), Product.id.asc())
        .offset(offset)
        .limit(limit)
    )

    items = []
    for product, category_name, supplier_name, stock in result.all():
        items.append(
            ProductListItem(
                **_map_product(product).model_dump(),
                category_name=category_name,
                supplier_name=supplier_name,
                total_stock=stock,
                is_low_stock=stock <= product.min_stock,
            )
        )

    return {"total": total or 0, "items": items}


# =========================
# GET
# =========================
async def get_product(db: AsyncSession, product_id: int) -> ProductOut:
    return _map_product(await _get_product(db, product_id))


# =========================
# CREATE
# =========================
async def create_product(db: AsyncSession, payload: ProductCreate, user) -> ProductOut:
    exists = await db.scalar(select(Product.id).where(Product.code == payload.code))
    if exists:
        raise AppException(
            409,
            "Product code already exists",
            ErrorCode.PRODUCT_CODE_EXISTS,
        )

    await _check_references(db, payload.category_id, payload.supplier_id)

    product = Product(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(product)

    try:
        await db.flush()
    except IntegrityError:
        # lost a race on the unique code
        await db.rollback()
        raise AppException(
            409,
            "Product code already exists",
            ErrorCode.PRODUCT_CODE_EXISTS,
        )

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.CREATE_PRODUCT,
        target_name=product.name,
        product_code=product.code,
    )

    await db.commit()
    await db.refresh(product)

    logger.info("Product created", extra={"product_id": product.id, "product_code": product.code})
    return _map_product(product)


# =========================
# UPDATE
# =========================
async def update_product(
    db: AsyncSession,
    product_id: int,
    payload: ProductUpdate,
    user,
) -> ProductOut:
    product = await _get_product(db, product_id)
    if not product.is_active:
        raise AppException(
            400,
            "Inactive products cannot be edited",
            ErrorCode.PRODUCT_STATE_INVALID,
        )

    updates = payload.model_dump(exclude_unset=True)

    min_stock = updates.get("min_stock", product.min_stock)
    max_stock = updates.get("max_stock", product.max_stock)
    if max_stock is not None and min_stock is not None and max_stock < min_stock:
        raise AppException(
            400,
            "max_stock must be greater than or equal to min_stock",
            ErrorCode.VALIDATION_ERROR,
        )

    await _check_references(db, updates.get("category_id"), updates.get("supplier_id"))

    changes = collect_changes(product, updates)
    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.NO_CHANGES_DETECTED)

    for field, value in updates.items():
        setattr(product, field, value)
    product.updated_by_id = user.id

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.UPDATE_PRODUCT,
        target_name=product.name,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(product)
    return _map_product(product)


# =========================
# DEACTIVATE / REACTIVATE (audited)
# =========================
async def _set_active(
    db: AsyncSession,
    product_id: int,
    *,
    active: bool,
    reason: str | None,
    user,
) -> ProductOut:
    product = await _get_product(db, product_id)

    if product.is_active == active:
        raise AppException(
            400,
            "Product is already active" if active else "Product is already inactive",
            ErrorCode.PRODUCT_STATE_INVALID,
        )

    action = ProductAuditAction.REACTIVATE if active else ProductAuditAction.DEACTIVATE
    actor_id = user.id

    product.is_active = active
    product.updated_by_id = actor_id

    db.add(
        ProductAuditEvent(
            product_id=product.id,
            action=action,
            user_id=actor_id,
            reason=reason,
        )
    )

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.REACTIVATE_PRODUCT if active else ActivityCode.DEACTIVATE_PRODUCT,
        target_name=product.name,
        reason=reason or "-",
    )

    await db.commit()
    await db.refresh(product)

    audit_logger.info(
        f"product_{action.value}",
        extra={
            "product_id": product.id,
            "product_code": product.code,
            "user_id": actor_id,
            "reason": reason,
        },
    )
    return _map_product(product)


async def deactivate_product(db: AsyncSession, product_id: int, reason: str | None, user) -> ProductOut:
    return await _set_active(db, product_id, active=False, reason=reason, user=user)


async def reactivate_product(db: AsyncSession, product_id: int, reason: str | None, user) -> ProductOut:
    return await _set_active(db, product_id, active=True, reason=reason, user=user)


# =========================
# AUDIT TRAIL
# =========================
async def list_product_audit(
    db: AsyncSession,
    product_id: int,
    *,
    limit: int = 50,
    offset: int = 0,
    user=None,
) -> dict:
    await _get_product(db, product_id)

    total = await db.scalar(
        select(func.count(ProductAuditEvent.id)).where(
            ProductAuditEvent.product_id == product_id
        )
    )

    result = await db.execute(
        select(ProductAuditEvent, User.username)
        .outerjoin(User, User.id == ProductAuditEvent.user_id)
        .where(ProductAuditEvent.product_id == product_id)
        .order_by(desc(ProductAuditEvent.created_at), desc(ProductAuditEvent.id))
        .offset(offset)
        .limit(limit)
    )

    items = [
        ProductAuditOut(
            id=event.id,
            product_id=event.product_id,
            action=event.action,
            user_id=event.user_id,
            username=username,
            reason=event.reason,
            created_at=event.created_at,
        )
        for event, username in result.all()
    ]

    if user is not None:
        audit_logger.info(
            "product_audit_read",
            extra={"product_id": product_id, "user_id": user.id, "returned": len(items)},
        )

    return {"total": total or 0, "items": items}
