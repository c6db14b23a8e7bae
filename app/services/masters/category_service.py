# app/services/masters/category_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.models.masters.category_models import Category
from app.schemas.masters.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity
from app.utils.changes import collect_changes
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _get_active(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category or not category.is_active:
        raise AppException(
            404,
            "Category not found",
            ErrorCode.CATEGORY_NOT_FOUND,
        )
    return category


# =========================
# LIST / GET
# =========================
async def list_categories(db: AsyncSession) -> list[CategoryOut]:
    result = await db.execute(
        select(Category)
        .where(Category.is_active.is_(True))
        .order_by(Category.name.asc())
    )
    return [CategoryOut.model_validate(c) for c in result.scalars().all()]


async def get_category(db: AsyncSession, category_id: int) -> CategoryOut:
    return CategoryOut.model_validate(await _get_active(db, category_id))


# =========================
# CREATE
# =========================
async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: int | None = None):
    stmt = select(Category.id).where(
        Category.name == name,
        Category.is_active.is_(True),
    )
    if exclude_id:
        stmt = stmt.where(Category.id != exclude_id)

    if await db.scalar(stmt):
        raise AppException(
            409,
            "Category name already exists",
            ErrorCode.CATEGORY_NAME_EXISTS,
        )


async def create_category(db: AsyncSession, payload: CategoryCreate, user) -> CategoryOut:
    await _ensure_name_free(db, payload.name)

    category = Category(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(category)
    await db.flush()

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.CREATE_CATEGORY,
        target_name=category.name,
    )

    await db.commit()
    await db.refresh(category)

    logger.info("Category created", extra={"category_id": category.id})
    return CategoryOut.model_validate(category)


# =========================
# UPDATE
# =========================
async def update_category(
    db: AsyncSession,
    category_id: int,
    payload: CategoryUpdate,
    user,
) -> CategoryOut:
    category = await _get_active(db, category_id)

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("name") and updates["name"] != category.name:
        await _ensure_name_free(db, updates["name"], exclude_id=category_id)

    changes = collect_changes(category, updates)
    if not changes:
        raise AppException(
            400,
            "No changes detected",
            ErrorCode.NO_CHANGES_DETECTED,
        )

    for field, value in updates.items():
        setattr(category, field, value)
    category.updated_by_id = user.id

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.UPDATE_CATEGORY,
        target_name=category.name,
        changes=", ".join(changes),
    )

    await db.commit()
    await db.refresh(category)
    return CategoryOut.model_validate(category)


# =========================
# DEACTIVATE (soft delete)
# =========================
async def deactivate_category(db: AsyncSession, category_id: int, user) -> CategoryOut:
    category = await _get_active(db, category_id)

    category.is_active = False
    category.updated_by_id = user.id

    await emit_activity(
        db,
        actor=user,
        code=ActivityCode.DEACTIVATE_CATEGORY,
        target_name=category.name,
    )

    await db.commit()
    await db.refresh(category)

    logger.info("Category deactivated", extra={"category_id": category_id, "actor_id": user.id})
    return CategoryOut.model_validate(category)
