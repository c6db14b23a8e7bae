from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.masters.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
)
from app.services.masters.category_service import (
    create_category,
    get_category,
    list_categories,
    update_category,
    deactivate_category,
)
from app.models.enums.user_role import UserRole, WRITE_ROLES
from app.utils.check_roles import require_role
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/categories", tags=["Categories"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[list[CategoryOut]])
async def list_categories_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    categories = await list_categories(db)
    return success_response("Categories fetched successfully", categories)


@router.get("/{category_id}", response_model=APIResponse[CategoryOut])
async def get_category_api(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    category = await get_category(db, category_id)
    return success_response("Category fetched successfully", category)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=APIResponse[CategoryOut])
async def create_category_api(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Create category", extra={"category_name": payload.name})

    category = await create_category(db, payload, user)
    return success_response("Category created successfully", category)


@router.patch("/{category_id}", response_model=APIResponse[CategoryOut])
async def update_category_api(
    category_id: int,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    logger.info("Update category", extra={"category_id": category_id})

    category = await update_category(db, category_id, payload, user)
    return success_response("Category updated successfully", category)


@router.patch("/{category_id}/deactivate", response_model=APIResponse[CategoryOut])
async def deactivate_category_api(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role([UserRole.ADMINISTRATOR.value])),
):
    category = await deactivate_category(db, category_id, user)
    return success_response("Category deactivated successfully", category)
