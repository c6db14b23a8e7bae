from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.users.user_schemas import (
    UserCreateSchema,
    UserRoleUpdateSchema,
    UserListFilters,
    UserDetailSchema,
    UserListData,
)
from app.services.users.user_services import (
    create_user,
    list_users,
    get_user_by_id,
    update_user_role,
    set_user_active,
)
from app.models.enums.user_role import UserRole
from app.utils.check_roles import require_role
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/users", tags=["Users"])
logger = get_logger(__name__)

admin_only = require_role([UserRole.ADMINISTRATOR.value])


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=APIResponse[UserDetailSchema])
async def create_user_api(
    payload: UserCreateSchema,
    db: AsyncSession = Depends(get_db),
    admin=Depends(admin_only),
):
    logger.info("Create user request", extra={"username": payload.username})
    user = await create_user(db, payload, admin)
    return success_response("User created successfully", user)


@router.get("/", response_model=APIResponse[UserListData])
async def list_users_api(
    filters: UserListFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    admin=Depends(admin_only),
):
    users = await list_users(db, filters)
    return success_response("Users fetched", users)


@router.get("/{user_id}", response_model=APIResponse[UserDetailSchema])
async def get_user_api(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin=Depends(admin_only),
):
    user = await get_user_by_id(db, user_id)
    return success_response("User fetched", user)


@router.patch("/{user_id}/role", response_model=APIResponse[UserDetailSchema])
async def update_user_role_api(
    user_id: int,
    payload: UserRoleUpdateSchema,
    db: AsyncSession = Depends(get_db),
    admin=Depends(admin_only),
):
    logger.info("Update user role", extra={"user_id": user_id, "role": payload.role.value})
    user = await update_user_role(db, user_id, payload, admin)
    return success_response("User role updated successfully", user)


@router.patch("/{user_id}/deactivate", response_model=APIResponse[UserDetailSchema])
async def deactivate_user_api(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin=Depends(admin_only),
):
    user = await set_user_active(db, user_id, False, admin)
    return success_response("User deactivated successfully", user)


@router.patch("/{user_id}/reactivate", response_model=APIResponse[UserDetailSchema])
async def reactivate_user_api(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin=Depends(admin_only),
):
    user = await set_user_active(db, user_id, True, admin)
    return success_response("User reactivated successfully", user)
