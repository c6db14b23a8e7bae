from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.models.users.user_models import User
from app.schemas.users.user_schemas import (
    UserCreateSchema,
    UserRoleUpdateSchema,
    UserListFilters,
    UserDetailSchema,
)
from app.core.security import hash_password
from app.utils.activity_helpers import emit_activity
from app.constants.activity_codes import ActivityCode
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise AppException(404, "User not found", ErrorCode.USER_NOT_FOUND)
    return user


# =========================
# CREATE USER
# =========================
async def create_user(db: AsyncSession, payload: UserCreateSchema, admin: User):
    exists = await db.scalar(select(User.id).where(User.username == payload.username))
    if exists:
        raise AppException(409, "Username already exists", ErrorCode.USER_USERNAME_EXISTS)

    user = User(
        username=payload.username,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        password_hash=hash_password(payload.password),
        role=payload.role.value,
    )

    db.add(user)
    await db.flush()

    await emit_activity(
        db,
        actor=admin,
        code=ActivityCode.CREATE_USER,
        target_name=user.username,
        target_role=user.role.capitalize(),
    )

    await db.commit()
    await db.refresh(user)

    logger.info("User created", extra={"user_id": user.id})
    return UserDetailSchema.model_validate(user)


# =========================
# LIST USERS
# =========================
async def list_users(db: AsyncSession, filters: UserListFilters) -> dict:
    base_stmt = select(User)

    if filters.search:
        base_stmt = base_stmt.where(
            or_(
                User.username.ilike(f"%{filters.search}%"),
                User.email.ilike(f"%{filters.search}%"),
            )
        )

    if filters.role:
        base_stmt = base_stmt.where(User.role == filters.role.value)

    if filters.is_active is not None:
        base_stmt = base_stmt.where(User.is_active == filters.is_active)

    total = await db.scalar(
        select(func.count()).select_from(base_stmt.subquery())
    )

    result = await db.execute(
        base_stmt
        .order_by(User.username.asc())
        .limit(filters.limit)
        .offset(filters.offset)
    )

    return {
        "total": total or 0,
        "items": [UserDetailSchema.model_validate(u) for u in result.scalars().all()],
    }


async def get_user_by_id(db: AsyncSession, user_id: int) -> UserDetailSchema:
    return UserDetailSchema.model_validate(await _get_user(db, user_id))


# =========================
# ROLE
# =========================
async def update_user_role(
    db: AsyncSession,
    user_id: int,
    payload: UserRoleUpdateSchema,
    admin: User,
) -> UserDetailSchema:
    if user_id == admin.id:
        raise AppException(400, "You cannot change your own role", ErrorCode.USER_ROLE_INVALID)

    user = await _get_user(db, user_id)
    if user.role == payload.role.value:
        raise AppException(400, "No changes detected", ErrorCode.NO_CHANGES_DETECTED)

    user.role = payload.role.value
    # existing sessions carry the old role
    user.token_version += 1

    await emit_activity(
        db,
        actor=admin,
        code=ActivityCode.UPDATE_USER_ROLE,
        target_name=user.username,
        target_role=user.role.capitalize(),
    )

    await db.commit()
    await db.refresh(user)
    return UserDetailSchema.model_validate(user)


# =========================
# ACTIVATE / DEACTIVATE
# =========================
async def set_user_active(
    db: AsyncSession,
    user_id: int,
    active: bool,
    admin: User,
) -> UserDetailSchema:
    if user_id == admin.id and not active:
        raise AppException(400, "You cannot deactivate yourself", ErrorCode.VALIDATION_ERROR)

    user = await _get_user(db, user_id)
    if user.is_active == active:
        raise AppException(400, "No changes detected", ErrorCode.NO_CHANGES_DETECTED)

    user.is_active = active
    if not active:
        user.token_version += 1

    await emit_activity(
        db,
        actor=admin,
        code=ActivityCode.REACTIVATE_USER if active else ActivityCode.DEACTIVATE_USER,
        target_name=user.username,
    )

    await db.commit()
    await db.refresh(user)

    logger.info(
        "User activation changed",
        extra={"user_id": user.id, "is_active": active, "actor_id": admin.id},
    )
    return UserDetailSchema.model_validate(user)
