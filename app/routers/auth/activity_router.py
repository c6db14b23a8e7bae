# app/routers/auth/activity_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.auth.activity_schemas import UserActivityFilters, UserActivityOut
from app.services.auth.activity_service import list_user_activities
from app.models.enums.user_role import UserRole
from app.utils.check_roles import require_role
from app.utils.response import APIResponse, PageData, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/activities", tags=["User Activities"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[PageData[UserActivityOut]])
async def list_user_activities_api(
    filters: UserActivityFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_role([UserRole.ADMINISTRATOR.value])),
):
    logger.info(
        "List user activities requested",
        extra=filters.model_dump(exclude_none=True),
    )

    result = await list_user_activities(db=db, filters=filters)

    return success_response(
        "User activities fetched successfully",
        {**result, "limit": filters.limit, "offset": filters.offset},
    )
