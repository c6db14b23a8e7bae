from datetime import date
from typing import Optional, Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.inventory_movement_type import MovementType
from app.schemas.inventory.movement_schemas import (
    movement_create_adapter,
    MovementFilters,
    MovementOut,
    MovementDetailOut,
    MovementListData,
)
from app.services.inventory.movement_service import create_movement
from app.services.inventory.movement_log_service import (
    query_movements,
    query_by_product,
    get_movement,
)
from app.models.enums.user_role import WRITE_ROLES
from app.utils.check_roles import require_role
from app.utils.get_user import get_current_user
from app.utils.clock import day_bounds
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/movements", tags=["Movements"])
logger = get_logger(__name__)


def movement_filters(
    product_id: Optional[int] = Query(None),
    type: Optional[MovementType] = Query(None),
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
) -> MovementFilters:
    """Inclusive calendar-day `from` / `to` to a UTC [date_from, date_to) window."""
    return MovementFilters(
        product_id=product_id,
        type=type,
        date_from=day_bounds(date_from)[0] if date_from else None,
        date_to=day_bounds(date_to)[1] if date_to else None,
    )


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=APIResponse[MovementOut])
async def create_movement_api(
    body: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
    user=Depends(require_role(WRITE_ROLES)),
):
    try:
        payload = movement_create_adapter.validate_python(body)
    except ValidationError as exc:
        raise AppException(
            400,
            "Invalid movement data",
            ErrorCode.MOVEMENT_INVALID,
            details={"errors": jsonable_encoder(exc.errors(include_url=False, include_context=False))},
        )

    logger.info(
        "Create movement",
        extra={"movement_type": payload.type, "product_id": payload.product_id},
    )

    movement = await create_movement(db, payload, user)
    return success_response("Movement recorded successfully", movement)


@router.get("/", response_model=APIResponse[MovementListData])
async def list_movements_api(
    filters: MovementFilters = Depends(movement_filters),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await query_movements(db, filters, limit=limit, offset=offset)
    return success_response(
        "Movements fetched successfully",
        {**data, "limit": limit, "offset": offset},
    )


@router.get("/product/{product_id}", response_model=APIResponse[list[MovementDetailOut]])
async def product_movements_api(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await query_by_product(db, product_id)
    return success_response("Product movements fetched successfully", data)


@router.get("/{movement_id}", response_model=APIResponse[MovementDetailOut])
async def get_movement_api(
    movement_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await get_movement(db, movement_id)
    return success_response("Movement fetched successfully", data)
