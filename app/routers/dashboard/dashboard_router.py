from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.dashboard.dashboard_schemas import DashboardStats, TodayMovementCounts
from app.schemas.inventory.inventory_balance_schemas import LowStockRow
from app.schemas.inventory.movement_schemas import MovementDetailOut
from app.services.dashboard.dashboard_service import (
    dashboard_stats,
    low_stock_items,
    today_movement_counts,
)
from app.services.inventory.movement_log_service import recent_movements
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=APIResponse[DashboardStats])
async def stats_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    return success_response("Dashboard stats fetched", await dashboard_stats(db))


@router.get("/low-stock", response_model=APIResponse[list[LowStockRow]])
async def low_stock_api(
    limit: int | None = Query(None, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    return success_response("Low stock items fetched", await low_stock_items(db, limit=limit))


@router.get("/recent-movements", response_model=APIResponse[list[MovementDetailOut]])
async def recent_movements_api(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    return success_response("Recent movements fetched", await recent_movements(db, limit=limit))


@router.get("/movements-today", response_model=APIResponse[TodayMovementCounts])
async def movements_today_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    return success_response("Today's movements fetched", await today_movement_counts(db))
