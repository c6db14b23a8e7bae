from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.inventory.movement_schemas import MovementFilters
from app.services.exports.export_service import (
    export_products_csv,
    export_inventory_csv,
    export_movements_csv,
    export_filename,
)
from app.routers.inventory.movement_router import movement_filters
from app.utils.get_user import get_current_user
from app.utils.logger import get_logger

router = APIRouter(prefix="/export", tags=["Export"])
logger = get_logger(__name__)


def _csv_response(content: str, prefix: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(prefix)}"',
            "Cache-Control": "no-store",
        },
    )


@router.get("/products")
async def export_products_api(
    search: Optional[str] = Query(None),
    category_id: Optional[int] = Query(None),
    supplier_id: Optional[int] = Query(None),
    low_stock_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Export products", extra={"user_id": user.id})
    content = await export_products_csv(
        db,
        search=search,
        category_id=category_id,
        supplier_id=supplier_id,
        low_stock_only=low_stock_only,
    )
    return _csv_response(content, "products")


@router.get("/inventory")
async def export_inventory_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Export low-stock inventory", extra={"user_id": user.id})
    return _csv_response(await export_inventory_csv(db), "inventory")


@router.get("/movements")
async def export_movements_api(
    filters: MovementFilters = Depends(movement_filters),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Export movements", extra={"user_id": user.id})
    return _csv_response(await export_movements_csv(db, filters), "movements")
