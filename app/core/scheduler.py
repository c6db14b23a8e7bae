from apscheduler.schedulers.asyncio import AsyncIOScheduler
from app.core.db import AsyncSessionLocal

from app.services.dashboard.dashboard_service import low_stock_items
from app.utils.logger import get_logger

DIGEST_TOP_ROWS = 10

logger = get_logger("inventory.digest")

scheduler = AsyncIOScheduler()


def scheduler_enabled(app_env: str, enable_flag: bool) -> bool:
    """Always on in development; every other environment opts in."""
    return app_env == "development" or enable_flag


async def low_stock_digest():
    """Log the low-stock set, most critical rows first. Read-only."""
    async with AsyncSessionLocal() as db:
        rows = await low_stock_items(db)

    if not rows:
        logger.info("Low-stock digest: no items at or below minimum stock")
        return

    logger.warning(
        "Low-stock digest: %d item(s) at or below minimum stock",
        len(rows),
        extra={"low_stock_count": len(rows)},
    )
    for row in rows[:DIGEST_TOP_ROWS]:
        logger.warning(
            "  %s (%s) @ %s: %d / min %d",
            row.product_name,
            row.product_code,
            row.warehouse_name,
            row.current_stock,
            row.min_stock,
        )


@scheduler.scheduled_job("cron", hour=7, minute=0)  # daily at 07:00
async def low_stock_digest_job():
    await low_stock_digest()
