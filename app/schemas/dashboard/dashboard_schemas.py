from datetime import date
from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_products: int
    low_stock_items: int
    active_warehouses: int
    today_movements: int


class TodayMovementCounts(BaseModel):
    entry: int = 0
    exit: int = 0
    transfer: int = 0
    adjustment: int = 0
    total: int = 0


class DailyMovementSummary(BaseModel):
    day: date
    entries: int = 0
    exits: int = 0
    transfers: int = 0
    adjustments: int = 0
