# app/routers/__init__.py

from .users.user_router import router as user_router

from .auth.auth_router import router as auth_router
from .auth.activity_router import router as activity_router

from .masters.supplier_router import router as supplier_router
from .masters.category_router import router as category_router
from .masters.warehouse_router import router as warehouse_router
from .masters.product_router import router as product_router

from .inventory.movement_router import router as movement_router
from .inventory.inventory_balance_router import router as inventory_balance_router

from .dashboard.dashboard_router import router as dashboard_router
from .exports.export_router import router as export_router


__all__ = [
"user_router",

"auth_router",
"activity_router",

"supplier_router",
"category_router",
"warehouse_router",
"product_router",

"movement_router",
"inventory_balance_router",

"dashboard_router",
"export_router",
]
