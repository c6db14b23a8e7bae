# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import IntegrityError

from app.routers import (
    user_router,
    auth_router,
    activity_router,
    supplier_router,
    category_router,
    warehouse_router,
    product_router,
    movement_router,
    inventory_balance_router,
    dashboard_router,
    export_router,
)

from app.core.config import APP_ENV, APP_VERSION, CORS_ORIGINS, ENABLE_SCHEDULER
from app.core.db import init_models
from app.core.scheduler import scheduler, scheduler_enabled
from app.core.exceptions import AppException
from app.core.logging import setup_logging
from app.models.inventory.movement_models import MovementImmutableError
from app.middleware.request_logging import request_logging_middleware
from app.core.error_handlers import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    integrity_error_handler,
    immutable_movement_handler,
    unhandled_exception_handler,
)

APP_NAME = "Warehouse Inventory API"

# ------------------------------------------------------------------------------
# LOGGING
# ------------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# LIFESPAN
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application", extra={"environment": APP_ENV})

    # DB init ONLY in development
    if APP_ENV == "development":
        await init_models()
        logger.info("Database models initialized (development)")
    else:
        logger.info("init_models() skipped outside development")

    if scheduler_enabled(APP_ENV, ENABLE_SCHEDULER):
        scheduler.start()
        logger.info("Low-stock digest scheduler started")
    else:
        logger.info("Scheduler disabled (set ENABLE_SCHEDULER=true to run it)")

    yield

    logger.info("Shutting down application")
    if scheduler.running:
        scheduler.shutdown()

# ------------------------------------------------------------------------------
# APP INIT
# ------------------------------------------------------------------------------
app = FastAPI(
    title=APP_NAME,
    description="Products, warehouses and stock movements with an atomic inventory ledger",
    version=APP_VERSION,
    docs_url="/docs" if APP_ENV != "production" else None,
    redoc_url=None,
    lifespan=lifespan,
)

# ------------------------------------------------------------------------------
# EXCEPTION HANDLERS
# ------------------------------------------------------------------------------
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)
app.add_exception_handler(MovementImmutableError, immutable_movement_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# ------------------------------------------------------------------------------
# MIDDLEWARE
# ------------------------------------------------------------------------------
app.middleware("http")(request_logging_middleware)

origins = [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------------------
# HEALTH CHECK
# ------------------------------------------------------------------------------
@app.get("/", tags=["Health"])
async def root():
    return {
        "status": "ok",
        "service": "warehouse-inventory-api",
        "environment": APP_ENV,
        "version": APP_VERSION,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok"}

# ------------------------------------------------------------------------------
# ROUTERS
# ------------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(activity_router)
app.include_router(supplier_router)
app.include_router(category_router)
app.include_router(warehouse_router)
app.include_router(product_router)
app.include_router(movement_router)
app.include_router(inventory_balance_router)
app.include_router(dashboard_router)
app.include_router(export_router)
