# app/services/inventory/movement_service.py

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.inventory.movement_models import Movement
from app.models.masters.product_models import Product
from app.models.masters.warehouse_models import Warehouse
from app.schemas.inventory.movement_schemas import (
    MovementCreate,
    MovementOut,
    EntryMovementCreate,
    ExitMovementCreate,
    TransferMovementCreate,
    AdjustmentMovementCreate,
)
from app.services.inventory.movement_log_service import append_movement
from app.services.inventory.stock_ledger_service import apply_delta
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.constants.inventory_movement_type import MovementType
from app.utils.activity_helpers import emit_activity
from app.utils.logger import get_logger, audit_logger

logger = get_logger(__name__)


# =====================================================
# LEDGER EFFECT PER MOVEMENT TYPE
# =====================================================
def ledger_deltas(payload: MovementCreate) -> list[tuple[int, int]]:
    """
    (warehouse_id, delta) pairs a movement applies to the ledger.

    Pairs are sorted by warehouse id so concurrent transfers in opposite
    directions lock ledger rows in the same order.
    """
    qty = payload.quantity

    if isinstance(payload, EntryMovementCreate):
        deltas = [(payload.destination_warehouse_id, qty)]

    elif isinstance(payload, ExitMovementCreate):
        deltas = [(payload.source_warehouse_id, -qty)]

    elif isinstance(payload, TransferMovementCreate):
        deltas = [
            (payload.source_warehouse_id, -qty),
            (payload.destination_warehouse_id, qty),
        ]

    elif isinstance(payload, AdjustmentMovementCreate):
        if payload.destination_warehouse_id is not None:
            deltas = [(payload.destination_warehouse_id, qty)]
        else:
            deltas = [(payload.source_warehouse_id, -qty)]

    else:
        raise AppException(400, "Unknown movement type", ErrorCode.MOVEMENT_INVALID)

    return sorted(deltas)


def _warehouse_ids(payload: MovementCreate) -> list[int]:
    ids = [
        getattr(payload, "source_warehouse_id", None),
        getattr(payload, "destination_warehouse_id", None),
    ]
    return [i for i in ids if i is not None]


# =====================================================
# REFERENCE CHECKS (before any write)
# =====================================================
async def _validate_references(db: AsyncSession, payload: MovementCreate) -> None:
    product = await db.scalar(
        select(Product).where(Product.id == payload.product_id)
    )
    if not product:
        raise AppException(404, "Product not found", ErrorCode.PRODUCT_NOT_FOUND)
    if not product.is_active:
        raise AppException(
            400,
            "Product is inactive",
            ErrorCode.PRODUCT_INACTIVE,
            details={"product_id": product.id},
        )

    for warehouse_id in _warehouse_ids(payload):
        warehouse = await db.scalar(
            select(Warehouse).where(Warehouse.id == warehouse_id)
        )
        if not warehouse:
            raise AppException(
                404,
                "Warehouse not found",
                ErrorCode.WAREHOUSE_NOT_FOUND,
                details={"warehouse_id": warehouse_id},
            )
        if not warehouse.is_active:
            raise AppException(
                400,
                "Warehouse is inactive",
                ErrorCode.WAREHOUSE_INACTIVE,
                details={"warehouse_id": warehouse_id},
            )


# =====================================================
# CREATE MOVEMENT (log append + ledger deltas, one unit)
# =====================================================
async def create_movement(
    db: AsyncSession,
    payload: MovementCreate,
    user,
) -> MovementOut:
    await _validate_references(db, payload)

    # read before the transaction can expire the instance
    actor_id = user.id
    movement_type = MovementType(payload.type)

    total_value = None
    if payload.unit_price is not None:
        total_value = Decimal(payload.quantity) * payload.unit_price

    movement = Movement(
        product_id=payload.product_id,
        type=movement_type,
        quantity=payload.quantity,
        source_warehouse_id=getattr(payload, "source_warehouse_id", None),
        destination_warehouse_id=getattr(payload, "destination_warehouse_id", None),
        unit_price=payload.unit_price,
        total_value=total_value,
        reason=payload.reason,
        user_id=actor_id,
    )

    try:
        await append_movement(db, movement)

        balances = {}
        for warehouse_id, delta in ledger_deltas(payload):
            balances[warehouse_id] = await apply_delta(
                db,
                product_id=payload.product_id,
                warehouse_id=warehouse_id,
                delta=delta,
            )

        await emit_activity(
            db,
            actor=user,
            code=ActivityCode.INVENTORY_MOVEMENT,
            movement_type=movement_type.value,
            movement_id=movement.id,
            quantity=payload.quantity,
            product_id=payload.product_id,
            source_warehouse_id=movement.source_warehouse_id,
            destination_warehouse_id=movement.destination_warehouse_id,
        )

        await db.commit()

    except AppException as exc:
        await db.rollback()
        logger.info(
            "Movement rejected",
            extra={
                "product_id": payload.product_id,
                "movement_type": movement_type.value,
                "error_code": exc.error_code,
            },
        )
        raise

    except Exception:
        await db.rollback()
        logger.exception(
            "Movement rolled back",
            extra={
                "product_id": payload.product_id,
                "movement_type": movement_type.value,
                "user_id": actor_id,
            },
        )
        raise

    audit_logger.info(
        "movement_committed",
        extra={
            "movement_id": movement.id,
            "movement_type": movement_type.value,
            "product_id": movement.product_id,
            "quantity": movement.quantity,
            "source_warehouse_id": movement.source_warehouse_id,
            "destination_warehouse_id": movement.destination_warehouse_id,
            "user_id": actor_id,
            "balances": balances,
        },
    )

    return MovementOut.model_validate(movement)
