import asyncio

import pytest
from decimal import Decimal
from pydantic import ValidationError
from sqlalchemy import select, func

from app.core.db import AsyncSessionLocal
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.inventory_movement_type import MovementType
from app.models.inventory.movement_models import Movement, MovementImmutableError
from app.models.support.activity_models import UserActivity
from app.schemas.inventory.movement_schemas import movement_create_adapter
from app.services.inventory import movement_service
from app.services.inventory.movement_service import ledger_deltas
from app.services.inventory.stock_ledger_service import get_balance, apply_delta


async def _movement_count(db) -> int:
    return await db.scalar(select(func.count(Movement.id)))


async def _activity_count(db) -> int:
    return await db.scalar(
        select(func.count(UserActivity.id)).where(UserActivity.code == "INVENTORY_MOVEMENT")
    )


# =============================================================================
# Request shape (tagged variants)
# =============================================================================


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "entry", "product_id": 1, "quantity": 5},
        {"type": "exit", "product_id": 1, "quantity": 5},
        {"type": "transfer", "product_id": 1, "quantity": 5, "source_warehouse_id": 1},
        {"type": "transfer", "product_id": 1, "quantity": 5, "source_warehouse_id": 1, "destination_warehouse_id": 1},
        {"type": "entry", "product_id": 1, "quantity": 0, "destination_warehouse_id": 1},
        {"type": "entry", "product_id": 1, "quantity": -2, "destination_warehouse_id": 1},
        {"type": "entry", "product_id": 1, "quantity": 5, "destination_warehouse_id": 1, "source_warehouse_id": 2},
        {"type": "adjustment", "product_id": 1, "quantity": 5},
        {"type": "adjustment", "product_id": 1, "quantity": 5, "source_warehouse_id": 1, "destination_warehouse_id": 2},
        {"type": "refund", "product_id": 1, "quantity": 5, "destination_warehouse_id": 1},
    ],
    ids=[
        "entry-without-destination",
        "exit-without-source",
        "transfer-without-destination",
        "transfer-same-warehouse",
        "zero-quantity",
        "negative-quantity",
        "entry-with-source",
        "adjustment-without-warehouse",
        "adjustment-with-both-warehouses",
        "unknown-type",
    ],
)
def test_malformed_requests_are_rejected(payload):
    with pytest.raises(ValidationError):
        movement_create_adapter.validate_python(payload)


def test_ledger_deltas_per_type():
    def deltas(**payload):
        return ledger_deltas(movement_create_adapter.validate_python(payload))

    assert deltas(type="entry", product_id=1, quantity=4, destination_warehouse_id=2) == [(2, 4)]
    assert deltas(type="exit", product_id=1, quantity=4, source_warehouse_id=2) == [(2, -4)]
    assert deltas(
        type="transfer", product_id=1, quantity=4, source_warehouse_id=3, destination_warehouse_id=2
    ) == [(2, 4), (3, -4)]
    assert deltas(type="adjustment", product_id=1, quantity=4, destination_warehouse_id=2) == [(2, 4)]
    assert deltas(type="adjustment", product_id=1, quantity=4, source_warehouse_id=2) == [(2, -4)]


# =============================================================================
# Commit path
# =============================================================================


async def test_entry_appends_log_and_updates_ledger(db, operator, make_product, make_warehouse, record):
    product = await make_product()
    warehouse = await make_warehouse()

    movement = await record(
        operator,
        type="entry",
        product_id=product.id,
        quantity=12,
        destination_warehouse_id=warehouse.id,
        unit_price="2.50",
        reason="initial load",
    )

    assert movement.id is not None
    assert movement.type == MovementType.ENTRY
    assert movement.user_id == operator.id
    assert movement.total_value == Decimal("30.00")
    assert movement.created_at is not None
    assert await get_balance(db, product.id, warehouse.id) == 12
    assert await _movement_count(db) == 1
    assert await _activity_count(db) == 1


async def test_balance_equals_sum_of_signed_movements(db, operator, make_product, make_warehouse, record):
    product = await make_product()
    w1 = await make_warehouse()
    w2 = await make_warehouse()

    await record(operator, type="entry", product_id=product.id, quantity=30, destination_warehouse_id=w1.id)
    await record(operator, type="exit", product_id=product.id, quantity=4, source_warehouse_id=w1.id)
    await record(
        operator, type="transfer", product_id=product.id, quantity=10,
        source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
    )
    await record(operator, type="adjustment", product_id=product.id, quantity=3, destination_warehouse_id=w2.id)
    await record(operator, type="adjustment", product_id=product.id, quantity=1, source_warehouse_id=w1.id)

    assert await get_balance(db, product.id, w1.id) == 30 - 4 - 10 - 1
    assert await get_balance(db, product.id, w2.id) == 10 + 3
    assert await _movement_count(db) == 5


async def test_insufficient_stock_writes_nothing(db, operator, make_product, make_warehouse, record):
    product = await make_product()
    w1 = await make_warehouse()
    w2 = await make_warehouse()
    await record(operator, type="entry", product_id=product.id, quantity=2, destination_warehouse_id=w1.id)

    with pytest.raises(AppException) as exc_info:
        await record(
            operator, type="transfer", product_id=product.id, quantity=3,
            source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
        )

    assert exc_info.value.error_code == ErrorCode.INSUFFICIENT_STOCK
    assert await get_balance(db, product.id, w1.id) == 2
    assert await get_balance(db, product.id, w2.id) == 0
    assert await _movement_count(db) == 1
    assert await _activity_count(db) == 1


async def test_concurrent_first_entries_on_one_pair_add_up(db, operator, make_product, make_warehouse, record):
    product = await make_product()
    warehouse = await make_warehouse()
    quantities = [1, 2, 3, 4, 5]

    movements = await asyncio.gather(
        *(
            record(operator, type="entry", product_id=product.id, quantity=q, destination_warehouse_id=warehouse.id)
            for q in quantities
        )
    )

    assert sorted(m.quantity for m in movements) == quantities
    assert await get_balance(db, product.id, warehouse.id) == sum(quantities)
    assert await _movement_count(db) == len(quantities)


async def test_outbound_adjustment_cannot_go_negative(db, operator, make_product, make_warehouse, record):
    product = await make_product()
    warehouse = await make_warehouse()

    with pytest.raises(AppException) as exc_info:
        await record(operator, type="adjustment", product_id=product.id, quantity=1, source_warehouse_id=warehouse.id)

    assert exc_info.value.status_code == 409
    assert await _movement_count(db) == 0


# =============================================================================
# References
# =============================================================================


async def test_unknown_product_is_not_found(operator, make_warehouse, record):
    warehouse = await make_warehouse()

    with pytest.raises(AppException) as exc_info:
        await record(operator, type="entry", product_id=999, quantity=1, destination_warehouse_id=warehouse.id)

    assert exc_info.value.status_code == 404
    assert exc_info.value.error_code == ErrorCode.PRODUCT_NOT_FOUND


async def test_unknown_warehouse_is_not_found(db, operator, make_product, make_warehouse, record):
    product = await make_product()
    warehouse = await make_warehouse()

    with pytest.raises(AppException) as exc_info:
        await record(
            operator, type="transfer", product_id=product.id, quantity=1,
            source_warehouse_id=warehouse.id, destination_warehouse_id=424242,
        )

    assert exc_info.value.status_code == 404
    assert exc_info.value.error_code == ErrorCode.WAREHOUSE_NOT_FOUND
    assert await _movement_count(db) == 0


async def test_inactive_product_and_warehouse_are_rejected(operator, make_product, make_warehouse, record):
    inactive_product = await make_product(is_active=False)
    product = await make_product()
    warehouse = await make_warehouse()
    closed = await make_warehouse(is_active=False)

    with pytest.raises(AppException) as exc_info:
        await record(operator, type="entry", product_id=inactive_product.id, quantity=1, destination_warehouse_id=warehouse.id)
    assert exc_info.value.error_code == ErrorCode.PRODUCT_INACTIVE

    with pytest.raises(AppException) as exc_info:
        await record(operator, type="entry", product_id=product.id, quantity=1, destination_warehouse_id=closed.id)
    assert exc_info.value.error_code == ErrorCode.WAREHOUSE_INACTIVE


# =============================================================================
# Atomicity
# =============================================================================


async def test_ledger_failure_after_log_append_rolls_back_everything(
    db, operator, make_product, make_warehouse, record, monkeypatch
):
    product = await make_product()
    warehouse = await make_warehouse()

    async def broken_apply_delta(*args, **kwargs):
        raise RuntimeError("storage unavailable")

    monkeypatch.setattr(movement_service, "apply_delta", broken_apply_delta)

    with pytest.raises(RuntimeError):
        await record(operator, type="entry", product_id=product.id, quantity=5, destination_warehouse_id=warehouse.id)

    assert await _movement_count(db) == 0
    assert await _activity_count(db) == 0
    assert await get_balance(db, product.id, warehouse.id) == 0


async def test_transfer_failing_on_second_leg_undoes_first_leg(
    db, operator, make_product, make_warehouse, record, monkeypatch
):
    product = await make_product()
    w1 = await make_warehouse()
    w2 = await make_warehouse()
    await record(operator, type="entry", product_id=product.id, quantity=8, destination_warehouse_id=w1.id)

    calls = {"n": 0}

    async def flaky_apply_delta(session, **kwargs):
        calls["n"] += 1
        if calls["n"] == 2:
            raise RuntimeError("connection lost")
        return await apply_delta(session, **kwargs)

    monkeypatch.setattr(movement_service, "apply_delta", flaky_apply_delta)

    with pytest.raises(RuntimeError):
        await record(
            operator, type="transfer", product_id=product.id, quantity=5,
            source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
        )

    assert calls["n"] == 2
    assert await get_balance(db, product.id, w1.id) == 8
    assert await get_balance(db, product.id, w2.id) == 0
    assert await _movement_count(db) == 1


async def test_activity_failure_after_ledger_update_rolls_back_ledger(
    db, operator, make_product, make_warehouse, record, monkeypatch
):
    product = await make_product()
    warehouse = await make_warehouse()

    async def broken_emit_activity(*args, **kwargs):
        raise RuntimeError("activity table locked")

    monkeypatch.setattr(movement_service, "emit_activity", broken_emit_activity)

    with pytest.raises(RuntimeError):
        await record(operator, type="entry", product_id=product.id, quantity=5, destination_warehouse_id=warehouse.id)

    assert await get_balance(db, product.id, warehouse.id) == 0
    assert await _movement_count(db) == 0


# =============================================================================
# Append-only log
# =============================================================================


async def test_movements_cannot_be_edited_or_deleted(operator, make_product, make_warehouse, record):
    product = await make_product()
    warehouse = await make_warehouse()
    created = await record(operator, type="entry", product_id=product.id, quantity=5, destination_warehouse_id=warehouse.id)

    async with AsyncSessionLocal() as session:
        movement = await session.get(Movement, created.id)
        movement.quantity = 50
        with pytest.raises(MovementImmutableError):
            await session.flush()
        await session.rollback()

    async with AsyncSessionLocal() as session:
        movement = await session.get(Movement, created.id)
        await session.delete(movement)
        with pytest.raises(MovementImmutableError):
            await session.flush()
        await session.rollback()

    async with AsyncSessionLocal() as session:
        movement = await session.get(Movement, created.id)
        assert movement.quantity == 5
