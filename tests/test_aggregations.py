from datetime import datetime, timedelta, timezone

from app.models.inventory.movement_models import Movement
from app.constants.inventory_movement_type import MovementType
from app.services.dashboard.dashboard_service import (
    low_stock_items,
    dashboard_stats,
    today_movement_counts,
    product_movement_summary,
)
from app.services.masters.product_service import list_products


async def test_low_stock_boundary_is_inclusive(db, operator, make_product, make_warehouse, record):
    at_minimum = await make_product(min_stock=10)
    above_minimum = await make_product(min_stock=10)
    warehouse = await make_warehouse()

    await record(operator, type="entry", product_id=at_minimum.id, quantity=10, destination_warehouse_id=warehouse.id)
    await record(operator, type="entry", product_id=above_minimum.id, quantity=11, destination_warehouse_id=warehouse.id)

    rows = await low_stock_items(db)

    assert [(r.product_id, r.current_stock, r.min_stock) for r in rows] == [(at_minimum.id, 10, 10)]


async def test_low_stock_is_most_critical_first_and_skips_inactive_products(
    db, operator, make_product, make_warehouse, record
):
    a = await make_product(min_stock=20)
    b = await make_product(min_stock=20)
    retired = await make_product(min_stock=20)
    warehouse = await make_warehouse()

    await record(operator, type="entry", product_id=a.id, quantity=15, destination_warehouse_id=warehouse.id)
    await record(operator, type="entry", product_id=b.id, quantity=3, destination_warehouse_id=warehouse.id)
    await record(operator, type="entry", product_id=retired.id, quantity=1, destination_warehouse_id=warehouse.id)

    retired.is_active = False
    await db.commit()

    rows = await low_stock_items(db)

    assert [r.product_id for r in rows] == [b.id, a.id]
    assert rows[0].warehouse_name == warehouse.name


async def test_product_list_classifies_on_summed_stock(db, operator, make_product, make_warehouse, record):
    exactly_ten = await make_product(min_stock=10)
    eleven = await make_product(min_stock=10)
    w1 = await make_warehouse()
    w2 = await make_warehouse()

    for product, (q1, q2) in ((exactly_ten, (5, 5)), (eleven, (6, 5))):
        await record(operator, type="entry", product_id=product.id, quantity=q1, destination_warehouse_id=w1.id)
        await record(operator, type="entry", product_id=product.id, quantity=q2, destination_warehouse_id=w2.id)

    data = await list_products(db)
    by_id = {item.id: item for item in data["items"]}

    assert by_id[exactly_ten.id].total_stock == 10
    assert by_id[exactly_ten.id].is_low_stock is True
    assert by_id[eleven.id].total_stock == 11
    assert by_id[eleven.id].is_low_stock is False

    low_only = await list_products(db, low_stock_only=True)
    assert [item.id for item in low_only["items"]] == [exactly_ten.id]
    assert low_only["total"] == 1


async def test_product_without_ledger_rows_counts_as_zero_stock(db, make_product):
    product = await make_product(min_stock=0)

    data = await list_products(db)

    assert data["items"][0].id == product.id
    assert data["items"][0].total_stock == 0
    assert data["items"][0].is_low_stock is True


async def test_dashboard_stats(db, operator, make_product, make_warehouse, record):
    low = await make_product(min_stock=5)
    healthy = await make_product(min_stock=1)
    await make_product(is_active=False)
    w1 = await make_warehouse()
    await make_warehouse()
    await make_warehouse(is_active=False)

    await record(operator, type="entry", product_id=low.id, quantity=3, destination_warehouse_id=w1.id)
    await record(operator, type="entry", product_id=healthy.id, quantity=50, destination_warehouse_id=w1.id)
    await record(operator, type="exit", product_id=healthy.id, quantity=5, source_warehouse_id=w1.id)

    stats = await dashboard_stats(db)

    assert stats.total_products == 2
    assert stats.low_stock_items == 1
    assert stats.active_warehouses == 2
    assert stats.today_movements == 3


async def test_today_counts_ignore_yesterday(db, operator, make_product, make_warehouse, record):
    product = await make_product()
    w1 = await make_warehouse()
    w2 = await make_warehouse()

    await record(operator, type="entry", product_id=product.id, quantity=10, destination_warehouse_id=w1.id)
    await record(operator, type="entry", product_id=product.id, quantity=10, destination_warehouse_id=w1.id)
    await record(operator, type="exit", product_id=product.id, quantity=1, source_warehouse_id=w1.id)
    await record(
        operator, type="transfer", product_id=product.id, quantity=2,
        source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
    )

    db.add(
        Movement(
            product_id=product.id,
            type=MovementType.ADJUSTMENT,
            quantity=1,
            destination_warehouse_id=w1.id,
            user_id=operator.id,
            created_at=datetime.now(timezone.utc) - timedelta(days=1, hours=1),
        )
    )
    await db.commit()

    counts = await today_movement_counts(db)

    assert counts.entry == 2
    assert counts.exit == 1
    assert counts.transfer == 1
    assert counts.adjustment == 0
    assert counts.total == 4


async def test_seven_day_summary_is_zero_filled_and_oldest_first(db, operator, make_product, make_warehouse):
    product = await make_product()
    w1 = await make_warehouse()
    w2 = await make_warehouse()
    now = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)

    def movement(days_ago, movement_type, quantity, **warehouses):
        return Movement(
            product_id=product.id,
            type=movement_type,
            quantity=quantity,
            user_id=operator.id,
            created_at=now - timedelta(days=days_ago),
            **warehouses,
        )

    db.add_all(
        [
            movement(0, MovementType.ENTRY, 10, destination_warehouse_id=w1.id),
            movement(0, MovementType.ENTRY, 5, destination_warehouse_id=w1.id),
            movement(0, MovementType.EXIT, 3, source_warehouse_id=w1.id),
            movement(2, MovementType.TRANSFER, 4, source_warehouse_id=w1.id, destination_warehouse_id=w2.id),
            movement(6, MovementType.ADJUSTMENT, 2, destination_warehouse_id=w2.id),
            # outside the window
            movement(7, MovementType.ENTRY, 99, destination_warehouse_id=w1.id),
        ]
    )
    await db.commit()

    summary = await product_movement_summary(db, product.id, now=now)

    assert [d.day.isoformat() for d in summary] == [
        "2024-03-09", "2024-03-10", "2024-03-11", "2024-03-12",
        "2024-03-13", "2024-03-14", "2024-03-15",
    ]
    assert (summary[0].adjustments, summary[0].entries) == (2, 0)
    assert summary[4].transfers == 4
    assert (summary[6].entries, summary[6].exits) == (15, 3)
    assert all(
        (d.entries, d.exits, d.transfers, d.adjustments) == (0, 0, 0, 0)
        for d in (summary[1], summary[2], summary[3], summary[5])
    )


async def test_repeated_reads_are_identical(db, operator, make_product, make_warehouse, record):
    product = await make_product(min_stock=100)
    warehouse = await make_warehouse()
    await record(operator, type="entry", product_id=product.id, quantity=40, destination_warehouse_id=warehouse.id)

    assert await low_stock_items(db) == await low_stock_items(db)
    assert await dashboard_stats(db) == await dashboard_stats(db)
    assert await today_movement_counts(db) == await today_movement_counts(db)
    assert await product_movement_summary(db, product.id) == await product_movement_summary(db, product.id)
