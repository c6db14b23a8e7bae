import pytest
from sqlalchemy import select, func

from app.core.security import create_access_token
from app.models.inventory.movement_models import Movement


def _headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.username, user.token_version)}"}


async def _post(client, user, **payload):
    return await client.post("/movements/", json=payload, headers=_headers(user))


async def _balance(client, user, product_id, warehouse_id) -> int:
    resp = await client.get(
        "/inventory/balance",
        params={"product_id": product_id, "warehouse_id": warehouse_id},
        headers=_headers(user),
    )
    assert resp.status_code == 200
    return resp.json()["data"]["current_stock"]


# =============================================================================
# End-to-end stock flows
# =============================================================================


async def test_entry_then_transfer_then_exit(client, operator, make_product, make_warehouse):
    product = await make_product()
    w1 = await make_warehouse()
    w2 = await make_warehouse()

    resp = await _post(
        client, operator, type="entry", product_id=product.id, quantity=10,
        destination_warehouse_id=w1.id, unit_price="1.25",
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["type"] == "entry"
    assert body["data"]["user_id"] == operator.id
    assert float(body["data"]["total_value"]) == 12.5

    resp = await _post(
        client, operator, type="transfer", product_id=product.id, quantity=4,
        source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
    )
    assert resp.status_code == 201

    resp = await _post(client, operator, type="exit", product_id=product.id, quantity=6, source_warehouse_id=w1.id)
    assert resp.status_code == 201

    assert await _balance(client, operator, product.id, w1.id) == 0
    assert await _balance(client, operator, product.id, w2.id) == 4


async def test_stock_lifecycle_with_low_stock_and_overdraw(client, operator, make_product, make_warehouse):
    product = await make_product(min_stock=5)
    w1 = await make_warehouse()

    async def low_stock():
        resp = await client.get("/dashboard/low-stock", headers=_headers(operator))
        return [(r["product_id"], r["warehouse_id"], r["current_stock"], r["min_stock"]) for r in resp.json()["data"]]

    resp = await _post(client, operator, type="entry", product_id=product.id, quantity=20, destination_warehouse_id=w1.id)
    assert resp.status_code == 201
    assert await _balance(client, operator, product.id, w1.id) == 20
    assert await low_stock() == []

    resp = await _post(client, operator, type="exit", product_id=product.id, quantity=18, source_warehouse_id=w1.id)
    assert resp.status_code == 201
    assert await _balance(client, operator, product.id, w1.id) == 2
    assert await low_stock() == [(product.id, w1.id, 2, 5)]

    w2 = await make_warehouse()
    resp = await _post(
        client, operator, type="transfer", product_id=product.id, quantity=2,
        source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
    )
    assert resp.status_code == 201
    assert await _balance(client, operator, product.id, w1.id) == 0
    assert await _balance(client, operator, product.id, w2.id) == 2

    resp = await client.get(f"/products/{product.id}/inventory", headers=_headers(operator))
    assert resp.json()["data"]["total_stock"] == 2

    resp = await _post(client, operator, type="exit", product_id=product.id, quantity=999, source_warehouse_id=w2.id)
    assert resp.status_code == 409
    assert await _balance(client, operator, product.id, w2.id) == 2


async def test_adjustments_in_both_directions(client, operator, make_product, make_warehouse):
    product = await make_product()
    warehouse = await make_warehouse()

    resp = await _post(
        client, operator, type="adjustment", product_id=product.id, quantity=7,
        destination_warehouse_id=warehouse.id, reason="cycle count",
    )
    assert resp.status_code == 201

    resp = await _post(
        client, operator, type="adjustment", product_id=product.id, quantity=2,
        source_warehouse_id=warehouse.id, reason="damaged",
    )
    assert resp.status_code == 201

    assert await _balance(client, operator, product.id, warehouse.id) == 5


async def test_overdraw_is_rejected_and_balance_untouched(db, client, operator, make_product, make_warehouse):
    product = await make_product()
    w1 = await make_warehouse()
    w2 = await make_warehouse()
    await _post(client, operator, type="entry", product_id=product.id, quantity=2, destination_warehouse_id=w1.id)

    resp = await _post(
        client, operator, type="transfer", product_id=product.id, quantity=3,
        source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
    )

    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert body["error_code"] == "INSUFFICIENT_STOCK"
    assert body["details"]["available"] == 2
    assert body["details"]["requested"] == 3

    assert await _balance(client, operator, product.id, w1.id) == 2
    assert await _balance(client, operator, product.id, w2.id) == 0
    assert await db.scalar(select(func.count(Movement.id))) == 1


# =============================================================================
# Rejected requests
# =============================================================================


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "entry", "quantity": 5},
        {"type": "exit", "quantity": 0},
        {"type": "transfer", "quantity": 5},
        {"type": "teleport", "quantity": 5},
        {"quantity": 5},
    ],
    ids=["entry-no-destination", "zero-quantity", "transfer-no-warehouses", "unknown-type", "missing-type"],
)
async def test_malformed_movement_is_bad_request(client, operator, make_product, make_warehouse, payload):
    product = await make_product()
    await make_warehouse()

    resp = await _post(client, operator, product_id=product.id, **payload)

    assert resp.status_code == 400
    body = resp.json()
    assert body["error_code"] == "MOVEMENT_INVALID"
    assert body["details"]["errors"]


async def test_same_warehouse_transfer_is_bad_request(client, operator, make_product, make_warehouse):
    product = await make_product()
    warehouse = await make_warehouse()

    resp = await _post(
        client, operator, type="transfer", product_id=product.id, quantity=1,
        source_warehouse_id=warehouse.id, destination_warehouse_id=warehouse.id,
    )

    assert resp.status_code == 400
    assert resp.json()["error_code"] == "MOVEMENT_INVALID"


async def test_unknown_references_are_not_found(client, operator, make_product, make_warehouse):
    product = await make_product()
    warehouse = await make_warehouse()

    resp = await _post(client, operator, type="entry", product_id=9999, quantity=1, destination_warehouse_id=warehouse.id)
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "PRODUCT_NOT_FOUND"

    resp = await _post(client, operator, type="entry", product_id=product.id, quantity=1, destination_warehouse_id=9999)
    assert resp.status_code == 404
    assert resp.json()["error_code"] == "WAREHOUSE_NOT_FOUND"


async def test_viewer_cannot_record_movements(client, viewer, make_product, make_warehouse):
    product = await make_product()
    warehouse = await make_warehouse()

    resp = await _post(client, viewer, type="entry", product_id=product.id, quantity=1, destination_warehouse_id=warehouse.id)

    assert resp.status_code == 403


async def test_missing_token_is_unauthorized(client):
    resp = await client.post("/movements/", json={"type": "entry", "product_id": 1, "quantity": 1, "destination_warehouse_id": 1})

    assert resp.status_code == 401
    assert resp.json()["error_code"] == "UNAUTHORIZED"


# =============================================================================
# History
# =============================================================================


async def test_list_filters_and_details(client, operator, viewer, make_product, make_warehouse):
    bolts = await make_product(name="Bolts")
    nuts = await make_product(name="Nuts")
    w1 = await make_warehouse("North")
    w2 = await make_warehouse("South")

    await _post(client, operator, type="entry", product_id=bolts.id, quantity=10, destination_warehouse_id=w1.id)
    await _post(client, operator, type="entry", product_id=nuts.id, quantity=3, destination_warehouse_id=w2.id)
    await _post(
        client, operator, type="transfer", product_id=bolts.id, quantity=2,
        source_warehouse_id=w1.id, destination_warehouse_id=w2.id,
    )

    headers = _headers(viewer)

    resp = await client.get("/movements/", headers=headers)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total"] == 3
    assert data["limit"] == 50
    assert data["offset"] == 0
    # newest first
    newest = data["items"][0]
    assert newest["type"] == "transfer"
    assert newest["product_name"] == "Bolts"
    assert newest["source_warehouse"] == {"id": w1.id, "name": "North"}
    assert newest["destination_warehouse"] == {"id": w2.id, "name": "South"}
    assert newest["user_name"] == "operator"

    resp = await client.get("/movements/", params={"product_id": bolts.id, "type": "entry"}, headers=headers)
    items = resp.json()["data"]["items"]
    assert [(i["product_id"], i["quantity"]) for i in items] == [(bolts.id, 10)]

    resp = await client.get("/movements/", params={"limit": 1, "offset": 1}, headers=headers)
    page = resp.json()["data"]
    assert page["total"] == 3
    assert len(page["items"]) == 1

    resp = await client.get(f"/movements/product/{nuts.id}", headers=headers)
    assert [i["quantity"] for i in resp.json()["data"]] == [3]

    resp = await client.get(f"/movements/{newest['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["quantity"] == 2


async def test_date_window_is_inclusive_of_both_days(client, operator, make_product, make_warehouse):
    product = await make_product()
    warehouse = await make_warehouse()
    await _post(client, operator, type="entry", product_id=product.id, quantity=1, destination_warehouse_id=warehouse.id)

    today = (await client.get("/movements/", headers=_headers(operator))).json()["data"]["items"][0]["created_at"][:10]

    resp = await client.get("/movements/", params={"from": today, "to": today}, headers=_headers(operator))
    assert resp.json()["data"]["total"] == 1

    resp = await client.get("/movements/", params={"from": "2000-01-01", "to": "2000-01-02"}, headers=_headers(operator))
    assert resp.json()["data"]["total"] == 0


async def test_unknown_movement_is_not_found(client, viewer):
    resp = await client.get("/movements/12345", headers=_headers(viewer))

    assert resp.status_code == 404
    assert resp.json()["error_code"] == "MOVEMENT_NOT_FOUND"


# =============================================================================
# Inventory reads
# =============================================================================


async def test_inventory_by_warehouse_and_product(client, operator, viewer, make_product, make_warehouse):
    product = await make_product(name="Washers", min_stock=2)
    w1 = await make_warehouse("Alpha")
    w2 = await make_warehouse("Beta")
    await _post(client, operator, type="entry", product_id=product.id, quantity=9, destination_warehouse_id=w1.id)
    await _post(client, operator, type="entry", product_id=product.id, quantity=1, destination_warehouse_id=w2.id)

    headers = _headers(viewer)

    resp = await client.get(f"/inventory/warehouse/{w1.id}", headers=headers)
    assert resp.status_code == 200
    rows = resp.json()["data"]
    assert [(r["product_name"], r["current_stock"], r["min_stock"]) for r in rows] == [("Washers", 9, 2)]

    resp = await client.get(f"/inventory/product/{product.id}", headers=headers)
    rows = resp.json()["data"]
    assert {r["warehouse_name"]: r["current_stock"] for r in rows} == {"Alpha": 9, "Beta": 1}

    resp = await client.get("/inventory/warehouse/9999", headers=headers)
    assert resp.status_code == 404


async def test_balance_without_history_is_zero(client, viewer, make_product, make_warehouse):
    product = await make_product()
    warehouse = await make_warehouse()

    assert await _balance(client, viewer, product.id, warehouse.id) == 0
