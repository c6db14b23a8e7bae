async def test_create_get_and_list(client, auth_headers, operator, viewer):
    resp = await client.post(
        "/products/",
        json={"code": "SKU-1", "name": "Hex bolt M8", "min_stock": 5, "max_stock": 50, "sale_price": "0.40"},
        headers=auth_headers(operator),
    )
    assert resp.status_code == 201
    created = resp.json()["data"]
    assert created["code"] == "SKU-1"
    assert created["is_active"] is True
    assert created["created_by"] == operator.id

    resp = await client.get(f"/products/{created['id']}", headers=auth_headers(viewer))
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Hex bolt M8"

    resp = await client.get("/products/", params={"search": "hex"}, headers=auth_headers(viewer))
    data = resp.json()["data"]
    assert data["total"] == 1
    assert data["items"][0]["total_stock"] == 0
    assert data["items"][0]["is_low_stock"] is True


async def test_duplicate_code_conflicts(client, auth_headers, operator, make_product):
    await make_product("SKU-DUP")

    resp = await client.post("/products/", json={"code": "SKU-DUP", "name": "Other"}, headers=auth_headers(operator))

    assert resp.status_code == 409
    assert resp.json()["error_code"] == "PRODUCT_CODE_EXISTS"


async def test_inverted_stock_range_is_rejected(client, auth_headers, operator):
    resp = await client.post(
        "/products/", json={"code": "SKU-2", "name": "Nut", "min_stock": 10, "max_stock": 2}, headers=auth_headers(operator)
    )

    assert resp.status_code == 422


async def test_viewer_cannot_create(client, auth_headers, viewer):
    resp = await client.post("/products/", json={"code": "SKU-3", "name": "Nut"}, headers=auth_headers(viewer))

    assert resp.status_code == 403


async def test_update_and_no_change(client, auth_headers, operator, make_product):
    product = await make_product(min_stock=1)

    resp = await client.patch(f"/products/{product.id}", json={"min_stock": 4}, headers=auth_headers(operator))
    assert resp.status_code == 200
    assert resp.json()["data"]["min_stock"] == 4

    resp = await client.patch(f"/products/{product.id}", json={"min_stock": 4}, headers=auth_headers(operator))
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "NO_CHANGES_DETECTED"


async def test_deactivate_reactivate_audit_trail(client, auth_headers, admin, operator, make_product):
    product = await make_product()

    resp = await client.patch(f"/products/{product.id}/deactivate", json={"reason": "discontinued"}, headers=auth_headers(operator))
    assert resp.status_code == 403

    resp = await client.patch(f"/products/{product.id}/deactivate", json={"reason": "discontinued"}, headers=auth_headers(admin))
    assert resp.status_code == 200
    assert resp.json()["data"]["is_active"] is False

    resp = await client.patch(f"/products/{product.id}/deactivate", headers=auth_headers(admin))
    assert resp.status_code == 400
    assert resp.json()["error_code"] == "PRODUCT_STATE_INVALID"

    resp = await client.patch(f"/products/{product.id}", json={"name": "Renamed"}, headers=auth_headers(operator))
    assert resp.status_code == 400

    resp = await client.patch(f"/products/{product.id}/reactivate", headers=auth_headers(operator))
    assert resp.status_code == 200
    assert resp.json()["data"]["is_active"] is True

    resp = await client.get(f"/products/{product.id}/audit", headers=auth_headers(operator))
    data = resp.json()["data"]
    assert data["total"] == 2
    assert [(e["action"], e["username"], e["reason"]) for e in data["items"]] == [
        ("reactivate", "operator", None),
        ("deactivate", "admin", "discontinued"),
    ]


async def test_inactive_products_hidden_from_default_list(client, auth_headers, viewer, make_product):
    await make_product("LIVE")
    await make_product("GONE", is_active=False)

    resp = await client.get("/products/", headers=auth_headers(viewer))
    assert [i["code"] for i in resp.json()["data"]["items"]] == ["LIVE"]

    resp = await client.get("/products/", params={"include_inactive": True}, headers=auth_headers(viewer))
    assert resp.json()["data"]["total"] == 2


async def test_product_inventory_and_movement_summary(
    client, auth_headers, operator, viewer, make_product, make_warehouse, record
):
    product = await make_product()
    stocked = await make_warehouse("A-stocked")
    await make_warehouse("B-empty")
    await record(operator, type="entry", product_id=product.id, quantity=6, destination_warehouse_id=stocked.id)

    resp = await client.get(f"/products/{product.id}/inventory", headers=auth_headers(viewer))
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total_stock"] == 6
    assert [(line["warehouse_name"], line["current_stock"]) for line in data["inventory"]] == [
        ("A-stocked", 6),
        ("B-empty", 0),
    ]

    resp = await client.get(f"/products/{product.id}/movement-summary", headers=auth_headers(viewer))
    days = resp.json()["data"]
    assert len(days) == 7
    assert days[-1]["entries"] == 6
    assert sum(d["entries"] for d in days[:-1]) == 0

    resp = await client.get("/products/9999/movement-summary", headers=auth_headers(viewer))
    assert resp.status_code == 404
