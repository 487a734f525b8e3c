from sqlalchemy import select, func

from storefront.models import Order, OrderItem, Inventory, User, UserRole


def _order_payload(product_id, quantity=2, **extra):
    payload = {
        "customer_name": "Ana Lopez",
        "customer_email": "ana@example.com",
        "items": [{"product_id": product_id, "size": "M", "color": "Azul", "quantity": quantity, "price": "150.00"}],
    }
    payload.update(extra)
    return payload


async def _stock(client, product_id):
    rows = (await client.get(f"/api/products/{product_id}/inventory")).json()
    return rows[0]


async def test_checkout_example_totals(client, session_factory, make_product):
    product = await make_product(price="150.00")

    response = await client.post("/api/orders", json=_order_payload(product.id, shipping="50", tax="24"))
    assert response.status_code == 201
    order = response.json()

    assert order["order_number"].startswith("UL-")
    assert order["status"] == "pending"
    assert order["subtotal"] == "300.00"
    assert order["total"] == "374.00"
    assert len(order["items"]) == 1
    assert order["items"][0]["total_price"] == "300.00"
    assert order["customer_id"] is None

    async with session_factory() as session:
        assert (await session.execute(select(func.count(Order.id)))).scalar() == 1
        assert (await session.execute(select(func.count(OrderItem.id)))).scalar() == 1


async def test_total_is_sum_of_parts_with_default_rules(client, make_product):
    shirt = await make_product(price="150.00")
    boots = await make_product(name="Botas", price="99.99")

    payload = _order_payload(shirt.id, quantity=1)
    payload["items"].append({"product_id": boots.id, "quantity": 3})
    order = (await client.post("/api/orders", json=payload)).json()

    # 150 + 3 * 99.99 = 449.97 -> envio 50, IVA 72.00 (71.9952)
    assert order["subtotal"] == "449.97"
    assert order["shipping"] == "50.00"
    assert order["tax"] == "72.00"
    assert order["total"] == "571.97"
    assert len(order["items"]) == 2


async def test_client_price_is_ignored(client, make_product):
    product = await make_product(price="150.00")
    payload = _order_payload(product.id, quantity=1)
    payload["items"][0]["price"] = "1.00"

    order = (await client.post("/api/orders", json=payload)).json()
    assert order["items"][0]["unit_price"] == "150.00"
    assert order["subtotal"] == "150.00"


async def test_empty_cart_rejected(client):
    response = await client.post("/api/orders", json={"items": []})
    assert response.status_code == 422


async def test_unknown_product_rejected(client):
    response = await client.post("/api/orders", json=_order_payload(424242))
    assert response.status_code == 400


async def test_reservation_and_insufficient_stock(client, db, make_product):
    product = await make_product()
    db.add(Inventory(product_id=product.id, size="M", color="Azul", quantity=3, reserved_quantity=0))
    await db.commit()

    first = await client.post("/api/orders", json=_order_payload(product.id, quantity=2))
    assert first.status_code == 201
    assert first.json()["items"][0]["inventory_id"] is not None

    stock = await _stock(client, product.id)
    assert stock["reserved_quantity"] == 2
    assert stock["available"] == 1

    second = await client.post("/api/orders", json=_order_payload(product.id, quantity=2))
    assert second.status_code == 409
    assert (await _stock(client, product.id))["reserved_quantity"] == 2


async def test_shipping_consumes_reservation(client, db, admin_headers, make_product):
    product = await make_product()
    db.add(Inventory(product_id=product.id, size="M", color="Azul", quantity=10, reserved_quantity=0))
    await db.commit()
    order = (await client.post("/api/orders", json=_order_payload(product.id, quantity=4))).json()

    url = f"/api/orders/{order['id']}/status"
    assert (await client.put(url, json={"status": "processing"}, headers=admin_headers)).status_code == 200
    shipped = await client.put(url, json={"status": "shipped"}, headers=admin_headers)
    assert shipped.json()["status"] == "shipped"

    stock = await _stock(client, product.id)
    assert stock["quantity"] == 6
    assert stock["reserved_quantity"] == 0

    delivered = await client.put(url, json={"status": "delivered"}, headers=admin_headers)
    assert delivered.json()["status_label"] == "Entregado"


async def test_cancel_releases_reservation(client, db, admin_headers, make_product):
    product = await make_product()
    db.add(Inventory(product_id=product.id, size="M", color="Azul", quantity=5, reserved_quantity=0))
    await db.commit()
    order = (await client.post("/api/orders", json=_order_payload(product.id, quantity=5))).json()
    assert (await _stock(client, product.id))["available"] == 0

    response = await client.put(f"/api/orders/{order['id']}/status", json={"status": "cancelled"}, headers=admin_headers)
    assert response.status_code == 200

    stock = await _stock(client, product.id)
    assert stock["quantity"] == 5
    assert stock["reserved_quantity"] == 0


async def test_invalid_transition_conflict(client, admin_headers, make_product):
    product = await make_product()
    order = (await client.post("/api/orders", json=_order_payload(product.id))).json()
    url = f"/api/orders/{order['id']}/status"

    assert (await client.put(url, json={"status": "delivered"}, headers=admin_headers)).status_code == 409
    same = await client.put(url, json={"status": "pending"}, headers=admin_headers)
    assert same.status_code == 200
    assert same.json()["status"] == "pending"

    await client.put(url, json={"status": "cancelled"}, headers=admin_headers)
    assert (await client.put(url, json={"status": "processing"}, headers=admin_headers)).status_code == 409


async def test_status_update_requires_admin(client, customer_headers, make_product):
    product = await make_product()
    order = (await client.post("/api/orders", json=_order_payload(product.id))).json()
    response = await client.put(f"/api/orders/{order['id']}/status", json={"status": "processing"}, headers=customer_headers)
    assert response.status_code == 403


async def test_customer_orders_are_private(client, db, customer_user, customer_headers, make_headers, make_product):
    product = await make_product()
    order = (await client.post("/api/orders", json=_order_payload(product.id), headers=customer_headers)).json()
    assert order["customer_id"] == customer_user.id

    other = User(email="otro@example.com", role=UserRole.CUSTOMER.value, is_active=True)
    db.add(other)
    await db.commit()

    assert (await client.get(f"/api/orders/{order['id']}", headers=customer_headers)).status_code == 200
    assert (await client.get(f"/api/orders/{order['id']}", headers=make_headers(other))).status_code == 403

    mine = (await client.get("/api/orders/my", headers=customer_headers)).json()
    assert [o["id"] for o in mine] == [order["id"]]
    assert (await client.get("/api/orders/my", headers=make_headers(other))).json() == []


async def test_admin_list_with_status_filter(client, admin_headers, make_product):
    product = await make_product()
    first = (await client.post("/api/orders", json=_order_payload(product.id))).json()
    await client.post("/api/orders", json=_order_payload(product.id))
    await client.put(f"/api/orders/{first['id']}/status", json={"status": "processing"}, headers=admin_headers)

    data = (await client.get("/api/orders", params={"status": "processing"}, headers=admin_headers)).json()
    assert data["total"] == 1
    assert data["orders"][0]["id"] == first["id"]

    order_numbers = {o["order_number"] for o in (await client.get("/api/orders", headers=admin_headers)).json()["orders"]}
    assert len(order_numbers) == 2


async def test_order_pdf(client, admin_headers, make_product):
    product = await make_product()
    order = (await client.post("/api/orders", json=_order_payload(product.id))).json()

    response = await client.get(f"/api/orders/{order['id']}/pdf", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


async def test_cart_totals_use_catalog_prices(client, make_product):
    product = await make_product(price="150.00")
    response = await client.post("/api/cart/totals", json={
        "items": [
            {"product_id": product.id, "quantity": 2, "size": "M", "color": "Azul"},
            {"product_id": product.id, "quantity": 1, "size": "M", "color": "Azul"},
        ]
    })
    data = response.json()
    assert data["item_count"] == 3
    assert len(data["items"]) == 1
    assert data["subtotal"] == "450.00"
    assert data["total"] == "572.00"


async def test_cancel_after_shipment_keeps_stock_consumed(client, db, admin_headers, make_product):
    product = await make_product()
    db.add(Inventory(product_id=product.id, size="M", color="Azul", quantity=10, reserved_quantity=0))
    await db.commit()
    order = (await client.post("/api/orders", json=_order_payload(product.id, quantity=4))).json()

    url = f"/api/orders/{order['id']}/status"
    for status in ("processing", "shipped", "cancelled"):
        response = await client.put(url, json={"status": status}, headers=admin_headers)
        assert response.status_code == 200

    # La mercancia ya salio del almacen
    stock = await _stock(client, product.id)
    assert stock["quantity"] == 6
    assert stock["reserved_quantity"] == 0


async def test_taken_order_number_is_conflict(client, db, monkeypatch, make_product):
    product = await make_product()
    db.add(Inventory(product_id=product.id, size="M", color="Azul", quantity=5, reserved_quantity=0))
    await db.commit()
    first = (await client.post("/api/orders", json=_order_payload(product.id, quantity=1))).json()

    async def same_number(session):
        return first["order_number"]

    monkeypatch.setattr("storefront.api.orders.unique_order_number", same_number)
    response = await client.post("/api/orders", json=_order_payload(product.id, quantity=2))
    assert response.status_code == 409

    # La reserva del pedido rechazado no se conserva
    assert (await _stock(client, product.id))["reserved_quantity"] == 1
