async def _create(client, headers, **overrides):
    payload = {"name": "Camisa Industrial", "price": "150.00", "brand": "TREE", "genders": ["unisex"]}
    payload.update(overrides)
    return await client.post("/api/products", json=payload, headers=headers)


async def test_create_product_generates_sku(client, admin_headers):
    response = await _create(client, admin_headers)
    assert response.status_code == 201
    product = response.json()
    assert product["sku"].startswith("PRD-")
    assert product["price"] == "150.00"
    assert product["color_images"] == []


async def test_duplicate_sku_rejected(client, admin_headers):
    first = await _create(client, admin_headers, sku="TREE-001")
    assert first.status_code == 201

    second = await _create(client, admin_headers, name="Otra camisa", sku="TREE-001")
    assert second.status_code == 400
    assert second.json() == {"detail": "El SKU ya existe en el sistema", "error": "duplicate_sku"}


async def test_update_to_existing_sku_rejected(client, admin_headers):
    await _create(client, admin_headers, sku="A-1")
    other = (await _create(client, admin_headers, sku="A-2")).json()

    response = await client.put(f"/api/products/{other['id']}", json={"sku": "A-1"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "duplicate_sku"


async def test_create_requires_admin(client, customer_headers):
    assert (await _create(client, {})).status_code == 401
    assert (await _create(client, customer_headers)).status_code == 403


async def test_invalid_gender_rejected(client, admin_headers):
    response = await _create(client, admin_headers, genders=["otro"])
    assert response.status_code == 400


async def test_list_filters_by_brand_id_and_gender(client, make_product, brand):
    await make_product(name="Botas Kodiak", brand="Kodiak", genders=["masculino"])
    await make_product(name="Blusa TREE", brand="TREE", genders=["femenino"])
    await make_product(name="Chaleco Kodiak", brand="Kodiak", genders=["femenino", "masculino"])

    response = await client.get("/api/products", params={"brand_id": brand.id})
    assert sorted(p["name"] for p in response.json()) == ["Botas Kodiak", "Chaleco Kodiak"]

    response = await client.get("/api/products", params={"gender": "femenino"})
    assert sorted(p["name"] for p in response.json()) == ["Blusa TREE", "Chaleco Kodiak"]

    response = await client.get("/api/products", params={"brand_id": 9999})
    assert response.json() == []


async def test_batch_order_and_listing_order(client, admin_headers, make_product):
    a = await make_product(name="A")
    b = await make_product(name="B")

    response = await client.put(
        "/api/products/batch-order",
        json=[{"id": a.id, "display_order": 2}, {"id": b.id, "display_order": 1, "is_featured": True}],
        headers=admin_headers
    )
    assert response.status_code == 200

    names = [p["name"] for p in (await client.get("/api/products")).json()]
    assert names == ["B", "A"]
    featured = (await client.get("/api/products", params={"is_featured": True})).json()
    assert [p["name"] for p in featured] == ["B"]


async def test_color_images_feed_primary_image(client, admin_headers, make_product):
    product = await make_product(images=["/uploads/general.jpg"])
    color = (await client.post("/api/colors", json={"name": "Azul", "hex_code": "#0000FF"}, headers=admin_headers)).json()

    response = await client.post(
        f"/api/products/{product.id}/color-images",
        json={"color_id": color["id"], "images": ["/uploads/azul.jpg"], "is_primary": True},
        headers=admin_headers
    )
    assert response.status_code == 201
    assert response.json()["color_name"] == "Azul"

    detail = (await client.get(f"/api/products/{product.id}")).json()
    assert detail["primary_image"] == "/uploads/azul.jpg"
    assert detail["color_images"][0]["hex_code"] == "#0000FF"


async def test_delete_product(client, admin_headers, make_product):
    product = await make_product()
    response = await client.delete(f"/api/products/{product.id}", headers=admin_headers)
    assert response.status_code == 200
    assert (await client.get(f"/api/products/{product.id}")).status_code == 404


async def test_delete_product_keeps_order_history(client, admin_headers, make_product):
    product = await make_product(name="Overol")
    color = (await client.post("/api/colors", json={"name": "Gris", "hex_code": "#808080"}, headers=admin_headers)).json()
    await client.post(
        f"/api/products/{product.id}/color-images",
        json={"color_id": color["id"], "images": ["/uploads/gris.jpg"]},
        headers=admin_headers
    )
    await client.put(
        f"/api/products/{product.id}/inventory",
        json={"size": "M", "color": "Gris", "quantity": 4},
        headers=admin_headers
    )
    order = (await client.post("/api/orders", json={
        "items": [{"product_id": product.id, "size": "M", "color": "Gris", "quantity": 1}]
    })).json()
    assert order["items"][0]["inventory_id"] is not None

    response = await client.delete(f"/api/products/{product.id}", headers=admin_headers)
    assert response.status_code == 200

    detail = (await client.get(f"/api/orders/{order['id']}", headers=admin_headers)).json()
    item = detail["items"][0]
    assert item["product_id"] is None
    assert item["inventory_id"] is None
    assert item["product_name"] == "Overol"
