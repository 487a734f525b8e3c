import os

from storefront.models import SizeRange
from storefront.api.catalog import sizes_for_range


def test_sizes_for_range_rules():
    assert sizes_for_range(None) == ["S", "M", "L", "XL"]
    assert sizes_for_range(SizeRange(size_type="standard")) == ["XS", "S", "M", "L", "XL", "2XL", "3XL"]
    assert sizes_for_range(SizeRange(size_type="waist"))[:3] == ["28", "30", "32"]
    assert sizes_for_range(SizeRange(size_type="waist"))[-1] == "44"
    assert sizes_for_range(SizeRange(size_type="clothing")) == ["5", "7", "9", "11", "13", "15", "17", "19", "21"]
    assert sizes_for_range(SizeRange(size_type="waist", min_size=30, max_size=36)) == ["30", "32", "34", "36"]
    assert sizes_for_range(SizeRange(size_type="calzado", min_size=24, max_size=27)) == ["24", "25", "26", "27"]
    assert sizes_for_range(SizeRange(size_type="standard", size_list=["CH", "M", "G"])) == ["CH", "M", "G"]


async def test_available_sizes_endpoint(client, admin_headers):
    garment = await client.post("/api/garment-types", json={"name": "pantalon", "display_name": "Pantalon"}, headers=admin_headers)
    garment_id = garment.json()["id"]
    await client.post("/api/size-ranges", json={
        "garment_type_id": garment_id, "gender": "masculino", "size_type": "waist"
    }, headers=admin_headers)

    data = (await client.get("/api/size-ranges/available-sizes", params={"garment_type_id": garment_id, "gender": "masculino"})).json()
    assert data["size_type"] == "waist"
    assert data["sizes"][0] == "28"

    fallback = (await client.get("/api/size-ranges/available-sizes", params={"garment_type_id": garment_id, "gender": "femenino"})).json()
    assert fallback["sizes"] == ["S", "M", "L", "XL"]


async def test_brand_names_are_unique(client, admin_headers, brand):
    response = await client.post("/api/brands", json={"name": "Kodiak"}, headers=admin_headers)
    assert response.status_code == 400
    assert (await client.post("/api/brands", json={"name": "TREE"}, headers=admin_headers)).status_code == 201
    assert len((await client.get("/api/brands")).json()) == 2


async def test_contact_messages(client, admin_headers):
    response = await client.post("/api/contact-messages", json={
        "name": "Jorge",
        "email": "jorge@example.com",
        "message": "Necesito 50 camisas con logo bordado",
    })
    assert response.status_code == 201
    message_id = response.json()["contact_message"]["id"]

    short = await client.post("/api/contact-messages", json={"name": "Jo", "email": "jo@example.com", "message": "hola"})
    assert short.status_code == 422

    assert (await client.get("/api/contact-messages/unread-count", headers=admin_headers)).json() == {"count": 1}
    await client.patch(f"/api/contact-messages/{message_id}/read", headers=admin_headers)
    assert (await client.get("/api/contact-messages/unread-count", headers=admin_headers)).json() == {"count": 0}
    assert (await client.get("/api/contact-messages", params={"unread_only": True}, headers=admin_headers)).json() == []


async def test_industry_sections(client, admin_headers):
    created = await client.post("/api/industry-sections", json={
        "title": "Construccion", "industry": "construccion", "sort_order": 2
    }, headers=admin_headers)
    assert created.status_code == 201
    await client.post("/api/industry-sections", json={
        "title": "Mineria", "industry": "mineria", "sort_order": 1, "background_color": "#000000"
    }, headers=admin_headers)

    bad_color = await client.post("/api/industry-sections", json={
        "title": "Salud", "industry": "salud", "background_color": "rojo"
    }, headers=admin_headers)
    assert bad_color.status_code == 422

    titles = [s["title"] for s in (await client.get("/api/industry-sections")).json()]
    assert titles == ["Mineria", "Construccion"]

    section_id = created.json()["id"]
    await client.put(f"/api/industry-sections/{section_id}", json={"is_active": False}, headers=admin_headers)
    assert len((await client.get("/api/industry-sections")).json()) == 1
    assert len((await client.get("/api/industry-sections", params={"active_only": False})).json()) == 2


async def test_dashboard(client, admin_headers, customer_user, make_product):
    product = await make_product()
    await client.post("/api/orders", json={"items": [{"product_id": product.id, "quantity": 3}]})

    stats = (await client.get("/api/dashboard/stats", headers=admin_headers)).json()
    assert stats["new_orders"] == 1
    assert stats["active_products"] == 1
    assert stats["total_customers"] == 1
    assert stats["total_sales"] == "0.00"

    top = (await client.get("/api/dashboard/top-products")).json()
    assert top[0]["id"] == product.id
    assert top[0]["sales_count"] == 3
    assert top[0]["revenue"] == "450.00"


async def test_upload_flow(client, admin_headers):
    target = (await client.post("/api/objects/upload", params={"extension": "png"}, headers=admin_headers)).json()
    assert target["object_id"].endswith(".png")

    response = await client.put(f"/api/objects/upload/{target['object_id']}", content=b"\x89PNG datos", headers=admin_headers)
    assert response.status_code == 200
    assert os.path.exists(os.path.join(os.environ["UPLOADS_DIR"], target["object_id"]))

    empty = await client.put(f"/api/objects/upload/{target['object_id']}", content=b"", headers=admin_headers)
    assert empty.status_code == 400
    bad_id = await client.put("/api/objects/upload/no-es-valido", content=b"x", headers=admin_headers)
    assert bad_id.status_code == 400
    assert (await client.post("/api/objects/upload", params={"extension": "exe"}, headers=admin_headers)).status_code == 400


async def test_delete_category_detaches_products(client, admin_headers, make_product):
    category = (await client.post("/api/categories", json={"name": "Overoles"}, headers=admin_headers)).json()
    product = await make_product(category_id=category["id"])

    response = await client.delete(f"/api/categories/{category['id']}", headers=admin_headers)
    assert response.status_code == 200

    detail = (await client.get(f"/api/products/{product.id}")).json()
    assert detail["category_id"] is None
    assert (await client.get("/api/categories")).json() == []


async def test_upload_rejects_unlisted_extensions(client, admin_headers):
    object_id = "0123456789abcdef0123456789abcdef"
    html = await client.put(f"/api/objects/upload/{object_id}.html", content=b"<script></script>", headers=admin_headers)
    assert html.status_code == 400
    svg = await client.put(f"/api/objects/upload/{object_id}.svg", content=b"<svg/>", headers=admin_headers)
    assert svg.status_code == 400
    assert not os.path.exists(os.path.join(os.environ["UPLOADS_DIR"], f"{object_id}.html"))

    plain = await client.put(f"/api/objects/upload/{object_id}.jpg", content=b"jpeg", headers=admin_headers)
    assert plain.status_code == 200
