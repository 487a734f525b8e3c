from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy import select

from storefront.models import Quote, QuoteStatus, User
from storefront.core.quote_expiry import expire_overdue_quotes


CUSTOMER_INFO = {
    "first_name": "Luis",
    "last_name": "Garcia",
    "email": "Compras@Constructora.mx",
    "company": "Constructora del Norte",
    "phone": "8112345678",
}


async def test_public_request_prices_from_catalog(client, session_factory, make_product):
    product = await make_product(name="Overol Kodiak", price="420.00")

    response = await client.post("/api/quotes/request", json={
        "products": [
            {"product_id": product.id, "quantity": 12, "size": "L", "color": "Azul"},
            {"product_id": 999999, "quantity": 3},
        ],
        "urgency": "urgent",
        "notes": "Bordado con logo",
        "customer_info": CUSTOMER_INFO,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Solicitud de presupuesto enviada exitosamente"

    quote = data["quote"]
    assert quote["quote_number"].startswith("COT-")
    assert quote["status"] == "draft"
    assert quote["tax"] == "0.00"
    assert quote["subtotal"] == "5040.00"
    assert quote["total"] == "5040.00"
    assert quote["valid_until"] is not None

    assert len(quote["items"]) == 1
    item = quote["items"][0]
    assert item["product_id"] == product.id
    assert item["quantity"] == 12
    assert item["size"] == "L"
    assert item["color"] == "Azul"
    assert item["unit_price"] == "420.00"

    async with session_factory() as session:
        result = await session.execute(select(User).where(User.email == "compras@constructora.mx"))
        guest = result.scalar_one()
        assert guest.hashed_password is None
        assert guest.company == "Constructora del Norte"
        assert quote["customer_id"] == guest.id


async def test_request_uses_session_customer(client, customer_user, customer_headers, make_product):
    product = await make_product()
    response = await client.post(
        "/api/quotes/request",
        json={"products": [{"product_id": product.id, "quantity": 2}]},
        headers=customer_headers
    )
    assert response.status_code == 201
    assert response.json()["quote"]["customer_id"] == customer_user.id

    mine = (await client.get("/api/quotes", headers=customer_headers)).json()
    assert len(mine) == 1


async def test_request_without_customer_or_products(client, make_product):
    product = await make_product()
    no_customer = await client.post("/api/quotes/request", json={
        "products": [{"product_id": product.id, "quantity": 1}],
    })
    assert no_customer.status_code == 400

    only_unknown = await client.post("/api/quotes/request", json={
        "products": [{"product_id": 999999, "quantity": 1}],
        "customer_info": CUSTOMER_INFO,
    })
    assert only_unknown.status_code == 400


async def test_admin_quote_with_explicit_prices(client, admin_headers, make_product):
    product = await make_product(name="Chaleco", price="200.00")

    response = await client.post("/api/quotes", json={
        "customer_name": "Taller Ramirez",
        "customer_email": "taller@example.com",
        "items": [
            {"product_id": product.id, "quantity": 5, "unit_price": "180.00"},
            {"product_name": "Bordado", "quantity": 5, "unit_price": "25.50"},
        ],
    }, headers=admin_headers)
    assert response.status_code == 201
    quote = response.json()

    # 900 + 127.50 = 1027.50, IVA 164.40
    assert quote["subtotal"] == "1027.50"
    assert quote["tax"] == "164.40"
    assert quote["total"] == "1191.90"
    assert quote["items"][0]["product_name"] == "Chaleco"


async def test_admin_quote_item_needs_price(client, admin_headers):
    response = await client.post("/api/quotes", json={
        "customer_email": "taller@example.com",
        "items": [{"product_name": "Bordado", "quantity": 1}],
    }, headers=admin_headers)
    assert response.status_code == 400


async def test_admin_quote_requires_admin(client, customer_headers):
    response = await client.post("/api/quotes", json={
        "items": [{"product_name": "Bordado", "quantity": 1, "unit_price": "10"}],
    }, headers=customer_headers)
    assert response.status_code == 403


async def test_quote_status_machine(client, admin_headers, make_product):
    product = await make_product()
    quote = (await client.post("/api/quotes/request", json={
        "products": [{"product_id": product.id, "quantity": 1}],
        "customer_info": CUSTOMER_INFO,
    })).json()["quote"]
    url = f"/api/quotes/{quote['id']}"

    assert (await client.put(url, json={"status": "accepted"}, headers=admin_headers)).status_code == 409

    sent = await client.put(url, json={"status": "sent", "tax": "24.00"}, headers=admin_headers)
    assert sent.status_code == 200
    assert sent.json()["status"] == "sent"
    assert sent.json()["total"] == "174.00"

    accepted = await client.put(url, json={"status": "accepted"}, headers=admin_headers)
    assert accepted.json()["status"] == "accepted"

    assert (await client.put(url, json={"status": "rejected"}, headers=admin_headers)).status_code == 409


async def test_quote_visibility(client, customer_headers, admin_headers, make_product):
    product = await make_product()
    quote = (await client.post("/api/quotes/request", json={
        "products": [{"product_id": product.id, "quantity": 1}],
        "customer_info": CUSTOMER_INFO,
    })).json()["quote"]

    assert (await client.get(f"/api/quotes/{quote['id']}", headers=customer_headers)).status_code == 403
    assert (await client.get("/api/quotes", headers=customer_headers)).json() == []
    assert len((await client.get("/api/quotes", headers=admin_headers)).json()) == 1
    assert (await client.get("/api/quotes/999999", headers=admin_headers)).status_code == 404


async def test_quote_pdf(client, admin_headers, make_product):
    product = await make_product()
    quote = (await client.post("/api/quotes/request", json={
        "products": [{"product_id": product.id, "quantity": 3, "notes": "Con reflejante"}],
        "customer_info": CUSTOMER_INFO,
    })).json()["quote"]

    response = await client.get(f"/api/quotes/{quote['id']}/pdf", headers=admin_headers)
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


async def test_expire_overdue_quotes(db):
    now = datetime(2026, 5, 1, 12, 0)
    rows = {
        "old_draft": Quote(quote_number="COT-2026-000001", status=QuoteStatus.DRAFT.value, valid_until=now - timedelta(days=1)),
        "old_sent": Quote(quote_number="COT-2026-000002", status=QuoteStatus.SENT.value, valid_until=now - timedelta(hours=1)),
        "old_accepted": Quote(quote_number="COT-2026-000003", status=QuoteStatus.ACCEPTED.value, valid_until=now - timedelta(days=3)),
        "current": Quote(quote_number="COT-2026-000004", status=QuoteStatus.SENT.value, valid_until=now + timedelta(days=2)),
    }
    for quote in rows.values():
        quote.subtotal = quote.tax = quote.total = Decimal("0")
        db.add(quote)
    await db.commit()

    assert await expire_overdue_quotes(db, now) == 2

    assert rows["old_draft"].status == "expired"
    assert rows["old_sent"].status == "expired"
    assert rows["old_accepted"].status == "accepted"
    assert rows["current"].status == "sent"

    assert await expire_overdue_quotes(db, now) == 0


async def test_request_with_registered_email_is_not_linked(client, customer_user, customer_headers, admin_user, make_product):
    product = await make_product()

    for email in (customer_user.email, admin_user.email):
        quote = (await client.post("/api/quotes/request", json={
            "products": [{"product_id": product.id, "quantity": 1}],
            "customer_info": dict(CUSTOMER_INFO, email=email.upper()),
        })).json()["quote"]
        assert quote["customer_id"] is None
        assert quote["customer_email"] == email
        assert quote["customer_name"] == "Luis Garcia"

    assert (await client.get("/api/quotes", headers=customer_headers)).json() == []


async def test_repeat_guest_requests_share_customer(client, make_product):
    product = await make_product()
    payload = {"products": [{"product_id": product.id, "quantity": 1}], "customer_info": CUSTOMER_INFO}

    first = (await client.post("/api/quotes/request", json=payload)).json()["quote"]
    second = (await client.post("/api/quotes/request", json=payload)).json()["quote"]
    assert first["customer_id"] is not None
    assert second["customer_id"] == first["customer_id"]


async def test_aware_dates_are_stored_as_utc(client, admin_headers, make_product):
    product = await make_product()
    quote = (await client.post("/api/quotes/request", json={
        "products": [{"product_id": product.id, "quantity": 1}],
        "preferred_delivery_date": "2026-11-15T12:00:00Z",
        "customer_info": CUSTOMER_INFO,
    })).json()["quote"]
    assert quote["preferred_delivery_date"] == "2026-11-15T12:00:00"

    response = await client.put(
        f"/api/quotes/{quote['id']}",
        json={"valid_until": "2099-12-01T06:00:00+06:00"},
        headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["valid_until"] == "2099-12-01T00:00:00"
    assert response.json()["is_expired"] is False


async def test_taken_quote_number_is_conflict(client, admin_headers, monkeypatch):
    payload = {"items": [{"product_name": "Bordado", "quantity": 1, "unit_price": "10"}]}
    first = (await client.post("/api/quotes", json=payload, headers=admin_headers)).json()

    async def same_number(session):
        return first["quote_number"]

    monkeypatch.setattr("storefront.api.quotes.unique_quote_number", same_number)
    response = await client.post("/api/quotes", json=payload, headers=admin_headers)
    assert response.status_code == 409
