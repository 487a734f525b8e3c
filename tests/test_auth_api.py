

REGISTRATION = {
    "first_name": "Maria",
    "last_name": "Hernandez",
    "email": "maria@fabrica.mx",
    "phone": "5512345678",
    "address": "Av. Industrial 120, Parque Norte",
    "city": "Monterrey",
    "state": "Nuevo Leon",
    "zip_code": "64000",
    "username": "mariah",
    "password": "segura123",
}


async def test_register_and_login(client):
    response = await client.post("/api/register/customer", json=REGISTRATION)
    assert response.status_code == 201
    data = response.json()
    assert data["user"]["role"] == "customer"
    assert data["user"]["has_password"] is True
    assert data["access_token"]

    by_username = await client.post("/api/auth/login", json={"username": "mariah", "password": "segura123"})
    assert by_username.status_code == 200
    by_email = await client.post("/api/auth/login", json={"username": "maria@fabrica.mx", "password": "segura123"})
    assert by_email.status_code == 200
    assert by_email.json()["user"]["email"] == "maria@fabrica.mx"


async def test_register_duplicate_email(client):
    assert (await client.post("/api/register/customer", json=REGISTRATION)).status_code == 201
    again = await client.post("/api/register/customer", json=dict(REGISTRATION, username="otra"))
    assert again.status_code == 400
    assert again.json()["detail"] == "El email ya está registrado"


async def test_register_cannot_take_over_guest_email(client, make_product):
    product = await make_product()
    await client.post("/api/quotes/request", json={
        "products": [{"product_id": product.id, "quantity": 1}],
        "customer_info": {"first_name": "Maria", "last_name": "Hernandez", "email": "maria@fabrica.mx", "company": "Secreta SA"},
    })

    response = await client.post("/api/register/customer", json=REGISTRATION)
    assert response.status_code == 400
    assert response.json()["detail"] == "El email ya está registrado"

    login = await client.post("/api/auth/login", json={"username": "maria@fabrica.mx", "password": "segura123"})
    assert login.status_code == 401


async def test_register_validation(client):
    response = await client.post("/api/register/customer", json=dict(REGISTRATION, phone="123"))
    assert response.status_code == 422


async def test_login_wrong_password(client, admin_user):
    response = await client.post("/api/auth/login", json={"username": "admin", "password": "incorrecta"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_login_inactive_account(client, db, customer_user):
    customer_user.is_active = False
    await db.commit()
    response = await client.post("/api/auth/login", json={"username": "cliente", "password": "secreto123"})
    assert response.status_code == 403


async def test_me_requires_token(client):
    assert (await client.get("/api/auth/me")).status_code == 401
    bad = await client.get("/api/auth/me", headers={"Authorization": "Bearer no-es-un-token"})
    assert bad.status_code == 401


async def test_me_and_profile_update(client, customer_headers):
    response = await client.get("/api/auth/me", headers=customer_headers)
    assert response.json()["email"] == "cliente@empresa.com"
    assert "no-store" in response.headers["cache-control"]

    updated = await client.put("/api/auth/me", json={"company": "Aceros SA", "password": "nueva1234"}, headers=customer_headers)
    assert updated.json()["company"] == "Aceros SA"

    login = await client.post("/api/auth/login", json={"username": "cliente", "password": "nueva1234"})
    assert login.status_code == 200


async def test_customers_admin(client, admin_user, admin_headers, customer_user, customer_headers):
    assert (await client.get("/api/customers", headers=customer_headers)).status_code == 403

    rows = (await client.get("/api/customers", params={"role": "customer"}, headers=admin_headers)).json()
    assert [r["email"] for r in rows] == ["cliente@empresa.com"]

    found = (await client.get("/api/customers", params={"search": "empresa"}, headers=admin_headers)).json()
    assert len(found) == 1

    response = await client.put(f"/api/customers/{customer_user.id}", json={"is_active": False}, headers=admin_headers)
    assert response.json()["is_active"] is False

    self_demote = await client.put(f"/api/customers/{admin_user.id}", json={"role": "customer"}, headers=admin_headers)
    assert self_demote.status_code == 400
