# tests/test_api.py
from decimal import Decimal

import pytest

from storefront.domain.schemas import ProductCreate

REGISTER = {
    "email": "shopper@example.com",
    "password": "correct-horse",
    "first_name": "Sam",
    "last_name": "Shopper",
}


def add_product(storage, name="Kettle", price="35.00"):
    return storage.create_product(
        ProductCreate(name=name, description="Something worth buying.", price=price)
    )


@pytest.fixture
def customer(client):
    resp = client.post("/api/auth/register", json=REGISTER)
    assert resp.status_code == 201
    return client


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "storage": "memory"}


# =====================================================
# AUTH
# =====================================================
def test_register_logs_in_and_hides_password(client, app_storage):
    resp = client.post("/api/auth/register", json=REGISTER)

    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == REGISTER["email"]
    assert body["role"] == "customer"
    assert "password" not in body

    stored = app_storage.get_user_by_email(REGISTER["email"])
    assert stored.password != REGISTER["password"]

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == body["id"]


def test_register_ignores_requested_role(client):
    resp = client.post("/api/auth/register", json={**REGISTER, "role": "admin"})

    assert resp.status_code == 201
    assert resp.json()["role"] == "customer"


def test_register_duplicate_email(customer):
    resp = customer.post("/api/auth/register", json=REGISTER)

    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "EMAIL_EXISTS"


def test_register_validation_error(client):
    resp = client.post("/api/auth/register", json={**REGISTER, "password": "short"})

    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation error"


def test_login_logout(customer):
    customer.post("/api/auth/logout")
    assert customer.get("/api/auth/me").status_code == 401

    bad = customer.post("/api/auth/login", json={"email": REGISTER["email"], "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json()["detail"]["code"] == "AUTH_FAILED"

    good = customer.post("/api/auth/login", json={"email": REGISTER["email"], "password": REGISTER["password"]})
    assert good.status_code == 200
    assert customer.get("/api/auth/me").status_code == 200


# =====================================================
# PRODUCTS
# =====================================================
def test_products_are_public(client, app_storage):
    products = [add_product(app_storage, name=f"Item {n}") for n in range(5)]

    resp = client.get("/api/products", params={"limit": 2, "offset": 1})

    assert resp.status_code == 200
    assert [p["id"] for p in resp.json()] == [products[1].id, products[2].id]

    one = client.get(f"/api/products/{products[0].id}")
    assert one.json()["price"] == "35.00"
    assert client.get("/api/products/999").status_code == 404


def test_product_mutations_need_login(client):
    resp = client.post("/api/products", json={"name": "Kettle", "description": "Boils water fast.", "price": "10"})

    assert resp.status_code == 401


def test_product_mutations_need_admin(customer):
    resp = customer.post("/api/products", json={"name": "Kettle", "description": "Boils water fast.", "price": "10"})

    assert resp.status_code == 403


def test_admin_manages_products(admin_client):
    created = admin_client.post(
        "/api/products",
        json={"name": "Kettle", "description": "Boils water fast.", "price": "10.50", "stock": 3},
    )
    assert created.status_code == 201
    product_id = created.json()["id"]

    updated = admin_client.put(f"/api/products/{product_id}", json={"price": "12.00"})
    assert updated.status_code == 200
    assert Decimal(updated.json()["price"]) == Decimal("12.00")
    assert updated.json()["stock"] == 3

    assert admin_client.put("/api/products/999", json={"stock": 1}).status_code == 404
    assert admin_client.delete(f"/api/products/{product_id}").status_code == 200
    assert admin_client.delete(f"/api/products/{product_id}").status_code == 404


def test_invalid_price_is_rejected(admin_client):
    resp = admin_client.post(
        "/api/products",
        json={"name": "Kettle", "description": "Boils water fast.", "price": "0"},
    )

    assert resp.status_code == 400


@pytest.mark.parametrize("body", [{"name": None}, {"price": None}, {"stock": None}])
def test_product_update_rejects_null(admin_client, app_storage, body):
    product = add_product(app_storage)

    resp = admin_client.put(f"/api/products/{product.id}", json=body)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Validation error"
    assert app_storage.get_product(product.id) == product


def test_product_update_can_clear_image_url(admin_client, app_storage):
    product = app_storage.create_product(
        ProductCreate(name="Kettle", description="Something worth buying.", price="35.00", image_url="/k.png")
    )

    resp = admin_client.put(f"/api/products/{product.id}", json={"image_url": None})

    assert resp.status_code == 200
    assert resp.json()["image_url"] is None


def test_sub_cent_price_is_rejected(admin_client):
    resp = admin_client.post(
        "/api/products",
        json={"name": "Kettle", "description": "Boils water fast.", "price": "0.001"},
    )

    assert resp.status_code == 400


# =====================================================
# CART
# =====================================================
def test_cart_requires_login(client):
    assert client.get("/api/cart").status_code == 401


def test_empty_cart_is_created_on_first_access(customer):
    first = customer.get("/api/cart").json()
    second = customer.get("/api/cart").json()

    assert first["cart"]["id"] == second["cart"]["id"]
    assert first["items"] == []
    assert Decimal(first["total"]) == 0


def test_add_to_cart_merges(customer, app_storage):
    product = add_product(app_storage, price="4.00")

    first = customer.post("/api/cart/items", json={"product_id": product.id, "quantity": 2})
    second = customer.post("/api/cart/items", json={"product_id": product.id, "quantity": 3})

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["quantity"] == 5

    cart = customer.get("/api/cart").json()
    assert len(cart["items"]) == 1
    assert Decimal(cart["total"]) == Decimal("20.00")


def test_add_unknown_product_to_cart(customer):
    resp = customer.post("/api/cart/items", json={"product_id": 999, "quantity": 1})

    assert resp.status_code == 404


def test_update_and_remove_cart_item(customer, app_storage):
    product = add_product(app_storage)
    item = customer.post("/api/cart/items", json={"product_id": product.id}).json()
    assert item["quantity"] == 1

    updated = customer.put(f"/api/cart/items/{item['id']}", json={"quantity": 4})
    assert updated.json()["quantity"] == 4

    removed = customer.put(f"/api/cart/items/{item['id']}", json={"quantity": 0})
    assert removed.json() == {"message": "Item removed from cart"}
    assert customer.delete(f"/api/cart/items/{item['id']}").status_code == 404


def test_negative_quantity_is_rejected(customer, app_storage):
    product = add_product(app_storage)
    item = customer.post("/api/cart/items", json={"product_id": product.id}).json()

    resp = customer.put(f"/api/cart/items/{item['id']}", json={"quantity": -1})

    assert resp.status_code == 400


# =====================================================
# ORDERS
# =====================================================
CHECKOUT = {
    "shipping_address": "10 Downing Street",
    "billing_address": "10 Downing Street",
    "payment_method": "card",
}


def test_checkout_flow(customer, app_storage):
    product = add_product(app_storage, name="Teapot", price="15.00")
    customer.post("/api/cart/items", json={"product_id": product.id, "quantity": 2})

    resp = customer.post("/api/orders", json={**CHECKOUT, "is_paid": True})

    assert resp.status_code == 201
    order = resp.json()
    assert Decimal(order["total"]) == Decimal("30.00")
    assert order["status"] == "pending"
    assert order["paid_at"] is not None
    assert [(i["name"], i["quantity"]) for i in order["items"]] == [("Teapot", 2)]

    listed = customer.get("/api/orders").json()
    assert [o["id"] for o in listed] == [order["id"]]
    assert customer.get(f"/api/orders/{order['id']}").status_code == 200


def test_checkout_with_empty_cart(customer):
    resp = customer.post("/api/orders", json=CHECKOUT)

    assert resp.status_code == 400


def test_order_status_is_admin_only(customer, app_storage):
    product = add_product(app_storage)
    order = customer.post(
        "/api/orders", json={**CHECKOUT, "items": [{"product_id": product.id, "quantity": 1}]}
    ).json()

    resp = customer.patch(f"/api/orders/{order['id']}/status", json={"status": "shipped"})

    assert resp.status_code == 403


def test_admin_updates_order_status(admin_client, app_storage):
    product = add_product(app_storage)
    order = admin_client.post(
        "/api/orders", json={**CHECKOUT, "items": [{"product_id": product.id, "quantity": 1}]}
    ).json()

    resp = admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "shipped"})

    assert resp.status_code == 200
    assert resp.json()["status"] == "shipped"
    assert admin_client.patch("/api/orders/999/status", json={"status": "shipped"}).status_code == 404
    assert admin_client.patch(f"/api/orders/{order['id']}/status", json={"status": "lost"}).status_code == 400


@pytest.mark.parametrize("path", ["/api/products", "/api/cart", "/api/orders"])
def test_collection_paths_are_served_without_redirect(customer, path):
    resp = customer.get(path, follow_redirects=False)

    assert resp.status_code == 200
