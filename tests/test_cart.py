from decimal import Decimal

import pytest

from storefront.services.cart import Cart, CartStore, item_key


def test_add_merges_same_variant():
    cart = Cart()
    cart.add_item(1, "Camisa", "150.00", quantity=1, size="M", color="Azul")
    cart.add_item(1, "Camisa", "150.00", quantity=2, size="M", color="Azul")
    cart.add_item(1, "Camisa", "150.00", quantity=1, size="L", color="Azul")

    assert len(cart.items) == 2
    assert cart.item_count == 4
    assert cart.subtotal == Decimal("600.00")


def test_update_quantity_to_zero_removes():
    cart = Cart()
    item = cart.add_item(2, "Pantalon", 300, size="32")
    cart.update_quantity(item.key, 0)
    assert cart.is_empty()


def test_add_rejects_non_positive_quantity():
    with pytest.raises(ValueError):
        Cart().add_item(1, "Camisa", 10, quantity=0)


def test_listeners_notified_and_unsubscribed():
    cart = Cart()
    seen = []
    unsubscribe = cart.subscribe(lambda c: seen.append(c.item_count))

    cart.add_item(1, "Camisa", 100)
    cart.clear()
    unsubscribe()
    cart.add_item(1, "Camisa", 100)

    assert seen == [1, 0]


def test_totals_apply_checkout_rules():
    cart = Cart()
    cart.add_item(1, "Camisa", "150.00", quantity=2)
    totals = cart.totals()
    assert totals.shipping == Decimal("50.00")
    assert totals.tax == Decimal("48.00")
    assert totals.total == Decimal("398.00")

    cart.add_item(3, "Chamarra", "250.00")
    assert cart.totals().shipping == Decimal("0.00")


def test_order_request_payload():
    cart = Cart()
    cart.add_item(1, "Camisa", "150", quantity=2, size="M", color="Azul", gender="unisex")
    payload = cart.to_order_request(customer_email="a@b.com")

    assert payload["customer_email"] == "a@b.com"
    assert payload["items"] == [{
        "product_id": 1,
        "size": "M",
        "color": "Azul",
        "gender": "unisex",
        "quantity": 2,
        "price": "150.00",
    }]


def test_quote_request_payload_uses_empty_strings():
    cart = Cart()
    cart.add_item(4, "Botas", 900)
    assert cart.to_quote_request(urgency="urgent")["products"] == [
        {"product_id": 4, "quantity": 1, "size": "", "color": ""}
    ]


def test_store_persists_after_each_action(tmp_path):
    store = CartStore(tmp_path / "cart.json")
    cart = store.load()
    store.attach(cart)
    cart.add_item(1, "Camisa", "150.00", quantity=3, size="M", color="Azul")

    restored = store.load()
    assert restored.item_count == 3
    assert restored.items[0].key == item_key(1, "M", "Azul")
    assert restored.items[0].price == Decimal("150.00")


def test_store_corrupt_file_gives_empty_cart(tmp_path):
    path = tmp_path / "cart.json"
    path.write_text("{not json", encoding="utf-8")
    assert CartStore(path).load().is_empty()
