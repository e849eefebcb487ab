from decimal import Decimal

import pytest
from listings.tests.factories import ProductFactory, ProductVariantFactory
from producers.tests.factories import UserFactory
from rest_framework.test import APIClient


@pytest.fixture
def client_user():
    user = UserFactory()
    client = APIClient()
    client.force_authenticate(user=user)
    return client, user


@pytest.mark.django_db
def test_cart_requires_authentication():
    assert APIClient().get("/api/v1/cart/").status_code == 401


@pytest.mark.django_db
def test_add_update_and_delete_items(client_user):
    client, _ = client_user
    variant = ProductVariantFactory(size="M", color="white", price=Decimal("450.00"), stock=5)

    added = client.post(
        "/api/v1/cart/items/",
        {"product_id": variant.product_id, "quantity": 2, "size": "M", "color": "white"},
        format="json",
    )
    assert added.status_code == 201
    assert added.data["variant_id"] == variant.id
    assert added.data["total_price"] == "900.00"

    item_id = added.data["id"]
    updated = client.patch(f"/api/v1/cart/items/{item_id}/", {"quantity": 3}, format="json")
    assert updated.status_code == 200
    assert updated.data["quantity"] == 3

    cart = client.get("/api/v1/cart/")
    assert cart.status_code == 200
    assert cart.data["item_count"] == 3
    assert cart.data["total_amount"] == "1350.00"

    assert client.delete(f"/api/v1/cart/items/{item_id}/").status_code == 204
    assert client.delete(f"/api/v1/cart/items/{item_id}/").status_code == 404


@pytest.mark.django_db
def test_error_codes_are_exposed(client_user):
    client, _ = client_user
    product = ProductFactory(available_quantity=1)

    too_many = client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 2}, format="json")
    assert too_many.status_code == 409
    assert too_many.data["code"] == "insufficient_stock"

    invalid = client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 0}, format="json")
    assert invalid.status_code == 400
    assert invalid.data["code"] == "invalid"

    missing = client.post("/api/v1/cart/items/", {"product_id": 999999, "quantity": 1}, format="json")
    assert missing.status_code == 404


@pytest.mark.django_db
def test_cannot_touch_another_buyers_line(client_user):
    client, _ = client_user
    other = APIClient()
    other.force_authenticate(user=UserFactory())
    added = other.post("/api/v1/cart/items/", {"product_id": ProductFactory().id, "quantity": 1}, format="json")

    resp = client.patch(f"/api/v1/cart/items/{added.data['id']}/", {"quantity": 2}, format="json")

    assert resp.status_code == 404


@pytest.mark.django_db
def test_clear_cart(client_user):
    client, _ = client_user
    client.post("/api/v1/cart/items/", {"product_id": ProductFactory().id, "quantity": 1}, format="json")

    resp = client.post("/api/v1/cart/clear/")

    assert resp.status_code == 200
    assert resp.data["items"] == []
    assert resp.data["total_amount"] == "0.00"
