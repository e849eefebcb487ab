import pytest
from listings.tests.factories import ProductFactory
from orders.models import IdempotencyKey, Order
from producers.tests.factories import UserFactory
from rest_framework.test import APIClient

ADDRESS = {"city": "Istanbul", "line1": "Bagdat Cd. 1"}


@pytest.mark.django_db
def test_checkout_is_idempotent_with_header():
    user = UserFactory()
    client = APIClient()
    client.force_authenticate(user=user)
    product = ProductFactory(available_quantity=5)

    assert client.post("/api/v1/cart/items/", {"product_id": product.id, "quantity": 2}, format="json").status_code == 201

    key = "abc-idem-123"
    r1 = client.post("/api/v1/cart/checkout/", {"shipping_address": ADDRESS}, format="json", HTTP_IDEMPOTENCY_KEY=key)
    assert r1.status_code == 201
    body1 = r1.json()
    assert body1["count"] == 1

    r2 = client.post("/api/v1/cart/checkout/", {"shipping_address": ADDRESS}, format="json", HTTP_IDEMPOTENCY_KEY=key)
    assert r2.status_code == 201
    assert r2.json() == body1

    assert Order.objects.filter(buyer=user).count() == 1
    product.refresh_from_db()
    assert product.available_quantity == 3

    idem = IdempotencyKey.objects.get(key=key, user=user, path="/api/v1/cart/checkout/", method="POST")
    assert idem.response_code == 201


@pytest.mark.django_db
def test_reused_key_with_different_payload_conflicts():
    user = UserFactory()
    client = APIClient()
    client.force_authenticate(user=user)
    client.post("/api/v1/cart/items/", {"product_id": ProductFactory().id, "quantity": 1}, format="json")

    key = "idem-mismatch"
    first = client.post("/api/v1/cart/checkout/", {"shipping_address": ADDRESS}, format="json", HTTP_IDEMPOTENCY_KEY=key)
    assert first.status_code == 201

    second = client.post(
        "/api/v1/cart/checkout/", {"shipping_address": {"city": "Ankara"}}, format="json", HTTP_IDEMPOTENCY_KEY=key
    )
    assert second.status_code == 409
    assert second.json()["code"] == "idempotency_mismatch"


@pytest.mark.django_db
def test_failed_checkout_releases_the_key():
    user = UserFactory()
    client = APIClient()
    client.force_authenticate(user=user)

    empty = client.post("/api/v1/cart/checkout/", {"shipping_address": ADDRESS}, format="json", HTTP_IDEMPOTENCY_KEY="k1")

    assert empty.status_code == 409
    assert empty.json()["code"] == "cart_empty"
    assert not IdempotencyKey.objects.filter(key="k1").exists()
