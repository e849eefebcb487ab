import pytest
from common.exceptions import PermissionDeniedError
from producers.selectors import get_producer_for_user, require_producer
from producers.tests.factories import ProducerFactory, UserFactory
from rest_framework.test import APIClient


@pytest.mark.django_db
def test_token_obtain_and_refresh():
    user = UserFactory(username="maker")
    client = APIClient()

    resp = client.post("/api/v1/auth/token/", {"username": "maker", "password": "pass"}, format="json")
    assert resp.status_code == 200
    assert {"access", "refresh"} <= set(resp.data)

    refreshed = client.post("/api/v1/auth/token/refresh/", {"refresh": resp.data["refresh"]}, format="json")
    assert refreshed.status_code == 200
    assert "access" in refreshed.data

    bad = client.post("/api/v1/auth/token/", {"username": user.username, "password": "wrong"}, format="json")
    assert bad.status_code == 401


@pytest.mark.django_db
def test_bearer_token_authenticates_api_calls():
    user = UserFactory(username="buyer")
    client = APIClient()
    token = client.post("/api/v1/auth/token/", {"username": "buyer", "password": "pass"}, format="json").data

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token['access']}")
    resp = client.get("/api/v1/notifications/unread-count/")

    assert resp.status_code == 200
    assert resp.data == {"unread_count": 0}
    assert user.notifications.count() == 0


@pytest.mark.django_db
def test_health_reports_database_ok():
    resp = APIClient().get("/health/")
    assert resp.status_code == 200
    assert resp.data == {"status": "ok", "database": "ok"}


@pytest.mark.django_db
def test_require_producer_rejects_plain_buyers():
    producer = ProducerFactory()
    buyer = UserFactory()

    assert get_producer_for_user(producer.user) == producer
    assert require_producer(producer.user) == producer
    assert get_producer_for_user(buyer) is None
    with pytest.raises(PermissionDeniedError):
        require_producer(buyer)
