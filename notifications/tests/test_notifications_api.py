import pytest
from notifications.models import Notification
from notifications.tests.factories import NotificationFactory
from producers.tests.factories import UserFactory
from rest_framework.test import APIClient


def _client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.mark.django_db
def test_requires_authentication():
    resp = APIClient().get("/api/v1/notifications/")
    assert resp.status_code == 401


@pytest.mark.django_db
def test_list_shows_only_own_notifications_and_filters_unread():
    user = UserFactory()
    NotificationFactory(user=user)
    NotificationFactory(user=user, is_read=True)
    NotificationFactory()
    client = _client(user)

    resp = client.get("/api/v1/notifications/")
    assert resp.status_code == 200
    assert resp.data["count"] == 2

    unread = client.get("/api/v1/notifications/", {"unread_only": "true"})
    assert unread.data["count"] == 1
    assert unread.data["results"][0]["is_read"] is False


@pytest.mark.django_db
def test_unread_count_and_mark_one_read():
    user = UserFactory()
    first = NotificationFactory(user=user)
    NotificationFactory(user=user)
    client = _client(user)

    assert client.get("/api/v1/notifications/unread-count/").data == {"unread_count": 2}

    resp = client.post(f"/api/v1/notifications/{first.id}/read/")
    assert resp.status_code == 200
    assert resp.data["is_read"] is True
    assert resp.data["read_at"] is not None

    again = client.post(f"/api/v1/notifications/{first.id}/read/")
    assert again.status_code == 200
    assert client.get("/api/v1/notifications/unread-count/").data == {"unread_count": 1}


@pytest.mark.django_db
def test_cannot_mark_someone_elses_notification():
    other = NotificationFactory()

    resp = _client(UserFactory()).post(f"/api/v1/notifications/{other.id}/read/")

    assert resp.status_code == 404
    other.refresh_from_db()
    assert other.is_read is False


@pytest.mark.django_db
def test_mark_all_read_returns_count_and_leaves_others_untouched():
    user = UserFactory()
    NotificationFactory.create_batch(3, user=user)
    NotificationFactory(user=user, is_read=True)
    foreign = NotificationFactory()

    resp = _client(user).post("/api/v1/notifications/read-all/")

    assert resp.status_code == 200
    assert resp.data == {"updated": 3}
    assert not Notification.objects.filter(user=user, is_read=False).exists()
    foreign.refresh_from_db()
    assert foreign.is_read is False
