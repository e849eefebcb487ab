from datetime import timedelta
from decimal import Decimal

import pytest
from common.exceptions import ConflictError
from django.utils import timezone
from orders.idempotency import with_idempotency
from orders.models import IdempotencyKey
from producers.tests.factories import UserFactory


def _counting_handler(calls, body=None, code=201):
    def handler():
        calls.append(1)
        return body or {"count": len(calls)}, code

    return handler


@pytest.mark.django_db
def test_second_call_replays_stored_response_with_decimals():
    user = UserFactory()
    calls = []
    handler = _counting_handler(calls, body={"total": Decimal("12.50")})

    first = with_idempotency(key="k", user=user, path="/p", method="post", handler=handler, request_hash="h")
    second = with_idempotency(key="k", user=user, path="/p", method="POST", handler=handler, request_hash="h")

    assert len(calls) == 1
    assert first == ({"total": Decimal("12.50")}, 201)
    assert second == ({"total": "12.50"}, 201)


@pytest.mark.django_db
def test_expired_key_runs_the_handler_again():
    user = UserFactory()
    calls = []
    handler = _counting_handler(calls)
    with_idempotency(key="k", user=user, path="/p", method="POST", handler=handler)
    IdempotencyKey.objects.update(expires_at=timezone.now() - timedelta(minutes=1))

    body, code = with_idempotency(key="k", user=user, path="/p", method="POST", handler=handler)

    assert len(calls) == 2
    assert body == {"count": 2}
    assert IdempotencyKey.objects.get().expires_at > timezone.now()


@pytest.mark.django_db
def test_unfinished_key_reports_in_progress_and_failure_releases_it():
    user = UserFactory()
    IdempotencyKey.objects.create(
        key="busy", scope=f"user:{user.id}", path="/p", method="POST", expires_at=timezone.now() + timedelta(hours=1)
    )

    body, code = with_idempotency(key="busy", user=user, path="/p", method="POST", handler=lambda: ({}, 200))
    assert code == 409
    assert body["code"] == "in_progress"

    def failing():
        raise ConflictError("Your cart is empty.", code="cart_empty")

    with pytest.raises(ConflictError):
        with_idempotency(key="fresh", user=user, path="/p", method="POST", handler=failing)
    assert not IdempotencyKey.objects.filter(key="fresh").exists()
