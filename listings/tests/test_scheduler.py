from datetime import timedelta
from io import StringIO

import pytest
from common.choices import NotificationType
from django.core.management import call_command
from django.utils import timezone
from listings import scheduler
from listings.lifecycle import activate_listing
from listings.models import Product
from listings.scheduler import days_left, run_sweep
from listings.tests.factories import ProductFactory, ProductionListingFactory
from notifications.models import Notification


@pytest.mark.django_db
def test_sweep_deactivates_only_due_listings_and_notifies_owner():
    now = timezone.now()
    expired = ProductFactory(auto_deactivate_at=now - timedelta(minutes=1))
    fresh = ProductFactory()
    disabled = ProductionListingFactory(auto_deactivate_enabled=False, auto_deactivate_at=now - timedelta(days=1))

    result = run_sweep(now=now)

    assert result.deactivated == 1
    assert result.failed == 0
    expired.refresh_from_db()
    fresh.refresh_from_db()
    disabled.refresh_from_db()
    assert expired.is_active is False
    assert fresh.is_active is True
    assert disabled.is_active is True

    note = Notification.objects.get(user=expired.producer.user, type=NotificationType.LISTING_AUTO_DEACTIVATED)
    assert note.created_at == now
    assert note.data["listing_id"] == expired.id

    rerun = run_sweep(now=now)
    assert rerun.deactivated == 0
    assert Notification.objects.filter(type=NotificationType.LISTING_AUTO_DEACTIVATED).count() == 1


@pytest.mark.django_db
def test_reminders_are_deduplicated_within_a_day():
    now = timezone.now()
    listing = ProductionListingFactory(auto_deactivate_at=now + timedelta(days=2, hours=1))

    first = run_sweep(now=now, expire=False)
    assert first.reminded == 1
    note = Notification.objects.get(type=NotificationType.LISTING_DEACTIVATION_REMINDER)
    assert note.user_id == listing.producer.user_id
    assert note.data["days_left"] == 3

    second = run_sweep(now=now + timedelta(hours=1), expire=False)
    assert second.reminded == 0
    assert second.skipped == 1

    third = run_sweep(now=now + timedelta(hours=25), expire=False)
    assert third.reminded == 1
    assert Notification.objects.filter(type=NotificationType.LISTING_DEACTIVATION_REMINDER).count() == 2


@pytest.mark.django_db
def test_reminder_opt_out_is_respected():
    now = timezone.now()
    ProductFactory(auto_deactivate_at=now + timedelta(days=1), notify_auto_deactivate_reminder=False)

    result = run_sweep(now=now, expire=False)

    assert result.reminded == 0
    assert not Notification.objects.exists()


@pytest.mark.django_db
def test_one_failing_listing_does_not_stop_the_sweep(monkeypatch):
    now = timezone.now()
    bad = ProductFactory(auto_deactivate_at=now - timedelta(hours=1))
    good = ProductFactory(auto_deactivate_at=now - timedelta(hours=1))
    original = scheduler.expire_listing

    def flaky(listing, *, now):
        if listing.pk == bad.pk:
            raise RuntimeError("boom")
        return original(listing, now=now)

    monkeypatch.setattr(scheduler, "expire_listing", flaky)

    result = run_sweep(now=now, remind=False)

    assert result.failed == 1
    assert result.deactivated == 1
    good.refresh_from_db()
    bad.refresh_from_db()
    assert good.is_active is False
    assert bad.is_active is True


def test_days_left_rounds_up():
    now = timezone.now()
    assert days_left(now + timedelta(days=2, hours=1), now) == 3
    assert days_left(now + timedelta(days=1), now) == 1


@pytest.mark.django_db
def test_run_listing_lifecycle_command_reports_counts():
    ProductFactory(auto_deactivate_at=timezone.now() - timedelta(minutes=5))
    out = StringIO()

    call_command("run_listing_lifecycle", "--skip-reminders", stdout=out)

    assert "Listings deactivated: 1" in out.getvalue()


@pytest.mark.django_db
def test_expired_listing_is_not_switched_off_after_owner_bump():
    now = timezone.now()
    product = ProductFactory(auto_deactivate_at=now - timedelta(minutes=1))
    stale = Product.objects.get(pk=product.pk)

    activate_listing(listing=product, producer=product.producer, now=now)

    assert scheduler.expire_listing(stale, now=now) is False
    product.refresh_from_db()
    assert product.is_active is True
    assert product.auto_deactivate_at == now + timedelta(days=14)
    assert not Notification.objects.filter(type=NotificationType.LISTING_AUTO_DEACTIVATED).exists()


@pytest.mark.django_db
def test_five_runs_within_a_day_send_one_reminder():
    now = timezone.now()
    ProductFactory(auto_deactivate_at=now + timedelta(days=5))

    reminded = [run_sweep(now=now + timedelta(hours=4 * i), expire=False).reminded for i in range(5)]

    assert reminded == [1, 0, 0, 0, 0]
    assert Notification.objects.filter(type=NotificationType.LISTING_DEACTIVATION_REMINDER).count() == 1
