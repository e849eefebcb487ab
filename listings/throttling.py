"""Throttles for the listings app.

Reads and writes are throttled under separate scopes, and rates are looked up
from Django settings at request time so override_settings applies in tests.
"""

from django.conf import settings
from rest_framework.permissions import SAFE_METHODS
from rest_framework.throttling import ScopedRateThrottle

READ_SCOPE = "listings"
WRITE_SCOPE = "listings_write"


class ListingsScopedRateThrottle(ScopedRateThrottle):
    def allow_request(self, request, view):
        view.throttle_scope = READ_SCOPE if request.method in SAFE_METHODS else WRITE_SCOPE
        return super().allow_request(request, view)

    def get_rate(self):
        rates = getattr(settings, "REST_FRAMEWORK", {}).get("DEFAULT_THROTTLE_RATES", {})
        return rates.get(self.scope)
