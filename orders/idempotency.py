"""Replay protection for checkout and cancellation requests.

A client may send an ``Idempotency-Key`` header with ``POST /cart/checkout/``
or ``POST /orders/<id>/cancel/``. The first request with a key runs and its
response is stored on an `IdempotencyKey` row for ``IDEMPOTENCY_TTL_HOURS``;
retries with the same key and payload get that stored response, so a flaky
network never produces a second set of orders or a second restock.

Compared with a plain "store the response" guard this module also:

- releases the key when the handler raises (a failed checkout, for example
  insufficient stock, rolls back and may be retried with the same key),
- treats an expired key as unused, so the purge command is not needed for
  correctness,
- stores the response through ``DjangoJSONEncoder`` so Decimal totals and
  timestamps from order serializers survive the JSON column.
"""

import hashlib
import json
from datetime import timedelta
from typing import Callable, Optional, Tuple

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import IdempotencyKey

Result = Tuple[dict, int]

MISMATCH = {"detail": "Idempotency key reused with different request payload", "code": "idempotency_mismatch"}
IN_PROGRESS = {"detail": "Request in progress", "code": "in_progress"}


def _scope_for(user) -> str:
    user_id = getattr(user, "id", None)
    return f"user:{user_id}" if user_id else "anon"


def _claim(*, key: str, user, scope: str, path: str, method: str, request_hash: Optional[str]):
    """Insert the key row; return None when another request already holds it."""

    try:
        with transaction.atomic():
            return IdempotencyKey.objects.create(
                key=key,
                user=user if getattr(user, "id", None) else None,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + timedelta(hours=settings.IDEMPOTENCY_TTL_HOURS),
            )
    except IntegrityError:
        return None


def _replay(existing: IdempotencyKey, request_hash: Optional[str]) -> Result:
    if existing.request_hash and request_hash and existing.request_hash != request_hash:
        return MISMATCH, 409
    if existing.response_json is not None and existing.response_code is not None:
        return existing.response_json, int(existing.response_code)
    return IN_PROGRESS, 409


def with_idempotency(
    *,
    key: str,
    user,
    path: str,
    method: str,
    handler: Callable[[], Result],
    request_hash: Optional[str] = None,
) -> Result:
    """Run ``handler`` once per (key, caller, path, method) and replay its response.

    Returns 409 ``idempotency_mismatch`` when the key comes back with a
    different payload, and 409 ``in_progress`` while the first request has not
    finished yet.
    """

    scope = _scope_for(user)
    method = str(method).upper()
    path = str(path)
    lookup = {"key": key, "scope": scope, "path": path, "method": method}

    idem = _claim(user=user, request_hash=request_hash, **lookup)
    if idem is None:
        existing = IdempotencyKey.objects.get(**lookup)
        if existing.expires_at is None or existing.expires_at > timezone.now():
            return _replay(existing, request_hash)
        existing.delete()
        idem = _claim(user=user, request_hash=request_hash, **lookup)
        if idem is None:
            return IN_PROGRESS, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(pk=idem.pk).delete()
        raise

    stored = json.loads(json.dumps(body, cls=DjangoJSONEncoder))
    IdempotencyKey.objects.filter(pk=idem.pk).update(response_json=stored, response_code=code)
    return body, code


def compute_request_hash(data: Optional[dict]) -> Optional[str]:
    """SHA-256 of the canonical (sorted-key) JSON body, or None for an empty body."""

    if not data:
        return None
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
