import threading
from typing import List

import pytest
from common.exceptions import ConflictError
from django.db import close_old_connections, connection
from inventory.models import StockMovement
from inventory.services import decrement_stock
from listings.tests.factories import ProductVariantFactory


@pytest.mark.django_db(transaction=True)
@pytest.mark.skipif(connection.vendor == "sqlite", reason="SQLite serializes writers; needs a real database")
def test_two_buyers_racing_for_the_last_unit():
    variant = ProductVariantFactory(stock=1)
    product = variant.product
    results: List[str] = []
    barrier = threading.Barrier(2)

    def worker():
        close_old_connections()
        barrier.wait()
        try:
            decrement_stock(product=product, variant=variant, quantity=1)
            results.append("ok")
        except ConflictError:
            results.append("conflict")
        finally:
            close_old_connections()

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == ["conflict", "ok"]
    variant.refresh_from_db()
    assert variant.stock == 0
    assert StockMovement.objects.count() == 1
