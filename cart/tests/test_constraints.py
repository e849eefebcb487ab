import pytest
from cart.tests.factories import CartFactory, CartItemFactory
from django.db import IntegrityError


@pytest.mark.django_db
def test_one_line_per_product_selector():
    item = CartItemFactory(size="M", color="red")

    with pytest.raises(IntegrityError):
        CartItemFactory(cart=item.cart, product=item.product, size="M", color="red")


@pytest.mark.django_db
def test_quantity_positive_constraint():
    with pytest.raises(IntegrityError):
        CartItemFactory(cart=CartFactory(), quantity=0)
