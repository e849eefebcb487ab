from decimal import Decimal

import pytest
from cart.models import Cart
from cart.services import add_item, clear_cart, remove_item, update_item_quantity
from common.exceptions import BusinessValidationError, ConflictError, NotFoundError, PermissionDeniedError
from listings.tests.factories import ProductFactory, ProductVariantFactory
from producers.tests.factories import UserFactory


@pytest.mark.django_db
def test_add_item_without_variants_uses_base_price_and_merges_lines():
    user = UserFactory()
    product = ProductFactory(price=Decimal("25.00"), available_quantity=5)

    add_item(user=user, product_id=product.id, quantity=2)
    item = add_item(user=user, product_id=product.id, quantity=1)

    assert item.quantity == 3
    assert item.unit_price == Decimal("25.00")
    assert item.total_price == Decimal("75.00")
    cart = Cart.objects.get(user=user)
    assert cart.items.count() == 1
    assert cart.item_count == 3
    assert cart.total_amount == Decimal("75.00")


@pytest.mark.django_db
def test_variant_products_need_a_matching_selector():
    user = UserFactory()
    variant = ProductVariantFactory(size="L", color="black", price=Decimal("60.00"), stock=4)

    with pytest.raises(BusinessValidationError) as missing:
        add_item(user=user, product_id=variant.product_id, quantity=1)
    assert missing.value.code == "variant_required"

    with pytest.raises(NotFoundError) as unknown:
        add_item(user=user, product_id=variant.product_id, quantity=1, size="S", color="black")
    assert unknown.value.code == "variant_not_found"

    item = add_item(user=user, product_id=variant.product_id, quantity=2, size="L", color="black")
    assert item.variant_id == variant.id
    assert item.total_price == Decimal("120.00")


@pytest.mark.django_db
def test_merged_quantity_is_checked_against_stock():
    user = UserFactory()
    product = ProductFactory(available_quantity=3)
    add_item(user=user, product_id=product.id, quantity=2)

    with pytest.raises(ConflictError) as exc:
        add_item(user=user, product_id=product.id, quantity=2)

    assert exc.value.code == "insufficient_stock"
    assert Cart.objects.get(user=user).item_count == 2


@pytest.mark.django_db
def test_cannot_add_own_or_inactive_products():
    own = ProductFactory()
    with pytest.raises(PermissionDeniedError):
        add_item(user=own.producer.user, product_id=own.id, quantity=1)

    inactive = ProductFactory(is_active=False)
    with pytest.raises(ConflictError) as exc:
        add_item(user=UserFactory(), product_id=inactive.id, quantity=1)
    assert exc.value.code == "listing_inactive"


@pytest.mark.django_db
def test_update_quantity_reprices_from_current_price():
    user = UserFactory()
    product = ProductFactory(price=Decimal("10.00"), available_quantity=10)
    item = add_item(user=user, product_id=product.id, quantity=1)
    product.price = Decimal("12.00")
    product.save(update_fields=["price"])

    item = update_item_quantity(user=user, item_id=item.id, quantity=4)

    assert item.unit_price == Decimal("12.00")
    assert item.total_price == Decimal("48.00")
    assert Cart.objects.get(user=user).total_amount == Decimal("48.00")


@pytest.mark.django_db
def test_remove_and_clear():
    user = UserFactory()
    first = add_item(user=user, product_id=ProductFactory().id, quantity=1)
    add_item(user=user, product_id=ProductFactory().id, quantity=1)

    remove_item(user=user, item_id=first.id)
    with pytest.raises(NotFoundError):
        remove_item(user=user, item_id=first.id)

    cart = clear_cart(user=user)
    assert cart.items.count() == 0
    assert cart.item_count == 0
    assert cart.total_amount == Decimal("0.00")
