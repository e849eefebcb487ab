import factory
from cart.models import Cart, CartItem
from factory.django import DjangoModelFactory
from listings.tests.factories import ProductFactory
from producers.tests.factories import UserFactory


class CartFactory(DjangoModelFactory):
    class Meta:
        model = Cart

    user = factory.SubFactory(UserFactory)


class CartItemFactory(DjangoModelFactory):
    class Meta:
        model = CartItem

    cart = factory.SubFactory(CartFactory)
    product = factory.SubFactory(ProductFactory)
    quantity = 1
    unit_price = factory.LazyAttribute(lambda o: o.product.price)
    total_price = factory.LazyAttribute(lambda o: o.unit_price * o.quantity)
