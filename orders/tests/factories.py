from decimal import Decimal

import factory
from factory.django import DjangoModelFactory
from listings.tests.factories import ProductFactory
from orders.models import Order, OrderItem
from producers.tests.factories import ProducerFactory, UserFactory


class OrderFactory(DjangoModelFactory):
    class Meta:
        model = Order

    order_number = factory.Sequence(lambda n: f"UX-T{n:07d}")
    buyer = factory.SubFactory(UserFactory)
    seller = factory.SubFactory(ProducerFactory)
    total_amount = Decimal("100.00")
    shipping_address = factory.LazyFunction(lambda: {"city": "Istanbul"})
    billing_address = factory.LazyFunction(lambda: {"city": "Istanbul"})


class OrderItemFactory(DjangoModelFactory):
    class Meta:
        model = OrderItem

    order = factory.SubFactory(OrderFactory)
    product = factory.SubFactory(ProductFactory, producer=factory.SelfAttribute("..order.seller"))
    product_name = factory.LazyAttribute(lambda o: o.product.name)
    quantity = 2
    unit_price = Decimal("50.00")
    total_price = Decimal("100.00")
