from datetime import timedelta
from decimal import Decimal

import factory
from django.utils import timezone
from factory import Faker
from factory.django import DjangoModelFactory
from listings.models import (
    Product,
    ProductComment,
    ProductionListing,
    ProductionOffer,
    ProductVariant,
)
from producers.tests.factories import ProducerFactory, UserFactory


class ListingFactory(DjangoModelFactory):
    """Active listing with a running expiry window."""

    class Meta:
        abstract = True

    producer = factory.SubFactory(ProducerFactory)
    is_active = True
    auto_deactivate_enabled = True
    last_activated_at = factory.LazyFunction(timezone.now)
    auto_deactivate_at = factory.LazyAttribute(lambda o: o.last_activated_at + timedelta(days=14))


class ProductFactory(ListingFactory):
    class Meta:
        model = Product

    name = Faker("sentence", nb_words=3)
    description = Faker("paragraph")
    category = "Tekstil"
    price = Decimal("100.00")
    available_quantity = 10


class ProductVariantFactory(DjangoModelFactory):
    class Meta:
        model = ProductVariant

    product = factory.SubFactory(ProductFactory)
    size = "M"
    color = factory.Sequence(lambda n: f"color{n}")
    price = Decimal("120.00")
    stock = 5


class ProductionListingFactory(ListingFactory):
    class Meta:
        model = ProductionListing

    title = Faker("sentence", nb_words=3)
    description = Faker("paragraph")
    location = "Istanbul"
    salary_min = Decimal("1000.00")
    salary_max = Decimal("2000.00")


class ProductCommentFactory(DjangoModelFactory):
    class Meta:
        model = ProductComment

    listing = factory.SubFactory(ProductFactory)
    user = factory.SubFactory(UserFactory)
    text = Faker("sentence")
    rating = 4


class ProductionOfferFactory(DjangoModelFactory):
    class Meta:
        model = ProductionOffer

    listing = factory.SubFactory(ProductionListingFactory)
    user = factory.SubFactory(UserFactory)
    reference = factory.Sequence(lambda n: f"OFR-TEST-{n:06d}")
    price = Decimal("500.00")
    delivery_time = "2 weeks"
