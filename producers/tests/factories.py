import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory
from producers.models import Producer


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "pass")


class ProducerFactory(DjangoModelFactory):
    class Meta:
        model = Producer

    user = factory.SubFactory(UserFactory)
    company_name = factory.Faker("company")
    tax_id_number = factory.Sequence(lambda n: f"TX{n:08d}")
    city = factory.Faker("city")
    is_verified = True
