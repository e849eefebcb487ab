import factory
from common.choices import NotificationType
from factory.django import DjangoModelFactory
from notifications.models import Notification
from producers.tests.factories import UserFactory


class NotificationFactory(DjangoModelFactory):
    class Meta:
        model = Notification

    user = factory.SubFactory(UserFactory)
    type = NotificationType.ORDER_STATUS_UPDATE
    title = "Order status updated"
    message = factory.Faker("sentence")
    data = factory.LazyFunction(dict)
