from django.urls import path

from .views import MarkAllReadView, MarkReadView, NotificationListView, UnreadCountView

urlpatterns = [
    path("", NotificationListView.as_view(), name="notifications-list"),
    path("unread-count/", UnreadCountView.as_view(), name="notifications-unread-count"),
    path("read-all/", MarkAllReadView.as_view(), name="notifications-read-all"),
    path("<int:notification_id>/read/", MarkReadView.as_view(), name="notifications-read"),
]
