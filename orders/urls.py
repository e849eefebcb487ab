"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import (
    OrderCancelView,
    OrderDetailView,
    OrderListView,
    OrderPaymentStatusView,
    OrderStatusView,
    SalesListView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("sales/", SalesListView.as_view(), name="sales-list"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/status/", OrderStatusView.as_view(), name="order-status"),
    path("<int:order_id>/payment-status/", OrderPaymentStatusView.as_view(), name="order-payment-status"),
    path("<int:order_id>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
]
